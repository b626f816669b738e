"""Gateway bootstrap: settings, logging, client and tool registry."""
