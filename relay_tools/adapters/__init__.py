"""Tool Adapters.

Available adapters:
- n8n: workflow automation REST API and webhooks
"""

__all__ = ["n8n"]
