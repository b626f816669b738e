"""Relay gateway bootstrap.

Usage:
    python -m apps.gateway.main --list-tools
    python -m apps.gateway.main --call get_workflow --args '{"workflowId": "123"}'
    python -m apps.gateway.main --schema create_workflow
"""

import argparse
import asyncio
import json
import os
import sys

from relay_config.settings import Settings
from relay_obs.logging import get_logger, setup_logging
from relay_tools.adapters.n8n import ClientConfig, N8nClient, register_n8n_tools
from relay_tools.base import describe_tool
from relay_tools.registry import ToolRegistry

logger = get_logger("gateway")


def load_settings() -> Settings:
    """Load settings from the env file named by DOTENV_CONFIG_PATH, or .env."""
    return Settings(_env_file=os.getenv("DOTENV_CONFIG_PATH", ".env"))


def create_client(settings: Settings) -> N8nClient:
    """Build the n8n client, warning when no API key is configured."""
    if not settings.N8N_API_KEY:
        logger.warning("n8n_api_key_missing", detail="N8N_API_KEY not set - API calls will fail")

    return N8nClient(
        ClientConfig.from_settings(settings),
        logger=get_logger("n8n.client"),
    )


def create_registry(client: N8nClient) -> ToolRegistry:
    registry = ToolRegistry()
    register_n8n_tools(registry, client)
    return registry


async def call_tool(registry: ToolRegistry, name: str, arguments: dict, dry_run: bool = False) -> dict:
    """Run one tool and return its result dict."""
    tool = registry.get(name)
    if tool is None:
        return {
            "content": [{"type": "text", "text": f"Error: unknown tool {name}"}],
            "isError": True,
        }
    return await tool.execute({"dry_run": dry_run}, arguments)


async def _run(args: argparse.Namespace, settings: Settings) -> int:
    async with create_client(settings) as client:
        registry = create_registry(client)

        if args.list_tools:
            for name in registry.names():
                print(f"{name}\t{registry.get(name).description}")
            return 0

        if args.schema:
            tool = registry.get(args.schema)
            if tool is None:
                print(f"Unknown tool: {args.schema}", file=sys.stderr)
                return 2
            print(json.dumps(describe_tool(tool), indent=2))
            return 0

        try:
            arguments = json.loads(args.args) if args.args else {}
        except json.JSONDecodeError as e:
            print(f"Invalid --args JSON: {e}", file=sys.stderr)
            return 2

        result = await call_tool(registry, args.call, arguments, dry_run=args.dry_run)
        print(json.dumps(result, indent=2))
        return 1 if result.get("isError") else 0


def main(argv: list[str] | None = None) -> int:
    """Run the gateway command line."""
    parser = argparse.ArgumentParser(description="n8n relay gateway")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--list-tools", action="store_true", help="Print registered tool names")
    group.add_argument("--call", metavar="NAME", help="Tool to invoke")
    group.add_argument("--schema", metavar="NAME", help="Print a tool's input schema")
    parser.add_argument("--args", default="", help="Tool arguments as JSON")
    parser.add_argument("--dry-run", action="store_true", help="Describe the call without sending it")
    args = parser.parse_args(argv)

    settings = load_settings()
    setup_logging(settings, stream=sys.stderr)
    logger.info("gateway_starting", n8n_url=settings.N8N_API_URL, environment=settings.ENVIRONMENT)

    return asyncio.run(_run(args, settings))


if __name__ == "__main__":
    sys.exit(main())
