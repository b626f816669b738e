"""n8n adapter.

Resilient request pipeline for the n8n REST API plus the tools built on it.

Usage:
    from relay_tools.registry import ToolRegistry
    from relay_tools.adapters.n8n import ClientConfig, N8nClient, register_n8n_tools

    client = N8nClient(ClientConfig(base_url="http://localhost:5678/api/v1", api_key="..."))
    registry = ToolRegistry()
    register_n8n_tools(registry, client)
"""

from .client import N8nClient
from .config import BackoffStrategy, ClientConfig
from .exceptions import (
    N8nApiError,
    N8nConnectionError,
    N8nDecodeError,
    N8nError,
    N8nTimeoutError,
)
from .policy import Decision, DecisionKind, classify, retry_delay
from .request import RequestSpec, basic_auth_header, build_query, encode_segment
from .schemas import ToolResult, WebhookAuth
from .tools import N8N_TOOLS, N8nTool, register_n8n_tools

__all__ = [
    # Client
    "N8nClient",
    "ClientConfig",
    "BackoffStrategy",
    # Exceptions
    "N8nError",
    "N8nApiError",
    "N8nDecodeError",
    "N8nTimeoutError",
    "N8nConnectionError",
    # Pipeline
    "RequestSpec",
    "Decision",
    "DecisionKind",
    "classify",
    "retry_delay",
    "basic_auth_header",
    "build_query",
    "encode_segment",
    # Schemas
    "ToolResult",
    "WebhookAuth",
    # Tools
    "N8nTool",
    "N8N_TOOLS",
    "register_n8n_tools",
]
