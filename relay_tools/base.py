"""Tool Interface & Metadata.

Tools are what the protocol gateway calls. Each one declares a pydantic
input model; the gateway publishes its JSON schema and passes raw
arguments to `execute`.
"""

from typing import Any, Literal, Protocol

from pydantic import BaseModel

RiskLevel = Literal["low", "medium", "high"]


class ToolMetadata(BaseModel):
    """Tool capability metadata."""

    requires_approval: bool = False
    dry_run_supported: bool = False
    idempotent: bool = False
    capabilities: list[str] = []
    risk_level: RiskLevel = "low"


class Tool(Protocol):
    """Tool interface."""

    name: str
    description: str
    metadata: ToolMetadata
    input_model: type[BaseModel]

    async def execute(self, ctx: dict, input_data: dict[str, Any]) -> dict[str, Any]:
        """Execute tool action; failures come back as results with isError set."""
        ...


def describe_tool(tool: Tool) -> dict[str, Any]:
    """Name, description and JSON input schema of a tool."""
    return {
        "name": tool.name,
        "description": tool.description,
        "inputSchema": tool.input_model.model_json_schema(by_alias=True),
    }
