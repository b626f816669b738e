"""n8n adapter Pydantic schemas.

Input schemas for the n8n tools and the shared tool result envelope.
Payloads returned by n8n are passed through as decoded JSON and are not
modelled here.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

ExecutionStatus = Literal["success", "error", "running", "waiting", "crashed"]


class WebhookAuth(BaseModel):
    """Basic-auth credentials for a protected webhook."""

    username: str
    password: str


# ============================================================================
# TOOL RESULT
# ============================================================================


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ToolResult(BaseModel):
    """Result handed back to the protocol gateway."""

    model_config = ConfigDict(populate_by_name=True)

    content: list[TextContent]
    is_error: bool = Field(default=False, alias="isError")

    @classmethod
    def text(cls, text: str, is_error: bool = False) -> "ToolResult":
        return cls(content=[TextContent(text=text)], is_error=is_error)

    def dump(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


# ============================================================================
# WORKFLOW TOOL SCHEMAS
# ============================================================================


class ListWorkflowsInput(BaseModel):
    active: bool | None = Field(None, description="Filter by active status (true/false)")
    tags: str | None = Field(None, description="Comma-separated tag names to filter by")
    cursor: str | None = Field(None, description="Pagination cursor from a previous page")
    limit: int = Field(50, ge=1, le=100, description="Maximum results to return")


class WorkflowIdInput(BaseModel):
    workflow_id: str = Field(..., min_length=1, alias="workflowId", description="Workflow ID")

    model_config = ConfigDict(populate_by_name=True)


class CreateWorkflowInput(BaseModel):
    """Workflow definition; n8n creates new workflows inactive."""

    name: str = Field(..., min_length=1, description="Name for the new workflow")
    nodes: list[dict[str, Any]] = Field(..., min_length=1, description="Node definitions")
    connections: dict[str, Any] = Field(default_factory=dict, description="Connection mappings")
    settings: dict[str, Any] = Field(
        default_factory=lambda: {"executionOrder": "v1"},
        description="Workflow settings",
    )


class UpdateWorkflowInput(WorkflowIdInput):
    name: str | None = None
    nodes: list[dict[str, Any]] | None = None
    connections: dict[str, Any] | None = None
    settings: dict[str, Any] | None = None


class RunWorkflowInput(WorkflowIdInput):
    input_data: dict[str, Any] = Field(default_factory=dict, alias="inputData")


# ============================================================================
# EXECUTION TOOL SCHEMAS
# ============================================================================


class ListExecutionsInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    workflow_id: str | None = Field(None, alias="workflowId")
    status: ExecutionStatus | None = None
    cursor: str | None = None
    limit: int = Field(20, ge=1, le=100)
    include_data: bool | None = Field(None, alias="includeData")


class ExecutionIdInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    execution_id: str = Field(..., min_length=1, alias="executionId")
    include_data: bool | None = Field(None, alias="includeData")


class RetryExecutionInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    execution_id: str = Field(..., min_length=1, alias="executionId")
    load_workflow: bool = Field(False, alias="loadWorkflow", description="Use the latest workflow version")


# ============================================================================
# WEBHOOK / TAG / CREDENTIAL / AUDIT SCHEMAS
# ============================================================================


class ExecuteWebhookInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    webhook_path: str = Field(..., min_length=1, alias="webhookPath")
    data: dict[str, Any] = Field(default_factory=dict)
    auth: WebhookAuth | None = None


class CreateTagInput(BaseModel):
    name: str = Field(..., min_length=1)


class CredentialSchemaInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    credential_type: str = Field(..., min_length=1, alias="credentialType")


class RunAuditInput(BaseModel):
    categories: list[Literal["credentials", "database", "nodes", "filesystem", "instance"]] | None = None


class EmptyInput(BaseModel):
    pass
