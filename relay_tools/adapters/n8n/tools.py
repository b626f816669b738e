"""n8n tools.

One tool per client operation. Tools validate input, call the client and
turn typed client errors into `isError` results with a clean message; the
full error detail goes to the log.
"""

import json
from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, ValidationError

from relay_obs.logging import get_logger
from relay_tools.base import ToolMetadata

from .client import N8nClient
from .exceptions import N8nApiError, N8nError, N8nTimeoutError
from .schemas import (
    CreateTagInput,
    CreateWorkflowInput,
    CredentialSchemaInput,
    EmptyInput,
    ExecuteWebhookInput,
    ExecutionIdInput,
    ListExecutionsInput,
    ListWorkflowsInput,
    RetryExecutionInput,
    RunAuditInput,
    RunWorkflowInput,
    ToolResult,
    UpdateWorkflowInput,
    WorkflowIdInput,
)

logger = get_logger(__name__)

READ = ToolMetadata(
    dry_run_supported=True,
    idempotent=True,
    capabilities=["n8n.read"],
    risk_level="low",
)
WRITE = ToolMetadata(
    dry_run_supported=True,
    idempotent=False,
    capabilities=["n8n.write"],
    risk_level="medium",
)
DESTRUCTIVE = ToolMetadata(
    requires_approval=True,
    dry_run_supported=True,
    idempotent=False,
    capabilities=["n8n.write", "n8n.delete"],
    risk_level="high",
)


def page(result: Any) -> Any:
    """Unwrap a paginated response, keeping the cursor when more pages exist."""
    if not isinstance(result, dict) or "data" not in result:
        return result
    if result.get("nextCursor"):
        return {"data": result["data"], "nextCursor": result["nextCursor"]}
    return result["data"]


def format_error(error: N8nError) -> str:
    """User-facing text for a client error."""
    if isinstance(error, N8nTimeoutError):
        return f"Error: {error.message} - try again later"
    if isinstance(error, N8nApiError):
        return f"Error: {error.message} (HTTP {error.status_code})"
    return f"Error: {error.message}"


class N8nTool(ABC):
    """Base class for tools backed by `N8nClient`."""

    name: str = ""
    description: str = ""
    input_model: type[BaseModel] = EmptyInput
    metadata: ToolMetadata = READ

    def __init__(self, client: N8nClient):
        self.client = client

    @abstractmethod
    async def _call(self, params: Any) -> Any:
        """Call the client with validated params and return the payload."""

    def _describe(self, params: BaseModel) -> dict[str, Any]:
        """Arguments shown in a dry run."""
        return params.model_dump(exclude_none=True)

    def _render(self, payload: Any) -> str:
        return json.dumps(payload, indent=2)

    async def execute(self, ctx: dict, input_data: dict[str, Any]) -> dict[str, Any]:
        """Execute tool.

        Args:
            ctx: Execution context (dry_run, actor, trace_id)
            input_data: Tool arguments

        Returns:
            ToolResult as a dict with `content` and `isError`
        """
        try:
            params = self.input_model.model_validate(input_data)
        except ValidationError as e:
            return ToolResult.text(f"Input validation failed: {e}", is_error=True).dump()

        if ctx.get("dry_run", False):
            args = self._describe(params)
            return ToolResult.text(f"Would call n8n tool {self.name} with {json.dumps(args)}").dump()

        try:
            payload = await self._call(params)
        except N8nError as e:
            logger.error(
                "n8n_tool_failed",
                tool=self.name,
                error_type=type(e).__name__,
                endpoint=e.endpoint,
                status=getattr(e, "status_code", None),
                error=repr(e),
                trace_id=ctx.get("trace_id"),
            )
            return ToolResult.text(format_error(e), is_error=True).dump()

        return ToolResult.text(self._render(payload)).dump()


# ============================================================================
# WORKFLOWS
# ============================================================================


class ListWorkflowsTool(N8nTool):
    name = "list_workflows"
    description = "Retrieve workflows from n8n. Optionally filter by active status or tags."
    input_model = ListWorkflowsInput

    async def _call(self, params: ListWorkflowsInput) -> Any:
        result = await self.client.list_workflows(
            active=params.active, tags=params.tags, cursor=params.cursor, limit=params.limit
        )
        return page(result)


class GetWorkflowTool(N8nTool):
    name = "get_workflow"
    description = "Retrieve a workflow including nodes, connections, and settings."
    input_model = WorkflowIdInput

    async def _call(self, params: WorkflowIdInput) -> Any:
        return await self.client.get_workflow(params.workflow_id)


class CreateWorkflowTool(N8nTool):
    name = "create_workflow"
    description = "Create a new workflow in n8n. The workflow is created in INACTIVE state."
    input_model = CreateWorkflowInput
    metadata = WRITE

    async def _call(self, params: CreateWorkflowInput) -> Any:
        nodes = []
        for idx, node in enumerate(params.nodes):
            nodes.append(
                {
                    "parameters": {},
                    "typeVersion": 1,
                    **node,
                    "id": node.get("id") or f"node-{idx}",
                }
            )
        return await self.client.create_workflow(
            {
                "name": params.name,
                "nodes": nodes,
                "connections": params.connections,
                "settings": params.settings,
            }
        )


class UpdateWorkflowTool(N8nTool):
    name = "update_workflow"
    description = "Update an existing workflow. Only supplied fields are sent."
    input_model = UpdateWorkflowInput
    metadata = WRITE

    async def _call(self, params: UpdateWorkflowInput) -> Any:
        updates = params.model_dump(exclude={"workflow_id"}, exclude_none=True)
        return await self.client.update_workflow(params.workflow_id, updates)


class DeleteWorkflowTool(N8nTool):
    name = "delete_workflow"
    description = "Permanently delete a workflow."
    input_model = WorkflowIdInput
    metadata = DESTRUCTIVE

    async def _call(self, params: WorkflowIdInput) -> Any:
        await self.client.delete_workflow(params.workflow_id)
        return {"deleted": True, "workflowId": params.workflow_id}


class ActivateWorkflowTool(N8nTool):
    name = "activate_workflow"
    description = "Activate a workflow so its triggers start listening."
    input_model = WorkflowIdInput
    metadata = WRITE

    async def _call(self, params: WorkflowIdInput) -> Any:
        return await self.client.activate_workflow(params.workflow_id)


class DeactivateWorkflowTool(N8nTool):
    name = "deactivate_workflow"
    description = "Deactivate a workflow."
    input_model = WorkflowIdInput
    metadata = WRITE

    async def _call(self, params: WorkflowIdInput) -> Any:
        return await self.client.deactivate_workflow(params.workflow_id)


class RunWorkflowTool(N8nTool):
    name = "run_workflow"
    description = "Start a workflow run with optional input data."
    input_model = RunWorkflowInput
    metadata = WRITE

    async def _call(self, params: RunWorkflowInput) -> Any:
        return await self.client.run_workflow(params.workflow_id, params.input_data)


# ============================================================================
# EXECUTIONS
# ============================================================================


class ListExecutionsTool(N8nTool):
    name = "list_executions"
    description = "List workflow executions, optionally filtered by workflow or status."
    input_model = ListExecutionsInput

    async def _call(self, params: ListExecutionsInput) -> Any:
        result = await self.client.list_executions(
            workflow_id=params.workflow_id,
            status=params.status,
            cursor=params.cursor,
            limit=params.limit,
            include_data=params.include_data,
        )
        return page(result)


class GetExecutionTool(N8nTool):
    name = "get_execution"
    description = "Get details of a workflow execution."
    input_model = ExecutionIdInput

    async def _call(self, params: ExecutionIdInput) -> Any:
        return await self.client.get_execution(params.execution_id, include_data=params.include_data)


class DeleteExecutionTool(N8nTool):
    name = "delete_execution"
    description = "Delete an execution record."
    input_model = ExecutionIdInput
    metadata = DESTRUCTIVE

    async def _call(self, params: ExecutionIdInput) -> Any:
        await self.client.delete_execution(params.execution_id)
        return {"deleted": True, "executionId": params.execution_id}


class RetryExecutionTool(N8nTool):
    name = "retry_execution"
    description = "Retry a failed execution."
    input_model = RetryExecutionInput
    metadata = WRITE

    async def _call(self, params: RetryExecutionInput) -> Any:
        return await self.client.retry_execution(params.execution_id, params.load_workflow)


# ============================================================================
# WEBHOOKS, TAGS, CREDENTIALS, VARIABLES, AUDIT
# ============================================================================


class ExecuteWebhookTool(N8nTool):
    name = "execute_webhook"
    description = "Trigger a workflow through its webhook path with a JSON payload."
    input_model = ExecuteWebhookInput
    metadata = WRITE

    async def _call(self, params: ExecuteWebhookInput) -> Any:
        return await self.client.execute_webhook(params.webhook_path, params.data, params.auth)

    def _describe(self, params: ExecuteWebhookInput) -> dict[str, Any]:
        args = super()._describe(params)
        if "auth" in args:
            args["auth"]["password"] = "***"
        return args

    def _render(self, payload: Any) -> str:
        if payload is None:
            return "Webhook executed (no response body)"
        return super()._render(payload)


class ListTagsTool(N8nTool):
    name = "list_tags"
    description = "List all workflow tags."

    async def _call(self, params: EmptyInput) -> Any:
        return await self.client.list_tags()


class CreateTagTool(N8nTool):
    name = "create_tag"
    description = "Create a workflow tag."
    input_model = CreateTagInput
    metadata = WRITE

    async def _call(self, params: CreateTagInput) -> Any:
        return await self.client.create_tag(params.name)


class ListCredentialsTool(N8nTool):
    name = "list_credentials"
    description = "List stored credentials (names and types only, never secrets)."

    async def _call(self, params: EmptyInput) -> Any:
        return await self.client.list_credentials()


class GetCredentialSchemaTool(N8nTool):
    name = "get_credential_schema"
    description = "Get the field schema for a credential type."
    input_model = CredentialSchemaInput

    async def _call(self, params: CredentialSchemaInput) -> Any:
        return await self.client.get_credential_schema(params.credential_type)


class ListVariablesTool(N8nTool):
    name = "list_variables"
    description = "List instance variables."

    async def _call(self, params: EmptyInput) -> Any:
        return await self.client.list_variables()


class RunAuditTool(N8nTool):
    name = "run_audit"
    description = "Run a security audit on the n8n instance."
    input_model = RunAuditInput

    async def _call(self, params: RunAuditInput) -> Any:
        return await self.client.run_audit(params.categories)


N8N_TOOLS: list[type[N8nTool]] = [
    ListWorkflowsTool,
    GetWorkflowTool,
    CreateWorkflowTool,
    UpdateWorkflowTool,
    DeleteWorkflowTool,
    ActivateWorkflowTool,
    DeactivateWorkflowTool,
    RunWorkflowTool,
    ListExecutionsTool,
    GetExecutionTool,
    DeleteExecutionTool,
    RetryExecutionTool,
    ExecuteWebhookTool,
    ListTagsTool,
    CreateTagTool,
    ListCredentialsTool,
    GetCredentialSchemaTool,
    ListVariablesTool,
    RunAuditTool,
]


def register_n8n_tools(registry, client: N8nClient) -> None:
    """Register all n8n tools with the tool registry.

    Args:
        registry: ToolRegistry instance
        client: Shared N8nClient used by every tool
    """
    for tool_cls in N8N_TOOLS:
        registry.register(tool_cls(client))
