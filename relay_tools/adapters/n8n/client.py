"""n8n REST API client.

Every operation builds a `RequestSpec` and runs it through `request`, which
drives the attempt loop: send, classify, then stop or wait and re-send.
"""

import asyncio
from typing import Any

import httpx

from .config import ClientConfig
from .policy import DecisionKind, classify, retry_delay
from .request import RequestSpec, basic_auth_header, prepare
from .schemas import ExecutionStatus, WebhookAuth
from .transport import HttpTransport, TransportFailure


class N8nClient:
    """HTTP client for the n8n public API and webhooks.

    Provides:
    - Percent-encoded path parameters and typed query strings
    - Per-attempt deadline
    - Retry on timeouts, connection errors, 429 and 5xx
    - Typed errors (N8nApiError, N8nTimeoutError and subclasses)
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: httpx.AsyncBaseTransport | None = None,
        logger: Any | None = None,
    ):
        """Initialize n8n client.

        Args:
            config: Immutable connection and retry settings
            transport: Optional httpx transport (tests inject httpx.MockTransport)
            logger: Optional structlog logger for attempt events
        """
        self.config = config
        self.transport = HttpTransport(transport)
        self.logger = logger

    def _log(self, level: str, event: str, **kw: Any) -> None:
        if self.logger is not None:
            getattr(self.logger, level)(event, **kw)

    async def request(self, spec: RequestSpec) -> Any:
        """Execute one logical call.

        Returns:
            Decoded JSON payload, or None for an empty 2xx body

        Raises:
            N8nApiError: Non-retryable status, decode failure, or retries exhausted
            N8nTimeoutError: No response within the deadline after retries
        """
        prepared = prepare(spec, self.config)
        attempt = 1

        while True:
            self._log(
                "debug",
                "n8n_request_attempt",
                method=prepared.method,
                endpoint=prepared.endpoint,
                attempt=attempt,
            )
            outcome = await self.transport.send(prepared, self.config.timeout)
            decision = classify(outcome, attempt, self.config, prepared.endpoint)

            if decision.kind == DecisionKind.SUCCESS:
                self._log(
                    "debug",
                    "n8n_request_succeeded",
                    endpoint=prepared.endpoint,
                    status=decision.status_code,
                    attempt=attempt,
                )
                return decision.payload

            if decision.kind == DecisionKind.FAIL:
                self._log(
                    "warning",
                    "n8n_request_failed",
                    endpoint=prepared.endpoint,
                    attempt=attempt,
                    error_type=type(decision.error).__name__,
                    status=decision.status_code,
                )
                raise decision.error

            delay = retry_delay(self.config, attempt)
            self._log(
                "info",
                "n8n_request_retry",
                endpoint=prepared.endpoint,
                attempt=attempt,
                status=decision.status_code,
                transport_error=outcome.kind if isinstance(outcome, TransportFailure) else None,
                delay=delay,
            )
            await asyncio.sleep(delay)
            attempt += 1

    # ============ WORKFLOWS ============

    async def list_workflows(
        self,
        active: bool | None = None,
        tags: str | None = None,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> dict[str, Any]:
        """List workflows, optionally filtered by active flag or tag names."""
        return await self.request(
            RequestSpec(
                segments=("workflows",),
                query={"active": active, "tags": tags, "cursor": cursor, "limit": limit},
            )
        )

    async def get_workflow(self, workflow_id: str) -> dict[str, Any]:
        return await self.request(RequestSpec(segments=("workflows", workflow_id)))

    async def create_workflow(self, workflow: dict[str, Any]) -> dict[str, Any]:
        """Create a workflow (n8n creates it inactive)."""
        return await self.request(
            RequestSpec(method="POST", segments=("workflows",), body=workflow)
        )

    async def update_workflow(self, workflow_id: str, workflow: dict[str, Any]) -> dict[str, Any]:
        return await self.request(
            RequestSpec(method="PUT", segments=("workflows", workflow_id), body=workflow)
        )

    async def delete_workflow(self, workflow_id: str) -> Any:
        return await self.request(
            RequestSpec(method="DELETE", segments=("workflows", workflow_id))
        )

    async def activate_workflow(self, workflow_id: str) -> dict[str, Any]:
        return await self.request(
            RequestSpec(method="POST", segments=("workflows", workflow_id, "activate"))
        )

    async def deactivate_workflow(self, workflow_id: str) -> dict[str, Any]:
        return await self.request(
            RequestSpec(method="POST", segments=("workflows", workflow_id, "deactivate"))
        )

    async def run_workflow(self, workflow_id: str, data: dict[str, Any] | None = None) -> dict[str, Any]:
        """Start a workflow run with the given input data."""
        return await self.request(
            RequestSpec(
                method="POST",
                segments=("workflows", workflow_id, "run"),
                body=data or {},
            )
        )

    # ============ EXECUTIONS ============

    async def list_executions(
        self,
        workflow_id: str | None = None,
        status: ExecutionStatus | None = None,
        cursor: str | None = None,
        limit: int | None = None,
        include_data: bool | None = None,
    ) -> dict[str, Any]:
        return await self.request(
            RequestSpec(
                segments=("executions",),
                query={
                    "workflowId": workflow_id,
                    "status": status,
                    "cursor": cursor,
                    "limit": limit,
                    "includeData": include_data,
                },
            )
        )

    async def get_execution(self, execution_id: str, include_data: bool | None = None) -> dict[str, Any]:
        return await self.request(
            RequestSpec(
                segments=("executions", execution_id),
                query={"includeData": include_data},
            )
        )

    async def delete_execution(self, execution_id: str) -> Any:
        return await self.request(
            RequestSpec(method="DELETE", segments=("executions", execution_id))
        )

    async def retry_execution(self, execution_id: str, load_workflow: bool = False) -> dict[str, Any]:
        """Retry a failed execution, optionally with the latest workflow version."""
        return await self.request(
            RequestSpec(
                method="POST",
                segments=("executions", execution_id, "retry"),
                body={"loadWorkflow": load_workflow},
            )
        )

    # ============ WEBHOOKS ============

    async def execute_webhook(
        self,
        webhook_path: str,
        data: dict[str, Any] | None = None,
        auth: WebhookAuth | None = None,
    ) -> Any:
        """POST JSON to `{webhook root}/webhook/{path}`.

        Args:
            webhook_path: Path configured on the Webhook node (encoded as one segment)
            data: JSON payload
            auth: Optional basic-auth credentials

        Returns:
            Decoded webhook response, or None for an empty body
        """
        headers = {}
        if auth is not None:
            headers["Authorization"] = basic_auth_header(auth.username, auth.password)

        return await self.request(
            RequestSpec(
                method="POST",
                segments=("webhook", webhook_path),
                body=data or {},
                headers=headers,
                target="webhook",
            )
        )

    # ============ TAGS ============

    async def list_tags(self) -> dict[str, Any]:
        return await self.request(RequestSpec(segments=("tags",)))

    async def create_tag(self, name: str) -> dict[str, Any]:
        return await self.request(
            RequestSpec(method="POST", segments=("tags",), body={"name": name})
        )

    # ============ CREDENTIALS ============

    async def list_credentials(self) -> dict[str, Any]:
        return await self.request(RequestSpec(segments=("credentials",)))

    async def get_credential_schema(self, credential_type: str) -> dict[str, Any]:
        return await self.request(
            RequestSpec(segments=("credentials", "schema", credential_type))
        )

    # ============ VARIABLES ============

    async def list_variables(self) -> dict[str, Any]:
        return await self.request(RequestSpec(segments=("variables",)))

    # ============ AUDIT ============

    async def run_audit(self, categories: list[str] | None = None) -> dict[str, Any]:
        """Generate a security audit, optionally limited to some categories."""
        body: dict[str, Any] = {}
        if categories:
            body["additionalOptions"] = {"categories": categories}
        return await self.request(RequestSpec(method="POST", segments=("audit",), body=body))

    async def aclose(self):
        """Close HTTP client."""
        await self.transport.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.aclose()
