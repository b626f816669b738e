"""Retry and classification policy.

After every attempt `classify` maps the outcome to one of three tagged
decisions: SUCCESS (decoded payload), RETRY, or FAIL (typed error). It does
no I/O, so the policy can be tested without a transport.

Attempts are numbered from 1. With `max_retries = n` a logical call makes at
most `n + 1` attempts.
"""

import json
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

from .config import BackoffStrategy, ClientConfig
from .exceptions import (
    N8nApiError,
    N8nConnectionError,
    N8nDecodeError,
    N8nError,
    N8nTimeoutError,
)
from .transport import AttemptOutcome, TransportFailure

RATE_LIMITED = 429

GENERIC_MESSAGES = {
    400: "Invalid request parameters",
    401: "Authentication failed - check API key",
    403: "Access denied - insufficient permissions",
    404: "Resource not found",
    429: "Rate limit exceeded - try again later",
}


class DecisionKind(str, Enum):
    SUCCESS = "success"
    RETRY = "retry"
    FAIL = "fail"


class Decision(BaseModel):
    """Tagged result of classifying one attempt."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: DecisionKind
    payload: Any = None
    status_code: int | None = None
    error: N8nError | None = None

    @classmethod
    def success(cls, payload: Any, status_code: int) -> "Decision":
        return cls(kind=DecisionKind.SUCCESS, payload=payload, status_code=status_code)

    @classmethod
    def retry(cls, status_code: int | None = None) -> "Decision":
        return cls(kind=DecisionKind.RETRY, status_code=status_code)

    @classmethod
    def fail(cls, error: N8nError) -> "Decision":
        return cls(
            kind=DecisionKind.FAIL,
            error=error,
            status_code=getattr(error, "status_code", None),
        )


def is_retryable_status(status: int) -> bool:
    return status == RATE_LIMITED or 500 <= status < 600


def has_budget(attempt: int, config: ClientConfig) -> bool:
    """True when another attempt may follow attempt number `attempt`."""
    return attempt <= config.max_retries


def retry_delay(config: ClientConfig, retry_number: int) -> float:
    """Seconds to wait before retry number `retry_number` (1-based)."""
    base = config.retry_delay
    n = max(retry_number, 1)
    if config.backoff == BackoffStrategy.LINEAR:
        delay = base * n
    elif config.backoff == BackoffStrategy.EXPONENTIAL:
        delay = base * 2 ** (n - 1)
    else:
        delay = base
    return max(delay, 0.0)


def _body_text(body: bytes) -> str | None:
    try:
        return body.decode("utf-8").strip()
    except UnicodeDecodeError:
        return None


def error_message(status: int, body: bytes, config: ClientConfig) -> str:
    """Human-readable message for an error response.

    Prefers the `message` (or `error`) field of a JSON error body, then the
    raw text. Without details, falls back to generic per-status text.
    """
    if not config.expose_error_details:
        if status in GENERIC_MESSAGES:
            return GENERIC_MESSAGES[status]
        return "n8n server error - try again later" if status >= 500 else "Request failed"

    text = _body_text(body)
    if not text:
        return f"Request failed with status {status}"

    try:
        data = json.loads(text)
    except ValueError:
        data = None
    if isinstance(data, dict):
        detail = data.get("message") or data.get("error")
        if isinstance(detail, str) and detail:
            text = detail

    if len(text) > config.max_error_length:
        return text[: config.max_error_length] + "..."
    return text


def _decode(status: int, body: bytes, endpoint: str) -> Decision:
    text = _body_text(body)
    if text is None:
        return Decision.fail(
            N8nDecodeError("Response body is not valid UTF-8", status, endpoint)
        )
    if not text:
        return Decision.success(None, status)
    try:
        return Decision.success(json.loads(text), status)
    except ValueError as e:
        return Decision.fail(
            N8nDecodeError(f"Invalid JSON in response: {e}", status, endpoint)
        )


def classify(
    outcome: AttemptOutcome,
    attempt: int,
    config: ClientConfig,
    endpoint: str = "",
) -> Decision:
    """Decide what follows attempt number `attempt`."""
    if isinstance(outcome, TransportFailure):
        if has_budget(attempt, config):
            return Decision.retry()
        if outcome.kind == "connection":
            return Decision.fail(N8nConnectionError(endpoint, config.timeout, outcome.reason))
        return Decision.fail(N8nTimeoutError(endpoint, config.timeout))

    status = outcome.status_code
    if 200 <= status < 300:
        if outcome.decode_error is not None:
            return Decision.fail(
                N8nDecodeError(
                    f"Could not decode response body: {outcome.decode_error}", status, endpoint
                )
            )
        return _decode(status, outcome.body, endpoint)

    if is_retryable_status(status):
        if has_budget(attempt, config):
            return Decision.retry(status)
        return Decision.fail(
            N8nApiError(
                error_message(status, outcome.body, config),
                status,
                endpoint,
                is_retryable=True,
            )
        )

    return Decision.fail(
        N8nApiError(error_message(status, outcome.body, config), status, endpoint)
    )
