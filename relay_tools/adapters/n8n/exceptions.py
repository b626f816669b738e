"""n8n adapter exceptions.

Custom exception hierarchy for n8n API errors. Callers tell the kinds
apart by type; messages are meant for end users.
"""


class N8nError(Exception):
    """Base exception for n8n adapter."""

    def __init__(self, message: str, endpoint: str = ""):
        super().__init__(message)
        self.message = message
        self.endpoint = endpoint


class N8nApiError(N8nError):
    """Definitive HTTP error response from the n8n API."""

    def __init__(
        self,
        message: str,
        status_code: int,
        endpoint: str = "",
        is_retryable: bool = False,
    ):
        super().__init__(message, endpoint)
        self.status_code = status_code
        self.is_retryable = is_retryable

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(status_code={self.status_code}, "
            f"endpoint={self.endpoint!r}, message={self.message!r})"
        )


class N8nDecodeError(N8nApiError):
    """2xx response whose body cannot be decoded (content encoding or JSON)."""


class N8nTimeoutError(N8nError):
    """No response within the per-attempt deadline."""

    def __init__(self, endpoint: str, timeout: float, message: str | None = None):
        super().__init__(
            message or f"Request to {endpoint} timed out after {timeout}s",
            endpoint,
        )
        self.timeout = timeout


class N8nConnectionError(N8nTimeoutError):
    """Connection refused, reset, or otherwise failed before a response."""

    def __init__(self, endpoint: str, timeout: float, reason: str = ""):
        detail = f": {reason}" if reason else ""
        super().__init__(
            endpoint,
            timeout,
            message=f"Could not connect to n8n for {endpoint}{detail}",
        )
        self.reason = reason
