"""Single-attempt HTTP transport.

Performs exactly one network round trip and reports what happened. Knows
nothing about retries or status codes.
"""

import asyncio
from typing import Literal

import httpx
from pydantic import BaseModel

from .request import PreparedRequest


class TransportResponse(BaseModel):
    """Status and raw body of a completed attempt."""

    status_code: int
    body: bytes = b""
    headers: dict[str, str] = {}
    decode_error: str | None = None  # Content-Encoding could not be undone

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


class TransportFailure(BaseModel):
    """Attempt ended without an HTTP response."""

    kind: Literal["timeout", "connection"]
    reason: str = ""


AttemptOutcome = TransportResponse | TransportFailure


class HttpTransport:
    """httpx-backed executor for prepared requests."""

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None):
        """Initialize transport.

        Args:
            transport: Optional httpx transport (e.g. httpx.MockTransport in tests)
        """
        self.client = httpx.AsyncClient(transport=transport, follow_redirects=False)

    async def _exchange(self, request: PreparedRequest, timeout: float) -> TransportResponse:
        # The stream context releases the connection on success, error and cancellation.
        async with self.client.stream(
            request.method,
            request.url,
            headers=request.headers,
            content=request.content,
            timeout=timeout,
        ) as response:
            try:
                body = await response.aread()
            except httpx.DecodingError as e:
                return TransportResponse(
                    status_code=response.status_code,
                    headers=dict(response.headers),
                    decode_error=str(e) or type(e).__name__,
                )
            return TransportResponse(
                status_code=response.status_code,
                body=body,
                headers=dict(response.headers),
            )

    async def send(self, request: PreparedRequest, timeout: float) -> AttemptOutcome:
        """Perform one attempt under a deadline of `timeout` seconds."""
        try:
            return await asyncio.wait_for(self._exchange(request, timeout), timeout=timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            return TransportFailure(kind="timeout", reason=str(e) or type(e).__name__)
        except httpx.TransportError as e:
            return TransportFailure(kind="connection", reason=str(e) or type(e).__name__)

    async def aclose(self) -> None:
        """Close HTTP client."""
        await self.client.aclose()
