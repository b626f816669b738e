"""Pytest fixtures."""

import httpx
import pytest
import pytest_asyncio

from relay_tools.adapters.n8n import ClientConfig, N8nClient

BASE_URL = "http://localhost:5678/api/v1"
API_KEY = "test-api-key"


class FakeN8n:
    """Scripted n8n server for httpx.MockTransport.

    Each queued item is either an httpx.Response or an exception instance,
    consumed one per request. Every request is recorded.
    """

    def __init__(self):
        self.queue: list = []
        self.requests: list[httpx.Request] = []

    def reply(self, status_code: int = 200, json=None, text: str | None = None) -> "FakeN8n":
        if json is not None:
            self.queue.append(httpx.Response(status_code, json=json))
        else:
            self.queue.append(httpx.Response(status_code, text=text or ""))
        return self

    def fail(self, exc: Exception) -> "FakeN8n":
        self.queue.append(exc)
        return self

    @property
    def calls(self) -> int:
        return len(self.requests)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        item = self.queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture
def fake_n8n():
    """Scripted server; queue replies with .reply() / .fail()."""
    return FakeN8n()


@pytest.fixture
def client_config():
    """Fast config: two attempts, no wait between them."""
    return ClientConfig(
        base_url=BASE_URL,
        api_key=API_KEY,
        timeout=5.0,
        max_retries=1,
        retry_delay=0,
    )


@pytest_asyncio.fixture
async def n8n_client(client_config, fake_n8n):
    """N8nClient wired to the fake server."""
    client = N8nClient(client_config, transport=httpx.MockTransport(fake_n8n.handler))
    yield client
    await client.aclose()
