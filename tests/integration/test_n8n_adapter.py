"""Integration tests for the n8n adapter.

Tools, client, policy and transport wired together against a scripted
n8n server.
"""

import json

import httpx
import pytest
import pytest_asyncio

from relay_tools.registry import ToolRegistry
from relay_tools.adapters.n8n import ClientConfig, N8nClient, register_n8n_tools


@pytest_asyncio.fixture
async def registry(fake_n8n):
    config = ClientConfig(
        base_url="https://n8n.example.com/api/v1",
        api_key="integration-key",
        max_retries=2,
        retry_delay=0,
    )
    client = N8nClient(config, transport=httpx.MockTransport(fake_n8n.handler))
    registry = ToolRegistry()
    register_n8n_tools(registry, client)
    yield registry
    await client.aclose()


@pytest.mark.asyncio
async def test_get_workflow_through_tool(registry, fake_n8n):
    fake_n8n.reply(200, json={"id": "a/b", "name": "Nested"})

    result = await registry.get("get_workflow").execute({}, {"workflowId": "a/b"})

    assert result["isError"] is False
    assert json.loads(result["content"][0]["text"])["name"] == "Nested"
    assert fake_n8n.last.url.raw_path == b"/api/v1/workflows/a%2Fb"
    assert fake_n8n.last.headers["X-N8N-API-KEY"] == "integration-key"


@pytest.mark.asyncio
async def test_transient_failures_are_absorbed(registry, fake_n8n):
    fake_n8n.fail(httpx.ConnectError("reset")).reply(503).reply(200, json={"data": [{"id": "t1", "name": "ops"}]})

    result = await registry.get("list_tags").execute({}, {})

    assert result["isError"] is False
    assert fake_n8n.calls == 3


@pytest.mark.asyncio
async def test_exhausted_retries_surface_clean_error(registry, fake_n8n):
    fake_n8n.reply(500, json={"message": "db down"}).reply(500, json={"message": "db down"}).reply(
        502, json={"message": "bad gateway"}
    )

    result = await registry.get("list_executions").execute({}, {"workflowId": "wf"})

    assert result["isError"] is True
    assert result["content"][0]["text"] == "Error: bad gateway (HTTP 502)"
    assert fake_n8n.calls == 3


@pytest.mark.asyncio
async def test_client_error_is_not_retried(registry, fake_n8n):
    fake_n8n.reply(401, json={"message": "unauthorized"})

    result = await registry.get("list_variables").execute({}, {})

    assert result["isError"] is True
    assert "HTTP 401" in result["content"][0]["text"]
    assert fake_n8n.calls == 1


@pytest.mark.asyncio
async def test_webhook_with_basic_auth(registry, fake_n8n):
    fake_n8n.reply(200, json={"received": True})

    result = await registry.get("execute_webhook").execute(
        {},
        {"webhookPath": "orders/new", "data": {"sku": "x"}, "auth": {"username": "u", "password": "p"}},
    )

    assert result["isError"] is False
    request = fake_n8n.last
    assert request.url.raw_path == b"/webhook/orders%2Fnew"
    assert request.url.host == "n8n.example.com"
    assert request.headers["Authorization"] == "Basic dTpw"
    assert json.loads(request.content) == {"sku": "x"}
