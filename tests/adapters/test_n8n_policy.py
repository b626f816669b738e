"""Unit tests for the n8n retry/classification policy.

No transport involved: outcomes are built by hand.
"""

import json

import pytest

from relay_tools.adapters.n8n.config import BackoffStrategy, ClientConfig
from relay_tools.adapters.n8n.exceptions import (
    N8nApiError,
    N8nConnectionError,
    N8nDecodeError,
    N8nTimeoutError,
)
from relay_tools.adapters.n8n.policy import DecisionKind, classify, error_message, retry_delay
from relay_tools.adapters.n8n.transport import TransportFailure, TransportResponse


@pytest.fixture
def config():
    return ClientConfig(base_url="http://n8n.local/api/v1", max_retries=2, retry_delay=0.5)


def response(status: int, body: bytes = b"") -> TransportResponse:
    return TransportResponse(status_code=status, body=body)


class TestClassify:
    def test_success_decodes_json(self, config):
        decision = classify(response(200, b'{"id": "1"}'), 1, config)

        assert decision.kind == DecisionKind.SUCCESS
        assert decision.payload == {"id": "1"}

    def test_empty_success_body_is_none(self, config):
        decision = classify(response(204), 1, config)

        assert decision.kind == DecisionKind.SUCCESS
        assert decision.payload is None

    def test_malformed_success_body_fails(self, config):
        decision = classify(response(200, b"<html>"), 1, config, "/workflows")

        assert decision.kind == DecisionKind.FAIL
        assert isinstance(decision.error, N8nDecodeError)
        assert decision.error.status_code == 200
        assert decision.error.is_retryable is False

    def test_undecodable_content_encoding_fails(self, config):
        outcome = TransportResponse(status_code=200, decode_error="bad gzip")

        decision = classify(outcome, 1, config, "/tags")

        assert decision.kind == DecisionKind.FAIL
        assert isinstance(decision.error, N8nDecodeError)
        assert decision.error.status_code == 200
        assert "bad gzip" in decision.error.message

    @pytest.mark.parametrize("status", [429, 500, 502, 503, 599])
    def test_retryable_status_within_budget(self, config, status):
        assert classify(response(status), 1, config).kind == DecisionKind.RETRY
        assert classify(response(status), 2, config).kind == DecisionKind.RETRY

    def test_retryable_status_exhausted(self, config):
        decision = classify(response(503, b"busy"), 3, config, "/tags")

        assert decision.kind == DecisionKind.FAIL
        assert isinstance(decision.error, N8nApiError)
        assert decision.error.status_code == 503
        assert decision.error.is_retryable is True
        assert decision.error.endpoint == "/tags"

    @pytest.mark.parametrize("status", [400, 401, 403, 404, 409, 422, 302])
    def test_other_statuses_fail_immediately(self, config, status):
        decision = classify(response(status, b"nope"), 1, config)

        assert decision.kind == DecisionKind.FAIL
        assert decision.error.status_code == status
        assert decision.error.is_retryable is False

    def test_timeout_retried_then_fails(self, config):
        failure = TransportFailure(kind="timeout")

        assert classify(failure, 2, config).kind == DecisionKind.RETRY
        decision = classify(failure, 3, config, "/workflows")
        assert decision.kind == DecisionKind.FAIL
        assert type(decision.error) is N8nTimeoutError
        assert not isinstance(decision.error, N8nApiError)

    def test_connection_failure_exhausted(self, config):
        decision = classify(TransportFailure(kind="connection", reason="refused"), 3, config)

        assert isinstance(decision.error, N8nConnectionError)
        assert isinstance(decision.error, N8nTimeoutError)
        assert "refused" in decision.error.message

    def test_zero_retries_never_retries(self):
        config = ClientConfig(base_url="http://x", max_retries=0)

        assert classify(response(500), 1, config).kind == DecisionKind.FAIL
        assert classify(TransportFailure(kind="timeout"), 1, config).kind == DecisionKind.FAIL


class TestErrorMessage:
    def test_json_message_field(self, config):
        body = json.dumps({"message": "Workflow not found"}).encode()

        assert error_message(404, body, config) == "Workflow not found"

    def test_plain_text(self, config):
        assert error_message(400, b"Bad request", config) == "Bad request"

    def test_empty_body_falls_back(self, config):
        assert error_message(404, b"", config) == "Request failed with status 404"

    def test_binary_body_falls_back(self, config):
        assert error_message(500, b"\xff\xfe\x00", config) == "Request failed with status 500"

    def test_long_message_truncated(self, config):
        message = error_message(500, b"x" * 600, config)

        assert len(message) == 503
        assert message.endswith("...")

    def test_details_hidden(self):
        config = ClientConfig(base_url="http://x", expose_error_details=False)

        assert error_message(401, b"secret stack trace", config) == "Authentication failed - check API key"
        assert error_message(502, b"secret", config) == "n8n server error - try again later"
        assert error_message(418, b"secret", config) == "Request failed"


class TestRetryDelay:
    def test_fixed(self, config):
        assert [retry_delay(config, n) for n in (1, 2, 3)] == [0.5, 0.5, 0.5]

    def test_linear(self):
        config = ClientConfig(base_url="http://x", retry_delay=0.5, backoff=BackoffStrategy.LINEAR)

        assert [retry_delay(config, n) for n in (1, 2, 3)] == [0.5, 1.0, 1.5]

    def test_exponential(self):
        config = ClientConfig(base_url="http://x", retry_delay=0.5, backoff="exponential")

        assert [retry_delay(config, n) for n in (1, 2, 3)] == [0.5, 1.0, 2.0]

    def test_zero_delay(self):
        config = ClientConfig(base_url="http://x", retry_delay=0, backoff="exponential")

        assert retry_delay(config, 4) == 0
