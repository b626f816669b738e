"""Structured logging tests."""

import io
import json

import structlog

from relay_config.settings import Settings
from relay_obs.logging import get_logger, setup_logging


def test_json_logging_to_stream():
    stream = io.StringIO()
    setup_logging(Settings(_env_file=None, LOG_FORMAT="json", LOG_LEVEL="INFO"), stream=stream)

    get_logger("test.logging").info("n8n_request_retry", attempt=1)

    record = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert record["event"] == "n8n_request_retry"
    assert record["attempt"] == 1
    assert record["level"] == "info"
    structlog.reset_defaults()


def test_level_filtering():
    stream = io.StringIO()
    setup_logging(Settings(_env_file=None, LOG_FORMAT="json", LOG_LEVEL="WARNING"), stream=stream)

    get_logger("test.filter").debug("hidden")

    assert stream.getvalue() == ""
    structlog.reset_defaults()
