"""Request building for the n8n API.

Turns a logical `RequestSpec` into a fully-qualified URL, headers and an
encoded body. Everything here is a pure function of its inputs and the
immutable `ClientConfig`.
"""

import base64
import json
from typing import Any, Literal
from urllib.parse import quote, urlencode

from pydantic import BaseModel, ConfigDict, Field

from .config import ClientConfig

HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]
QueryValue = str | int | float | bool | None


class RequestSpec(BaseModel):
    """One logical API call.

    `segments` are path components. Each one is percent-encoded on its own,
    so an identifier such as ``a/b`` can never act as a path separator.
    """

    model_config = ConfigDict(frozen=True)

    method: HttpMethod = "GET"
    segments: tuple[str, ...]
    query: dict[str, QueryValue] = Field(default_factory=dict)
    body: Any = None
    headers: dict[str, str] = Field(default_factory=dict)
    target: Literal["api", "webhook"] = "api"

    @property
    def endpoint(self) -> str:
        """Encoded path relative to the target root."""
        return "/" + "/".join(encode_segment(s) for s in self.segments)


class PreparedRequest(BaseModel):
    """Wire-ready request, re-sent unchanged on every attempt."""

    model_config = ConfigDict(frozen=True)

    method: HttpMethod
    url: str
    headers: dict[str, str]
    content: bytes | None = None
    endpoint: str


def encode_segment(value: str) -> str:
    """Percent-encode a single path parameter (``/`` becomes ``%2F``)."""
    return quote(str(value), safe="")


def _query_value(value: QueryValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_query(params: dict[str, QueryValue] | None) -> str:
    """Serialize query parameters, skipping keys whose value is None."""
    if not params:
        return ""
    pairs = [(key, _query_value(value)) for key, value in params.items() if value is not None]
    return urlencode(pairs)


def basic_auth_header(username: str, password: str) -> str:
    """Standard `Basic <base64(username:password)>` value."""
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


def build_headers(config: ClientConfig, extra: dict[str, str] | None = None) -> dict[str, str]:
    """JSON headers plus the API key, with per-call headers merged on top."""
    headers = {
        "Accept": "application/json",
        "Content-Type": "application/json",
        config.api_key_header: config.api_key,
    }
    if extra:
        headers.update(extra)
    return headers


def build_url(spec: RequestSpec, config: ClientConfig) -> str:
    root = config.webhook_root if spec.target == "webhook" else config.base_url
    url = f"{root}{spec.endpoint}"
    query = build_query(spec.query)
    return f"{url}?{query}" if query else url


def prepare(spec: RequestSpec, config: ClientConfig) -> PreparedRequest:
    """Assemble the wire request for a spec."""
    content = None
    if spec.body is not None:
        content = json.dumps(spec.body).encode("utf-8")

    return PreparedRequest(
        method=spec.method,
        url=build_url(spec, config),
        headers=build_headers(config, spec.headers),
        content=content,
        endpoint=spec.endpoint,
    )
