"""n8n client configuration.

One immutable `ClientConfig` per process (or per test). Validated once at
construction; never mutated afterwards.
"""

from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    from relay_config.settings import Settings


API_PATH_SUFFIX = "/api/v1"


class BackoffStrategy(str, Enum):
    """Growth curve of the wait between attempts."""

    FIXED = "fixed"
    LINEAR = "linear"
    EXPONENTIAL = "exponential"


class ClientConfig(BaseModel):
    """Connection and retry settings for `N8nClient`."""

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(..., min_length=1, description="n8n REST API root, e.g. http://host:5678/api/v1")
    api_key: str = Field(default="", description="Value of the API-key header (may be empty)")
    timeout: float = Field(default=10.0, gt=0, description="Per-attempt deadline in seconds")
    max_retries: int = Field(default=3, ge=0, description="Retry rounds after the first attempt")
    retry_delay: float = Field(default=1.0, ge=0, description="Base wait between attempts in seconds")
    backoff: BackoffStrategy = BackoffStrategy.FIXED
    webhook_base_url: str | None = Field(
        default=None,
        description="Public root for /webhook/ calls (derived from base_url when unset)",
    )
    api_key_header: str = "X-N8N-API-KEY"
    expose_error_details: bool = True
    max_error_length: int = Field(default=500, ge=1)

    @field_validator("base_url", "webhook_base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.rstrip("/")

    @property
    def webhook_root(self) -> str:
        """Root URL that `/webhook/{path}` is appended to."""
        if self.webhook_base_url:
            return self.webhook_base_url
        return self.base_url.removesuffix(API_PATH_SUFFIX)

    @classmethod
    def from_settings(cls, settings: "Settings") -> "ClientConfig":
        """Build a client config from process settings."""
        return cls(
            base_url=settings.N8N_API_URL,
            api_key=settings.N8N_API_KEY,
            timeout=settings.REQUEST_TIMEOUT,
            max_retries=settings.MAX_RETRIES,
            retry_delay=settings.RETRY_DELAY,
            backoff=BackoffStrategy(settings.RETRY_BACKOFF),
            webhook_base_url=settings.N8N_WEBHOOK_URL or None,
            expose_error_details=settings.ENVIRONMENT != "production",
        )
