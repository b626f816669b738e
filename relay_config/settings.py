"""
Application Settings (Pydantic Settings).

Loads configuration from environment variables (.env file or system env).
Set DOTENV_CONFIG_PATH to read a different env file, e.g. when the relay
is launched from another project's directory.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars
    )

    # ========================================================================
    # N8N API
    # ========================================================================
    N8N_API_URL: str = Field(
        default="http://localhost:5678/api/v1",
        description="n8n public REST API root",
    )
    N8N_API_KEY: str = Field(default="", description="Sent as X-N8N-API-KEY on every request")
    N8N_WEBHOOK_URL: str = Field(
        default="",
        description="Public root for webhook calls (defaults to N8N_API_URL without /api/v1)",
    )

    # ========================================================================
    # REQUEST PIPELINE
    # ========================================================================
    REQUEST_TIMEOUT: float = Field(default=30.0, gt=0, description="Per-attempt timeout (seconds)")
    MAX_RETRIES: int = Field(default=3, ge=0, description="Retries after the first attempt")
    RETRY_DELAY: float = Field(default=1.0, ge=0, description="Base delay between attempts (seconds)")
    RETRY_BACKOFF: str = Field(default="fixed", pattern="^(fixed|linear|exponential)$")

    # ========================================================================
    # LOGGING
    # ========================================================================
    LOG_LEVEL: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    LOG_FORMAT: str = Field(default="json", pattern="^(json|text)$")

    # ========================================================================
    # DEPLOYMENT
    # ========================================================================
    ENVIRONMENT: str = Field(
        default="development", pattern="^(development|staging|production)$"
    )
