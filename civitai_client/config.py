"""
Client configuration using pydantic-settings.
Loads from CIVITAI_* environment variables with .env file support.
"""

from functools import lru_cache
from typing import Optional
from urllib.parse import urlparse

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_BASE_URL = "https://civitai.com"
DEFAULT_ORCHESTRATION_BASE_URL = "https://orchestration.civitai.com"
MAX_TIMEOUT_SECONDS = 300


def _validate_http_url(value: str) -> str:
    value = (value or "").strip()
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("must be a valid absolute HTTP or HTTPS URL")
    return value.rstrip("/")


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CIVITAI_",
        case_sensitive=False,
    )

    # Public REST API
    base_url: str = DEFAULT_BASE_URL
    api_version: str = "v1"
    api_key: Optional[str] = None

    # Orchestration (generation) API
    orchestration_base_url: str = DEFAULT_ORCHESTRATION_BASE_URL
    orchestration_api_version: str = "v1"

    # Transport
    timeout_seconds: int = Field(default=30, ge=1, le=MAX_TIMEOUT_SECONDS)
    max_retries: int = Field(default=3, ge=1, le=10)
    user_agent: str = "civitai-client/0.1.0"

    # Logging
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR

    @field_validator("base_url", "orchestration_base_url")
    @classmethod
    def check_url(cls, v: str) -> str:
        return _validate_http_url(v)

    @field_validator("api_version", "orchestration_api_version")
    @classmethod
    def check_version(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("API version cannot be empty")
        return v.strip()

    @field_validator("api_key")
    @classmethod
    def blank_key_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v

    def api_path(self, relative_path: str) -> str:
        """Path on the public API, e.g. 'models' -> '/api/v1/models'."""
        if not relative_path or not relative_path.strip():
            raise ValueError("relative_path cannot be empty")
        return f"/api/{self.api_version}/{relative_path.lstrip('/')}"

    def orchestration_path(self, relative_path: str) -> str:
        """Path on the orchestration API, e.g. 'coverage' -> '/v1/consumer/coverage'."""
        if not relative_path or not relative_path.strip():
            raise ValueError("relative_path cannot be empty")
        return f"/{self.orchestration_api_version}/consumer/{relative_path.lstrip('/')}"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
