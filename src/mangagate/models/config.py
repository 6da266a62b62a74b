from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from mangagate.constants import (
    DEFAULT_BACKOFF,
    DEFAULT_FETCH_TIMEOUT,
    DEFAULT_MAX_RETRIES,
    DEFAULT_PUBLIC_URL,
    DEFAULT_THUMBNAIL_QUALITY,
    DEFAULT_THUMBNAIL_WIDTH,
    DEFAULT_USER_AGENT,
    MANGADEX_API_URL,
    MANGADEX_SITE_URL,
    MANGADEX_UPLOADS_URL,
    PLACEHOLDER_COVER,
)

__all__ = ["Settings"]


class Settings(BaseSettings):
    """Runtime settings, read from ``MANGAGATE_*`` environment variables or ``.env``."""

    model_config = SettingsConfigDict(
        env_prefix="MANGAGATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_base_url: str = MANGADEX_API_URL
    uploads_base_url: str = MANGADEX_UPLOADS_URL
    public_url: str = Field(
        default=DEFAULT_PUBLIC_URL, description="Externally reachable URL of this server"
    )
    placeholder_cover: str = PLACEHOLDER_COVER

    fetch_timeout: float = Field(default=DEFAULT_FETCH_TIMEOUT, gt=0)
    max_retries: int = Field(default=DEFAULT_MAX_RETRIES, ge=1)
    retry_backoff: float = Field(default=DEFAULT_BACKOFF, ge=0)

    thumbnail_width: int = Field(default=DEFAULT_THUMBNAIL_WIDTH, gt=0)
    thumbnail_quality: int = Field(default=DEFAULT_THUMBNAIL_QUALITY, ge=1, le=95)
    image_referer: str = MANGADEX_SITE_URL
    user_agent: str = DEFAULT_USER_AGENT

    host: str = "0.0.0.0"  # noqa: S104
    port: int = Field(default=5000, ge=1, le=65535)
    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]

    @field_validator("api_base_url", "uploads_base_url", "public_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")
