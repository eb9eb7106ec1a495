"""Application configuration.

Loads settings from environment variables (prefixed ``CATALOGSYNC_``)
with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from catalogsync.domain.reference import DEFAULT_ID_PATTERN


class Settings(BaseSettings):
    """Catalog sync settings loaded from environment variables."""

    # Remote catalog
    api_url: str = "http://localhost:5000/api"
    api_token: str | None = None
    request_timeout: float = Field(default=30.0, gt=0)

    # Pagination
    page_size: int = Field(default=24, ge=1)
    admin_page_size: int = Field(default=10, ge=1)

    # Background fill
    background_max_chunks: int = Field(default=5, ge=0)
    background_interval_seconds: float = Field(default=1.0, ge=0)

    # Degraded retry
    degraded_retry_delay_seconds: float = Field(default=2.0, ge=0)
    degraded_max_retry_page_size: int = Field(default=5, ge=1)

    # Preferences
    preference_save_delay_seconds: float = Field(default=1.0, ge=0)

    # Identifiers accepted by favorite and cart operations
    item_id_pattern: str = DEFAULT_ID_PATTERN

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    model_config = SettingsConfigDict(
        env_prefix="CATALOGSYNC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
