"""Feed settings powered by Pydantic BaseSettings."""

from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class FeedSettings(BaseSettings):
    """Centralized environment configuration for the feed core.

    Every field can be overridden with a ``FEED_``-prefixed environment
    variable or an entry in ``.env``.
    """

    model_config = SettingsConfigDict(
        env_prefix="FEED_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_limit: int = Field(default=20, ge=1)
    min_limit: int = Field(default=10, ge=1)
    max_limit: int = Field(default=30, ge=1)
    discovery_window_days: int = Field(default=30, ge=1)
    discovery_fetch_cap: int = Field(default=80, ge=1)
    fetch_workers: int = Field(default=4, ge=1)
    json_logs: bool = True
    log_level: str = "INFO"
    fixture_path: Path | None = None

    @model_validator(mode="after")
    def _check_limit_bounds(self) -> "FeedSettings":
        if self.min_limit > self.max_limit:
            msg = "min_limit must not exceed max_limit"
            raise ValueError(msg)
        return self


def get_settings() -> FeedSettings:
    """Get a settings instance."""
    return FeedSettings()
