"""Runtime settings for the custom-field engine via pydantic-settings."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven settings (prefix `CUSTOM_FIELDS_`)."""

    model_config = SettingsConfigDict(
        env_prefix="CUSTOM_FIELDS_",
        env_file=".env",
        extra="ignore",
    )

    environment: str = "dev"
    log_level: str = "INFO"
    log_format: Literal["text", "json"] = "text"
    log_use_utc: bool = True
    # Operations slower than this are logged at WARNING; 0 disables the check.
    slow_operation_ms: int = Field(default=500, ge=0)

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() in {"prod", "production"}


settings = Settings()
