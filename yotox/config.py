#!/usr/bin/env python3
"""
Centralized configuration management for yotox.

Only the CLI reads this module. The upload pipeline and API clients take
their settings as constructor arguments.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_BASE_URL = "https://api.yotoplay.com"
DEFAULT_AUTH_URL = "https://login.yotoplay.com"


class YotoxConfig(BaseSettings):
    """Main configuration for yotox."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Yoto API
    api_base_url: str = Field(
        default=DEFAULT_API_BASE_URL, validation_alias="YOTOX_API_BASE_URL"
    )
    http_timeout: float = Field(default=30.0, validation_alias="YOTOX_HTTP_TIMEOUT")

    # Identity provider
    auth_url: str = Field(default=DEFAULT_AUTH_URL, validation_alias="YOTOX_AUTH_URL")
    client_id: Optional[str] = Field(default=None, validation_alias="YOTO_CLIENT_ID")
    audience: str = Field(
        default=DEFAULT_API_BASE_URL, validation_alias="YOTOX_AUDIENCE"
    )
    token_file: Path = Field(
        default=Path.home() / ".yotox" / "tokens.json",
        validation_alias="YOTOX_TOKEN_FILE",
    )
    max_retries: int = Field(default=3, validation_alias="YOTOX_MAX_RETRIES")

    # Transcode polling
    transcode_max_attempts: int = Field(
        default=30, validation_alias="YOTOX_TRANSCODE_MAX_ATTEMPTS"
    )
    transcode_poll_interval: float = Field(
        default=0.5, validation_alias="YOTOX_TRANSCODE_POLL_INTERVAL"
    )

    # Logging Configuration
    log_level: str = Field(default="WARNING", validation_alias="YOTOX_LOG_LEVEL")
    log_format: str = Field(default="console", validation_alias="YOTOX_LOG_FORMAT")

    @field_validator("api_base_url", "auth_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("transcode_max_attempts")
    @classmethod
    def validate_max_attempts(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Transcode max attempts must be at least 1")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        valid_formats = {"console", "json"}
        if v.lower() not in valid_formats:
            raise ValueError(f"Log format must be one of: {valid_formats}")
        return v.lower()


# Global config instance
_config: Optional[YotoxConfig] = None


def get_config() -> YotoxConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = YotoxConfig()
    return _config


def reset_config() -> None:
    """Reset the global configuration (useful for testing)."""
    global _config
    _config = None
