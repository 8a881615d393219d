"""
Configuration management

Centralized settings using Pydantic BaseSettings for type-safe configuration
with environment variable support.
"""

import logging
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from screenshot_toolkit.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """
    Application settings with environment variable support

    Settings can be overridden via environment variables:
    - SCREENSHOT_TOOLKIT_LOG_LEVEL=DEBUG
    - SCREENSHOT_TOOLKIT_HEADLESS=false
    - SCREENSHOT_TOOLKIT_DEFAULT_THRESHOLD=0.05
    """

    # Logging
    log_level: str = "INFO"

    # Playwright browser automation
    headless: bool = True
    browser_channel: str | None = None  # None = bundled Chromium, or "chrome" / "msedge"
    navigation_timeout_ms: int = Field(default=30000, gt=0)
    network_idle_timeout_ms: int = Field(default=10000, gt=0)
    selector_timeout_ms: int = Field(default=10000, gt=0)

    # Comparison
    default_threshold: float = Field(default=0.1, ge=0.0, le=1.0)
    output_dir: Path = Path("./screenshots")

    model_config = SettingsConfigDict(
        env_prefix="SCREENSHOT_TOOLKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level


# Singleton pattern for settings
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get application settings (singleton)

    Returns:
        Settings instance

    Raises:
        ConfigurationError: If environment values are invalid
    """
    global _settings
    if _settings is None:
        try:
            _settings = Settings()
        except ValueError as e:
            raise ConfigurationError(f"Invalid settings: {e}") from e
        logger.debug(f"Loaded settings: {_settings.model_dump()}")
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() re-reads the environment"""
    global _settings
    _settings = None
