"""
Core module - Base abstractions

Provides foundational components used across the toolkit:
- Base exception hierarchy
- Configuration management
"""

from screenshot_toolkit.core.config import Settings, get_settings, reset_settings
from screenshot_toolkit.core.exceptions import (
    CaptureError,
    ConfigurationError,
    ToolkitError,
    ValidationError,
)

__all__ = [
    "Settings",
    "get_settings",
    "reset_settings",
    "ToolkitError",
    "ConfigurationError",
    "ValidationError",
    "CaptureError",
]
