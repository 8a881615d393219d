"""Shared pytest fixtures."""

from collections.abc import Callable
from pathlib import Path

import pytest
from PIL import Image

from screenshot_toolkit.core.config import reset_settings


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Isolate every test from cached settings and the caller's environment"""
    for name in ("LOG_LEVEL", "HEADLESS", "BROWSER_CHANNEL", "DEFAULT_THRESHOLD", "OUTPUT_DIR"):
        monkeypatch.delenv(f"SCREENSHOT_TOOLKIT_{name}", raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def make_image(tmp_path: Path) -> Callable[..., Path]:
    """Write a solid-color PNG and return its path"""

    def _make(
        name: str,
        size: tuple[int, int] = (20, 10),
        color: tuple[int, ...] = (255, 0, 0, 255),
        mode: str = "RGBA",
    ) -> Path:
        path = tmp_path / name
        Image.new(mode, size, color).save(path)
        return path

    return _make
