"""
Page and design capture

Headless rendering of web pages and Figma designs into image bytes.
"""

from screenshot_toolkit.capture.figma import FigmaCapture
from screenshot_toolkit.capture.models import (
    CaptureFormat,
    CaptureResult,
    CaptureTarget,
    ClipRegion,
    FigmaCaptureTarget,
    FigmaFileRef,
    mime_type_for,
    parse_figma_url,
)
from screenshot_toolkit.capture.web import WebCapture
from screenshot_toolkit.core.exceptions import CaptureError

__all__ = [
    "CaptureError",
    "CaptureFormat",
    "CaptureResult",
    "CaptureTarget",
    "ClipRegion",
    "FigmaCapture",
    "FigmaCaptureTarget",
    "FigmaFileRef",
    "WebCapture",
    "mime_type_for",
    "parse_figma_url",
]
