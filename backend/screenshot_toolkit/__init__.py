"""
Screenshot Toolkit

Headless capture of web pages and Figma designs, and pixel-level
comparison of the resulting screenshots.
"""

__version__ = "1.0.0"
__license__ = "MIT"

from screenshot_toolkit.visual_testing.comparison import (
    ComparisonRequest,
    ComparisonResult,
    ImageComparator,
)
from screenshot_toolkit.visual_testing.report import describe_difference

__all__ = [
    "ImageComparator",
    "ComparisonRequest",
    "ComparisonResult",
    "describe_difference",
]
