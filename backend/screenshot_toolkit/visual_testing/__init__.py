"""
Visual Testing Module

Provides pixel-level screenshot comparison and human-readable
difference reports.
"""

from screenshot_toolkit.visual_testing.comparison import (
    ComparisonMetadata,
    ComparisonRequest,
    ComparisonResult,
    ImageComparator,
    ImageSize,
)
from screenshot_toolkit.visual_testing.exceptions import (
    ComparisonError,
    ImageDecodeError,
    ImageIOError,
)
from screenshot_toolkit.visual_testing.report import Severity, classify_difference, describe_difference

__all__ = [
    "ImageComparator",
    "ComparisonRequest",
    "ComparisonResult",
    "ComparisonMetadata",
    "ImageSize",
    "ComparisonError",
    "ImageIOError",
    "ImageDecodeError",
    "Severity",
    "classify_difference",
    "describe_difference",
]
