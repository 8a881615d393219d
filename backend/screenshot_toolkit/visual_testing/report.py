"""
Difference Report

Turns a ComparisonResult into a Markdown narrative with a severity
classification and a list of likely causes.
"""

from enum import Enum

from screenshot_toolkit.visual_testing.comparison import ComparisonResult

# Severity breakpoints on diff_percentage (upper bounds, exclusive)
NEGLIGIBLE_MAX = 1.0
MINOR_MAX = 5.0
SUBSTANTIAL_MAX = 20.0


class Severity(str, Enum):
    """How different two screenshots are"""

    NEGLIGIBLE = "negligible"
    MINOR = "minor"
    SUBSTANTIAL = "substantial"
    MAJOR = "major"


SEVERITY_SUMMARIES: dict[Severity, str] = {
    Severity.NEGLIGIBLE: "✅ **Nearly identical**: the images are nearly identical (difference < 1%)",
    Severity.MINOR: "⚠️ **Minor difference**: the images differ slightly (1-5%)",
    Severity.SUBSTANTIAL: "🔶 **Substantial difference**: the images differ substantially (5-20%)",
    Severity.MAJOR: "❌ **Major difference**: the images differ significantly (>= 20%)",
}

_LAYOUT_DETAIL_CAUSES = (
    "UI element positioning",
    "Font rendering",
    "Color and opacity shifts",
)

LIKELY_CAUSES: dict[Severity, tuple[str, ...]] = {
    Severity.NEGLIGIBLE: (
        "Subpixel rendering noise",
        "Compression artifacts",
        "Color profile variance",
    ),
    Severity.MINOR: _LAYOUT_DETAIL_CAUSES,
    Severity.SUBSTANTIAL: _LAYOUT_DETAIL_CAUSES,
    Severity.MAJOR: (
        "Structural layout change",
        "Content change",
        "UI elements added or removed",
    ),
}


def classify_difference(diff_percentage: float) -> Severity:
    """
    Classify a difference percentage

    Args:
        diff_percentage: Percentage of differing pixels (0-100)

    Returns:
        Severity bucket
    """
    if diff_percentage < NEGLIGIBLE_MAX:
        return Severity.NEGLIGIBLE
    if diff_percentage < MINOR_MAX:
        return Severity.MINOR
    if diff_percentage < SUBSTANTIAL_MAX:
        return Severity.SUBSTANTIAL
    return Severity.MAJOR


def describe_difference(result: ComparisonResult) -> str:
    """
    Generate a Markdown report for a comparison result

    Args:
        result: Comparison result to describe

    Returns:
        Markdown text
    """
    metadata = result.metadata
    severity = classify_difference(result.diff_percentage)

    lines = [
        "## Image Comparison Result",
        "",
        "### 📊 Basic Statistics",
        f"- **Total pixels**: {result.total_pixels:,}",
        f"- **Differing pixels**: {result.diff_pixels:,}",
        f"- **Difference**: {result.diff_percentage:.2f}%",
        f"- **Threshold**: {metadata.threshold * 100:.1f}%",
        "",
        "### 📐 Image Sizes",
        f"- **Image 1**: {metadata.image1_size.width} × {metadata.image1_size.height}",
        f"- **Image 2**: {metadata.image2_size.width} × {metadata.image2_size.height}",
        "",
        "### 🔍 Difference Analysis",
        SEVERITY_SUMMARIES[severity],
        "",
        "### 🎯 Likely Causes",
    ]
    lines.extend(f"- {cause}" for cause in LIKELY_CAUSES[severity])
    lines.extend(["", f"_Compared at {metadata.compared_at}_", ""])

    return "\n".join(lines)
