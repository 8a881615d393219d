"""
Tests for the difference report

Tests severity classification and Markdown report content.
"""

import pytest

from screenshot_toolkit.visual_testing import (
    ComparisonMetadata,
    ComparisonResult,
    ImageSize,
    Severity,
    classify_difference,
    describe_difference,
)
from screenshot_toolkit.visual_testing.report import LIKELY_CAUSES, SEVERITY_SUMMARIES


def make_result(diff_percentage: float, diff_pixels: int = 0, total_pixels: int = 1_000_000) -> ComparisonResult:
    return ComparisonResult(
        diff_pixels=diff_pixels,
        total_pixels=total_pixels,
        diff_percentage=diff_percentage,
        diff_image_base64="",
        metadata=ComparisonMetadata(
            image1_size=ImageSize(1200, 800),
            image2_size=ImageSize(1440, 900),
            threshold=0.1,
            compared_at="2026-01-02T03:04:05+00:00",
        ),
    )


class TestClassifyDifference:
    """Test severity breakpoints"""

    @pytest.mark.parametrize(
        "percentage, expected",
        [
            (0.0, Severity.NEGLIGIBLE),
            (0.99, Severity.NEGLIGIBLE),
            (1.0, Severity.MINOR),
            (4.999, Severity.MINOR),
            (5.0, Severity.SUBSTANTIAL),
            (19.999, Severity.SUBSTANTIAL),
            (20.0, Severity.MAJOR),
            (100.0, Severity.MAJOR),
        ],
    )
    def test_breakpoints(self, percentage, expected):
        """Test classification on and around each boundary"""
        assert classify_difference(percentage) is expected

    def test_every_severity_has_summary_and_causes(self):
        """Test that the lookup tables cover all severities"""
        for severity in Severity:
            assert severity in SEVERITY_SUMMARIES
            assert len(LIKELY_CAUSES[severity]) == 3

    def test_minor_and_substantial_share_causes(self):
        """Test that minor and substantial differences list the same causes"""
        assert LIKELY_CAUSES[Severity.MINOR] == LIKELY_CAUSES[Severity.SUBSTANTIAL]


class TestDescribeDifference:
    """Test Markdown report generation"""

    def test_basic_statistics(self):
        """Test statistics formatting"""
        report = describe_difference(make_result(12.3456, diff_pixels=123_456, total_pixels=1_000_000))

        assert report.startswith("## Image Comparison Result")
        assert "- **Total pixels**: 1,000,000" in report
        assert "- **Differing pixels**: 123,456" in report
        assert "- **Difference**: 12.35%" in report
        assert "- **Threshold**: 10.0%" in report

    def test_image_sizes(self):
        """Test that original sizes of both images are reported"""
        report = describe_difference(make_result(0.5))

        assert "- **Image 1**: 1200 × 800" in report
        assert "- **Image 2**: 1440 × 900" in report

    @pytest.mark.parametrize(
        "percentage, severity",
        [(0.2, Severity.NEGLIGIBLE), (3.0, Severity.MINOR), (12.0, Severity.SUBSTANTIAL), (45.0, Severity.MAJOR)],
    )
    def test_severity_section_and_causes(self, percentage, severity):
        """Test that the severity line and causes match the bucket"""
        report = describe_difference(make_result(percentage))

        assert SEVERITY_SUMMARIES[severity] in report
        for cause in LIKELY_CAUSES[severity]:
            assert f"- {cause}" in report

    def test_nearly_identical_wording(self):
        """Test the negligible summary text"""
        report = describe_difference(make_result(0.0))

        assert "Nearly identical" in report
        assert "Compression artifacts" in report

    def test_major_difference_wording(self):
        """Test the major summary text"""
        report = describe_difference(make_result(20.0))

        assert "Major difference" in report
        assert "Structural layout change" in report

    def test_timestamp_copied_verbatim(self):
        """Test that the comparison timestamp is taken from the result"""
        report = describe_difference(make_result(1.5))

        assert "2026-01-02T03:04:05+00:00" in report

    def test_report_is_deterministic(self):
        """Test that the same result always yields the same text"""
        result = make_result(7.25, diff_pixels=72_500)

        assert describe_difference(result) == describe_difference(result)
