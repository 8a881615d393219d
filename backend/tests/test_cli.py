"""
Tests for the command-line interface
"""

import json
from unittest.mock import AsyncMock, MagicMock, patch

from click.testing import CliRunner
from playwright.async_api import Error as PlaywrightError

from screenshot_toolkit.capture import CaptureResult
from screenshot_toolkit.cli import main


class TestCompareCommand:
    """Test the compare command"""

    def test_markdown_report(self, make_image):
        """Test the default human-readable output"""
        image = make_image("a.png")

        result = CliRunner().invoke(main, ["compare", str(image), str(image)])

        assert result.exit_code == 0, result.output
        assert "Image Comparison Result" in result.stdout
        assert "Nearly identical" in result.stdout

    def test_json_output_and_diff_file(self, make_image, tmp_path):
        """Test JSON output and diff file writing"""
        a = make_image("a.png")
        b = make_image("b.png", color=(0, 0, 255, 255))
        output = tmp_path / "diff.png"

        result = CliRunner().invoke(
            main, ["compare", str(a), str(b), "--threshold", "0.2", "--output", str(output), "--json"]
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["differingPixels"] == data["totalPixels"] == 200
        assert data["diffPercentage"] == 100.0
        assert data["metadata"]["threshold"] == 0.2
        assert output.exists()

    def test_threshold_from_settings(self, make_image, monkeypatch):
        """Test that the default threshold comes from settings"""
        monkeypatch.setenv("SCREENSHOT_TOOLKIT_DEFAULT_THRESHOLD", "0.3")
        image = make_image("a.png")

        result = CliRunner().invoke(main, ["compare", str(image), str(image), "--json"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["metadata"]["threshold"] == 0.3

    def test_missing_image_exits_with_error(self, make_image, tmp_path):
        """Test that comparison errors exit with status 1"""
        image = make_image("a.png")

        result = CliRunner().invoke(main, ["compare", str(image), str(tmp_path / "missing.png")])

        assert result.exit_code == 1
        assert "Comparison" in result.stdout

    def test_invalid_threshold_exits_with_usage_error(self, make_image):
        """Test that an out-of-range threshold is rejected"""
        image = make_image("a.png")

        result = CliRunner().invoke(main, ["compare", str(image), str(image), "--threshold", "1.5"])

        assert result.exit_code == 2


class TestCaptureCommands:
    """Test capture commands with a mocked browser"""

    def test_capture_web_writes_file(self, tmp_path):
        """Test that capture-web saves the captured bytes"""
        output = tmp_path / "shots" / "page.png"
        capture = MagicMock()
        capture.return_value.capture = AsyncMock(
            return_value=CaptureResult(image_bytes=b"\x89PNG data", mime_type="image/png")
        )

        with patch("screenshot_toolkit.cli.BrowserManager", MagicMock()), patch(
            "screenshot_toolkit.cli.WebCapture", capture
        ):
            result = CliRunner().invoke(
                main, ["capture-web", "http://localhost:3000", str(output), "--width", "1200", "--full-page"]
            )

        assert result.exit_code == 0, result.output
        assert output.read_bytes() == b"\x89PNG data"
        target = capture.return_value.capture.await_args.args[0]
        assert target.width == 1200
        assert target.full_page is True

    def test_capture_figma_rejects_non_figma_url(self, tmp_path):
        """Test target validation before any browser is started"""
        manager = MagicMock()

        with patch("screenshot_toolkit.cli.BrowserManager", manager):
            result = CliRunner().invoke(main, ["capture-figma", "https://example.com/x", str(tmp_path / "f.png")])

        assert result.exit_code == 2
        manager.assert_not_called()

    def test_capture_figma_rejects_non_file_figma_link(self, tmp_path):
        """Test that Figma pages without a file key fail before any browser is started"""
        manager = MagicMock()

        with patch("screenshot_toolkit.cli.BrowserManager", manager):
            result = CliRunner().invoke(
                main, ["capture-figma", "https://www.figma.com/files/recent", str(tmp_path / "f.png")]
            )

        assert result.exit_code == 2
        assert "Invalid Figma URL format" in result.stdout
        manager.assert_not_called()

    def test_browser_launch_failure_is_reported(self, tmp_path):
        """Test that a missing browser install prints an install hint"""
        entry = MagicMock()
        playwright = MagicMock()
        entry.return_value.start = AsyncMock(return_value=playwright)
        playwright.chromium.launch = AsyncMock(side_effect=PlaywrightError("Executable doesn't exist"))
        playwright.stop = AsyncMock()
        output = tmp_path / "page.png"

        with patch("screenshot_toolkit.browser.manager.async_playwright", entry):
            result = CliRunner().invoke(main, ["capture-web", "http://localhost:3000", str(output)])

        assert result.exit_code == 1
        assert not isinstance(result.exception, PlaywrightError)
        assert "Browser launch failed" in result.stdout
        assert "playwright install chromium" in result.stdout
        assert not output.exists()

    def test_unwrapped_playwright_error_is_reported(self, tmp_path):
        """Test that a raw Playwright error still exits cleanly"""
        manager = MagicMock()
        manager.return_value.__aenter__.side_effect = PlaywrightError("Target closed")

        with patch("screenshot_toolkit.cli.BrowserManager", manager):
            result = CliRunner().invoke(main, ["capture-web", "http://localhost:3000", str(tmp_path / "p.png")])

        assert result.exit_code == 1
        assert not isinstance(result.exception, PlaywrightError)
        assert "[Capture] Target closed" in result.stdout

    def test_capture_and_compare(self, tmp_path, make_image):
        """Test the end-to-end flow with canned captures"""
        red = make_image("red.png").read_bytes()
        blue = make_image("blue.png", color=(0, 0, 255, 255)).read_bytes()
        web = MagicMock()
        web.return_value.capture = AsyncMock(return_value=CaptureResult(image_bytes=red, mime_type="image/png"))
        figma = MagicMock()
        figma.return_value.capture = AsyncMock(return_value=CaptureResult(image_bytes=blue, mime_type="image/png"))
        out_dir = tmp_path / "out"

        with patch("screenshot_toolkit.cli.BrowserManager", MagicMock()), patch(
            "screenshot_toolkit.cli.WebCapture", web
        ), patch("screenshot_toolkit.cli.FigmaCapture", figma):
            result = CliRunner().invoke(
                main,
                [
                    "capture-and-compare",
                    "http://localhost:3000",
                    "https://www.figma.com/file/AbC123/Design",
                    "--output-dir",
                    str(out_dir),
                    "--json",
                ],
            )

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["diffPercentage"] == 100.0
        assert (out_dir / "web_capture.png").exists()
        assert (out_dir / "figma_capture.png").exists()
        assert (out_dir / "web_vs_figma_diff.png").exists()
