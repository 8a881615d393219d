"""
Command-line interface for Screenshot Toolkit
"""

import asyncio
import json
import logging
import sys
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any, NoReturn, TypeVar

import click
from playwright.async_api import Error as PlaywrightError
from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel

from screenshot_toolkit import __version__
from screenshot_toolkit.browser import BrowserManager
from screenshot_toolkit.capture import (
    CaptureResult,
    CaptureTarget,
    FigmaCapture,
    FigmaCaptureTarget,
    WebCapture,
)
from screenshot_toolkit.core.config import get_settings
from screenshot_toolkit.core.exceptions import CaptureError, ToolkitError
from screenshot_toolkit.visual_testing import (
    ComparisonRequest,
    ComparisonResult,
    ImageComparator,
    describe_difference,
)

console = Console()
logger = logging.getLogger(__name__)

T = TypeVar("T")


def _fail(message: str, exit_code: int) -> NoReturn:
    console.print(f"\n[bold red]❌ {escape(message)}[/bold red]\n")
    sys.exit(exit_code)


def _run(coro: Awaitable[T]) -> T:
    """Run a coroutine, turning toolkit errors into a clean exit"""
    try:
        return asyncio.run(coro)
    except ToolkitError as e:
        _fail(str(e), exit_code=1)
    except PlaywrightError as e:
        _fail(str(CaptureError(str(e))), exit_code=1)


def capture_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by the capture commands"""
    options = [
        click.option("--width", type=int, default=None, help="Viewport width (default: 1920)"),
        click.option("--height", type=int, default=None, help="Viewport height (default: 1080)"),
        click.option("--scale", type=float, default=1.0, show_default=True, help="Device scale factor"),
        click.option(
            "--format",
            "image_format",
            type=click.Choice(["PNG", "JPG", "PDF"], case_sensitive=False),
            default="PNG",
            show_default=True,
        ),
        click.option("--quality", type=int, default=90, show_default=True, help="JPEG quality"),
        click.option("--full-page", is_flag=True, help="Capture the full scrollable page"),
        click.option("--wait-for-selector", default=None, help="CSS selector to wait for"),
        click.option(
            "--wait-for-timeout",
            type=int,
            default=2000,
            show_default=True,
            help="Extra wait before capturing (ms)",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _target_kwargs(
    width: int | None,
    height: int | None,
    scale: float,
    image_format: str,
    quality: int,
    full_page: bool,
    wait_for_selector: str | None,
    wait_for_timeout: int,
) -> dict[str, Any]:
    return {
        "width": width,
        "height": height,
        "scale": scale,
        "format": image_format,
        "quality": quality,
        "full_page": full_page,
        "wait_for_selector": wait_for_selector,
        "wait_for_timeout": wait_for_timeout,
    }


def _build_target(model: type[CaptureTarget], url: str, **kwargs: Any) -> CaptureTarget:
    try:
        return model(url=url, **kwargs)
    except ValueError as e:
        _fail(f"Invalid capture options: {e}", exit_code=2)


def _save_capture(result: CaptureResult, output: Path) -> None:
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(result.image_bytes)
    console.print(f"✅ Saved {result.mime_type} capture: [green]{output}[/green]")


def _print_comparison(result: ComparisonResult, as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        console.print(Markdown(describe_difference(result)))


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """Screenshot Toolkit - capture pages and designs, compare screenshots"""
    try:
        settings = get_settings()
    except ToolkitError as e:
        _fail(str(e), exit_code=1)

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@main.command()
@click.argument("image1", type=click.Path(path_type=Path))
@click.argument("image2", type=click.Path(path_type=Path))
@click.option("--threshold", type=float, default=None, help="Per-pixel sensitivity 0-1 (default: from settings)")
@click.option("--output", "-o", type=click.Path(path_type=Path), default=None, help="Write diff PNG here")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
def compare(image1: Path, image2: Path, threshold: float | None, output: Path | None, as_json: bool) -> None:
    """Compare two screenshots and describe the difference"""
    settings = get_settings()
    try:
        request = ComparisonRequest(
            image1_source=image1,
            image2_source=image2,
            threshold=settings.default_threshold if threshold is None else threshold,
            output_path=output,
        )
    except ValueError as e:
        _fail(f"Invalid comparison options: {e}", exit_code=2)

    result = _run(ImageComparator().compare(request))
    _print_comparison(result, as_json)
    if output is not None and not as_json:
        console.print(f"✅ Diff image saved: [green]{output}[/green]")


@main.command("capture-web")
@click.argument("url")
@click.argument("output", type=click.Path(path_type=Path))
@capture_options
def capture_web(url: str, output: Path, **options: Any) -> None:
    """Screenshot a web page"""
    target = _build_target(CaptureTarget, url, **_target_kwargs(**options))

    async def _capture() -> CaptureResult:
        async with BrowserManager() as browser:
            return await WebCapture(browser).capture(target)

    _save_capture(_run(_capture()), output)


@main.command("capture-figma")
@click.argument("url")
@click.argument("output", type=click.Path(path_type=Path))
@click.option("--node-id", default=None, help="Figma node to focus (overrides the URL)")
@capture_options
def capture_figma(url: str, output: Path, node_id: str | None, **options: Any) -> None:
    """Screenshot a Figma design"""
    target = _build_target(FigmaCaptureTarget, url, node_id=node_id, **_target_kwargs(**options))

    async def _capture() -> CaptureResult:
        async with BrowserManager() as browser:
            return await FigmaCapture(browser).capture(target)

    _save_capture(_run(_capture()), output)


@main.command("capture-and-compare")
@click.argument("web_url")
@click.argument("figma_url")
@click.option("--output-dir", type=click.Path(path_type=Path), default=None, help="Default: from settings")
@click.option("--threshold", type=float, default=None, help="Per-pixel sensitivity 0-1 (default: from settings)")
@click.option("--width", type=int, default=1200, show_default=True)
@click.option("--height", type=int, default=800, show_default=True)
@click.option("--wait-for-timeout", type=int, default=3000, show_default=True, help="Extra wait (ms)")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
def capture_and_compare(
    web_url: str,
    figma_url: str,
    output_dir: Path | None,
    threshold: float | None,
    width: int,
    height: int,
    wait_for_timeout: int,
    as_json: bool,
) -> None:
    """Capture a web page and a Figma design, then compare them"""
    settings = get_settings()
    output_dir = output_dir or settings.output_dir
    output_dir.mkdir(parents=True, exist_ok=True)

    shared = {"width": width, "height": height, "wait_for_timeout": wait_for_timeout}
    web_target = _build_target(CaptureTarget, web_url, **shared)
    figma_target = _build_target(FigmaCaptureTarget, figma_url, **shared)

    web_path = output_dir / "web_capture.png"
    figma_path = output_dir / "figma_capture.png"
    diff_path = output_dir / "web_vs_figma_diff.png"

    try:
        request = ComparisonRequest(
            image1_source=web_path,
            image2_source=figma_path,
            threshold=settings.default_threshold if threshold is None else threshold,
            output_path=diff_path,
        )
    except ValueError as e:
        _fail(f"Invalid comparison options: {e}", exit_code=2)

    if not as_json:
        console.print(
            Panel.fit(
                "[bold cyan]Capture and compare[/bold cyan]\n"
                f"Web: {web_url}\nFigma: {figma_url}",
                border_style="cyan",
            )
        )

    async def _capture_both() -> None:
        async with BrowserManager() as browser:
            web_result = await WebCapture(browser).capture(web_target)
            web_path.write_bytes(web_result.image_bytes)
            figma_result = await FigmaCapture(browser).capture(figma_target)
            figma_path.write_bytes(figma_result.image_bytes)

    _run(_capture_both())
    result = _run(ImageComparator().compare(request))
    _print_comparison(result, as_json)


if __name__ == "__main__":
    main()
