"""
Shared capture flow

Subclasses decide how to reach the page and when it is ready; rendering
and metadata collection are common.
"""

import logging
from datetime import UTC, datetime
from typing import Any

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from screenshot_toolkit.browser.manager import (
    DEFAULT_VIEWPORT_HEIGHT,
    DEFAULT_VIEWPORT_WIDTH,
    BrowserManager,
)
from screenshot_toolkit.capture.models import CaptureFormat, CaptureResult, CaptureTarget, mime_type_for
from screenshot_toolkit.core.config import Settings
from screenshot_toolkit.core.exceptions import CaptureError

logger = logging.getLogger(__name__)


class BaseCapture:
    """
    Base class for captures through a BrowserManager

    The browser is owned by the caller; a capture only opens and closes pages.
    """

    #: Prefix for error messages, e.g. "Web page capture failed"
    label = "Capture"

    def __init__(self, browser: BrowserManager, settings: Settings | None = None):
        self.browser = browser
        self.settings = settings or browser.settings

    async def capture(self, target: CaptureTarget) -> CaptureResult:
        """
        Capture a target

        Args:
            target: URL and capture options

        Returns:
            CaptureResult with image bytes, MIME type and metadata

        Raises:
            CaptureError: If navigation or rendering fails
        """
        if target.format is CaptureFormat.SVG:
            raise CaptureError(
                f"{self.label} failed: SVG output is not supported by the browser renderer",
                recovery_hint="Use PNG, JPG or PDF",
            )

        width = target.width or DEFAULT_VIEWPORT_WIDTH
        height = target.height or DEFAULT_VIEWPORT_HEIGHT

        try:
            async with self.browser.open_page(width=width, height=height, scale=target.scale) as page:
                navigated_url = await self.navigate(page, target)
                await self.wait_until_ready(page, target)
                image_bytes = await self.render(page, target)
                page_info = await self.page_info(page)
        except CaptureError:
            raise
        except (PlaywrightError, RuntimeError) as e:
            raise CaptureError(f"{self.label} failed: {e}") from e

        metadata = self.build_metadata(target, width, height, page_info)
        metadata["navigated_url"] = navigated_url
        logger.info(f"{self.label} complete: {len(image_bytes)} bytes from {navigated_url}")

        return CaptureResult(
            image_bytes=image_bytes,
            mime_type=mime_type_for(target.format),
            metadata=metadata,
        )

    async def navigate(self, page: Page, target: CaptureTarget) -> str:
        """Open the target and return the URL actually loaded"""
        raise NotImplementedError

    async def wait_until_ready(self, page: Page, target: CaptureTarget) -> None:
        """Wait for the page to settle before rendering"""
        raise NotImplementedError

    async def render(self, page: Page, target: CaptureTarget) -> bytes:
        """Render the page in the requested format"""
        if target.format is CaptureFormat.PDF:
            return await page.pdf(print_background=True)

        options: dict[str, Any] = {
            "type": "png" if target.format is CaptureFormat.PNG else "jpeg",
            "full_page": target.full_page,
        }
        if target.format is CaptureFormat.JPG:
            options["quality"] = target.quality
        if target.clip is not None and not target.clip.is_empty:
            options["clip"] = target.clip.model_dump()

        return await page.screenshot(**options)

    async def page_info(self, page: Page) -> dict[str, Any]:
        """Collect title, location and viewport from the loaded page"""
        return await page.evaluate(
            """() => ({
                title: document.title,
                url: window.location.href,
                viewport: { width: window.innerWidth, height: window.innerHeight },
            })"""
        )

    def build_metadata(
        self,
        target: CaptureTarget,
        width: int,
        height: int,
        page_info: dict[str, Any],
    ) -> dict[str, Any]:
        return {
            "url": str(target.url),
            "title": page_info.get("title"),
            "format": target.format.value,
            "scale": target.scale,
            "quality": target.quality,
            "dimensions": {"width": width, "height": height},
            "viewport": page_info.get("viewport"),
            "captured_at": datetime.now(UTC).isoformat(),
            "wait_for_selector": target.wait_for_selector,
            "full_page": target.full_page,
        }
