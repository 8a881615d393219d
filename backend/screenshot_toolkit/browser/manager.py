"""
Browser manager - Playwright browser automation

Handles headless Chromium lifecycle. The manager is an explicitly owned
handle: callers start and stop it (or use it as an async context manager).
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from playwright.async_api import Browser, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError

from screenshot_toolkit.core.config import Settings, get_settings
from screenshot_toolkit.core.exceptions import CaptureError

logger = logging.getLogger(__name__)

LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--no-first-run",
    "--no-zygote",
    "--disable-gpu",
]

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

DEFAULT_VIEWPORT_WIDTH = 1920
DEFAULT_VIEWPORT_HEIGHT = 1080


class BrowserManager:
    """
    Manage a headless Playwright browser

    Example:
        async with BrowserManager() as manager:
            async with manager.open_page(width=1200, height=800) as page:
                await page.goto("https://example.com")
                png = await page.screenshot()
    """

    def __init__(
        self,
        headless: bool | None = None,
        channel: str | None = None,
        settings: Settings | None = None,
    ):
        """
        Initialize browser manager

        Args:
            headless: Run browser in headless mode (default: from settings)
            channel: Installed browser channel, e.g. "chrome" (default: from settings)
            settings: Settings to use instead of the global settings
        """
        self.settings = settings or get_settings()
        self.headless = self.settings.headless if headless is None else headless
        self.channel = channel or self.settings.browser_channel

        self._playwright: Playwright | None = None
        self._browser: Browser | None = None

    async def __aenter__(self):
        """Async context manager entry"""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        await self.stop()

    @property
    def is_running(self) -> bool:
        return self._browser is not None

    async def start(self) -> None:
        """Start browser instance"""
        if self._browser is not None:
            logger.warning("Browser already started")
            return

        logger.info("[BROWSER] Starting Playwright browser...")
        try:
            self._playwright = await async_playwright().start()
        except PlaywrightError as e:
            raise CaptureError(f"Playwright driver failed to start: {e}") from e

        launch_kwargs = {"headless": self.headless, "args": LAUNCH_ARGS}
        if self.channel:
            launch_kwargs["channel"] = self.channel

        try:
            self._browser = await self._playwright.chromium.launch(**launch_kwargs)
        except Exception as e:
            await self._playwright.stop()
            self._playwright = None
            if isinstance(e, PlaywrightError):
                logger.error(f"[BROWSER] Browser launch failed: {e}")
                raise CaptureError(
                    f"Browser launch failed: {e}",
                    recovery_hint="Run `playwright install chromium`",
                ) from e
            raise

        logger.info("[BROWSER] Browser started successfully")

    async def stop(self) -> None:
        """Stop browser instance"""
        if self._browser:
            await self._browser.close()
            self._browser = None

        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

        logger.info("[BROWSER] Browser stopped")

    async def new_page(
        self,
        width: int = DEFAULT_VIEWPORT_WIDTH,
        height: int = DEFAULT_VIEWPORT_HEIGHT,
        scale: float = 1.0,
    ) -> Page:
        """
        Create a page in its own browser context

        Args:
            width: Viewport width in CSS pixels
            height: Viewport height in CSS pixels
            scale: Device scale factor

        Returns:
            Playwright Page object (close it with page.context.close())

        Raises:
            RuntimeError: If browser not started
        """
        if self._browser is None:
            raise RuntimeError("Browser not started. Call start() first.")

        context = await self._browser.new_context(
            viewport={"width": width, "height": height},
            device_scale_factor=scale,
            user_agent=USER_AGENT,
            ignore_https_errors=True,
        )
        context.set_default_navigation_timeout(self.settings.navigation_timeout_ms)
        return await context.new_page()

    @asynccontextmanager
    async def open_page(
        self,
        width: int = DEFAULT_VIEWPORT_WIDTH,
        height: int = DEFAULT_VIEWPORT_HEIGHT,
        scale: float = 1.0,
    ) -> AsyncIterator[Page]:
        """Yield a fresh page and always close its context afterwards"""
        page = await self.new_page(width=width, height=height, scale=scale)
        try:
            yield page
        finally:
            await page.context.close()
