"""
Web page capture
"""

import logging

from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from screenshot_toolkit.capture.base import BaseCapture
from screenshot_toolkit.capture.models import CaptureTarget

logger = logging.getLogger(__name__)


class WebCapture(BaseCapture):
    """
    Screenshot an arbitrary web page

    Example:
        async with BrowserManager() as browser:
            result = await WebCapture(browser).capture(
                CaptureTarget(url="http://localhost:3000", width=1200, height=800)
            )
    """

    label = "Web page capture"

    async def navigate(self, page: Page, target: CaptureTarget) -> str:
        url = str(target.url)
        logger.info(f"Navigating to: {url}")
        await page.goto(url, wait_until=target.wait_until)
        return url

    async def wait_until_ready(self, page: Page, target: CaptureTarget) -> None:
        # Network idle and selector waits are best effort
        if target.wait_for_network_idle:
            try:
                await page.wait_for_load_state(
                    "networkidle", timeout=self.settings.network_idle_timeout_ms
                )
            except PlaywrightTimeoutError:
                logger.warning("Network idle wait timed out, continuing...")

        if target.wait_for_timeout > 0:
            await page.wait_for_timeout(target.wait_for_timeout)

        if target.wait_for_selector:
            try:
                await page.wait_for_selector(
                    target.wait_for_selector, timeout=self.settings.selector_timeout_ms
                )
            except PlaywrightTimeoutError:
                logger.warning(f"Selector '{target.wait_for_selector}' wait timed out, continuing...")
