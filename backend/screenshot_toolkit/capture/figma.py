"""
Figma design capture

Renders a Figma or FigJam file in the browser viewer and screenshots it.
"""

import logging
from typing import Any
from urllib.parse import urlencode

from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from screenshot_toolkit.capture.base import BaseCapture
from screenshot_toolkit.capture.models import (
    CaptureTarget,
    FigmaCaptureTarget,
    FigmaFileRef,
    parse_figma_url,
)

logger = logging.getLogger(__name__)

FIGMA_VIEWER_URL = "https://www.figma.com/file/{file_key}"

# Viewer is ready once the canvas exists and no loading indicator remains
FIGMA_READY_SCRIPT = """() => {
    const canvas = document.querySelector("canvas");
    const loading = document.querySelectorAll('[data-testid="loading"]');
    return !!canvas && loading.length === 0;
}"""


def build_viewer_url(ref: FigmaFileRef) -> str:
    url = FIGMA_VIEWER_URL.format(file_key=ref.file_key)
    if ref.node_id:
        url += "?" + urlencode({"node-id": ref.node_id})
    return url


class FigmaCapture(BaseCapture):
    """Screenshot a Figma design through the web viewer"""

    label = "Figma capture"

    async def navigate(self, page: Page, target: CaptureTarget) -> str:
        ref = self._file_ref(target)
        viewer_url = build_viewer_url(ref)
        logger.info(f"Opening Figma file {ref.file_key} (node={ref.node_id}): {viewer_url}")
        await page.goto(viewer_url, wait_until=target.wait_until)
        return viewer_url

    async def wait_until_ready(self, page: Page, target: CaptureTarget) -> None:
        try:
            await page.wait_for_function(FIGMA_READY_SCRIPT, timeout=target.wait_for_timeout)
        except PlaywrightTimeoutError:
            # The viewer may already be usable
            logger.warning("Figma load timeout, proceeding with capture...")

        if target.wait_for_selector:
            await page.wait_for_selector(
                target.wait_for_selector, timeout=self.settings.selector_timeout_ms
            )

    def build_metadata(
        self,
        target: CaptureTarget,
        width: int,
        height: int,
        page_info: dict[str, Any],
    ) -> dict[str, Any]:
        metadata = super().build_metadata(target, width, height, page_info)
        ref = self._file_ref(target)
        metadata["file_key"] = ref.file_key
        metadata["node_id"] = ref.node_id
        return metadata

    def _file_ref(self, target: CaptureTarget) -> FigmaFileRef:
        ref = parse_figma_url(str(target.url))
        if isinstance(target, FigmaCaptureTarget) and target.node_id:
            return FigmaFileRef(file_key=ref.file_key, node_id=target.node_id)
        return ref
