"""
Browser automation with Playwright

Provides the headless browser used for page and design captures.
"""

from screenshot_toolkit.browser.manager import BrowserManager

__all__ = ["BrowserManager"]
