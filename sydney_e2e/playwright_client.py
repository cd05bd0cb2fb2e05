"""
Direct Playwright client used by the bootstrap and the test fixtures.

Usage:
    from sydney_e2e.playwright_client import PlaywrightClient

    async with PlaywrightClient(storage_state_path="playwright/.auth/user.json") as client:
        await client.page.goto("https://demo.athemes.com/sydney-tests/wp-admin/")
"""

import logging
import os
from typing import Any, Dict, Optional

from playwright.async_api import async_playwright, Browser, BrowserContext, Page, Playwright

logger = logging.getLogger(__name__)


class PlaywrightClient:
    """
    In-process Playwright browser with one default context and page.

    When ``storage_state_path`` points at an existing file the default context
    starts from that saved session; a missing file starts anonymous.
    """

    def __init__(
        self,
        browser_type: str = "chromium",
        headless: bool = True,
        timeout: int = 30000,
        storage_state_path: Optional[str] = None,
        viewport: Optional[Dict[str, int]] = None,
    ):
        """
        Args:
            browser_type: Browser to use (chromium, firefox, webkit)
            headless: Run in headless mode
            timeout: Default timeout in milliseconds
            storage_state_path: Saved session to restore into the default context
            viewport: Default viewport, e.g. {"width": 1920, "height": 1080}
        """
        self.browser_type = browser_type
        self.headless = headless
        self.timeout = timeout
        self.storage_state_path = storage_state_path
        self.viewport = viewport

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def connect(self):
        """Launch the browser and open the default context and page."""
        self._playwright = await async_playwright().start()

        if self.browser_type == 'firefox':
            self._browser = await self._playwright.firefox.launch(headless=self.headless)
        elif self.browser_type == 'webkit':
            self._browser = await self._playwright.webkit.launch(headless=self.headless)
        else:
            self._browser = await self._playwright.chromium.launch(headless=self.headless)

        storage_state_path = self.storage_state_path
        if storage_state_path and not os.path.exists(storage_state_path):
            logger.warning("storage_state_path does not exist, ignoring: %s", storage_state_path)
            storage_state_path = None

        options: Dict[str, Any] = {}
        if storage_state_path:
            options["storage_state"] = storage_state_path
        if self.viewport:
            options["viewport"] = self.viewport

        self._context = await self.new_context(**options)
        self._page = await self._context.new_page()

    async def new_context(self, **kwargs) -> BrowserContext:
        """
        Create a new browser context with custom options.

        Args:
            **kwargs: Context options (storage_state, viewport, user_agent, etc.)
        """
        if not self._browser:
            raise RuntimeError("Client not connected. Use 'async with' or call connect()")

        context = await self._browser.new_context(**kwargs)
        context.set_default_timeout(self.timeout)
        return context

    async def close(self):
        """Close all connections and cleanup resources."""
        if self._page:
            await self._page.close()
            self._page = None

        if self._context:
            await self._context.close()
            self._context = None

        if self._browser:
            await self._browser.close()
            self._browser = None

        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

    @property
    def browser(self) -> Browser:
        if not self._browser:
            raise RuntimeError("Client not connected")
        return self._browser

    @property
    def context(self) -> BrowserContext:
        if not self._context:
            raise RuntimeError("Client not connected")
        return self._context

    @property
    def page(self) -> Page:
        if not self._page:
            raise RuntimeError("Client not connected or page not created")
        return self._page
