"""
Headless browser lifecycle management.

Two providers hand out Playwright Chromium browsers through the same
``acquire()`` / ``close()`` interface:

- ``BrowserManager`` keeps one browser per service instance, launched on
  first use and reused by every request until the service shuts down.
- ``EphemeralBrowser`` launches a fresh browser for each request and closes
  it afterwards, for serverless deployments.
"""
import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from playwright.async_api import Browser, Playwright, async_playwright

from ..core.config import Settings, get_settings
from ..utils.debug import print_step

BROWSER_ARGS = [
    '--no-sandbox',
    '--disable-setuid-sandbox',
    '--disable-dev-shm-usage',
    '--disable-accelerated-2d-canvas',
    '--no-first-run',
    '--no-zygote',
    '--disable-gpu',
    '--disable-background-timer-throttling',
    '--disable-backgrounding-occluded-windows',
    '--disable-renderer-backgrounding',
]


def launch_options(settings: Settings) -> Dict[str, Any]:
    """Chromium launch keyword arguments for the given settings."""
    options: Dict[str, Any] = {
        "headless": settings.BROWSER_HEADLESS,
        "args": list(BROWSER_ARGS),
    }
    if settings.PUPPETEER_EXECUTABLE_PATH:
        options["executable_path"] = settings.PUPPETEER_EXECUTABLE_PATH
    return options


class BrowserManager:
    """Owns the single shared browser of a long-running service."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._lock = asyncio.Lock()
        self.launch_count = 0

    @property
    def is_running(self) -> bool:
        return self._browser is not None and self._browser.is_connected()

    async def get_browser(self) -> Browser:
        """
        Return the shared browser, launching it if needed.

        A browser that has disconnected since the last request is dropped and
        replaced by a new one.
        """
        async with self._lock:
            if self._browser is not None and not self._browser.is_connected():
                print_step("Browser Disconnected", "Relaunching shared browser", "warning")
                self._browser = None

            if self._browser is None:
                if self._playwright is None:
                    self._playwright = await async_playwright().start()
                options = launch_options(self.settings)
                print_step("Browser Launch", {
                    "executable_path": options.get("executable_path"),
                    "headless": options["headless"],
                }, "input")
                self._browser = await self._playwright.chromium.launch(**options)
                self.launch_count += 1
                print_step("Browser Ready", {"launch_count": self.launch_count}, "output")

            return self._browser

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[Browser]:
        yield await self.get_browser()

    async def close(self) -> None:
        """Close the shared browser and stop Playwright."""
        async with self._lock:
            browser, self._browser = self._browser, None
            playwright, self._playwright = self._playwright, None
            try:
                if browser is not None:
                    await browser.close()
            finally:
                if playwright is not None:
                    await playwright.stop()
            if browser is not None:
                print_step("Browser Closed", "Shared browser shut down", "output")


class EphemeralBrowser:
    """Launches one browser per request."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[Browser]:
        async with async_playwright() as p:
            browser = await p.chromium.launch(**launch_options(self.settings))
            try:
                yield browser
            finally:
                await browser.close()

    async def close(self) -> None:
        """Nothing outlives a request."""
