"""
Open Graph (OG) Image Generation Service.
Uses Playwright to render the story template to PNG images for social sharing.
"""
import asyncio
from contextlib import AbstractAsyncContextManager
from typing import Optional, Protocol

from playwright.async_api import Browser

from ..core.config import Settings, get_settings
from ..utils.debug import print_step
from .template_service import RenderRequest, render_og_html


class OGImageGenerationError(Exception):
    """Raised when the browser fails to produce an OG image."""


class BrowserProvider(Protocol):
    def acquire(self) -> AbstractAsyncContextManager[Browser]: ...

    async def close(self) -> None: ...


class OGService:
    """Service for generating Open Graph images for social media sharing."""

    def __init__(self, browser_provider: BrowserProvider, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.browser_provider = browser_provider
        self._render_slots = asyncio.Semaphore(self.settings.MAX_CONCURRENT_RENDERS)

    def render_html(self, request: RenderRequest) -> str:
        return render_og_html(
            request.title,
            request.voice,
            request.date,
            request.content,
            preview_length=self.settings.CONTENT_PREVIEW_LENGTH,
            always_append_ellipsis=self.settings.ALWAYS_APPEND_ELLIPSIS,
            font_stylesheet_url=self.settings.FONT_STYLESHEET_URL,
            watermark_image_url=self.settings.WATERMARK_IMAGE_URL,
            width=self.settings.VIEWPORT_WIDTH,
            height=self.settings.VIEWPORT_HEIGHT,
        )

    async def generate_image(self, request: RenderRequest) -> bytes:
        """
        Generate an Open Graph image for a story.

        Args:
            request: Title, voice, date and content to display

        Returns:
            PNG image bytes sized for Open Graph (1200x630)

        Raises:
            OGImageGenerationError: If any browser step fails
        """
        print_step("OG Image Generation", {
            "title_length": len(request.title),
            "content_length": len(request.content),
        }, "input")
        return await self.render_png(self.render_html(request))

    async def render_png(self, html: str) -> bytes:
        """Screenshot ``html`` in a fresh page of a provided browser."""
        try:
            async with self._render_slots:
                async with self.browser_provider.acquire() as browser:
                    screenshot_bytes = await self._screenshot(browser, html)
        except Exception as e:
            print_step("OG Image Generation Error", str(e), "error")
            raise OGImageGenerationError(f"Failed to generate OG image: {e}") from e

        if not screenshot_bytes:
            print_step("OG Image Generation Error", "Empty screenshot", "error")
            raise OGImageGenerationError("Failed to generate OG image: empty screenshot")

        print_step("OG Image Generated", {
            "image_size_bytes": len(screenshot_bytes)
        }, "output")
        return screenshot_bytes

    async def _screenshot(self, browser: Browser, html: str) -> bytes:
        page = await browser.new_page()
        try:
            # Viewport is set explicitly, independent of any window size
            await page.set_viewport_size({
                "width": self.settings.VIEWPORT_WIDTH,
                "height": self.settings.VIEWPORT_HEIGHT,
            })

            # Wait for the remote font and watermark to finish loading
            await page.set_content(
                html,
                wait_until="networkidle",
                timeout=self.settings.RENDER_TIMEOUT_MS,
            )

            return await page.screenshot(
                type='png',
                full_page=False
            )
        finally:
            await page.close()
