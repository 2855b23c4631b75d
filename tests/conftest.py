"""
Pytest configuration and fixtures for OG generator tests.
Playwright is replaced by mocks; no real browser is launched.
"""
import hashlib
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, Mock, patch

import pytest
from fastapi.testclient import TestClient

from annur_og.core.config import Settings
from annur_og.main import create_app

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def make_page():
    """Mock page whose screenshot depends on the HTML it was given."""
    page = AsyncMock()
    state = {}

    async def set_content(html, **kwargs):
        state["html"] = html

    async def screenshot(**kwargs):
        return PNG_SIGNATURE + hashlib.sha256(state["html"].encode("utf-8")).digest()

    page.set_content.side_effect = set_content
    page.screenshot.side_effect = screenshot
    return page


def make_browser():
    browser = AsyncMock()
    browser.pages = []

    async def new_page():
        page = make_page()
        browser.pages.append(page)
        return page

    browser.new_page.side_effect = new_page
    browser.is_connected = Mock(return_value=True)
    return browser


class StubBrowserProvider:
    """Hands out one mock browser, like the shared manager does."""

    def __init__(self, browser):
        self.browser = browser
        self.acquired = 0
        self.closed = False

    @asynccontextmanager
    async def acquire(self):
        self.acquired += 1
        yield self.browser

    async def close(self):
        self.closed = True


@pytest.fixture
def settings():
    return Settings(ENVIRONMENT="testing", MAX_CONCURRENT_RENDERS=4)


@pytest.fixture
def mock_browser():
    return make_browser()


@pytest.fixture
def browser_provider(mock_browser):
    return StubBrowserProvider(mock_browser)


@pytest.fixture
def app(settings, browser_provider):
    return create_app(settings, browser_provider=browser_provider)


@pytest.fixture
def client(app):
    """Test client for the server application."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def mock_playwright():
    """Patch ``async_playwright`` in the browser service."""
    with patch('annur_og.services.browser_service.async_playwright') as mock_async_playwright:
        playwright = AsyncMock()
        browsers = []

        async def launch(**kwargs):
            browser = make_browser()
            browsers.append(browser)
            return browser

        playwright.chromium.launch = AsyncMock(side_effect=launch)

        # Shared manager: async_playwright().start()
        mock_async_playwright.return_value.start = AsyncMock(return_value=playwright)
        # Ephemeral browser: async with async_playwright() as p
        mock_async_playwright.return_value.__aenter__.return_value = playwright

        yield {
            'async_playwright': mock_async_playwright,
            'playwright': playwright,
            'browsers': browsers,
        }
