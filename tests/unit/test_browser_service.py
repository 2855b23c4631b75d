"""
Unit tests for browser lifecycle management.
"""
import asyncio

import pytest

from annur_og.core.config import Settings
from annur_og.services.browser_service import (
    BROWSER_ARGS,
    BrowserManager,
    EphemeralBrowser,
    launch_options,
)


class TestLaunchOptions:

    def test_hardened_profile(self, monkeypatch):
        monkeypatch.delenv("PUPPETEER_EXECUTABLE_PATH", raising=False)
        options = launch_options(Settings(ENVIRONMENT="testing"))
        assert options["headless"] is True
        assert options["args"] == BROWSER_ARGS
        for flag in ("--no-sandbox", "--disable-gpu", "--disable-dev-shm-usage"):
            assert flag in options["args"]
        assert "executable_path" not in options

    def test_executable_path_override(self):
        settings = Settings(ENVIRONMENT="testing", PUPPETEER_EXECUTABLE_PATH="/usr/bin/chromium")
        assert launch_options(settings)["executable_path"] == "/usr/bin/chromium"

    def test_executable_path_from_environment(self, monkeypatch):
        monkeypatch.setenv("PUPPETEER_EXECUTABLE_PATH", "/opt/chrome/chrome")
        assert launch_options(Settings(ENVIRONMENT="testing"))["executable_path"] == "/opt/chrome/chrome"


class TestBrowserManager:

    @pytest.mark.asyncio
    async def test_launch_is_lazy(self, settings, mock_playwright):
        BrowserManager(settings)
        mock_playwright['playwright'].chromium.launch.assert_not_called()

    @pytest.mark.asyncio
    async def test_browser_is_reused(self, settings, mock_playwright):
        manager = BrowserManager(settings)

        async with manager.acquire() as first:
            pass
        async with manager.acquire() as second:
            pass

        assert first is second
        assert manager.launch_count == 1
        mock_playwright['playwright'].chromium.launch.assert_awaited_once_with(**launch_options(settings))

    @pytest.mark.asyncio
    async def test_concurrent_first_requests_launch_once(self, settings, mock_playwright):
        manager = BrowserManager(settings)

        browsers = await asyncio.gather(*[manager.get_browser() for _ in range(5)])

        assert len({id(b) for b in browsers}) == 1
        assert len(mock_playwright['browsers']) == 1

    @pytest.mark.asyncio
    async def test_disconnected_browser_is_relaunched(self, settings, mock_playwright):
        manager = BrowserManager(settings)
        first = await manager.get_browser()
        first.is_connected.return_value = False

        second = await manager.get_browser()

        assert second is not first
        assert manager.launch_count == 2
        assert manager.is_running

    @pytest.mark.asyncio
    async def test_close_stops_browser_and_playwright(self, settings, mock_playwright):
        manager = BrowserManager(settings)
        browser = await manager.get_browser()

        await manager.close()

        browser.close.assert_awaited_once()
        mock_playwright['playwright'].stop.assert_awaited_once()
        assert not manager.is_running

    @pytest.mark.asyncio
    async def test_close_without_launch(self, settings, mock_playwright):
        manager = BrowserManager(settings)

        await manager.close()

        mock_playwright['playwright'].stop.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_launch_failure_propagates(self, settings, mock_playwright):
        mock_playwright['playwright'].chromium.launch.side_effect = RuntimeError("launch failed")
        manager = BrowserManager(settings)

        with pytest.raises(RuntimeError, match="launch failed"):
            await manager.get_browser()
        assert not manager.is_running


class TestEphemeralBrowser:

    @pytest.mark.asyncio
    async def test_launches_and_closes_per_request(self, settings, mock_playwright):
        provider = EphemeralBrowser(settings)

        async with provider.acquire() as first:
            first.close.assert_not_awaited()
        async with provider.acquire() as second:
            pass

        assert first is not second
        first.close.assert_awaited_once()
        second.close.assert_awaited_once()
        assert mock_playwright['playwright'].chromium.launch.await_count == 2

    @pytest.mark.asyncio
    async def test_browser_closed_when_render_fails(self, settings, mock_playwright):
        provider = EphemeralBrowser(settings)

        with pytest.raises(ValueError):
            async with provider.acquire():
                raise ValueError("render failed")

        mock_playwright['browsers'][0].close.assert_awaited_once()
