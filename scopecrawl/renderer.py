"""Browser rendering via Playwright."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from playwright.async_api import (
    Browser,
    BrowserContext,
    Error as PlaywrightError,
    Playwright,
    Route,
    TimeoutError as PlaywrightTimeoutError,
    async_playwright,
)

from .config import CrawlConfig
from .errors import BrowserLaunchError, RenderError

logger = logging.getLogger("scopecrawl")


@dataclass
class RenderedPage:
    """HTML captured from a loaded page."""

    url: str
    html: str


class PlaywrightRenderer:
    """Shared Chromium session used for every page of one crawl run.

    Use as an async context manager; the browser is closed on exit no matter
    how the block is left.
    """

    def __init__(self, config: CrawlConfig) -> None:
        self.config = config
        self._playwright_manager = None
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None

    async def __aenter__(self) -> "PlaywrightRenderer":
        try:
            self._playwright_manager = async_playwright()
            self._playwright = await self._playwright_manager.start()
            self._browser = await self._playwright.chromium.launch(headless=self.config.headless)
            self._context = await self._browser.new_context()
            await self._context.route("**/*", self._filter_resources)
        except PlaywrightError as exc:
            await self.close()
            raise BrowserLaunchError(f"Unable to launch browser: {exc}") from exc
        logger.debug("Browser session started")
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def _filter_resources(self, route: Route) -> None:
        if route.request.resource_type in self.config.blocked_resource_types:
            await route.abort()
        else:
            await route.continue_()

    async def close(self) -> None:
        """Release the context, browser and Playwright driver."""
        try:
            if self._context is not None:
                await self._context.close()
            if self._browser is not None:
                await self._browser.close()
        except PlaywrightError as exc:
            logger.debug("Error while closing browser: %s", exc)
        finally:
            self._context = None
            self._browser = None
            if self._playwright is not None:
                await self._playwright.stop()
                self._playwright = None
            self._playwright_manager = None
        logger.debug("Browser session closed")

    async def render(self, url: str, selector: str) -> RenderedPage:
        """Navigate to ``url`` and return its HTML once ``selector`` appears.

        Navigation failures raise :class:`RenderError`; a selector that never
        shows up is ignored and the current document is returned.
        """
        if self._context is None:
            raise RenderError(url, "browser session is not open")

        page = await self._context.new_page()
        try:
            logger.debug("Loading %s", url)
            try:
                await page.goto(
                    url,
                    wait_until=self.config.wait_until,
                    timeout=self.config.navigation_timeout * 1000,
                )
            except PlaywrightTimeoutError as exc:
                raise RenderError(url, f"navigation timed out: {exc}") from exc
            except PlaywrightError as exc:
                raise RenderError(url, str(exc)) from exc

            try:
                await page.wait_for_selector(
                    selector or "body",
                    timeout=self.config.selector_timeout * 1000,
                )
            except PlaywrightTimeoutError:
                logger.debug("Selector %r did not appear on %s", selector, url)
            except PlaywrightError as exc:
                logger.debug("Could not wait for selector %r on %s: %s", selector, url, exc)

            try:
                html = await page.content()
            except PlaywrightError as exc:
                raise RenderError(url, str(exc)) from exc
            return RenderedPage(url=page.url, html=html)
        finally:
            try:
                await page.close()
            except PlaywrightError as exc:
                logger.debug("Error while closing page %s: %s", url, exc)
