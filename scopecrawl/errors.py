"""Exceptions raised by the crawler pipeline."""

from __future__ import annotations


class CrawlError(RuntimeError):
    """Base class for crawler failures."""


class InvalidUrlError(CrawlError, ValueError):
    """The seed URL is not an absolute URL."""


class RenderError(CrawlError):
    """A page could not be navigated to or loaded."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class ExtractionError(CrawlError):
    """A rendered document could not be processed."""


class BrowserLaunchError(CrawlError):
    """The browser session could not be started or released."""
