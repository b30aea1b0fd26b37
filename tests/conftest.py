"""Shared fixtures for scopecrawl tests."""

import asyncio
import os
import signal
from typing import Dict, Iterable, Optional

import pytest

from scopecrawl.content import extract_content
from scopecrawl.errors import RenderError
from scopecrawl.models import PageResult
from scopecrawl.renderer import RenderedPage


def html_page(title: str, *hrefs: str, body: str = "") -> str:
    """Build a small HTML document linking to ``hrefs`` in order."""
    anchors = "".join(f'<a href="{href}">{href}</a>' for href in hrefs)
    return (
        f"<html><head><title>{title}</title></head>"
        f"<body><main><h1>{title}</h1>{body}{anchors}</main></body></html>"
    )


def make_result(url: str, html: str) -> PageResult:
    return PageResult.from_extraction(url, html, extract_content(html, url, "body"))


class FakeRenderer:
    """In-memory stand-in for the browser session."""

    def __init__(
        self,
        pages: Dict[str, str],
        fail: Iterable[str] = (),
        hang: Optional[str] = None,
        interrupt: Optional[str] = None,
    ) -> None:
        self.pages = pages
        self.fail = set(fail)
        self.hang = hang
        self.interrupt = interrupt
        self.hanging = asyncio.Event()
        self.calls = []
        self.entered = False
        self.closed = False

    async def __aenter__(self):
        self.entered = True
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.closed = True

    async def render(self, url: str, selector: str) -> RenderedPage:
        self.calls.append(url)
        if url in self.fail:
            raise RenderError(url, "navigation timed out")
        if url == self.hang:
            self.hanging.set()
            await asyncio.Event().wait()
        if url == self.interrupt:
            os.kill(os.getpid(), signal.SIGINT)
            await asyncio.Event().wait()
        if url not in self.pages:
            raise RenderError(url, "net::ERR_NAME_NOT_RESOLVED")
        return RenderedPage(url=url, html=self.pages[url])

    def factory(self, config):
        return self


@pytest.fixture
def site():
    """A small site: home -> a, b; a -> c; b -> a, d, home."""
    return {
        "https://ex.com": html_page("Home", "/a", "/b", "https://other.com/x"),
        "https://ex.com/a": html_page("A", "/c", "#top"),
        "https://ex.com/b": html_page("B", "/a", "/d", "/"),
        "https://ex.com/c": html_page("C"),
        "https://ex.com/d": html_page("D"),
    }
