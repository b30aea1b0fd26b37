"""Markdown rendering for extracted page content."""

from __future__ import annotations

import logging
from typing import Iterable

from bs4 import BeautifulSoup, Comment
from markdownify import ATX, MarkdownConverter

from .models import PageResult

logger = logging.getLogger("scopecrawl")

PAGE_DELIMITER = "---"


class PageMarkdownConverter(MarkdownConverter):
    """markdownify converter with ATX headings and fenced code blocks."""

    def __init__(self, **options) -> None:
        options.setdefault("heading_style", ATX)
        options.setdefault("bullets", "-")
        super().__init__(**options)

    def convert_html(self, html: str) -> str:
        soup = BeautifulSoup(html, "html.parser")
        for comment in soup.find_all(string=lambda node: isinstance(node, Comment)):
            comment.extract()
        return self.convert_soup(soup).strip()


_converter = PageMarkdownConverter()


def html_to_markdown(html: str) -> str:
    """Convert sanitized markup to Markdown, dropping HTML comments."""
    if not html or not html.strip():
        return ""
    return _converter.convert_html(html)


def compose_page(result: PageResult) -> str:
    """Render one page as a Markdown section."""
    return f"# {result.title}\n\n**URL:** {result.url}\n\n{result.markdown}\n\n{PAGE_DELIMITER}\n"


def compose_document(results: Iterable[PageResult]) -> str:
    """Flatten crawl results into a single Markdown document."""
    sections = [compose_page(result) for result in results]
    logger.debug("Composed Markdown document from %d page(s)", len(sections))
    return "\n".join(sections)
