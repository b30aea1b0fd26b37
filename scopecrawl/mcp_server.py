"""MCP server exposing the scoped crawler as a tool."""

from __future__ import annotations

import logging
from typing import Optional

from mcp.server.fastmcp import FastMCP

from .config import DEFAULT_MAX_PAGES, DEFAULT_SELECTOR, CrawlConfig
from .crawler import run_crawl
from .markdown import compose_document

logger = logging.getLogger("scopecrawl.mcp")
logger.setLevel(logging.ERROR)

mcp = FastMCP(name="scopecrawl")


@mcp.tool()
async def crawl(
    url: str,
    max_pages: int = DEFAULT_MAX_PAGES,
    match: Optional[str] = None,
    selector: str = DEFAULT_SELECTOR,
) -> str:
    """Crawl pages under a URL in a headless browser and return them as one Markdown document."""
    config = CrawlConfig(url=url, selector=selector, max_pages=max_pages, match=match)
    run = await run_crawl(config)
    if not run.results:
        raise RuntimeError(f"Failed to crawl {url}")
    return compose_document(run.results)


def main() -> None:
    """Entry point for running the MCP server."""
    logging.basicConfig(level=logging.ERROR)
    mcp.run()


if __name__ == "__main__":
    main()
