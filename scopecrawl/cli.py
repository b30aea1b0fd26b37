"""Command-line entry point for the scoped crawler."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import time
from pathlib import Path
from typing import Sequence

from .config import (
    DEFAULT_MAX_PAGES,
    DEFAULT_NAVIGATION_TIMEOUT,
    DEFAULT_OUTPUT,
    DEFAULT_SELECTOR,
    DEFAULT_SELECTOR_TIMEOUT,
    OUTPUT_FORMATS,
    CrawlConfig,
)
from .crawler import CrawlEvent, CrawlRun, CrawlState, Crawler, EventKind
from .errors import CrawlError
from .output import summarize, write_results
from .renderer import PlaywrightRenderer
from .urls import is_valid_url

logger = logging.getLogger("scopecrawl.cli")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="scopecrawl",
        description="Render pages in a headless browser and crawl links within a URL scope.",
    )
    parser.add_argument("url", help="URL to start crawling from")
    parser.add_argument(
        "-s",
        "--selector",
        default=DEFAULT_SELECTOR,
        help="CSS selector of the content to extract (default: body)",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=DEFAULT_OUTPUT,
        type=Path,
        help="Output file (default: output.json)",
    )
    parser.add_argument(
        "-m",
        "--max",
        dest="max_pages",
        type=int,
        default=DEFAULT_MAX_PAGES,
        help="Maximum pages to crawl (default: 10)",
    )
    parser.add_argument(
        "--match",
        default=None,
        help="URL pattern to crawl; supports * and ** (default: everything under the start URL)",
    )
    parser.add_argument(
        "-f",
        "--format",
        dest="output_format",
        choices=OUTPUT_FORMATS,
        default="json",
        help="Output format (default: json)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_NAVIGATION_TIMEOUT,
        help="Navigation timeout in seconds",
    )
    parser.add_argument(
        "--selector-timeout",
        type=float,
        default=DEFAULT_SELECTOR_TIMEOUT,
        help="Seconds to wait for the selector before extracting anyway",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser.parse_args(argv)


def log_event(event: CrawlEvent) -> None:
    """Report crawl progress through the CLI logger."""
    if event.kind is EventKind.STARTED:
        logger.info("Starting crawler at %s", event.url)
    elif event.kind is EventKind.PAGE_STARTED:
        logger.info("Crawling (%d/%d): %s", event.pages + 1, event.max_pages, event.url)
    elif event.kind is EventKind.PAGE_FAILED:
        logger.warning("Failed to crawl %s: %s", event.url, event.message)
    elif event.kind is EventKind.ABORTED:
        logger.warning("Crawl interrupted; keeping %s", event.message)


def report(run: CrawlRun, output_path: Path, elapsed: float) -> None:
    """Log the per-page listing and crawl statistics."""
    logger.info(
        "Crawled %d page(s) in %.2fs -> %s",
        len(run.results),
        elapsed,
        output_path,
    )
    for index, result in enumerate(run.results, start=1):
        logger.info("  %d. %s", index, result.title)
        logger.info("     %s", result.url)
        logger.info(
            "     Links: %d internal, %d external",
            len(result.links.internal),
            len(result.links.external),
        )
        logger.info(
            "     Media: %d images, %d videos",
            len(result.media.images),
            len(result.media.videos),
        )

    summary = summarize(run.results, failures=len(run.failures))
    logger.info("Statistics:")
    logger.info("  Total size: %.2f KB", summary.total_size_kb)
    logger.info("  Average content: %d characters", summary.average_content_length)
    logger.info("  Total links: %d", summary.total_links)
    logger.info("  Total images: %d", summary.total_images)
    if summary.failures:
        logger.info("  Skipped pages: %d", summary.failures)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )

    if not is_valid_url(args.url):
        logger.error("Invalid URL: %s", args.url)
        return 1

    try:
        config = CrawlConfig(
            url=args.url,
            selector=args.selector,
            max_pages=args.max_pages,
            match=args.match,
            output=args.output,
            output_format=args.output_format,
            navigation_timeout=args.timeout,
            selector_timeout=args.selector_timeout,
        )
    except ValueError as exc:
        logger.error("%s", exc)
        return 1

    crawler = Crawler(config, renderer_factory=PlaywrightRenderer, on_event=log_event)
    overall_start = time.perf_counter()
    try:
        run = asyncio.run(crawler.run())
    except CrawlError as exc:
        logger.error("Error: %s", exc)
        return 1
    except KeyboardInterrupt:
        crawler.abort()
        run = crawler.as_run()
        logger.warning("Interrupted; writing %d captured page(s)", len(run.results))
    elapsed = time.perf_counter() - overall_start

    output_path = write_results(run.results, config.output, config.output_format)
    report(run, output_path, elapsed)
    return 130 if run.state is CrawlState.ABORTED else 0


if __name__ == "__main__":
    sys.exit(main())
