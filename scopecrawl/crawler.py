"""High-level orchestration for rendering pages and following in-scope links."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import AsyncContextManager, Callable, Iterable, List, Optional, Set

from .config import CrawlConfig
from .content import extract_content
from .errors import ExtractionError, InvalidUrlError, RenderError
from .frontier import Frontier
from .models import Link, PageFailure, PageResult
from .renderer import PlaywrightRenderer
from .urls import ScopeMatcher, compile_matcher, is_valid_url, url_key

logger = logging.getLogger("scopecrawl")


class CrawlState(str, Enum):
    """Lifecycle of a single crawl run."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    ABORTED = "aborted"


class EventKind(str, Enum):
    """Progress notifications emitted while crawling."""

    STARTED = "started"
    PAGE_STARTED = "page_started"
    PAGE_CAPTURED = "page_captured"
    PAGE_FAILED = "page_failed"
    COMPLETED = "completed"
    ABORTED = "aborted"


@dataclass(frozen=True)
class CrawlEvent:
    kind: EventKind
    url: str
    pages: int
    max_pages: int
    message: str = ""
    result: Optional[PageResult] = None


EventHandler = Callable[[CrawlEvent], None]
RendererFactory = Callable[[CrawlConfig], AsyncContextManager]


@dataclass
class CrawlRun:
    """Outcome of a crawl: results in visit order plus skipped pages."""

    seed: str
    state: CrawlState
    results: List[PageResult] = field(default_factory=list)
    failures: List[PageFailure] = field(default_factory=list)


class Crawler:
    """Breadth-first crawl bounded by a page budget and a scope pattern.

    Pages are rendered one at a time. A URL is marked visited as soon as it
    is dequeued, so every URL gets at most one render attempt per run.
    """

    def __init__(
        self,
        config: CrawlConfig,
        *,
        renderer_factory: RendererFactory = PlaywrightRenderer,
        on_event: Optional[EventHandler] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> None:
        self.config = config
        self.state = CrawlState.IDLE
        self.frontier = Frontier()
        self.visited: Set[str] = set()
        self.results: List[PageResult] = []
        self.failures: List[PageFailure] = []
        self.matcher: Optional[ScopeMatcher] = None
        self._renderer_factory = renderer_factory
        self._on_event = on_event
        self._cancel_event = cancel_event

    def _emit(self, kind: EventKind, url: str, message: str = "", result: Optional[PageResult] = None) -> None:
        if self._on_event is None:
            return
        self._on_event(
            CrawlEvent(
                kind=kind,
                url=url,
                pages=len(self.results),
                max_pages=self.config.max_pages,
                message=message,
                result=result,
            )
        )

    @property
    def budget_reached(self) -> bool:
        return len(self.results) >= self.config.max_pages

    async def run(self) -> CrawlRun:
        """Crawl from the configured seed and return the accumulated results."""
        if self.state is not CrawlState.IDLE:
            raise RuntimeError("A Crawler instance can only run once")

        seed = self.config.url
        if not is_valid_url(seed):
            raise InvalidUrlError(f"Invalid URL: {seed}")

        matcher = compile_matcher(self.config.match_pattern)
        self.matcher = matcher
        self.frontier.push(seed)
        self.state = CrawlState.RUNNING
        logger.debug("Crawling %s (scope %s, max %d pages)", seed, matcher.pattern, self.config.max_pages)
        self._emit(EventKind.STARTED, seed)

        try:
            async with self._renderer_factory(self.config) as renderer:
                await self._crawl(renderer, matcher)
        except asyncio.CancelledError:
            logger.debug("Crawl of %s cancelled", seed)
            self.state = CrawlState.ABORTED
            task = asyncio.current_task()
            if task is not None and hasattr(task, "uncancel"):
                task.uncancel()
        except BaseException:
            self.state = CrawlState.ABORTED
            raise

        if self.state is CrawlState.RUNNING:
            self.state = CrawlState.COMPLETED
        self._emit(
            EventKind.COMPLETED if self.state is CrawlState.COMPLETED else EventKind.ABORTED,
            seed,
            message=f"{len(self.results)} page(s) captured",
        )
        return self.as_run()

    def abort(self) -> None:
        """Mark an unfinished run as aborted, keeping what was captured."""
        if self.state in (CrawlState.IDLE, CrawlState.RUNNING):
            self.state = CrawlState.ABORTED

    def as_run(self) -> CrawlRun:
        """Snapshot of the results captured so far."""
        return CrawlRun(
            seed=self.config.url,
            state=self.state,
            results=list(self.results),
            failures=list(self.failures),
        )

    async def _crawl(self, renderer, matcher: ScopeMatcher) -> None:
        while len(self.frontier) and not self.budget_reached:
            if self._cancel_event is not None and self._cancel_event.is_set():
                self.state = CrawlState.ABORTED
                return

            url, key = self.frontier.pop()
            if key in self.visited:
                continue
            self.visited.add(key)
            self._emit(EventKind.PAGE_STARTED, url)

            result = await self._visit(renderer, url)
            if result is None:
                continue
            self.results.append(result)
            self._emit(EventKind.PAGE_CAPTURED, url, result=result)

            if not self.budget_reached:
                added = self._enqueue(result.links.internal, matcher)
                logger.debug("Queued %d new link(s) from %s", added, url)

    async def _visit(self, renderer, url: str) -> Optional[PageResult]:
        try:
            rendered = await renderer.render(url, self.config.selector)
            extraction = extract_content(rendered.html, url, self.config.selector)
        except (RenderError, ExtractionError) as exc:
            self._record_failure(url, str(exc))
            return None
        except Exception as exc:  # pylint: disable=broad-except
            logger.exception("Unexpected error crawling %s", url)
            self._record_failure(url, repr(exc))
            return None
        return PageResult.from_extraction(url, rendered.html, extraction)

    def _record_failure(self, url: str, reason: str) -> None:
        logger.debug("Failed to crawl %s: %s", url, reason)
        self.failures.append(PageFailure(url=url, reason=reason))
        self._emit(EventKind.PAGE_FAILED, url, message=reason)

    def _enqueue(self, links: Iterable[Link], matcher: ScopeMatcher) -> int:
        """Queue in-scope links that were neither visited nor already queued."""
        added = 0
        for link in links:
            if not matcher.matches(link.href):
                continue
            if url_key(link.href) in self.visited:
                continue
            if self.frontier.push(link.href):
                added += 1
        return added


async def run_crawl(
    config: CrawlConfig,
    *,
    renderer_factory: RendererFactory = PlaywrightRenderer,
    on_event: Optional[EventHandler] = None,
    cancel_event: Optional[asyncio.Event] = None,
) -> CrawlRun:
    """Run a single crawl described by ``config``."""
    crawler = Crawler(
        config,
        renderer_factory=renderer_factory,
        on_event=on_event,
        cancel_event=cancel_event,
    )
    return await crawler.run()
