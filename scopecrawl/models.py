"""Data models used throughout the crawler pipeline."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional

UNTITLED = "Untitled"


def utc_timestamp() -> str:
    """Current UTC time as an ISO-8601 string with a ``Z`` suffix."""
    return (
        dt.datetime.now(dt.timezone.utc)
        .replace(microsecond=0)
        .isoformat()
        .replace("+00:00", "Z")
    )


@dataclass(frozen=True)
class Link:
    """Anchor discovered on a page."""

    href: str
    text: str
    title: str = ""


@dataclass(frozen=True)
class MediaItem:
    """Image or video reference discovered on a page."""

    src: str
    type: Literal["image", "video"]
    alt: Optional[str] = None


@dataclass
class LinkBuckets:
    internal: List[Link] = field(default_factory=list)
    external: List[Link] = field(default_factory=list)


@dataclass
class MediaBuckets:
    images: List[MediaItem] = field(default_factory=list)
    videos: List[MediaItem] = field(default_factory=list)


@dataclass
class ExtractionResult:
    """Output of running the content extractor over one rendered document."""

    cleaned_html: str
    markdown: str
    content: str
    links: LinkBuckets
    media: MediaBuckets
    metadata: Dict[str, str]


@dataclass(frozen=True)
class PageResult:
    """Everything captured for a successfully rendered page."""

    url: str
    title: str
    html: str
    cleaned_html: str
    markdown: str
    content: str
    links: LinkBuckets
    media: MediaBuckets
    metadata: Dict[str, str]
    timestamp: str = field(default_factory=utc_timestamp)

    @classmethod
    def from_extraction(cls, url: str, html: str, extraction: ExtractionResult) -> "PageResult":
        return cls(
            url=url,
            title=extraction.metadata.get("title") or UNTITLED,
            html=html,
            cleaned_html=extraction.cleaned_html,
            markdown=extraction.markdown,
            content=extraction.content,
            links=extraction.links,
            media=extraction.media,
            metadata=extraction.metadata,
        )


@dataclass(frozen=True)
class PageFailure:
    """A frontier entry that was dequeued but produced no result."""

    url: str
    reason: str


@dataclass
class CrawlSummary:
    """Aggregate statistics reported at the end of a run."""

    pages: int
    failures: int
    total_size_kb: float
    average_content_length: int
    total_links: int
    total_images: int
    total_videos: int
