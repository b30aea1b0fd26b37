"""HTML extraction and metadata parsing utilities."""

from __future__ import annotations

from typing import Dict, List

from bs4 import BeautifulSoup, ParserRejectedMarkup
from bs4.element import Tag
from soupsieve import SelectorSyntaxError

from .errors import ExtractionError
from .markdown import html_to_markdown
from .models import ExtractionResult, Link, LinkBuckets, MediaBuckets, MediaItem
from .urls import base_domain, is_external, normalize_url

NOISE_SELECTOR = "script, style, nav, footer, header, aside, .ad, .advertisement"
KEEP_ATTRIBUTES = frozenset(("href", "src", "alt", "title"))
DEFAULT_SELECTOR = "body"


def _parse(html: str) -> BeautifulSoup:
    if not isinstance(html, str) or not html.strip():
        raise ExtractionError("Rendered document is empty")
    try:
        return BeautifulSoup(html, "html.parser")
    except ParserRejectedMarkup as exc:
        raise ExtractionError(f"Rendered document could not be parsed: {exc}") from exc


def extract_metadata(soup: BeautifulSoup) -> Dict[str, str]:
    """Collect the document title and every named meta tag."""
    metadata: Dict[str, str] = {}
    metadata["title"] = soup.title.get_text().strip() if soup.title else ""
    for meta in soup.find_all("meta"):
        name = meta.get("name") or meta.get("property")
        content = meta.get("content")
        if name and content:
            metadata[name] = content
    return metadata


def _clean_content(soup: BeautifulSoup) -> BeautifulSoup:
    """Remove scripts, page chrome and ad containers."""
    for tag in soup.select(NOISE_SELECTOR):
        if not tag.decomposed:
            tag.decompose()
    return soup


def extract_links(soup: BeautifulSoup, page_url: str) -> LinkBuckets:
    """Classify every anchor with an href as internal or external."""
    domain = base_domain(page_url)
    buckets = LinkBuckets()
    for anchor in soup.find_all("a", href=True):
        href = normalize_url(anchor["href"], page_url)
        link = Link(
            href=href,
            text=anchor.get_text().strip(),
            title=anchor.get("title") or "",
        )
        if is_external(href, domain):
            buckets.external.append(link)
        else:
            buckets.internal.append(link)
    return buckets


def extract_media(soup: BeautifulSoup, page_url: str) -> MediaBuckets:
    """Collect images (skipping inline data URIs) and video sources."""
    buckets = MediaBuckets()
    for img in soup.find_all("img", src=True):
        src = img["src"].strip()
        if not src or src.lower().startswith("data:"):
            continue
        buckets.images.append(
            MediaItem(src=normalize_url(src, page_url), type="image", alt=img.get("alt") or "")
        )
    for video in soup.select("video[src], video source[src]"):
        src = video["src"].strip()
        if src:
            buckets.videos.append(MediaItem(src=normalize_url(src, page_url), type="video"))
    return buckets


def _select_regions(soup: BeautifulSoup, selector: str) -> List[Tag]:
    selector = (selector or "").strip() or DEFAULT_SELECTOR
    try:
        regions = soup.select(selector)
    except SelectorSyntaxError as exc:
        raise ExtractionError(f"Invalid selector {selector!r}: {exc}") from exc
    if not regions and selector == DEFAULT_SELECTOR:
        # Fragments parsed without a <body> fall back to the whole document.
        return [soup]
    # Nested matches are already covered by their outermost matching ancestor.
    matched = {id(region) for region in regions}
    return [
        region
        for region in regions
        if not any(id(parent) in matched for parent in region.parents)
    ]


def _strip_attributes(region: Tag) -> None:
    for element in region.find_all(True):
        element.attrs = {
            name: value for name, value in element.attrs.items() if name in KEEP_ATTRIBUTES
        }


def extract_content(html: str, page_url: str, selector: str = DEFAULT_SELECTOR) -> ExtractionResult:
    """Sanitize a rendered document and extract links, media, metadata and Markdown."""
    soup = _parse(html)
    metadata = extract_metadata(soup)

    _clean_content(soup)
    links = extract_links(soup, page_url)
    media = extract_media(soup, page_url)

    regions = _select_regions(soup, selector)
    for region in regions:
        _strip_attributes(region)

    cleaned_html = "".join(region.decode_contents() for region in regions)
    content = "".join(region.get_text() for region in regions).strip()
    return ExtractionResult(
        cleaned_html=cleaned_html,
        markdown=html_to_markdown(cleaned_html),
        content=content,
        links=links,
        media=media,
        metadata=metadata,
    )
