"""Serialization of crawl results to JSON or a flattened Markdown document."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Sequence

from .markdown import compose_document
from .models import CrawlSummary, PageResult

logger = logging.getLogger("scopecrawl")


def results_to_payload(results: Sequence[PageResult]) -> List[Dict[str, Any]]:
    return [asdict(result) for result in results]


def results_to_json(results: Sequence[PageResult]) -> str:
    return json.dumps(results_to_payload(results), ensure_ascii=False, indent=2)


def resolve_output_path(output: Path, output_format: str) -> Path:
    """Markdown output replaces a ``.json`` suffix with ``.md``."""
    if output_format == "markdown" and output.suffix == ".json":
        return output.with_suffix(".md")
    return output


def write_results(results: Sequence[PageResult], output: Path, output_format: str = "json") -> Path:
    """Write results in the requested format and return the path written."""
    path = resolve_output_path(Path(output), output_format)
    if output_format == "markdown":
        text = compose_document(results)
    else:
        text = results_to_json(results)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    logger.debug("Wrote %d page(s) to %s", len(results), path)
    return path


def summarize(results: Sequence[PageResult], failures: int = 0) -> CrawlSummary:
    """Aggregate size, content and link statistics for a set of results."""
    pages = len(results)
    total_size = len(json.dumps(results_to_payload(results), ensure_ascii=False))
    average_content = round(sum(len(r.content) for r in results) / pages) if pages else 0
    return CrawlSummary(
        pages=pages,
        failures=failures,
        total_size_kb=round(total_size / 1024, 2),
        average_content_length=average_content,
        total_links=sum(len(r.links.internal) + len(r.links.external) for r in results),
        total_images=sum(len(r.media.images) for r in results),
        total_videos=sum(len(r.media.videos) for r in results),
    )
