"""Configuration objects and constants for the crawler."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Optional, Tuple

from .urls import default_match_pattern

DEFAULT_SELECTOR = "body"
DEFAULT_MAX_PAGES = 10
DEFAULT_OUTPUT = Path("output.json")
DEFAULT_NAVIGATION_TIMEOUT = 30.0
DEFAULT_SELECTOR_TIMEOUT = 5.0
BLOCKED_RESOURCE_TYPES = ("image", "stylesheet", "font", "media")

OutputFormat = Literal["json", "markdown"]
OUTPUT_FORMATS: Tuple[str, ...] = ("json", "markdown")


@dataclass
class CrawlConfig:
    """Top-level settings that control crawling and output behaviour."""

    url: str
    selector: str = DEFAULT_SELECTOR
    max_pages: int = DEFAULT_MAX_PAGES
    match: Optional[str] = None
    output: Path = DEFAULT_OUTPUT
    output_format: OutputFormat = "json"
    navigation_timeout: float = DEFAULT_NAVIGATION_TIMEOUT
    selector_timeout: float = DEFAULT_SELECTOR_TIMEOUT
    wait_until: str = "domcontentloaded"
    blocked_resource_types: Tuple[str, ...] = field(default=BLOCKED_RESOURCE_TYPES)
    headless: bool = True

    def __post_init__(self) -> None:
        if self.max_pages < 1:
            raise ValueError(f"max_pages must be at least 1, got {self.max_pages}")
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(f"Unsupported output format: {self.output_format}")

    @property
    def match_pattern(self) -> str:
        """Scope pattern, defaulting to everything under the seed path."""
        return self.match or default_match_pattern(self.url)
