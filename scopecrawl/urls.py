"""URL validation, normalization, and crawl scope helpers."""

from __future__ import annotations

import posixpath
import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import SplitResult, urljoin, urlsplit, urlunsplit

# Schemes that are meaningless without a host component.
HIERARCHICAL_SCHEMES = {"http", "https", "ftp", "ws", "wss"}

_DOUBLE_STAR = "**"
_SINGLE_STAR = "*"


def _split_absolute(url: str) -> Optional[SplitResult]:
    """Parse ``url`` and return it only when it carries a scheme."""
    try:
        parsed = urlsplit(url)
        # Accessing the port validates it.
        parsed.port
    except ValueError:
        return None
    if not parsed.scheme:
        return None
    if parsed.scheme in HIERARCHICAL_SCHEMES and not parsed.hostname:
        return None
    return parsed


def _strip_www(host: str) -> str:
    return host[4:] if host.startswith("www.") else host


def _remove_dot_segments(path: str) -> str:
    """Resolve `.` and `..` segments, keeping a trailing slash."""
    if not path:
        return "/"
    segments = path.split("/")
    if not any(segment in (".", "..") for segment in segments):
        return path
    resolved = posixpath.normpath(path)
    if resolved.startswith("//"):
        resolved = "/" + resolved.lstrip("/")
    if not resolved.startswith("/"):
        resolved = "/" + resolved
    if segments[-1] in ("", ".", "..") and not resolved.endswith("/"):
        resolved += "/"
    return resolved


def is_valid_url(value: str) -> bool:
    """Return True when ``value`` is an absolute URL with scheme and authority."""
    if not value or not value.strip():
        return False
    parsed = _split_absolute(value.strip())
    return parsed is not None and bool(parsed.netloc)


def normalize_url(href: str, base_url: str) -> str:
    """Resolve ``href`` against ``base_url`` and drop any fragment.

    Relative, absolute and protocol-relative forms are supported. When the
    result is not an absolute URL the original ``href`` is returned as-is.
    """
    try:
        joined = urljoin(base_url, href.strip())
    except ValueError:
        return href
    parsed = _split_absolute(joined)
    if parsed is None:
        return href

    netloc = parsed.netloc
    if "@" not in netloc:
        netloc = netloc.lower()
    path = parsed.path
    if parsed.scheme in HIERARCHICAL_SCHEMES:
        path = _remove_dot_segments(path)
    return urlunsplit((parsed.scheme, netloc, path, parsed.query, ""))


def url_key(url: str) -> str:
    """Key used for visited/frontier membership checks."""
    return normalize_url(url, url)


def base_domain(url: str) -> str:
    """Return the hostname of ``url`` without a leading ``www.``."""
    parsed = _split_absolute(url)
    if parsed is None or not parsed.hostname:
        return ""
    return _strip_www(parsed.hostname)


def is_external(url: str, domain: str) -> bool:
    """Return True when ``url`` is not on ``domain`` or one of its subdomains.

    Unparsable URLs are reported as internal.
    """
    parsed = _split_absolute(url)
    if parsed is None:
        return False
    host = _strip_www(parsed.hostname or "")
    return not (host == domain or host.endswith("." + domain))


def _translate_glob(pattern: str) -> str:
    parts = []
    for index, chunk in enumerate(pattern.split(_DOUBLE_STAR)):
        if index:
            parts.append(".*")
        parts.append("[^/]*".join(re.escape(piece) for piece in chunk.split(_SINGLE_STAR)))
    return "^" + "".join(parts) + "$"


@dataclass(frozen=True)
class ScopeMatcher:
    """Compiled glob deciding whether a discovered URL may be crawled."""

    pattern: str
    regex: re.Pattern

    def matches(self, url: str) -> bool:
        return self.regex.fullmatch(url) is not None


def compile_matcher(pattern: str) -> ScopeMatcher:
    """Compile a glob where ``*`` stays within a path segment and ``**`` spans segments."""
    return ScopeMatcher(pattern=pattern, regex=re.compile(_translate_glob(pattern)))


def default_match_pattern(seed_url: str) -> str:
    """Everything under the seed path."""
    return seed_url + _DOUBLE_STAR if seed_url.endswith("/") else seed_url + "/" + _DOUBLE_STAR
