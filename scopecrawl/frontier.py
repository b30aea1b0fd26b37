"""FIFO frontier queue with constant-time membership checks."""

from __future__ import annotations

from collections import deque
from typing import Deque, Iterator, Set, Tuple

from .urls import url_key


class Frontier:
    """Breadth-first work queue of URLs awaiting a visit.

    - URLs are appended at the back and popped from the front.
    - Membership is tracked by normalized key, so a URL is never queued twice.
    """

    def __init__(self) -> None:
        self._queue: Deque[Tuple[str, str]] = deque()
        self._keys: Set[str] = set()

    def push(self, url: str) -> bool:
        """Append ``url`` unless an equivalent URL is already queued."""
        key = url_key(url)
        if key in self._keys:
            return False
        self._keys.add(key)
        self._queue.append((url, key))
        return True

    def pop(self) -> Tuple[str, str]:
        """Remove and return ``(url, key)`` from the front of the queue."""
        url, key = self._queue.popleft()
        self._keys.discard(key)
        return url, key

    def __contains__(self, url: object) -> bool:
        return isinstance(url, str) and url_key(url) in self._keys

    def __len__(self) -> int:
        return len(self._queue)

    def __iter__(self) -> Iterator[str]:
        return (url for url, _ in self._queue)
