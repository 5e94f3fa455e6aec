"""Abstract base class for embed cache backends.

A backend persists and retrieves a JSON-compatible record by string key.
Keys are produced by :func:`tweetembed.fetcher.cache_key` and are safe to
use as file names. The interface deliberately has no delete, enumerate, or
expiry operations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

CacheRecord = dict[str, Any]
"""A JSON-compatible mapping; only its ``html`` field is read when rendering."""


class CacheBackend(ABC):
    """Read/write contract shared by :class:`~tweetembed.cache.DiskCache`
    and :class:`~tweetembed.cache.NullCache`."""

    @abstractmethod
    def read(self, key: str) -> Optional[CacheRecord]:
        """Return the record stored under *key*, or ``None`` on a miss."""

    @abstractmethod
    def write(self, key: str, record: CacheRecord) -> None:
        """Store *record* under *key*, replacing any previous record."""
