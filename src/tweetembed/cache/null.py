"""Cache backend that stores nothing."""

from __future__ import annotations

from typing import Optional

from tweetembed.cache.base import CacheBackend, CacheRecord


class NullCache(CacheBackend):
    """A backend for which every read is a miss and every write is dropped.

    Used by the ``twitternocache`` tag and the ``--no-cache`` flag.
    """

    def read(self, key: str) -> Optional[CacheRecord]:
        return None

    def write(self, key: str, record: CacheRecord) -> None:
        return None
