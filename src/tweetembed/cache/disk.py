"""File-per-key JSON cache for rendered embeds.

Each record lives in ``<folder>/<key>.cache`` as a UTF-8 JSON object with no
surrounding metadata. Writes go through
:func:`tweetembed.config._atomic_write` (temp file + ``os.replace``), so a
concurrent reader sees either the previous file or the complete new one.
Two renders racing on the same key simply leave the last writer's record.

Entries never expire; removing the folder is the only way to invalidate
them.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from tweetembed.cache.base import CacheBackend, CacheRecord
from tweetembed.config import _atomic_write
from tweetembed.exceptions import CorruptCacheError
from tweetembed.output import debug


class DiskCache(CacheBackend):
    """Disk-backed cache storing one JSON file per key.

    The folder (and any missing parents) is created on construction.

    Args:
        folder: Root directory for cache files. Relative paths are resolved
            against the current working directory.

    Example::

        cache = DiskCache(".tweet-cache")
        cache.write("3f2a...", {"html": "<blockquote>...</blockquote>"})
        hit = cache.read("3f2a...")
    """

    SUFFIX = ".cache"

    def __init__(self, folder: str | Path) -> None:
        self._folder = Path(folder).expanduser().resolve()
        self._folder.mkdir(parents=True, exist_ok=True)

    @property
    def folder(self) -> Path:
        """Absolute path of the cache folder."""
        return self._folder

    def path_for(self, key: str) -> Path:
        """Return the file path that holds the record for *key*."""
        return self._folder / f"{key}{self.SUFFIX}"

    def read(self, key: str) -> Optional[CacheRecord]:
        """Load the record stored under *key*.

        Returns:
            The decoded record, or ``None`` if no file exists for *key*.

        Raises:
            CorruptCacheError: If the file cannot be read, is not valid
                JSON, or does not hold a JSON object. Corrupt entries are
                never treated as a miss; delete the file to refetch.
        """
        path = self.path_for(key)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            raise CorruptCacheError(f"Cannot read cache file {path}: {exc}") from exc

        try:
            record = json.loads(text)
        except json.JSONDecodeError as exc:
            raise CorruptCacheError(f"Corrupt cache file {path}: {exc}") from exc
        if not isinstance(record, dict):
            raise CorruptCacheError(f"Corrupt cache file {path}: expected a JSON object")

        debug(f"Cache hit: {path.name}")
        return record

    def write(self, key: str, record: CacheRecord) -> None:
        """Serialise *record* as JSON and atomically replace the file for *key*.

        Raises:
            OSError: If the file cannot be written.
            TypeError: If *record* is not JSON-serialisable.
        """
        path = self.path_for(key)
        _atomic_write(path, json.dumps(record, ensure_ascii=False))
        debug(f"Cache write: {path.name}")
