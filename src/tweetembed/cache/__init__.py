"""Embed caching for tweetembed.

This package provides the :class:`CacheBackend` interface and its two
variants:

* :class:`DiskCache` -- one JSON file per cache key under a folder.
* :class:`NullCache` -- never hits, never stores; used to disable caching
  without branching elsewhere.

:func:`create_cache` picks the variant from a
:class:`~tweetembed.models.CacheConfig`, which is controlled by the
``cache`` section of the global or project configuration.
"""

from tweetembed.cache.base import CacheBackend, CacheRecord
from tweetembed.cache.disk import DiskCache
from tweetembed.cache.null import NullCache
from tweetembed.models import CacheConfig


def create_cache(config: CacheConfig) -> CacheBackend:
    """Build the cache backend described by *config*.

    Args:
        config: Cache configuration (``enabled`` flag and ``directory``).

    Returns:
        A :class:`DiskCache` rooted at ``config.directory`` when caching is
        enabled, otherwise a :class:`NullCache`.
    """
    if not config.enabled:
        return NullCache()
    return DiskCache(config.directory)


__all__ = ["CacheBackend", "CacheRecord", "DiskCache", "NullCache", "create_cache"]
