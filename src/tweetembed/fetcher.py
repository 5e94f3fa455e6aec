"""Request fetchers and the cache key policy.

A fetcher turns a :class:`~tweetembed.models.FetchRequest` into a cache
record by calling the remote client. :data:`FETCHERS` maps the kind
keyword accepted in tag arguments to the fetcher class that handles it;
``oembed`` is currently the only kind.

:func:`cache_key` derives the storage identity of a request. It hashes the
kind, the target URL, and a canonical form of the options, so:

* equal requests always share a key, whatever order their options were
  written in;
* requests differing in any option value, or in kind, never share one.

The key is computed from the frozen request, and clients only ever receive
``request.option_dict()`` copies, so nothing a client does to its options
can change the key afterwards.
"""

from __future__ import annotations

import hashlib
import json
import re
from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional, Protocol

from tweetembed.cache.base import CacheRecord
from tweetembed.exceptions import ForbiddenError, NotFoundError
from tweetembed.models import FetchRequest

_STATUS_ID = re.compile(r"^(\d+)")


class StatusClient(Protocol):
    """The two remote calls a fetcher relies on (see :class:`~tweetembed.client.TwitterClient`)."""

    def status(self, status_id: int) -> Mapping[str, Any]: ...

    def oembed(self, status: Mapping[str, Any], options: dict[str, Any]) -> Mapping[str, Any]: ...


def cache_key(request: FetchRequest) -> str:
    """Return the SHA-256 hex digest identifying *request* in the cache.

    Example::

        url = "https://twitter.com/jack/status/20"
        a = FetchRequest(target_url=url, options=(("align", "left"), ("lang", "en")))
        b = FetchRequest(target_url=url, options=(("lang", "en"), ("align", "left")))
        assert cache_key(a) == cache_key(b)
    """
    options = json.dumps(request.option_dict(), sort_keys=True, separators=(",", ":"))
    raw = "|".join([request.kind, request.target_url, options])
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


def status_id_from_url(url: str) -> Optional[int]:
    """Extract the numeric status id from the last path segment of *url*.

    Trailing junk after the digits (``12345?s=20``) is ignored. Returns
    ``None`` if the segment does not start with a digit.
    """
    segment = url.rstrip().rsplit("/", 1)[-1]
    match = _STATUS_ID.match(segment)
    if match is None:
        return None
    return int(match.group(1))


def error_record(exc: Exception, url: str) -> CacheRecord:
    """Build the record cached and rendered in place of an embed that failed to load."""
    return {"html": f"<p>There was a '{type(exc).__name__}' error fetching Tweet '{url}'</p>"}


class Fetcher(ABC):
    """Base class for request fetchers.

    Args:
        client: An open remote client.
    """

    kind: str = ""

    def __init__(self, client: StatusClient) -> None:
        self._client = client

    @abstractmethod
    def fetch(self, request: FetchRequest) -> Optional[CacheRecord]:
        """Fetch the record for *request*, or ``None`` when there is nothing to fetch."""


class OembedFetcher(Fetcher):
    """Fetch the oEmbed HTML of a status.

    A status that cannot be found or is not visible is recovered into an
    error record, which is cached like a successful embed. Every other
    remote failure propagates to the caller.
    """

    kind = "oembed"
    RECOVERED_ERRORS = (NotFoundError, ForbiddenError)

    def fetch(self, request: FetchRequest) -> Optional[CacheRecord]:
        status_id = status_id_from_url(request.target_url)
        if status_id is None:
            return None

        try:
            status = self._client.status(status_id)
        except self.RECOVERED_ERRORS as exc:
            return error_record(exc, request.target_url)

        return dict(self._client.oembed(status, request.option_dict()))


FETCHERS: dict[str, type[Fetcher]] = {
    OembedFetcher.kind: OembedFetcher,
}
"""Tag keyword -> fetcher class. The first entry is the default kind."""

DEFAULT_KIND = OembedFetcher.kind
