"""Canonical Pydantic models shared across all tweetembed modules.

The models fall into two groups:

**Configuration models** -- serialised as JSON in the user's config directory
or in a project's ``tweetembed.json``:
    :class:`CacheConfig`, :class:`RequestConfig`, and :class:`GlobalConfig`.

**Render models** -- built per render call:
    :class:`TwitterCredentials` and :class:`FetchRequest`.

All models use Pydantic v2. The render models are frozen so that nothing
handed to the remote client can alter a value that the cache key was
derived from.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# --- Config ---


class CacheConfig(BaseModel):
    """On-disk embed cache settings stored in :class:`GlobalConfig`."""

    enabled: bool = Field(default=True, description="Enable the embed cache")
    directory: str = Field(
        default=".tweet-cache",
        description="Cache folder; relative paths resolve against the working directory",
    )


class RequestConfig(BaseModel):
    """Default HTTP request settings applied to every Twitter API call."""

    timeout: int = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    max_retries: int = Field(default=3, description="Max retry attempts")


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/tweetembed/config.json``.

    Loaded and saved by :func:`~tweetembed.config.load_global_config` and
    :func:`~tweetembed.config.save_global_config`. Fields here have the
    lowest precedence and can be overridden by project config, environment
    variables, or CLI flags. See :func:`~tweetembed.config.resolve_config`
    for the full precedence chain.
    """

    api_base_url: str = Field(
        default="https://api.twitter.com/1.1",
        description="Base URL of the Twitter REST API",
    )
    cache: CacheConfig = Field(default_factory=CacheConfig)
    request: RequestConfig = Field(default_factory=RequestConfig)


# --- Render ---


class TwitterCredentials(BaseModel):
    """The four opaque OAuth 1.0a secrets needed to call the Twitter API."""

    model_config = ConfigDict(frozen=True)

    consumer_key: str
    consumer_secret: str
    access_token: str
    access_token_secret: str

    def __repr__(self) -> str:
        return f"TwitterCredentials(consumer_key={self.consumer_key!r}, ...)"


class FetchRequest(BaseModel):
    """A parsed tag invocation: which fetcher to run, on which URL, with which options.

    ``options`` keeps insertion order as a tuple of ``(key, value)`` pairs.
    Use :meth:`option_dict` to obtain a mutable copy for passing to
    collaborators.

    Example::

        request = FetchRequest(
            kind="oembed",
            target_url="https://twitter.com/jack/status/20",
            options=(("align", "center"),),
        )
    """

    model_config = ConfigDict(frozen=True)

    kind: str = "oembed"
    target_url: str = ""
    options: tuple[tuple[str, str], ...] = ()

    def option_dict(self) -> dict[str, Any]:
        """Return a new ``dict`` of the options, safe to hand to code that mutates it."""
        return dict(self.options)
