"""Render orchestration: credentials, parsing, cache lookup, live fetch, HTML.

:class:`TweetRenderer` is the single entry point used by the tag expander
and the CLI. One call to :meth:`TweetRenderer.render` performs, in order:

1. credential resolution (:func:`~tweetembed.config.resolve_credentials`),
2. argument parsing (:func:`~tweetembed.arguments.parse_arguments`),
3. cache key derivation (:func:`~tweetembed.fetcher.cache_key`),
4. a cache read, and on a miss a live fetch followed by one cache write,
5. wrapping the record's ``html`` in the embed container.

Credential and argument errors propagate. Everything else either renders
an embed, a recovered error message, or the generic error body, except
remote failures other than 404/403, which propagate from the client.
"""

from __future__ import annotations

from typing import Callable, ContextManager, Optional

from tweetembed.arguments import parse_arguments
from tweetembed.cache import CacheBackend, CacheRecord
from tweetembed.client import TwitterClient
from tweetembed.client.twitter_client import DEFAULT_API_BASE_URL
from tweetembed.config import CredentialSource, resolve_credentials
from tweetembed.fetcher import FETCHERS, StatusClient, cache_key
from tweetembed.models import FetchRequest, RequestConfig, TwitterCredentials
from tweetembed.output import debug, warning

ClientFactory = Callable[[TwitterCredentials], ContextManager[StatusClient]]

ERROR_BODY_TEXT = "<p>Tweet could not be processed</p>"
EMBED_TEMPLATE = "<div class='embed twitter'>{body}</div>"


def html_output_for(record: Optional[CacheRecord]) -> str:
    """Wrap the record's ``html`` (or the generic error body) in the embed container.

    Only a missing or null ``html`` falls back to the error body. An empty
    string is rendered as an empty embed.
    """
    body = record.get("html") if record is not None else None
    if body is None:
        body = ERROR_BODY_TEXT
    return EMBED_TEMPLATE.format(body=body)


class TweetRenderer:
    """Render tag arguments into an embed, consulting the cache first.

    Args:
        cache: Backend used for lookups and write-backs. Pass a
            :class:`~tweetembed.cache.NullCache` to disable caching.
        client_factory: Builds a remote client context manager from
            credentials. Defaults to :class:`~tweetembed.client.TwitterClient`.
        request_config: HTTP settings for the default client factory.
        api_base_url: API root for the default client factory.

    Example::

        renderer = TweetRenderer(DiskCache(".tweet-cache"))
        html = renderer.render(
            "https://twitter.com/jack/status/20 align='center'",
            CredentialSource(),
        )
    """

    def __init__(
        self,
        cache: CacheBackend,
        client_factory: Optional[ClientFactory] = None,
        request_config: Optional[RequestConfig] = None,
        api_base_url: str = DEFAULT_API_BASE_URL,
    ) -> None:
        self._cache = cache
        if client_factory is None:
            config = request_config or RequestConfig()

            def _default_factory(credentials: TwitterCredentials) -> TwitterClient:
                return TwitterClient(credentials, config, base_url=api_base_url)

            client_factory = _default_factory

        self._client_factory: ClientFactory = client_factory

    @property
    def cache(self) -> CacheBackend:
        return self._cache

    @property
    def client_factory(self) -> ClientFactory:
        return self._client_factory

    def render(self, raw_arguments: str, credential_source: CredentialSource) -> str:
        """Render *raw_arguments* to an HTML fragment.

        Args:
            raw_arguments: Free-text tag arguments.
            credential_source: Where to find the Twitter API keys.

        Returns:
            ``<div class='embed twitter'>...</div>``

        Raises:
            MissingCredentialsError: If no credential tier is complete.
            InvalidArgumentsError: If the arguments cannot be parsed.
            CorruptCacheError: If the cached file for this request is corrupt.
            AuthError, ServerError, ConnectionError_: Unrecovered remote failures.
        """
        credentials = resolve_credentials(credential_source)
        request = parse_arguments(raw_arguments)
        key = cache_key(request)

        record = self._cache.read(key)
        if record is None:
            debug(f"Cache miss: {request.target_url or raw_arguments.strip()}")
            record = self._live_response(request, key, credentials)
        return html_output_for(record)

    def _live_response(
        self,
        request: FetchRequest,
        key: str,
        credentials: TwitterCredentials,
    ) -> Optional[CacheRecord]:
        fetcher_cls = FETCHERS[request.kind]
        with self._client_factory(credentials) as client:
            record = fetcher_cls(client).fetch(request)

        if record is not None:
            try:
                self._cache.write(key, record)
            except OSError as exc:
                warning(f"Could not write cache entry {key}: {exc}")
        return record
