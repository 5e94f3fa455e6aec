"""Synchronous Twitter REST API client with OAuth signing, retry, and error mapping.

This module provides :class:`TwitterClient`, the blocking client used by
:class:`~tweetembed.fetcher.OembedFetcher`. It wraps :class:`httpx.Client`
and layers on:

- **OAuth 1.0a signing** -- via :class:`~tweetembed.client.auth.OAuth1Auth`.
- **Retry with backoff** -- retries on 5xx and network errors with
  exponential delay (1 s, 2 s, 4 s, ...).
- **Error mapping** -- HTTP failures are raised as the typed exceptions in
  :mod:`tweetembed.exceptions` so that the fetcher can tell recoverable
  ones (404, 403) from the rest.

Only the two calls needed for embedding are exposed: :meth:`status` and
:meth:`oembed`.
"""

from __future__ import annotations

import time
from typing import Any, Mapping, Optional

import httpx

from tweetembed.client.auth import OAuth1Auth
from tweetembed.exceptions import (
    AuthError,
    ConnectionError_,
    ForbiddenError,
    NotFoundError,
    ServerError,
)
from tweetembed.models import RequestConfig, TwitterCredentials
from tweetembed.output import get_output

DEFAULT_API_BASE_URL = "https://api.twitter.com/1.1"


class TwitterClient:
    """Blocking client for the Twitter v1.1 status and oEmbed endpoints.

    Must be used as a context manager so that the underlying transport is
    properly opened and closed.

    Args:
        credentials: OAuth 1.0a secrets used to sign every request.
        config: Timeout, SSL verification, and retry settings.
        base_url: API root, without a trailing slash.
        transport: Optional custom :class:`httpx.BaseTransport` (tests use
            :class:`httpx.MockTransport`).

    Example::

        with TwitterClient(credentials) as client:
            status = client.status(20)
            embed = client.oembed(status, {"align": "center"})
    """

    def __init__(
        self,
        credentials: TwitterCredentials,
        config: Optional[RequestConfig] = None,
        base_url: str = DEFAULT_API_BASE_URL,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._credentials = credentials
        self._config = config or RequestConfig()
        self._base_url = base_url.rstrip("/")
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> TwitterClient:
        self._client = httpx.Client(
            base_url=self._base_url,
            auth=OAuth1Auth(self._credentials),
            timeout=self._config.timeout,
            verify=self._config.verify_ssl,
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # API calls
    # ------------------------------------------------------------------ #

    def status(self, status_id: int) -> dict[str, Any]:
        """Look up a single status by numeric id.

        Args:
            status_id: The status id taken from the status URL.

        Returns:
            The decoded status object.

        Raises:
            NotFoundError: The status does not exist or was deleted.
            ForbiddenError: The status belongs to a protected or suspended account.
            AuthError: The credentials were rejected.
            ServerError: On 5xx (after retries) or an unexpected 4xx.
            ConnectionError_: On network / timeout errors after all retries.
        """
        return self._get("/statuses/show.json", {"id": status_id})

    def oembed(self, status: Mapping[str, Any], options: dict[str, Any]) -> dict[str, Any]:
        """Fetch the oEmbed representation of *status*.

        *options* is sent as query parameters (``align``, ``maxwidth``,
        ``hide_media``, ...). The dict is copied before the status id is
        added, so the caller's mapping is left untouched.

        Args:
            status: A status object as returned by :meth:`status`.
            options: oEmbed query options.

        Returns:
            The decoded oEmbed object; its ``html`` field holds the embed markup.
        """
        params: dict[str, Any] = dict(options)
        params["id"] = status.get("id_str") or status.get("id")
        return self._get("/statuses/oembed.json", params)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _get(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        response = self._execute_with_retry("GET", path, params)
        self._map_response_error(response)
        try:
            data = response.json()
        except ValueError as exc:
            raise ServerError(f"Invalid JSON in response from {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ServerError(f"Unexpected response body from {path}: expected a JSON object")
        return data

    def _execute_with_retry(
        self,
        method: str,
        path: str,
        params: dict[str, Any],
    ) -> httpx.Response:
        """Execute the HTTP request with exponential-backoff retry.

        Retries on 5xx status codes and connection / timeout errors up to
        ``max_retries`` times. The delay doubles each attempt: 1 s, 2 s, 4 s, ...
        """
        assert self._client is not None, "Client not initialised -- use as context manager"

        max_retries = self._config.max_retries
        output = get_output()

        for attempt in range(max_retries + 1):
            try:
                response = self._client.request(method, path, params=params)
            except (httpx.TimeoutException, httpx.NetworkError) as exc:
                if attempt < max_retries:
                    delay = 2 ** attempt
                    output.debug(
                        f"Connection error: {exc}, retrying in {delay}s "
                        f"(attempt {attempt + 1}/{max_retries})"
                    )
                    time.sleep(delay)
                    continue
                raise ConnectionError_(
                    f"Connection failed after {max_retries + 1} attempts: {exc}"
                ) from exc

            if response.status_code >= 500 and attempt < max_retries:
                delay = 2 ** attempt
                output.debug(
                    f"Server error {response.status_code}, retrying in {delay}s "
                    f"(attempt {attempt + 1}/{max_retries})"
                )
                time.sleep(delay)
                continue

            return response

        raise ServerError("Request failed after all retries")  # pragma: no cover

    def _map_response_error(self, response: httpx.Response) -> None:
        """Raise a typed exception for error HTTP status codes."""
        status = response.status_code
        if status < 400:
            return

        # Twitter wraps failures as {"errors": [{"code": 144, "message": "..."}]}.
        msg = ""
        try:
            detail = response.json()
            if isinstance(detail, dict):
                errors = detail.get("errors")
                if isinstance(errors, list) and errors and isinstance(errors[0], dict):
                    msg = str(errors[0].get("message", ""))
                else:
                    msg = str(detail.get("error") or detail.get("message") or "")
        except ValueError:
            msg = response.text[:200] if response.text else ""

        prefix = f"HTTP {status}"
        full_msg = f"{prefix}: {msg}" if msg else prefix

        if status == 401:
            raise AuthError(full_msg)
        if status == 403:
            raise ForbiddenError(full_msg)
        if status == 404:
            raise NotFoundError(full_msg)
        # 5xx after retries, and other 4xx such as 429 rate limiting.
        raise ServerError(full_msg)
