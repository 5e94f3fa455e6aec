"""OAuth 1.0a request signing for the Twitter REST API.

This module provides :class:`OAuth1Auth`, an :class:`httpx.Auth` that signs
every outgoing request with HMAC-SHA1 (:rfc:`5849` section 3.4) using the
application's consumer key/secret and the user's access token/secret.

Only query-string and ``application/x-www-form-urlencoded`` body
parameters take part in the signature; the Twitter endpoints used by
tweetembed are all ``GET`` requests.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import secrets
import time
from typing import Callable, Generator, Iterable
from urllib.parse import parse_qsl, quote

import httpx

from tweetembed.models import TwitterCredentials


def percent_encode(value: str) -> str:
    """Percent-encode *value* as required by :rfc:`5849` section 3.6."""
    return quote(value, safe="~")


def normalize_parameters(params: Iterable[tuple[str, str]]) -> str:
    """Encode, sort, and join request parameters into the signature's parameter string."""
    encoded = sorted((percent_encode(k), percent_encode(v)) for k, v in params)
    return "&".join(f"{k}={v}" for k, v in encoded)


def signature_base_string(method: str, url: httpx.URL, params: Iterable[tuple[str, str]]) -> str:
    """Build the signature base string for a request.

    Args:
        method: HTTP method.
        url: Request URL; its query string is ignored here and must be
            included in *params*.
        params: All parameters to sign, OAuth protocol parameters included.
    """
    base_url = f"{url.scheme.lower()}://{url.netloc.decode('ascii').lower()}{url.path}"
    return "&".join(
        [
            method.upper(),
            percent_encode(base_url),
            percent_encode(normalize_parameters(params)),
        ]
    )


class OAuth1Auth(httpx.Auth):
    """Sign requests with OAuth 1.0a user-context credentials.

    Args:
        credentials: The four Twitter API secrets.
        nonce_factory: Returns a fresh ``oauth_nonce``; override in tests.
        clock: Returns the current UNIX time; override in tests.

    Example::

        auth = OAuth1Auth(credentials)
        with httpx.Client(auth=auth) as client:
            client.get("https://api.twitter.com/1.1/statuses/show.json", params={"id": 20})
    """

    requires_request_body = True

    def __init__(
        self,
        credentials: TwitterCredentials,
        nonce_factory: Callable[[], str] = lambda: secrets.token_hex(16),
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._credentials = credentials
        self._nonce_factory = nonce_factory
        self._clock = clock

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers["Authorization"] = self.authorization_header(request)
        yield request

    def authorization_header(self, request: httpx.Request) -> str:
        """Compute the ``Authorization`` header value for *request*."""
        oauth_params = {
            "oauth_consumer_key": self._credentials.consumer_key,
            "oauth_nonce": self._nonce_factory(),
            "oauth_signature_method": "HMAC-SHA1",
            "oauth_timestamp": str(int(self._clock())),
            "oauth_token": self._credentials.access_token,
            "oauth_version": "1.0",
        }

        params = list(request.url.params.multi_items())
        content_type = request.headers.get("content-type", "")
        if content_type.startswith("application/x-www-form-urlencoded"):
            params.extend(parse_qsl(request.content.decode("utf-8"), keep_blank_values=True))
        params.extend(oauth_params.items())

        base_string = signature_base_string(request.method, request.url, params)
        oauth_params["oauth_signature"] = self.sign(base_string)

        return "OAuth " + ", ".join(
            f'{percent_encode(k)}="{percent_encode(v)}"' for k, v in sorted(oauth_params.items())
        )

    def sign(self, base_string: str) -> str:
        """Return the base64 HMAC-SHA1 signature of *base_string*."""
        key = "&".join(
            [
                percent_encode(self._credentials.consumer_secret),
                percent_encode(self._credentials.access_token_secret),
            ]
        )
        digest = hmac.new(key.encode("utf-8"), base_string.encode("utf-8"), hashlib.sha1).digest()
        return base64.b64encode(digest).decode("ascii")
