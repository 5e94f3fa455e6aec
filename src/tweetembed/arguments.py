"""Parsing of the free-text arguments given to a ``twitter`` tag.

Accepted forms::

    https://twitter.com/jack/status/20
    https://twitter.com/jack/status/20 align='center' maxwidth=400
    oembed https://twitter.com/jack/status/20 align='center'

The optional leading keyword must be a key of
:data:`tweetembed.fetcher.FETCHERS`. Without it the first token must look
like a status URL and the default kind is used.
"""

from __future__ import annotations

import re

from tweetembed.config import USAGE_HINT
from tweetembed.exceptions import InvalidArgumentsError
from tweetembed.fetcher import DEFAULT_KIND, FETCHERS
from tweetembed.models import FetchRequest

TWITTER_STATUS_URL = re.compile(r"^https?://twitter\.com/(:#!/)?\w+/status(es)?/\d+", re.IGNORECASE)
_QUOTED = re.compile(r"^'(.*)'$")


def parse_options(tokens: list[str]) -> tuple[tuple[str, str], ...]:
    """Parse ``key=value`` tokens into ordered option pairs.

    Whitespace around ``=`` is trimmed and a single-quoted value loses its
    quotes. Tokens without ``=`` or with an empty key or value are skipped.
    A repeated key keeps its first position and its last value.
    """
    options: dict[str, str] = {}
    for token in tokens:
        key, sep, value = token.partition("=")
        key, value = key.strip(), value.strip()
        if not sep or not key or not value:
            continue
        match = _QUOTED.match(value)
        if match:
            value = match.group(1)
        options[key] = value
    return tuple(options.items())


def parse_arguments(raw_arguments: str) -> FetchRequest:
    """Turn raw tag arguments into a :class:`~tweetembed.models.FetchRequest`.

    Args:
        raw_arguments: Text between the tag name and the closing delimiter.

    Returns:
        The parsed request. With a kind keyword but no URL the request has
        an empty ``target_url`` and renders the generic error body.

    Raises:
        InvalidArgumentsError: If the arguments start with neither a known
            kind nor a status URL (including empty arguments).
    """
    tokens = raw_arguments.split()

    if tokens and tokens[0] in FETCHERS:
        kind, args = tokens[0], tokens[1:]
    elif tokens and TWITTER_STATUS_URL.match(tokens[0]):
        kind, args = DEFAULT_KIND, tokens
    else:
        raise InvalidArgumentsError(
            f"Invalid arguments '{' '.join(tokens)}' passed to 'tweetembed'. {USAGE_HINT}"
        )

    target_url = args[0] if args else ""
    return FetchRequest(kind=kind, target_url=target_url, options=parse_options(args[1:]))
