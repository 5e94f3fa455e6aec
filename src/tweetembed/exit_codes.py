"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~tweetembed.exceptions.TweetEmbedError` subclass.
Site build scripts can inspect the exit code to determine the failure class
without parsing stderr.

Example::

    $ tweetembed render https://twitter.com/jack/status/20
    $ echo $?
    3   # EXIT_AUTH_FAILURE -- no Twitter API keys were found
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or tag arguments."""

EXIT_AUTH_FAILURE = 3
"""Credentials were missing or rejected by the API."""

EXIT_NOT_FOUND = 4
"""The requested resource was not found (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""The remote API returned an HTTP 5xx (or unexpected 4xx) error."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_CACHE_ERROR = 8
"""A cache file could not be read or did not contain a JSON object."""
