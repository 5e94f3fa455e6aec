"""Exception hierarchy for tweetembed.

All exceptions inherit from :class:`TweetEmbedError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`tweetembed.exit_codes`.
The top-level error handler in :func:`tweetembed.app.main` catches
``TweetEmbedError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    TweetEmbedError (exit 1)
    +-- InvalidArgumentsError   (exit 2)
    +-- MissingCredentialsError (exit 3)
    +-- AuthError               (exit 3)
    +-- ForbiddenError          (exit 3)
    +-- NotFoundError           (exit 4)
    +-- ServerError             (exit 5)
    +-- ConnectionError_        (exit 6)
    +-- CorruptCacheError       (exit 8)
    +-- ConfigError             (exit 1)

:class:`NotFoundError` and :class:`ForbiddenError` raised by the status
lookup are recovered by :class:`~tweetembed.fetcher.OembedFetcher` and never
reach the entry point during a render.
"""

from tweetembed.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CACHE_ERROR,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
)


class TweetEmbedError(Exception):
    """Base exception for all tweetembed errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`tweetembed.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidArgumentsError(TweetEmbedError):
    """Raised when tag arguments are empty or do not start with a kind or status URL."""

    exit_code = EXIT_INVALID_USAGE


class MissingCredentialsError(TweetEmbedError):
    """Raised when no credential tier provides all four Twitter API keys."""

    exit_code = EXIT_AUTH_FAILURE


class AuthError(TweetEmbedError):
    """Raised when the API rejects the credentials (HTTP 401)."""

    exit_code = EXIT_AUTH_FAILURE


class ForbiddenError(TweetEmbedError):
    """Raised when the API refuses access to a resource (HTTP 403), e.g. a protected account."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(TweetEmbedError):
    """Raised when the API returns HTTP 404 (deleted or unknown status)."""

    exit_code = EXIT_NOT_FOUND


class ServerError(TweetEmbedError):
    """Raised when the API returns an HTTP 5xx error or an unexpected 4xx."""

    exit_code = EXIT_SERVER_ERROR


class ConnectionError_(TweetEmbedError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class CorruptCacheError(TweetEmbedError):
    """Raised when a cache file exists but cannot be read back as a JSON object."""

    exit_code = EXIT_CACHE_ERROR


class ConfigError(TweetEmbedError):
    """Raised for configuration problems (invalid JSON, failed validation)."""

    exit_code = EXIT_GENERIC_FAILURE
