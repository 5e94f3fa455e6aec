"""Twitter API client module for tweetembed.

Provides :class:`TwitterClient`, a blocking client backed by
:class:`httpx.Client` that signs requests with OAuth 1.0a
(:class:`OAuth1Auth`), retries transient failures, and maps HTTP errors to
the exceptions in :mod:`tweetembed.exceptions`.

Example::

    from tweetembed.client import TwitterClient

    with TwitterClient(credentials) as client:
        embed = client.oembed(client.status(20), {})
"""

from tweetembed.client.auth import OAuth1Auth
from tweetembed.client.twitter_client import TwitterClient

__all__ = ["OAuth1Auth", "TwitterClient"]
