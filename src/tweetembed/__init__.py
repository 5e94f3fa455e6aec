"""tweetembed -- Render Twitter statuses as cached HTML embeds.

This package fetches oEmbed data for a status URL from the Twitter API,
caches the result on disk keyed by the identity of the request, and wraps
the returned HTML in an embed container. It can be used as a library
(:class:`~tweetembed.renderer.TweetRenderer`), to expand
``{% twitter ... %}`` tags inside documents, or from the command line.

Typical workflow::

    tweetembed render https://twitter.com/jack/status/20 align='center'
    tweetembed expand post.md -o post.html

Modules:
    app: Typer application factory and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: XDG-aware configuration and credential resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.4.0"
