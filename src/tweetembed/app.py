"""Typer application factory and CLI entry point for tweetembed.

This module wires together the top-level Typer application and its
commands:

* ``render`` -- render one set of tag arguments to HTML.
* ``expand`` -- expand every ``{% twitter %}`` tag in a document.
* ``key`` -- show the cache key and cache file for a set of tag arguments.
* ``config`` -- view and modify the global configuration.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
:class:`~tweetembed.exceptions.TweetEmbedError` instances exit with their
``exit_code``; any other exception is written to a crash log under the data
directory.

See Also:
    :mod:`tweetembed.config`: Configuration and credential resolution.
    :mod:`tweetembed.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import typer

from tweetembed import __version__
from tweetembed.commands.config import config_app
from tweetembed.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="tweetembed",
    help="Render Twitter statuses as cached HTML embeds.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"tweetembed {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
    no_cache: bool = typer.Option(
        False, "--no-cache", help="Neither read nor write the embed cache."
    ),
    cache_dir: Optional[str] = typer.Option(
        None, "--cache-dir", help="Embed cache folder (default: ./.tweet-cache)."
    ),
    output_file: Optional[str] = typer.Option(
        None, "-o", "--output", help="Output file path."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~tweetembed.output.OutputManager` from
    CLI flags and stores the cache options in ``ctx.obj`` for the
    sub-commands.
    """
    from tweetembed.output import OutputManager, set_output

    output = OutputManager(
        json_output=json_output,
        no_color=no_color,
        quiet=quiet,
        verbose=verbose,
        output_file=output_file,
    )
    set_output(output)

    ctx.ensure_object(dict)
    ctx.obj["no_cache"] = no_cache
    ctx.obj["cache_dir"] = cache_dir


def _build_renderer(ctx: typer.Context) -> tuple[Any, Any]:
    """Create the renderer and credential source for the current invocation."""
    from tweetembed.cache import create_cache
    from tweetembed.config import CredentialSource, load_project_config, resolve_config
    from tweetembed.renderer import TweetRenderer

    obj = ctx.obj or {}
    config = resolve_config(
        cli_cache_dir=obj.get("cache_dir"),
        cli_no_cache=obj.get("no_cache", False),
    )
    renderer = TweetRenderer(
        create_cache(config.cache),
        request_config=config.request,
        api_base_url=config.api_base_url,
    )
    source = CredentialSource.from_project(load_project_config())
    return renderer, source


@app.command("render")
def render_command(
    ctx: typer.Context,
    arguments: list[str] = typer.Argument(
        help="Tag arguments: [oembed] STATUS_URL [key=value ...]"
    ),
) -> None:
    """Render a status embed and print the HTML followed by a newline.

    Example::

        tweetembed render https://twitter.com/jack/status/20 "align='center'"
    """
    from tweetembed.output import write_document

    renderer, source = _build_renderer(ctx)
    write_document(renderer.render(" ".join(arguments), source) + "\n")


@app.command("expand")
def expand_command(
    ctx: typer.Context,
    path: Path = typer.Argument(
        help="Document containing {% twitter %} tags.", exists=True, dir_okay=False
    ),
) -> None:
    """Expand every twitter tag in a document and print the result.

    Text outside the tags is written back unchanged, line endings included.

    Example::

        tweetembed -o _site/hello.md expand _posts/hello.md
    """
    from tweetembed.output import write_document
    from tweetembed.tags import expand_tags

    renderer, source = _build_renderer(ctx)
    with path.open(encoding="utf-8", newline="") as handle:
        text = handle.read()
    write_document(expand_tags(text, renderer, source))


@app.command("key")
def key_command(
    ctx: typer.Context,
    arguments: list[str] = typer.Argument(
        help="Tag arguments: [oembed] STATUS_URL [key=value ...]"
    ),
) -> None:
    """Show the cache key (and cache file) for a set of tag arguments.

    No credentials are needed and no remote call is made.
    """
    from tweetembed.arguments import parse_arguments
    from tweetembed.cache import DiskCache, create_cache
    from tweetembed.config import resolve_config
    from tweetembed.fetcher import cache_key
    from tweetembed.output import write_record

    obj = ctx.obj or {}
    request = parse_arguments(" ".join(arguments))
    key = cache_key(request)
    config = resolve_config(
        cli_cache_dir=obj.get("cache_dir"),
        cli_no_cache=obj.get("no_cache", False),
    )
    cache = create_cache(config.cache)
    path = str(cache.path_for(key)) if isinstance(cache, DiskCache) else None

    write_record(
        {
            "kind": request.kind,
            "url": request.target_url,
            "options": request.option_dict(),
            "key": key,
            "path": path,
            "cached": cache.read(key) is not None,
        }
    )


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from tweetembed.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``tweetembed`` console script.

    Unhandled :class:`~tweetembed.exceptions.TweetEmbedError` instances
    cause a clean exit with the error's ``exit_code``. All other exceptions
    produce a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from tweetembed.exceptions import TweetEmbedError
        from tweetembed.output import error

        if isinstance(exc, TweetEmbedError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
