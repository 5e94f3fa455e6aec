"""Terminal and file output for tweetembed.

Two kinds of data leave the program on stdout, or in the file given with
``-o``:

* **documents** -- rendered embeds and expanded files. They are written
  exactly as produced (:meth:`OutputManager.write_document`), so text
  around the tags of an expanded file is not altered.
* **records** -- flat summaries such as ``tweetembed key`` and
  ``tweetembed config show`` (:meth:`OutputManager.write_record`): JSON
  with ``--json`` or ``-o``, an aligned grid on a terminal, and
  ``key<TAB>value`` lines when piped.

Diagnostics (cache hits, retries, warnings, errors) always go to stderr
through a Rich console. Rich itself honours ``NO_COLOR`` and ``TERM=dumb``.

The manager is installed once per invocation by
:func:`tweetembed.app.main_callback`; library code calls the module-level
helpers (:func:`debug`, :func:`warning`, ...) and never touches streams
directly.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterator, Mapping, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text


class OutputManager:
    """Routes documents and records to stdout (or a file) and diagnostics to stderr.

    Both consoles are created without a fixed file, so they always write
    to the current ``sys.stdout`` / ``sys.stderr``.

    Args:
        json_output: Emit records as JSON.
        no_color: Disable colour on both streams.
        quiet: Drop ``info`` and ``success`` messages.
        verbose: Show ``debug`` messages.
        output_file: Write documents and records to this path instead of
            stdout.
    """

    def __init__(
        self,
        json_output: bool = False,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
        output_file: Optional[str] = None,
    ) -> None:
        self._json_output = json_output
        self._quiet = quiet
        self._verbose = verbose
        self._output_file = output_file
        self._stdout = Console(no_color=no_color, highlight=False)
        self._stderr = Console(stderr=True, no_color=no_color, highlight=False)

    # ------------------------------------------------------------------ #
    # Data
    # ------------------------------------------------------------------ #

    def write_document(self, text: str) -> None:
        """Write *text* unchanged to the output file or stdout.

        No newline is added and none is translated, so an expanded
        document keeps its exact bytes outside the replaced tags.
        """
        if self._output_file:
            Path(self._output_file).write_text(text, encoding="utf-8", newline="")
            return
        stream = self._stdout.file
        stream.write(text)
        stream.flush()

    def write_record(self, record: Mapping[str, Any]) -> None:
        """Write a summary mapping. Nested mappings become dotted keys in text form."""
        if self._json_output or self._output_file:
            self.write_document(json.dumps(record, indent=2, ensure_ascii=False) + "\n")
            return

        rows = list(_flatten(record))
        if self._stdout.is_terminal:
            grid = Table.grid(padding=(0, 2))
            grid.add_column(style="bold cyan", no_wrap=True)
            grid.add_column()
            for key, value in rows:
                grid.add_row(Text(key), Text(value))
            self._stdout.print(grid)
        else:
            self.write_document("".join(f"{key}\t{value}\n" for key, value in rows))

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        if not self._quiet:
            self._emit("", "", message)

    def success(self, message: str) -> None:
        if not self._quiet:
            self._emit("", "green", message)

    def warning(self, message: str) -> None:
        """Not suppressed by ``--quiet``."""
        self._emit("Warning: ", "yellow", message)

    def error(self, message: str) -> None:
        """Never suppressed."""
        self._emit("Error: ", "bold red", message)

    def debug(self, message: str) -> None:
        """Only shown with ``--verbose``."""
        if self._verbose:
            self._emit("[debug] ", "dim", message, body_style="dim")

    def _emit(self, prefix: str, style: str, message: str, body_style: str = "") -> None:
        if prefix:
            line = Text.assemble((prefix, style), (message, body_style))
        else:
            line = Text(message, style=style)
        self._stderr.print(line, soft_wrap=True)


def _flatten(record: Mapping[str, Any], prefix: str = "") -> Iterator[tuple[str, str]]:
    for key, value in record.items():
        name = f"{prefix}{key}"
        if isinstance(value, Mapping) and value:
            yield from _flatten(value, f"{name}.")
        elif isinstance(value, str):
            yield name, value
        else:
            yield name, json.dumps(value, ensure_ascii=False, default=str)


# ------------------------------------------------------------------ #
# Global instance (set during app startup)
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one if needed."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager. Test suites call this between tests."""
    global _output
    _output = None


def write_document(text: str) -> None:
    get_output().write_document(text)


def write_record(record: Mapping[str, Any]) -> None:
    get_output().write_record(record)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
