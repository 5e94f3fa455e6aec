"""Shared test fixtures for tweetembed.

Provides reusable fixtures for isolated config environments, credential
sources, an in-memory Twitter client double, output state management, and
running CLI commands. These fixtures are automatically discovered by pytest
and available to all test modules without explicit imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import pytest

from tweetembed.config import CONTEXT_API_KEYS, ENV_API_KEYS, CredentialSource
from tweetembed.output import OutputManager, reset_output, set_output


STATUS_URL = "https://twitter.com/twitter_user/status/12345"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    ``main_callback`` installs a manager carrying that invocation's flags
    (``--quiet``, ``-o``, ...). Resetting keeps them from leaking into the
    next test.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path
    so that tests never touch real user config. Clears the Twitter and
    TWEETEMBED_* environment variables and changes the working directory
    to tmp_path, so the default ``.tweet-cache`` folder lands there too.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in [*ENV_API_KEYS, "TWEETEMBED_CACHE_DIR"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------


@pytest.fixture
def credential_store() -> dict[str, str]:
    """A complete per-invocation credential store."""
    return {key: f"store-{key}" for key in CONTEXT_API_KEYS}


@pytest.fixture
def credential_source(credential_store: dict[str, str]) -> CredentialSource:
    """A credential source backed by a complete store and an empty environment."""
    return CredentialSource(store=credential_store, environ={})


# ---------------------------------------------------------------------------
# Remote client double
# ---------------------------------------------------------------------------


class FakeTwitterClient:
    """In-memory stand-in for :class:`~tweetembed.client.TwitterClient`.

    Records every call; ``status_error`` makes :meth:`status` raise.
    """

    def __init__(self) -> None:
        self.status_result: dict[str, Any] = {"id": 12345, "id_str": "12345"}
        self.embed_result: dict[str, Any] = {"html": "<p>tweet html</p>"}
        self.status_error: Optional[Exception] = None
        self.status_calls: list[int] = []
        self.oembed_calls: list[tuple[Any, dict[str, Any]]] = []
        self.opened = 0
        self.credentials: list[Any] = []

    def __call__(self, credentials: Any) -> FakeTwitterClient:
        self.credentials.append(credentials)
        return self

    def __enter__(self) -> FakeTwitterClient:
        self.opened += 1
        return self

    def __exit__(self, *args: object) -> None:
        return None

    def status(self, status_id: int) -> dict[str, Any]:
        self.status_calls.append(status_id)
        if self.status_error is not None:
            raise self.status_error
        return self.status_result

    def oembed(self, status: Any, options: dict[str, Any]) -> dict[str, Any]:
        self.oembed_calls.append((status, dict(options)))
        return self.embed_result


@pytest.fixture
def fake_client() -> FakeTwitterClient:
    """A fake client that doubles as its own client factory."""
    return FakeTwitterClient()


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet, colourless output manager for the test."""
    output = OutputManager(no_color=True, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
