"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for tweetembed:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.tweetembed/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Global config** -- A single :class:`~tweetembed.models.GlobalConfig`
  JSON file storing defaults (API base URL, cache, request settings).
* **Project config** -- An optional ``./tweetembed.json`` next to the site
  sources. It can override cache settings and carries the ``twitter``
  section used as the first credential tier.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project-local config, and global config into the
  final effective configuration.
* **Credential resolution** -- :func:`resolve_credentials` picks the four
  Twitter API keys from a :class:`CredentialSource`.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`), which the disk cache relies on as well.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Mapping, Optional

from tweetembed.exceptions import ConfigError, MissingCredentialsError
from tweetembed.models import GlobalConfig, TwitterCredentials

_APP_NAME = "tweetembed"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "tweetembed.json"

CONTEXT_API_KEYS = ("consumer_key", "consumer_secret", "access_token", "access_token_secret")
"""Key names looked up in the per-invocation credential store."""

ENV_API_KEYS = (
    "TWITTER_CONSUMER_KEY",
    "TWITTER_CONSUMER_SECRET",
    "TWITTER_ACCESS_TOKEN",
    "TWITTER_ACCESS_TOKEN_SECRET",
)
"""Environment variable names, in the same order as :data:`CONTEXT_API_KEYS`."""

USAGE_HINT = "Run 'tweetembed render --help' for usage."


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform follows the XDG Base Directory layout (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/tweetembed/`` (default ``~/.config/tweetembed/``).
    On macOS/Windows: ``~/.tweetembed/``.

    Returns:
        Absolute path to the configuration directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        base = _xdg_base("XDG_CONFIG_HOME", (".config",))
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/tweetembed/`` (default ``~/.local/share/tweetembed/``).
    On macOS/Windows: ``~/.tweetembed/logs/``.

    Returns:
        Absolute path to the data directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        base = _xdg_base("XDG_DATA_HOME", (".local", "share"))
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is guaranteed to be an atomic rename on POSIX systems.
    On success the temp file is renamed over *path*; on any failure the temp
    file is cleaned up.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close in finally
        os.replace(tmp_path, path)
    except BaseException:
        # Clean up the temp file on any error (including KeyboardInterrupt).
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def _global_config_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the XDG config directory.

    Returns:
        The deserialised :class:`~tweetembed.models.GlobalConfig`. If the
        file does not exist, a default instance is returned.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk.

    Args:
        config: The configuration to save.
    """
    data = config.model_dump(mode="json")
    _atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./tweetembed.json``.

    Project-local config sits between global config and environment variables
    in the precedence chain. Besides ``cache`` overrides it may carry a
    ``twitter`` section holding the API keys for the site.

    Returns:
        The parsed JSON as a dict, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but does not contain a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


# --- Precedence resolution ---


def resolve_config(
    cli_cache_dir: Optional[str] = None,
    cli_no_cache: bool = False,
) -> GlobalConfig:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_cache_dir``, ``cli_no_cache``)
        2. Environment variables (``TWEETEMBED_CACHE_DIR``)
        3. Project config (``./tweetembed.json``)
        4. User config (``~/.config/tweetembed/config.json``)
        5. Defaults

    Returns:
        The effective :class:`~tweetembed.models.GlobalConfig`.

    Raises:
        ConfigError: If a config file is invalid.
    """
    # 5 + 4. Load base global config (fills in defaults automatically)
    global_cfg = load_global_config()

    # 3. Layer in project-local cache overrides
    project = load_project_config()
    if project is not None and isinstance(project.get("cache"), dict):
        merged = global_cfg.model_dump()
        merged["cache"].update(project["cache"])
        try:
            global_cfg = GlobalConfig.model_validate(merged)
        except ValueError as exc:
            raise ConfigError(f"Invalid cache section in project config: {exc}") from exc

    # 2. Environment variable
    env_cache_dir = os.environ.get("TWEETEMBED_CACHE_DIR")
    if env_cache_dir:
        global_cfg.cache.directory = env_cache_dir

    # 1. CLI flags (highest precedence)
    if cli_cache_dir is not None:
        global_cfg.cache.directory = cli_cache_dir
    if cli_no_cache:
        global_cfg.cache.enabled = False

    return global_cfg


# --- Credential resolution ---


class CredentialSource:
    """The two tiers from which Twitter API keys are resolved.

    Args:
        store: Per-invocation key/value store checked first, typically the
            ``twitter`` section of the project config. Keys are
            :data:`CONTEXT_API_KEYS`.
        environ: Environment mapping checked second. Defaults to
            :data:`os.environ`. Keys are :data:`ENV_API_KEYS`.
    """

    def __init__(
        self,
        store: Optional[Mapping[str, Any]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.store: Mapping[str, Any] = store or {}
        self.environ: Mapping[str, str] = os.environ if environ is None else environ

    @classmethod
    def from_project(cls, project: Optional[Mapping[str, Any]]) -> CredentialSource:
        """Build a source whose store is the ``twitter`` section of *project*."""
        section = (project or {}).get("twitter") or {}
        if not isinstance(section, Mapping):
            raise ConfigError("The 'twitter' section of the project config must be an object")
        return cls(store=section)


def _store_has_keys(store: Mapping[str, Any], keys: tuple[str, ...]) -> bool:
    return all(store.get(key) is not None for key in keys)


def resolve_credentials(source: CredentialSource) -> TwitterCredentials:
    """Resolve the four Twitter API keys from *source*.

    The store tier is used only when it holds all four keys with non-null
    values; otherwise the environment tier is tried. An incomplete tier is
    not an error on its own.

    Args:
        source: Where to look for the keys.

    Returns:
        The resolved :class:`~tweetembed.models.TwitterCredentials`.

    Raises:
        MissingCredentialsError: If neither tier holds a complete set.
    """
    if _store_has_keys(source.store, CONTEXT_API_KEYS):
        values = [str(source.store[key]) for key in CONTEXT_API_KEYS]
    elif _store_has_keys(source.environ, ENV_API_KEYS):
        values = [source.environ[key] for key in ENV_API_KEYS]
    else:
        raise MissingCredentialsError(
            "Twitter API keys not found. You can specify these in the 'twitter' "
            f"section of {_PROJECT_CONFIG_FILENAME} or in the environment "
            f"({', '.join(ENV_API_KEYS)}). {USAGE_HINT}"
        )
    return TwitterCredentials(**dict(zip(CONTEXT_API_KEYS, values)))
