"""Config commands -- view and modify global configuration.

Provides the ``tweetembed config`` sub-command group for reading,
updating, and locating the user's global configuration file
(:class:`~tweetembed.models.GlobalConfig`). Settings are persisted in the
tweetembed config directory and control defaults such as the cache folder,
request timeout, and API base URL.
"""

from __future__ import annotations

import typer

from tweetembed.output import error, info, success, write_document, write_record


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the effective configuration.

    Prints the config directory path followed by the configuration after
    project config, environment variables, and defaults are applied.

    Example::

        tweetembed config show
        tweetembed --json config show
    """
    from tweetembed.config import get_config_dir, resolve_config

    config = resolve_config()
    info(f"Config directory: {get_config_dir()}")
    write_record(config.model_dump(mode="json"))


@config_app.command("path")
def config_path() -> None:
    """Print the path of the global config file."""
    from tweetembed.config import _global_config_path

    write_document(f"{_global_config_path()}\n")


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'cache.directory')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    Uses dot notation for nested keys. The value is automatically
    coerced to match the existing field's type (bool, int, or str).
    The updated config is validated against
    :class:`~tweetembed.models.GlobalConfig` before saving.

    Raises:
        typer.Exit: With code 2 if the key path is invalid, the value
            cannot be coerced, or Pydantic validation fails.

    Example::

        tweetembed config set cache.directory _cache/tweets
        tweetembed config set request.timeout 10
        tweetembed config set cache.enabled false
    """
    from pydantic import ValidationError

    from tweetembed.config import load_global_config, save_global_config
    from tweetembed.models import GlobalConfig

    config = load_global_config()
    data = config.model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target or isinstance(target[final_key], dict):
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    current = target[final_key]
    coerced: object
    if isinstance(current, bool):
        coerced = value.lower() in ("true", "1", "yes")
    elif isinstance(current, int):
        try:
            coerced = int(value)
        except ValueError:
            error(f"Expected integer for {key}, got: {value}")
            raise typer.Exit(code=2) from None
    else:
        coerced = value

    target[final_key] = coerced

    try:
        new_config = GlobalConfig.model_validate(data)
    except ValidationError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_global_config(new_config)
    success(f"Set {key} = {coerced}")
