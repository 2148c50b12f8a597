"""Config commands -- view and modify the client options file.

Provides the ``mineskin config`` sub-command group for reading, updating,
and resetting the persisted :class:`~mineskin.models.ClientOptions`.
The API key is masked when shown.
"""

from __future__ import annotations

from typing import Any

import typer

from mineskin.output import error, info, print_table, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the current options file contents.

    Example::

        mineskin config show --json
    """
    from mineskin.config import config_path, load_options

    options = load_options()
    info(f"Config file: {config_path()}")
    data = options.model_dump(mode="json")
    if data.get("api_key"):
        data["api_key"] = "****"
    print_table(["key", "value"], _flatten(data), title="mineskin options")


def _flatten(data: dict[str, Any], prefix: str = "") -> list[list[str]]:
    """Turn nested options into ``[dotted_key, value]`` rows, as used by ``config set``."""
    rows: list[list[str]] = []
    for key, value in data.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, dict):
            rows.extend(_flatten(value, f"{dotted}."))
        else:
            rows.append([dotted, "" if value is None else str(value)])
    return rows


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Option key (dot notation, e.g., 'cache.expiration_interval')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set an option value.

    The string value is validated and coerced by
    :class:`~mineskin.models.ClientOptions` before saving.

    Raises:
        typer.Exit: With code 2 if the key path is unknown or validation
            fails.

    Example::

        mineskin config set api_key s3cret
        mineskin config set generate_interval 10
    """
    from mineskin.config import load_options, save_options
    from mineskin.models import ClientOptions

    data = load_options().model_dump(mode="json")

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

    target[final_key] = value

    try:
        options = ClientOptions.model_validate(data)
    except ValueError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_options(options)
    success(f"Set {key} = {value}")


@config_app.command("reset")
def config_reset(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation."),
) -> None:
    """Reset all options to their defaults."""
    from mineskin.config import reset_options

    if not force:
        confirmed = typer.confirm("Reset all options to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    reset_options()
    success("Configuration reset to defaults.")
