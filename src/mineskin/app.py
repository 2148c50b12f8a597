"""Typer application and CLI entry point for mineskin.

This module wires together the top-level Typer application: the root
callback that sets up output and client options, the ``skin`` and ``user``
lookup commands, and the ``generate`` and ``config`` sub-command groups.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. :class:`~mineskin.exceptions.MineSkinError` failures
are printed to stderr and turned into their exit code.

See Also:
    :mod:`mineskin.config`: Options resolution used by every API command.
    :mod:`mineskin.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
from typing import Any, Optional

import typer

from mineskin import __version__
from mineskin.commands.config import config_app
from mineskin.commands.generate import generate_app
from mineskin.commands.lookup import skin_command, user_command
from mineskin.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="mineskin",
    help="Generate and look up Minecraft skins with the MineSkin API.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("skin")(skin_command)
app.command("user")(user_command)
app.add_typer(generate_app, name="generate", help="Generate skins.")
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"mineskin {__version__}")
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
    api_key: Optional[str] = typer.Option(
        None, "--api-key", help="MineSkin API key (overrides MINESKIN_API_KEY)."
    ),
    api_base: Optional[str] = typer.Option(
        None, "--api-base", help="API base URL (overrides MINESKIN_API_BASE)."
    ),
    user_agent: Optional[str] = typer.Option(
        None, "--user-agent", help="User-Agent header (overrides MINESKIN_USER_AGENT)."
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
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
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~mineskin.output.OutputManager`, routes
    library logging through it, and stores the client option overrides in
    ``ctx.obj`` for :func:`~mineskin.commands.run_with_client`.
    """
    from mineskin.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    output = OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose)
    output.configure_logging()
    set_output(output)

    ctx.ensure_object(dict)
    ctx.obj["api_key"] = api_key
    ctx.obj["api_base"] = api_base
    ctx.obj["user_agent"] = user_agent


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``mineskin`` console script.

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
        from mineskin.exceptions import MineSkinError
        from mineskin.output import error

        if isinstance(exc, MineSkinError):
            error(str(exc))
            sys.exit(exc.exit_code)
        error(f"Unexpected error: {exc!r}")
        sys.exit(EXIT_GENERIC_FAILURE)
