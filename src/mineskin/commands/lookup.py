"""Lookup commands -- ``mineskin skin`` and ``mineskin user``.

Both commands are registered directly on the root app.  ``user`` accepts a
name or a uuid: anything longer than 16 characters is treated as a uuid.
"""

from __future__ import annotations

import typer

from mineskin.commands import run_with_client
from mineskin.exceptions import NotFoundError
from mineskin.output import format_response


def skin_command(
    ctx: typer.Context,
    uuid: str = typer.Argument(help="Skin uuid."),
) -> None:
    """Show a skin by uuid.

    Example::

        mineskin skin 4dd8993d7368409bba7f81222940c78a --json
    """
    skin = run_with_client(ctx, lambda client: client.get_skin(uuid))
    if skin is None:
        raise NotFoundError(f"Skin {uuid} not found", status_code=404)
    format_response(skin.model_dump(mode="json", by_alias=True))


def user_command(
    ctx: typer.Context,
    user: str = typer.Argument(help="User name or uuid."),
) -> None:
    """Validate a Minecraft user by name or uuid.

    Exits with code 4 when the user does not exist.
    """
    if len(user) > 16:
        result = run_with_client(ctx, lambda client: client.get_user_by_uuid(user))
    else:
        result = run_with_client(ctx, lambda client: client.get_user_by_name(user))
    if result is None or not result.valid:
        raise NotFoundError(f"User {user} not found", status_code=404)
    format_response(result.model_dump(mode="json"))
