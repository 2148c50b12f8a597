"""Generate commands -- create skins from a URL, an image file, or a user.

Provides the ``mineskin generate`` sub-command group.  All three commands
share the ``--name``, ``--variant`` and ``--private`` options, which map
onto :class:`~mineskin.models.GenerateOptions`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from mineskin.commands import run_with_client
from mineskin.models import GeneratedSkin, GenerateOptions, SkinVariant, SkinVisibility
from mineskin.output import format_response, warning


generate_app = typer.Typer(no_args_is_help=True)

_NAME = typer.Option(None, "--name", help="Custom skin name.")
_VARIANT = typer.Option(None, "--variant", help="Skin variant: classic or slim.")
_PRIVATE = typer.Option(False, "--private", help="Hide the skin from the public listing.")


def _options(name: Optional[str], variant: Optional[SkinVariant], private: bool) -> GenerateOptions:
    return GenerateOptions(
        name=name,
        variant=variant,
        visibility=SkinVisibility.PRIVATE if private else None,
    )


def _show(skin: GeneratedSkin) -> None:
    if skin.duplicate:
        warning(f"Skin {skin.uuid} was generated before; returning the existing skin")
    format_response(skin.model_dump(mode="json", by_alias=True))


@generate_app.command("url")
def generate_url(
    ctx: typer.Context,
    url: str = typer.Argument(help="URL of the skin image."),
    name: Optional[str] = _NAME,
    variant: Optional[SkinVariant] = _VARIANT,
    private: bool = _PRIVATE,
) -> None:
    """Generate a skin from an image URL.

    Example::

        mineskin generate url https://example.com/skin.png --name test
    """
    options = _options(name, variant, private)
    _show(run_with_client(ctx, lambda client: client.generate_url(url, options)))


@generate_app.command("upload")
def generate_upload(
    ctx: typer.Context,
    file: Path = typer.Argument(
        help="PNG skin image.", exists=True, dir_okay=False, readable=True
    ),
    name: Optional[str] = _NAME,
    variant: Optional[SkinVariant] = _VARIANT,
    private: bool = _PRIVATE,
) -> None:
    """Generate a skin by uploading a PNG image."""
    options = _options(name, variant, private)
    data = file.read_bytes()
    _show(run_with_client(ctx, lambda client: client.generate_upload(data, options)))


@generate_app.command("user")
def generate_user(
    ctx: typer.Context,
    user: str = typer.Argument(help="User name or uuid."),
    name: Optional[str] = _NAME,
    variant: Optional[SkinVariant] = _VARIANT,
    private: bool = _PRIVATE,
) -> None:
    """Generate a skin from a Minecraft user's current skin."""
    options = _options(name, variant, private)
    _show(run_with_client(ctx, lambda client: client.generate_user(user, options)))
