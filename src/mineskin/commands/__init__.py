"""Built-in CLI sub-commands for mineskin.

* :mod:`~mineskin.commands.lookup` -- ``skin`` and ``user`` lookups.
* :mod:`~mineskin.commands.generate` -- ``generate url|upload|user``.
* :mod:`~mineskin.commands.config` -- view and modify the options file.

:func:`run_with_client` is the bridge between Typer's synchronous command
callbacks and the asynchronous :class:`~mineskin.client.MineSkinClient`.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, TypeVar

import typer

from mineskin.client import MineSkinClient

T = TypeVar("T")


def run_with_client(ctx: typer.Context, operation: Callable[[MineSkinClient], Awaitable[T]]) -> T:
    """Resolve options from *ctx*, open a client, and run *operation* to completion."""
    from mineskin.config import resolve_options
    from mineskin.output import debug

    obj: dict[str, Any] = ctx.obj or {}
    options = resolve_options(
        cli_api_key=obj.get("api_key"),
        cli_api_base=obj.get("api_base"),
        cli_user_agent=obj.get("user_agent"),
    )
    debug(
        f"API {options.api_base} as {options.user_agent!r}"
        f" ({'with' if options.api_key else 'without'} API key)"
    )

    async def _run() -> T:
        async with MineSkinClient(options) as client:
            return await operation(client)

    return asyncio.run(_run())
