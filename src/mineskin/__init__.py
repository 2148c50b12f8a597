"""mineskin -- Async client for the MineSkin skin generation API.

This package wraps the MineSkin HTTP API behind a single
:class:`~mineskin.client.MineSkinClient`. Requests are funnelled through
per-channel job queues that keep the client inside the service's rate limits,
generate calls are retried on transient failures, and lookups are memoized
in self-populating caches.

Typical usage::

    async with MineSkinClient(ClientOptions(user_agent="MyApp/1.0")) as client:
        skin = await client.generate_url("https://example.com/skin.png")
        user = await client.get_user_by_name("inventivetalent")

Modules:
    client: The public client facade and its httpx transport.
    scheduler: Spaced FIFO job queues and the generate retry policy.
    cache: Self-populating caches and cache cross-referencing.
    models: Pydantic models for API objects and client options.
    config: XDG-aware configuration file and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    app: Typer CLI entry point.
"""

__version__ = "0.3.0"

from mineskin.client import MineSkinClient  # noqa: E402
from mineskin.models import (  # noqa: E402
    ClientOptions,
    GeneratedSkin,
    GenerateOptions,
    Skin,
    SkinVariant,
    SkinVisibility,
    User,
)

__all__ = [
    "ClientOptions",
    "GenerateOptions",
    "GeneratedSkin",
    "MineSkinClient",
    "Skin",
    "SkinVariant",
    "SkinVisibility",
    "User",
]
