"""HTTP client module for mineskin.

Provides :class:`MineSkinClient`, the asynchronous MineSkin API client, and
the :class:`Transport` / :class:`RequestDescriptor` pair it schedules onto
its job queues.

Example::

    from mineskin.client import MineSkinClient

    async with MineSkinClient() as client:
        skin = await client.get_skin("4dd8993d7368409bba7f81222940c78a")
"""

from mineskin.client.client import MineSkinClient
from mineskin.client.transport import RequestDescriptor, Transport

__all__ = ["MineSkinClient", "RequestDescriptor", "Transport"]
