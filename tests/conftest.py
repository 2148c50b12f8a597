"""Shared test fixtures for mineskin.

Provides a fake MineSkin API backed by :class:`httpx.MockTransport`, a
controllable clock for cache expiry tests, config isolation, and output
state resets.  These fixtures are discovered automatically by pytest.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Callable, Optional, Union

import httpx
import pytest

from mineskin.client import MineSkinClient
from mineskin.models import ClientOptions
from mineskin.output import reset_output


Route = Union[httpx.Response, Exception, Callable[[httpx.Request], httpx.Response]]


# ---------------------------------------------------------------------------
# Global state resets
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_global_state() -> None:
    """Reset the global OutputManager and the ``mineskin`` logger after every test.

    The CLI callback installs a RichHandler bound to the streams of the
    CliRunner invocation and disables propagation; both must be undone so
    later tests (and ``caplog``) see a clean logger.
    """
    yield
    reset_output()
    logger = logging.getLogger("mineskin")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


# ---------------------------------------------------------------------------
# Fake API
# ---------------------------------------------------------------------------


class FakeApi:
    """Scripted stand-in for the MineSkin API.

    Each route maps ``"METHOD /path"`` to a list of outcomes consumed in
    order; the last outcome repeats.  An outcome is an
    :class:`httpx.Response`, an exception to raise, or a callable taking
    the request; a coroutine function is awaited by the mock transport.
    Every request is recorded in :attr:`requests`.
    """

    def __init__(self) -> None:
        self.routes: dict[str, list[Route]] = {}
        self.requests: list[httpx.Request] = []
        self.issued_at: list[float] = []

    def add(self, route: str, *outcomes: Route) -> None:
        self.routes[route] = list(outcomes)

    def add_json(self, route: str, data: Any, status_code: int = 200) -> None:
        self.add(route, httpx.Response(status_code, json=data))

    def calls(self, route: Optional[str] = None) -> int:
        if route is None:
            return len(self.requests)
        return sum(1 for r in self.requests if f"{r.method} {r.url.path}" == route)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        try:
            self.issued_at.append(asyncio.get_running_loop().time())
        except RuntimeError:
            pass
        key = f"{request.method} {request.url.path}"
        outcomes = self.routes.get(key)
        if not outcomes:
            return httpx.Response(404, json={"error": f"no route for {key}"})
        outcome = outcomes.pop(0) if len(outcomes) > 1 else outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        if callable(outcome):
            return outcome(request)
        return outcome

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @staticmethod
    def body(request: httpx.Request) -> Any:
        return json.loads(request.content)


@pytest.fixture
def api() -> FakeApi:
    """An empty fake MineSkin API."""
    return FakeApi()


def fast_options(**overrides: Any) -> ClientOptions:
    """Client options with no spacing between requests and a custom user agent."""
    values: dict[str, Any] = {
        "user_agent": "MineSkinClient/Python/Test",
        "api_base": "https://api.mineskin.test",
        "generate_interval": 0,
        "get_interval": 0,
        "max_tries": 3,
    }
    values.update(overrides)
    return ClientOptions(**values)


@pytest.fixture
async def make_client(api: FakeApi):
    """Factory for MineSkinClients wired to the fake API; closes them afterwards.

    Keyword arguments override the :func:`fast_options` defaults.
    """
    created: list[MineSkinClient] = []

    def _make(**overrides: Any) -> MineSkinClient:
        c = MineSkinClient(fast_options(**overrides), transport=api.transport)
        created.append(c)
        return c

    yield _make
    for c in created:
        await c.aclose()


@pytest.fixture
async def client(make_client) -> MineSkinClient:
    """A MineSkinClient wired to the fake API with zero spacing."""
    return make_client()


# ---------------------------------------------------------------------------
# Sample payloads
# ---------------------------------------------------------------------------


SKIN_UUID = "4dd8993d7368409bba7f81222940c78a"


def skin_payload(uuid: str = SKIN_UUID, **extra: Any) -> dict[str, Any]:
    """Build a skin JSON object as returned by the API."""
    payload = {
        "uuid": uuid,
        "id": 1234,
        "idStr": "1234",
        "name": "inventivetalent",
        "variant": "classic",
        "data": {
            "uuid": "b0d4b28b-c1d1-4d0d-a3b7-6b2d28b7ec4f",
            "texture": {
                "value": "ewogICJ0aW1lc3RhbXAiIDog",
                "signature": "c2lnbmF0dXJl",
                "url": "https://textures.minecraft.net/texture/abc",
                "urls": {"skin": "https://textures.minecraft.net/texture/abc"},
            },
        },
        "timestamp": 1600000000,
        "duration": 1500,
        "private": False,
        "views": 3,
    }
    payload.update(extra)
    return payload


# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_CONFIG_HOME at tmp_path, forces the XDG layout, and clears
    all MINESKIN_* environment variables.

    Returns:
        The mineskin config directory inside tmp_path.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setattr("mineskin.config._is_xdg_platform", lambda: True)
    for var in ["MINESKIN_API_KEY", "MINESKIN_API_BASE", "MINESKIN_USER_AGENT"]:
        monkeypatch.delenv(var, raising=False)
    return tmp_path / "config" / "mineskin"


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()


@pytest.fixture
def skin_json() -> Callable[..., dict[str, Any]]:
    """The :func:`skin_payload` builder, for tests that need API skin objects."""
    return skin_payload
