"""Tests for the httpx transport and its error mapping."""

from __future__ import annotations

import httpx
import pytest

from mineskin.client.response import extract_response_data, parse_model
from mineskin.client.transport import RequestDescriptor, Transport, map_response_error
from mineskin.exceptions import (
    AuthError,
    ClientError,
    ConnectionError_,
    MineSkinError,
    NotFoundError,
    RateLimitError,
    ServerError,
)
from mineskin.models import User


def _transport(handler, method: str = "GET") -> Transport:
    return Transport(
        "https://api.mineskin.test",
        {"User-Agent": "Test/1.0"},
        timeout=5,
        method=method,
        transport=httpx.MockTransport(handler),
    )


def _response(status: int, **kwargs) -> httpx.Response:
    return httpx.Response(
        status,
        request=httpx.Request("GET", "https://api.mineskin.test/x"),
        **kwargs,
    )


# ------------------------------------------------------------------ #
# Issuing
# ------------------------------------------------------------------ #


class TestIssue:
    async def test_uses_default_method_and_headers(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"ok": True})

        transport = _transport(handler, method="POST")
        response = await transport.issue(RequestDescriptor(url="/generate/url", json={"url": "u"}))
        await transport.aclose()

        assert response.json() == {"ok": True}
        assert seen[0].method == "POST"
        assert seen[0].url == "https://api.mineskin.test/generate/url"
        assert seen[0].headers["User-Agent"] == "Test/1.0"
        assert seen[0].headers["Content-Type"] == "application/json"

    async def test_descriptor_method_overrides_default(self) -> None:
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.method)
            return httpx.Response(200)

        transport = _transport(handler, method="POST")
        await transport.issue(RequestDescriptor(url="/get/uuid/x", method="GET"))
        await transport.aclose()
        assert seen == ["GET"]

    async def test_multipart_body(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200)

        transport = _transport(handler, method="POST")
        await transport.issue(
            RequestDescriptor(
                url="/generate/upload",
                data={"name": "test"},
                files={"file": ("skin.png", b"\x89PNG", "image/png")},
            )
        )
        await transport.aclose()

        request = seen[0]
        assert request.headers["Content-Type"].startswith("multipart/form-data")
        assert b'filename="skin.png"' in request.content
        assert b'name="name"' in request.content

    async def test_timeout_becomes_connection_error_without_status(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("too slow", request=request)

        transport = _transport(handler)
        with pytest.raises(ConnectionError_) as exc_info:
            await transport.issue(RequestDescriptor(url="/get/uuid/x"))
        await transport.aclose()
        assert exc_info.value.status_code is None

    async def test_connect_error_becomes_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        transport = _transport(handler)
        with pytest.raises(ConnectionError_):
            await transport.issue(RequestDescriptor(url="/get/uuid/x"))
        await transport.aclose()

    async def test_redirect_loop_becomes_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(302, headers={"Location": str(request.url)})

        transport = _transport(handler)
        with pytest.raises(ConnectionError_) as exc_info:
            await transport.issue(RequestDescriptor(url="/get/uuid/abc"))
        await transport.aclose()
        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, httpx.TooManyRedirects)

    async def test_error_status_is_raised(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"error": "boom"})

        transport = _transport(handler)
        with pytest.raises(ServerError, match="HTTP 500: boom"):
            await transport.issue(RequestDescriptor(url="/get/uuid/x"))
        await transport.aclose()


# ------------------------------------------------------------------ #
# Error mapping
# ------------------------------------------------------------------ #


class TestMapResponseError:
    @pytest.mark.parametrize(
        ("status", "exc_type"),
        [
            (400, ClientError),
            (401, AuthError),
            (403, AuthError),
            (404, NotFoundError),
            (429, RateLimitError),
            (418, ClientError),
            (500, ServerError),
            (503, ServerError),
        ],
    )
    def test_status_mapping(self, status: int, exc_type: type) -> None:
        with pytest.raises(exc_type) as exc_info:
            map_response_error(_response(status, json={"error": "nope"}))
        assert exc_info.value.status_code == status
        assert exc_info.value.detail == {"error": "nope"}

    def test_success_passes(self) -> None:
        map_response_error(_response(200, json={}))

    def test_text_body_in_message(self) -> None:
        with pytest.raises(ServerError, match="Bad Gateway"):
            map_response_error(_response(502, text="Bad Gateway"))

    def test_empty_body_message(self) -> None:
        with pytest.raises(ClientError) as exc_info:
            map_response_error(_response(400))
        assert str(exc_info.value) == "HTTP 400"


# ------------------------------------------------------------------ #
# Body helpers
# ------------------------------------------------------------------ #


class TestResponseHelpers:
    def test_extract_json(self) -> None:
        assert extract_response_data(_response(200, json={"a": 1})) == {"a": 1}

    def test_extract_text(self) -> None:
        assert extract_response_data(_response(200, text="hello")) == "hello"

    def test_extract_empty(self) -> None:
        assert extract_response_data(_response(204)) is None

    def test_parse_model(self) -> None:
        user = parse_model(_response(200, json={"uuid": "abc", "name": "Foo", "valid": True}), User)
        assert user == User(uuid="abc", name="Foo", valid=True)

    def test_parse_empty_body_is_none(self) -> None:
        assert parse_model(_response(200), User) is None

    def test_parse_invalid_payload_raises(self) -> None:
        with pytest.raises(MineSkinError):
            parse_model(_response(200, json=["not", "a", "user"]), User)
