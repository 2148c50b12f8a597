"""httpx transport -- issues one request descriptor and maps errors.

:class:`Transport` is the handler behind each :class:`~mineskin.scheduler.JobQueue`.
It owns an :class:`httpx.AsyncClient` configured with the base URL, default
headers and the channel's timeout, sends a :class:`RequestDescriptor`, and
turns error statuses into typed :mod:`mineskin.exceptions`:

* network, timeout and other request failures ->
  :class:`~mineskin.exceptions.ConnectionError_`
  (no status code, so the retry policy leaves them alone)
* 401 / 403 -> :class:`~mineskin.exceptions.AuthError`
* 404 -> :class:`~mineskin.exceptions.NotFoundError`
* 429 -> :class:`~mineskin.exceptions.RateLimitError`
* other 4xx -> :class:`~mineskin.exceptions.ClientError`
* 5xx -> :class:`~mineskin.exceptions.ServerError`
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

import httpx

from mineskin.client.response import extract_response_data
from mineskin.exceptions import (
    ApiError,
    AuthError,
    ClientError,
    ConnectionError_,
    NotFoundError,
    RateLimitError,
    ServerError,
)


@dataclass
class RequestDescriptor:
    """One unit of work for a job queue.

    Exactly one of ``json``, ``data``/``files`` is normally set.  ``method``
    defaults to ``None``, meaning the transport's default method.
    """

    url: str
    method: Optional[str] = None
    headers: dict[str, str] = field(default_factory=dict)
    json: Any = None
    data: Optional[dict[str, Any]] = None
    files: Optional[dict[str, Any]] = None


class Transport:
    """Sends :class:`RequestDescriptor` objects over an :class:`httpx.AsyncClient`.

    Args:
        base_url: Base URL every descriptor ``url`` is relative to.
        headers: Default headers sent with every request.
        timeout: Per-request timeout in seconds.
        method: HTTP method for descriptors that do not set one.
        transport: Optional httpx transport, e.g. :class:`httpx.MockTransport`
            in tests.
    """

    def __init__(
        self,
        base_url: str,
        headers: dict[str, str],
        timeout: float,
        method: str = "GET",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._method = method
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )

    @property
    def method(self) -> str:
        return self._method

    async def issue(self, descriptor: RequestDescriptor) -> httpx.Response:
        """Send *descriptor* and return the response.

        Raises:
            ConnectionError_: If no response was received.
            ApiError: A subclass matching the error status of the response.
        """
        kwargs: dict[str, Any] = {
            "method": descriptor.method or self._method,
            "url": descriptor.url,
            "headers": descriptor.headers,
        }
        if descriptor.files is not None:
            kwargs["files"] = descriptor.files
            if descriptor.data is not None:
                kwargs["data"] = descriptor.data
        elif descriptor.data is not None:
            kwargs["data"] = descriptor.data
        elif descriptor.json is not None:
            kwargs["json"] = descriptor.json

        try:
            response = await self._client.request(**kwargs)
        except httpx.TimeoutException as exc:
            raise ConnectionError_(f"Request to {descriptor.url} timed out: {exc}") from exc
        except httpx.TransportError as exc:
            raise ConnectionError_(f"Connection failed for {descriptor.url}: {exc}") from exc
        except httpx.RequestError as exc:
            # redirect loops, undecodable bodies
            raise ConnectionError_(f"Request to {descriptor.url} failed: {exc}") from exc

        map_response_error(response)
        return response

    async def aclose(self) -> None:
        """Close the underlying :class:`httpx.AsyncClient`."""
        await self._client.aclose()


def map_response_error(response: httpx.Response) -> None:
    """Raise a typed exception for error HTTP status codes."""
    status = response.status_code
    if status < 400:
        return

    detail = extract_response_data(response)
    if isinstance(detail, dict):
        msg = detail.get("error") or detail.get("message") or detail.get("detail") or ""
    elif detail is not None:
        msg = str(detail)[:200]
    else:
        msg = ""

    prefix = f"HTTP {status}"
    full_msg = f"{prefix}: {msg}" if msg else prefix

    exc_type: type[ApiError]
    if status in (401, 403):
        exc_type = AuthError
    elif status == 404:
        exc_type = NotFoundError
    elif status == 429:
        exc_type = RateLimitError
    elif status < 500:
        exc_type = ClientError
    else:
        exc_type = ServerError
    raise exc_type(full_msg, status_code=status, detail=detail)
