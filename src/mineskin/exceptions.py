"""Exception hierarchy for mineskin.

All exceptions inherit from :class:`MineSkinError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`mineskin.exit_codes`
and an optional HTTP ``status_code``. The retry policy in
:mod:`mineskin.scheduler.retry` branches on ``status_code``: errors without
one (network failures) are never retried.

Subclass hierarchy::

    MineSkinError (exit 1)
    +-- ConnectionError_    (exit 6)  no response received
    +-- ApiError            (exit 1)  the API answered with an error status
    |   +-- ClientError     (exit 2)  4xx
    |   |   +-- AuthError       (exit 3)  401 / 403
    |   |   +-- NotFoundError   (exit 4)  404
    |   |   +-- RateLimitError  (exit 7)  429
    |   +-- ServerError     (exit 5)  5xx
    +-- QueueClosedError    (exit 8)
    +-- InvalidUserError    (exit 2)
    +-- ConfigError         (exit 1)
"""

from __future__ import annotations

from typing import Any, Optional

from mineskin.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_QUEUE_CLOSED,
    EXIT_RATE_LIMITED,
    EXIT_SERVER_ERROR,
)


class MineSkinError(Exception):
    """Base exception for all mineskin errors.

    Args:
        message: Human-readable error description.
        status_code: HTTP status of the failed response, or ``None`` when
            no response was received.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        exit_code: int | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        if exit_code is not None:
            self.exit_code = exit_code


class ConnectionError_(MineSkinError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Never carries a status code. Named with a trailing underscore to avoid
    shadowing the built-in ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class ApiError(MineSkinError):
    """Raised when the API answers with an error status.

    Args:
        message: Human-readable error description.
        status_code: The HTTP status code of the response.
        detail: The decoded response body (JSON object or raw text).
    """

    def __init__(self, message: str, status_code: int, detail: Any = None):
        super().__init__(message, status_code=status_code)
        self.detail = detail


class ClientError(ApiError):
    """Raised for HTTP 4xx responses: the request itself was rejected."""

    exit_code = EXIT_INVALID_USAGE


class AuthError(ClientError):
    """Raised when the API key is missing or rejected (HTTP 401 / 403)."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(ClientError):
    """Raised when the API returns HTTP 404 (skin or user not found)."""

    exit_code = EXIT_NOT_FOUND


class RateLimitError(ClientError):
    """Raised when the API returns HTTP 429 (too many requests)."""

    exit_code = EXIT_RATE_LIMITED


class ServerError(ApiError):
    """Raised when the API returns an HTTP 5xx server error."""

    exit_code = EXIT_SERVER_ERROR


class QueueClosedError(MineSkinError):
    """Raised for submissions that were dropped because their job queue was ended."""

    exit_code = EXIT_QUEUE_CLOSED


class InvalidUserError(MineSkinError):
    """Raised when a user name cannot be resolved to a uuid for generation."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(MineSkinError):
    """Raised for configuration problems (invalid JSON, bad option values)."""

    exit_code = EXIT_GENERIC_FAILURE
