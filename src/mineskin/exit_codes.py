"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~mineskin.exceptions.MineSkinError` subclass.
Shell wrappers can inspect the exit code of the ``mineskin`` CLI to
determine the failure class without parsing stderr.

Example::

    $ mineskin skin 4dd8993d7368409bba7f81222940c78a
    $ echo $?
    4   # EXIT_NOT_FOUND -- no skin with that uuid
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The request was rejected as invalid (HTTP 4xx) or arguments were missing."""

EXIT_AUTH_FAILURE = 3
"""The API key was rejected (HTTP 401/403)."""

EXIT_NOT_FOUND = 4
"""The requested skin or user was not found (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""The MineSkin API returned an HTTP 5xx server error."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_RATE_LIMITED = 7
"""The MineSkin API rejected the request because of its rate limit (HTTP 429)."""

EXIT_QUEUE_CLOSED = 8
"""The request was dropped because the client was shut down."""
