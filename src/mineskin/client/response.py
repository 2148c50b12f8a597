"""Response body helpers shared by the transport and the client.

:func:`extract_response_data` decodes a response body for error messages
and CLI output; :func:`parse_model` validates a body into one of the
:mod:`mineskin.models` API models.
"""

from __future__ import annotations

from typing import Any, Optional, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from mineskin.exceptions import MineSkinError

M = TypeVar("M", bound=BaseModel)


def extract_response_data(response: httpx.Response) -> Any:
    """Extract the body from an HTTP response.

    Attempts to parse the body as JSON first.  If that fails (e.g. the
    response is HTML or plain text), returns the raw text.  Returns
    ``None`` for responses with no content.
    """
    if not response.content:
        return None

    try:
        return response.json()
    except ValueError:
        pass

    return response.text


def parse_model(response: httpx.Response, model: type[M]) -> Optional[M]:
    """Validate the JSON body of *response* as *model*.

    Returns:
        The parsed model, or ``None`` when the body is empty or ``null``.

    Raises:
        MineSkinError: If the body is not a JSON object matching *model*.
    """
    data = extract_response_data(response)
    if not data:
        return None
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise MineSkinError(
            f"Unexpected {model.__name__} payload from {response.request.url}: {exc}",
            status_code=response.status_code,
        ) from exc
