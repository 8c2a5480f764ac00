"""Mapping of HTTP responses onto declared return shapes."""

from __future__ import annotations

from typing import Any

import httpx

from kcadmin.models.errors import BadRequestError, HttpStatusError
from kcadmin.models.response import Response, decode_json


def raise_for_status(response: httpx.Response) -> None:
    """Raise the structured failure for a status of 400 or above."""
    status = response.status_code
    if status < 400:
        return
    if status == 400:
        raise BadRequestError(status, response.text)
    raise HttpStatusError(status, response.text)


def map_response(returns: Any, response: httpx.Response) -> Any:
    """Convert a completed, fully-read exchange into the declared shape.

    Raises:
        BadRequestError: For status 400
        HttpStatusError: For any other status of 400 or above
        DecodeError: If the body does not match ``returns``
    """
    raise_for_status(response)

    if returns is None:
        return None
    if returns is Response:
        return Response.from_httpx(response)

    body = response.text
    if returns is str:
        return body
    if not body.strip():
        return None
    return decode_json(body, returns)
