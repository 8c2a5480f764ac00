"""Buffered HTTP response envelope.

Callers that declare a raw response as the return shape of an operation get a
``Response``: the status, headers and fully-read body of the exchange, with
typed decoding deferred until ``read`` is called.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from kcadmin.models.errors import DecodeError, HttpStatusError

T = TypeVar("T")


@lru_cache(maxsize=256)
def type_adapter(type_: Any) -> TypeAdapter[Any]:
    """Return a cached pydantic adapter for ``type_``."""
    return TypeAdapter(type_)


def decode_json(body: str, type_: Any) -> Any:
    """Decode a JSON body into ``type_``.

    Raises:
        DecodeError: If the body is not valid JSON for ``type_``
    """
    try:
        return type_adapter(type_).validate_json(body)
    except ValidationError as e:
        raise DecodeError(f"Failed to read response entity as {type_!r}: {e}") from e


class Response:
    """Immutable status / headers / body triple of one completed exchange."""

    __slots__ = ("_status", "_headers", "_body", "_content_type")

    def __init__(
        self,
        status: int,
        headers: httpx.Headers | None = None,
        body: str | None = None,
        content_type: str | None = None,
    ):
        self._status = status
        self._headers = httpx.Headers(headers or {})
        self._body = body
        self._content_type = content_type

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> Response:
        """Buffer an ``httpx.Response`` that has already been read."""
        content_type = response.headers.get("Content-Type")
        mime_type = content_type.split(";", 1)[0].strip() if content_type else None
        return cls(
            status=response.status_code,
            headers=response.headers,
            body=response.text,
            content_type=mime_type or None,
        )

    @property
    def status(self) -> int:
        return self._status

    @property
    def headers(self) -> httpx.Headers:
        # httpx.Headers is mutable; hand out a copy.
        return self._headers.copy()

    @property
    def body(self) -> str | None:
        return self._body

    @property
    def content_type(self) -> str | None:
        """Bare MIME type of the body, without parameters."""
        return self._content_type

    @property
    def ok(self) -> bool:
        return self._status < 400

    @property
    def status_family(self) -> int:
        """Hundreds digit of the status, e.g. ``2`` for ``201``."""
        return self._status // 100

    @property
    def has_body(self) -> bool:
        return self._body is not None and bool(self._body.strip())

    @property
    def length(self) -> int:
        return -1 if self._body is None else len(self._body)

    def header(self, name: str) -> str | None:
        """Return all values of header ``name`` joined with commas."""
        values = self._headers.get_list(name)
        if not values:
            return None
        return ",".join(values)

    @property
    def location(self) -> str | None:
        return self.header("Location")

    @property
    def etag(self) -> str | None:
        return self.header("ETag")

    @property
    def allowed_methods(self) -> set[str]:
        allow = self.header("Allow")
        if not allow:
            return set()
        return {part.strip() for part in allow.split(",") if part.strip()}

    def read(self, type_: type[T] | Any = str) -> T | None:
        """Decode the buffered body.

        Text is passed through unchanged when ``type_`` is ``str``; any other
        type is decoded from JSON, including parameterized containers such as
        ``list[UserRepresentation]``.

        Raises:
            DecodeError: If the body does not match ``type_``
        """
        if self._body is None:
            return None
        if type_ is str:
            return self._body  # type: ignore[return-value]
        return decode_json(self._body, type_)

    def __repr__(self) -> str:
        return (
            f"Response(status={self._status}, content_type={self._content_type!r}, "
            f"length={self.length})"
        )


def created_id(response: Response) -> str:
    """Return the id of a created entity from its ``Location`` header.

    Raises:
        HttpStatusError: If the response is not ``201 Created``
        DecodeError: If the response carries no ``Location`` header
    """
    if response.status != 201:
        raise HttpStatusError(response.status, response.body)
    location = response.location
    if not location:
        raise DecodeError("Created response has no Location header")
    return location.rstrip("/").rsplit("/", 1)[-1]
