"""Generic request dispatch for declarative resource contracts.

A ``ResourceProxy`` turns calls on a ``Resource`` route table into HTTP
requests. Operations are sent with the current access token; a ``401`` answer
invalidates that token and the request is rebuilt and sent exactly once more.
Locators return a new proxy scoped to the composed sub-resource path.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection, Mapping
from dataclasses import dataclass, field
from typing import Any

import httpx

from kcadmin.dispatch.paths import expand_path, join_paths, normalize_base_url
from kcadmin.dispatch.returns import map_response
from kcadmin.models.errors import DeclarationError, TransportError
from kcadmin.models.response import type_adapter
from kcadmin.routes import (
    APPLICATION_JSON,
    TEXT_PLAIN,
    Locator,
    Operation,
    Param,
    ParamRole,
    Resource,
)

logger = logging.getLogger(__name__)

TokenSupplier = Callable[[], str | None]
TokenInvalidator = Callable[[str], None]

_ABSENT = object()


@dataclass
class RequestParts:
    """Arguments of one invocation sorted by their declared role."""

    path_values: dict[str, Any] = field(default_factory=dict)
    query: dict[str, str] = field(default_factory=dict)
    form: dict[str, str] = field(default_factory=dict)
    body: Any = _ABSENT

    @property
    def has_body(self) -> bool:
        return self.body is not _ABSENT and self.body is not None


def format_param(value: Any) -> str | None:
    """Render a query or form value, or ``None`` when it should be omitted.

    Collections are joined with commas, skipping ``None`` elements.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Collection) and not isinstance(value, (str, bytes)):
        items = [format_param(item) for item in value]
        joined = ",".join(item for item in items if item is not None)
        return joined or None
    return str(value)


def encode_json(value: Any) -> bytes:
    """Serialize a request body, pydantic models by alias without ``None`` fields."""
    try:
        return type_adapter(Any).dump_json(value, by_alias=True, exclude_none=True)
    except ValueError as e:
        raise DeclarationError(f"Request body is not JSON serializable: {e}") from e


def bind_arguments(
    params: tuple[Param, ...], args: tuple[Any, ...], kwargs: Mapping[str, Any]
) -> dict[str, Any]:
    """Bind call arguments to declared parameters; missing ones become ``None``.

    Raises:
        DeclarationError: On surplus positional or unknown keyword arguments
    """
    if len(args) > len(params):
        raise DeclarationError(
            f"Expected at most {len(params)} positional arguments, got {len(args)}"
        )
    bound: dict[str, Any] = {param.name: None for param in params}
    positional = {param.name for param in params[: len(args)]}
    for param, value in zip(params, args):
        bound[param.name] = value
    for name, value in kwargs.items():
        if name not in bound:
            raise DeclarationError(f"Unexpected argument '{name}'")
        if name in positional:
            raise DeclarationError(f"Argument '{name}' given twice")
        bound[name] = value
    return bound


def split_arguments(params: tuple[Param, ...], bound: Mapping[str, Any]) -> RequestParts:
    parts = RequestParts()
    for param in params:
        value = bound[param.name]
        if param.role is ParamRole.PATH:
            parts.path_values[param.key] = value
        elif param.role is ParamRole.QUERY:
            rendered = format_param(value)
            if rendered is not None:
                parts.query[param.key] = rendered
        elif param.role is ParamRole.FORM:
            rendered = format_param(value)
            if rendered is not None:
                parts.form[param.key] = rendered
        else:
            parts.body = value
    return parts


class ResourceProxy:
    """Invokable view of a ``Resource`` bound to a base URL.

    Operations are reachable as attributes (``proxy.users().get(user_id)``)
    or through ``invoke``. The proxy holds no mutable state, so one instance
    may be shared between threads; token access is serialized by the token
    supplier.
    """

    def __init__(
        self,
        resource: Resource,
        base_url: str,
        http_client: httpx.Client,
        token_supplier: TokenSupplier | None = None,
        token_invalidator: TokenInvalidator | None = None,
    ):
        """Initialize resource proxy.

        Args:
            resource: Route table describing the available operations
            base_url: Absolute URL the resource path is appended to
            http_client: Synchronous HTTP client used for every exchange
            token_supplier: Returns the access token to send, if any
            token_invalidator: Told about tokens the server answered 401 to
        """
        self._resource = resource
        self._base_url = normalize_base_url(base_url)
        self._http_client = http_client
        self._token_supplier = token_supplier
        self._token_invalidator = token_invalidator

    @property
    def resource(self) -> Resource:
        return self._resource

    @property
    def base_url(self) -> str:
        return self._base_url

    def __getattr__(self, name: str) -> Callable[..., Any]:
        if name.startswith("_") or name not in self._resource.operations:
            raise AttributeError(
                f"{type(self).__name__} for {self._resource.name} has no attribute '{name}'"
            )

        def call(*args: Any, **kwargs: Any) -> Any:
            return self.invoke(name, *args, **kwargs)

        call.__name__ = name
        return call

    def __dir__(self) -> list[str]:
        return sorted({*super().__dir__(), *self._resource.operations})

    def __repr__(self) -> str:
        return f"ResourceProxy({self._resource.name} @ {self._base_url})"

    def invoke(self, name: str, *args: Any, **kwargs: Any) -> Any:
        """Invoke operation or locator ``name`` of the resource.

        Raises:
            DeclarationError: If the call does not match the declaration
            TransportError: If the HTTP exchange fails
            HttpStatusError: If the server answers with status >= 400
            DecodeError: If the body does not match the declared return shape
        """
        route = self._resource.route(name)
        bound = bind_arguments(route.params, args, kwargs)
        parts = split_arguments(route.params, bound)
        url = expand_path(self._compose_path(route.path), parts.path_values)

        if isinstance(route, Locator):
            logger.debug(f"Locating {route.resource.name} at {url}")
            return ResourceProxy(
                route.resource,
                url,
                self._http_client,
                self._token_supplier,
                self._token_invalidator,
            )
        return self._dispatch(route, url, parts)

    def _compose_path(self, method_path: str) -> str:
        return join_paths(join_paths(self._base_url, self._resource.path), method_path)

    def _dispatch(self, operation: Operation, url: str, parts: RequestParts) -> Any:
        token = self._current_token()
        response = self._send(self._build_request(operation, url, parts, token))

        if response.status_code == 401 and token and self._token_invalidator:
            logger.warning(
                f"{operation.method} {url} answered 401, retrying with a fresh token"
            )
            self._token_invalidator(token)
            fresh_token = self._current_token()
            response = self._send(
                self._build_request(operation, url, parts, fresh_token)
            )

        return map_response(operation.returns, response)

    def _current_token(self) -> str | None:
        if self._token_supplier is None:
            return None
        token = self._token_supplier()
        if token is None or not token.strip():
            return None
        return token

    def _build_request(
        self,
        operation: Operation,
        url: str,
        parts: RequestParts,
        token: str | None,
    ) -> httpx.Request:
        accept = operation.produces or self._resource.produces or APPLICATION_JSON
        content_type = operation.consumes or self._resource.consumes or APPLICATION_JSON

        headers = {"Accept": accept}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        content: bytes | None = None
        data: dict[str, str] | None = None
        if parts.form:
            data = parts.form
        elif parts.has_body:
            if content_type == TEXT_PLAIN:
                headers["Content-Type"] = "text/plain; charset=utf-8"
                content = str(parts.body).encode("utf-8")
            else:
                headers["Content-Type"] = content_type
                content = encode_json(parts.body)
        elif operation.is_write:
            content = b""

        return self._http_client.build_request(
            operation.method,
            url,
            params=parts.query or None,
            headers=headers,
            content=content,
            data=data,
        )

    def _send(self, request: httpx.Request) -> httpx.Response:
        logger.debug(f"{request.method} {request.url}")
        try:
            # Non-streaming send reads the body and releases the connection.
            response = self._http_client.send(request)
        except httpx.HTTPError as e:
            raise TransportError(
                f"HTTP error during {request.method} {request.url}: {e}"
            ) from e
        logger.debug(f"{request.method} {request.url} -> {response.status_code}")
        return response
