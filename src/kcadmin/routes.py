"""Declarative resource contracts.

A ``Resource`` is a route table: a base path plus named entries that are
either HTTP ``Operation``s or ``Locator``s leading to a nested resource.
Tables are validated once when they are built, so malformed contracts fail
at import time rather than on first call.
"""

from __future__ import annotations

import keyword
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Union

from kcadmin.models.errors import DeclarationError

HTTP_METHODS = frozenset({"GET", "POST", "PUT", "DELETE", "PATCH", "HEAD"})
WRITE_METHODS = frozenset({"POST", "PUT", "PATCH"})

APPLICATION_JSON = "application/json"
TEXT_PLAIN = "text/plain"

# Names a resource proxy already uses for itself.
RESERVED_NAMES = frozenset({"invoke", "resource", "base_url"})


class ParamRole(str, Enum):
    """Where an argument goes in the outgoing request."""

    PATH = "path"
    QUERY = "query"
    FORM = "form"
    BODY = "body"


@dataclass(frozen=True)
class Param:
    """One declared argument of an operation or locator.

    ``name`` is the Python argument name; ``key`` the name used on the wire
    (placeholder, query or form key) and defaults to ``name``.
    """

    name: str
    role: ParamRole
    key: str | None = None

    def __post_init__(self) -> None:
        if not self.name.isidentifier() or keyword.iskeyword(self.name):
            raise DeclarationError(f"Parameter name '{self.name}' is not an identifier")
        if self.key is None:
            object.__setattr__(self, "key", self.name)

    @classmethod
    def path(cls, name: str, key: str | None = None) -> Param:
        return cls(name, ParamRole.PATH, key)

    @classmethod
    def query(cls, name: str, key: str | None = None) -> Param:
        return cls(name, ParamRole.QUERY, key)

    @classmethod
    def form(cls, name: str, key: str | None = None) -> Param:
        return cls(name, ParamRole.FORM, key)

    @classmethod
    def body(cls, name: str = "body") -> Param:
        return cls(name, ParamRole.BODY)


def _check_unique(params: tuple[Param, ...], owner: str) -> None:
    seen: set[str] = set()
    for param in params:
        if param.name in seen:
            raise DeclarationError(f"Duplicate parameter '{param.name}' on {owner}")
        seen.add(param.name)


@dataclass(frozen=True)
class Operation:
    """An HTTP call.

    ``returns`` selects how the response is mapped:

    - ``None``: the body is discarded and nothing is returned
    - ``Response``: the buffered response envelope
    - ``str``: the body text verbatim
    - any other type: the JSON body decoded into it, ``None`` when blank
    """

    method: str
    path: str = ""
    params: tuple[Param, ...] = ()
    returns: Any = None
    produces: str | None = None
    consumes: str | None = None

    def __post_init__(self) -> None:
        method = self.method.upper()
        if method not in HTTP_METHODS:
            raise DeclarationError(f"Unsupported HTTP method {self.method}")
        object.__setattr__(self, "method", method)
        object.__setattr__(self, "params", tuple(self.params))

        _check_unique(self.params, f"{method} {self.path or '/'}")
        bodies = [p.name for p in self.params if p.role is ParamRole.BODY]
        if len(bodies) > 1:
            raise DeclarationError(
                f"{method} {self.path or '/'} declares more than one body "
                f"parameter: {', '.join(bodies)}"
            )

    @property
    def is_write(self) -> bool:
        return self.method in WRITE_METHODS


@dataclass(frozen=True)
class Locator:
    """A verb-less entry that navigates to a nested resource."""

    resource: Resource
    path: str = ""
    params: tuple[Param, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", tuple(self.params))
        _check_unique(self.params, f"locator {self.path or '/'}")
        for param in self.params:
            if param.role is not ParamRole.PATH:
                raise DeclarationError(
                    f"Locator {self.path or '/'} only accepts path parameters, "
                    f"got {param.role.value} parameter '{param.name}'"
                )


Route = Union[Operation, Locator]


@dataclass(frozen=True)
class Resource:
    """A named route table rooted at ``path``.

    ``produces`` and ``consumes`` are resource-level defaults for the accept
    and content type of every operation that does not override them.
    """

    name: str
    path: str = ""
    operations: Mapping[str, Route] = field(default_factory=dict)
    produces: str | None = None
    consumes: str | None = None

    def __post_init__(self) -> None:
        operations = dict(self.operations)
        for op_name, route in operations.items():
            if (
                not op_name.isidentifier()
                or keyword.iskeyword(op_name)
                or op_name.startswith("_")
                or op_name in RESERVED_NAMES
            ):
                raise DeclarationError(
                    f"Invalid operation name '{op_name}' on resource {self.name}"
                )
            if not isinstance(route, (Operation, Locator)):
                raise DeclarationError(
                    f"{self.name}.{op_name} has no HTTP method and does not "
                    f"locate a resource"
                )
        object.__setattr__(self, "operations", operations)

    def route(self, op_name: str) -> Route:
        try:
            return self.operations[op_name]
        except KeyError:
            raise DeclarationError(
                f"Resource {self.name} has no operation '{op_name}'"
            ) from None

    def extend(self, **routes: Route) -> Resource:
        """Return a copy of this resource with additional or replaced routes."""
        return replace(self, operations={**self.operations, **routes})

    def __hash__(self) -> int:
        return hash((self.name, self.path))
