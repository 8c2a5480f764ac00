"""URL path composition helpers."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

from kcadmin.models.errors import DeclarationError


def normalize_base_url(base_url: str) -> str:
    if base_url.endswith("/"):
        return base_url[:-1]
    return base_url


def join_paths(left: str, right: str | None) -> str:
    """Join two path fragments with exactly one ``/`` between them."""
    if right is None or not right.strip():
        return left
    if left.endswith("/") and right.startswith("/"):
        return left + right[1:]
    if not left.endswith("/") and not right.startswith("/"):
        return f"{left}/{right}"
    return left + right


_PLACEHOLDER = re.compile(r"\{[^{}]*\}")


def expand_path(template: str, values: Mapping[str, Any]) -> str:
    """Substitute ``{key}`` and ``{key:regex}`` placeholders in ``template``.

    Each value is percent-encoded as a single path segment.

    Raises:
        DeclarationError: If a supplied path value is ``None``, a parameter
            has no placeholder, or a placeholder is left unfilled
    """
    resolved = template
    for key, value in values.items():
        if value is None:
            raise DeclarationError(f"Path parameter '{key}' is None")
        segment = quote(str(value), safe="")
        pattern = re.compile(r"\{" + re.escape(key) + r"(?::[^}]*)?\}")
        resolved, count = pattern.subn(lambda _match: segment, resolved)
        if count == 0:
            raise DeclarationError(
                f"Path parameter '{key}' has no placeholder in {template}"
            )

    unfilled = _PLACEHOLDER.search(resolved)
    if unfilled:
        raise DeclarationError(
            f"Placeholder {unfilled.group(0)} in {template} has no path parameter"
        )
    return resolved
