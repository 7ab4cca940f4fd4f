"""Helpers for building request paths and query parameters."""

from collections.abc import Mapping
from typing import Any
from urllib.parse import quote


def build_url(base: str, *parts: Any) -> str:
    """Join ``base`` with URL-encoded path segments.

    >>> build_url("/_api/graph", "my graph", "vertex", "v/1")
    '/_api/graph/my%20graph/vertex/v%2F1'
    """
    url = base.rstrip("/")
    for part in parts:
        url += "/" + quote(str(part), safe="")
    return url


def bool_string(value: bool) -> str:
    return "true" if value else "false"


def encode_params(params: Mapping[str, Any]) -> dict[str, str]:
    """Stringify query parameters the way the server expects them.

    Booleans become ``"true"``/``"false"`` and ``None`` values are dropped.
    """
    encoded: dict[str, str] = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            encoded[key] = bool_string(value)
        else:
            encoded[key] = str(value)
    return encoded

