# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Header validation, merging and lookup.

HTTP header field names are case-insensitive (RFC 9110). Headers are kept as plain dicts
that preserve the caller's casing, so merging and lookups compare names case-insensitively.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..errors import InvalidArgumentError


def validate_headers(headers: Any) -> dict[str, str]:
    """Return a copy of a flat str -> str header mapping, rejecting anything else."""
    if headers is None:
        return {}
    if not isinstance(headers, Mapping):
        raise InvalidArgumentError("headers must be presented as a mapping of header name to value")
    out: dict[str, str] = {}
    for name, value in headers.items():
        if not isinstance(name, str) or not name.strip():
            raise InvalidArgumentError(f"header names must be non-empty strings, got {name!r}")
        if not isinstance(value, str):
            raise InvalidArgumentError(f"header {name!r} must have a string value, got {type(value).__name__}")
        out[name] = value
    return out


def merge_headers(*layers: Mapping[str, str] | None) -> dict[str, str]:
    """
    Merge header mappings left to right; later layers win on (case-insensitive) name collisions.

    The casing of the winning layer is kept for the emitted header name.
    """
    merged: dict[str, str] = {}
    names: dict[str, str] = {}
    for layer in layers:
        if not layer:
            continue
        for name, value in layer.items():
            lower = name.lower()
            previous = names.get(lower)
            if previous is not None and previous != name:
                merged.pop(previous, None)
            names[lower] = name
            merged[name] = value
    return merged


def header_value(headers: Mapping[str, str] | None, name: str, default: str | None = "") -> str | None:
    """
    Return a header value using case-insensitive key matching.

    Fast-paths common key casings before falling back to a full scan.
    """
    if not headers or not name:
        return default

    lower = name.lower()
    for key in (name, lower, lower.title()):
        if key in headers:
            return headers[key]

    for key, value in headers.items():
        if key.lower() == lower:
            return value

    return default


__all__ = ["header_value", "merge_headers", "validate_headers"]
