# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""URL helpers: host prefixing, scheme defaulting and query strings."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote, urlencode

from ..errors import InvalidArgumentError

_SCHEME_RE = re.compile(r"^\w+://")


def has_scheme(url: str) -> bool:
    """Return True when the URL starts with an explicit `scheme://` prefix."""
    return bool(_SCHEME_RE.match(url or ""))


def is_secure(url: str) -> bool:
    return (url or "").lower().startswith("https://")


def resolve_url(url: str, *, host: str | None = None, secure_default: bool = False) -> str:
    """
    Resolve a request URL against an optional host.

    With a host, `url` is a path: a leading `/` is added when missing and the host is
    prepended verbatim. A URL that still lacks `scheme://` gets `https://` when
    `secure_default` is set (client certificates configured) and `http://` otherwise.
    """
    if host:
        if not url.startswith("/"):
            url = f"/{url}"
        url = f"{host}{url}"
    if not has_scheme(url):
        url = ("https://" if secure_default else "http://") + url
    return url


def _is_pair(item: Any) -> bool:
    return isinstance(item, (list, tuple)) and len(item) == 2


def _query_pairs(args: tuple[Any, ...], params: Mapping[str, Any]) -> list[tuple[str, Any]]:
    if len(args) == 1 and isinstance(args[0], Mapping):
        items = list(args[0].items())
    else:
        seq = list(args[0]) if len(args) == 1 and isinstance(args[0], (list, tuple)) else list(args)
        if all(_is_pair(x) for x in seq):
            items = [tuple(x) for x in seq]
        else:
            if len(seq) % 2:
                raise InvalidArgumentError("build_query expects key/value pairs")
            items = list(zip(seq[::2], seq[1::2]))
    items.extend(params.items())

    pairs: list[tuple[str, Any]] = []
    for key, value in items:
        values = value if isinstance(value, (list, tuple)) else [value]
        for item in values:
            pairs.append((str(key), "" if item is None else item))
    return pairs


def build_query(*args: Any, **params: Any) -> str:
    """
    URL-encode key/value pairs into a query string without the leading `?`.

    Accepts a list of pairs, several pair arguments, a mapping, a flat
    `key, value, key, value` sequence and/or keyword params. Sequence values expand into
    repeated keys, e.g. ``build_query([("a", "1"), ("b", "c d")]) == "a=1&b=c%20d"``.
    """
    pairs = _query_pairs(args, params)
    return urlencode(pairs, quote_via=quote)


__all__ = ["build_query", "has_scheme", "is_secure", "resolve_url"]
