# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request/response data models used across restclient."""

from __future__ import annotations

from dataclasses import dataclass, field

from .headers import header_value

Headers = dict[str, str]


@dataclass(frozen=True)
class TlsConfig:
    """Client certificate material scoped to a single request."""

    cert: str
    key: str
    ca: str | None = None


@dataclass
class HttpRequest:
    """Normalized request representation consumed by Transport implementations."""

    url: str
    method: str = "GET"
    headers: Headers | None = None
    body: bytes | None = None
    timeout: float | None = None
    allow_redirects: bool = True
    tls: TlsConfig | None = None


@dataclass
class HttpResponse:
    """A completed HTTP exchange as seen by RestClient accessors."""

    status_code: int
    headers: Headers = field(default_factory=dict)
    content: bytes = b""
    text: str = ""
    url: str | None = None
    reason: str = ""
    elapsed: float | None = None

    def header(self, name: str) -> str | None:
        """Case-insensitive header lookup; returns None when the header is absent."""
        return header_value(self.headers, name, default=None)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400
