# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Transports that do not touch the network."""

from __future__ import annotations

from ..errors import ErrorCategory, TransportError
from .client import Transport
from .models import HttpRequest, HttpResponse


class StubTransport(Transport):
    """Deterministic, programmable Transport for tests."""

    def __init__(self, responses: dict[str, HttpResponse] | None = None):
        self._responses = responses or {}
        self.requests: list[HttpRequest] = []

    def add(self, url: str, response: HttpResponse) -> None:
        self._responses[url] = response

    def request(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        if request.url in self._responses:
            return self._responses[request.url]
        raise TransportError(
            f"No stubbed response configured for {request.url}",
            category=ErrorCategory.CONNECTION_ERROR,
            url=request.url,
        )

    def close(self) -> None:
        return None
