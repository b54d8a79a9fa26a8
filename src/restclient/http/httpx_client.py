# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed Transport implementation."""

from __future__ import annotations

import logging
import ssl
from collections.abc import Callable
from typing import Any

import httpx

from ..config import HttpSettings, load_http_settings
from ..errors import ErrorCategory, TransportError, categorize_exception
from .client import Transport
from .headers import header_value
from .models import HttpRequest, HttpResponse, TlsConfig

logger = logging.getLogger(__name__)


def build_ssl_context(tls: TlsConfig, *, verify: bool = True) -> ssl.SSLContext:
    """Create an SSLContext carrying the client certificate (and CA bundle) of one request."""
    context = ssl.create_default_context(cafile=tls.ca) if tls.ca else ssl.create_default_context()
    if not verify:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    context.load_cert_chain(certfile=tls.cert, keyfile=tls.key)
    return context


def _elapsed_seconds(resp: httpx.Response) -> float | None:
    try:
        return resp.elapsed.total_seconds()
    except RuntimeError:
        # Only set once the response has been closed by a real transport.
        return None


class HttpxTransport(Transport):
    """
    Synchronous httpx transport.

    Requests without client certificates share one pooled ``httpx.Client``. Requests that
    carry a TlsConfig get a dedicated client for the duration of the call, so TLS material
    never leaks between requests or threads.
    """

    def __init__(
        self,
        settings: HttpSettings | None = None,
        client: httpx.Client | None = None,
        client_factory: Callable[..., httpx.Client] | None = None,
    ):
        self.settings = settings or load_http_settings()
        self._client_factory = client_factory or httpx.Client
        self._client = client or self._client_factory(
            follow_redirects=self.settings.allow_redirects,
            timeout=self.settings.timeout,
            verify=self.settings.verify_ssl,
        )

    def request(self, request: HttpRequest) -> HttpResponse:
        headers = dict(request.headers or {})
        if header_value(headers, "User-Agent", default=None) is None:
            headers["User-Agent"] = self.settings.user_agent

        timeout = request.timeout if request.timeout is not None else self.settings.timeout

        if request.tls is None:
            return self._send(self._client, request, headers, timeout)

        try:
            context = build_ssl_context(request.tls, verify=self.settings.verify_ssl)
        except (ssl.SSLError, OSError) as exc:
            raise TransportError(
                f"Cannot load client certificate: {exc}",
                category=ErrorCategory.SSL_ERROR,
                url=request.url,
            ) from exc

        with self._client_factory(
            follow_redirects=self.settings.allow_redirects,
            timeout=timeout,
            verify=context,
        ) as client:
            return self._send(client, request, headers, timeout)

    def _send(self, client: Any, request: HttpRequest, headers: dict[str, str], timeout: float) -> HttpResponse:
        logger.debug("%s %s", request.method, request.url)
        try:
            resp = client.request(
                request.method,
                request.url,
                headers=headers,
                content=request.body,
                timeout=timeout,
                follow_redirects=request.allow_redirects,
            )
        except httpx.HTTPError as exc:
            category = categorize_exception(exc)
            logger.debug("%s %s failed (%s): %s", request.method, request.url, category.value, exc)
            raise TransportError(str(exc) or type(exc).__name__, category=category, url=request.url) from exc

        return HttpResponse(
            status_code=resp.status_code,
            headers=dict(resp.headers),
            content=resp.content,
            text=resp.text,
            url=str(resp.url),
            reason=resp.reason_phrase,
            elapsed=_elapsed_seconds(resp),
        )

    def close(self) -> None:
        self._client.close()
