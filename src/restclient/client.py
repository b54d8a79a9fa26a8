# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""RestClient: a configuration-remembering wrapper around a Transport."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from contextlib import suppress
from dataclasses import fields, replace
from typing import Any

from .config import ClientConfig, HttpSettings, load_http_settings, parse_timeout
from .errors import InvalidArgumentError, PreconditionFailedError
from .http.client import Transport, create_default_transport
from .http.headers import merge_headers, validate_headers
from .http.models import HttpRequest, HttpResponse, TlsConfig
from .http.url import build_query, is_secure, resolve_url

logger = logging.getLogger(__name__)

SUPPORTED_METHODS = ("GET", "PUT", "POST", "DELETE", "OPTIONS", "HEAD")

Body = str | bytes | bytearray | memoryview | None


def _encode_body(body: Any) -> bytes | None:
    if body is None:
        return None
    if isinstance(body, str):
        content = body.encode("utf-8")
    elif isinstance(body, (bytes, bytearray, memoryview)):
        content = bytes(body)
    else:
        raise InvalidArgumentError(f"body must be str or bytes, got {type(body).__name__}")
    return content or None


def _is_file(path: Any) -> bool:
    try:
        return bool(path) and os.path.isfile(os.fspath(path))
    except TypeError:
        return False


class RestClient:
    """
    Minimal REST client that remembers host, TLS material, timeout and default headers.

    Every request replaces ``last_response``; the ``response_*`` accessors read from it.
    Instances are not safe to share between threads without external locking, but separate
    instances are fully independent, including their client certificates.

        client = RestClient(host="https://example.com", timeout=10)
        client.add_header("Accept", "application/xml")
        client.put("/dir/file.xml", "<example>new content</example>")
        if client.response_code() == 200:
            print(client.response_content())
    """

    def __init__(
        self,
        config: ClientConfig | Mapping[str, Any] | None = None,
        *,
        transport: Transport | None = None,
        settings: HttpSettings | None = None,
        **options: Any,
    ):
        base = replace(config) if isinstance(config, ClientConfig) else ClientConfig.from_mapping(config)
        if options:
            overrides = ClientConfig.from_mapping(options)
            for f in fields(overrides):
                value = getattr(overrides, f.name)
                if value is not None:
                    setattr(base, f.name, value)
        self.config = base
        self.settings = settings or load_http_settings()
        self._transport = transport
        self.default_headers: dict[str, str] = {}
        self.last_response: HttpResponse | None = None

    @property
    def transport(self) -> Transport:
        if self._transport is None:
            self._transport = create_default_transport(self.settings)
        return self._transport

    # Configuration accessors

    @property
    def host(self) -> str | None:
        return self.config.host

    @host.setter
    def host(self, value: str | None) -> None:
        self.config.host = value

    @property
    def cert(self) -> str | None:
        return self.config.cert

    @cert.setter
    def cert(self, value: str | None) -> None:
        self.config.cert = value

    @property
    def key(self) -> str | None:
        return self.config.key

    @key.setter
    def key(self, value: str | None) -> None:
        self.config.key = value

    @property
    def ca(self) -> str | None:
        return self.config.ca

    @ca.setter
    def ca(self, value: str | None) -> None:
        self.config.ca = value

    @property
    def timeout(self) -> float | None:
        return self.config.timeout

    @timeout.setter
    def timeout(self, value: float | None) -> None:
        self.config.timeout = value

    def get_host(self) -> str | None:
        return self.host

    def set_host(self, value: str | None) -> str | None:
        self.host = value
        return self.host

    def get_cert(self) -> str | None:
        return self.cert

    def set_cert(self, value: str | None) -> str | None:
        self.cert = value
        return self.cert

    def get_key(self) -> str | None:
        return self.key

    def set_key(self, value: str | None) -> str | None:
        self.key = value
        return self.key

    def get_ca(self) -> str | None:
        return self.ca

    def set_ca(self, value: str | None) -> str | None:
        self.ca = value
        return self.ca

    def get_timeout(self) -> float | None:
        return self.timeout

    def set_timeout(self, value: float | None) -> float | None:
        self.timeout = value
        return self.timeout

    def add_header(self, name: str, value: str) -> None:
        """Add (or replace) a header sent with every subsequent request."""
        self.default_headers[name] = value

    # Verbs

    def get(self, url: str, headers: Mapping[str, str] | None = None) -> RestClient:
        return self.request("GET", url, None, headers)

    def put(self, url: str, body: Body = None, headers: Mapping[str, str] | None = None) -> RestClient:
        return self.request("PUT", url, body, headers)

    def post(self, url: str, body: Body = None, headers: Mapping[str, str] | None = None) -> RestClient:
        return self.request("POST", url, body, headers)

    def delete(self, url: str, headers: Mapping[str, str] | None = None) -> RestClient:
        return self.request("DELETE", url, None, headers)

    def options(self, url: str, headers: Mapping[str, str] | None = None) -> RestClient:
        return self.request("OPTIONS", url, None, headers)

    def head(self, url: str, headers: Mapping[str, str] | None = None) -> RestClient:
        return self.request("HEAD", url, None, headers)

    GET = get
    PUT = put
    POST = post
    DELETE = delete
    OPTIONS = options
    HEAD = head

    def request(
        self,
        method: str,
        url: str,
        body: Body = None,
        headers: Mapping[str, str] | None = None,
    ) -> RestClient:
        """
        Issue a request and store the response in ``last_response``.

        Raises InvalidArgumentError for a bad method, URL or headers mapping,
        PreconditionFailedError when configured TLS files are missing, and
        TransportError when the request could not be completed. On failure
        ``last_response`` keeps its previous value.
        """
        if not isinstance(method, str) or method.upper() not in SUPPORTED_METHODS:
            raise InvalidArgumentError(f"method must be one of {', '.join(SUPPORTED_METHODS)}, got {method!r}")
        method = method.upper()
        if not url or not isinstance(url, str):
            raise InvalidArgumentError(f"Must provide a url to {method}")
        call_headers = validate_headers(headers)

        resolved = resolve_url(url, host=self.host, secure_default=bool(self.cert))
        content = _encode_body(body)
        request_headers = merge_headers(
            {
                "User-Agent": self.settings.user_agent,
                "Content-Length": str(len(content) if content else 0),
            },
            self.default_headers,
            call_headers,
        )
        tls = self._tls_config(resolved)

        http_request = HttpRequest(
            url=resolved,
            method=method,
            headers=request_headers,
            body=content,
            timeout=parse_timeout(self.timeout),
            allow_redirects=self.settings.allow_redirects,
            tls=tls,
        )
        logger.debug("Issuing %s %s", method, resolved)
        self.last_response = self.transport.request(http_request)
        return self

    def _tls_config(self, url: str) -> TlsConfig | None:
        if not self.cert:
            return None
        if not is_secure(url):
            logger.warning("Client certificate configured but %s is not using https", url)
        if not (_is_file(self.cert) and _is_file(self.key)):
            raise PreconditionFailedError("Cannot read cert and key file")
        ca = self.ca
        if ca and not _is_file(ca):
            raise PreconditionFailedError("Cannot read CA file")
        return TlsConfig(
            cert=os.fspath(self.cert),
            key=os.fspath(self.key),
            ca=os.fspath(ca) if ca else None,
        )

    # Response accessors

    def _require_response(self) -> HttpResponse:
        if self.last_response is None:
            raise PreconditionFailedError("No request has completed yet")
        return self.last_response

    def response_code(self) -> int:
        return self._require_response().status_code

    def response_content(self) -> bytes:
        return self._require_response().content

    def response_text(self) -> str:
        return self._require_response().text

    def response_header(self, name: str) -> str | None:
        """Return a header of the last response (case-insensitive), or None if absent."""
        if not name:
            raise InvalidArgumentError("no header provided to response_header")
        return self._require_response().header(name)

    def response_headers(self) -> dict[str, str]:
        return dict(self._require_response().headers)

    def response_xpath(self) -> Any:
        """
        Parse the last response body as HTML and return the document root.

        The result is an ``lxml.html.HtmlElement``; call ``.xpath(...)`` on it. Requires the
        ``xpath`` extra (lxml).
        """
        from lxml import html as lxml_html

        content = self.response_content()
        if not content.strip():
            raise PreconditionFailedError("Last response has an empty body")
        return lxml_html.document_fromstring(content)

    build_query = staticmethod(build_query)

    def close(self) -> None:
        with suppress(Exception):
            if self._transport is not None and hasattr(self._transport, "close"):
                self._transport.close()

    def __enter__(self) -> RestClient:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()


__all__ = ["RestClient", "SUPPORTED_METHODS"]
