# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP transport exports."""

from .adapters import StubTransport
from .client import Transport, create_default_transport
from .headers import header_value, merge_headers, validate_headers
from .httpx_client import HttpxTransport, build_ssl_context
from .models import Headers, HttpRequest, HttpResponse, TlsConfig
from .url import build_query, has_scheme, is_secure, resolve_url

__all__ = [
    "Headers",
    "HttpRequest",
    "HttpResponse",
    "HttpxTransport",
    "StubTransport",
    "TlsConfig",
    "Transport",
    "build_query",
    "build_ssl_context",
    "create_default_transport",
    "has_scheme",
    "header_value",
    "is_secure",
    "merge_headers",
    "resolve_url",
    "validate_headers",
]
