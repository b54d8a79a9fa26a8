# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
restclient package entrypoint.

A small REST client that remembers a default host, TLS client certificate, CA bundle,
timeout and default headers across calls, and keeps the last response for inspection.
HTTP behavior is abstracted behind an injectable Transport; httpx is the default.
"""

from .client import SUPPORTED_METHODS, RestClient
from .config import ClientConfig, HttpSettings, load_http_settings
from .errors import (
    ErrorCategory,
    InvalidArgumentError,
    PreconditionFailedError,
    RestClientError,
    TransportError,
)
from .http import (
    HttpRequest,
    HttpResponse,
    HttpxTransport,
    StubTransport,
    TlsConfig,
    Transport,
    build_query,
    create_default_transport,
)
from .log import setup_logging
from .version import __version__

__all__ = [
    "ClientConfig",
    "ErrorCategory",
    "HttpRequest",
    "HttpResponse",
    "HttpSettings",
    "HttpxTransport",
    "InvalidArgumentError",
    "PreconditionFailedError",
    "RestClient",
    "RestClientError",
    "SUPPORTED_METHODS",
    "StubTransport",
    "TlsConfig",
    "Transport",
    "TransportError",
    "build_query",
    "create_default_transport",
    "load_http_settings",
    "setup_logging",
    "__version__",
]
