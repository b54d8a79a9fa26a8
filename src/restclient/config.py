# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for restclient."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any

from .version import __version__

DEFAULT_USER_AGENT = f"RestClient/{__version__}"


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _optional_str(value: Any) -> str | None:
    if isinstance(value, os.PathLike):
        value = os.fspath(value)
    if isinstance(value, str) and value:
        return value
    return None


def parse_timeout(value: Any) -> float | None:
    """Return a positive timeout in seconds, or None for anything unusable."""
    if isinstance(value, bool) or value is None:
        return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    return parsed if parsed > 0 else None


@dataclass
class HttpSettings:
    """Transport defaults shared by every RestClient."""

    timeout: float = 180.0
    user_agent: str = DEFAULT_USER_AGENT
    allow_redirects: bool = True
    verify_ssl: bool = True

    @classmethod
    def from_env(cls) -> HttpSettings:
        """Create settings from environment variables (evaluated at call time)."""
        return cls(
            timeout=_float_env("RESTCLIENT_HTTP_TIMEOUT", cls.timeout),
            user_agent=os.getenv("RESTCLIENT_USER_AGENT", cls.user_agent),
            allow_redirects=_bool_env("RESTCLIENT_HTTP_REDIRECTS", cls.allow_redirects),
            verify_ssl=_bool_env("RESTCLIENT_HTTP_VERIFY_SSL", cls.verify_ssl),
        )


def load_http_settings() -> HttpSettings:
    """Load HTTP settings from environment with sensible defaults."""
    return HttpSettings.from_env()


@dataclass
class ClientConfig:
    """Per-client options: default host, TLS client material and timeout."""

    host: str | None = None
    cert: str | None = None
    key: str | None = None
    ca: str | None = None
    timeout: float | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> ClientConfig:
        """
        Build a config from a loosely-typed mapping.

        Unknown keys are ignored and malformed values are treated as unset, so this
        never raises; problems surface when a request is issued.
        """
        if not isinstance(data, Mapping):
            return cls()
        lowered: dict[str, Any] = {}
        for key, value in data.items():
            if isinstance(key, str):
                lowered[key.strip().lower()] = value
        return cls(
            host=_optional_str(lowered.get("host")),
            cert=_optional_str(lowered.get("cert")),
            key=_optional_str(lowered.get("key")),
            ca=_optional_str(lowered.get("ca")),
            timeout=parse_timeout(lowered.get("timeout")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


__all__ = [
    "DEFAULT_USER_AGENT",
    "ClientConfig",
    "HttpSettings",
    "load_http_settings",
    "parse_timeout",
]
