# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Logging helpers for restclient."""

from __future__ import annotations

import logging
import os

LOG_LEVEL_ENV = "RESTCLIENT_LOG_LEVEL"


def resolve_log_level(level: str | None = None) -> int:
    """Map an explicit level name, or RESTCLIENT_LOG_LEVEL, to a logging level (WARNING if unknown)."""
    name = (level or os.getenv(LOG_LEVEL_ENV) or "WARNING").strip().upper()
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else logging.WARNING


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger for the restclient CLI; the env var is read at call time."""
    logging.basicConfig(
        level=resolve_log_level(level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


__all__ = ["resolve_log_level", "setup_logging"]
