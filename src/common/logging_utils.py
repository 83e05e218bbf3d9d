"""Centralized logging helpers.

All entry points call configure_logging() once; library modules only ever
use ``logging.getLogger(__name__)`` and the helpers below.
"""

from __future__ import annotations

import logging
import os
import sys
import time
from typing import Any, Dict, Optional

from constants import Constants

_CONFIGURED_HANDLER: Optional[logging.Handler] = None


def _level_from_name(name: str, default: int = logging.INFO) -> int:
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else default


def _level_from_env(default: int = logging.INFO) -> int:
    name = os.environ.get(Constants.ENV_LOG_LEVEL, "").strip()
    if not name:
        return default
    return _level_from_name(name, default)


def configure_logging(level: Optional[str] = None) -> None:
    """Install a single stderr handler on the root logger.

    ``level`` (a level name) wins over BUILDCAT_LOG_LEVEL, which wins over
    INFO. Calling this more than once replaces the previous handler instead of
    stacking a new one.
    """
    global _CONFIGURED_HANDLER  # pylint: disable=global-statement
    root = logging.getLogger()
    if _CONFIGURED_HANDLER is not None:
        root.removeHandler(_CONFIGURED_HANDLER)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(_level_from_name(level) if level else _level_from_env())
    _CONFIGURED_HANDLER = handler


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra=`` payload, dropping fields whose value is None."""
    return {k: v for k, v in fields.items() if v is not None}


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when debug records would be emitted by ``logger``."""
    return logger.isEnabledFor(logging.DEBUG)


class Timer:
    """Context manager measuring wall time in milliseconds."""

    def __init__(self):
        self._start = 0.0
        self.duration_ms = 0.0

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.duration_ms = (time.perf_counter() - self._start) * 1000.0
