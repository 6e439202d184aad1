"""Shorthand import path for the logging helpers."""
from __future__ import annotations

from .log import (
    configure_from_settings,
    get_logger,
    init_logging,
    log_context,
    set_level,
    shutdown_logging,
    timeit,
)

__all__ = [
    "configure_from_settings",
    "get_logger",
    "init_logging",
    "set_level",
    "shutdown_logging",
    "log_context",
    "timeit",
]
