"""Utility helpers for the CHIP-8 interpreter."""

from .debug import (
    CATEGORIES,
    debug_enabled,
    debug_log,
    enabled_categories,
    parse_categories,
    reload_categories,
)
from .trace import TraceEntry, TraceRecorder

__all__ = [
    "CATEGORIES",
    "debug_enabled",
    "debug_log",
    "enabled_categories",
    "parse_categories",
    "reload_categories",
    "TraceEntry",
    "TraceRecorder",
]
