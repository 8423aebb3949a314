"""Category-filtered debug output for hosts driving the interpreter.

``CHIP8_DEBUG`` holds a comma separated list of categories, or ``all``.
The machine facade writes under these:

======  =========================================
cpu     one line per executed step
warn    unknown opcodes
error   fatal step outcomes
input   key latch transitions
timer   timer ticks
load    program loads
trace   turns on the step recorder; dumps go here
======  =========================================
"""

from __future__ import annotations

import os
from typing import Final

ENV_VAR = "CHIP8_DEBUG"
PREFIX = "[CHIP8]"
CATEGORIES: Final[tuple[str, ...]] = ("cpu", "warn", "error", "input", "timer", "load", "trace")

_enabled: frozenset[str] | None = None


def parse_categories(value: str) -> frozenset[str]:
    """Lower-case the names in ``value``; ``all`` also adds every known category."""

    names = {part.strip().lower() for part in value.split(",")}
    names.discard("")
    if "all" in names:
        names.update(CATEGORIES)
    return frozenset(names)


def enabled_categories() -> frozenset[str]:
    global _enabled
    if _enabled is None:
        _enabled = parse_categories(os.environ.get(ENV_VAR, ""))
    return _enabled


def reload_categories() -> frozenset[str]:
    """Re-read ``CHIP8_DEBUG`` after the environment changed."""

    global _enabled
    _enabled = None
    return enabled_categories()


def debug_enabled(category: str | None = None) -> bool:
    enabled = enabled_categories()
    if category is None:
        return bool(enabled)
    return "all" in enabled or category.lower() in enabled


def debug_log(category: str, message: str, *args) -> None:
    if not debug_enabled(category):
        return
    if args:
        try:
            message = message % args
        except (TypeError, ValueError):
            message = f"{message} {args!r}"
    print(f"{PREFIX}[{category}] {message}")
