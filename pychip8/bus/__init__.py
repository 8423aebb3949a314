"""Memory bus for the CHIP-8 interpreter."""

from pychip8.errors import OutOfBoundsError

from .memory import MEMORY_SIZE, PROGRAM_START, Memory

__all__ = [
    "Memory",
    "MEMORY_SIZE",
    "PROGRAM_START",
    "OutOfBoundsError",
]
