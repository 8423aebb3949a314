"""CHIP-8 interpreter core.

The package is split the way an emulator is wired: ``bus`` holds memory,
``cpu`` the machine state and execution engine, ``video`` the framebuffer
and font, ``io`` the keypad, ``system`` the host-facing facade and
``utils`` debug logging and tracing.
"""

from __future__ import annotations

from . import bus, cpu, io, system, utils, video
from .errors import (
    Chip8Error,
    InvalidKeyIndexError,
    OutOfBoundsError,
    StackOverflowError,
    StackUnderflowError,
    UnknownOpcodeError,
)
from .system import Machine, MachineConfig, create_machine

__version__ = "0.1.0"

__all__: list[str] = [
    "bus",
    "cpu",
    "io",
    "system",
    "utils",
    "video",
    "Machine",
    "MachineConfig",
    "create_machine",
    "Chip8Error",
    "InvalidKeyIndexError",
    "OutOfBoundsError",
    "StackOverflowError",
    "StackUnderflowError",
    "UnknownOpcodeError",
]
