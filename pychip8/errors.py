"""Exception hierarchy shared by the CHIP-8 core.

State primitives raise these; :meth:`pychip8.cpu.Chip8.step` turns them into
:class:`pychip8.cpu.StepStatus` values so a host never has to catch them
from the hot path.
"""

from __future__ import annotations


class Chip8Error(Exception):
    """Base error for interpreter failures."""


class OutOfBoundsError(Chip8Error):
    """Raised for memory or framebuffer access outside the addressable range."""

    def __init__(self, address: int, message: str | None = None) -> None:
        self.address = address
        super().__init__(message or f"address {address:#06x} out of bounds")


class StackOverflowError(Chip8Error):
    """Raised when a call would exceed the maximum stack depth."""

    def __init__(self, depth: int) -> None:
        self.depth = depth
        super().__init__(f"call stack overflow (depth {depth})")


class StackUnderflowError(Chip8Error):
    """Raised when returning with an empty call stack."""

    def __init__(self) -> None:
        super().__init__("return with empty call stack")


class UnknownOpcodeError(Chip8Error):
    """Describes a word that decodes to no instruction."""

    def __init__(self, word: int, address: int) -> None:
        self.word = word
        self.address = address
        super().__init__(f"unknown opcode {word:04x} at {address:#06x}")


class InvalidKeyIndexError(Chip8Error):
    """Raised when a host addresses a key outside 0x0-0xF."""

    def __init__(self, index: int) -> None:
        self.index = index
        super().__init__(f"key index out of range: {index!r}")
