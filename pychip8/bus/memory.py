"""Bounded 4 KiB memory for the CHIP-8 interpreter.

Unlike machines with memory-mapped devices there is a single flat region.
Every access is bounds-checked and reported with :class:`OutOfBoundsError`
rather than wrapped, so a runaway program counter or index register is
visible to the host.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

from pychip8.errors import OutOfBoundsError

MEMORY_SIZE = 0x1000
PROGRAM_START = 0x200


@dataclass
class Memory:
    """Byte-addressable memory with a read-only interpreter area."""

    length: int = MEMORY_SIZE
    reserved_end: int = PROGRAM_START

    def __post_init__(self) -> None:
        if self.length <= 0:
            raise ValueError("memory must have a positive length")
        if not 0 <= self.reserved_end <= self.length:
            raise ValueError("reserved area must lie inside memory")
        self._data = bytearray(self.length)

    def __len__(self) -> int:
        return self.length

    def ensure_range(self, address: int, count: int = 1) -> None:
        """Raise unless ``address .. address + count - 1`` is addressable."""

        if count <= 0:
            return
        if address < 0:
            raise OutOfBoundsError(address)
        last = address + count - 1
        if last >= self.length:
            raise OutOfBoundsError(last if address < self.length else address)

    def ensure_writable(self, address: int, count: int = 1) -> None:
        """Like :meth:`ensure_range` but also rejects the interpreter area."""

        self.ensure_range(address, count)
        if count > 0 and address < self.reserved_end:
            raise OutOfBoundsError(
                address,
                f"address {address:#06x} lies in the read-only interpreter area",
            )

    def load8(self, address: int) -> int:
        self.ensure_range(address)
        return self._data[address]

    def store8(self, address: int, value: int) -> None:
        self.ensure_range(address)
        self._data[address] = value & 0xFF

    def load16(self, address: int) -> int:
        """Read a big-endian word, the layout used for instructions."""

        self.ensure_range(address, 2)
        return (self._data[address] << 8) | self._data[address + 1]

    def read_block(self, address: int, count: int) -> bytes:
        self.ensure_range(address, count)
        return bytes(self._data[address : address + count])

    def write_block(self, address: int, data: Iterable[int]) -> None:
        payload = bytes(value & 0xFF for value in data)
        self.ensure_range(address, len(payload))
        self._data[address : address + len(payload)] = payload

    def load_image(self, data: bytes, address: int = PROGRAM_START, *, clear_tail: bool = False) -> int:
        """Copy ``data`` to ``address`` and return the number of bytes written.

        With ``clear_tail`` every byte from ``address`` to the end of memory is
        zeroed first, so nothing of an earlier, longer image survives.
        """

        if address + len(data) > self.length:
            raise OutOfBoundsError(
                address + len(data) - 1,
                f"image of {len(data)} bytes does not fit at {address:#06x}",
            )
        if clear_tail:
            self._data[address:] = bytes(self.length - address)
        self.write_block(address, data)
        return len(data)

    def clear(self) -> None:
        self._data[:] = bytes(self.length)

    def snapshot(self) -> bytes:
        return bytes(self._data)

    def dump(self, start: int = 0, end: int | None = None, *, width: int = 32) -> List[str]:
        """Return hex dump lines, ``width`` bytes per line grouped in pairs."""

        if end is None:
            end = self.length
        self.ensure_range(start, end - start)
        lines: list[str] = []
        for base in range(start, end, width):
            chunk = self._data[base : min(base + width, end)]
            pairs = [chunk[offset : offset + 2].hex() for offset in range(0, len(chunk), 2)]
            lines.append(f"{base:04x}: {' '.join(pairs)}")
        return lines
