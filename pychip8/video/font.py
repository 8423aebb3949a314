"""Built-in hexadecimal digit sprites."""

from __future__ import annotations

from typing import Sequence

FONT_START = 0x050
GLYPH_HEIGHT = 5
GLYPH_COUNT = 16

# Each glyph is 4 pixels wide, stored in the high nibble of five row bytes.
HEX_FONT: bytes = bytes(
    (
        0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
        0x20, 0x60, 0x20, 0x20, 0x70,  # 1
        0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
        0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
        0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
        0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
        0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
        0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
        0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
        0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
        0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
        0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
        0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
        0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
        0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
        0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
    )
)


def glyph_address(digit: int, base: int = FONT_START) -> int:
    """Return the memory address of the sprite for ``digit``'s low nibble."""

    return base + (digit & 0x0F) * GLYPH_HEIGHT


def get_glyph(digit: int) -> Sequence[int]:
    offset = (digit & 0x0F) * GLYPH_HEIGHT
    return HEX_FONT[offset : offset + GLYPH_HEIGHT]
