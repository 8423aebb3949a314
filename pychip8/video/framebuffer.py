"""64x32 monochrome framebuffer with XOR sprite drawing."""

from __future__ import annotations

from typing import Iterable, Tuple

DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32


class Framebuffer:
    """Binary pixel plane addressed with wrap-around on both axes."""

    def __init__(self, width: int = DISPLAY_WIDTH, height: int = DISPLAY_HEIGHT) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("framebuffer dimensions must be positive")
        self.width = width
        self.height = height
        self._pixels = bytearray(width * height)
        self._dirty = False

    def _offset(self, x: int, y: int) -> int:
        return (y % self.height) * self.width + (x % self.width)

    def get_pixel(self, x: int, y: int) -> bool:
        return self._pixels[self._offset(x, y)] != 0

    def set_pixel(self, x: int, y: int, on: bool) -> None:
        offset = self._offset(x, y)
        value = 1 if on else 0
        if self._pixels[offset] != value:
            self._pixels[offset] = value
            self._dirty = True

    def clear(self) -> None:
        self._pixels[:] = bytes(len(self._pixels))
        self._dirty = True

    def draw_sprite(self, x: int, y: int, rows: Iterable[int]) -> bool:
        """XOR sprite ``rows`` in at ``(x, y)`` and return the collision flag.

        Each row byte covers eight columns, most significant bit first. Every
        pixel wraps independently, and the result is true when any lit pixel
        was turned off.
        """

        collision = False
        for row, bits in enumerate(rows):
            for column in range(8):
                if not (bits >> (7 - column)) & 0x01:
                    continue
                offset = self._offset(x + column, y + row)
                if self._pixels[offset]:
                    collision = True
                self._pixels[offset] ^= 1
                self._dirty = True
        return collision

    def consume_dirty(self) -> bool:
        """Return whether pixels changed since the last call, then reset."""

        dirty = self._dirty
        self._dirty = False
        return dirty

    def rows(self) -> Tuple[Tuple[bool, ...], ...]:
        return tuple(
            tuple(self._pixels[y * self.width + x] != 0 for x in range(self.width))
            for y in range(self.height)
        )

    def snapshot(self) -> bytes:
        """One byte per pixel, row-major, 1 for lit."""

        return bytes(self._pixels)

    def lit_count(self) -> int:
        return sum(self._pixels)

    def render_text(self, on: str = "#", off: str = " ") -> str:
        border = "|" + "-" * self.width + "|"
        lines = [border]
        for y in range(self.height):
            start = y * self.width
            row = self._pixels[start : start + self.width]
            lines.append("|" + "".join(on if pixel else off for pixel in row) + "|")
        lines.append(border)
        return "\n".join(lines)


class FramebufferView:
    """Read-only window onto a :class:`Framebuffer` handed to hosts."""

    def __init__(self, framebuffer: Framebuffer) -> None:
        self._framebuffer = framebuffer

    @property
    def width(self) -> int:
        return self._framebuffer.width

    @property
    def height(self) -> int:
        return self._framebuffer.height

    def pixel(self, x: int, y: int) -> bool:
        return self._framebuffer.get_pixel(x, y)

    def rows(self) -> Tuple[Tuple[bool, ...], ...]:
        return self._framebuffer.rows()

    def snapshot(self) -> bytes:
        return self._framebuffer.snapshot()

    def render_text(self, on: str = "#", off: str = " ") -> str:
        return self._framebuffer.render_text(on, off)

    def consume_dirty(self) -> bool:
        return self._framebuffer.consume_dirty()
