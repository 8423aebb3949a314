"""Display plane and font data for the CHIP-8 interpreter."""

from __future__ import annotations

from .font import FONT_START, GLYPH_HEIGHT, HEX_FONT, get_glyph, glyph_address
from .framebuffer import DISPLAY_HEIGHT, DISPLAY_WIDTH, Framebuffer, FramebufferView

__all__ = [
    "Framebuffer",
    "FramebufferView",
    "DISPLAY_WIDTH",
    "DISPLAY_HEIGHT",
    "FONT_START",
    "GLYPH_HEIGHT",
    "HEX_FONT",
    "get_glyph",
    "glyph_address",
]
