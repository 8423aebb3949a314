"""Tests for the monochrome framebuffer."""

from __future__ import annotations

from pychip8.video import DISPLAY_HEIGHT, DISPLAY_WIDTH, Framebuffer, FramebufferView, get_glyph, glyph_address


def test_pixels_wrap_on_both_axes() -> None:
    framebuffer = Framebuffer()
    framebuffer.set_pixel(DISPLAY_WIDTH + 1, -1, True)

    assert framebuffer.get_pixel(1, DISPLAY_HEIGHT - 1)
    assert framebuffer.lit_count() == 1


def test_draw_sprite_reports_collision() -> None:
    framebuffer = Framebuffer()
    assert framebuffer.draw_sprite(0, 0, (0x80,)) is False
    assert framebuffer.draw_sprite(0, 0, (0xC0,)) is True
    assert not framebuffer.get_pixel(0, 0)
    assert framebuffer.get_pixel(1, 0)


def test_dirty_flag_is_consumed() -> None:
    framebuffer = Framebuffer()
    assert framebuffer.consume_dirty() is False

    framebuffer.draw_sprite(3, 3, (0x01,))
    assert framebuffer.consume_dirty() is True
    assert framebuffer.consume_dirty() is False

    framebuffer.set_pixel(10, 3, False)
    framebuffer.set_pixel(10, 3, False)
    assert framebuffer.consume_dirty() is True


def test_render_text_has_border() -> None:
    framebuffer = Framebuffer()
    framebuffer.set_pixel(0, 0, True)

    lines = framebuffer.render_text().splitlines()

    assert len(lines) == DISPLAY_HEIGHT + 2
    assert lines[0] == "|" + "-" * DISPLAY_WIDTH + "|"
    assert lines[1].startswith("|# ")
    assert all(len(line) == DISPLAY_WIDTH + 2 for line in lines)


def test_rows_and_view_are_read_only_copies() -> None:
    framebuffer = Framebuffer()
    framebuffer.set_pixel(2, 1, True)
    view = FramebufferView(framebuffer)

    rows = view.rows()
    assert rows[1][2] is True
    assert view.pixel(2, 1)
    assert (view.width, view.height) == (DISPLAY_WIDTH, DISPLAY_HEIGHT)
    assert not hasattr(view, "set_pixel")
    assert view.snapshot()[1 * DISPLAY_WIDTH + 2] == 1


def test_glyph_helpers() -> None:
    assert glyph_address(0xA) == 0x050 + 50
    assert glyph_address(0x1F) == glyph_address(0xF)
    assert tuple(get_glyph(0x0)) == (0xF0, 0x90, 0x90, 0x90, 0xF0)
