"""Tests for the hexadecimal keypad latches."""

from __future__ import annotations

import pytest

from pychip8.io import InvalidKeyIndexError, Keypad


def test_press_and_release() -> None:
    keypad = Keypad()

    keypad.press(0xA)
    assert keypad.is_pressed(0xA)
    assert keypad.pressed_keys() == (0xA,)

    keypad.release(0xA)
    assert not keypad.is_pressed(0xA)
    assert keypad.pressed_keys() == ()


@pytest.mark.parametrize("index", [-1, 16, 0x100, True])
def test_invalid_index_is_rejected(index) -> None:
    keypad = Keypad()
    with pytest.raises(InvalidKeyIndexError):
        keypad.press(index)
    with pytest.raises(InvalidKeyIndexError):
        keypad.is_pressed(index)


def test_listeners_fire_on_transitions_only() -> None:
    keypad = Keypad()
    events: list[tuple[int, bool]] = []
    keypad.add_listener(lambda index, pressed: events.append((index, pressed)))

    keypad.press(1)
    keypad.press(1)
    keypad.release(1)
    keypad.release(1)

    assert events == [(1, True), (1, False)]


def test_reset_releases_everything() -> None:
    keypad = Keypad()
    keypad.press(0)
    keypad.press(0xF)
    keypad.reset()
    assert keypad.snapshot() == (False,) * 16


def test_removed_listener_stops_firing() -> None:
    keypad = Keypad()
    events: list[int] = []

    def listener(index: int, pressed: bool) -> None:
        events.append(index)

    keypad.add_listener(listener)
    keypad.press(4)
    keypad.remove_listener(listener)
    keypad.remove_listener(listener)
    keypad.press(5)

    assert events == [4]
