"""Sixteen-key hexadecimal keypad latches."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Tuple

from pychip8.errors import InvalidKeyIndexError

KEY_COUNT = 16


def validate_key_index(index: int) -> int:
    if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < KEY_COUNT:
        raise InvalidKeyIndexError(index)
    return index


@dataclass
class Keypad:
    """Key latches written by the host and read by the interpreter."""

    _latches: bytearray = field(default_factory=lambda: bytearray(KEY_COUNT))
    _listeners: list[Callable[[int, bool], None]] = field(default_factory=list)

    def press(self, index: int) -> None:
        self._set(validate_key_index(index), True)

    def release(self, index: int) -> None:
        self._set(validate_key_index(index), False)

    def is_pressed(self, index: int) -> bool:
        return self._latches[validate_key_index(index)] != 0

    def pressed_keys(self) -> Tuple[int, ...]:
        return tuple(index for index, value in enumerate(self._latches) if value)

    def reset(self) -> None:
        for index in self.pressed_keys():
            self._set(index, False)

    def snapshot(self) -> Tuple[bool, ...]:
        return tuple(value != 0 for value in self._latches)

    def add_listener(self, listener: Callable[[int, bool], None]) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Callable[[int, bool], None]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _set(self, index: int, pressed: bool) -> None:
        before = self._latches[index]
        self._latches[index] = 1 if pressed else 0
        if self._latches[index] != before:
            for listener in tuple(self._listeners):
                listener(index, pressed)
