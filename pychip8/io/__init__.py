"""Input handling for the CHIP-8 interpreter."""

from pychip8.errors import InvalidKeyIndexError

from .keypad import KEY_COUNT, Keypad, validate_key_index

__all__ = [
    "Keypad",
    "KEY_COUNT",
    "InvalidKeyIndexError",
    "validate_key_index",
]
