"""Machine state owned by the CHIP-8 engine.

Nothing here interprets instructions; these classes only enforce the
invariants of their data (register widths, stack depth, timer floor).
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Tuple

from pychip8.bus import Memory, PROGRAM_START
from pychip8.errors import StackOverflowError, StackUnderflowError
from pychip8.io import Keypad
from pychip8.video import FONT_START, HEX_FONT, Framebuffer

REGISTER_COUNT = 16
FLAG_REGISTER = 0xF
STACK_DEPTH = 16


def _validate_register(index: int) -> int:
    if not 0 <= index < REGISTER_COUNT:
        raise IndexError(f"register index out of range: {index}")
    return index


@dataclass
class RegisterFile:
    """V0-VF, the index register and the program counter."""

    v: bytearray = field(default_factory=lambda: bytearray(REGISTER_COUNT))
    i: int = 0x0000
    pc: int = PROGRAM_START

    def get(self, index: int) -> int:
        return self.v[_validate_register(index)]

    def set(self, index: int, value: int) -> None:
        self.v[_validate_register(index)] = value & 0xFF

    def set_index(self, value: int) -> None:
        self.i = value & 0xFFFF

    def set_pc(self, value: int) -> None:
        self.pc = value & 0xFFFF

    def clone(self) -> "RegisterFile":
        return RegisterFile(bytearray(self.v), self.i, self.pc)


@dataclass
class CallStack:
    """Bounded stack of return addresses."""

    max_depth: int = STACK_DEPTH
    _frames: List[int] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self._frames)

    def push(self, address: int) -> None:
        if len(self._frames) >= self.max_depth:
            raise StackOverflowError(len(self._frames))
        self._frames.append(address & 0xFFFF)

    def pop(self) -> int:
        if not self._frames:
            raise StackUnderflowError()
        return self._frames.pop()

    def peek(self) -> int | None:
        return self._frames[-1] if self._frames else None

    def frames(self) -> Tuple[int, ...]:
        return tuple(self._frames)

    def clear(self) -> None:
        self._frames.clear()


@dataclass
class Timers:
    """Delay and sound countdown timers."""

    delay: int = 0
    sound: int = 0

    def set_delay(self, value: int) -> None:
        self.delay = value & 0xFF

    def set_sound(self, value: int) -> None:
        self.sound = value & 0xFF

    def tick(self) -> None:
        if self.delay > 0:
            self.delay -= 1
        if self.sound > 0:
            self.sound -= 1


@dataclass
class MachineState:
    """Authoritative data record of one CHIP-8 machine."""

    memory: Memory = field(default_factory=Memory)
    registers: RegisterFile = field(default_factory=RegisterFile)
    stack: CallStack = field(default_factory=CallStack)
    timers: Timers = field(default_factory=Timers)
    framebuffer: Framebuffer = field(default_factory=Framebuffer)
    keypad: Keypad = field(default_factory=Keypad)
    rng: random.Random = field(default_factory=random.Random)
    font_start: int = FONT_START

    def __post_init__(self) -> None:
        self._rng_state: Any = self.rng.getstate()
        self._key_listener: Optional[Callable[[int, bool], None]] = None
        self.load_font()

    def bind_key_listener(self, listener: Callable[[int, bool], None]) -> None:
        """Attach the owning engine's key listener, detaching any earlier one."""

        if self._key_listener is not None:
            self.keypad.remove_listener(self._key_listener)
        self._key_listener = listener
        self.keypad.add_listener(listener)

    def load_font(self) -> None:
        self.memory.write_block(self.font_start, HEX_FONT)

    def reset(self) -> None:
        """Zero everything, rewind the RNG to its initial state and reload the font."""

        self.memory.clear()
        self.load_font()
        self.registers = RegisterFile()
        self.stack.clear()
        self.timers = Timers()
        self.framebuffer.clear()
        self.framebuffer.consume_dirty()
        self.keypad.reset()
        self.rng.setstate(self._rng_state)

    def random_byte(self) -> int:
        return self.rng.randrange(0x100)
