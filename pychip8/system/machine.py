"""Host-facing CHIP-8 machine assembly."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import List, Optional

from pychip8.bus import PROGRAM_START
from pychip8.cpu import Chip8, MachineState, StepResult, StepStatus
from pychip8.io import validate_key_index
from pychip8.utils import TraceRecorder, debug_enabled, debug_log
from pychip8.video import FramebufferView


@dataclass
class MachineConfig:
    """Runtime configuration for a CHIP-8 machine."""

    program: Optional[bytes] = None
    seed: Optional[int] = None
    rng: Optional[random.Random] = None
    trace_capacity: int = 0


@dataclass
class Machine:
    """The narrow interface a host drives the interpreter through.

    The host may read the framebuffer and timers and write key latches; all
    other state stays behind the engine.
    """

    _engine: Chip8
    trace: TraceRecorder | None = None
    _program: bytes = field(default=b"")

    def __post_init__(self) -> None:
        self._framebuffer = FramebufferView(self._engine.state.framebuffer)
        self._engine.state.keypad.add_listener(self._log_key)

    # ------------------------------------------------------------------
    # Program and lifecycle

    def load(self, program: bytes) -> None:
        """Place ``program`` at the entry address; only valid before stepping."""

        if self._engine.step_count:
            raise RuntimeError("program must be loaded before the first step; call reset() first")
        data = bytes(program)
        self._engine.state.memory.load_image(data, PROGRAM_START, clear_tail=True)
        self._program = data
        if debug_enabled("load"):
            debug_log("load", "bytes=%d start=%04x", len(data), PROGRAM_START)

    def reset(self) -> None:
        """Return to the power-on configuration, keeping the loaded program."""

        self._engine.reset()
        if self._program:
            self._engine.state.memory.load_image(self._program, PROGRAM_START)
        if self.trace is not None:
            self.trace.clear()

    # ------------------------------------------------------------------
    # Execution

    def step(self) -> StepResult:
        state = self._engine.state
        waiting_before = self._engine.awaiting_key
        result = self._engine.step()

        if self.trace is not None:
            instruction = result.instruction
            self.trace.record_step(
                state.registers,
                result.pc,
                None if instruction is None else instruction.word,
                status=result.status.name,
                sp=len(state.stack),
                delay=state.timers.delay,
                sound=state.timers.sound,
                waiting=self._engine.awaiting_key,
                mnemonic="" if instruction is None else instruction.mnemonic,
                note="resume" if waiting_before and result.ok else "",
            )

        if debug_enabled("cpu") and result.status is not StepStatus.AWAITING_KEY:
            debug_log(
                "cpu",
                "pc=%04x opcode=%s status=%s",
                result.pc,
                "----" if result.instruction is None else f"{result.instruction.word:04x}",
                result.status.name,
            )
        if result.status is StepStatus.UNKNOWN_OPCODE:
            debug_log("warn", "%s", result.error)
        elif result.fatal:
            debug_log("error", "%s", result.error)
        return result

    def run_frame(self, steps: int) -> List[StepResult]:
        """Run up to ``steps`` steps then tick the timers once.

        Stops early, without ticking, when a step reports a fatal outcome.
        """

        results: list[StepResult] = []
        for _ in range(max(steps, 0)):
            result = self.step()
            results.append(result)
            if result.fatal:
                return results
        self.tick_timers()
        return results

    def tick_timers(self) -> None:
        self._engine.tick_timers()
        if debug_enabled("timer"):
            timers = self._engine.state.timers
            debug_log("timer", "delay=%d sound=%d", timers.delay, timers.sound)

    # ------------------------------------------------------------------
    # Input

    def set_key(self, index: int) -> None:
        self._engine.state.keypad.press(index)

    def clear_key(self, index: int) -> None:
        self._engine.state.keypad.release(index)

    def release_all_keys(self) -> None:
        self._engine.state.keypad.reset()

    def is_key_pressed(self, index: int) -> bool:
        return self._engine.state.keypad.is_pressed(validate_key_index(index))

    # ------------------------------------------------------------------
    # Read-only views

    @property
    def framebuffer(self) -> FramebufferView:
        return self._framebuffer

    @property
    def sound_timer(self) -> int:
        return self._engine.state.timers.sound

    @property
    def delay_timer(self) -> int:
        return self._engine.state.timers.delay

    @property
    def sound_active(self) -> bool:
        return self._engine.state.timers.sound > 0

    @property
    def awaiting_key(self) -> bool:
        return self._engine.awaiting_key

    @property
    def pc(self) -> int:
        return self._engine.state.registers.pc

    def registers(self) -> tuple[int, ...]:
        return tuple(self._engine.state.registers.v)

    def dump_memory(self, start: int = 0, end: int | None = None) -> list[str]:
        return self._engine.state.memory.dump(start, end)

    def _log_key(self, index: int, pressed: bool) -> None:
        if debug_enabled("input"):
            debug_log("input", "key=%x pressed=%s", index, pressed)


def create_machine(config: MachineConfig | None = None) -> Machine:
    """Instantiate a CHIP-8 machine with the requested configuration."""

    config = config or MachineConfig()
    rng = config.rng or random.Random(config.seed)
    state = MachineState(rng=rng)
    engine = Chip8(state)

    capacity = config.trace_capacity
    if capacity <= 0 and debug_enabled("trace"):
        capacity = 512
    trace = TraceRecorder(capacity) if capacity > 0 else None

    machine = Machine(engine, trace)
    if config.program:
        machine.load(config.program)
    return machine
