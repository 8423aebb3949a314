"""Tests for the wait-for-key instruction and the AwaitingKey mode."""

from __future__ import annotations

import random

from pychip8.bus import PROGRAM_START
from pychip8.cpu import Chip8, EngineMode, MachineState, StepStatus


def make_cpu(*words: int) -> Chip8:
    state = MachineState(rng=random.Random(0))
    image = b"".join(word.to_bytes(2, "big") for word in words)
    state.memory.load_image(image, PROGRAM_START)
    return Chip8(state)


def test_wait_enters_mode_and_holds_pc() -> None:
    cpu = make_cpu(0xF30A, 0x6001)

    result = cpu.step()

    assert result.status is StepStatus.AWAITING_KEY
    assert cpu.mode is EngineMode.AWAITING_KEY
    assert cpu.state.registers.pc == PROGRAM_START

    for _ in range(5):
        assert cpu.step().status is StepStatus.AWAITING_KEY
    assert cpu.state.registers.pc == PROGRAM_START
    assert cpu.state.registers.get(0) == 0


def test_press_captures_lowest_key_and_resumes() -> None:
    cpu = make_cpu(0xF30A, 0x6001)
    cpu.step()

    cpu.state.keypad.press(0x7)
    cpu.state.keypad.press(0x3)
    result = cpu.step()

    assert result.ok
    assert result.pc == PROGRAM_START
    assert cpu.state.registers.get(3) == 0x3
    assert cpu.state.registers.pc == PROGRAM_START + 2
    assert cpu.mode is EngineMode.RUNNING

    assert cpu.step().ok
    assert cpu.state.registers.get(0) == 1


def test_key_held_before_wait_does_not_satisfy_it() -> None:
    cpu = make_cpu(0xF00A)
    cpu.state.keypad.press(0x5)

    cpu.step()
    assert cpu.step().status is StepStatus.AWAITING_KEY

    cpu.state.keypad.release(0x5)
    assert cpu.step().status is StepStatus.AWAITING_KEY

    cpu.state.keypad.press(0x5)
    assert cpu.step().ok
    assert cpu.state.registers.get(0) == 0x5


def test_press_and_release_between_steps_is_not_lost() -> None:
    cpu = make_cpu(0xF10A)
    cpu.step()

    cpu.state.keypad.press(0xE)
    cpu.state.keypad.release(0xE)

    assert cpu.step().ok
    assert cpu.state.registers.get(1) == 0xE


def test_waiting_steps_do_not_fetch() -> None:
    cpu = make_cpu(0xF00A)
    cpu.step()
    # Overwrite the waiting instruction; the wait must be unaffected.
    cpu.state.memory.write_block(PROGRAM_START, (0x00, 0xEE))

    result = cpu.step()

    assert result.status is StepStatus.AWAITING_KEY
    assert result.instruction is not None
    assert result.instruction.word == 0xF00A


def test_reset_leaves_wait_mode() -> None:
    cpu = make_cpu(0xF00A)
    cpu.step()

    cpu.reset()

    assert cpu.mode is EngineMode.RUNNING
    assert cpu.state.registers.pc == PROGRAM_START


def test_new_engine_over_same_state_takes_over_key_events() -> None:
    old = make_cpu(0xF30A)
    old.step()
    new = Chip8(old.state)
    new.step()

    old.state.keypad.press(0x9)

    assert old.step().status is StepStatus.AWAITING_KEY
    assert new.step().ok
    assert new.state.registers.get(3) == 0x9


def test_wait_at_last_slot_is_rejected_before_waiting() -> None:
    cpu = make_cpu()
    cpu.state.memory.write_block(0xFFE, (0xF0, 0x0A))
    cpu.state.registers.set_pc(0xFFE)

    result = cpu.step()

    assert result.status is StepStatus.OUT_OF_BOUNDS
    assert cpu.mode is EngineMode.RUNNING
    assert cpu.state.registers.pc == 0xFFE
