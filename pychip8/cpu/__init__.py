"""CPU package for the CHIP-8 interpreter."""

from pychip8.errors import (
    Chip8Error,
    OutOfBoundsError,
    StackOverflowError,
    StackUnderflowError,
    UnknownOpcodeError,
)

from .core import Chip8, EngineMode, StepResult, StepStatus
from .opcodes import INSTRUCTION_TABLE, Instruction, InstructionSpec, Op, decode, decode_word
from .state import CallStack, MachineState, RegisterFile, Timers
from . import opcodes

__all__ = [
    "Chip8",
    "EngineMode",
    "StepResult",
    "StepStatus",
    "MachineState",
    "RegisterFile",
    "CallStack",
    "Timers",
    "Instruction",
    "InstructionSpec",
    "INSTRUCTION_TABLE",
    "Op",
    "decode",
    "decode_word",
    "opcodes",
    "Chip8Error",
    "OutOfBoundsError",
    "StackOverflowError",
    "StackUnderflowError",
    "UnknownOpcodeError",
]
