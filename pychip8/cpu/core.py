"""CHIP-8 fetch-decode-execute engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Dict, Final, Mapping

from pychip8.errors import (
    Chip8Error,
    OutOfBoundsError,
    StackOverflowError,
    StackUnderflowError,
    UnknownOpcodeError,
)

from .opcodes import Instruction, Op, decode
from .state import FLAG_REGISTER, MachineState

INSTRUCTION_SIZE = 2


class EngineMode(Enum):
    RUNNING = auto()
    AWAITING_KEY = auto()


class StepStatus(Enum):
    """Outcome of a single :meth:`Chip8.step` call."""

    OK = auto()
    AWAITING_KEY = auto()
    UNKNOWN_OPCODE = auto()
    OUT_OF_BOUNDS = auto()
    STACK_OVERFLOW = auto()
    STACK_UNDERFLOW = auto()


_ERROR_STATUS: Final[Mapping[type, StepStatus]] = {
    OutOfBoundsError: StepStatus.OUT_OF_BOUNDS,
    StackOverflowError: StepStatus.STACK_OVERFLOW,
    StackUnderflowError: StepStatus.STACK_UNDERFLOW,
    UnknownOpcodeError: StepStatus.UNKNOWN_OPCODE,
}

_RECOVERABLE: Final[frozenset[StepStatus]] = frozenset(
    {StepStatus.OK, StepStatus.AWAITING_KEY, StepStatus.UNKNOWN_OPCODE}
)

# Ops that never fall through to the next instruction; they check their own targets.
_EXPLICIT_PC: Final[frozenset[Op]] = frozenset({Op.RET, Op.JP, Op.CALL, Op.JP_V0})


@dataclass(frozen=True)
class StepResult:
    """What happened during one step.

    ``pc`` is the address the instruction was fetched from (or the waiting
    instruction's address in key-wait mode). ``instruction`` is ``None`` only
    when the fetch itself failed.
    """

    status: StepStatus
    pc: int
    instruction: Instruction | None = None
    error: Chip8Error | None = None

    @property
    def ok(self) -> bool:
        return self.status is StepStatus.OK

    @property
    def fatal(self) -> bool:
        return self.status not in _RECOVERABLE


# Every Op must appear here; checked when the module is imported.
HANDLERS: Final[Mapping[Op, str]] = {
    Op.SYS: "op_sys",
    Op.CLS: "op_cls",
    Op.RET: "op_ret",
    Op.JP: "op_jp",
    Op.CALL: "op_call",
    Op.SE_IMM: "op_se_imm",
    Op.SNE_IMM: "op_sne_imm",
    Op.SE_REG: "op_se_reg",
    Op.LD_IMM: "op_ld_imm",
    Op.ADD_IMM: "op_add_imm",
    Op.LD_REG: "op_ld_reg",
    Op.OR: "op_or",
    Op.AND: "op_and",
    Op.XOR: "op_xor",
    Op.ADD_REG: "op_add_reg",
    Op.SUB: "op_sub",
    Op.SHR: "op_shr",
    Op.SUBN: "op_subn",
    Op.SHL: "op_shl",
    Op.SNE_REG: "op_sne_reg",
    Op.LD_I: "op_ld_i",
    Op.JP_V0: "op_jp_v0",
    Op.RND: "op_rnd",
    Op.DRW: "op_drw",
    Op.SKP: "op_skp",
    Op.SKNP: "op_sknp",
    Op.LD_VX_DT: "op_ld_vx_dt",
    Op.LD_VX_K: "op_ld_vx_k",
    Op.LD_DT_VX: "op_ld_dt_vx",
    Op.LD_ST_VX: "op_ld_st_vx",
    Op.ADD_I: "op_add_i",
    Op.LD_F: "op_ld_f",
    Op.LD_B: "op_ld_b",
    Op.LD_MEM_VX: "op_ld_mem_vx",
    Op.LD_VX_MEM: "op_ld_vx_mem",
    Op.UNKNOWN: "op_unknown",
}

_missing = set(Op) - set(HANDLERS)
if _missing:  # pragma: no cover - guards edits to the Op enum
    raise RuntimeError(f"no handler for {sorted(op.name for op in _missing)}")


Handler = Callable[[Instruction, int], "int | None"]


@dataclass
class Chip8:
    """Interpreter engine owning one :class:`MachineState`.

    Handlers receive the decoded instruction and the address it was fetched
    from. They return the next program counter, or ``None`` for the default
    advance of one instruction. A handler validates every address it will
    touch before writing anything, so an error leaves the state as it was
    before the step.
    """

    state: MachineState = field(default_factory=MachineState)

    mode: EngineMode = EngineMode.RUNNING
    step_count: int = 0

    def __post_init__(self) -> None:
        self._dispatch: Dict[Op, Handler] = {op: getattr(self, name) for op, name in HANDLERS.items()}
        self._await_register = 0
        self._await_pc = 0
        self._key_edges: set[int] = set()
        self.state.bind_key_listener(self._on_key_change)

    def reset(self) -> None:
        self.state.reset()
        self.mode = EngineMode.RUNNING
        self.step_count = 0
        self._key_edges.clear()

    @property
    def awaiting_key(self) -> bool:
        return self.mode is EngineMode.AWAITING_KEY

    def fetch(self) -> Instruction:
        pc = self.state.registers.pc
        word = self.state.memory.load16(pc)
        return decode(word >> 8, word & 0xFF)

    def step(self) -> StepResult:
        """Run one fetch-decode-execute cycle."""

        self.step_count += 1
        if self.mode is EngineMode.AWAITING_KEY:
            return self._poll_key()

        registers = self.state.registers
        pc = registers.pc
        instruction: Instruction | None = None
        try:
            instruction = self.fetch()
            if instruction.op not in _EXPLICIT_PC:
                self._check_target(pc + INSTRUCTION_SIZE)
            next_pc = self._dispatch[instruction.op](instruction, pc)
        except Chip8Error as exc:
            status = _ERROR_STATUS.get(type(exc))
            if status is None:
                raise
            if status is StepStatus.UNKNOWN_OPCODE:
                registers.set_pc(pc + INSTRUCTION_SIZE)
            return StepResult(status, pc, instruction, exc)

        registers.set_pc(pc + INSTRUCTION_SIZE if next_pc is None else next_pc)
        if self.mode is EngineMode.AWAITING_KEY:
            return StepResult(StepStatus.AWAITING_KEY, pc, instruction)
        return StepResult(StepStatus.OK, pc, instruction)

    def tick_timers(self) -> None:
        self.state.timers.tick()

    def _check_target(self, address: int) -> int:
        if not 0 <= address < len(self.state.memory):
            raise OutOfBoundsError(address, f"program counter target out of range: {address:#06x}")
        return address

    # ------------------------------------------------------------------
    # Key wait

    def _on_key_change(self, index: int, pressed: bool) -> None:
        if pressed and self.mode is EngineMode.AWAITING_KEY:
            self._key_edges.add(index)

    def _poll_key(self) -> StepResult:
        pc = self._await_pc
        instruction = decode(0xF0 | self._await_register, 0x0A)
        if not self._key_edges:
            return StepResult(StepStatus.AWAITING_KEY, pc, instruction)
        key = min(self._key_edges)
        self._key_edges.clear()
        registers = self.state.registers
        registers.set(self._await_register, key)
        registers.set_pc(pc + INSTRUCTION_SIZE)
        self.mode = EngineMode.RUNNING
        return StepResult(StepStatus.OK, pc, instruction)

    # ------------------------------------------------------------------
    # Control flow

    def op_sys(self, _: Instruction, pc: int) -> int | None:
        """Machine-code call on the original hardware; ignored."""

        return None

    def op_cls(self, _: Instruction, pc: int) -> int | None:
        self.state.framebuffer.clear()
        return None

    def op_ret(self, _: Instruction, pc: int) -> int | None:
        target = self.state.stack.peek()
        if target is not None:
            self._check_target(target)
        return self.state.stack.pop()

    def op_jp(self, instruction: Instruction, pc: int) -> int | None:
        return self._check_target(instruction.nnn)

    def op_call(self, instruction: Instruction, pc: int) -> int | None:
        target = self._check_target(instruction.nnn)
        self.state.stack.push(pc + INSTRUCTION_SIZE)
        return target

    def op_jp_v0(self, instruction: Instruction, pc: int) -> int | None:
        return self._check_target(instruction.nnn + self.state.registers.get(0))

    # ------------------------------------------------------------------
    # Conditional skips

    def _skip_if(self, condition: bool, pc: int) -> int | None:
        if condition:
            return self._check_target(pc + 2 * INSTRUCTION_SIZE)
        return None

    def op_se_imm(self, instruction: Instruction, pc: int) -> int | None:
        return self._skip_if(self.state.registers.get(instruction.x) == instruction.kk, pc)

    def op_sne_imm(self, instruction: Instruction, pc: int) -> int | None:
        return self._skip_if(self.state.registers.get(instruction.x) != instruction.kk, pc)

    def op_se_reg(self, instruction: Instruction, pc: int) -> int | None:
        registers = self.state.registers
        return self._skip_if(registers.get(instruction.x) == registers.get(instruction.y), pc)

    def op_sne_reg(self, instruction: Instruction, pc: int) -> int | None:
        registers = self.state.registers
        return self._skip_if(registers.get(instruction.x) != registers.get(instruction.y), pc)

    def op_skp(self, instruction: Instruction, pc: int) -> int | None:
        key = self.state.registers.get(instruction.x) & 0x0F
        return self._skip_if(self.state.keypad.is_pressed(key), pc)

    def op_sknp(self, instruction: Instruction, pc: int) -> int | None:
        key = self.state.registers.get(instruction.x) & 0x0F
        return self._skip_if(not self.state.keypad.is_pressed(key), pc)

    # ------------------------------------------------------------------
    # Register arithmetic

    def op_ld_imm(self, instruction: Instruction, pc: int) -> int | None:
        self.state.registers.set(instruction.x, instruction.kk)
        return None

    def op_add_imm(self, instruction: Instruction, pc: int) -> int | None:
        registers = self.state.registers
        registers.set(instruction.x, registers.get(instruction.x) + instruction.kk)
        return None

    def op_ld_reg(self, instruction: Instruction, pc: int) -> int | None:
        registers = self.state.registers
        registers.set(instruction.x, registers.get(instruction.y))
        return None

    def op_or(self, instruction: Instruction, pc: int) -> int | None:
        registers = self.state.registers
        registers.set(instruction.x, registers.get(instruction.x) | registers.get(instruction.y))
        return None

    def op_and(self, instruction: Instruction, pc: int) -> int | None:
        registers = self.state.registers
        registers.set(instruction.x, registers.get(instruction.x) & registers.get(instruction.y))
        return None

    def op_xor(self, instruction: Instruction, pc: int) -> int | None:
        registers = self.state.registers
        registers.set(instruction.x, registers.get(instruction.x) ^ registers.get(instruction.y))
        return None

    def _write_with_flag(self, index: int, value: int, flag: int) -> None:
        # VF goes last so that a flag wins when x is VF.
        registers = self.state.registers
        registers.set(index, value)
        registers.set(FLAG_REGISTER, flag)

    def op_add_reg(self, instruction: Instruction, pc: int) -> int | None:
        registers = self.state.registers
        total = registers.get(instruction.x) + registers.get(instruction.y)
        self._write_with_flag(instruction.x, total & 0xFF, 1 if total > 0xFF else 0)
        return None

    def op_sub(self, instruction: Instruction, pc: int) -> int | None:
        registers = self.state.registers
        vx = registers.get(instruction.x)
        vy = registers.get(instruction.y)
        # VF is NOT-borrow.
        self._write_with_flag(instruction.x, (vx - vy) & 0xFF, 0 if vx < vy else 1)
        return None

    def op_subn(self, instruction: Instruction, pc: int) -> int | None:
        registers = self.state.registers
        vx = registers.get(instruction.x)
        vy = registers.get(instruction.y)
        self._write_with_flag(instruction.x, (vy - vx) & 0xFF, 0 if vy < vx else 1)
        return None

    def op_shr(self, instruction: Instruction, pc: int) -> int | None:
        vx = self.state.registers.get(instruction.x)
        self._write_with_flag(instruction.x, vx >> 1, vx & 0x01)
        return None

    def op_shl(self, instruction: Instruction, pc: int) -> int | None:
        vx = self.state.registers.get(instruction.x)
        self._write_with_flag(instruction.x, (vx << 1) & 0xFF, (vx >> 7) & 0x01)
        return None

    def op_rnd(self, instruction: Instruction, pc: int) -> int | None:
        self.state.registers.set(instruction.x, self.state.random_byte() & instruction.kk)
        return None

    # ------------------------------------------------------------------
    # Index register and memory

    def op_ld_i(self, instruction: Instruction, pc: int) -> int | None:
        self.state.registers.set_index(instruction.nnn)
        return None

    def op_add_i(self, instruction: Instruction, pc: int) -> int | None:
        registers = self.state.registers
        registers.set_index(registers.i + registers.get(instruction.x))
        return None

    def op_ld_f(self, instruction: Instruction, pc: int) -> int | None:
        digit = self.state.registers.get(instruction.x) & 0x0F
        self.state.registers.set_index(self.state.font_start + digit * 5)
        return None

    def op_ld_b(self, instruction: Instruction, pc: int) -> int | None:
        value = self.state.registers.get(instruction.x)
        address = self.state.registers.i
        self.state.memory.ensure_writable(address, 3)
        self.state.memory.write_block(address, (value // 100, (value // 10) % 10, value % 10))
        return None

    def op_ld_mem_vx(self, instruction: Instruction, pc: int) -> int | None:
        # I is left unchanged by both bulk transfers.
        registers = self.state.registers
        count = instruction.x + 1
        self.state.memory.ensure_writable(registers.i, count)
        self.state.memory.write_block(registers.i, registers.v[:count])
        return None

    def op_ld_vx_mem(self, instruction: Instruction, pc: int) -> int | None:
        registers = self.state.registers
        data = self.state.memory.read_block(registers.i, instruction.x + 1)
        for index, value in enumerate(data):
            registers.set(index, value)
        return None

    # ------------------------------------------------------------------
    # Display

    def op_drw(self, instruction: Instruction, pc: int) -> int | None:
        registers = self.state.registers
        sprite = self.state.memory.read_block(registers.i, instruction.n)
        collision = self.state.framebuffer.draw_sprite(
            registers.get(instruction.x),
            registers.get(instruction.y),
            sprite,
        )
        registers.set(FLAG_REGISTER, 1 if collision else 0)
        return None

    # ------------------------------------------------------------------
    # Timers and input

    def op_ld_vx_dt(self, instruction: Instruction, pc: int) -> int | None:
        self.state.registers.set(instruction.x, self.state.timers.delay)
        return None

    def op_ld_dt_vx(self, instruction: Instruction, pc: int) -> int | None:
        self.state.timers.set_delay(self.state.registers.get(instruction.x))
        return None

    def op_ld_st_vx(self, instruction: Instruction, pc: int) -> int | None:
        self.state.timers.set_sound(self.state.registers.get(instruction.x))
        return None

    def op_ld_vx_k(self, instruction: Instruction, pc: int) -> int | None:
        self.mode = EngineMode.AWAITING_KEY
        self._await_register = instruction.x
        self._await_pc = pc
        self._key_edges.clear()
        return pc

    def op_unknown(self, instruction: Instruction, pc: int) -> int | None:
        raise UnknownOpcodeError(instruction.word, pc)
