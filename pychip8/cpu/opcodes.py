"""Instruction catalogue and decoder for the CHIP-8 instruction set."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Final, Iterable, List, Sequence


class Op(Enum):
    """Closed set of decodable operations."""

    SYS = auto()
    CLS = auto()
    RET = auto()
    JP = auto()
    CALL = auto()
    SE_IMM = auto()
    SNE_IMM = auto()
    SE_REG = auto()
    LD_IMM = auto()
    ADD_IMM = auto()
    LD_REG = auto()
    OR = auto()
    AND = auto()
    XOR = auto()
    ADD_REG = auto()
    SUB = auto()
    SHR = auto()
    SUBN = auto()
    SHL = auto()
    SNE_REG = auto()
    LD_I = auto()
    JP_V0 = auto()
    RND = auto()
    DRW = auto()
    SKP = auto()
    SKNP = auto()
    LD_VX_DT = auto()
    LD_VX_K = auto()
    LD_DT_VX = auto()
    LD_ST_VX = auto()
    ADD_I = auto()
    LD_F = auto()
    LD_B = auto()
    LD_MEM_VX = auto()
    LD_VX_MEM = auto()
    UNKNOWN = auto()


@dataclass(frozen=True)
class InstructionSpec:
    """Bit pattern identifying one instruction form."""

    op: Op
    mnemonic: str
    mask: int
    pattern: int
    operands: str = ""

    def __post_init__(self) -> None:
        if not 0 <= self.mask <= 0xFFFF:
            raise ValueError(f"mask out of range: {self.mask}")
        if self.pattern & ~self.mask:
            raise ValueError(f"pattern {self.pattern:#06x} has bits outside mask {self.mask:#06x}")
        if self.op is Op.UNKNOWN:
            raise ValueError("UNKNOWN is not a catalogue entry")

    def matches(self, word: int) -> bool:
        return (word & self.mask) == self.pattern


@dataclass(frozen=True)
class Instruction:
    """A decoded 16-bit word with its positional fields."""

    op: Op
    word: int
    mnemonic: str = "???"

    @property
    def kind(self) -> int:
        return (self.word >> 12) & 0xF

    @property
    def x(self) -> int:
        return (self.word >> 8) & 0xF

    @property
    def y(self) -> int:
        return (self.word >> 4) & 0xF

    @property
    def n(self) -> int:
        return self.word & 0xF

    @property
    def kk(self) -> int:
        return self.word & 0xFF

    @property
    def nnn(self) -> int:
        return self.word & 0xFFF

    @property
    def sub_kind(self) -> int:
        """Selector for the 8xy?, Ex?? and Fx?? families."""

        if self.kind == 0x8:
            return self.n
        return self.kk

    @property
    def known(self) -> bool:
        return self.op is not Op.UNKNOWN

    def __str__(self) -> str:
        return f"{self.word:04X} {self.mnemonic}"


class OpcodeTable:
    """Builder that rejects overlapping instruction patterns."""

    def __init__(self) -> None:
        self._entries: List[InstructionSpec] = []
        self._ops: set[Op] = set()

    def register(self, spec: InstructionSpec) -> None:
        if spec.op in self._ops:
            raise ValueError(f"{spec.op.name} already registered")
        for existing in self._entries:
            common = existing.mask & spec.mask
            if (existing.pattern & common) == (spec.pattern & common):
                raise ValueError(
                    f"{spec.mnemonic} {spec.pattern:#06x} overlaps {existing.mnemonic} {existing.pattern:#06x}")
        self._entries.append(spec)
        self._ops.add(spec.op)

    def register_all(self, specs: Iterable[InstructionSpec]) -> None:
        for spec in specs:
            self.register(spec)

    def freeze(self) -> Sequence[InstructionSpec]:
        return tuple(self._entries)


DEFAULT_INSTRUCTIONS: Sequence[InstructionSpec] = (
    InstructionSpec(Op.CLS, "CLS", 0xFFFF, 0x00E0),
    InstructionSpec(Op.RET, "RET", 0xFFFF, 0x00EE),
    InstructionSpec(Op.JP, "JP", 0xF000, 0x1000, "nnn"),
    InstructionSpec(Op.CALL, "CALL", 0xF000, 0x2000, "nnn"),
    InstructionSpec(Op.SE_IMM, "SE", 0xF000, 0x3000, "x,kk"),
    InstructionSpec(Op.SNE_IMM, "SNE", 0xF000, 0x4000, "x,kk"),
    InstructionSpec(Op.SE_REG, "SE", 0xF00F, 0x5000, "x,y"),
    InstructionSpec(Op.LD_IMM, "LD", 0xF000, 0x6000, "x,kk"),
    InstructionSpec(Op.ADD_IMM, "ADD", 0xF000, 0x7000, "x,kk"),
    # 8xy? register arithmetic
    InstructionSpec(Op.LD_REG, "LD", 0xF00F, 0x8000, "x,y"),
    InstructionSpec(Op.OR, "OR", 0xF00F, 0x8001, "x,y"),
    InstructionSpec(Op.AND, "AND", 0xF00F, 0x8002, "x,y"),
    InstructionSpec(Op.XOR, "XOR", 0xF00F, 0x8003, "x,y"),
    InstructionSpec(Op.ADD_REG, "ADD", 0xF00F, 0x8004, "x,y"),
    InstructionSpec(Op.SUB, "SUB", 0xF00F, 0x8005, "x,y"),
    InstructionSpec(Op.SHR, "SHR", 0xF00F, 0x8006, "x"),
    InstructionSpec(Op.SUBN, "SUBN", 0xF00F, 0x8007, "x,y"),
    InstructionSpec(Op.SHL, "SHL", 0xF00F, 0x800E, "x"),
    InstructionSpec(Op.SNE_REG, "SNE", 0xF00F, 0x9000, "x,y"),
    InstructionSpec(Op.LD_I, "LD", 0xF000, 0xA000, "I,nnn"),
    InstructionSpec(Op.JP_V0, "JP", 0xF000, 0xB000, "V0,nnn"),
    InstructionSpec(Op.RND, "RND", 0xF000, 0xC000, "x,kk"),
    InstructionSpec(Op.DRW, "DRW", 0xF000, 0xD000, "x,y,n"),
    InstructionSpec(Op.SKP, "SKP", 0xF0FF, 0xE09E, "x"),
    InstructionSpec(Op.SKNP, "SKNP", 0xF0FF, 0xE0A1, "x"),
    # Fx?? timers, index and memory transfers
    InstructionSpec(Op.LD_VX_DT, "LD", 0xF0FF, 0xF007, "x,DT"),
    InstructionSpec(Op.LD_VX_K, "LD", 0xF0FF, 0xF00A, "x,K"),
    InstructionSpec(Op.LD_DT_VX, "LD", 0xF0FF, 0xF015, "DT,x"),
    InstructionSpec(Op.LD_ST_VX, "LD", 0xF0FF, 0xF018, "ST,x"),
    InstructionSpec(Op.ADD_I, "ADD", 0xF0FF, 0xF01E, "I,x"),
    InstructionSpec(Op.LD_F, "LD", 0xF0FF, 0xF029, "F,x"),
    InstructionSpec(Op.LD_B, "LD", 0xF0FF, 0xF033, "B,x"),
    InstructionSpec(Op.LD_MEM_VX, "LD", 0xF0FF, 0xF055, "[I],x"),
    InstructionSpec(Op.LD_VX_MEM, "LD", 0xF0FF, 0xF065, "x,[I]"),
)

# 0nnn must be tried after CLS and RET, which it would otherwise shadow.
FALLBACK_INSTRUCTIONS: Sequence[InstructionSpec] = (
    InstructionSpec(Op.SYS, "SYS", 0xF000, 0x0000, "nnn"),
)


def build_instruction_table(specs: Iterable[InstructionSpec]) -> Sequence[InstructionSpec]:
    table = OpcodeTable()
    table.register_all(specs)
    return table.freeze()


INSTRUCTION_TABLE: Final[Sequence[InstructionSpec]] = (
    build_instruction_table(DEFAULT_INSTRUCTIONS) + tuple(FALLBACK_INSTRUCTIONS)
)

# Patterns are disjoint apart from SYS, so bucketing by the top nibble
# keeps decode to a handful of comparisons.
_BY_KIND: Final[tuple[tuple[InstructionSpec, ...], ...]] = tuple(
    tuple(spec for spec in INSTRUCTION_TABLE if (spec.pattern >> 12) == kind)
    for kind in range(16)
)


def decode_word(word: int) -> Instruction:
    """Decode a 16-bit word; unrecognised patterns yield ``Op.UNKNOWN``."""

    word &= 0xFFFF
    for spec in _BY_KIND[word >> 12]:
        if spec.matches(word):
            return Instruction(spec.op, word, spec.mnemonic)
    return Instruction(Op.UNKNOWN, word)


def decode(high: int, low: int) -> Instruction:
    return decode_word(((high & 0xFF) << 8) | (low & 0xFF))
