"""Bytecode Design — register-machine instruction set."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

from .value import Value
from . import constants


class Opcode(str, Enum):
    HALT = "HALT"
    # Register / variable transfer
    LOAD = "LOAD"
    STORE = "STORE"
    LOAD_VAR = "LOAD_VAR"
    # Arithmetic
    ADD = "ADD"
    SUB = "SUB"
    MUL = "MUL"
    DIV = "DIV"
    # Control flow
    JMP = "JMP"
    JMP_FALSE = "JMP_FALSE"
    # Diagnostics
    DBG_PRINT_REG = "DBG_PRINT_REG"
    DBG_PRINT_VAR = "DBG_PRINT_VAR"


ARITHMETIC_OPCODES: frozenset[Opcode] = frozenset(
    {Opcode.ADD, Opcode.SUB, Opcode.MUL, Opcode.DIV}
)
JUMP_OPCODES: frozenset[Opcode] = frozenset({Opcode.JMP, Opcode.JMP_FALSE})


@dataclass(frozen=True)
class Register:
    """Handle for one slot of a process's register file."""

    index: int

    def __str__(self) -> str:
        return f"{constants.REGISTER_PREFIX}{self.index}"


class Instruction(BaseModel):
    """One bytecode instruction.

    Operand layout by opcode:

    - LOAD:          result_reg ← operands[0] (a Value)
    - STORE:         operands = [name, source Register]
    - LOAD_VAR:      result_reg ← variable operands[0]
    - ADD/SUB/MUL/DIV: result_reg ← operands[0] op operands[1]
    - JMP:           target
    - JMP_FALSE:     operands = [test Register], target
    - DBG_PRINT_REG: operands = [Register]
    - DBG_PRINT_VAR: operands = [name]
    """

    model_config = ConfigDict(frozen=True)

    opcode: Opcode
    result_reg: Register | None = None
    operands: tuple[Any, ...] = ()
    target: int | None = None

    # ── constructors ────────────────────────────────────────────

    @classmethod
    def halt(cls) -> Instruction:
        return cls(opcode=Opcode.HALT)

    @classmethod
    def load(cls, reg: Register, value: Value) -> Instruction:
        return cls(opcode=Opcode.LOAD, result_reg=reg, operands=(value,))

    @classmethod
    def store(cls, name: str, reg: Register) -> Instruction:
        return cls(opcode=Opcode.STORE, operands=(name, reg))

    @classmethod
    def load_var(cls, reg: Register, name: str) -> Instruction:
        return cls(opcode=Opcode.LOAD_VAR, result_reg=reg, operands=(name,))

    @classmethod
    def arithmetic(
        cls, opcode: Opcode, dest: Register, lhs: Register, rhs: Register
    ) -> Instruction:
        if opcode not in ARITHMETIC_OPCODES:
            raise ValueError(f"Not an arithmetic opcode: {opcode}")
        return cls(opcode=opcode, result_reg=dest, operands=(lhs, rhs))

    @classmethod
    def jump(cls, target: int) -> Instruction:
        return cls(opcode=Opcode.JMP, target=target)

    @classmethod
    def jump_if_false(cls, reg: Register, target: int) -> Instruction:
        return cls(opcode=Opcode.JMP_FALSE, operands=(reg,), target=target)

    @classmethod
    def debug_print_reg(cls, reg: Register) -> Instruction:
        return cls(opcode=Opcode.DBG_PRINT_REG, operands=(reg,))

    @classmethod
    def debug_print_var(cls, name: str) -> Instruction:
        return cls(opcode=Opcode.DBG_PRINT_VAR, operands=(name,))

    # ── helpers ─────────────────────────────────────────────────

    @property
    def is_jump(self) -> bool:
        return self.opcode in JUMP_OPCODES

    def with_target(self, target: int) -> Instruction:
        """Same instruction kind and operands, different jump target."""
        return self.model_copy(update={"target": target})

    def __str__(self) -> str:
        parts: list[str] = []
        if self.result_reg is not None:
            parts.append(f"{self.result_reg} =")
        parts.append(self.opcode.value.lower())
        for op in self.operands:
            parts.append(repr(op.payload) if isinstance(op, Value) else str(op))
        if self.target is not None:
            parts.append(f"-> {self.target}")
        return " ".join(parts)
