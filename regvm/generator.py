"""BytecodeGenerator — syntax tree → flat register-machine bytecode."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from .bytecode import Instruction, Opcode, Register
from .syntax import (
    ASTNode,
    Assignment,
    BinaryOp,
    BinaryOperator,
    Block,
    If,
    NumberLiteral,
    StringLiteral,
    Variable,
    While,
)
from .value import Value
from . import constants

logger = logging.getLogger(__name__)

_OPERATOR_OPCODES: dict[BinaryOperator, Opcode] = {
    BinaryOperator.ADD: Opcode.ADD,
    BinaryOperator.SUBTRACT: Opcode.SUB,
    BinaryOperator.MULTIPLY: Opcode.MUL,
    BinaryOperator.DIVIDE: Opcode.DIV,
}


class MonotonicAllocator:
    """Hands out register indices 0, 1, 2, ... and never reuses one."""

    def __init__(self):
        self._next: int = 0

    def allocate(self) -> Register:
        reg = Register(self._next)
        self._next += 1
        return reg

    @property
    def count(self) -> int:
        return self._next


@dataclass(frozen=True)
class CompiledProgram:
    """Generation output: the instruction sequence plus its register count."""

    instructions: tuple[Instruction, ...]
    register_count: int

    def __len__(self) -> int:
        return len(self.instructions)

    def __str__(self) -> str:
        return "\n".join(
            f"{i:4d}  {inst}" for i, inst in enumerate(self.instructions)
        )


class BytecodeGenerator:
    """Lowers one syntax tree into instructions by a single recursive walk.

    Every value-producing node gets a fresh register from the allocator.
    Forward jumps are emitted with ``PLACEHOLDER_TARGET`` and rewritten in
    place once the landing index is known.
    """

    def __init__(self, allocator: MonotonicAllocator | None = None):
        self._allocator = allocator or MonotonicAllocator()
        self._instructions: list[Instruction] = []
        self.variables: dict[str, Register] = {}
        self._DISPATCH: dict[type, Callable[[ASTNode], Register]] = {
            NumberLiteral: self._lower_number,
            StringLiteral: self._lower_string,
            BinaryOp: self._lower_binop,
            Variable: self._lower_variable,
            Assignment: self._lower_assignment,
            Block: self._lower_block,
            If: self._lower_if,
            While: self._lower_while,
        }

    # ── helpers ──────────────────────────────────────────────────

    def _fresh_reg(self) -> Register:
        return self._allocator.allocate()

    def _emit(self, instruction: Instruction) -> int:
        self._instructions.append(instruction)
        return len(self._instructions) - 1

    def _patch(self, index: int, target: int):
        self._instructions[index] = self._instructions[index].with_target(target)

    @property
    def _here(self) -> int:
        return len(self._instructions)

    @property
    def register_count(self) -> int:
        return self._allocator.count

    @property
    def instructions(self) -> tuple[Instruction, ...]:
        return tuple(self._instructions)

    @property
    def assigned_variables(self) -> list[str]:
        """Names stored to so far, in first-assignment order."""
        return list(self.variables)

    # ── entry point ──────────────────────────────────────────────

    def generate(self, node: ASTNode) -> Register:
        """Append the code for *node*, return the register holding its result."""
        handler = self._DISPATCH.get(type(node))
        if handler is None:
            raise ValueError(f"Unsupported syntax node: {type(node).__name__}")
        return handler(node)

    def emit_debug_print_variable(self, name: str):
        self._emit(Instruction.debug_print_var(name))

    def emit_debug_print_register(self, reg: Register):
        self._emit(Instruction.debug_print_reg(reg))

    def emit_halt(self):
        self._emit(Instruction.halt())

    def program(self) -> CompiledProgram:
        """Freeze the generated code for loading into a process."""
        for i, inst in enumerate(self._instructions):
            if inst.is_jump and inst.target == constants.PLACEHOLDER_TARGET:
                raise ValueError(f"Unpatched jump target at instruction {i}: {inst}")
        program = CompiledProgram(
            instructions=tuple(self._instructions),
            register_count=self.register_count,
        )
        logger.info(
            "Generated %d instructions using %d registers",
            len(program),
            program.register_count,
        )
        return program

    # ── expression lowerers ──────────────────────────────────────

    def _lower_number(self, node: NumberLiteral) -> Register:
        reg = self._fresh_reg()
        self._emit(Instruction.load(reg, Value.number(node.value)))
        return reg

    def _lower_string(self, node: StringLiteral) -> Register:
        reg = self._fresh_reg()
        self._emit(Instruction.load(reg, Value.text(node.value)))
        return reg

    def _lower_binop(self, node: BinaryOp) -> Register:
        lhs_reg = self.generate(node.left)
        rhs_reg = self.generate(node.right)
        reg = self._fresh_reg()
        self._emit(
            Instruction.arithmetic(
                _OPERATOR_OPCODES[node.operator], reg, lhs_reg, rhs_reg
            )
        )
        return reg

    def _lower_variable(self, node: Variable) -> Register:
        reg = self._fresh_reg()
        self._emit(Instruction.load_var(reg, node.name))
        return reg

    # ── statement lowerers ───────────────────────────────────────

    def _lower_assignment(self, node: Assignment) -> Register:
        value_reg = self.generate(node.value)
        self._emit(Instruction.store(node.name, value_reg))
        self.variables[node.name] = value_reg
        return value_reg

    def _lower_block(self, node: Block) -> Register:
        if not node.statements:
            return self._fresh_reg()
        last_reg = None
        for stmt in node.statements:
            last_reg = self.generate(stmt)
        return last_reg

    def _lower_if(self, node: If) -> Register:
        cond_reg = self.generate(node.condition)
        branch_idx = self._emit(
            Instruction.jump_if_false(cond_reg, constants.PLACEHOLDER_TARGET)
        )
        self.generate(node.then_branch)

        if node.else_branch is not None:
            skip_idx = self._emit(Instruction.jump(constants.PLACEHOLDER_TARGET))
            self._patch(branch_idx, skip_idx + 1)
            self.generate(node.else_branch)
            self._patch(skip_idx, self._here)
        else:
            self._patch(branch_idx, self._here)

        return self._fresh_reg()

    def _lower_while(self, node: While) -> Register:
        loop_start = self._here
        cond_reg = self.generate(node.condition)
        exit_idx = self._emit(
            Instruction.jump_if_false(cond_reg, constants.PLACEHOLDER_TARGET)
        )
        self.generate(node.body)
        self._emit(Instruction.jump(loop_start))
        self._patch(exit_idx, self._here)
        return self._fresh_reg()


def compile_ast(node: ASTNode) -> CompiledProgram:
    """Generate and freeze the code for a whole program tree."""
    generator = BytecodeGenerator()
    generator.generate(node)
    return generator.program()
