"""Fetch/decode/execute loop over a private register file."""

from __future__ import annotations

import copy
import logging
import sys
from typing import Callable, Sequence, TextIO

from .bytecode import Instruction, Opcode, Register
from .errors import BadAddress, DivisionByZero, TypeMismatch, UndefinedVariable, VMError
from .generator import CompiledProgram
from .run_types import ExecutionStats, ProcessState, VMConfig
from .trace_types import ExecutionTrace, ProcessSnapshot, TraceStep
from .value import EMPTY, Value, format_number
from . import constants

logger = logging.getLogger(__name__)

# Handlers return the index of the next instruction, or None to fall through.
_Handler = Callable[[Instruction], "int | None"]


class Process:
    """An isolated execution context.

    Owns one register file, one variable store, one loaded program and one
    instruction pointer. The register file is replaced on every program
    load; the variable store lives as long as the process does.
    """

    def __init__(self, pid: int, output: TextIO | None = None):
        self._pid = pid
        self._output = output
        self.registers: list[Value] = []
        self.variables: dict[str, Value] = {}
        self._program: tuple[Instruction, ...] = ()
        self.ip: int = 0
        self.halted: bool = False
        self.state: ProcessState = ProcessState.READY
        self._DISPATCH: dict[Opcode, _Handler] = {
            Opcode.HALT: self._exec_halt,
            Opcode.LOAD: self._exec_load,
            Opcode.STORE: self._exec_store,
            Opcode.LOAD_VAR: self._exec_load_var,
            Opcode.ADD: self._exec_add,
            Opcode.SUB: self._exec_numeric,
            Opcode.MUL: self._exec_numeric,
            Opcode.DIV: self._exec_div,
            Opcode.JMP: self._exec_jmp,
            Opcode.JMP_FALSE: self._exec_jmp_false,
            Opcode.DBG_PRINT_REG: self._exec_dbg_print_reg,
            Opcode.DBG_PRINT_VAR: self._exec_dbg_print_var,
        }

    @property
    def pid(self) -> int:
        return self._pid

    @property
    def program(self) -> tuple[Instruction, ...]:
        return self._program

    @property
    def output(self) -> TextIO:
        return self._output if self._output is not None else sys.stdout

    # ── loading ──────────────────────────────────────────────────

    def load_program(self, program: Sequence[Instruction], register_count: int):
        """Replace the program and register file; variables are kept."""
        if register_count < 0:
            raise ValueError(f"Register count must be non-negative: {register_count}")
        self._program = tuple(program)
        self.registers = [EMPTY] * register_count
        self.ip = 0
        self.halted = False
        self.state = ProcessState.READY
        logger.info(
            "Process %d loaded %d instructions, %d registers",
            self._pid,
            len(self._program),
            register_count,
        )

    def load(self, compiled: CompiledProgram):
        self.load_program(compiled.instructions, compiled.register_count)

    # ── execution ────────────────────────────────────────────────

    def run(self, config: VMConfig = VMConfig()) -> ExecutionStats:
        """Execute the loaded program from instruction 0.

        Blocks until the program halts, runs off its end, or an
        instruction fails; a failing instruction's VMError propagates
        with every earlier effect left in place.
        """
        return self._run_loop(config, on_step=None)

    def run_traced(self, config: VMConfig = VMConfig()) -> ExecutionTrace:
        """Like run(), but snapshot the process after every instruction.

        Raises the same VMError as run(); the partial trace is lost in
        that case.
        """
        initial_state = self.snapshot()
        steps: list[TraceStep] = []

        def record(index: int, instruction: Instruction):
            steps.append(
                TraceStep(
                    step_index=len(steps),
                    instruction_index=index,
                    instruction=instruction,
                    snapshot=self.snapshot(),
                )
            )

        stats = self._run_loop(config, on_step=record)
        return ExecutionTrace(steps=steps, stats=stats, initial_state=initial_state)

    def _run_loop(
        self,
        config: VMConfig,
        on_step: Callable[[int, Instruction], None] | None,
    ) -> ExecutionStats:
        self.ip = 0
        self.state = ProcessState.RUNNING
        stats = ExecutionStats()

        while self.ip < len(self._program) and not self.halted:
            if config.max_steps is not None and stats.steps >= config.max_steps:
                logger.warning(
                    "Process %d stopped after %d steps (max_steps)",
                    self._pid,
                    stats.steps,
                )
                stats.step_limit_reached = True
                return stats

            index = self.ip
            instruction = self._program[index]
            if config.verbose:
                print(f"[step {stats.steps}] {index}:  {instruction}", file=self.output)
            logger.debug("Process %d [%d] %s", self._pid, index, instruction)

            try:
                next_ip = self._DISPATCH[instruction.opcode](instruction)
            except VMError:
                self.state = ProcessState.FAILED
                logger.info("Process %d failed at instruction %d", self._pid, index)
                raise

            stats.steps += 1
            self.ip = index + 1 if next_ip is None else next_ip
            if on_step is not None:
                on_step(index, instruction)

        self.state = ProcessState.HALTED
        stats.halted = self.halted
        logger.info("Process %d finished after %d steps", self._pid, stats.steps)
        return stats

    # ── register access ──────────────────────────────────────────

    def _read(self, reg: Register) -> Value:
        if not 0 <= reg.index < len(self.registers):
            raise BadAddress(self._pid)
        return self.registers[reg.index]

    def _write(self, reg: Register, value: Value):
        if not 0 <= reg.index < len(self.registers):
            raise BadAddress(self._pid)
        self.registers[reg.index] = value

    def _lookup(self, name: str) -> Value:
        if name not in self.variables:
            raise UndefinedVariable(self._pid, name)
        return self.variables[name]

    # ── instruction handlers ─────────────────────────────────────

    def _exec_halt(self, inst: Instruction) -> int | None:
        self.halted = True
        return None

    def _exec_load(self, inst: Instruction) -> int | None:
        self._write(inst.result_reg, inst.operands[0])
        return None

    def _exec_store(self, inst: Instruction) -> int | None:
        name, reg = inst.operands
        self.variables[name] = self._read(reg)
        return None

    def _exec_load_var(self, inst: Instruction) -> int | None:
        self._write(inst.result_reg, self._lookup(inst.operands[0]))
        return None

    def _exec_add(self, inst: Instruction) -> int | None:
        lhs, rhs = (self._read(r) for r in inst.operands)
        if lhs.is_number and rhs.is_number:
            result = Value.number(lhs.payload + rhs.payload)
        elif lhs.is_text and rhs.is_text:
            result = Value.text(lhs.payload + rhs.payload)
        elif lhs.is_text and rhs.is_number:
            result = Value.text(lhs.payload + format_number(rhs.payload))
        elif lhs.is_number and rhs.is_text:
            result = Value.text(rhs.payload + format_number(lhs.payload))
        else:
            raise TypeMismatch(self._pid)
        self._write(inst.result_reg, result)
        return None

    def _numeric_operands(self, inst: Instruction) -> tuple[float, float]:
        lhs, rhs = (self._read(r) for r in inst.operands)
        if not (lhs.is_number and rhs.is_number):
            raise TypeMismatch(self._pid)
        return lhs.payload, rhs.payload

    def _exec_numeric(self, inst: Instruction) -> int | None:
        a, b = self._numeric_operands(inst)
        result = a - b if inst.opcode == Opcode.SUB else a * b
        self._write(inst.result_reg, Value.number(result))
        return None

    def _exec_div(self, inst: Instruction) -> int | None:
        a, b = self._numeric_operands(inst)
        if b == 0.0:
            raise DivisionByZero(self._pid)
        self._write(inst.result_reg, Value.number(a / b))
        return None

    def _jump_target(self, inst: Instruction) -> int:
        if inst.target is None or inst.target < 0:
            raise BadAddress(self._pid)
        return inst.target

    def _exec_jmp(self, inst: Instruction) -> int | None:
        return self._jump_target(inst)

    def _exec_jmp_false(self, inst: Instruction) -> int | None:
        if self._read(inst.operands[0]).is_truthy():
            return None
        return self._jump_target(inst)

    def _exec_dbg_print_reg(self, inst: Instruction) -> int | None:
        reg = inst.operands[0]
        value = self._read(reg)
        print(f"{self._tag} r{reg.index}: {value}", file=self.output)
        return None

    def _exec_dbg_print_var(self, inst: Instruction) -> int | None:
        name = inst.operands[0]
        print(f"{self._tag} {name}: {self._lookup(name)}", file=self.output)
        return None

    # ── inspection ───────────────────────────────────────────────

    @property
    def _tag(self) -> str:
        return constants.PROCESS_TAG_TEMPLATE.format(pid=self._pid)

    def snapshot(self) -> ProcessSnapshot:
        return ProcessSnapshot(
            registers=copy.deepcopy(self.registers),
            variables=copy.deepcopy(self.variables),
        )

    def variables_as_python(self) -> dict[str, float | bool | str | None]:
        return {name: value.to_python() for name, value in self.variables.items()}

    def dump(self) -> str:
        """Register file rendered one value per line."""
        lines = [f"[Process Stack #{self._pid}]"]
        lines.extend(f"\t{value}" for value in self.registers)
        return "\n".join(lines)
