"""Trace data types for step-by-step execution replay."""

from __future__ import annotations

from dataclasses import dataclass, field

from .bytecode import Instruction
from .run_types import ExecutionStats
from .value import Value


@dataclass(frozen=True)
class ProcessSnapshot:
    """Copy of a process's mutable state at one point in time."""

    registers: list[Value] = field(default_factory=list)
    variables: dict[str, Value] = field(default_factory=dict)


@dataclass(frozen=True)
class TraceStep:
    """A single step in the execution trace.

    Captures the instruction executed, where it sat in the program, and a
    snapshot of the process after it ran.
    """

    step_index: int
    instruction_index: int
    instruction: Instruction
    snapshot: ProcessSnapshot


@dataclass(frozen=True)
class ExecutionTrace:
    """Complete trace of an execution run.

    Contains the state before the first instruction and a TraceStep for
    each instruction that completed.
    """

    steps: list[TraceStep] = field(default_factory=list)
    stats: ExecutionStats = field(default_factory=ExecutionStats)
    initial_state: ProcessSnapshot = field(default_factory=ProcessSnapshot)
