"""Run pipeline data types (pure data, no business logic)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ProcessState(Enum):
    READY = "ready"
    RUNNING = "running"
    HALTED = "halted"
    FAILED = "failed"


@dataclass(frozen=True)
class VMConfig:
    """Groups process execution configuration."""

    max_steps: int | None = None
    verbose: bool = False


@dataclass
class ExecutionStats:
    """Returned execution metrics from Process.run."""

    steps: int = 0
    halted: bool = False
    step_limit_reached: bool = False


@dataclass
class PipelineStats:
    """Timing and size statistics for each pipeline stage."""

    ast_kind: str = ""

    # Stage timings (seconds)
    compile_time: float = 0.0
    execution_time: float = 0.0
    total_time: float = 0.0

    # Output sizes
    instruction_count: int = 0
    register_count: int = 0

    # Execution stats
    execution_steps: int = 0
    final_variable_count: int = 0

    def report(self) -> str:
        lines = [
            "═══ Pipeline Statistics ═══",
            f"  Program: {self.ast_kind} node",
            "",
            f"  {'Stage':<20} {'Time':>10}  {'Output':>30}",
            f"  {'─' * 20} {'─' * 10}  {'─' * 30}",
        ]

        stages = [
            (
                "Generate bytecode",
                self.compile_time,
                f"{self.instruction_count} instructions, {self.register_count} regs",
            ),
            (
                "Execute (process)",
                self.execution_time,
                f"{self.execution_steps} steps",
            ),
        ]
        for name, t, output in stages:
            time_str = f"{t * 1000:>8.1f}ms"
            lines.append(f"  {name:<20} {time_str:>10}  {output:>30}")

        lines.append(f"  {'─' * 20} {'─' * 10}  {'─' * 30}")
        lines.append(f"  {'Total':<20} {self.total_time * 1000:>8.1f}ms")
        lines.append("")
        lines.append(f"  Final state: {self.final_variable_count} variables")
        return "\n".join(lines)
