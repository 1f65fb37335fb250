"""Orchestrator — run() entry point."""

from __future__ import annotations

import logging
import time
from typing import TextIO

from .generator import BytecodeGenerator
from .process import Process
from .run_types import PipelineStats, VMConfig
from .syntax import ASTNode
from .trace_types import ExecutionTrace
from .vm import ByteCodeVM

logger = logging.getLogger(__name__)


def _compile(node: ASTNode, debug_print: bool) -> tuple[BytecodeGenerator, float]:
    t0 = time.perf_counter()
    generator = BytecodeGenerator()
    generator.generate(node)
    if debug_print:
        for name in generator.assigned_variables:
            generator.emit_debug_print_variable(name)
    return generator, time.perf_counter() - t0


def run(
    node: ASTNode,
    config: VMConfig = VMConfig(),
    vm: ByteCodeVM | None = None,
    output: TextIO | None = None,
    debug_print: bool = False,
) -> Process:
    """End-to-end: generate → spawn → load → execute.

    Args:
        node: Root of the program tree.
        config: Execution configuration (max_steps, verbose).
        vm: VM to spawn the process in; a fresh one when omitted.
        output: Diagnostic stream for debug prints (default stdout).
        debug_print: Append a debug print of every assigned variable.

    Returns:
        The process that ran the program. Its ``variables`` hold the
        result. A VMError from execution propagates to the caller.
    """
    pipeline_start = time.perf_counter()
    stats = PipelineStats(ast_kind=node.kind)

    generator, stats.compile_time = _compile(node, debug_print)
    program = generator.program()
    stats.instruction_count = len(program)
    stats.register_count = program.register_count

    host = vm if vm is not None else ByteCodeVM(output=output)
    process = host.spawn()
    process.load(program)

    t0 = time.perf_counter()
    exec_stats = process.run(config)
    stats.execution_time = time.perf_counter() - t0
    stats.execution_steps = exec_stats.steps
    stats.final_variable_count = len(process.variables)
    stats.total_time = time.perf_counter() - pipeline_start

    logger.info(
        "Process %d ran %d instructions in %.1fms",
        process.pid,
        stats.execution_steps,
        stats.execution_time * 1000,
    )
    if config.verbose:
        print(stats.report(), file=process.output)

    return process


def run_traced(
    node: ASTNode,
    config: VMConfig = VMConfig(),
    vm: ByteCodeVM | None = None,
) -> tuple[Process, ExecutionTrace]:
    """Identical to run() but records a snapshot after every instruction."""
    generator, _ = _compile(node, debug_print=False)
    host = vm if vm is not None else ByteCodeVM()
    process = host.spawn()
    process.load(generator.program())
    trace = process.run_traced(config)
    return process, trace
