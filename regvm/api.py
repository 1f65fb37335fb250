"""Composable API functions for the generate/inspect/execute pipelines.

Each function corresponds to a CLI workflow (--bytecode-only, --stats)
but is callable programmatically without argparse.
"""

from __future__ import annotations

import logging

from .bytecode_stats import count_opcodes
from .generator import CompiledProgram, compile_ast
from .syntax import ASTNode

logger = logging.getLogger(__name__)


def dump_bytecode(node: ASTNode) -> str:
    """Generate bytecode for *node* and return a human-readable listing.

    Args:
        node: Root of the program tree.

    Returns:
        A multi-line string, one numbered instruction per line.
    """
    return str(compile_ast(node))


def bytecode_stats(node: ASTNode) -> dict[str, int]:
    """Generate bytecode for *node* and count its opcodes.

    Args:
        node: Root of the program tree.

    Returns:
        A dict mapping opcode names to occurrence counts.
    """
    program = compile_ast(node)
    logger.info("Computing opcode stats over %d instructions", len(program))
    return count_opcodes(program.instructions)


__all__ = ["CompiledProgram", "compile_ast", "dump_bytecode", "bytecode_stats"]
