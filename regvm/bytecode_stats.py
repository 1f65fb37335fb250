"""Opcode frequency counts over generated bytecode."""

from __future__ import annotations

from collections import Counter
from typing import Iterable

from regvm.bytecode import Instruction


def count_opcodes(instructions: Iterable[Instruction]) -> dict[str, int]:
    """Tally how often each opcode occurs in a compiled program.

    Jumps patched during generation count under their own opcode, so a
    program with ``n`` loops and ``m`` if/else statements reports
    ``JMP == n + m``. An empty program yields ``{}``.
    """
    return dict(Counter(inst.opcode.value for inst in instructions))
