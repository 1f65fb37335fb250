"""Register-machine bytecode generator and VM package."""

from .run import run, run_traced  # noqa: F401
from .api import (  # noqa: F401
    compile_ast,
    dump_bytecode,
    bytecode_stats,
)
