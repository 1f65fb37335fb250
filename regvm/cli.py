"""Command-line entry point: run a JSON-encoded program tree."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from .api import bytecode_stats, dump_bytecode
from .errors import VMError
from .run import run
from .run_types import VMConfig
from .syntax import load_ast_json

logger = logging.getLogger(__name__)

DEMO_PROGRAM = """\
{"kind": "block", "statements": [
  {"kind": "assignment", "name": "x", "value": {"kind": "number", "value": 0}},
  {"kind": "while",
   "condition": {"kind": "binary_op", "operator": "-",
                 "left": {"kind": "number", "value": 5},
                 "right": {"kind": "variable", "name": "x"}},
   "body": {"kind": "block", "statements": [
     {"kind": "assignment", "name": "x",
      "value": {"kind": "binary_op", "operator": "+",
                "left": {"kind": "variable", "name": "x"},
                "right": {"kind": "number", "value": 1}}}
   ]}},
  {"kind": "if",
   "condition": {"kind": "binary_op", "operator": "-",
                 "left": {"kind": "variable", "name": "x"},
                 "right": {"kind": "number", "value": 5}},
   "then_branch": {"kind": "assignment", "name": "result",
                   "value": {"kind": "number", "value": 1}},
   "else_branch": {"kind": "assignment", "name": "result",
                   "value": {"kind": "number", "value": 0}}},
  {"kind": "assignment", "name": "hello", "value": {"kind": "string", "value": "hello "}},
  {"kind": "assignment", "name": "world", "value": {"kind": "number", "value": 38}},
  {"kind": "assignment", "name": "str",
   "value": {"kind": "binary_op", "operator": "+",
             "left": {"kind": "variable", "name": "hello"},
             "right": {"kind": "variable", "name": "world"}}}
]}
"""


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="regvm", description="Register-machine bytecode VM"
    )
    parser.add_argument("file", nargs="?", help="JSON program tree to run")
    parser.add_argument(
        "--max-steps",
        "-n",
        type=int,
        default=None,
        help="Stop after this many instructions (default: unbounded)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Print each executed instruction"
    )
    parser.add_argument(
        "--bytecode-only",
        action="store_true",
        help="Only print the generated bytecode (no execution)",
    )
    parser.add_argument(
        "--stats", action="store_true", help="Only print opcode counts (no execution)"
    )
    parser.add_argument(
        "--debug-print",
        action="store_true",
        help="Debug-print every assigned variable after the program",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s: %(message)s",
    )

    if not args.file:
        print("No file provided. Using built-in demo.\n")
        text = DEMO_PROGRAM
    else:
        with open(args.file) as f:
            text = f.read()

    program = load_ast_json(text)

    if args.bytecode_only:
        print("═══ Bytecode ═══")
        print(dump_bytecode(program))
        return 0

    if args.stats:
        print(json.dumps(bytecode_stats(program), indent=2, sort_keys=True))
        return 0

    config = VMConfig(max_steps=args.max_steps, verbose=args.verbose)
    try:
        process = run(program, config=config, debug_print=args.debug_print)
    except VMError as err:
        print(err, file=sys.stderr)
        return 1

    print("\n═══ Final Variables ═══")
    print(json.dumps(process.variables_as_python(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
