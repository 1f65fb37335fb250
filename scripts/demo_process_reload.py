"""Demo: variables persist across program reloads on one process, registers do not."""

import json

from regvm.generator import compile_ast
from regvm.syntax import parse_ast
from regvm.vm import ByteCodeVM

FIRST = {"kind": "assignment", "name": "x", "value": {"kind": "number", "value": 5}}

SECOND = {
    "kind": "if",
    "condition": {
        "kind": "binary_op",
        "operator": "-",
        "left": {"kind": "variable", "name": "x"},
        "right": {"kind": "number", "value": 5},
    },
    "then_branch": {"kind": "assignment", "name": "result", "value": {"kind": "number", "value": 1}},
    "else_branch": {"kind": "assignment", "name": "result", "value": {"kind": "number", "value": 0}},
}


def _load_and_run(process, tree):
    program = compile_ast(parse_ast(tree))
    print(program)
    process.load(program)
    process.run()
    print(process.dump())
    print(json.dumps(process.variables_as_python(), indent=2))
    print()


def main():
    vm = ByteCodeVM()
    process = vm.spawn()

    print("=" * 60)
    print("PROGRAM 1: x := 5")
    print("=" * 60)
    _load_and_run(process, FIRST)

    print("=" * 60)
    print("PROGRAM 2: if (x - 5) { result := 1 } else { result := 0 }")
    print("=" * 60)
    _load_and_run(process, SECOND)


if __name__ == "__main__":
    main()
