"""Tests for run_traced: traced execution with per-step snapshots."""

from regvm.bytecode import Instruction, Register
from regvm.process import Process
from regvm.run import run_traced
from regvm.run_types import VMConfig
from regvm.syntax import Assignment, Block, NumberLiteral, Variable, While
from regvm.trace_types import ExecutionTrace, TraceStep
from regvm.value import EMPTY, Value


def _traced(*instructions, registers=2, config=VMConfig()):
    process = Process(0)
    process.load_program(list(instructions), registers)
    return process, process.run_traced(config)


class TestRunTraced:
    def test_trace_length_matches_executed_steps(self):
        _, trace = _traced(
            Instruction.load(Register(0), Value.number(1)),
            Instruction.store("x", Register(0)),
        )
        assert isinstance(trace, ExecutionTrace)
        assert len(trace.steps) == 2
        assert trace.stats.steps == 2
        assert all(isinstance(s, TraceStep) for s in trace.steps)

    def test_initial_state_precedes_first_instruction(self):
        _, trace = _traced(Instruction.load(Register(0), Value.number(1)))
        assert trace.initial_state.registers == [EMPTY, EMPTY]
        assert trace.steps[0].snapshot.registers[0] == Value.number(1)

    def test_each_snapshot_is_independent(self):
        process, trace = _traced(
            Instruction.load(Register(0), Value.number(1)),
            Instruction.store("x", Register(0)),
            Instruction.store("y", Register(0)),
        )
        trace.steps[1].snapshot.variables["INJECTED"] = Value.number(0)
        assert "INJECTED" not in trace.steps[2].snapshot.variables
        assert "INJECTED" not in process.variables

    def test_instruction_index_follows_jumps(self):
        _, trace = _traced(
            Instruction.jump(2),
            Instruction.halt(),
            Instruction.load(Register(0), Value.number(1)),
        )
        assert [s.instruction_index for s in trace.steps] == [0, 2]
        assert trace.steps[0].instruction == Instruction.jump(2)

    def test_trace_respects_max_steps(self):
        _, trace = _traced(Instruction.jump(0), config=VMConfig(max_steps=4))
        assert len(trace.steps) == 4
        assert trace.stats.step_limit_reached is True

    def test_run_traced_pipeline(self):
        tree = Block(
            statements=[
                Assignment(name="x", value=NumberLiteral(value=0)),
                While(condition=Variable(name="x"), body=Block()),
            ]
        )
        process, trace = run_traced(tree)
        assert process.variables["x"] == Value.number(0)
        assert trace.steps[-1].snapshot.variables == {"x": Value.number(0)}
