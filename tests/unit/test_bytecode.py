"""Tests for the Instruction record and Register handle."""

import pytest
from pydantic import ValidationError

from regvm.bytecode import Instruction, Opcode, Register
from regvm.value import Value


class TestRegister:
    def test_str_uses_percent_prefix(self):
        assert str(Register(4)) == "%4"

    def test_registers_are_hashable_and_comparable(self):
        assert Register(1) == Register(1)
        assert len({Register(1), Register(1), Register(2)}) == 2


class TestInstruction:
    def test_arithmetic_rejects_non_arithmetic_opcode(self):
        with pytest.raises(ValueError, match="Not an arithmetic opcode"):
            Instruction.arithmetic(Opcode.JMP, Register(0), Register(1), Register(2))

    def test_with_target_returns_new_instruction(self):
        original = Instruction.jump_if_false(Register(0), -1)
        patched = original.with_target(9)
        assert patched.target == 9
        assert patched.opcode == Opcode.JMP_FALSE
        assert patched.operands == (Register(0),)
        assert original.target == -1

    def test_instruction_is_frozen(self):
        inst = Instruction.jump(3)
        with pytest.raises(ValidationError):
            inst.target = 4

    def test_is_jump(self):
        assert Instruction.jump(0).is_jump
        assert Instruction.jump_if_false(Register(0), 0).is_jump
        assert not Instruction.halt().is_jump

    @pytest.mark.parametrize(
        "inst,text",
        [
            (Instruction.halt(), "halt"),
            (Instruction.load(Register(0), Value.number(5)), "%0 = load 5.0"),
            (Instruction.load(Register(1), Value.text("hi")), "%1 = load 'hi'"),
            (Instruction.store("x", Register(2)), "store x %2"),
            (Instruction.load_var(Register(3), "y"), "%3 = load_var y"),
            (
                Instruction.arithmetic(Opcode.ADD, Register(2), Register(0), Register(1)),
                "%2 = add %0 %1",
            ),
            (Instruction.jump(7), "jmp -> 7"),
            (Instruction.jump_if_false(Register(0), 4), "jmp_false %0 -> 4"),
            (Instruction.debug_print_var("x"), "dbg_print_var x"),
        ],
    )
    def test_str(self, inst, text):
        assert str(inst) == text
