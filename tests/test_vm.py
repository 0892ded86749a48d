from __future__ import annotations

import pytest

from stacklite.api import run_source
from stacklite.bytecode import INT64_MAX, INT64_MIN, Instruction, OpKind, Program
from stacklite.errors import StackUnderflowError
from stacklite.vm import Simulator, format_dump, simulate


def test_push_dump():
    assert run_source(src="42 dump") == ["42"]


def test_sub_order():
    program = Program.of(
        [Instruction.push(10), Instruction.push(3), Instruction(OpKind.SUB), Instruction(OpKind.DUMP)]
    )
    assert simulate(program) == ["7"]


def test_add():
    assert run_source(src="34 35 + dump") == ["69"]


def test_equal():
    assert run_source(src="5 5 ?= dump") == ["1"]
    assert run_source(src="5 6 ?= dump") == ["0"]


def test_dump_does_not_pop():
    sim = Simulator()
    sim.run(Program.of([Instruction.push(1), Instruction.push(2), Instruction(OpKind.DUMP)]))
    assert sim.stack == [1, 2]
    assert run_source(src="1 dump dump") == ["1", "1"]


def test_write_callback_sees_each_line_in_order():
    seen: list[str] = []
    out = run_source(src="1 dump 2 + dump 3 - dump", write=seen.append)
    assert seen == out == ["1", "3", "0"]


def test_arithmetic_wraps():
    sim = Simulator()
    sim.run(Program.of([Instruction.push(INT64_MAX), Instruction.push(1), Instruction(OpKind.ADD)]))
    assert sim.stack == [INT64_MIN]
    sim = Simulator()
    sim.run(Program.of([Instruction.push(INT64_MIN), Instruction.push(1), Instruction(OpKind.SUB)]))
    assert sim.stack == [INT64_MAX]


def test_negative_dump_matches_native_unsigned_print():
    assert format_dump(-1) == "18446744073709551615"
    assert run_source(src="3 5 - dump") == ["18446744073709551614"]
    assert run_source(src="0 dump") == ["0"]


@pytest.mark.parametrize(
    "src,kind,needed,available",
    [
        ("+", "add", 2, 0),
        ("1 -", "sub", 2, 1),
        ("1 ?=", "equal", 2, 1),
        ("dump", "dump", 1, 0),
    ],
)
def test_underflow(src: str, kind: str, needed: int, available: int):
    with pytest.raises(StackUnderflowError) as exc:
        run_source(src=src)
    assert exc.value.kind == kind
    assert exc.value.needed == needed
    assert exc.value.available == available


def test_underflow_stops_before_further_output():
    seen: list[str] = []
    with pytest.raises(StackUnderflowError) as exc:
        run_source(src="1 dump\n+ dump", write=seen.append)
    assert seen == ["1"]
    assert exc.value.line == 2
    assert exc.value.ip == 2
    assert "line: 2" in str(exc.value)


def test_underflow_leaves_stack_untouched():
    sim = Simulator()
    with pytest.raises(StackUnderflowError):
        sim.run(Program.of([Instruction.push(9), Instruction(OpKind.ADD)]))
    assert sim.stack == [9]


def test_program_is_not_mutated():
    program = Program.of([Instruction.push(1), Instruction.push(2), Instruction(OpKind.ADD)])
    before = program.instructions
    simulate(program)
    simulate(program)
    assert program.instructions is before


def test_push_operand_reaches_stack_unchanged():
    sim = Simulator()
    sim.run(Program.of([Instruction.push(INT64_MIN), Instruction.push(0), Instruction.push(INT64_MAX)]))
    assert sim.stack == [INT64_MIN, 0, INT64_MAX]
