from __future__ import annotations

import pytest

from stacklite.api import compile_source
from stacklite.bytecode import Instruction, OpKind
from stacklite.codegen import DUMP_ROUTINE, EPILOGUE, emit_instruction, generate_nasm, write_nasm
from stacklite.errors import ResourceError
from stacklite.parser import parse_program


def _code_lines(asm: str) -> list[str]:
    body = asm.split("_start:\n", 1)[1]
    return [ln.strip() for ln in body.splitlines() if ln.strip() and not ln.strip().startswith(";")]


def test_layout_order():
    asm = compile_source(src="1 dump")
    routine_at = asm.index(DUMP_ROUTINE)
    entry_at = asm.index("global _start\n_start:\n")
    push_at = asm.index("push 1")
    assert routine_at < entry_at < push_at
    assert asm.endswith(EPILOGUE)
    assert asm.count("dump:\n") == 1


def test_routine_is_program_independent():
    empty = generate_nasm(parse_program(""))
    big = compile_source(src="1 2 + dump 3 3 ?= dump")
    assert DUMP_ROUTINE in empty
    assert empty.count(".L2") == big.count(".L2") == 2


def test_empty_program_is_entry_plus_exit():
    assert _code_lines(generate_nasm(parse_program(""))) == ["mov rax, 60", "mov rdi, 0", "syscall"]


def test_blocks_follow_program_order():
    lines = _code_lines(compile_source(src="10 3 - dump"))
    assert lines == [
        "push 10",
        "push 3",
        "pop rax",
        "pop rbx",
        "sub rbx, rax",
        "push rbx",
        "pop rdi",
        "call dump",
        "mov rax, 60",
        "mov rdi, 0",
        "syscall",
    ]


def test_equal_is_branchless():
    lines = emit_instruction(Instruction(OpKind.EQUAL))
    assert "cmove rcx, rdx" in lines
    assert not any(ln.split()[0].startswith("j") for ln in lines)


def test_add_template():
    assert emit_instruction(Instruction(OpKind.ADD)) == ["pop rax", "pop rbx", "add rbx, rax", "push rbx"]


@pytest.mark.parametrize(
    "value,expected",
    [
        (0, ["push 0"]),
        (-5, ["push -5"]),
        (2**31 - 1, ["push 2147483647"]),
        (-(2**31), ["push -2147483648"]),
        (2**31, ["mov rax, 2147483648", "push rax"]),
        (-(2**63), ["mov rax, -9223372036854775808", "push rax"]),
    ],
)
def test_push_immediates(value: int, expected: list[str]):
    assert emit_instruction(Instruction.push(value)) == expected


def test_no_labels_in_instruction_blocks():
    lines = _code_lines(compile_source(src="1 1 ?= dump 2 2 ?= dump"))
    assert not any(ln.endswith(":") for ln in lines)


def test_write_nasm(tmp_path):
    out = write_nasm(parse_program("1 dump"), tmp_path / "prog.s")
    assert out.read_text(encoding="utf-8") == compile_source(src="1 dump")


def test_write_nasm_reports_io_failure(tmp_path):
    with pytest.raises(ResourceError) as exc:
        write_nasm(parse_program("1"), tmp_path / "missing" / "prog.s")
    assert "prog.s" in str(exc.value)
