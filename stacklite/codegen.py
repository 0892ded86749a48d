from __future__ import annotations

import logging
from pathlib import Path
from typing import cast

from stacklite.bytecode import Instruction, OpKind, Program
from stacklite.errors import ResourceError

logger = logging.getLogger(__name__)

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

# Prints the unsigned value in rdi followed by a newline to stdout. Digits are
# produced by multiplying with the fixed-point reciprocal of 10 (0xCCCC...CD)
# and written backwards into a 32-byte stack buffer ending in '\n'.
DUMP_ROUTINE = """\
dump:
    mov     r9, -3689348814741910323
    sub     rsp, 40
    mov     BYTE [rsp+31], 10
    lea     rcx, [rsp+30]
.L2:
    mov     rax, rdi
    lea     r8, [rsp+32]
    mul     r9
    mov     rax, rdi
    sub     r8, rcx
    shr     rdx, 3
    lea     rsi, [rdx+rdx*4]
    add     rsi, rsi
    sub     rax, rsi
    add     eax, 48
    mov     BYTE [rcx], al
    mov     rax, rdi
    mov     rdi, rdx
    mov     rdx, rcx
    sub     rcx, 1
    cmp     rax, 9
    ja      .L2
    lea     rax, [rsp+32]
    mov     edi, 1
    sub     rdx, rax
    xor     eax, eax
    lea     rsi, [rsp+32+rdx]
    mov     rdx, r8
    mov     rax, 1
    syscall
    add     rsp, 40
    ret
"""

ENTRY = """\
global _start
_start:
"""

EPILOGUE = """\
    mov rax, 60
    mov rdi, 0
    syscall
"""


def _push(value: int) -> list[str]:
    # `push imm` only takes a sign-extended 32-bit immediate.
    if INT32_MIN <= value <= INT32_MAX:
        return [f"push {value}"]
    return [f"mov rax, {value}", "push rax"]


def emit_instruction(ins: Instruction) -> list[str]:
    if ins.kind is OpKind.PUSH:
        return _push(cast(int, ins.operand))
    if ins.kind is OpKind.ADD:
        return ["pop rax", "pop rbx", "add rbx, rax", "push rbx"]
    if ins.kind is OpKind.SUB:
        return ["pop rax", "pop rbx", "sub rbx, rax", "push rbx"]
    if ins.kind is OpKind.EQUAL:
        return [
            "mov rcx, 0",
            "mov rdx, 1",
            "pop rax",
            "pop rbx",
            "cmp rax, rbx",
            "cmove rcx, rdx",
            "push rcx",
        ]
    if ins.kind is OpKind.DUMP:
        return ["pop rdi", "call dump"]
    raise TypeError(f"unknown op kind: {ins.kind!r}")


def generate_nasm(program: Program) -> str:
    parts = ["BITS 64\n", "section .text\n", DUMP_ROUTINE, ENTRY]
    for ip, ins in enumerate(program):
        label = ins.kind.value if ins.operand is None else f"{ins.kind.value} {ins.operand}"
        block = [f"    ;; -- {label} (ip {ip}) --"]
        block.extend("    " + line for line in emit_instruction(ins))
        parts.append("\n".join(block) + "\n")
    parts.append(EPILOGUE)
    return "".join(parts)


def write_nasm(program: Program, path: Path | str) -> Path:
    out = Path(path)
    text = generate_nasm(program)
    logger.info("Generating %s", out)
    try:
        with out.open("w", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        raise ResourceError(str(out), e.strerror or str(e)) from e
    return out
