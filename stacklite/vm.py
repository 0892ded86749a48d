from __future__ import annotations

from collections.abc import Callable
from typing import cast

from stacklite.bytecode import Instruction, OpKind, Program, to_unsigned, wrap_i64
from stacklite.errors import StackUnderflowError

Writer = Callable[[str], None]


def format_dump(value: int) -> str:
    # The native print routine treats the register as unsigned, so negative
    # values print as their two's-complement u64 rather than signed.
    return str(to_unsigned(value))


class Simulator:
    """Executes a program against a fresh in-memory stack.

    Each ``dump`` line is passed to ``write`` as soon as it is produced and is
    also collected in ``output``.
    """

    def __init__(self, *, write: Writer | None = None) -> None:
        self.stack: list[int] = []
        self.output: list[str] = []
        self._write = write

    def run(self, program: Program) -> list[str]:
        for ip, ins in enumerate(program):
            self.step(ip, ins)
        return self.output

    def step(self, ip: int, ins: Instruction) -> None:
        stack = self.stack
        if len(stack) < ins.kind.arity:
            raise StackUnderflowError(
                kind=ins.kind.value,
                needed=ins.kind.arity,
                available=len(stack),
                ip=ip,
                line=ins.line,
            )

        if ins.kind is OpKind.PUSH:
            stack.append(cast(int, ins.operand))
        elif ins.kind is OpKind.ADD:
            a = stack.pop()
            b = stack.pop()
            stack.append(wrap_i64(b + a))
        elif ins.kind is OpKind.SUB:
            a = stack.pop()
            b = stack.pop()
            stack.append(wrap_i64(b - a))
        elif ins.kind is OpKind.EQUAL:
            a = stack.pop()
            b = stack.pop()
            stack.append(1 if b == a else 0)
        elif ins.kind is OpKind.DUMP:
            self._emit(format_dump(stack[-1]))
        else:
            raise TypeError(f"unknown op kind: {ins.kind!r}")

    def _emit(self, text: str) -> None:
        self.output.append(text)
        if self._write is not None:
            self._write(text)


def simulate(program: Program, *, write: Writer | None = None) -> list[str]:
    return Simulator(write=write).run(program)
