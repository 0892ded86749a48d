from __future__ import annotations

from stacklite.bytecode import Instruction, Program
from stacklite.parser import OPERATORS

_SPELLING = {kind: text for text, kind in OPERATORS.items()}


def describe(ins: Instruction) -> str:
    if ins.operand is not None:
        return f"{ins.kind.value} {ins.operand}"
    return f"{ins.kind.value} ({_SPELLING[ins.kind]})"


def to_listing(program: Program) -> str:
    width = len(str(max(len(program) - 1, 0)))
    lines = []
    for ip, ins in enumerate(program):
        loc = f"  ; line {ins.line}" if ins.line is not None else ""
        lines.append(f"{ip:>{width}}: {describe(ins)}{loc}")
    return "\n".join(lines)
