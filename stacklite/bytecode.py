from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
_MASK64 = 2**64 - 1


def wrap_i64(value: int) -> int:
    value &= _MASK64
    return value - 2**64 if value > INT64_MAX else value


def to_unsigned(value: int) -> int:
    return value & _MASK64


class OpKind(str, Enum):
    PUSH = "push"
    ADD = "add"
    SUB = "sub"
    EQUAL = "equal"
    DUMP = "dump"

    @property
    def arity(self) -> int:
        """Number of stack values the operation needs to be present."""
        return _ARITY[self]


_ARITY = {
    OpKind.PUSH: 0,
    OpKind.ADD: 2,
    OpKind.SUB: 2,
    OpKind.EQUAL: 2,
    OpKind.DUMP: 1,
}


@dataclass(frozen=True, slots=True)
class Instruction:
    kind: OpKind
    operand: int | None = None
    line: int | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.kind is OpKind.PUSH:
            if not isinstance(self.operand, int) or isinstance(self.operand, bool):
                raise ValueError("push requires an integer operand")
            if not INT64_MIN <= self.operand <= INT64_MAX:
                raise ValueError(f"push operand out of 64-bit range: {self.operand}")
        elif self.operand is not None:
            raise ValueError(f"{self.kind.value} does not take an operand")

    @classmethod
    def push(cls, value: int, *, line: int | None = None) -> "Instruction":
        return cls(OpKind.PUSH, value, line)


@dataclass(frozen=True, slots=True)
class Program:
    instructions: tuple[Instruction, ...] = ()

    @classmethod
    def of(cls, instructions: Iterable[Instruction]) -> "Program":
        return cls(tuple(instructions))

    def __iter__(self) -> Iterator[Instruction]:
        return iter(self.instructions)

    def __len__(self) -> int:
        return len(self.instructions)
