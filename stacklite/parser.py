from __future__ import annotations

import re
from collections.abc import Iterable

from stacklite.bytecode import INT64_MAX, INT64_MIN, Instruction, OpKind, Program
from stacklite.errors import LexicalTokenError
from stacklite.lexer import Token, iter_tokens

OPERATORS: dict[str, OpKind] = {
    "+": OpKind.ADD,
    "-": OpKind.SUB,
    "?=": OpKind.EQUAL,
    "dump": OpKind.DUMP,
}

_INT_LITERAL = re.compile(r"[+-]?[0-9]+", re.ASCII)


def parse_int_literal(text: str) -> int | None:
    if not _INT_LITERAL.fullmatch(text):
        return None
    value = int(text)
    if not INT64_MIN <= value <= INT64_MAX:
        return None
    return value


def parse_token(token: Token) -> Instruction:
    # Keywords win over numeric parsing.
    kind = OPERATORS.get(token.text)
    if kind is not None:
        return Instruction(kind, line=token.line)
    value = parse_int_literal(token.text)
    if value is None:
        raise LexicalTokenError(token.text, line=token.line)
    return Instruction.push(value, line=token.line)


def parse_tokens(tokens: Iterable[Token]) -> Program:
    return Program.of(parse_token(tok) for tok in tokens)


def parse_program(src: str) -> Program:
    return parse_tokens(iter_tokens(src))
