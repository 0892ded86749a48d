from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

# Unicode White_Space; the \x1c-\x1f separators are not whitespace here.
_TOKEN = re.compile(
    r"[^\t\n\x0b\x0c\r \x85\xa0\u1680\u2000-\u200a\u2028\u2029\u202f\u205f\u3000]+"
)


@dataclass(frozen=True, slots=True)
class Token:
    line: int
    text: str


def iter_tokens(src: str) -> Iterator[Token]:
    # Only "\n" ends a line; a "\r" before it is whitespace and drops out.
    for line_no, line in enumerate(src.split("\n"), start=1):
        for m in _TOKEN.finditer(line):
            yield Token(line=line_no, text=m.group())


def tokenize(src: str) -> list[Token]:
    return list(iter_tokens(src))
