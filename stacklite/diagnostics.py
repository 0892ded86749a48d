from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal, TextIO

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from stacklite.config import ColorMode
from stacklite.errors import StackliteError

Level = Literal["error"]

_TAGS: dict[str, tuple[str, str]] = {
    "error": ("[Error]:", "bold red"),
}


@dataclass(frozen=True)
class Diagnostic:
    level: Level
    message: str
    line: int | None = None

    @classmethod
    def from_error(cls, err: StackliteError) -> "Diagnostic":
        return cls(level="error", message=err.message, line=err.line)


Renderer = Callable[[Diagnostic], None]


def render_plain(diag: Diagnostic) -> str:
    tag, _ = _TAGS[diag.level]
    return f"{tag} {diag.message}"


def make_console(*, color: ColorMode = "auto", file: TextIO | None = None) -> Console:
    stream = file if file is not None else sys.stderr
    if color == "always":
        return Console(file=stream, force_terminal=True, highlight=False, soft_wrap=True)
    if color == "never":
        return Console(file=stream, color_system=None, highlight=False, soft_wrap=True)
    return Console(file=stream, highlight=False, soft_wrap=True)


def make_renderer(console: Console) -> Renderer:
    def _render(diag: Diagnostic) -> None:
        if console.color_system is None:
            console.print(render_plain(diag), markup=False)
            return
        tag, style = _TAGS[diag.level]
        console.print(f"[{style}]{escape(tag)}[/{style}] {escape(diag.message)}")

    return _render


def configure_logging(*, verbose: bool, console: Console) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_time=False, show_path=False, markup=False)],
        force=True,
    )
