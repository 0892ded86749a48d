from __future__ import annotations

from pathlib import Path

from stacklite.bytecode import Program
from stacklite.codegen import generate_nasm, write_nasm
from stacklite.config import ToolchainSettings, load_settings
from stacklite.errors import ResourceError
from stacklite.parser import parse_program
from stacklite.toolchain import assemble_and_link
from stacklite.vm import Writer, simulate


def read_source(path: Path | str) -> str:
    p = Path(path)
    try:
        return p.read_text(encoding="utf-8")
    except OSError as e:
        raise ResourceError(str(p), e.strerror or str(e)) from e
    except UnicodeDecodeError as e:
        raise ResourceError(str(p), "not a readable text file") from e


def load_program(path: Path | str) -> Program:
    return parse_program(read_source(path))


def run_source(*, src: str, write: Writer | None = None) -> list[str]:
    return simulate(parse_program(src), write=write)


def compile_source(*, src: str) -> str:
    return generate_nasm(parse_program(src))


def build_file(
    source: Path | str,
    exe: Path | str,
    *,
    settings: ToolchainSettings | None = None,
    echo: bool = True,
) -> Path:
    """Compile ``source`` to a native executable at ``exe``.

    The assembly is written next to it as ``<exe>.s`` and assembled into
    ``<exe>.o`` before linking.
    """
    settings = settings or load_settings()
    exe_path = Path(exe)
    program = load_program(source)
    asm_path = write_nasm(program, exe_path.with_name(exe_path.name + ".s"))
    assemble_and_link(asm_path, exe_path, settings=settings, echo=echo)
    return exe_path
