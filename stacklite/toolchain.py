from __future__ import annotations

import logging
import shlex
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from stacklite.config import ToolchainSettings
from stacklite.errors import InvocationError

logger = logging.getLogger(__name__)


class ToolCommand(BaseModel):
    argv: list[str]
    timeout_sec: int | None = Field(default=None, ge=1, le=3600)
    expect_exit_codes: list[int] = Field(default_factory=lambda: [0])

    @field_validator("argv")
    @classmethod
    def _non_empty_argv(cls, v: list[str]) -> list[str]:
        if not v or not v[0].strip():
            raise ValueError("argv must name an executable")
        return v

    @property
    def display(self) -> str:
        return " ".join(shlex.quote(a) for a in self.argv)


@dataclass(frozen=True)
class CommandResult:
    cmd: str
    returncode: int
    stdout: str
    stderr: str
    duration_s: float
    timed_out: bool
    expected_exit_codes: list[int]

    @property
    def passed(self) -> bool:
        return (not self.timed_out) and self.returncode in set(self.expected_exit_codes)


def run_command(spec: ToolCommand, *, echo: bool = True, capture: bool = True) -> CommandResult:
    if echo:
        logger.info("[CMD] %s", spec.display)
    start = time.time()
    try:
        proc = subprocess.run(
            spec.argv,
            text=True,
            capture_output=capture,
            timeout=spec.timeout_sec,
            check=False,
        )
    except FileNotFoundError as e:
        raise InvocationError(spec.display, stderr=str(e)) from e
    except subprocess.TimeoutExpired as e:
        return CommandResult(
            cmd=spec.display,
            returncode=124,
            stdout=str(e.stdout or ""),
            stderr=str(e.stderr or ""),
            duration_s=time.time() - start,
            timed_out=True,
            expected_exit_codes=list(spec.expect_exit_codes),
        )
    return CommandResult(
        cmd=spec.display,
        returncode=int(proc.returncode),
        stdout=proc.stdout or "",
        stderr=proc.stderr or "",
        duration_s=time.time() - start,
        timed_out=False,
        expected_exit_codes=list(spec.expect_exit_codes),
    )


def _check(result: CommandResult) -> CommandResult:
    if result.timed_out:
        raise InvocationError(result.cmd, returncode=result.returncode, stderr="timed out")
    if not result.passed:
        raise InvocationError(result.cmd, returncode=result.returncode, stderr=result.stderr)
    return result


def build_commands(asm_path: Path, exe_path: Path, settings: ToolchainSettings) -> list[ToolCommand]:
    obj_path = asm_path.with_suffix(".o")
    return [
        ToolCommand(
            argv=[settings.nasm, f"-f{settings.nasm_format}", str(asm_path), "-o", str(obj_path)],
            timeout_sec=settings.tool_timeout_sec,
        ),
        ToolCommand(
            argv=[settings.ld, "-o", str(exe_path), str(obj_path)],
            timeout_sec=settings.tool_timeout_sec,
        ),
    ]


def assemble_and_link(
    asm_path: Path,
    exe_path: Path,
    *,
    settings: ToolchainSettings,
    echo: bool = True,
) -> list[CommandResult]:
    return [_check(run_command(spec, echo=echo)) for spec in build_commands(asm_path, exe_path, settings)]


def run_executable(exe_path: Path, *, timeout_sec: int | None = None, echo: bool = True) -> int:
    # Resolve so a bare name never falls through to a $PATH lookup.
    spec = ToolCommand(argv=[str(exe_path.resolve())], timeout_sec=timeout_sec)
    result = run_command(spec, echo=echo, capture=False)
    if result.timed_out:
        raise InvocationError(result.cmd, returncode=result.returncode, stderr="timed out")
    return result.returncode
