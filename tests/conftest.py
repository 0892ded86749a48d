from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path

import pytest

_ENV_VARS = (
    "STACKLITE_NASM",
    "STACKLITE_NASM_FORMAT",
    "STACKLITE_LD",
    "STACKLITE_TOOL_TIMEOUT",
    "STACKLITE_COLOR",
    "NO_COLOR",
)


def pytest_configure() -> None:
    project_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(project_root))


@pytest.fixture(autouse=True)
def _clean_stacklite_env(monkeypatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def source_file(tmp_path: Path) -> Callable[..., Path]:
    def _write(src: str, name: str = "prog.sl") -> Path:
        p = tmp_path / name
        p.write_text(src, encoding="utf-8")
        return p

    return _write
