from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from stacklite.errors import ConfigError

ColorMode = Literal["auto", "always", "never"]


def repo_root() -> Path:
    return Path(__file__).resolve().parents[1]


def load_env() -> None:
    # A project-local `.env` wins; otherwise search upwards from the CWD.
    root_env = repo_root() / ".env"
    env_path = str(root_env) if root_env.exists() else (find_dotenv(usecwd=True) or str(root_env))
    load_dotenv(env_path)


class ToolchainSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    nasm: str = "nasm"
    nasm_format: str = "elf64"
    ld: str = "ld"
    tool_timeout_sec: int | None = Field(default=None, ge=1, le=3600)
    color: ColorMode = "auto"

    @field_validator("nasm", "nasm_format", "ld")
    @classmethod
    def _non_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must be a non-empty string")
        return v


def _env(name: str) -> str | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return raw.strip()


def load_settings(*, use_dotenv: bool = True) -> ToolchainSettings:
    if use_dotenv:
        load_env()
    raw: dict[str, object] = {}
    for key, env_name in (
        ("nasm", "STACKLITE_NASM"),
        ("nasm_format", "STACKLITE_NASM_FORMAT"),
        ("ld", "STACKLITE_LD"),
        ("tool_timeout_sec", "STACKLITE_TOOL_TIMEOUT"),
        ("color", "STACKLITE_COLOR"),
    ):
        value = _env(env_name)
        if value is not None:
            raw[key] = value
    if os.getenv("NO_COLOR"):
        raw["color"] = "never"
    try:
        return ToolchainSettings.model_validate(raw)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(p) for p in first.get("loc", ()))
        raise ConfigError(f"invalid setting {field}: {first.get('msg', 'invalid value')}") from e
