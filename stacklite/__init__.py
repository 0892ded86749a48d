from __future__ import annotations

from stacklite.api import build_file, compile_source, load_program, run_source
from stacklite.bytecode import Instruction, OpKind, Program
from stacklite.codegen import generate_nasm, write_nasm
from stacklite.errors import (
    ConfigError,
    InvocationError,
    LexicalTokenError,
    ResourceError,
    StackliteError,
    StackUnderflowError,
)
from stacklite.lexer import Token, tokenize
from stacklite.parser import parse_program, parse_tokens
from stacklite.vm import Simulator, simulate

__all__ = [
    "__version__",
    # Front end
    "Token",
    "tokenize",
    "parse_tokens",
    "parse_program",
    # Program model
    "OpKind",
    "Instruction",
    "Program",
    # Backends
    "Simulator",
    "simulate",
    "generate_nasm",
    "write_nasm",
    # Facade
    "load_program",
    "run_source",
    "compile_source",
    "build_file",
    # Errors
    "StackliteError",
    "LexicalTokenError",
    "StackUnderflowError",
    "ResourceError",
    "InvocationError",
    "ConfigError",
]

__version__ = "0.1.0"
