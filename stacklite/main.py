from __future__ import annotations

import argparse
import sys
from pathlib import Path

from stacklite.api import build_file, load_program
from stacklite.config import load_settings
from stacklite.diagnostics import Diagnostic, configure_logging, make_console, make_renderer
from stacklite.errors import StackliteError
from stacklite.listing import to_listing
from stacklite.toolchain import run_executable
from stacklite.vm import simulate


def _print_line(text: str) -> None:
    print(text, flush=True)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stacklite", description="Compile or simulate stacklite programs"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="log compilation phases")
    sub = parser.add_subparsers(dest="cmd", required=True, metavar="SUBCOMMAND")

    build_p = sub.add_parser("build", help="compile the program to an executable")
    build_p.add_argument("file", type=Path, help="source file")
    build_p.add_argument("exe", type=Path, help="output executable")
    build_p.add_argument("-r", "--run", action="store_true", help="run the executable after building")
    build_p.add_argument("-s", "--silent", action="store_true", help="do not echo external commands")

    sim_p = sub.add_parser("sim", help="simulate the program")
    sim_p.add_argument("file", type=Path, help="source file")

    ops_p = sub.add_parser("ops", help="print the parsed instruction listing")
    ops_p.add_argument("file", type=Path, help="source file")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    console = make_console()
    report = make_renderer(console)
    try:
        settings = load_settings()
        console = make_console(color=settings.color)
        report = make_renderer(console)
        echo_build = args.cmd == "build" and not args.silent
        configure_logging(verbose=args.verbose or echo_build, console=console)

        if args.cmd == "sim":
            simulate(load_program(args.file), write=_print_line)
            return 0

        if args.cmd == "ops":
            listing = to_listing(load_program(args.file))
            if listing:
                print(listing)
            return 0

        if args.cmd == "build":
            exe = build_file(args.file, args.exe, settings=settings, echo=not args.silent)
            if args.run:
                return run_executable(exe, timeout_sec=settings.tool_timeout_sec, echo=not args.silent)
            return 0
    except StackliteError as e:
        sys.stdout.flush()
        report(Diagnostic.from_error(e))
        return 1

    raise AssertionError(f"unhandled subcommand: {args.cmd}")
