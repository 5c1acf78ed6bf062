#!/usr/bin/env python3
"""
envsure — Entry Point
=====================

Validate and compare .env files from the command line.

Usage:
    envsure check                             # .env against .env.example
    envsure check -e .env.local -x .env.dist  # Custom paths
    envsure diff .env.prod .env.staging -v    # Include (masked) value diffs
    envsure explain DATABASE_URL              # Show documentation for a key
    envsure --json --strict check             # Machine-readable, warnings fail
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import TextIO

from pydantic import ValidationError

from envsure import __version__
from envsure.config import EnvsureSettings, get_settings
from envsure.exceptions import (
    EnvFileMissingError,
    EnvsureError,
    ParseFailureError,
)
from envsure.masking import mask_sensitive
from envsure.models import CheckResult, DiffResult, ExplainResult
from envsure.pipeline import (
    EnvsurePipeline,
    check_exit_code,
    diff_exit_code,
    explain_exit_code,
)

logger = logging.getLogger("envsure")


# ─── ANSI Color Constants ───────────────────────────────────────────

_RED = "\033[91m"
_YELLOW = "\033[93m"
_GREEN = "\033[92m"
_BLUE = "\033[94m"
_MAGENTA = "\033[95m"
_CYAN = "\033[96m"
_GRAY = "\033[90m"
_DIM = "\033[2m"
_BOLD = "\033[1m"
_UNDERLINE = "\033[4m"
_RESET = "\033[0m"

_TYPE_COLORS = {
    "string": _GREEN,
    "integer": _BLUE,
    "number": _BLUE,
    "boolean": _MAGENTA,
    "url": _CYAN,
    "email": _CYAN,
    "ip address": _YELLOW,
    "connection string": _YELLOW,
    "empty": _DIM,
}


# ─── Console ─────────────────────────────────────────────────────────


class Console:
    """Terminal writer with optional ANSI coloring."""

    def __init__(self, color: bool = True, stream: TextIO | None = None):
        self.color = color
        self.stream = stream or sys.stdout

    def paint(self, text: str, *styles: str) -> str:
        if not self.color or not styles:
            return text
        return f"{''.join(styles)}{text}{_RESET}"

    def print(self, text: str = "") -> None:
        print(text, file=self.stream)

    def success(self, message: str) -> None:
        self.print(f"{self.paint('✓', _GREEN)} {self.paint(message, _GREEN)}")

    def error(self, message: str) -> None:
        self.print(f"{self.paint('✗', _RED)} {self.paint(message, _RED)}")

    def warning(self, message: str) -> None:
        self.print(f"{self.paint('⚠', _YELLOW)} {self.paint(message, _YELLOW)}")

    def info(self, message: str) -> None:
        self.print(f"{self.paint('ℹ', _BLUE)} {self.paint(message, _BLUE)}")

    def header(self, title: str) -> None:
        self.print()
        self.print(self.paint(title, _BOLD, _UNDERLINE))
        self.print()

    def bullets(self, items: list[str], indent: int = 2) -> None:
        padding = " " * indent
        for item in items:
            self.print(f"{padding}{self.paint('•', _GRAY)} {item}")

    def table(self, rows: list[tuple[str, str]], indent: int = 2) -> None:
        padding = " " * indent
        for key, value in rows:
            self.print(f"{padding}{self.paint(key, _GRAY)}: {value}")

    def code(self, text: str) -> str:
        return self.paint(text, _CYAN)

    def json(self, data: object) -> None:
        self.print(json.dumps(data, indent=2, ensure_ascii=False))

    def summary(self, errors: int, warnings: int) -> None:
        self.print()
        if errors == 0 and warnings == 0:
            self.success("No issues found")
            return
        parts: list[str] = []
        if errors > 0:
            parts.append(self.paint(f"{errors} error{'s' if errors != 1 else ''}", _RED))
        if warnings > 0:
            parts.append(self.paint(f"{warnings} warning{'s' if warnings != 1 else ''}", _YELLOW))
        self.print(f"Found {' and '.join(parts)}")


# ─── Report Printers ─────────────────────────────────────────────────


def _print_section(console: Console, symbol: str, color: str, title: str, items: list[str]) -> None:
    console.print(f"{console.paint(symbol, color)} {console.paint(title, color)}")
    console.bullets(items)
    console.print()


def print_check_result(
    console: Console, result: CheckResult, env_path: str, example_path: str
) -> None:
    """Print check findings grouped by kind, errors first."""
    console.header(
        f"Checking {console.code(env_path)} against {console.code(example_path)}"
    )

    paint = console.paint
    sections: list[tuple[str, str, str, list[str]]] = [
        ("✗", _RED, "Missing variables:", [paint(k, _RED) for k in result.missing]),
        ("✗", _RED, "Case mismatches:", [
            f"{paint(m.env_key, _RED)} should be {console.paint(m.example_key, _GREEN)}"
            for m in result.case_mismatches
        ]),
        ("⚠", _YELLOW, "Empty values:", [paint(k, _YELLOW) for k in result.empty]),
        ("⚠", _YELLOW, "Extra variables not in example:", [
            paint(k, _YELLOW) for k in result.extra
        ]),
        ("⚠", _YELLOW, "Duplicate variables:", [
            f"{paint(d.key, _YELLOW)} defined on lines {', '.join(str(n) for n in d.lines)}"
            for d in result.duplicates
        ]),
        ("⚠", _YELLOW, "Whitespace issues:", [
            f"{paint(w.key, _YELLOW)}: {w.issue}" for w in result.whitespace_issues
        ]),
    ]

    printed = False
    for symbol, color, title, items in sections:
        if items:
            printed = True
            _print_section(console, symbol, color, title, items)

    if not printed:
        console.success("All variables are correctly defined")

    console.summary(result.error_count, result.warning_count)


def print_diff_result(
    console: Console, result: DiffResult, file_a: str, file_b: str, show_values: bool
) -> None:
    """Print keys unique to each side and masked value differences."""
    console.header(f"Comparing {console.code(file_a)} and {console.code(file_b)}")

    if not result.has_differences:
        console.success("Files are identical")
        return

    arrow = console.paint("→", _GRAY)

    if result.only_in_a:
        console.print(
            f"{arrow} {console.paint(f'Only in {file_a}:', _CYAN)} "
            f"{console.paint(f'({len(result.only_in_a)})', _DIM)}"
        )
        console.bullets([console.paint(f"- {k}", _RED) for k in result.only_in_a])
        console.print()

    if result.only_in_b:
        console.print(
            f"{arrow} {console.paint(f'Only in {file_b}:', _CYAN)} "
            f"{console.paint(f'({len(result.only_in_b)})', _DIM)}"
        )
        console.bullets([console.paint(f"+ {k}", _GREEN) for k in result.only_in_b])
        console.print()

    if show_values and result.value_differences:
        console.print(
            f"{arrow} {console.paint('Value differences:', _CYAN)} "
            f"{console.paint(f'({len(result.value_differences)})', _DIM)}"
        )
        console.print()
        for d in result.value_differences:
            console.print(f"  {console.paint(d.key, _BOLD)}")
            console.print(f"    {console.paint(f'- {mask_sensitive(d.key, d.value_a)}', _RED)}")
            console.print(f"    {console.paint(f'+ {mask_sensitive(d.key, d.value_b)}', _GREEN)}")
            console.print()

    console.print()
    parts: list[str] = []
    if result.only_in_a:
        parts.append(f"{len(result.only_in_a)} only in {file_a}")
    if result.only_in_b:
        parts.append(f"{len(result.only_in_b)} only in {file_b}")
    if result.value_differences:
        parts.append(f"{len(result.value_differences)} different values")
    console.info(f"Differences: {', '.join(parts)}")


def print_explain_result(console: Console, result: ExplainResult, example_path: str) -> None:
    """Print purpose, expected type and example value of a variable."""
    if not result.found:
        console.warning(
            f"Variable {console.code(result.variable)} not found in {console.code(example_path)}"
        )
        console.print()
        console.print(console.paint("Make sure the variable is defined in your .env.example file.", _DIM))
        return

    console.header(result.variable)

    rows: list[tuple[str, str]] = []
    rows.append(("Purpose", result.purpose or console.paint("No description available", _DIM)))
    if result.inferred_type:
        color = _TYPE_COLORS.get(result.inferred_type, "")
        rows.append(("Expected type", console.paint(result.inferred_type, color) if color else result.inferred_type))
    if result.example_value is not None:
        if result.example_value == "":
            rows.append(("Example", console.paint("(empty)", _DIM)))
        else:
            rows.append(("Example", console.paint(result.example_value, _CYAN)))
    console.table(rows, indent=0)

    if result.comments and len(result.comments) > 1:
        console.print()
        console.print(console.paint("Documentation:", _DIM))
        for comment in result.comments:
            console.print(f"  {console.paint('#', _GRAY)} {comment}")


def _print_fatal(console: Console, exc: EnvsureError, as_json: bool) -> None:
    if as_json:
        console.json({"error": exc.message, "code": exc.code})
        return
    console.error(exc.message)
    if isinstance(exc, ParseFailureError):
        for diagnostic in exc.diagnostics:
            console.print(f"  Line {diagnostic.line}: {diagnostic.message}")


# ─── Commands ────────────────────────────────────────────────────────


def run_check(args: argparse.Namespace, settings: EnvsureSettings, console: Console) -> int:
    pipeline = EnvsurePipeline(settings)
    env_path = args.env or settings.env_file
    example_path = args.example or settings.example_file

    try:
        result = pipeline.check(env_path, example_path)
    except EnvFileMissingError as exc:
        if args.json:
            console.json({"error": exc.message, "warning": True})
        else:
            console.warning(f"Missing {console.code(env_path)} - nothing to validate")
        return 1 if args.strict else 0
    except EnvsureError as exc:
        _print_fatal(console, exc, args.json)
        return 1

    if args.json:
        console.print(result.model_dump_json(indent=2))
    else:
        print_check_result(console, result, env_path, example_path)
    return check_exit_code(result, strict=args.strict)


def run_diff(args: argparse.Namespace, settings: EnvsureSettings, console: Console) -> int:
    pipeline = EnvsurePipeline(settings)

    try:
        result = pipeline.diff(args.file_a, args.file_b, include_values=args.values)
    except EnvsureError as exc:
        _print_fatal(console, exc, args.json)
        return 1

    if args.json:
        console.print(result.model_dump_json(indent=2))
    else:
        print_diff_result(console, result, args.file_a, args.file_b, args.values)
    return diff_exit_code(result)


def run_explain(args: argparse.Namespace, settings: EnvsureSettings, console: Console) -> int:
    pipeline = EnvsurePipeline(settings)
    example_path = args.example or settings.example_file

    try:
        result = pipeline.explain(args.variable, example_path)
    except EnvsureError as exc:
        _print_fatal(console, exc, args.json)
        return 1

    if args.json:
        console.print(result.model_dump_json(indent=2, exclude_none=True))
    else:
        print_explain_result(console, result, example_path)
    return explain_exit_code(result)


# ─── Argument Parsing ────────────────────────────────────────────────


def _add_global_options(parser: argparse.ArgumentParser, suppress: bool) -> None:
    """Register the global flags; subcommand copies must not reset them."""
    default = argparse.SUPPRESS if suppress else False
    parser.add_argument("--strict", action="store_true", default=default,
                        help="Treat warnings as errors")
    parser.add_argument("--json", action="store_true", default=default,
                        help="Output results as machine-readable JSON")
    parser.add_argument("--no-color", dest="no_color", action="store_true", default=default,
                        help="Disable colored output")
    parser.add_argument("--verbose", action="store_true", default=default,
                        help="Log debug details to stderr")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="envsure",
        description="A lightweight CLI tool for validating and comparing .env files",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    _add_global_options(parser, suppress=False)

    commands = parser.add_subparsers(dest="command", required=True)

    check_parser = commands.add_parser(
        "check", help="Validate environment consistency in the current directory"
    )
    check_parser.add_argument("-e", "--env", help="Path to .env file")
    check_parser.add_argument("-x", "--example", help="Path to .env.example file")
    _add_global_options(check_parser, suppress=True)
    check_parser.set_defaults(handler=run_check)

    diff_parser = commands.add_parser(
        "diff", help="Compare two .env files and highlight differences"
    )
    diff_parser.add_argument("file_a", metavar="fileA")
    diff_parser.add_argument("file_b", metavar="fileB")
    diff_parser.add_argument("-v", "--values", action="store_true",
                             help="Show value differences for common variables")
    _add_global_options(diff_parser, suppress=True)
    diff_parser.set_defaults(handler=run_diff)

    explain_parser = commands.add_parser(
        "explain", help="Explain an environment variable using comments from .env.example"
    )
    explain_parser.add_argument("variable", metavar="varName")
    explain_parser.add_argument("-x", "--example", help="Path to .env.example file")
    _add_global_options(explain_parser, suppress=True)
    explain_parser.set_defaults(handler=run_explain)

    return parser


# ─── Main ────────────────────────────────────────────────────────────


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, run the selected command and return its exit code."""
    args = build_parser().parse_args(argv)
    try:
        settings = get_settings()
    except ValidationError as exc:
        for error in exc.errors():
            name = "ENVSURE_" + "_".join(str(part) for part in error["loc"]).upper()
            print(f"Invalid configuration: {name}: {error['msg']}", file=sys.stderr)
        return 1
    args.strict = args.strict or settings.strict

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    console = Console(color=settings.color and not args.no_color)
    logger.debug("Running %s", args.command)
    return args.handler(args, settings, console)


if __name__ == "__main__":
    sys.exit(main())
