"""
Command orchestration — loads files and runs the comparison engine.

Flow:
  ┌──────────────┐   ┌──────────────┐
  │ .env.example │   │     .env     │
  └──────┬───────┘   └──────┬───────┘
         │                  │
  ┌──────▼──────────────────▼───────┐
  │             Parser              │   ← Diagnostics, never exceptions
  └──────────────┬──────────────────┘
                 │
          ┌──────▼──────┐
          │    Gate     │   ← Missing / unreadable → raise
          └──────┬──────┘
                 │
          ┌──────▼──────┐
          │ Comparator  │   ← check / diff / explain (pure)
          └──────┬──────┘
                 │
          ┌──────▼──────┐
          │   Result    │   ← Printer / JSON / exit code
          └─────────────┘

Design principles:
  - The parser reports, this layer decides what is fatal.
  - A missing example file is fatal; a missing .env is only a warning.
  - Nothing is cached between calls: every run re-reads its inputs.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .comparator import check, diff, explain
from .config import EnvsureSettings, get_settings
from .exceptions import EnvFileMissingError, ParseFailureError, SourceFileMissingError
from .models import CheckResult, DiffResult, ExplainResult, ParsedEnvFile
from .parser import file_exists, parse_env_file

logger = logging.getLogger(__name__)


class EnvsurePipeline:
    """Runs check, diff and explain against files on disk.

    Usage:
        pipeline = EnvsurePipeline()
        result = pipeline.check(".env", ".env.example")
        if check_exit_code(result, strict=False):
            # missing or misnamed variables
            print(result.missing)
    """

    def __init__(self, settings: EnvsureSettings | None = None):
        self.settings = settings or get_settings()

    def load(self, path: str | Path) -> ParsedEnvFile:
        """Parse a required file.

        Raises:
            SourceFileMissingError: The file does not exist.
            ParseFailureError: The document carries error diagnostics.
        """
        if not file_exists(path):
            raise SourceFileMissingError(str(path))

        logger.info("Parsing %s", path)
        document = parse_env_file(path)

        if document.has_errors:
            raise ParseFailureError(str(path), document.errors)

        for diagnostic in document.warnings:
            logger.debug("%s:%d: %s", path, diagnostic.line, diagnostic.message)

        return document

    def check(
        self, env_path: str | None = None, example_path: str | None = None
    ) -> CheckResult:
        """Check ``env_path`` against ``example_path``.

        Raises:
            SourceFileMissingError: The example file does not exist.
            EnvFileMissingError: The env file does not exist.
            ParseFailureError: Either file could not be read.
        """
        env_path = env_path or self.settings.env_file
        example_path = example_path or self.settings.example_file

        if not file_exists(example_path):
            raise SourceFileMissingError(
                example_path,
                f"Missing {example_path} - this file is required as the source of truth",
            )
        if not file_exists(env_path):
            raise EnvFileMissingError(env_path)

        example = self.load(example_path)
        env = self.load(env_path)

        result = check(example, env)
        logger.info(
            "Checked %s against %s: %d error(s), %d warning(s)",
            env_path, example_path, result.error_count, result.warning_count,
        )
        return result

    def diff(
        self, path_a: str, path_b: str, include_values: bool = False
    ) -> DiffResult:
        """Compare two env files. Both must exist."""
        document_a = self.load(path_a)
        document_b = self.load(path_b)

        result = diff(document_a, document_b, include_values=include_values)
        logger.info(
            "Compared %s and %s: %d only in A, %d only in B, %d value difference(s)",
            path_a, path_b,
            len(result.only_in_a), len(result.only_in_b), len(result.value_differences),
        )
        return result

    def explain(self, variable: str, example_path: str | None = None) -> ExplainResult:
        """Look up ``variable`` in the example file."""
        example_path = example_path or self.settings.example_file
        result = explain(self.load(example_path), variable)
        logger.info("Explained %s from %s: found=%s", variable, example_path, result.found)
        return result


# ─── Exit Codes ──────────────────────────────────────────────────────


def check_exit_code(result: CheckResult, strict: bool = False) -> int:
    """1 when errors exist, or warnings exist under strict mode."""
    if result.error_count > 0:
        return 1
    if strict and result.warning_count > 0:
        return 1
    return 0


def diff_exit_code(result: DiffResult) -> int:
    return 1 if result.has_differences else 0


def explain_exit_code(result: ExplainResult) -> int:
    return 0 if result.found else 1
