"""
Custom exception hierarchy for envsure.

The parser never raises for file content; it records diagnostics instead.
These exceptions are raised by the orchestration layer when a loaded
document cannot be used, and each type maps to one way the command
line (or API) has to stop.
"""

from __future__ import annotations


class EnvsureError(Exception):
    """Base exception for all envsure failures."""

    def __init__(self, code: str, message: str, details: dict | None = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class SourceFileMissingError(EnvsureError):
    """A file that must exist (the example file, a diff operand) is absent."""

    def __init__(self, path: str, message: str | None = None):
        super().__init__(
            "FILE_NOT_FOUND",
            message or f"File not found: {path}",
            {"path": path},
        )
        self.path = path


class EnvFileMissingError(EnvsureError):
    """The env file under check is absent. Warning-level: nothing to validate."""

    def __init__(self, path: str):
        super().__init__("ENV_FILE_MISSING", f"Missing {path}", {"path": path})
        self.path = path


class ParseFailureError(EnvsureError):
    """A document carries error diagnostics and cannot be trusted."""

    def __init__(self, path: str, diagnostics: list | None = None):
        super().__init__(
            "PARSE_FAILED",
            f"Failed to parse {path}",
            {"path": path, "diagnostics": diagnostics or []},
        )
        self.path = path
        self.diagnostics = diagnostics or []
