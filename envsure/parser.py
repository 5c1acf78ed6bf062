"""
Line-oriented parser for .env files.

One forward pass over the text builds a ParsedEnvFile. Content problems
never raise: every anomaly (bad syntax, whitespace around a key, repeated
keys) becomes a ParseDiagnostic on the returned document. Only a file that
cannot be read at all produces an error-severity diagnostic, and callers
must check for it before trusting ``entries``.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .models import EnvEntry, ParseDiagnostic, ParsedEnvFile, Severity

logger = logging.getLogger(__name__)

_INVALID_SYNTAX_PREVIEW = 50
_QUOTE_CHARS = ('"', "'")


# ─── Public API ──────────────────────────────────────────────────────


def parse_env_file(path: str | Path) -> ParsedEnvFile:
    """Read a file as UTF-8 and parse it.

    Args:
        path: Location of the .env file.

    Returns:
        ParsedEnvFile. A missing or unreadable file yields no entries and a
        single error diagnostic.
    """
    resolved = Path(path).resolve()

    if not resolved.exists():
        return _unreadable(resolved, f"File not found: {path}", "FILE_NOT_FOUND")

    try:
        text = resolved.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        return _unreadable(
            resolved, f"Unable to read file: {path} ({exc})", "FILE_UNREADABLE"
        )

    return parse_env_text(text, str(resolved))


def parse_env_text(text: str, path: str = "<memory>") -> ParsedEnvFile:
    """Parse .env content that is already in memory.

    Args:
        text: Full file content.
        path: Label stored as ``source_path`` (used in messages only).
    """
    entries: dict[str, EnvEntry] = {}
    diagnostics: list[ParseDiagnostic] = []
    key_lines: dict[str, list[int]] = {}
    pending_comments: list[str] = []

    for line_number, line in enumerate(text.split("\n"), start=1):
        line = line.removesuffix("\r")
        trimmed = line.strip()

        # Blank lines break the link between comments and the next key
        if not trimmed:
            pending_comments = []
            continue

        if trimmed.startswith("#"):
            pending_comments.append(trimmed[1:].strip())
            continue

        raw_key, sep, raw_value = line.partition("=")
        key = raw_key.strip()

        if not sep or not raw_key:
            preview = trimmed[:_INVALID_SYNTAX_PREVIEW]
            if len(trimmed) > _INVALID_SYNTAX_PREVIEW:
                preview += "..."
            diagnostics.append(
                ParseDiagnostic(
                    line=line_number,
                    message=f'Invalid syntax: "{preview}"',
                    severity=Severity.WARNING,
                    code="INVALID_SYNTAX",
                )
            )
            pending_comments = []
            continue

        if raw_key != key:
            diagnostics.append(
                ParseDiagnostic(
                    line=line_number,
                    message=f'Whitespace in variable name: "{raw_key}"',
                    severity=Severity.WARNING,
                    code="WHITESPACE_IN_KEY",
                )
            )

        value, quote_char = parse_value(raw_value)
        key_lines.setdefault(key, []).append(line_number)

        # Last occurrence wins; dict keeps the key at its first-seen position
        entries[key] = EnvEntry(
            key=key,
            value=value,
            line=line_number,
            comments=list(pending_comments),
            is_quoted=quote_char is not None,
            quote_char=quote_char,
        )
        pending_comments = []

    duplicate_lines: dict[str, list[int]] = {}
    for key, lines in key_lines.items():
        if len(lines) < 2:
            continue
        duplicate_lines[key] = lines
        earlier = ", ".join(str(n) for n in lines[:-1])
        plural = "s" if len(lines) > 2 else ""
        diagnostics.append(
            ParseDiagnostic(
                line=lines[-1],
                message=f"Duplicate variable: {key} (also defined on line{plural} {earlier})",
                severity=Severity.WARNING,
                code="DUPLICATE_KEY",
            )
        )

    logger.debug(
        "Parsed %s: %d entries, %d diagnostics",
        path, len(entries), len(diagnostics),
    )

    return ParsedEnvFile(
        entries=entries,
        duplicate_lines=duplicate_lines,
        diagnostics=diagnostics,
        source_path=path,
    )


def parse_value(raw_value: str) -> tuple[str, str | None]:
    """Resolve quoting and inline comments of a raw value.

    Returns:
        (value, quote_char) where quote_char is None for unquoted values.
    """
    trimmed = raw_value.strip()

    if trimmed[:1] in _QUOTE_CHARS and trimmed.endswith(trimmed[0]):
        quote_char = trimmed[0]
        value = trimmed[1:-1]
        if quote_char == '"':
            value = _unescape_double_quoted(value)
        return value, quote_char

    # Opening quote without a closing one: multi-line values are not supported
    if trimmed.startswith(_QUOTE_CHARS):
        return trimmed, None

    comment_index = trimmed.find(" #")
    if comment_index != -1:
        return trimmed[:comment_index].strip(), None

    return trimmed, None


def file_exists(path: str | Path) -> bool:
    return Path(path).resolve().exists()


# ─── Internal Helpers ────────────────────────────────────────────────


def _unescape_double_quoted(value: str) -> str:
    # Applied in this order: \" then \n then \t
    return value.replace('\\"', '"').replace("\\n", "\n").replace("\\t", "\t")


def _unreadable(resolved: Path, message: str, code: str) -> ParsedEnvFile:
    logger.debug("Cannot parse %s: %s", resolved, message)
    return ParsedEnvFile(
        diagnostics=[
            ParseDiagnostic(
                line=0,
                message=message,
                severity=Severity.ERROR,
                code=code,
            )
        ],
        source_path=str(resolved),
    )
