"""
Comparison engine over parsed .env files.

Every function here is pure: it takes one or two ParsedEnvFile objects
(or plain key lists) and returns a fresh result record. Nothing is cached
and nothing is read from disk, so each call can be tested in isolation.

Output lists follow the key order of the documents they come from.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .inference import infer_type
from .models import (
    CaseMismatch,
    CheckResult,
    DiffResult,
    DuplicateKey,
    ExplainResult,
    ParsedEnvFile,
    Severity,
    ValueDifference,
    WhitespaceIssue,
)

_WHITESPACE_MESSAGE = re.compile(r'Whitespace in variable name: "(.+?)"')
WHITESPACE_ISSUE = "leading/trailing whitespace"


@dataclass(frozen=True)
class KeyPair:
    """Two keys that are equal once case is ignored."""

    key_a: str
    key_b: str


# ─── Case Matching ───────────────────────────────────────────────────


def find_case_mismatches(keys_a: list[str], keys_b: list[str]) -> list[KeyPair]:
    """Pair each key of ``keys_a`` with a differently-cased key of ``keys_b``.

    Exact matches are not reported. When several keys of ``keys_b`` differ
    only by case (``Foo`` and ``FOO``), the one listed last is the match.
    """
    lookup = {key.lower(): key for key in keys_b}

    mismatches: list[KeyPair] = []
    for key_a in keys_a:
        key_b = lookup.get(key_a.lower())
        if key_b is not None and key_b != key_a:
            mismatches.append(KeyPair(key_a=key_a, key_b=key_b))
    return mismatches


# ─── Check ───────────────────────────────────────────────────────────


def check(example: ParsedEnvFile, env: ParsedEnvFile) -> CheckResult:
    """Check an env file against its example file (the ground truth).

    Missing keys and case mismatches count as errors. Empty values, extra
    keys, duplicates and whitespace around key names count as warnings.
    A key that is only misnamed by case is reported once, as a mismatch,
    never additionally as missing or extra.
    """
    example_keys = example.keys()
    env_keys = env.keys()

    pairs = find_case_mismatches(env_keys, example_keys)
    mismatched_env_keys = {p.key_a for p in pairs}
    mismatched_example_keys = {p.key_b for p in pairs}

    case_mismatches = [CaseMismatch(env_key=p.key_a, example_key=p.key_b) for p in pairs]

    missing = [
        key
        for key in example_keys
        if key not in env.entries and key not in mismatched_example_keys
    ]

    empty = [
        key
        for key in example_keys
        if key in env.entries and env.entries[key].value == ""
    ]

    extra = [
        key
        for key in env_keys
        if key not in example.entries and key not in mismatched_env_keys
    ]

    duplicates = [
        DuplicateKey(key=key, lines=list(lines))
        for key, lines in env.duplicate_lines.items()
    ]

    whitespace_issues = _whitespace_issues(env)

    return CheckResult(
        missing=missing,
        empty=empty,
        extra=extra,
        case_mismatches=case_mismatches,
        duplicates=duplicates,
        whitespace_issues=whitespace_issues,
        error_count=len(missing) + len(case_mismatches),
        warning_count=(
            len(empty) + len(extra) + len(duplicates) + len(whitespace_issues)
        ),
    )


# ─── Diff ────────────────────────────────────────────────────────────


def diff(a: ParsedEnvFile, b: ParsedEnvFile, include_values: bool = False) -> DiffResult:
    """Compare the keys (and optionally the values) of two env files."""
    only_in_a = [key for key in a.entries if key not in b.entries]
    only_in_b = [key for key in b.entries if key not in a.entries]

    value_differences: list[ValueDifference] = []
    if include_values:
        for key, entry_a in a.entries.items():
            entry_b = b.entries.get(key)
            if entry_b is not None and entry_a.value != entry_b.value:
                value_differences.append(
                    ValueDifference(key=key, value_a=entry_a.value, value_b=entry_b.value)
                )

    return DiffResult(
        only_in_a=only_in_a,
        only_in_b=only_in_b,
        value_differences=value_differences,
    )


# ─── Explain ─────────────────────────────────────────────────────────


def explain(example: ParsedEnvFile, variable: str) -> ExplainResult:
    """Describe ``variable`` from the comments written above it.

    The lookup is case-sensitive and only consults the example file.
    """
    entry = example.entries.get(variable)
    if entry is None:
        return ExplainResult(variable=variable, found=False)

    return ExplainResult(
        variable=variable,
        found=True,
        purpose=" ".join(entry.comments),
        comments=list(entry.comments),
        example_value=entry.value,
        inferred_type=infer_type(entry.value),
    )


# ─── Internal Helpers ────────────────────────────────────────────────


def _whitespace_issues(env: ParsedEnvFile) -> list[WhitespaceIssue]:
    issues: list[WhitespaceIssue] = []
    for diagnostic in env.diagnostics:
        if diagnostic.severity != Severity.WARNING:
            continue
        match = _WHITESPACE_MESSAGE.search(diagnostic.message)
        if match:
            issues.append(WhitespaceIssue(key=match.group(1), issue=WHITESPACE_ISSUE))
    return issues
