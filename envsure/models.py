"""
Pydantic models for parsed .env files and comparison results.

Every record is frozen once built. A parsed document is produced in one
pass and then only read; comparison results are derived fresh per call.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field


# ─── Severity Levels ────────────────────────────────────────────────


class Severity(str, Enum):
    """Severity of a parse diagnostic."""

    ERROR = "error"  # Document cannot be trusted
    WARNING = "warning"  # Parsed, but something looks off


# ─── Parse Diagnostic ───────────────────────────────────────────────


class ParseDiagnostic(BaseModel):
    """A parse-time anomaly attached to a document instead of raised."""

    model_config = ConfigDict(frozen=True)

    line: int  # 1-based; 0 when the whole file is affected
    message: str
    severity: Severity
    code: str  # Machine-readable, e.g. "DUPLICATE_KEY"


# ─── Parsed Document ────────────────────────────────────────────────


class EnvEntry(BaseModel):
    """One resolved assignment, after duplicate resolution."""

    model_config = ConfigDict(frozen=True)

    key: str
    value: str
    line: int  # Line of the final occurrence
    comments: list[str] = Field(default_factory=list)
    is_quoted: bool = False
    quote_char: Optional[Literal['"', "'"]] = None


class ParsedEnvFile(BaseModel):
    """Structured view of a single .env file.

    ``entries`` keeps first-seen key order, so everything derived from it
    is deterministic for a given input.
    """

    model_config = ConfigDict(frozen=True)

    entries: dict[str, EnvEntry] = Field(default_factory=dict)
    duplicate_lines: dict[str, list[int]] = Field(default_factory=dict)
    diagnostics: list[ParseDiagnostic] = Field(default_factory=list)
    source_path: str = ""

    def keys(self) -> list[str]:
        return list(self.entries)

    @property
    def errors(self) -> list[ParseDiagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[ParseDiagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.WARNING]

    @property
    def has_errors(self) -> bool:
        return any(d.severity == Severity.ERROR for d in self.diagnostics)


# ─── Check Result ───────────────────────────────────────────────────


class CaseMismatch(BaseModel):
    """An env key that matches an example key only when case is ignored."""

    model_config = ConfigDict(frozen=True)

    env_key: str
    example_key: str


class DuplicateKey(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    lines: list[int]


class WhitespaceIssue(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str  # Raw key text, surrounding whitespace included
    issue: str


class CheckResult(BaseModel):
    """Outcome of checking an env file against its example file."""

    model_config = ConfigDict(frozen=True)

    missing: list[str] = Field(default_factory=list)
    empty: list[str] = Field(default_factory=list)
    extra: list[str] = Field(default_factory=list)
    case_mismatches: list[CaseMismatch] = Field(default_factory=list)
    duplicates: list[DuplicateKey] = Field(default_factory=list)
    whitespace_issues: list[WhitespaceIssue] = Field(default_factory=list)
    error_count: int = 0
    warning_count: int = 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_clean(self) -> bool:
        return self.error_count == 0 and self.warning_count == 0


# ─── Diff Result ────────────────────────────────────────────────────


class ValueDifference(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    value_a: str
    value_b: str


class DiffResult(BaseModel):
    """Key and value differences between two env files."""

    model_config = ConfigDict(frozen=True)

    only_in_a: list[str] = Field(default_factory=list)
    only_in_b: list[str] = Field(default_factory=list)
    value_differences: list[ValueDifference] = Field(default_factory=list)

    @property
    def has_differences(self) -> bool:
        return bool(self.only_in_a or self.only_in_b or self.value_differences)


# ─── Explain Result ─────────────────────────────────────────────────


class ExplainResult(BaseModel):
    """Documentation gathered for one variable of the example file.

    Only ``variable`` and ``found`` are set when the variable is absent.
    """

    model_config = ConfigDict(frozen=True)

    variable: str
    found: bool
    purpose: Optional[str] = None
    comments: Optional[list[str]] = None
    example_value: Optional[str] = None
    inferred_type: Optional[str] = None
