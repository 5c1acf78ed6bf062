"""
envsure — FastAPI Server
========================

Stateless HTTP endpoints for checking and comparing .env content.
Requests carry the file text itself; the server never reads from disk.

Endpoints:
    POST /parse             Parse .env text into a structured document
    POST /check             Check env text against example text
    POST /check/files       Same, from two uploaded files
    POST /diff              Compare two .env texts
    POST /explain           Explain a variable from example text
    GET  /health            Health check / readiness probe

Run:
    uvicorn api:app --reload              # Dev (http://localhost:8000)
    uvicorn api:app --host 0.0.0.0        # Production

Docs:
    http://localhost:8000/docs             # Swagger UI (auto-generated)
    http://localhost:8000/redoc            # ReDoc (alternative)
"""

from __future__ import annotations

import asyncio

from fastapi import FastAPI, HTTPException, UploadFile
from pydantic import BaseModel, Field

from envsure import __version__
from envsure.comparator import check, diff, explain
from envsure.masking import mask_sensitive
from envsure.models import (
    CheckResult,
    DiffResult,
    ExplainResult,
    ParseDiagnostic,
    ParsedEnvFile,
    ValueDifference,
)
from envsure.parser import parse_env_text

_MAX_UPLOAD_BYTES = 1_048_576


# ─── FastAPI App ─────────────────────────────────────────────────────

app = FastAPI(
    title="envsure API",
    description=(
        "Validate and compare .env files. Detects missing, extra, empty, "
        "duplicate and case-mismatched variables, and explains documented "
        "variables from their comments."
    ),
    version=__version__,
)


# ─── Request / Response Schemas ─────────────────────────────────────


class ParseRequest(BaseModel):
    """Request body for the /parse endpoint."""

    text: str = Field(..., description="Raw .env file content.")


class CheckRequest(BaseModel):
    """Request body for the /check endpoint."""

    example_text: str = Field(
        ...,
        description="Content of the example file (source of truth).",
        json_schema_extra={"example": "# Database URL\nDATABASE_URL=postgres://localhost\nPORT=3000\n"},
    )
    env_text: str = Field(
        ...,
        description="Content of the env file to validate.",
        json_schema_extra={"example": "database_url=postgres://prod\nDEBUG=true\n"},
    )


class DiffRequest(BaseModel):
    """Request body for the /diff endpoint."""

    text_a: str
    text_b: str
    include_values: bool = False
    mask_values: bool = Field(
        default=True,
        description="Mask values of keys that look like credentials.",
    )


class ExplainRequest(BaseModel):
    """Request body for the /explain endpoint."""

    example_text: str
    variable: str = Field(..., min_length=1)


class CheckResponse(CheckResult):
    """Check result plus the parse diagnostics of both inputs."""

    example_diagnostics: list[ParseDiagnostic] = Field(default_factory=list)
    env_diagnostics: list[ParseDiagnostic] = Field(default_factory=list)

    model_config = {"json_schema_extra": {"example": {
        "missing": ["PORT"],
        "empty": [],
        "extra": ["DEBUG"],
        "case_mismatches": [{"env_key": "database_url", "example_key": "DATABASE_URL"}],
        "duplicates": [],
        "whitespace_issues": [],
        "error_count": 2,
        "warning_count": 1,
        "is_clean": False,
        "example_diagnostics": [],
        "env_diagnostics": [],
    }}}


class HealthResponse(BaseModel):
    status: str
    version: str


# ─── Helpers ─────────────────────────────────────────────────────────


def _build_check_response(example: ParsedEnvFile, env: ParsedEnvFile) -> CheckResponse:
    result = check(example, env)
    return CheckResponse(
        **result.model_dump(exclude={"is_clean"}),
        example_diagnostics=example.diagnostics,
        env_diagnostics=env.diagnostics,
    )


def _mask_differences(result: DiffResult) -> DiffResult:
    return result.model_copy(update={
        "value_differences": [
            ValueDifference(
                key=d.key,
                value_a=mask_sensitive(d.key, d.value_a),
                value_b=mask_sensitive(d.key, d.value_b),
            )
            for d in result.value_differences
        ]
    })


async def _read_upload(file: UploadFile) -> str:
    if file.size and file.size > _MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=413, detail=f"{file.filename}: file too large (max 1 MB)")

    content = await file.read()
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail=f"{file.filename}: file must be UTF-8 encoded text")


# ─── Endpoints ───────────────────────────────────────────────────────


@app.post("/parse", summary="Parse .env text", tags=["Parsing"])
def parse_text(request: ParseRequest) -> ParsedEnvFile:
    """Return entries, duplicate lines and diagnostics for the given text."""
    return parse_env_text(request.text)


@app.post("/check", summary="Check env text against example text", tags=["Validation"])
def check_text(request: CheckRequest) -> CheckResponse:
    """Validate env content against the example content.

    - **missing** / **case_mismatches** count as errors
    - **empty** / **extra** / **duplicates** / **whitespace_issues** count as warnings
    - **is_clean** is `true` when there are neither
    """
    example = parse_env_text(request.example_text, "example")
    env = parse_env_text(request.env_text, "env")
    return _build_check_response(example, env)


@app.post(
    "/check/files",
    summary="Check an uploaded env file against an uploaded example file",
    tags=["Validation"],
    responses={
        413: {"description": "File too large (max 1 MB)"},
        400: {"description": "File is not valid UTF-8 text"},
    },
)
async def check_files(example: UploadFile, env: UploadFile) -> CheckResponse:
    """Upload the example file and the env file as multipart form fields."""
    example_text = await _read_upload(example)
    env_text = await _read_upload(env)

    example_doc = await asyncio.to_thread(parse_env_text, example_text, example.filename or "example")
    env_doc = await asyncio.to_thread(parse_env_text, env_text, env.filename or "env")
    return _build_check_response(example_doc, env_doc)


@app.post("/diff", summary="Compare two .env texts", tags=["Comparison"])
def diff_text(request: DiffRequest) -> DiffResult:
    """Keys only in A, keys only in B and (optionally) differing values."""
    result = diff(
        parse_env_text(request.text_a, "a"),
        parse_env_text(request.text_b, "b"),
        include_values=request.include_values,
    )
    return _mask_differences(result) if request.mask_values else result


@app.post("/explain", summary="Explain a variable", tags=["Documentation"])
def explain_variable(request: ExplainRequest) -> ExplainResult:
    """Purpose, inferred type and example value of a variable of the example text."""
    return explain(parse_env_text(request.example_text, "example"), request.variable)


@app.get("/health", summary="Health check", tags=["System"])
def health_check() -> HealthResponse:
    """Returns service status and version."""
    return HealthResponse(status="healthy", version=__version__)
