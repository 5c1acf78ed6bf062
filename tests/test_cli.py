"""
Command-line and orchestration tests.

Files are written under pytest's tmp_path; main() is called in-process and
its output captured with capsys.

Run: pytest tests/ -v
"""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from envsure.config import EnvsureSettings, get_settings
from envsure.exceptions import EnvFileMissingError, ParseFailureError, SourceFileMissingError
from envsure.models import CheckResult, DiffResult, ExplainResult
from envsure.pipeline import (
    EnvsurePipeline,
    check_exit_code,
    diff_exit_code,
    explain_exit_code,
)
from main import build_parser, main


EXAMPLE = """\
# Database connection string
DATABASE_URL=postgres://localhost:5432/app

# Max connections
# Keep below the server limit
DB_POOL_SIZE=10

API_KEY=your-key
"""


# ═══════════════════════════════════════════════════════════════════════
# PIPELINE
# ═══════════════════════════════════════════════════════════════════════


class TestPipeline:
    def test_check_reads_both_files(self, write_env):
        example = write_env(".env.example", EXAMPLE)
        env = write_env(".env", "DATABASE_URL=x\nDB_POOL_SIZE=5\n")
        result = EnvsurePipeline().check(env, example)
        assert result.missing == ["API_KEY"]

    def test_check_uses_settings_defaults(self, write_env):
        example = write_env("example.env", "A=1")
        env = write_env("local.env", "A=2")
        settings = EnvsureSettings(env_file=env, example_file=example)
        assert EnvsurePipeline(settings).check().is_clean

    def test_missing_example_is_fatal(self, tmp_path, write_env):
        env = write_env(".env", "A=1")
        with pytest.raises(SourceFileMissingError) as exc_info:
            EnvsurePipeline().check(env, str(tmp_path / ".env.example"))
        assert "source of truth" in exc_info.value.message
        assert exc_info.value.code == "FILE_NOT_FOUND"

    def test_missing_env_is_reported_separately(self, tmp_path, write_env):
        example = write_env(".env.example", "A=1")
        with pytest.raises(EnvFileMissingError) as exc_info:
            EnvsurePipeline().check(str(tmp_path / ".env"), example)
        assert exc_info.value.code == "ENV_FILE_MISSING"

    def test_unreadable_file_is_a_parse_failure(self, tmp_path):
        with pytest.raises(ParseFailureError) as exc_info:
            EnvsurePipeline().load(tmp_path)
        assert exc_info.value.diagnostics[0].code == "FILE_UNREADABLE"

    def test_diff_requires_both_files(self, tmp_path, write_env):
        a = write_env("a.env", "A=1")
        with pytest.raises(SourceFileMissingError):
            EnvsurePipeline().diff(a, str(tmp_path / "b.env"))

    def test_explain_from_file(self, write_env):
        example = write_env(".env.example", EXAMPLE)
        result = EnvsurePipeline().explain("DB_POOL_SIZE", example)
        assert result.purpose == "Max connections Keep below the server limit"


class TestExitCodes:
    def test_errors_fail(self):
        assert check_exit_code(CheckResult(missing=["A"], error_count=1)) == 1

    def test_warnings_pass_unless_strict(self):
        result = CheckResult(extra=["A"], warning_count=1)
        assert check_exit_code(result) == 0
        assert check_exit_code(result, strict=True) == 1

    def test_clean_passes(self):
        assert check_exit_code(CheckResult(), strict=True) == 0

    def test_diff_and_explain(self):
        assert diff_exit_code(DiffResult()) == 0
        assert diff_exit_code(DiffResult(only_in_a=["A"])) == 1
        assert explain_exit_code(ExplainResult(variable="A", found=True)) == 0
        assert explain_exit_code(ExplainResult(variable="A", found=False)) == 1


class TestSettings:
    def test_defaults(self):
        settings = get_settings()
        assert settings.env_file == ".env"
        assert settings.example_file == ".env.example"
        assert settings.strict is False

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("ENVSURE_STRICT", "true")
        monkeypatch.setenv("ENVSURE_EXAMPLE_FILE", ".env.dist")
        settings = get_settings()
        assert settings.strict is True
        assert settings.example_file == ".env.dist"

    def test_log_level_is_case_insensitive(self, monkeypatch):
        monkeypatch.setenv("ENVSURE_LOG_LEVEL", "debug")
        assert get_settings().log_level == "DEBUG"

    def test_invalid_log_level_is_rejected(self, monkeypatch):
        monkeypatch.setenv("ENVSURE_LOG_LEVEL", "bogus")
        with pytest.raises(ValidationError):
            get_settings()

    def test_invalid_log_level_exits_cleanly(self, write_env, monkeypatch, capsys):
        monkeypatch.setenv("ENVSURE_LOG_LEVEL", "bogus")
        example = write_env(".env.example", "A=1")
        env = write_env(".env", "A=1")
        assert main(["--no-color", "check", "-e", env, "-x", example]) == 1
        err = capsys.readouterr().err
        assert "Invalid configuration: ENVSURE_LOG_LEVEL" in err


# ═══════════════════════════════════════════════════════════════════════
# CHECK COMMAND
# ═══════════════════════════════════════════════════════════════════════


class TestCheckCommand:
    def test_clean_run(self, write_env, capsys):
        example = write_env(".env.example", "A=1\nB=2")
        env = write_env(".env", "A=1\nB=3")
        code = main(["--no-color", "check", "-e", env, "-x", example])
        out = capsys.readouterr().out
        assert code == 0
        assert "All variables are correctly defined" in out
        assert "No issues found" in out

    def test_missing_variable_fails(self, write_env, capsys):
        example = write_env(".env.example", "A=1\nSECRET=x")
        env = write_env(".env", "A=1")
        code = main(["--no-color", "check", "--env", env, "--example", example])
        out = capsys.readouterr().out
        assert code == 1
        assert "Missing variables:" in out
        assert "SECRET" in out
        assert "Found 1 error" in out

    def test_case_mismatch_output(self, write_env, capsys):
        example = write_env(".env.example", "DB_URL=x")
        env = write_env(".env", "db_url=y")
        main(["--no-color", "check", "-e", env, "-x", example])
        assert "db_url should be DB_URL" in capsys.readouterr().out

    def test_warnings_fail_only_in_strict_mode(self, write_env, capsys):
        example = write_env(".env.example", "A=1")
        env = write_env(".env", "A=1\nEXTRA=2")
        assert main(["--no-color", "check", "-e", env, "-x", example]) == 0
        assert main(["--no-color", "--strict", "check", "-e", env, "-x", example]) == 1
        assert main(["--no-color", "check", "--strict", "-e", env, "-x", example]) == 1
        out = capsys.readouterr().out
        assert "Extra variables not in example:" in out
        assert "Found 1 warning" in out

    def test_strict_from_environment(self, write_env, monkeypatch, capsys):
        monkeypatch.setenv("ENVSURE_STRICT", "1")
        example = write_env(".env.example", "A=1")
        env = write_env(".env", "A=")
        assert main(["--no-color", "check", "-e", env, "-x", example]) == 1

    def test_missing_example_exits_1(self, tmp_path, write_env, capsys):
        env = write_env(".env", "A=1")
        code = main(["--no-color", "check", "-e", env, "-x", str(tmp_path / "none")])
        assert code == 1
        assert "required as the source of truth" in capsys.readouterr().out

    def test_missing_env_is_a_warning(self, tmp_path, write_env, capsys):
        example = write_env(".env.example", "A=1")
        missing = str(tmp_path / ".env")
        assert main(["--no-color", "check", "-e", missing, "-x", example]) == 0
        assert "nothing to validate" in capsys.readouterr().out
        assert main(["--no-color", "--strict", "check", "-e", missing, "-x", example]) == 1

    def test_missing_env_json(self, tmp_path, write_env, capsys):
        example = write_env(".env.example", "A=1")
        missing = str(tmp_path / ".env")
        main(["--json", "check", "-e", missing, "-x", example])
        data = json.loads(capsys.readouterr().out)
        assert data == {"error": f"Missing {missing}", "warning": True}

    def test_json_output(self, write_env, capsys):
        example = write_env(".env.example", "A=1\nB=\n")
        env = write_env(".env", "a=1\nC=3\n")
        code = main(["--json", "check", "-e", env, "-x", example])
        data = json.loads(capsys.readouterr().out)
        assert code == 1
        assert data["missing"] == ["B"]
        assert data["extra"] == ["C"]
        assert data["case_mismatches"] == [{"env_key": "a", "example_key": "A"}]
        assert data["error_count"] == 2
        assert data["warning_count"] == 1

    def test_color_is_on_by_default(self, write_env, capsys):
        example = write_env(".env.example", "A=1")
        env = write_env(".env", "A=1")
        main(["check", "-e", env, "-x", example])
        assert "\033[" in capsys.readouterr().out

    def test_no_color_has_no_escapes(self, write_env, capsys):
        example = write_env(".env.example", "A=1")
        env = write_env(".env", "A=1")
        main(["--no-color", "check", "-e", env, "-x", example])
        assert "\033[" not in capsys.readouterr().out


# ═══════════════════════════════════════════════════════════════════════
# DIFF COMMAND
# ═══════════════════════════════════════════════════════════════════════


class TestDiffCommand:
    def test_identical_files(self, write_env, capsys):
        a = write_env("a.env", "A=1")
        b = write_env("b.env", "A=1")
        assert main(["--no-color", "diff", a, b]) == 0
        assert "Files are identical" in capsys.readouterr().out

    def test_differences_exit_1(self, write_env, capsys):
        a = write_env("a.env", "A=1\nONLY_A=1")
        b = write_env("b.env", "A=1\nONLY_B=1")
        assert main(["--no-color", "diff", a, b]) == 1
        out = capsys.readouterr().out
        assert "- ONLY_A" in out
        assert "+ ONLY_B" in out
        assert "1 only in" in out

    def test_sensitive_values_are_masked(self, write_env, capsys):
        a = write_env("a.env", "API_KEY=prod-secret-key\nPORT=80")
        b = write_env("b.env", "API_KEY=staging-secret-key\nPORT=8080")
        main(["--no-color", "diff", a, b, "--values"])
        out = capsys.readouterr().out
        assert "prod-secret-key" not in out
        assert "- pr" in out
        assert "- 80" in out
        assert "+ 8080" in out
        assert "2 different values" in out

    def test_missing_file_exits_1(self, tmp_path, write_env, capsys):
        a = write_env("a.env", "A=1")
        assert main(["--no-color", "diff", a, str(tmp_path / "b.env")]) == 1
        assert "File not found" in capsys.readouterr().out

    def test_json_output(self, write_env, capsys):
        a = write_env("a.env", "A=1\nB=2")
        b = write_env("b.env", "A=1\nB=3")
        main(["--json", "diff", "-v", a, b])
        data = json.loads(capsys.readouterr().out)
        assert data == {
            "only_in_a": [],
            "only_in_b": [],
            "value_differences": [{"key": "B", "value_a": "2", "value_b": "3"}],
        }


# ═══════════════════════════════════════════════════════════════════════
# EXPLAIN COMMAND
# ═══════════════════════════════════════════════════════════════════════


class TestExplainCommand:
    def test_documented_variable(self, write_env, capsys):
        example = write_env(".env.example", EXAMPLE)
        assert main(["--no-color", "explain", "DB_POOL_SIZE", "-x", example]) == 0
        out = capsys.readouterr().out
        assert "Purpose: Max connections Keep below the server limit" in out
        assert "Expected type: integer" in out
        assert "Example: 10" in out
        assert "Documentation:" in out

    def test_undocumented_variable(self, write_env, capsys):
        example = write_env(".env.example", EXAMPLE)
        main(["--no-color", "explain", "API_KEY", "-x", example])
        assert "No description available" in capsys.readouterr().out

    def test_unknown_variable_exits_1(self, write_env, capsys):
        example = write_env(".env.example", EXAMPLE)
        assert main(["--no-color", "explain", "NOPE", "-x", example]) == 1
        assert "not found in" in capsys.readouterr().out

    def test_json_omits_unset_fields(self, write_env, capsys):
        example = write_env(".env.example", EXAMPLE)
        main(["--json", "explain", "NOPE", "-x", example])
        assert json.loads(capsys.readouterr().out) == {"variable": "NOPE", "found": False}

    def test_missing_example_exits_1(self, tmp_path, capsys):
        assert main(["--no-color", "explain", "A", "-x", str(tmp_path / "none")]) == 1
        assert "File not found" in capsys.readouterr().out


class TestArgumentParsing:
    def test_global_flags_before_and_after_command(self):
        parser = build_parser()
        before = parser.parse_args(["--json", "diff", "a", "b"])
        after = parser.parse_args(["diff", "a", "b", "--json"])
        assert before.json is True
        assert after.json is True

    def test_command_is_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])
