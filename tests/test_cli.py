"""
txrc Command-Line Test Suite
============================

Tests for the txrc tool using click's CliRunner.
"""

import sys

import pytest
from click.testing import CliRunner

from txr.cli.txrc import main, render_stage
from txr.cli.errors import ExitCode
from txr.config import STAGE_TOKENS
from txr.lexer import tokenize


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    monkeypatch.delenv("TXR_VERBOSE", raising=False)
    monkeypatch.delenv("TXR_SHOW_SOURCE", raising=False)


# =============================================================================
# Evaluation Tests
# =============================================================================

class TestEvaluation:
    """Tests for printing results."""

    def test_expression(self, runner):
        result = runner.invoke(main, ["2 * (5 + 5) - 1"])
        assert result.exit_code == 0, result.output
        assert result.output == "19\n"

    def test_fractional_result(self, runner):
        result = runner.invoke(main, ["5 / 2"])
        assert result.output == "2.5\n"

    def test_leading_minus_after_separator(self, runner):
        result = runner.invoke(main, ["--", "-(1 + 2)"])
        assert result.exit_code == 0, result.output
        assert result.output == "-3\n"

    def test_expression_from_file(self, runner):
        with runner.isolated_filesystem():
            with open("expr.txr", "w") as f:
                f.write("7 mod 4\n")
            result = runner.invoke(main, ["-f", "expr.txr"])
        assert result.exit_code == 0, result.output
        assert result.output == "3\n"

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "1.0.0" in result.output


# =============================================================================
# Stage Listing Tests
# =============================================================================

class TestStageListings:
    """Tests for --tokens, --ast, --bytecode and -v."""

    def test_tokens(self, runner):
        result = runner.invoke(main, ["--tokens", "8 - 3"])
        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == [
            "TOKENS:",
            "  NUMBER ( 8 )",
            "  SUBTRACT",
            "  NUMBER ( 3 )",
            "  END OF FILE",
            "5",
        ]

    def test_ast(self, runner):
        result = runner.invoke(main, ["--ast", "--", "-x"])
        assert "AST:\n  NEGATE @0\n    IDENTIFIER x @1\n" in result.output

    def test_bytecode(self, runner):
        result = runner.invoke(main, ["--bytecode", "--", "-(1 + 2)"])
        assert result.exit_code == 0, result.output
        assert "BYTECODE:" in result.output
        assert "  3: Add A to B" in result.output
        assert "Negate the value on top of the stack" in result.output
        assert result.output.splitlines()[-1] == "-3"

    def test_only_requested_stages(self, runner):
        result = runner.invoke(main, ["--ast", "1"])
        assert "TOKENS:" not in result.output
        assert "BYTECODE:" not in result.output

    def test_verbose_shows_all_stages(self, runner):
        result = runner.invoke(main, ["-v", "1 + 1"])
        assert result.exit_code == 0, result.output
        for title in ("TOKENS:", "AST:", "BYTECODE:"):
            assert title in result.output

    def test_render_stage(self):
        assert render_stage(STAGE_TOKENS, tokenize("")) == "TOKENS:\n  END OF FILE"


# =============================================================================
# Error Tests
# =============================================================================

class TestErrors:
    """Tests for exit codes and error output."""

    def test_syntax_error(self, runner):
        result = runner.invoke(main, ["(2 + 3"])
        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "Expected a ')' at position <EOF>" in result.output

    def test_lex_error_shows_caret(self, runner):
        result = runner.invoke(main, ["2 & 3"])
        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "    2 & 3\n      ^" in result.output

    def test_identifier_error(self, runner):
        result = runner.invoke(main, ["x * 0"])
        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "Variables are not yet implemented" in result.output

    @pytest.mark.skipif(
        getattr(sys, "get_int_max_str_digits", lambda: 0)() == 0,
        reason="no int conversion limit",
    )
    def test_result_too_long_to_print(self, runner):
        result = runner.invoke(main, ["9" * 3000 + " * " + "9" * 3000])
        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "too many digits" in result.output

    def test_deep_nesting(self, runner):
        result = runner.invoke(main, ["(" * 3000 + "1" + ")" * 3000])
        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "Expression nested too deeply" in result.output

    def test_missing_expression(self, runner):
        result = runner.invoke(main, [])
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_expression_and_file(self, runner):
        with runner.isolated_filesystem():
            with open("expr.txr", "w") as f:
                f.write("1")
            result = runner.invoke(main, ["-f", "expr.txr", "2"])
        assert result.exit_code == ExitCode.INVALID_ARGS
        assert "exactly one" in result.output

    def test_missing_file(self, runner):
        result = runner.invoke(main, ["-f", "does-not-exist.txr"])
        assert result.exit_code == 2
