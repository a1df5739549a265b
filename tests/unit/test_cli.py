"""Tests for CLI commands."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from molang.cli import app, format_value


@pytest.fixture
def cli_runner():
    """Return a CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run each test where no stray molang.toml can be picked up."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_eval_arithmetic(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["eval", "2 + 3 * 4"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "14.0"


def test_eval_with_constants(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["eval", "x * y", "--const", "x=3", "-c", "y=0.5"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "1.5"


def test_eval_uses_stdlib_by_default(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["eval", "math.max(1, 5, 2) * 100"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "500.0"


def test_eval_without_stdlib(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["eval", "--no-stdlib", "math.max(1, 5)"])
    assert result.exit_code == 1
    assert "Function not found: `math.max`" in result.output


def test_eval_unknown_variable(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["eval", "foo"])
    assert result.exit_code == 1
    assert "Variable not found: `foo`" in result.output


def test_eval_compile_error(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["eval", "1 +"])
    assert result.exit_code == 1
    assert "Compile error" in result.output
    assert "Expected expression, found end of input" in result.output


def test_eval_division_by_zero(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["eval", "1 / 0"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "inf"


def test_eval_bad_constant(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["eval", "x", "--const", "x"])
    assert result.exit_code != 0
    assert "NAME=VALUE" in result.output


def test_eval_reads_config(cli_runner: CliRunner, isolated_cwd: Path):
    (isolated_cwd / "molang.toml").write_text("[constants]\ng = 10\n\n[repl]\nprecision = 2\n")
    result = cli_runner.invoke(app, ["eval", "g / 4"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "2.50"


def test_eval_invalid_config(cli_runner: CliRunner, tmp_path: Path):
    config = tmp_path / "broken.toml"
    config.write_text('[constants]\nname = "steve"\n')
    result = cli_runner.invoke(app, ["eval", "1", "--config", str(config)])
    assert result.exit_code == 1
    assert "Invalid configuration" in result.output


def test_eval_missing_explicit_config(cli_runner: CliRunner, tmp_path: Path):
    result = cli_runner.invoke(app, ["eval", "1", "--config", str(tmp_path / "nope.toml")])
    assert result.exit_code == 1
    assert "Missing configuration" in result.output


def test_eval_host_function_failure_is_reported(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["eval", "math.max()"])
    assert result.exit_code == 1
    assert "Runtime error" in result.output


def test_tokens_command(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["tokens", "pi * 2"])
    assert result.exit_code == 0
    assert "IDENT" in result.stdout
    assert "STAR" in result.stdout
    assert "EOF" in result.stdout


def test_tokens_lex_error(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["tokens", "1 $ 2"])
    assert result.exit_code == 1
    assert "Unexpected character '$'" in result.output


def test_ast_command(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["ast", "!1 ? 100 : 2 + 3 * 4"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "(!1 ? 100 : (2 + (3 * 4)))"


def test_repl_session(cli_runner: CliRunner):
    session = "pi * 100\n\n1 +\nfoo\nmath.max(3, 9)\nexit\n1 + 1\n"
    result = cli_runner.invoke(app, ["repl", "-c", "pi=3"], input=session)
    assert result.exit_code == 0
    assert "300.0" in result.output
    assert "Compile error" in result.output
    assert "Variable not found: `foo`" in result.output
    assert "9.0" in result.output
    assert "2.0" not in result.output


def test_repl_ends_on_eof(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["repl"], input="2 * 2\n")
    assert result.exit_code == 0
    assert "4.0" in result.output


def test_repl_prompt_is_printed_literally(cli_runner: CliRunner, isolated_cwd: Path):
    (isolated_cwd / "molang.toml").write_text('[repl]\nprompt = "[v]> "\n')
    result = cli_runner.invoke(app, ["repl"], input="1 + 1\n")
    assert result.exit_code == 0
    assert "[v]>" in result.output
    assert "2.0" in result.output

    (isolated_cwd / "molang.toml").write_text('[repl]\nprompt = "[/x] "\n')
    result = cli_runner.invoke(app, ["repl"], input="exit\n")
    assert result.exit_code == 0
    assert "[/x]" in result.output


def test_version(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "molang version" in result.stdout


def test_format_value():
    assert format_value(314.0) == "314.0"
    assert format_value(1 / 3, 3) == "0.333"
