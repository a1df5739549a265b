"""
Molang command-line interface.

Commands:
- eval:   Compile and evaluate one expression
- tokens: Show the token stream of an expression
- ast:    Show the parsed expression tree
- repl:   Interactive read-eval-print loop
"""

from __future__ import annotations

import logging
import platform
import tomllib
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from molang import compile, run
from molang._version import get_version
from molang.config import MolangConfig, load_config
from molang.errors import CompileError, MolangRuntimeError
from molang.stdlib import math_constants, math_functions
from molang.tokenizer import tokenize
from molang.values import Constants, Functions, MolangFunction, Value

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="Molang expression compiler and evaluator.",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)

_REPL_EXIT_WORDS = {"exit", "quit"}


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"molang version {get_version()}")
        typer.echo(f"  Python: {platform.python_implementation()} {platform.python_version()}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
) -> None:
    """Molang CLI main callback for global options."""
    ctx.obj = {"verbose": verbose}


# =============================================================================
# Helpers
# =============================================================================


def _report(label: str, message: str) -> None:
    err_console.print(f"[red]{label}:[/red] {escape(message)}", highlight=False, soft_wrap=True)


def _load(ctx: typer.Context, config_path: Path | None) -> MolangConfig:
    """Load configuration and configure logging from it."""
    try:
        config = load_config(config_path)
    except FileNotFoundError as e:
        _report("Missing configuration", str(e))
        raise typer.Exit(code=1)
    except (tomllib.TOMLDecodeError, ValidationError) as e:
        _report("Invalid configuration", str(e))
        raise typer.Exit(code=1)

    verbose = bool(ctx.obj and ctx.obj.get("verbose"))
    logging.basicConfig(
        level=logging.DEBUG if verbose else config.log_level_value,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logger.debug("Loaded configuration: %s", config)
    return config


def _parse_const(raw: str) -> tuple[str, float]:
    """Parse a NAME=VALUE command-line constant."""
    name, sep, value = raw.partition("=")
    name = name.strip()
    if not sep or not name:
        raise typer.BadParameter(f"Expected NAME=VALUE, got {raw!r}")
    try:
        return name, float(value)
    except ValueError:
        raise typer.BadParameter(f"Constant {name!r} is not a number: {value!r}") from None


def _build_environment(
    config: MolangConfig,
    consts: list[str],
    stdlib: bool | None,
) -> tuple[Functions, Constants]:
    """Combine built-ins, configured constants and command-line constants."""
    functions: dict[str, MolangFunction] = {}
    constants: dict[str, Value] = {}

    if config.stdlib if stdlib is None else stdlib:
        functions.update(math_functions())
        constants.update(math_constants())

    constants.update(config.constants)
    constants.update(_parse_const(raw) for raw in consts)
    return functions, constants


def format_value(value: Value, precision: int | None = None) -> str:
    if precision is None:
        return repr(value)
    return f"{value:.{precision}f}"


def _evaluate_source(
    source: str,
    functions: Functions,
    constants: Constants,
    precision: int | None,
) -> bool:
    """Compile and run one expression, printing the result or the error."""
    try:
        expr = compile(source)
    except CompileError as e:
        _report("Compile error", str(e))
        return False

    try:
        value = run(expr, functions, constants)
    except MolangRuntimeError as e:
        _report("Runtime error", e.message)
        return False

    console.print(format_value(value, precision), highlight=False, soft_wrap=True)
    return True


# =============================================================================
# Commands
# =============================================================================


@app.command(name="eval")
def eval_command(
    ctx: typer.Context,
    expression: str = typer.Argument(..., help="Expression to evaluate"),
    const: list[str] = typer.Option(  # noqa: B008
        [],
        "--const",
        "-c",
        help="Constant as NAME=VALUE (repeatable)",
    ),
    config_path: Path | None = typer.Option(  # noqa: B008
        None,
        "--config",
        help="Path to molang.toml (default: ./molang.toml)",
    ),
    stdlib: bool | None = typer.Option(
        None,
        "--stdlib/--no-stdlib",
        help="Register the math.* built-ins (default: from config)",
    ),
) -> None:
    """Compile and evaluate one expression."""
    config = _load(ctx, config_path)
    functions, constants = _build_environment(config, const, stdlib)

    if not _evaluate_source(expression, functions, constants, config.repl.precision):
        raise typer.Exit(code=1)


@app.command(name="tokens")
def tokens_command(
    expression: str = typer.Argument(..., help="Expression to tokenize"),
) -> None:
    """Show the token stream of an expression."""
    try:
        tokens = tokenize(expression)
    except CompileError as e:
        _report("Compile error", str(e))
        raise typer.Exit(code=1)

    table = Table(title="Tokens")
    table.add_column("Kind", style="cyan")
    table.add_column("Value")
    table.add_column("Pos", justify="right")
    for tok in tokens:
        table.add_row(tok.kind.name, str(tok.value), str(tok.pos))
    console.print(table)


@app.command(name="ast")
def ast_command(
    expression: str = typer.Argument(..., help="Expression to parse"),
) -> None:
    """Show the parsed expression tree, fully parenthesised."""
    try:
        expr = compile(expression)
    except CompileError as e:
        _report("Compile error", str(e))
        raise typer.Exit(code=1)

    console.print(str(expr), highlight=False, markup=False)


@app.command(name="repl")
def repl_command(
    ctx: typer.Context,
    const: list[str] = typer.Option(  # noqa: B008
        [],
        "--const",
        "-c",
        help="Constant as NAME=VALUE (repeatable)",
    ),
    config_path: Path | None = typer.Option(  # noqa: B008
        None,
        "--config",
        help="Path to molang.toml (default: ./molang.toml)",
    ),
    stdlib: bool | None = typer.Option(
        None,
        "--stdlib/--no-stdlib",
        help="Register the math.* built-ins (default: from config)",
    ),
) -> None:
    """
    Start an interactive session.

    Each line is compiled and evaluated on its own. Type 'exit' or press
    Ctrl-D to leave.
    """
    config = _load(ctx, config_path)
    functions, constants = _build_environment(config, const, stdlib)

    console.print("molang REPL:", highlight=False, soft_wrap=True)
    while True:
        try:
            line = console.input(f"[cyan]{escape(config.repl.prompt)}[/cyan]")
        except (EOFError, KeyboardInterrupt):
            console.print()
            break

        source = line.strip()
        if not source:
            continue
        if source in _REPL_EXIT_WORDS:
            break
        _evaluate_source(source, functions, constants, config.repl.precision)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
