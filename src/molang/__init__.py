"""
Molang expression language.

Tokenizer, parser and evaluator for small numeric formulas evaluated
against caller-supplied functions and constants.

Usage:
    from molang import compile, run

    expr = compile("math.max(1, 5, 2) * pi")
    result = run(expr, {"math.max": lambda args: max(args)}, {"pi": 3.0})
    # result == 15.0
"""

from molang.errors import (
    ArgumentError,
    CompileError,
    FunctionError,
    InvalidConstantError,
    LexError,
    MolangError,
    MolangRuntimeError,
    MolangSyntaxError,
    UnknownFunctionError,
    UnknownVariableError,
)
from molang.evaluator import evaluate
from molang.expressions import Expr
from molang.parser import parse_expr
from molang.values import Constants, Functions, MolangFunction, Value


def compile(source: str) -> Expr:
    """Compile expression text into a reusable expression tree.

    Raises:
        CompileError: LexError or MolangSyntaxError at the first defect.
    """
    return parse_expr(source)


def run(
    expr: Expr,
    functions: Functions | None = None,
    constants: Constants | None = None,
) -> Value:
    """Evaluate a compiled expression against one environment.

    Raises:
        MolangRuntimeError: UnknownVariableError, InvalidConstantError,
            UnknownFunctionError or FunctionError.
    """
    return evaluate(expr, functions, constants)


__all__ = [
    "ArgumentError",
    "CompileError",
    "Constants",
    "Expr",
    "FunctionError",
    "Functions",
    "InvalidConstantError",
    "LexError",
    "MolangError",
    "MolangFunction",
    "MolangRuntimeError",
    "MolangSyntaxError",
    "UnknownFunctionError",
    "UnknownVariableError",
    "Value",
    "compile",
    "evaluate",
    "parse_expr",
    "run",
]
