"""
Expression evaluator for Molang.

Evaluates expression AST nodes against a functions table and a constants
table supplied by the caller. Never mutates the tree or the tables; the
only side effects are those of the caller's functions.
"""

from __future__ import annotations

import logging
import math

from molang.errors import (
    FunctionError,
    InvalidConstantError,
    MolangError,
    UnknownFunctionError,
    UnknownVariableError,
)
from molang.expressions import (
    BinaryExpr,
    BinaryOp,
    CallExpr,
    Expr,
    Identifier,
    NumberLiteral,
    TernaryExpr,
    UnaryExpr,
    UnaryOp,
)
from molang.values import Constants, Functions, Value, from_bool, to_value, truthy

logger = logging.getLogger(__name__)


def evaluate(
    expr: Expr,
    functions: Functions | None = None,
    constants: Constants | None = None,
) -> Value:
    """Evaluate an expression tree.

    Args:
        expr: Parsed expression AST.
        functions: Function name -> callable taking a list of Values.
        constants: Constant name -> Value.

    Returns:
        The computed value.

    Raises:
        UnknownVariableError: If an identifier is not in ``constants``.
        InvalidConstantError: If a referenced constant is not a number.
        UnknownFunctionError: If a call names a function not in ``functions``.
        FunctionError: If a called function fails or returns a non-number.
    """
    return _interpret(expr, functions or {}, constants or {})


def _interpret(expr: Expr, functions: Functions, constants: Constants) -> Value:
    """Dispatch evaluation to the appropriate handler."""
    if isinstance(expr, NumberLiteral):
        return expr.value

    if isinstance(expr, Identifier):
        if expr.name not in constants:
            raise UnknownVariableError(expr.name)
        value = constants[expr.name]
        if not isinstance(value, (bool, int, float)):
            raise InvalidConstantError(expr.name, value)
        return float(value)

    if isinstance(expr, BinaryExpr):
        return _interpret_binary(expr, functions, constants)

    if isinstance(expr, UnaryExpr):
        return _interpret_unary(expr, functions, constants)

    if isinstance(expr, TernaryExpr):
        if truthy(_interpret(expr.condition, functions, constants)):
            return _interpret(expr.then_expr, functions, constants)
        return _interpret(expr.else_expr, functions, constants)

    if isinstance(expr, CallExpr):
        return _interpret_call(expr, functions, constants)

    raise TypeError(f"Unknown expression type: {type(expr).__name__}")


def _interpret_binary(expr: BinaryExpr, functions: Functions, constants: Constants) -> Value:
    """Evaluate a binary expression."""
    # Short-circuit for logical operators
    if expr.op == BinaryOp.AND:
        if not truthy(_interpret(expr.left, functions, constants)):
            return from_bool(False)
        return from_bool(truthy(_interpret(expr.right, functions, constants)))

    if expr.op == BinaryOp.OR:
        if truthy(_interpret(expr.left, functions, constants)):
            return from_bool(True)
        return from_bool(truthy(_interpret(expr.right, functions, constants)))

    left = _interpret(expr.left, functions, constants)
    right = _interpret(expr.right, functions, constants)

    # Arithmetic
    if expr.op == BinaryOp.ADD:
        return left + right
    if expr.op == BinaryOp.SUB:
        return left - right
    if expr.op == BinaryOp.MUL:
        return left * right
    if expr.op == BinaryOp.DIV:
        return divide(left, right)

    # Comparison
    if expr.op == BinaryOp.EQ:
        return from_bool(left == right)
    if expr.op == BinaryOp.NE:
        return from_bool(left != right)
    if expr.op == BinaryOp.LT:
        return from_bool(left < right)
    if expr.op == BinaryOp.GT:
        return from_bool(left > right)
    if expr.op == BinaryOp.LE:
        return from_bool(left <= right)
    if expr.op == BinaryOp.GE:
        return from_bool(left >= right)

    raise ValueError(f"Unknown binary op: {expr.op}")


def divide(left: Value, right: Value) -> Value:
    """IEEE-754 division: x/0 is a signed infinity, 0/0 is NaN."""
    if right == 0.0:
        if left == 0.0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


def _interpret_unary(expr: UnaryExpr, functions: Functions, constants: Constants) -> Value:
    """Evaluate a unary expression."""
    val = _interpret(expr.operand, functions, constants)
    if expr.op == UnaryOp.NOT:
        return from_bool(not truthy(val))
    if expr.op == UnaryOp.NEG:
        return -val
    raise ValueError(f"Unknown unary op: {expr.op}")


def _interpret_call(expr: CallExpr, functions: Functions, constants: Constants) -> Value:
    """Evaluate the arguments left to right, then dispatch to the named function."""
    args = [_interpret(a, functions, constants) for a in expr.args]

    function = functions.get(expr.name)
    if function is None:
        raise UnknownFunctionError(expr.name)

    logger.debug("Calling %s with %d argument(s)", expr.name, len(args))
    try:
        result = function(args)
    except MolangError:
        raise
    except Exception as e:
        logger.debug("%s raised %s", expr.name, type(e).__name__)
        raise FunctionError(f"{expr.name}: {e}") from e

    try:
        return to_value(result)
    except FunctionError as e:
        raise FunctionError(f"{expr.name} returned a non-numeric result: {e.message}") from e
