"""
Runtime values and the function capability for Molang.

Every value is a float. Comparisons and logical operators produce
1.0 for true and 0.0 for false; any non-zero number counts as true.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from molang.errors import ArgumentError, FunctionError

Value = float

TRUE: Value = 1.0
FALSE: Value = 0.0


class MolangFunction(Protocol):
    """A caller-supplied function: takes the evaluated arguments, returns a Value.

    Implementations report failure by raising FunctionError.
    """

    def __call__(self, args: list[Value], /) -> Any: ...


Functions = Mapping[str, MolangFunction]
Constants = Mapping[str, Value]


def truthy(value: Value) -> bool:
    """Non-zero numbers are true."""
    return value != 0.0


def from_bool(flag: bool) -> Value:
    return TRUE if flag else FALSE


def to_value(obj: Any) -> Value:
    """Convert a host result into a Value.

    Raises:
        FunctionError: If the object is not a bool, int or float.
    """
    if isinstance(obj, bool):
        return from_bool(obj)
    if isinstance(obj, (int, float)):
        return float(obj)
    raise FunctionError(f"Type error: expected `Number` got `{type(obj).__name__}`")


def expect_number(value: Any, *, function: str, position: int) -> Value:
    """Check one argument of a function call.

    Args:
        value: The argument as received
        function: Function name, for the error message
        position: 1-based argument position, for the error message

    Raises:
        ArgumentError: If the argument is not a number.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ArgumentError(
            f"{function}: argument {position} expected `Number` got `{type(value).__name__}`"
        )
    return float(value)


def expect_arity(args: Sequence[Any], count: int, *, function: str) -> list[Value]:
    """Check the argument count of a call and that every argument is a number."""
    if len(args) != count:
        plural = "argument" if count == 1 else "arguments"
        raise ArgumentError(f"{function} takes exactly {count} {plural} ({len(args)} given)")
    return [expect_number(a, function=function, position=i + 1) for i, a in enumerate(args)]
