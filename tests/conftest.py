"""Shared pytest fixtures for molang tests."""

import pytest

from molang.errors import FunctionError
from molang.values import Value


def _max(args: list[Value]) -> Value:
    if not args:
        raise FunctionError("No arguments passed to max")
    return max(args)


@pytest.fixture
def functions() -> dict:
    """Return a small functions table."""
    return {"max": _max}


@pytest.fixture
def constants() -> dict[str, Value]:
    """Return a small constants table."""
    return {"pi": 3.14, "zero": 0.0, "one": 1.0}
