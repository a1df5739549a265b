"""
Built-in ``math.*`` functions and constants.

Nothing here is registered globally; callers merge the returned tables
into their own environment:

    functions = {**math_functions(), "my_fn": my_fn}
    run(compile("math.clamp(x, 0, 1)"), functions, {"x": 2.5})

Angles are in degrees. Numeric domain errors yield NaN or an infinity
instead of raising, matching division by zero in the evaluator.
"""

from __future__ import annotations

import math

from molang.errors import ArgumentError
from molang.values import MolangFunction, Value, expect_arity, expect_number


def _unary(name: str, fn) -> MolangFunction:
    def call(args: list[Value]) -> Value:
        (x,) = expect_arity(args, 1, function=name)
        return fn(x)

    call.__name__ = name
    return call


def _binary(name: str, fn) -> MolangFunction:
    def call(args: list[Value]) -> Value:
        a, b = expect_arity(args, 2, function=name)
        return fn(a, b)

    call.__name__ = name
    return call


def _rounding(fn):
    # floor/ceil reject inf and nan; pass them through unchanged
    def call(x: Value) -> Value:
        if not math.isfinite(x):
            return x
        return float(fn(x))

    return call


def _round_half_away(x: Value) -> Value:
    # modf is exact; adding 0.5 first would round 0.49999999999999994 up
    frac, whole = math.modf(abs(x))
    if frac >= 0.5:
        whole += 1.0
    return math.copysign(whole, x)


def _sqrt(x: Value) -> Value:
    return math.sqrt(x) if x >= 0 else math.nan


def _ln(x: Value) -> Value:
    if x == 0:
        return -math.inf
    if x < 0 or math.isnan(x):
        return math.nan
    return math.log(x)


def _exp(x: Value) -> Value:
    try:
        return math.exp(x)
    except OverflowError:
        return math.inf


def _pow(base: Value, exponent: Value) -> Value:
    if base == 0 and exponent < 0:
        return math.inf
    try:
        return math.pow(base, exponent)
    except ValueError:
        return math.nan
    except OverflowError:
        return math.inf


def _mod(a: Value, b: Value) -> Value:
    if b == 0 or math.isinf(a):
        return math.nan
    return math.fmod(a, b)


def _trig(fn):
    def call(degrees: Value) -> Value:
        if not math.isfinite(degrees):
            return math.nan
        return fn(math.radians(degrees))

    return call


def _atan2(y: Value, x: Value) -> Value:
    return math.degrees(math.atan2(y, x))


def _variadic(name: str, pick) -> MolangFunction:
    def call(args: list[Value]) -> Value:
        if not args:
            raise ArgumentError(f"No arguments passed to {name}")
        return pick(expect_number(a, function=name, position=i + 1) for i, a in enumerate(args))

    call.__name__ = name
    return call


def _clamp(args: list[Value]) -> Value:
    value, low, high = expect_arity(args, 3, function="math.clamp")
    return min(max(value, low), high)


def _lerp(args: list[Value]) -> Value:
    start, end, t = expect_arity(args, 3, function="math.lerp")
    return start + (end - start) * t


def math_functions() -> dict[str, MolangFunction]:
    """Return a fresh table of the built-in ``math.*`` functions."""
    return {
        "math.abs": _unary("math.abs", abs),
        "math.ceil": _unary("math.ceil", _rounding(math.ceil)),
        "math.floor": _unary("math.floor", _rounding(math.floor)),
        "math.round": _unary("math.round", _rounding(_round_half_away)),
        "math.trunc": _unary("math.trunc", _rounding(math.trunc)),
        "math.sqrt": _unary("math.sqrt", _sqrt),
        "math.exp": _unary("math.exp", _exp),
        "math.ln": _unary("math.ln", _ln),
        "math.sin": _unary("math.sin", _trig(math.sin)),
        "math.cos": _unary("math.cos", _trig(math.cos)),
        "math.pow": _binary("math.pow", _pow),
        "math.mod": _binary("math.mod", _mod),
        "math.atan2": _binary("math.atan2", _atan2),
        "math.min": _variadic("math.min", min),
        "math.max": _variadic("math.max", max),
        "math.clamp": _clamp,
        "math.lerp": _lerp,
    }


def math_constants() -> dict[str, Value]:
    """Return a fresh table of the built-in ``math.*`` constants."""
    return {"math.pi": math.pi}
