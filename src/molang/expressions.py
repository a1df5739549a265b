"""
Expression tree types for Molang.

Supports:
- Arithmetic: +, -, *, /
- Comparison: ==, !=, <, >, <=, >=
- Logic: &&, ||, !
- Conditionals: cond ? a : b
- Identifiers: pi, query.health
- Function calls: math.max(1, 5, 2)

Nodes are frozen; a tree may be evaluated any number of times.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------


class BinaryOp(StrEnum):
    """Binary operators for expressions."""

    # Arithmetic
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    # Comparison
    EQ = "=="
    NE = "!="
    LT = "<"
    GT = ">"
    LE = "<="
    GE = ">="
    # Logical
    AND = "&&"
    OR = "||"


class UnaryOp(StrEnum):
    """Unary operators for expressions."""

    NEG = "-"
    NOT = "!"


# ---------------------------------------------------------------------------
# AST node types
# ---------------------------------------------------------------------------


class NumberLiteral(BaseModel):
    """A numeric literal."""

    value: float = Field(description="The literal value")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return repr(self.value).removesuffix(".0")


class Identifier(BaseModel):
    """
    Reference to a named constant.

    Examples:
        - Identifier(name="pi") → pi
        - Identifier(name="query.health") → query.health
    """

    name: str = Field(description="Exact, case-sensitive constant name")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.name


class UnaryExpr(BaseModel):
    """Unary operation: op operand."""

    op: UnaryOp
    operand: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.op.value}{self.operand}"


class BinaryExpr(BaseModel):
    """Binary operation: left op right."""

    op: BinaryOp
    left: Expr
    right: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"({self.left} {self.op.value} {self.right})"


class TernaryExpr(BaseModel):
    """Conditional expression: condition ? then_expr : else_expr."""

    condition: Expr = Field(description="Condition, truthy when non-zero")
    then_expr: Expr = Field(description="Value when condition is truthy")
    else_expr: Expr = Field(description="Value when condition is zero")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"({self.condition} ? {self.then_expr} : {self.else_expr})"


class CallExpr(BaseModel):
    """Function call: name(arg1, arg2, ...)."""

    name: str = Field(description="Function name")
    args: tuple[Expr, ...] = Field(default=(), description="Arguments, in order")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        args_str = ", ".join(str(a) for a in self.args)
        return f"{self.name}({args_str})"


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

Expr = NumberLiteral | Identifier | UnaryExpr | BinaryExpr | TernaryExpr | CallExpr

# Rebuild models for recursive forward references
UnaryExpr.model_rebuild()
BinaryExpr.model_rebuild()
TernaryExpr.model_rebuild()
CallExpr.model_rebuild()
