"""
Error types for Molang compilation and evaluation.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class ErrorContext:
    """
    Location of an error inside an expression source.

    Attributes:
        source: The full expression text
        pos: 0-based character offset of the offending token
    """

    source: str
    pos: int

    @property
    def line(self) -> int:
        """Line number (1-indexed)."""
        return self.source.count("\n", 0, self.pos) + 1

    @property
    def column(self) -> int:
        """Column number (1-indexed)."""
        line_start = self.source.rfind("\n", 0, self.pos) + 1
        return self.pos - line_start + 1

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "1:5" followed by the source line and a marker
        """
        line_start = self.source.rfind("\n", 0, self.pos) + 1
        line_end = self.source.find("\n", self.pos)
        if line_end == -1:
            line_end = len(self.source)
        text = self.source[line_start:line_end]

        prefix = f"{self.line:4d} | "
        marker = " " * (len(prefix) + self.column - 1) + "^"
        return f"{self.line}:{self.column}\n{prefix}{text}\n{marker}"


class MolangError(Exception):
    """Base exception for all Molang errors."""

    def __init__(self, message: str, context: Optional[ErrorContext] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


# =============================================================================
# Compile errors
# =============================================================================


class CompileError(MolangError):
    """
    Raised when source text cannot be turned into an expression tree.

    Always carries the offset of the offending input in ``pos``.
    """

    def __init__(self, message: str, pos: int, source: str | None = None):
        self.pos = pos
        context = ErrorContext(source=source, pos=pos) if source is not None else None
        super().__init__(message, context)


class LexError(CompileError):
    """Raised for a character that cannot start or continue any token."""

    def __init__(self, char: str, pos: int, source: str | None = None):
        self.char = char
        super().__init__(f"Unexpected character {char!r} at offset {pos}", pos, source)


class MolangSyntaxError(CompileError):
    """
    Raised when the token sequence does not form a valid expression.

    Examples:
    - Unexpected token
    - Unmatched parenthesis
    - Missing ':' in a ternary
    - Trailing tokens after a complete expression
    - Empty input
    """

    def __init__(
        self,
        found: str,
        expected: str,
        pos: int,
        source: str | None = None,
    ):
        self.found = found
        self.expected = expected
        self.description = f"Expected {expected}, found {found}"
        super().__init__(self.description, pos, source)


# =============================================================================
# Runtime errors
# =============================================================================


class MolangRuntimeError(MolangError):
    """Raised when a compiled expression cannot be evaluated."""

    pass


class UnknownVariableError(MolangRuntimeError):
    """Raised when an identifier is missing from the constants table."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Variable not found: `{name}`")


class InvalidConstantError(MolangRuntimeError):
    """Raised when a constant's value is not a number."""

    def __init__(self, name: str, value: object):
        self.name = name
        super().__init__(
            f"Constant `{name}` is not a number: expected `Number` got `{type(value).__name__}`"
        )


class UnknownFunctionError(MolangRuntimeError):
    """Raised when a call names a function missing from the functions table."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Function not found: `{name}`")


class FunctionError(MolangRuntimeError):
    """
    Raised by a caller-supplied function to report failure.

    The evaluator propagates it unchanged, and wraps any other exception
    a function raises in one.
    """

    pass


class ArgumentError(FunctionError):
    """
    Raised when a function receives the wrong number or kind of arguments.

    Examples:
    - math.clamp called with two arguments
    - math.max called with no arguments
    """

    pass
