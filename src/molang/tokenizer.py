"""
Tokenizer for Molang expressions.

Converts an expression string into a lazy sequence of typed tokens,
terminated by a single EOF token.
"""

from __future__ import annotations

import re
from collections.abc import Generator, Iterator
from enum import StrEnum, auto

from molang.errors import LexError


class TokenKind(StrEnum):
    """Token types for the expression language."""

    # Literals
    NUMBER = auto()

    # Identifiers (possibly dotted: math.max)
    IDENT = auto()

    # Operators
    BANG = auto()
    QUESTION = auto()
    COLON = auto()
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    LT = auto()
    LE = auto()
    GT = auto()
    GE = auto()
    EQ = auto()
    NE = auto()
    AND = auto()  # &&
    OR = auto()  # ||

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()
    COMMA = auto()

    # End of input
    EOF = auto()


class Token:
    """A single token from the expression tokenizer."""

    __slots__ = ("kind", "value", "pos")

    def __init__(self, kind: TokenKind, value: float | str, pos: int) -> None:
        self.kind = kind
        self.value = value
        self.pos = pos

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.value!r}, pos={self.pos})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return (self.kind, self.value, self.pos) == (other.kind, other.value, other.pos)

    def __hash__(self) -> int:
        return hash((self.kind, self.value, self.pos))

    def describe(self) -> str:
        """Human-readable name used in syntax errors."""
        if self.kind == TokenKind.EOF:
            return "end of input"
        if self.kind == TokenKind.NUMBER:
            return f"number {self.value:g}"
        if self.kind == TokenKind.IDENT:
            return f"identifier {self.value!r}"
        return repr(self.value)


_TWO_CHAR: dict[str, TokenKind] = {
    "<=": TokenKind.LE,
    ">=": TokenKind.GE,
    "==": TokenKind.EQ,
    "!=": TokenKind.NE,
    "&&": TokenKind.AND,
    "||": TokenKind.OR,
}

_SINGLE_CHAR: dict[str, TokenKind] = {
    "!": TokenKind.BANG,
    "?": TokenKind.QUESTION,
    ":": TokenKind.COLON,
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "<": TokenKind.LT,
    ">": TokenKind.GT,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    ",": TokenKind.COMMA,
}

# Digits with optional "_" separators and at most one decimal point
_NUMBER_RE = re.compile(r"[0-9][0-9_]*(\.[0-9_]*)?")
# Identifier segment: letter or underscore followed by alphanumerics/underscores
_IDENT_RE = re.compile(r"[a-zA-Z_][a-zA-Z0-9_]*")


def iter_tokens(source: str) -> Iterator[Token]:
    """Lazily tokenize an expression string.

    Raises:
        LexError: On the first character that matches no token.
    """
    i = 0
    n = len(source)

    while i < n:
        c = source[i]

        # Skip whitespace
        if c.isspace():
            i += 1
            continue

        m = _NUMBER_RE.match(source, i)
        if m:
            end = m.end()
            if end < n and source[end] == ".":
                raise LexError(".", end, source)
            yield Token(TokenKind.NUMBER, float(m.group(0).replace("_", "")), i)
            i = end
            continue

        if _IDENT_RE.match(source, i):
            i = yield from _read_identifier(source, i)
            continue

        two = source[i : i + 2]
        if two in _TWO_CHAR:
            yield Token(_TWO_CHAR[two], two, i)
            i += 2
            continue

        if c in _SINGLE_CHAR:
            yield Token(_SINGLE_CHAR[c], c, i)
            i += 1
            continue

        raise LexError(c, i, source)

    yield Token(TokenKind.EOF, "", n)


def _read_identifier(source: str, start: int) -> Generator[Token, None, int]:
    """Read a possibly dotted identifier; returns the offset after it."""
    m = _IDENT_RE.match(source, start)
    assert m is not None
    end = m.end()

    while end < len(source) and source[end] == ".":
        segment = _IDENT_RE.match(source, end + 1)
        if segment is None:
            raise LexError(".", end, source)
        end = segment.end()

    yield Token(TokenKind.IDENT, source[start:end], start)
    return end


def tokenize(source: str) -> list[Token]:
    """Tokenize an expression string into a list of tokens."""
    return list(iter_tokens(source))
