"""
Recursive descent parser for Molang expressions.

Grammar (precedence low to high):
    expr        → ternary
    ternary     → or_expr ("?" ternary ":" ternary)?
    or_expr     → and_expr ("||" and_expr)*
    and_expr    → equality ("&&" equality)*
    equality    → relational (("==" | "!=") relational)*
    relational  → additive (("<" | "<=" | ">" | ">=") additive)*
    additive    → multiply (("+" | "-") multiply)*
    multiply    → unary (("*" | "/") unary)*
    unary       → ("!" | "-") unary | primary
    primary     → NUMBER | func_call | IDENT | "(" expr ")"
    func_call   → IDENT "(" (expr ("," expr)*)? ")"
"""

from __future__ import annotations

from collections.abc import Callable, Iterator

from molang.errors import MolangSyntaxError
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
from molang.tokenizer import Token, TokenKind, iter_tokens

_EQUALITY_OPS: dict[TokenKind, BinaryOp] = {
    TokenKind.EQ: BinaryOp.EQ,
    TokenKind.NE: BinaryOp.NE,
}

_RELATIONAL_OPS: dict[TokenKind, BinaryOp] = {
    TokenKind.LT: BinaryOp.LT,
    TokenKind.LE: BinaryOp.LE,
    TokenKind.GT: BinaryOp.GT,
    TokenKind.GE: BinaryOp.GE,
}

_ADDITIVE_OPS: dict[TokenKind, BinaryOp] = {
    TokenKind.PLUS: BinaryOp.ADD,
    TokenKind.MINUS: BinaryOp.SUB,
}

_MULTIPLY_OPS: dict[TokenKind, BinaryOp] = {
    TokenKind.STAR: BinaryOp.MUL,
    TokenKind.SLASH: BinaryOp.DIV,
}


class _Parser:
    """Recursive descent parser over a lazy token stream."""

    def __init__(self, tokens: Iterator[Token], source: str | None = None) -> None:
        self._tokens = tokens
        self._buffer: list[Token] = []
        self.source = source

    @property
    def current(self) -> Token:
        return self.peek()

    def peek(self, offset: int = 0) -> Token:
        while len(self._buffer) <= offset:
            if self._buffer and self._buffer[-1].kind == TokenKind.EOF:
                return self._buffer[-1]
            self._buffer.append(next(self._tokens))
        return self._buffer[offset]

    def advance(self) -> Token:
        tok = self.peek()
        if tok.kind != TokenKind.EOF:
            self._buffer.pop(0)
        return tok

    def expect(self, kind: TokenKind, expected: str) -> Token:
        tok = self.current
        if tok.kind != kind:
            raise self.error(expected)
        return self.advance()

    def match(self, *kinds: TokenKind) -> Token | None:
        if self.current.kind in kinds:
            return self.advance()
        return None

    def error(self, expected: str) -> MolangSyntaxError:
        tok = self.current
        return MolangSyntaxError(tok.describe(), expected, tok.pos, self.source)

    # -- Grammar rules --

    def parse_expr(self) -> Expr:
        """Top-level: ternary."""
        return self.parse_ternary()

    def parse_ternary(self) -> Expr:
        """or_expr ('?' ternary ':' ternary)?"""
        condition = self.parse_or_expr()
        if not self.match(TokenKind.QUESTION):
            return condition

        then_expr = self.parse_ternary()
        self.expect(TokenKind.COLON, "':' in conditional expression")
        else_expr = self.parse_ternary()
        return TernaryExpr(condition=condition, then_expr=then_expr, else_expr=else_expr)

    def parse_or_expr(self) -> Expr:
        """and_expr ('||' and_expr)*"""
        left = self.parse_and_expr()
        while self.match(TokenKind.OR):
            right = self.parse_and_expr()
            left = BinaryExpr(op=BinaryOp.OR, left=left, right=right)
        return left

    def parse_and_expr(self) -> Expr:
        """equality ('&&' equality)*"""
        left = self.parse_equality()
        while self.match(TokenKind.AND):
            right = self.parse_equality()
            left = BinaryExpr(op=BinaryOp.AND, left=left, right=right)
        return left

    def parse_equality(self) -> Expr:
        return self._parse_binary_level(_EQUALITY_OPS, self.parse_relational)

    def parse_relational(self) -> Expr:
        return self._parse_binary_level(_RELATIONAL_OPS, self.parse_additive)

    def parse_additive(self) -> Expr:
        return self._parse_binary_level(_ADDITIVE_OPS, self.parse_multiply)

    def parse_multiply(self) -> Expr:
        return self._parse_binary_level(_MULTIPLY_OPS, self.parse_unary)

    def _parse_binary_level(
        self, ops: dict[TokenKind, BinaryOp], operand: Callable[[], Expr]
    ) -> Expr:
        """Left-associative chain of one precedence level."""
        left = operand()
        while self.current.kind in ops:
            op = ops[self.advance().kind]
            right = operand()
            left = BinaryExpr(op=op, left=left, right=right)
        return left

    def parse_unary(self) -> Expr:
        """('!' | '-') unary | primary"""
        if self.match(TokenKind.BANG):
            return UnaryExpr(op=UnaryOp.NOT, operand=self.parse_unary())
        if self.match(TokenKind.MINUS):
            return UnaryExpr(op=UnaryOp.NEG, operand=self.parse_unary())
        return self.parse_primary()

    def parse_primary(self) -> Expr:
        """NUMBER | func_call | IDENT | '(' expr ')'"""
        tok = self.current

        # Parenthesized expression
        if tok.kind == TokenKind.LPAREN:
            self.advance()
            expr = self.parse_expr()
            self.expect(TokenKind.RPAREN, "')'")
            return expr

        if tok.kind == TokenKind.NUMBER:
            self.advance()
            return NumberLiteral(value=tok.value)

        # Identifier: could be function call or plain reference
        if tok.kind == TokenKind.IDENT:
            if self.peek(1).kind == TokenKind.LPAREN:
                return self._parse_func_call()
            self.advance()
            return Identifier(name=tok.value)

        raise self.error("expression")

    def _parse_func_call(self) -> CallExpr:
        """IDENT '(' (expr (',' expr)*)? ')'"""
        name_tok = self.expect(TokenKind.IDENT, "function name")
        self.expect(TokenKind.LPAREN, "'('")

        args: list[Expr] = []
        if self.current.kind != TokenKind.RPAREN:
            args.append(self.parse_expr())
            while self.match(TokenKind.COMMA):
                args.append(self.parse_expr())

        self.expect(TokenKind.RPAREN, "',' or ')' in argument list")
        return CallExpr(name=name_tok.value, args=tuple(args))


def parse_expr(source: str) -> Expr:
    """Parse an expression string into an AST.

    Args:
        source: Expression string (e.g., "math.max(1, 5, 2) * 100")

    Returns:
        Parsed expression AST.

    Raises:
        LexError: If the text contains a character no token can start with.
        MolangSyntaxError: If the tokens do not form one complete expression.
    """
    parser = _Parser(iter_tokens(source), source)
    expr = parser.parse_expr()

    # Ensure all tokens consumed
    if parser.current.kind != TokenKind.EOF:
        raise parser.error("end of input")

    return expr
