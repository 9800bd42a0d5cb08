"""
Recursive descent parser for the Pebble calculator language.

LL(1): one token of lookahead, no backtracking, a single forward pass.

Grammar (precedence low to high):
    chain          → stmt ("," stmt)*
    stmt           → "let" IDENT "=" expr | expr
    expr           → additive
    additive       → multiplicative (("+"|"-") multiplicative)*
    multiplicative → unary (("*"|"/") unary)*
    unary          → "-" unary | primary
    primary        → NUMBER | "(" expr ")" | var_or_call
    var_or_call    → IDENT ( "(" (expr ("," expr)*)? ")" )?
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from pebble.core.calc_lang.tokenizer import Token, TokenKind, tokenize
from pebble.core.errors import (
    NestingTooDeep,
    ParseError,
    UnexpectedEOF,
    UnexpectedToken,
    attach_context,
)
from pebble.core.ir.expressions import (
    BinaryExpr,
    BinaryOp,
    Call,
    Chain,
    Expr,
    Identifier,
    Let,
    Negate,
    Number,
)

logger = logging.getLogger(__name__)

_ADDITIVE_OPS: dict[TokenKind, BinaryOp] = {
    TokenKind.PLUS: BinaryOp.ADD,
    TokenKind.MINUS: BinaryOp.SUB,
}

_MULTIPLICATIVE_OPS: dict[TokenKind, BinaryOp] = {
    TokenKind.STAR: BinaryOp.MUL,
    TokenKind.SLASH: BinaryOp.DIV,
}


class _Parser:
    """Recursive descent parser pulling tokens from an iterator on demand."""

    def __init__(self, tokens: Iterable[Token]) -> None:
        self._tokens = iter(tokens)
        self._lookahead: Token | None = None

    def peek(self) -> Token | None:
        """The next token without consuming it, or None at end of input."""
        if self._lookahead is None:
            self._lookahead = next(self._tokens, None)
        return self._lookahead

    def advance(self) -> Token:
        tok = self.peek()
        if tok is None:
            raise UnexpectedEOF()
        self._lookahead = None
        return tok

    def expect(self, kind: TokenKind) -> Token:
        tok = self.advance()
        if tok.kind != kind:
            raise UnexpectedToken(tok)
        return tok

    def match(self, *kinds: TokenKind) -> Token | None:
        tok = self.peek()
        if tok is not None and tok.kind in kinds:
            return self.advance()
        return None

    # -- Grammar rules --

    def parse_chain(self) -> Expr:
        """stmt (',' stmt)*"""
        statements = [self.parse_stmt()]
        while self.match(TokenKind.COMMA):
            statements.append(self.parse_stmt())
        if len(statements) == 1:
            return statements[0]
        return Chain(statements=statements)

    def parse_stmt(self) -> Expr:
        """'let' IDENT '=' expr | expr"""
        if self.match(TokenKind.LET):
            name = self.expect(TokenKind.IDENT)
            self.expect(TokenKind.EQUALS)
            return Let(name=str(name.value), value=self.parse_expr())
        return self.parse_expr()

    def parse_expr(self) -> Expr:
        return self.parse_additive()

    def parse_additive(self) -> Expr:
        """multiplicative (('+' | '-') multiplicative)*"""
        left = self.parse_multiplicative()
        while (op_tok := self.match(*_ADDITIVE_OPS)) is not None:
            right = self.parse_multiplicative()
            left = BinaryExpr(op=_ADDITIVE_OPS[op_tok.kind], left=left, right=right)
        return left

    def parse_multiplicative(self) -> Expr:
        """unary (('*' | '/') unary)*"""
        left = self.parse_unary()
        while (op_tok := self.match(*_MULTIPLICATIVE_OPS)) is not None:
            right = self.parse_unary()
            left = BinaryExpr(op=_MULTIPLICATIVE_OPS[op_tok.kind], left=left, right=right)
        return left

    def parse_unary(self) -> Expr:
        """'-' unary | primary"""
        if self.match(TokenKind.MINUS):
            return Negate(operand=self.parse_unary())
        return self.parse_primary()

    def parse_primary(self) -> Expr:
        """NUMBER | '(' expr ')' | var_or_call"""
        tok = self.peek()
        if tok is None:
            raise UnexpectedEOF()

        if tok.kind == TokenKind.NUMBER:
            self.advance()
            return Number(value=float(tok.value))

        if tok.kind == TokenKind.LPAREN:
            self.advance()
            expr = self.parse_expr()
            self.expect(TokenKind.RPAREN)
            return expr

        return self._parse_var_or_call()

    def _parse_var_or_call(self) -> Expr:
        """IDENT ('(' (expr (',' expr)*)? ')')?"""
        name = str(self.expect(TokenKind.IDENT).value)
        if not self.match(TokenKind.LPAREN):
            return Identifier(name=name)

        args: list[Expr] = []
        if self.match(TokenKind.RPAREN):
            return Call(name=name, args=args)
        while True:
            args.append(self.parse_expr())
            if self.match(TokenKind.RPAREN):
                return Call(name=name, args=args)
            self.expect(TokenKind.COMMA)


def parse_tokens(tokens: Iterable[Token]) -> Expr:
    """Parse one statement chain from a token stream.

    The stream must be fully consumed by the chain; a leftover token is
    reported as unexpected.

    Raises:
        UnexpectedEOF: If the stream ends where a token is required.
        UnexpectedToken: If a token of the wrong kind is found.
        NestingTooDeep: If nesting exceeds the interpreter's recursion limit.
    """
    parser = _Parser(tokens)
    try:
        tree = parser.parse_chain()
    except RecursionError:
        raise NestingTooDeep() from None

    trailing = parser.peek()
    if trailing is not None:
        raise UnexpectedToken(trailing)

    return tree


def parse_line(source: str, *, strict: bool = False) -> Expr:
    """Parse an input line into an expression tree.

    Args:
        source: Input line (e.g., "let x = 2 * pi, sin(x)")
        strict: Reject characters no token starts with.

    Returns:
        Parsed expression tree.

    Raises:
        ParseError: If the line is invalid. The error carries the line as
            context.
    """
    try:
        tree = parse_tokens(tokenize(source, strict=strict))
    except ParseError as e:
        raise attach_context(e, source) from e

    logger.debug("Parsed %r as %s", source, tree)
    return tree
