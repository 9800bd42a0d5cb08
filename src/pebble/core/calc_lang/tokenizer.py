"""
Tokenizer for the Pebble calculator language.

Converts an input line into a lazy stream of typed tokens. Tokens are
produced one at a time as the parser asks for them.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from enum import StrEnum, auto

from pebble.core.errors import UnexpectedCharacter

logger = logging.getLogger(__name__)


class TokenKind(StrEnum):
    """Token types for the calculator language."""

    # Literals
    NUMBER = auto()

    # Identifiers and keywords
    IDENT = auto()
    LET = auto()

    # Operators
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()
    COMMA = auto()
    EQUALS = auto()


class Token:
    """A single token from the tokenizer."""

    __slots__ = ("kind", "value", "pos")

    def __init__(self, kind: TokenKind, value: float | str, pos: int) -> None:
        self.kind = kind
        self.value = value
        self.pos = pos

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.value!r}, pos={self.pos})"

    def __str__(self) -> str:
        label = _DISPLAY_NAMES[self.kind]
        if self.kind in (TokenKind.NUMBER, TokenKind.IDENT):
            return f"{label}({self.value})"
        return label


_DISPLAY_NAMES: dict[TokenKind, str] = {
    TokenKind.NUMBER: "Number",
    TokenKind.IDENT: "Identifier",
    TokenKind.LET: "Let",
    TokenKind.PLUS: "Plus",
    TokenKind.MINUS: "Minus",
    TokenKind.STAR: "Star",
    TokenKind.SLASH: "Slash",
    TokenKind.LPAREN: "LParen",
    TokenKind.RPAREN: "RParen",
    TokenKind.COMMA: "Comma",
    TokenKind.EQUALS: "Equals",
}

_KEYWORDS: dict[str, TokenKind] = {
    "let": TokenKind.LET,
}

_PUNCTUATION: dict[str, TokenKind] = {
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    ",": TokenKind.COMMA,
    "=": TokenKind.EQUALS,
}

_WHITESPACE = " \t\r\n"
_DIGITS = "0123456789"

# Number pattern: digits, optionally a decimal point and more digits
_NUMBER_RE = re.compile(r"[0-9]+(\.[0-9]+)?")
# Identifier: lowercase ASCII letters only
_IDENT_RE = re.compile(r"[a-z]+")


def tokenize(source: str, *, strict: bool = False) -> Iterator[Token]:
    """Lazily tokenize an input line.

    Any character that cannot start a token ends the stream, so the parser
    sees it as end of input. With ``strict=True`` such a character raises
    :class:`UnexpectedCharacter` instead.

    Args:
        source: One line of input.
        strict: Reject unknown characters instead of stopping at them.

    Yields:
        Tokens in source order.
    """
    i = 0
    n = len(source)

    while i < n:
        c = source[i]

        if c in _WHITESPACE:
            i += 1
            continue

        if c in _DIGITS:
            m = _NUMBER_RE.match(source, i)
            assert m is not None
            # Only digits and one inner '.' were admitted; float() cannot fail
            yield Token(TokenKind.NUMBER, float(m.group(0)), i)
            i = m.end()
            continue

        if "a" <= c <= "z":
            m = _IDENT_RE.match(source, i)
            assert m is not None
            word = m.group(0)
            yield Token(_KEYWORDS.get(word, TokenKind.IDENT), word, i)
            i = m.end()
            continue

        kind = _PUNCTUATION.get(c)
        if kind is not None:
            yield Token(kind, c, i)
            i += 1
            continue

        if strict:
            raise UnexpectedCharacter(c, i)
        logger.debug("Stopping at unrecognized character %r (column %d)", c, i + 1)
        return
