"""
Error types for Pebble tokenizing, parsing, and evaluation.

Parse-time and evaluation-time failures form two separate branches of the
hierarchy so callers can report them differently.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pebble.core.calc_lang.tokenizer import Token


class PebbleError(Exception):
    """Base exception for all Pebble errors."""

    def __init__(self, message: str, context: ErrorContext | None = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.message}\n{self.context.format()}"
        return self.message


class ParseError(PebbleError):
    """
    Raised when a line cannot be turned into an expression tree.

    Examples:
    - Input ends in the middle of an expression
    - A token of the wrong kind where a specific one is required
    - Trailing tokens after a complete statement
    """

    pass


class UnexpectedEOF(ParseError):
    """The token stream ran out where a token was required."""

    def __init__(self, context: ErrorContext | None = None):
        super().__init__("unexpected EOF", context)


class UnexpectedToken(ParseError):
    """A token of the wrong kind was found."""

    def __init__(self, token: Token, context: ErrorContext | None = None):
        self.token = token
        super().__init__(f"unexpected token `{token}` at column {token.pos + 1}", context)


class UnexpectedCharacter(ParseError):
    """A character no token starts with (strict lexing only)."""

    def __init__(self, char: str, pos: int, context: ErrorContext | None = None):
        self.char = char
        self.pos = pos
        super().__init__(f"unexpected character {char!r} at column {pos + 1}", context)


class NestingTooDeep(ParseError):
    """Parentheses or unary minus nested beyond the parser's recursion limit."""

    def __init__(self, context: ErrorContext | None = None):
        super().__init__("expression nested too deeply", context)


class EvaluationError(PebbleError):
    """
    Raised when a well-formed tree cannot be evaluated.

    Examples:
    - Identifier that is neither a constant nor a bound variable
    - Function name/arity pair that is not a built-in
    """

    pass


class EvaluationTooDeep(EvaluationError):
    def __init__(self) -> None:
        super().__init__("expression nested too deeply to evaluate")


class UnresolvedIdentifier(EvaluationError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"unknown identifier `{name}`")


class UnresolvedFunction(EvaluationError):
    def __init__(self, name: str, arity: int):
        self.name = name
        self.arity = arity
        super().__init__(f"unknown function `{name}/{arity}`")


@dataclass
class ErrorContext:
    """
    Source location of an error inside a single input line.

    Attributes:
        source: The full input line
        column: Column number (0-indexed)
    """

    source: str
    column: int

    def format(self) -> str:
        """
        Format the line with a marker under the offending column.

        Returns:
            Two lines, e.g. "  1 2" and "    ^"
        """
        column = min(max(self.column, 0), len(self.source))
        return f"  {self.source}\n  {' ' * column}^"


def attach_context(error: ParseError, source: str) -> ParseError:
    """
    Return a copy of a parse error carrying the source line as context.

    EOF errors point one past the end of the line.
    """
    if isinstance(error, UnexpectedToken):
        return UnexpectedToken(error.token, ErrorContext(source, error.token.pos))
    if isinstance(error, UnexpectedCharacter):
        return UnexpectedCharacter(error.char, error.pos, ErrorContext(source, error.pos))
    if isinstance(error, UnexpectedEOF):
        return UnexpectedEOF(ErrorContext(source, len(source.rstrip())))
    return error
