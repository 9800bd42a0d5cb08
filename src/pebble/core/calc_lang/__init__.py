"""
Pebble calculator language.

Tokenizer, parser, and evaluator for single-line calculator input, plus
the session object that carries variables from one line to the next.

Usage:
    from pebble.core.calc_lang import Session, evaluate, parse_line

    tree = parse_line("let x = 5, x + 1")
    env: dict[str, float] = {}
    result = evaluate(tree, env)
    # result == 6.0, env == {"x": 5.0}
"""

from pebble.core.calc_lang.evaluator import BUILTIN_FUNCTIONS, GLOBAL_CONSTANTS, evaluate
from pebble.core.calc_lang.parser import parse_line, parse_tokens
from pebble.core.calc_lang.session import Session, format_number
from pebble.core.calc_lang.tokenizer import Token, TokenKind, tokenize

__all__ = [
    "BUILTIN_FUNCTIONS",
    "GLOBAL_CONSTANTS",
    "Session",
    "Token",
    "TokenKind",
    "evaluate",
    "format_number",
    "parse_line",
    "parse_tokens",
    "tokenize",
]
