"""
Pebble - an interactive calculator language.

Arithmetic, unary minus, the constants ``e`` and ``pi``, the built-ins
``sin``, ``cos``, ``ln`` and ``pow``, ``let`` assignment, and
comma-separated statement chains, evaluated one line at a time against a
persistent variable environment.
"""

from __future__ import annotations

from ._version import __version__
from .core.calc_lang import Session, evaluate, parse_line, tokenize
from .core.errors import EvaluationError, ParseError, PebbleError

__all__ = [
    "__version__",
    "Session",
    "evaluate",
    "parse_line",
    "tokenize",
    "PebbleError",
    "ParseError",
    "EvaluationError",
]
