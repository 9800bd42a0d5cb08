"""Expression tree types for the Pebble calculator language."""

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

__all__ = [
    "BinaryExpr",
    "BinaryOp",
    "Call",
    "Chain",
    "Expr",
    "Identifier",
    "Let",
    "Negate",
    "Number",
]
