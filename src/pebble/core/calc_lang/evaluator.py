"""
Expression evaluator for the Pebble calculator language.

Evaluates expression trees against a caller-owned variable environment.
No I/O. The only side effect is ``let`` writing into the environment.

Arithmetic follows IEEE-754 double semantics: division by zero and math
domain errors produce infinities or NaN rather than raising.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, MutableMapping

from pebble.core.errors import EvaluationTooDeep, UnresolvedFunction, UnresolvedIdentifier
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

Environment = MutableMapping[str, float]

AssignHook = Callable[[str, float], None]


# ---------------------------------------------------------------------------
# IEEE-754 helpers (the math module raises where C returns inf/nan)
# ---------------------------------------------------------------------------


def _divide(left: float, right: float) -> float:
    try:
        return left / right
    except ZeroDivisionError:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)


def _is_odd_integer(x: float) -> bool:
    return math.isfinite(x) and x.is_integer() and x % 2 == 1


def _pow(base: float, exponent: float) -> float:
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and _is_odd_integer(exponent):
            return -math.inf
        return math.inf
    except ValueError:
        # Zero to a negative power is a pole; a negative base with a
        # non-integer exponent has no real result.
        if base == 0:
            if math.copysign(1.0, base) < 0 and _is_odd_integer(exponent):
                return -math.inf
            return math.inf
        return math.nan


def _ln(x: float) -> float:
    if x == 0:
        return -math.inf
    if x < 0:
        return math.nan
    return math.log(x)


def _sin(x: float) -> float:
    return math.sin(x) if math.isfinite(x) else math.nan


def _cos(x: float) -> float:
    return math.cos(x) if math.isfinite(x) else math.nan


# ---------------------------------------------------------------------------
# Fixed lookup tables, consulted before the environment
# ---------------------------------------------------------------------------

GLOBAL_CONSTANTS: dict[str, float] = {
    "e": math.e,
    "pi": math.pi,
}

BUILTIN_FUNCTIONS: dict[tuple[str, int], Callable[..., float]] = {
    ("sin", 1): _sin,
    ("cos", 1): _cos,
    ("pow", 2): _pow,
    ("ln", 1): _ln,
}

_BINARY_OPS: dict[BinaryOp, Callable[[float, float], float]] = {
    BinaryOp.ADD: lambda a, b: a + b,
    BinaryOp.SUB: lambda a, b: a - b,
    BinaryOp.MUL: lambda a, b: a * b,
    BinaryOp.DIV: _divide,
}


def evaluate(expr: Expr, env: Environment, on_assign: AssignHook | None = None) -> float:
    """Evaluate an expression tree.

    Args:
        expr: Parsed expression tree.
        env: Variable bindings. ``let`` statements write into it, and
            earlier writes are kept if a later statement fails.
        on_assign: Called with each name and value as a ``let`` binds it.

    Returns:
        The computed value, possibly infinite or NaN.

    Raises:
        UnresolvedIdentifier: If a name is neither a constant nor bound.
        UnresolvedFunction: If a (name, arity) pair is not a built-in.
        EvaluationTooDeep: If the tree is deeper than the recursion limit.
    """
    try:
        return _interpret(expr, env, on_assign)
    except RecursionError:
        raise EvaluationTooDeep() from None


def _interpret(expr: Expr, env: Environment, on_assign: AssignHook | None) -> float:
    """Dispatch evaluation to the appropriate handler."""
    if isinstance(expr, Number):
        return expr.value

    if isinstance(expr, Identifier):
        return _interpret_identifier(expr, env)

    if isinstance(expr, BinaryExpr):
        left = _interpret(expr.left, env, on_assign)
        right = _interpret(expr.right, env, on_assign)
        return _BINARY_OPS[expr.op](left, right)

    if isinstance(expr, Negate):
        return -_interpret(expr.operand, env, on_assign)

    if isinstance(expr, Call):
        return _interpret_call(expr, env, on_assign)

    if isinstance(expr, Let):
        value = _interpret(expr.value, env, on_assign)
        env[expr.name] = value
        logger.debug("Bound %s = %r", expr.name, value)
        if on_assign is not None:
            on_assign(expr.name, value)
        return value

    if isinstance(expr, Chain):
        result = 0.0
        for statement in expr.statements:
            result = _interpret(statement, env, on_assign)
        return result

    raise TypeError(f"Unknown expression type: {type(expr).__name__}")


def _interpret_identifier(expr: Identifier, env: Environment) -> float:
    """Constants shadow variables of the same name."""
    if expr.name in GLOBAL_CONSTANTS:
        return GLOBAL_CONSTANTS[expr.name]
    if expr.name in env:
        return env[expr.name]
    raise UnresolvedIdentifier(expr.name)


def _interpret_call(expr: Call, env: Environment, on_assign: AssignHook | None) -> float:
    """Evaluate a built-in call, resolved by exact (name, arity)."""
    func = BUILTIN_FUNCTIONS.get((expr.name, expr.arity))
    if func is None:
        raise UnresolvedFunction(expr.name, expr.arity)
    args = [_interpret(arg, env, on_assign) for arg in expr.args]
    return func(*args)
