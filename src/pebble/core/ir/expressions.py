"""
Expression tree types for the Pebble calculator language.

One line of input parses into a single tree built from these nodes:

- Arithmetic: +, -, *, / (BinaryExpr) and unary minus (Negate)
- Number literals: 42, 3.14
- Identifiers: x, pi, e
- Function calls: sin(x), pow(2, 10)
- Assignment: let x = 5
- Statement chains: let x = 1, let y = 2, x + y

Every composite node owns its children exclusively; trees are never shared.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------


class BinaryOp(StrEnum):
    """Binary arithmetic operators."""

    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"


# ---------------------------------------------------------------------------
# AST node types
# ---------------------------------------------------------------------------


class Number(BaseModel):
    """A floating-point literal."""

    value: float = Field(description="The literal value")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        if self.value.is_integer():
            return str(int(self.value))
        return repr(self.value)


class Identifier(BaseModel):
    """Reference to a variable or a global constant."""

    name: str = Field(description="Variable or constant name")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.name


class BinaryExpr(BaseModel):
    """Binary operation: left op right."""

    op: BinaryOp
    left: Expr
    right: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"({self.left} {self.op.value} {self.right})"


class Negate(BaseModel):
    """Unary minus."""

    operand: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"-{self.operand}"


class Call(BaseModel):
    """
    Function call: name(arg1, arg2, ...).

    Built-ins are resolved by (name, arity), so sin(x) and sin(x, y) are
    different functions. Built-in functions: sin/1, cos/1, ln/1, pow/2.
    """

    name: str = Field(description="Function name")
    args: list[Expr] = Field(default_factory=list, description="Arguments")

    model_config = ConfigDict(frozen=True)

    @property
    def arity(self) -> int:
        return len(self.args)

    def __str__(self) -> str:
        args_str = ", ".join(str(a) for a in self.args)
        return f"{self.name}({args_str})"


class Let(BaseModel):
    """Assignment statement: let name = value."""

    name: str = Field(description="Variable being bound")
    value: Expr = Field(description="Expression whose result is stored")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"let {self.name} = {self.value}"


class Chain(BaseModel):
    """
    Statements evaluated in order.

    The chain's value is its last statement's value, or 0 when empty.
    """

    statements: list[Expr] = Field(default_factory=list, description="Statements in order")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return ", ".join(str(s) for s in self.statements)


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

Expr = Number | Identifier | BinaryExpr | Negate | Call | Let | Chain

# Rebuild models for recursive forward references
BinaryExpr.model_rebuild()
Negate.model_rebuild()
Call.model_rebuild()
Let.model_rebuild()
Chain.model_rebuild()
