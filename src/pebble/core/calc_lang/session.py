"""
Calculator sessions.

A session owns one variable environment for its lifetime and runs the
tokenize → parse → evaluate pipeline for one input line per call. Several
sessions can coexist; they never share bindings.
"""

from __future__ import annotations

import logging
import math
from decimal import Decimal

from pebble.core.calc_lang.evaluator import evaluate
from pebble.core.calc_lang.parser import parse_line
from pebble.core.config import PebbleConfig

logger = logging.getLogger(__name__)


class Session:
    """One interactive calculator session."""

    def __init__(
        self,
        config: PebbleConfig | None = None,
        env: dict[str, float] | None = None,
    ) -> None:
        self.config = config or PebbleConfig()
        self.env: dict[str, float] = env if env is not None else {}
        # (name, value) for each let the last line executed, in order
        self.last_assignments: list[tuple[str, float]] = []

    def run(self, line: str) -> float:
        """Parse and evaluate one line.

        Raises:
            ParseError: If the line does not parse; the environment is
                untouched.
            EvaluationError: If evaluation fails; bindings made by earlier
                statements of the same chain are kept and stay listed in
                ``last_assignments``.
        """
        self.last_assignments = []
        tree = parse_line(line, strict=self.config.strict_lexing)
        return evaluate(tree, self.env, self._record_assignment)

    def _record_assignment(self, name: str, value: float) -> None:
        self.last_assignments.append((name, value))

    @property
    def variables(self) -> dict[str, float]:
        """Snapshot of the current bindings."""
        return dict(self.env)

    def reset(self) -> None:
        logger.debug("Clearing %d binding(s)", len(self.env))
        self.env.clear()


def format_number(value: float) -> str:
    """Render a result as a plain decimal.

    Finite values never use exponent form. Integral values print without a
    fractional part; other values print the shortest round-trip digits
    positionally.

    Examples:
        >>> format_number(3.0)
        '3'
        >>> format_number(0.5)
        '0.5'
        >>> format_number(1e-05)
        '0.00001'
        >>> format_number(float("nan"))
        'NaN'
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value.is_integer():
        return f"{value:.0f}"
    return format(Decimal(repr(value)), "f")
