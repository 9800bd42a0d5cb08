"""Tests for calculator sessions and result formatting."""

from __future__ import annotations

import math

import pytest

from pebble.core.calc_lang import Session, format_number
from pebble.core.errors import (
    NestingTooDeep,
    ParseError,
    UnexpectedCharacter,
    UnresolvedIdentifier,
)


class TestSession:
    """A session keeps one environment across lines."""

    def test_run_returns_value(self, session: Session) -> None:
        assert session.run("1 + 2 * 3") == 7

    def test_bindings_persist_across_lines(self, session: Session) -> None:
        session.run("let x = 5")
        assert session.run("x + 1") == 6

    def test_sessions_are_isolated(self) -> None:
        first = Session()
        second = Session()
        first.run("let x = 1")
        with pytest.raises(UnresolvedIdentifier):
            second.run("x")

    def test_uses_supplied_environment(self) -> None:
        env = {"r": 2.0}
        session = Session(env=env)
        session.run("let area = pi * pow(r, 2)")
        assert env["area"] == pytest.approx(4 * math.pi)

    def test_parse_error_leaves_environment_untouched(self, session: Session) -> None:
        session.run("let x = 1")
        with pytest.raises(ParseError):
            session.run("let x = 2 +")
        assert session.variables == {"x": 1}

    def test_failed_chain_keeps_earlier_bindings(self, session: Session) -> None:
        with pytest.raises(UnresolvedIdentifier):
            session.run("let a = 1, b")
        assert session.variables == {"a": 1}


class TestLastAssignments:
    """Sessions report which names the last line bound."""

    def test_plain_expression(self, session: Session) -> None:
        session.run("1 + 1")
        assert session.last_assignments == []

    def test_let(self, session: Session) -> None:
        session.run("let x = 3")
        assert session.last_assignments == [("x", 3.0)]

    def test_chain_in_execution_order(self, session: Session) -> None:
        session.run("let y = 1, let x = 2, let y = 3, x")
        assert session.last_assignments == [("y", 1.0), ("x", 2.0), ("y", 3.0)]

    def test_kept_when_later_statement_fails(self, session: Session) -> None:
        session.run("let x = 3")
        with pytest.raises(UnresolvedIdentifier):
            session.run("let y = 1, z")
        assert session.last_assignments == [("y", 1.0)]

    def test_cleared_on_parse_error(self, session: Session) -> None:
        session.run("let x = 3")
        with pytest.raises(ParseError):
            session.run("let y = 1,")
        assert session.last_assignments == []


class TestDeepNesting:
    """Deeply nested input is an error, not a crash."""

    def test_nested_parentheses(self, session: Session) -> None:
        with pytest.raises(NestingTooDeep, match="nested too deeply"):
            session.run("(" * 300 + "1" + ")" * 300)
        assert session.run("1 + 1") == 2

    def test_repeated_unary_minus(self, session: Session) -> None:
        with pytest.raises(NestingTooDeep):
            session.run("-" * 2000 + "1")
        assert session.run("1 + 1") == 2

    def test_moderate_nesting_still_parses(self, session: Session) -> None:
        assert session.run("(" * 20 + "1" + ")" * 20) == 1


class TestSessionState:
    """Sessions expose and reset their bindings."""

    def test_variables_is_a_copy(self, session: Session) -> None:
        session.run("let x = 1")
        snapshot = session.variables
        snapshot["x"] = 99
        assert session.run("x") == 1

    def test_reset(self, session: Session) -> None:
        session.run("let x = 1, let y = 2")
        session.reset()
        assert session.variables == {}
        with pytest.raises(UnresolvedIdentifier):
            session.run("x")

    def test_constants_survive_reset(self, session: Session) -> None:
        session.reset()
        assert session.run("pi") == math.pi


class TestSessionLexing:
    """The session's config decides how unknown characters are handled."""

    def test_default_truncates(self, session: Session) -> None:
        assert session.run("2 * 3 ; ignored") == 6

    def test_strict_rejects(self, strict_session: Session) -> None:
        with pytest.raises(UnexpectedCharacter):
            strict_session.run("2 * 3 ; ignored")


class TestFormatNumber:
    """Results render as plain decimals."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (3.0, "3"),
            (-6.0, "-6"),
            (0.0, "0"),
            (0.5, "0.5"),
            (-0.25, "-0.25"),
            (1024.0, "1024"),
            (1e20, "100000000000000000000"),
            (1e-05, "0.00001"),
            (1.5e-10, "0.00000000015"),
            (-2.5e-07, "-0.00000025"),
            (math.inf, "inf"),
            (-math.inf, "-inf"),
            (math.nan, "NaN"),
        ],
    )
    def test_format(self, value: float, expected: str) -> None:
        assert format_number(value) == expected

    @pytest.mark.parametrize("value", [math.pi, 1 / 3, 1e-05, 123456.789])
    def test_non_integral_round_trips(self, value: float) -> None:
        text = format_number(value)
        assert "e" not in text
        assert float(text) == value
