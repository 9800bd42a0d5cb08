"""Shared pytest fixtures for Pebble tests."""

from pathlib import Path

import pytest

from pebble.core.calc_lang import Session
from pebble.core.config import LOG_LEVEL_VAR, STRICT_LEXING_VAR, PebbleConfig


@pytest.fixture(autouse=True)
def clean_pebble_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep PEBBLE_* variables from the outer environment out of tests."""
    monkeypatch.delenv(LOG_LEVEL_VAR, raising=False)
    monkeypatch.delenv(STRICT_LEXING_VAR, raising=False)


@pytest.fixture
def env() -> dict[str, float]:
    """Return an empty variable environment."""
    return {}


@pytest.fixture
def session() -> Session:
    """Return a fresh session with default settings."""
    return Session(PebbleConfig())


@pytest.fixture
def strict_session() -> Session:
    """Return a session that rejects unknown characters."""
    return Session(PebbleConfig(strict_lexing=True))


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Write a pebble.toml with non-default settings."""
    path = tmp_path / "pebble.toml"
    path.write_text(
        """
[repl]
prompt = "calc> "
strict_lexing = true
show_assignments = false
log_level = "info"
"""
    )
    return path
