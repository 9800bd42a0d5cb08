"""
Configuration for Pebble sessions and the REPL.

Settings come from the ``[repl]`` table of ``pebble.toml`` and can be
overridden by environment variables:

    PEBBLE_LOG_LEVEL      - Logging level (default: WARNING)
    PEBBLE_STRICT_LEXING  - Reject unknown characters instead of stopping
                            at them (1/true/yes/on)

Usage:
    from pebble.core.config import load_config

    config = load_config()             # ./pebble.toml if present
    config = load_config(Path("x.toml"))
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "pebble.toml"

LOG_LEVEL_VAR = "PEBBLE_LOG_LEVEL"
STRICT_LEXING_VAR = "PEBBLE_STRICT_LEXING"

_DEFAULT_LOG_LEVEL = "WARNING"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_TRUTHY = ("1", "true", "yes", "on")
_FALSY = ("0", "false", "no", "off", "")


@dataclass
class PebbleConfig:
    """Settings for a calculator session and its read loop."""

    prompt: str = "pebble> "
    strict_lexing: bool = False  # raise on unknown characters instead of truncating
    show_assignments: bool = True  # echo "name = value" after a let
    log_level: str = _DEFAULT_LOG_LEVEL


def normalize_log_level(value: str) -> str:
    """Uppercase a level name, falling back to WARNING for unknown names."""
    level = value.upper().strip()
    if level in _LOG_LEVELS:
        return level
    logger.warning(
        "Unknown log level '%s'. Valid values: %s. Defaulting to %s.",
        value,
        ", ".join(_LOG_LEVELS),
        _DEFAULT_LOG_LEVEL,
    )
    return _DEFAULT_LOG_LEVEL


def _parse_flag(name: str, value: str, default: bool) -> bool:
    lowered = value.lower().strip()
    if lowered in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    logger.warning("Ignoring %s=%r: expected a boolean flag.", name, value)
    return default


def _table_flag(table: dict, key: str, default: bool) -> bool:
    value = table.get(key, default)
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return _parse_flag(f"[repl] {key}", value, default)
    raise ValueError(f"[repl] {key} must be a boolean, got {type(value).__name__}")


def _table_str(table: dict, key: str, default: str) -> str:
    value = table.get(key, default)
    if not isinstance(value, str):
        raise ValueError(f"[repl] {key} must be a string, got {type(value).__name__}")
    return value


def load_config(path: Path | None = None) -> PebbleConfig:
    """Load settings from a TOML file, then apply environment overrides.

    Args:
        path: Config file. Defaults to ``pebble.toml`` in the working
            directory; a missing default file means built-in defaults.

    Raises:
        FileNotFoundError: If an explicit ``path`` does not exist.
        tomllib.TOMLDecodeError: If the file is not valid TOML.
        ValueError: If a [repl] value has the wrong type.
    """
    explicit = path is not None
    config_path = path if path is not None else Path.cwd() / CONFIG_FILENAME

    data: dict = {}
    if explicit or config_path.exists():
        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
        logger.debug("Loaded config from %s", config_path)

    repl = data.get("repl", {})
    if not isinstance(repl, dict):
        raise ValueError("[repl] must be a table")
    config = PebbleConfig(
        prompt=_table_str(repl, "prompt", PebbleConfig.prompt),
        strict_lexing=_table_flag(repl, "strict_lexing", False),
        show_assignments=_table_flag(repl, "show_assignments", True),
        log_level=normalize_log_level(_table_str(repl, "log_level", _DEFAULT_LOG_LEVEL)),
    )

    env_level = os.environ.get(LOG_LEVEL_VAR)
    if env_level:
        config.log_level = normalize_log_level(env_level)

    env_strict = os.environ.get(STRICT_LEXING_VAR)
    if env_strict is not None:
        config.strict_lexing = _parse_flag(STRICT_LEXING_VAR, env_strict, config.strict_lexing)

    return config
