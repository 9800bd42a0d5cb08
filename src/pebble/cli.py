"""
Pebble CLI.

Commands:
- repl: interactive read-evaluate-print loop
- eval: evaluate expressions given on the command line

Global options: --version, --log-level.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pebble._version import __version__
from pebble.core.calc_lang import Session, format_number
from pebble.core.config import load_config, normalize_log_level
from pebble.core.errors import EvaluationError, ParseError

app = typer.Typer(
    help="""Pebble – an interactive calculator language

Examples:
  pebble repl
  pebble eval "let r = 2" "pi * pow(r, 2)"
""",
    no_args_is_help=True,
)

console = Console(highlight=False)

logger = logging.getLogger(__name__)

LOG_FORMAT = "[%(asctime)s] %(name)s - %(levelname)s - %(message)s"

REPL_HELP = """\
Enter an expression, e.g.  1 + 2 * 3,  sin(pi / 2),  pow(2, 10)
Assign with let:           let x = 5
Chain statements with ,    let x = 1, let y = 2, x + y
Constants: e, pi    Functions: sin/1, cos/1, ln/1, pow/2

Commands:
  :vars   show variables
  :reset  clear all variables
  :help   show this message
  :quit   exit (or end input with Ctrl-D)"""


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"pebble {__version__}")
        raise typer.Exit()


def _configure_logging(level: str) -> None:
    logging.basicConfig(level=level, stream=sys.stderr, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Logging level (overrides config and PEBBLE_LOG_LEVEL)"),
    ] = None,
) -> None:
    """Pebble CLI main callback for global options."""
    ctx.obj = {"log_level": normalize_log_level(log_level) if log_level else None}


def _session_for(ctx: typer.Context, config_path: Path | None, strict: bool | None) -> Session:
    """Load config, apply command-line overrides, and start a session."""
    try:
        config = load_config(config_path)
    except FileNotFoundError:
        console.print(f"[red]Config file not found: {escape(str(config_path))}[/red]")
        raise typer.Exit(1)
    except ValueError as e:
        # tomllib.TOMLDecodeError is a ValueError
        console.print(f"[red]Invalid config file: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    cli_level = (ctx.obj or {}).get("log_level")
    _configure_logging(cli_level or config.log_level)

    if strict is not None:
        config.strict_lexing = strict
    logger.debug("Starting session with %s", config)
    return Session(config)


def _run_line(session: Session, text: str) -> bool:
    """Evaluate one line and print the outcome. Returns False on error."""
    try:
        value = session.run(text)
    except ParseError as e:
        console.print(f"[red]Parser error:[/red] {escape(str(e))}")
        return False
    except EvaluationError as e:
        _print_assignments(session)
        console.print(f"[red]Interpreter error:[/red] {escape(str(e))}")
        return False

    _print_assignments(session)
    console.print(f"= {format_number(value)}")
    return True


def _print_assignments(session: Session) -> None:
    if not session.config.show_assignments:
        return
    for name, value in session.last_assignments:
        console.print(f"{escape(name)} = {format_number(value)}")


def _print_variables(session: Session) -> None:
    variables = session.variables
    if not variables:
        console.print("[dim]No variables defined.[/dim]")
        return

    table = Table(title="Variables")
    table.add_column("Name")
    table.add_column("Value", justify="right")
    for name in sorted(variables):
        table.add_row(escape(name), format_number(variables[name]))
    console.print(table)


def _run_command(session: Session, text: str) -> bool:
    """Handle a ':' meta-command. Returns False when the loop should stop."""
    command = text[1:].strip().lower()
    if command in ("quit", "q", "exit"):
        return False
    if command == "vars":
        _print_variables(session)
    elif command == "reset":
        session.reset()
        console.print("[dim]Variables cleared.[/dim]")
    elif command in ("help", "?"):
        console.print(REPL_HELP, markup=False)
    else:
        console.print(f"[yellow]Unknown command: {escape(text)}[/yellow] (try :help)")
    return True


@app.command()
def repl(
    ctx: typer.Context,
    strict: Annotated[
        bool | None,
        typer.Option(
            "--strict/--no-strict",
            help="Reject characters that start no token instead of stopping at them",
        ),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to pebble.toml"),
    ] = None,
) -> None:
    """Start an interactive calculator session."""
    session = _session_for(ctx, config_path, strict)
    console.print(f"Pebble {__version__} - type :help for help, :quit to exit", markup=False)

    while True:
        try:
            line = console.input(session.config.prompt, markup=False)
        except (EOFError, KeyboardInterrupt):
            console.print()
            break

        text = line.strip()
        if not text:
            continue
        if text.startswith(":"):
            if not _run_command(session, text):
                break
            continue
        _run_line(session, text)


@app.command(name="eval")
def eval_command(
    ctx: typer.Context,
    expressions: Annotated[
        list[str],
        typer.Argument(help="Lines to evaluate in order, sharing one set of variables"),
    ],
    strict: Annotated[
        bool | None,
        typer.Option(
            "--strict/--no-strict",
            help="Reject characters that start no token instead of stopping at them",
        ),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to pebble.toml"),
    ] = None,
) -> None:
    """Evaluate expressions and print each result.

    Use -- before an expression that starts with a minus sign.
    """
    session = _session_for(ctx, config_path, strict)
    for text in expressions:
        if not _run_line(session, text):
            raise typer.Exit(1)


def main(argv: list[str] | None = None) -> None:
    app(args=argv)
