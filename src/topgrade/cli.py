"""CLI entrypoint.

    topgrade [--tmux] [--no-system]

CONTRACT
- Inputs: Command line arguments (parsed by Typer), TMUX and TOPGRADE_LOG env vars
- Outputs (required):
  - Exit code 0 when every recorded step succeeded (or nothing was recorded)
  - Exit code 1 on any failed step or fatal error
- Invariants:
  - The run outcome is inspected exactly once, here
  - Fatal errors are printed as `ERROR: <details>`; failed steps only show in the summary
- Failure:
  - A missing tmux binary with --tmux is fatal
"""

from __future__ import annotations

import os
import sys

import typer
from loguru import logger
from rich.console import Console

from . import __version__
from .orchestrator import RunStatus, run
from .steps.base import Platform
from .steps.unix import TmuxError, run_in_tmux
from .terminal import Terminal

app = typer.Typer(add_completion=False, help="Upgrade all the things.")

console = Console()


def _version_callback(value: bool):
    if value:
        console.print(f"topgrade version: {__version__}")
        raise typer.Exit()


DEFAULT_LOG_LEVEL = "WARNING"


def setup_logging() -> None:
    requested = os.environ.get("TOPGRADE_LOG", DEFAULT_LOG_LEVEL).strip().upper()
    try:
        logger.level(requested)
        level = requested
    except ValueError:
        level = DEFAULT_LOG_LEVEL
    logger.remove()
    logger.add(sys.stderr, level=level)
    if level != requested:
        logger.warning(f"Unknown TOPGRADE_LOG level {requested!r}; using {level}")


@app.command()
def main(
    tmux: bool = typer.Option(False, "--tmux", "-t", help="Invoke inside tmux."),
    no_system: bool = typer.Option(False, "--no-system", help="Don't perform system upgrade."),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version."
    ),
) -> None:
    """Upgrade all the things."""
    terminal = Terminal(console=console)

    if tmux and "TMUX" not in os.environ:
        if Platform.current() is Platform.WINDOWS:
            logger.warning("--tmux is not supported on Windows; ignoring")
        else:
            try:
                run_in_tmux()
            except TmuxError as e:
                terminal.print_error(str(e))
                raise typer.Exit(code=1)

    setup_logging()
    outcome = run(no_system=no_system, terminal=terminal)
    if outcome.status is RunStatus.FATAL:
        terminal.print_error(outcome.details or "unknown error")
    raise typer.Exit(code=outcome.exit_code)
