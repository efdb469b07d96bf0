from __future__ import annotations

"""Steps shared by every unix: Homebrew, shell and tmux plugin managers.

Also hosts `run_in_tmux`, which replaces the current process with a tmux
session running the same command line.
"""

import os
import shlex
import sys
from typing import Callable

from .base import StepContext, StepOutcome
from ..util.shell import which

TMUX_SESSION = "topgrade"


class TmuxError(RuntimeError):
    pass


def run_homebrew(ctx: StepContext) -> StepOutcome:
    brew = ctx.which("brew")
    if brew is None:
        return StepOutcome.SKIPPED
    ctx.terminal.print_separator("Homebrew")
    return ctx.execute([brew, "update"], [brew, "upgrade"], [brew, "cleanup"])


def run_zplug(ctx: StepContext) -> StepOutcome:
    zsh = ctx.which("zsh")
    if zsh is None or not (ctx.home / ".zplug").is_dir():
        return StepOutcome.SKIPPED
    ctx.terminal.print_separator("zplug")
    return ctx.execute([zsh, "-c", "source ~/.zshrc && zplug update"])


def run_fisherman(ctx: StepContext) -> StepOutcome:
    fish = ctx.which("fish")
    fisher = ctx.home / ".config" / "fish" / "functions" / "fisher.fish"
    if fish is None or not fisher.is_file():
        return StepOutcome.SKIPPED
    ctx.terminal.print_separator("fisherman")
    return ctx.execute([fish, "-c", "fisher up"])


def run_tpm(ctx: StepContext) -> StepOutcome:
    update = ctx.home / ".tmux" / "plugins" / "tpm" / "bin" / "update_plugins"
    if not update.is_file():
        return StepOutcome.SKIPPED
    ctx.terminal.print_separator("tmux plugins")
    return ctx.execute([str(update), "all"])


def run_in_tmux(
    argv: list[str] | None = None,
    which_fn: Callable[[str], str | None] = which,
    exec_fn: Callable[[str, list[str]], None] = os.execv,
) -> None:
    """Re-exec `argv` inside a new tmux session. Does not return on success."""
    tmux = which_fn("tmux")
    if tmux is None:
        raise TmuxError("Could not find tmux")
    command = shlex.join(argv if argv is not None else sys.argv)
    exec_fn(tmux, [tmux, "new-session", "-s", TMUX_SESSION, "-n", TMUX_SESSION, command])
