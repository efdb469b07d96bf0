from __future__ import annotations

"""npm and yarn global package upgrades."""

from pathlib import Path

from loguru import logger

from .base import StepContext, StepOutcome


def run_npm_upgrade(ctx: StepContext) -> StepOutcome:
    npm = ctx.which("npm")
    if npm is None:
        return StepOutcome.SKIPPED
    root = ctx.capture([npm, "root", "-g"])
    if root is None:
        return StepOutcome.SKIPPED

    # Globals outside the home directory belong to the system package manager.
    try:
        Path(root).resolve().relative_to(ctx.home.resolve())
    except ValueError:
        logger.debug(f"npm global root {root} is outside the home directory; skipping")
        return StepOutcome.SKIPPED

    ctx.terminal.print_separator("Node Package Manager")
    return ctx.execute([npm, "update", "-g"])


def yarn_global_update(ctx: StepContext) -> StepOutcome:
    yarn = ctx.which("yarn")
    if yarn is None:
        return StepOutcome.SKIPPED
    ctx.terminal.print_separator("Yarn")
    return ctx.execute([yarn, "global", "upgrade", "-s"])
