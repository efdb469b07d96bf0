from __future__ import annotations

"""macOS system update through `softwareupdate`."""

from .base import StepContext, StepOutcome


def upgrade_macos(ctx: StepContext) -> StepOutcome:
    softwareupdate = ctx.which("softwareupdate")
    if softwareupdate is None:
        return StepOutcome.SKIPPED
    ctx.terminal.print_separator("App Store")
    return ctx.execute([softwareupdate, "--install", "--all"])
