from __future__ import annotations

"""Windows steps: Chocolatey and PowerShell (modules, Windows Update, profile)."""

from dataclasses import dataclass
from pathlib import Path

from .base import StepContext, StepOutcome


def run_chocolatey(ctx: StepContext) -> StepOutcome:
    choco = ctx.which("choco")
    if choco is None:
        return StepOutcome.SKIPPED
    ctx.terminal.print_separator("Chocolatey")
    return ctx.execute([choco, "upgrade", "all"])


@dataclass
class Powershell:
    path: str | None

    @classmethod
    def new(cls, ctx: StepContext) -> Powershell:
        return cls(path=ctx.which("powershell"))

    def _command(self, script: str) -> list[str]:
        return [self.path, "-NoProfile", "-Command", script]

    def profile(self, ctx: StepContext) -> Path | None:
        if self.path is None:
            return None
        out = ctx.capture([self.path, "-Command", "echo $profile"])
        return Path(out) if out else None

    def has_module(self, ctx: StepContext, module: str) -> bool:
        if self.path is None:
            return False
        out = ctx.capture(self._command(f"Get-Module -ListAvailable {module}"))
        return bool(out)

    def update_modules(self, ctx: StepContext) -> StepOutcome:
        if self.path is None:
            return StepOutcome.SKIPPED
        ctx.terminal.print_separator("Powershell Modules Update")
        return ctx.execute(self._command("Update-Module"))

    def windows_update(self, ctx: StepContext) -> StepOutcome:
        if not self.has_module(ctx, "PSWindowsUpdate"):
            return StepOutcome.SKIPPED
        ctx.terminal.print_separator("Windows Update")
        return ctx.execute(self._command("Install-WindowsUpdate -MicrosoftUpdate -AcceptAll -Verbose"))


def update_powershell_modules(ctx: StepContext) -> StepOutcome:
    return Powershell.new(ctx).update_modules(ctx)


def run_windows_update(ctx: StepContext) -> StepOutcome:
    return Powershell.new(ctx).windows_update(ctx)


def powershell_profile(ctx: StepContext) -> Path | None:
    return Powershell.new(ctx).profile(ctx)
