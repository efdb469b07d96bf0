from __future__ import annotations

"""Cross-platform toolchain steps: rustup, cargo, emacs, apm."""

from pathlib import Path

from .base import Platform, StepContext, StepOutcome

EMACS_UPGRADE = (
    "(progn (let ((package-menu-async nil)) (package-list-packages))"
    " (package-menu-mark-upgrades) (package-menu-execute 'noquery))"
)


def cargo_bin(ctx: StepContext, name: str) -> str | None:
    """Locate a tool in ~/.cargo/bin first, then on PATH."""
    suffix = ".exe" if Platform.current() is Platform.WINDOWS else ""
    local = ctx.home / ".cargo" / "bin" / f"{name}{suffix}"
    if local.is_file():
        return str(local)
    return ctx.which(name)


def run_rustup(ctx: StepContext) -> StepOutcome:
    rustup = cargo_bin(ctx, "rustup")
    if rustup is None:
        return StepOutcome.SKIPPED
    ctx.terminal.print_separator("rustup")
    return ctx.execute([rustup, "update"])


def run_cargo_update(ctx: StepContext) -> StepOutcome:
    cargo = cargo_bin(ctx, "cargo")
    if cargo is None or cargo_bin(ctx, "cargo-install-update") is None:
        return StepOutcome.SKIPPED
    ctx.terminal.print_separator("Cargo")
    return ctx.execute([cargo, "install-update", "--git", "--all"])


def emacs_init_file(home: Path) -> Path | None:
    for candidate in (home / ".emacs.d" / "init.el", home / ".emacs"):
        if candidate.is_file():
            return candidate
    return None


def run_emacs(ctx: StepContext) -> StepOutcome:
    emacs = ctx.which("emacs")
    init = emacs_init_file(ctx.home)
    if emacs is None or init is None:
        return StepOutcome.SKIPPED
    ctx.terminal.print_separator("Emacs")
    return ctx.execute([emacs, "--batch", "-l", str(init), "--eval", EMACS_UPGRADE])


def run_apm(ctx: StepContext) -> StepOutcome:
    apm = ctx.which("apm")
    if apm is None:
        return StepOutcome.SKIPPED
    ctx.terminal.print_separator("Atom Package Manager")
    return ctx.execute([apm, "upgrade", "--confirm=false"])
