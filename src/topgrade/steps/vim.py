from __future__ import annotations

"""Vim and Neovim plugin upgrades.

Detects which plugin manager the user's config loads (vim-plug, Vundle or
dein) and drives it through an ex-mode session.
"""

from dataclasses import dataclass
from pathlib import Path

from .base import StepContext, StepOutcome


@dataclass(frozen=True)
class PluginManager:
    name: str
    commands: tuple[str, ...]


VIM_PLUG = PluginManager("vim-plug", ("PlugUpgrade", "PlugUpdate"))
VUNDLE = PluginManager("Vundle", ("PluginUpdate",))
DEIN = PluginManager("dein", ("call dein#install()", "call dein#update()"))


def vimrc(home: Path) -> Path | None:
    for candidate in (home / ".vimrc", home / ".vim" / "vimrc"):
        if candidate.is_file():
            return candidate
    return None


def nvim_init(home: Path) -> Path | None:
    for candidate in (
        home / ".config" / "nvim" / "init.vim",
        home / "AppData" / "Local" / "nvim" / "init.vim",
    ):
        if candidate.is_file():
            return candidate
    return None


def detect_plugin_manager(rc_file: Path) -> PluginManager | None:
    try:
        content = rc_file.read_text(encoding="utf-8", errors="ignore")
    except OSError:
        return None
    if "plug#begin" in content:
        return VIM_PLUG
    if "vundle#begin" in content or "vundle#rc" in content:
        return VUNDLE
    if "dein#begin" in content:
        return DEIN
    return None


def _upgrade(ctx: StepContext, binary: str, rc_file: Path | None, label: str) -> StepOutcome:
    editor = ctx.which(binary)
    if editor is None or rc_file is None:
        return StepOutcome.SKIPPED
    manager = detect_plugin_manager(rc_file)
    if manager is None:
        return StepOutcome.SKIPPED

    ctx.terminal.print_separator(f"{label} ({manager.name})")
    argv = [editor, "-N", "-u", str(rc_file), "-i", "NONE", "-e"]
    for command in manager.commands:
        argv += ["-c", command]
    argv += ["-c", "quitall"]
    return ctx.execute(argv)


def upgrade_vim(ctx: StepContext) -> StepOutcome:
    return _upgrade(ctx, "vim", vimrc(ctx.home), "Vim")


def upgrade_neovim(ctx: StepContext) -> StepOutcome:
    return _upgrade(ctx, "nvim", nvim_init(ctx.home), "Neovim")
