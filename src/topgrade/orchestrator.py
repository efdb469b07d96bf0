from __future__ import annotations

"""Orchestrator for an upgrade run.

CONTRACT
- Inputs: Config, StepContext, Platform
- Outputs (required):
  - RunOutcome (OK, STEPS_FAILED or FATAL with details)
  - Summary section on the terminal when at least one step was recorded
- Invariants:
  - Steps come from a static table keyed by Platform, run once, in order
  - A failing step never stops the run; skipped steps are not recorded
  - The repository set is built fully before any pull runs
  - Pre-commands run before every other step
- Failure:
  - A failing pre-command aborts the run with FATAL and nothing is rendered
  - Missing base directories or an invalid config file yield FATAL before any step
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from loguru import logger

from .config import Config, ConfigError, read_config
from .git import Git, GitPull, Repositories
from .report import Report
from .steps import generic, linux, macos, node, unix, vim, windows
from .steps.base import BuiltinStep, CustomCommand, Platform, Step, StepContext, StepOutcome
from .terminal import Terminal
from .util.paths import BaseDirs, NoBaseDirectories
from .util.shell import which


ANY = frozenset(Platform)
UNIX = frozenset({Platform.LINUX, Platform.MACOS, Platform.UNIX})
LINUX = frozenset({Platform.LINUX})
MACOS = frozenset({Platform.MACOS})
WINDOWS = frozenset({Platform.WINDOWS})

# Placeholders expanded at plan time.
GIT_REPOSITORIES = "git-repositories"
CUSTOM_COMMANDS = "custom-commands"

STEP_TABLE: list[tuple[frozenset[Platform], BuiltinStep | str]] = [
    (WINDOWS, BuiltinStep("Powershell Modules Update", windows.update_powershell_modules)),
    (LINUX, BuiltinStep("System upgrade", linux.upgrade, system=True)),
    (WINDOWS, BuiltinStep("Chocolatey", windows.run_chocolatey)),
    (UNIX, BuiltinStep("Homebrew", unix.run_homebrew)),
    (ANY, GIT_REPOSITORIES),
    (UNIX, BuiltinStep("zplug", unix.run_zplug)),
    (UNIX, BuiltinStep("fisherman", unix.run_fisherman)),
    (UNIX, BuiltinStep("tmux plugins", unix.run_tpm)),
    (ANY, BuiltinStep("rustup", generic.run_rustup)),
    (ANY, BuiltinStep("Cargo", generic.run_cargo_update)),
    (ANY, BuiltinStep("Emacs", generic.run_emacs)),
    (ANY, BuiltinStep("Vim", vim.upgrade_vim)),
    (ANY, BuiltinStep("Neovim", vim.upgrade_neovim)),
    (ANY, BuiltinStep("Node Package Manager", node.run_npm_upgrade)),
    (ANY, BuiltinStep("Yarn", node.yarn_global_update)),
    (ANY, BuiltinStep("Atom Package Manager", generic.run_apm)),
    (LINUX, BuiltinStep("Flatpak", linux.run_flatpak)),
    (LINUX, BuiltinStep("snap", linux.run_snap)),
    (ANY, CUSTOM_COMMANDS),
    (LINUX, BuiltinStep("Firmware upgrades", linux.run_fwupdmgr)),
    (LINUX, BuiltinStep("Restarts", linux.run_needrestart)),
    (MACOS, BuiltinStep("App Store", macos.upgrade_macos, system=True)),
    (WINDOWS, BuiltinStep("Windows Update", windows.run_windows_update, system=True)),
]

REPOSITORY_CANDIDATES: list[tuple[frozenset[Platform], str]] = [
    (ANY, ".emacs.d"),
    (ANY, ".vim"),
    (ANY, ".config/nvim"),
    (UNIX, ".zshrc"),
    (UNIX, ".oh-my-zsh"),
    (UNIX, ".tmux"),
    (UNIX, ".config/fish"),
]


class PreCommandFailed(RuntimeError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Pre-command {name!r} failed")
        self.name = name


class RunStatus(Enum):
    OK = "ok"
    STEPS_FAILED = "steps_failed"
    FATAL = "fatal"


@dataclass(frozen=True)
class RunOutcome:
    status: RunStatus
    details: str | None = None

    @property
    def exit_code(self) -> int:
        return 0 if self.status is RunStatus.OK else 1

    @classmethod
    def fatal(cls, details: str) -> RunOutcome:
        return cls(RunStatus.FATAL, details)

    @classmethod
    def from_report(cls, report: Report) -> RunOutcome:
        return cls(RunStatus.OK if report.all_succeeded() else RunStatus.STEPS_FAILED)


@dataclass
class Orchestrator:
    config: Config
    ctx: StepContext
    platform: Platform = field(default_factory=Platform.current)
    git: Git | None = None
    table: list[tuple[frozenset[Platform], BuiltinStep | str]] = field(
        default_factory=lambda: list(STEP_TABLE)
    )
    report: Report = field(default_factory=Report)

    def __post_init__(self) -> None:
        if self.git is None:
            self.git = Git.new(self.ctx.which)

    def repository_candidates(self) -> list[Path]:
        home = self.ctx.home
        candidates = [home / rel for platforms, rel in REPOSITORY_CANDIDATES if self.platform in platforms]
        if self.platform is Platform.WINDOWS:
            profile = windows.powershell_profile(self.ctx)
            if profile is not None:
                candidates.append(profile)
        candidates.extend(self.config.git_repos() or [])
        return candidates

    def collect_repositories(self) -> Repositories:
        repos = Repositories()
        for candidate in self.repository_candidates():
            repos.insert(candidate)
        return repos

    def plan(self) -> list[Step]:
        steps: list[Step] = []
        for platforms, entry in self.table:
            if self.platform not in platforms:
                continue
            if entry == GIT_REPOSITORIES:
                repos = self.collect_repositories()
                steps.extend(GitPull(repo, self.git) for repo in repos.repositories())
            elif entry == CUSTOM_COMMANDS:
                for name, command in (self.config.commands() or {}).items():
                    steps.append(CustomCommand(name, command))
            else:
                steps.append(entry)
        return steps

    def run_pre_commands(self) -> None:
        for name, command in (self.config.pre_commands() or {}).items():
            if CustomCommand(name, command).run(self.ctx) is not StepOutcome.SUCCEEDED:
                raise PreCommandFailed(name)

    def render_summary(self) -> None:
        if self.report.is_empty():
            return
        self.ctx.terminal.print_separator("Summary")
        for name, succeeded in self.report.data():
            self.ctx.terminal.print_result(name, succeeded)

    def run(self) -> RunOutcome:
        try:
            self.run_pre_commands()
        except PreCommandFailed as e:
            return RunOutcome.fatal(str(e))

        for step in self.plan():
            outcome = step.run(self.ctx)
            logger.debug(f"{step.name}: {outcome.value}")
            self.report.push_result(outcome.as_record(step.name))

        self.render_summary()
        return RunOutcome.from_report(self.report)


def run(
    *,
    no_system: bool = False,
    terminal: Terminal | None = None,
    platform: Platform | None = None,
    base_dirs: BaseDirs | None = None,
) -> RunOutcome:
    """Resolve directories and config, then run every eligible step."""
    platform = platform or Platform.current()
    try:
        base_dirs = base_dirs or BaseDirs.detect()
        config = read_config(base_dirs)
    except (NoBaseDirectories, ConfigError) as e:
        return RunOutcome.fatal(str(e))

    ctx = StepContext(
        base_dirs=base_dirs,
        terminal=terminal or Terminal(),
        sudo=which("sudo") if platform is Platform.LINUX else None,
        no_system=no_system,
    )
    return Orchestrator(config=config, ctx=ctx, platform=platform).run()
