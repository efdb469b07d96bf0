from __future__ import annotations

"""Step protocol definition.

CONTRACT
- Inputs: StepContext (base dirs, terminal, sudo path, flags, run/which facilities)
- Outputs:
  - run(): StepOutcome (SUCCEEDED, FAILED or SKIPPED)
- Invariants:
  - All steps expose `name` and `run(ctx)`; the orchestrator never tells kinds apart
  - Built-in steps return SKIPPED when their tool is absent or disabled by flag
  - Custom commands are never SKIPPED; a missing shell is FAILED
- Failure:
  - External tool errors become FAILED here and never propagate further
"""

import os
import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Protocol

from loguru import logger

from ..terminal import Terminal
from ..util.paths import BaseDirs
from ..util.shell import CmdResult, run_cmd, which


class Platform(Enum):
    LINUX = "linux"
    MACOS = "macos"
    WINDOWS = "windows"
    UNIX = "unix"

    @classmethod
    def current(cls, platform: str | None = None) -> Platform:
        platform = platform or sys.platform
        if platform.startswith("linux"):
            return cls.LINUX
        if platform == "darwin":
            return cls.MACOS
        if platform in ("win32", "cygwin"):
            return cls.WINDOWS
        return cls.UNIX


class StepOutcome(Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"

    @classmethod
    def from_bool(cls, ok: bool) -> StepOutcome:
        return cls.SUCCEEDED if ok else cls.FAILED

    def as_record(self, name: str) -> tuple[str, bool] | None:
        if self is StepOutcome.SKIPPED:
            return None
        return (name, self is StepOutcome.SUCCEEDED)


@dataclass
class StepContext:
    base_dirs: BaseDirs
    terminal: Terminal
    sudo: str | None = None
    no_system: bool = False
    runner: Callable[..., CmdResult] = run_cmd
    which: Callable[[str], str | None] = which

    @property
    def home(self) -> Path:
        return self.base_dirs.home_dir

    def execute(self, *cmds: list[str], cwd: Path | None = None) -> StepOutcome:
        """Run commands in order, stopping at the first non-zero exit."""
        for cmd in cmds:
            res = self.runner(cmd, cwd=cwd)
            logger.debug(f"{res.cmd} exited with {res.returncode} after {res.elapsed_s:.1f}s")
            if not res.ok:
                return StepOutcome.FAILED
        return StepOutcome.SUCCEEDED

    def capture(self, cmd: list[str], cwd: Path | None = None) -> str | None:
        res = self.runner(cmd, cwd=cwd, capture=True)
        if not res.ok or res.stdout is None:
            return None
        return res.stdout.strip()

    def elevated(self, cmd: list[str]) -> list[str]:
        return [self.sudo, *cmd] if self.sudo else cmd


class Step(Protocol):
    name: str

    def run(self, ctx: StepContext) -> StepOutcome: ...


Routine = Callable[[StepContext], StepOutcome]


@dataclass(frozen=True)
class BuiltinStep:
    name: str
    routine: Routine
    system: bool = False

    def run(self, ctx: StepContext) -> StepOutcome:
        if self.system and ctx.no_system:
            logger.debug(f"{self.name}: disabled by --no-system")
            return StepOutcome.SKIPPED
        try:
            return self.routine(ctx)
        except Exception as e:
            logger.warning(f"{self.name} failed: {e!r}")
            return StepOutcome.FAILED


def shell_argv(command: str, platform: Platform | None = None) -> list[str]:
    if (platform or Platform.current()) is Platform.WINDOWS:
        return ["powershell", "-NoProfile", "-Command", command]
    return [os.environ.get("SHELL") or "sh", "-c", command]


@dataclass(frozen=True)
class CustomCommand:
    name: str
    command: str
    cwd: Path | None = field(default=None)

    def run(self, ctx: StepContext) -> StepOutcome:
        ctx.terminal.print_separator(self.name)
        res = ctx.runner(shell_argv(self.command), cwd=self.cwd)
        if not res.ok:
            logger.debug(f"Custom command {self.name!r} exited with {res.returncode}")
        return StepOutcome.from_bool(res.ok)
