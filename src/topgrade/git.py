from __future__ import annotations

"""Git repository discovery and synchronization.

CONTRACT
- Inputs: candidate paths (well-known dotfile locations, config `git_repos`)
- Outputs (required):
  - Repositories: de-duplicated set of canonical working-tree roots
  - Git.pull(): StepOutcome for one repository
- Invariants:
  - Candidates are canonicalized (symlinks resolved) before lookup
  - A candidate inside a working tree is stored as the tree's root
  - Iteration order is sorted by path
- Failure:
  - Missing paths and non-repositories are silently ignored
  - pull() is SKIPPED when no git executable is available
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterator

from loguru import logger

from .steps.base import StepContext, StepOutcome
from .util.shell import which

GIT_MARKER = ".git"


def _has_git_marker(directory: Path) -> bool:
    marker = directory / GIT_MARKER
    return marker.is_dir() or marker.is_file()


def find_repo_root(candidate: str | Path) -> Path | None:
    """Return the canonical root of the working tree containing `candidate`."""
    try:
        path = Path(candidate).expanduser().resolve(strict=True)
    except (OSError, RuntimeError):
        return None

    if path.name == GIT_MARKER:
        path = path.parent
    elif not path.is_dir():
        path = path.parent

    for directory in (path, *path.parents):
        if _has_git_marker(directory):
            return directory
    return None


@dataclass
class Git:
    executable: str | None = None

    @classmethod
    def new(cls, which_fn: Callable[[str], str | None] = which) -> Git:
        return cls(executable=which_fn("git"))

    def pull(self, repo: Path, ctx: StepContext) -> StepOutcome:
        if self.executable is None:
            return StepOutcome.SKIPPED
        ctx.terminal.print_separator(f"Pulling {repo}")
        return ctx.execute(
            [self.executable, "pull", "--rebase", "--autostash"],
            cwd=repo,
        )


@dataclass
class Repositories:
    _roots: set[Path] = field(default_factory=set)

    def insert(self, candidate: str | Path) -> None:
        root = find_repo_root(candidate)
        if root is None:
            logger.debug(f"{candidate} is not a git repository; ignoring")
            return
        if root not in self._roots:
            logger.debug(f"Adding repository {root}")
            self._roots.add(root)

    def repositories(self) -> Iterator[Path]:
        return iter(sorted(self._roots))

    def __len__(self) -> int:
        return len(self._roots)

    def __contains__(self, path: object) -> bool:
        return path in self._roots


@dataclass(frozen=True)
class GitPull:
    repo: Path
    git: Git

    @property
    def name(self) -> str:
        return f"git: {self.repo}"

    def run(self, ctx: StepContext) -> StepOutcome:
        return self.git.pull(self.repo, ctx)
