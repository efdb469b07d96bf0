from dataclasses import dataclass, field
from pathlib import Path

import pytest

from topgrade.steps.base import StepContext
from topgrade.util.paths import BaseDirs
from topgrade.util.shell import CmdResult


@dataclass
class FakeTerminal:
    separators: list = field(default_factory=list)
    results: list = field(default_factory=list)
    errors: list = field(default_factory=list)

    def print_separator(self, label):
        self.separators.append(label)

    def print_result(self, name, succeeded):
        self.results.append((name, succeeded))

    def print_error(self, message):
        self.errors.append(message)


@dataclass
class FakeRunner:
    """Records argv lists; exit codes are looked up by the command's basename."""

    codes: dict = field(default_factory=dict)
    stdout: dict = field(default_factory=dict)
    calls: list = field(default_factory=list)

    def __call__(self, cmd, cwd=None, env=None, capture=False):
        argv = cmd if isinstance(cmd, list) else [cmd]
        self.calls.append((list(argv), cwd))
        key = Path(argv[0]).name
        return CmdResult(
            cmd=" ".join(argv),
            returncode=self.codes.get(key, 0),
            elapsed_s=0.0,
            stdout=self.stdout.get(key) if capture else None,
        )

    def commands(self):
        return [Path(argv[0]).name for argv, _ in self.calls]


def fake_which(*available):
    def _which(name):
        return f"/usr/bin/{name}" if name in available else None

    return _which


@pytest.fixture
def home(tmp_path):
    h = tmp_path / "home"
    h.mkdir()
    return h


@pytest.fixture
def terminal():
    return FakeTerminal()


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def make_ctx(home, terminal, runner):
    def _make(*available, sudo=None, no_system=False):
        return StepContext(
            base_dirs=BaseDirs(home_dir=home, config_dir=home / ".config"),
            terminal=terminal,
            sudo=sudo,
            no_system=no_system,
            runner=runner,
            which=fake_which(*available),
        )

    return _make
