from __future__ import annotations

"""Base directory resolution.

CONTRACT
- Inputs: process environment
- Outputs:
  - BaseDirs(home_dir, config_dir)
- Invariants:
  - config_dir follows the platform convention (XDG on linux/unix,
    ~/Library/Preferences on macOS, %APPDATA% on Windows)
- Failure:
  - Raises NoBaseDirectories when the home directory cannot be determined
"""

import os
import sys
from dataclasses import dataclass
from pathlib import Path


class NoBaseDirectories(RuntimeError):
    def __init__(self) -> None:
        super().__init__("Cannot find the user base directories")


@dataclass(frozen=True)
class BaseDirs:
    home_dir: Path
    config_dir: Path

    @classmethod
    def detect(cls) -> BaseDirs:
        try:
            home = Path.home()
        except RuntimeError as exc:
            raise NoBaseDirectories() from exc
        if not str(home) or not home.is_absolute():
            raise NoBaseDirectories()

        if sys.platform == "win32":
            appdata = os.environ.get("APPDATA")
            config = Path(appdata) if appdata else home / "AppData" / "Roaming"
        elif sys.platform == "darwin":
            config = home / "Library" / "Preferences"
        else:
            xdg = os.environ.get("XDG_CONFIG_HOME")
            config = Path(xdg) if xdg and Path(xdg).is_absolute() else home / ".config"
        return cls(home_dir=home, config_dir=config)


def expand_path(raw: str) -> Path:
    """Expand `~` and environment variables the way a shell would."""
    return Path(os.path.expandvars(os.path.expanduser(raw)))
