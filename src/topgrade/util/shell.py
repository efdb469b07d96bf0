from __future__ import annotations

"""Shell command execution.

CONTRACT
- Inputs: Command (string or argv list), optional cwd
- Outputs (required):
  - CmdResult(cmd, returncode, elapsed_s, stdout)
- Invariants:
  - Inherits the terminal's stdio unless capture=True (upgrade tools may prompt)
  - No timeout: a hung tool blocks the caller
- Failure:
  - Returns CmdResult with exit code (does NOT raise on non-zero exit)
  - A command that cannot be started yields returncode 127; any other
    exception while running it yields returncode 1
"""

import os
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

NOT_FOUND_RC = 127


def which(cmd: str) -> str | None:
    exts = [""]
    if os.name == "nt":
        exts += os.environ.get("PATHEXT", ".EXE;.BAT;.CMD").lower().split(";")
    for p in os.environ.get("PATH", "").split(os.pathsep):
        if not p:
            continue
        for ext in exts:
            candidate = Path(p) / f"{cmd}{ext}"
            if candidate.is_file() and os.access(candidate, os.X_OK):
                return str(candidate)
    return None


@dataclass(frozen=True)
class CmdResult:
    cmd: str
    returncode: int
    elapsed_s: float
    stdout: str | None = None

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def run_cmd(
    cmd: str | list[str],
    cwd: Path | None = None,
    capture: bool = False,
) -> CmdResult:
    """Run a command and wait for it to finish.

    CONTRACT:
    - Accepts cmd as str (run with shell=True) or list[str] (run with shell=False).
    - Never raises; caller inspects return code.
    - capture=True collects stdout as text (undecodable bytes replaced);
      stderr still goes to the terminal.
    """
    use_shell = isinstance(cmd, str)
    shown = cmd if use_shell else " ".join(cmd)
    logger.debug(f"Running: {shown}")

    start_t = time.time()
    stdout = None
    try:
        p = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd else None,
            shell=use_shell,
            stdout=subprocess.PIPE if capture else None,
            text=True,
            errors="replace",
        )
        rc = p.returncode
        stdout = p.stdout
    except OSError as e:
        logger.warning(f"Could not run {shown}: {e}")
        rc = NOT_FOUND_RC
    except Exception as e:
        logger.warning(f"{shown} failed: {e}")
        rc = 1

    return CmdResult(
        cmd=shown,
        returncode=rc,
        elapsed_s=time.time() - start_t,
        stdout=stdout,
    )
