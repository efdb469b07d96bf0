from __future__ import annotations

"""Linux steps.

CONTRACT
- Inputs: StepContext (sudo path looked up once by the orchestrator)
- Outputs (required):
  - upgrade(): system package upgrade for the detected distribution
  - flatpak, snap, fwupdmgr, needrestart steps
- Invariants:
  - Distribution is read from /etc/os-release (ID, then ID_LIKE)
- Failure:
  - Unknown distribution: logged and SKIPPED
"""

from enum import Enum
from pathlib import Path

from loguru import logger

from .base import StepContext, StepOutcome

OS_RELEASE = Path("/etc/os-release")


class Distribution(Enum):
    ARCH = "arch"
    DEBIAN = "debian"
    FEDORA = "fedora"
    CENTOS = "centos"
    OPENSUSE = "opensuse"
    GENTOO = "gentoo"
    VOID = "void"


_IDS = {
    "arch": Distribution.ARCH,
    "manjaro": Distribution.ARCH,
    "debian": Distribution.DEBIAN,
    "ubuntu": Distribution.DEBIAN,
    "linuxmint": Distribution.DEBIAN,
    "pop": Distribution.DEBIAN,
    "fedora": Distribution.FEDORA,
    "centos": Distribution.CENTOS,
    "rhel": Distribution.CENTOS,
    "opensuse": Distribution.OPENSUSE,
    "opensuse-leap": Distribution.OPENSUSE,
    "opensuse-tumbleweed": Distribution.OPENSUSE,
    "suse": Distribution.OPENSUSE,
    "gentoo": Distribution.GENTOO,
    "void": Distribution.VOID,
}


def parse_os_release(text: str) -> dict[str, str]:
    values: dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        values[key.strip()] = value.strip().strip('"').strip("'")
    return values


def detect_distribution(os_release: Path = OS_RELEASE) -> Distribution | None:
    try:
        values = parse_os_release(os_release.read_text(encoding="utf-8"))
    except OSError as e:
        logger.warning(f"Cannot read {os_release}: {e}")
        return None
    ids = [values.get("ID", "")] + values.get("ID_LIKE", "").split()
    for ident in ids:
        if ident.lower() in _IDS:
            return _IDS[ident.lower()]
    return None


def _arch(ctx: StepContext) -> StepOutcome:
    for helper in ("yay", "trizen"):
        path = ctx.which(helper)
        if path:
            return ctx.execute([path, "-Syu"])
    return ctx.execute(ctx.elevated(["pacman", "-Syu"]))


def _debian(ctx: StepContext) -> StepOutcome:
    return ctx.execute(
        ctx.elevated(["apt", "update"]),
        ctx.elevated(["apt", "dist-upgrade"]),
    )


def _fedora(ctx: StepContext) -> StepOutcome:
    return ctx.execute(ctx.elevated(["dnf", "upgrade"]))


def _centos(ctx: StepContext) -> StepOutcome:
    return ctx.execute(ctx.elevated(["yum", "upgrade"]))


def _opensuse(ctx: StepContext) -> StepOutcome:
    return ctx.execute(
        ctx.elevated(["zypper", "refresh"]),
        ctx.elevated(["zypper", "dist-upgrade"]),
    )


def _gentoo(ctx: StepContext) -> StepOutcome:
    layman = ctx.which("layman")
    if layman:
        if ctx.execute(ctx.elevated([layman, "-s", "ALL"])) is StepOutcome.FAILED:
            return StepOutcome.FAILED
    return ctx.execute(
        ctx.elevated(["emerge", "--sync"]),
        ctx.elevated(["emerge", "-uDNa", "world"]),
    )


def _void(ctx: StepContext) -> StepOutcome:
    return ctx.execute(ctx.elevated(["xbps-install", "-Su"]))


_UPGRADERS = {
    Distribution.ARCH: _arch,
    Distribution.DEBIAN: _debian,
    Distribution.FEDORA: _fedora,
    Distribution.CENTOS: _centos,
    Distribution.OPENSUSE: _opensuse,
    Distribution.GENTOO: _gentoo,
    Distribution.VOID: _void,
}


def upgrade(ctx: StepContext, os_release: Path = OS_RELEASE) -> StepOutcome:
    distribution = detect_distribution(os_release)
    if distribution is None:
        logger.warning("Could not detect the Linux distribution; skipping system upgrade")
        return StepOutcome.SKIPPED
    ctx.terminal.print_separator("System update")
    return _UPGRADERS[distribution](ctx)


def run_flatpak(ctx: StepContext) -> StepOutcome:
    flatpak = ctx.which("flatpak")
    if flatpak is None:
        return StepOutcome.SKIPPED
    ctx.terminal.print_separator("Flatpak")
    return ctx.execute([flatpak, "update"])


def run_snap(ctx: StepContext) -> StepOutcome:
    snap = ctx.which("snap")
    if snap is None or ctx.sudo is None:
        return StepOutcome.SKIPPED
    ctx.terminal.print_separator("snap")
    return ctx.execute([ctx.sudo, snap, "refresh"])


def run_fwupdmgr(ctx: StepContext) -> StepOutcome:
    fwupdmgr = ctx.which("fwupdmgr")
    if fwupdmgr is None:
        return StepOutcome.SKIPPED
    ctx.terminal.print_separator("Firmware upgrades")
    return ctx.execute([fwupdmgr, "refresh"], [fwupdmgr, "get-updates"])


def run_needrestart(ctx: StepContext) -> StepOutcome:
    needrestart = ctx.which("needrestart")
    if needrestart is None or ctx.sudo is None:
        return StepOutcome.SKIPPED
    ctx.terminal.print_separator("Check for needed restarts")
    return ctx.execute([ctx.sudo, needrestart])
