import os
from pathlib import Path
from typing import Iterable, List

from . import shell, utils


def _privileged(cmd: List[str]) -> List[str]:
    if os.geteuid() != 0 and shell.command_exists("sudo"):
        return ["sudo", *cmd]
    return cmd


def install_apt(packages: Iterable[str]) -> None:
    pkgs = [p for p in packages if p]
    if not pkgs:
        return
    shell.run(_privileged(["apt-get", "update", "-qq"]))
    shell.run(_privileged(["apt-get", "install", "-y", "--no-install-recommends", *pkgs]))


def ensure_lockfile(workspace: Path) -> None:
    """Regenerate Cargo.lock when the checkout does not carry one."""
    if (workspace / "Cargo.lock").exists():
        return
    utils.log("Cargo.lock missing, regenerating it")
    shell.run(["cargo", "generate-lockfile"], cwd=workspace)
