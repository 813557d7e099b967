from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from . import deps, shell, utils
from .config import PackagerConfig
from .targets import BuildPlan, select_build


@dataclass(frozen=True)
class ProbeResult:
    output: str
    cause: Optional[str] = None
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.cause is None


def run_build(cfg: PackagerConfig, install: bool = True) -> BuildPlan:
    plan = select_build(cfg.os_family, cfg.target, cfg.flags)
    utils.log(f"Building {cfg.binary} {cfg.version} for {cfg.target} ({plan.route.value})")
    if install:
        deps.install_apt(plan.apt_packages)
    deps.ensure_lockfile(cfg.workspace)
    shell.run(plan.command, cwd=cfg.workspace, env=plan.env or None)
    return plan


def remove_dep_info(release_dir: Path) -> None:
    for path in release_dir.glob("*.d"):
        if path.is_file():
            path.unlink()


def collect_binaries(cfg: PackagerConfig) -> List[Path]:
    """Return the built executables, logging the listing.

    An empty match means the build did not produce the expected binary; it is
    reported but does not stop packaging.
    """
    release_dir = cfg.release_dir
    pattern = f"{cfg.binary}*{cfg.os_family.exe_suffix}"
    if release_dir.is_dir():
        remove_dep_info(release_dir)
        matches = sorted(p for p in release_dir.glob(pattern) if p.is_file())
    else:
        matches = []
    print(f"Artifacts matching {release_dir / pattern}:", flush=True)
    for path in matches:
        print(f"  {path}", flush=True)
    if not matches:
        utils.error(f"No files matched {pattern} in {release_dir}")
    return matches


def probe_version(binary: Path) -> ProbeResult:
    try:
        result = shell.run([str(binary), "--version"], check=False, capture=True)
    except OSError as exc:
        return ProbeResult(output="", cause=str(exc))
    output = (result.stdout or "").strip()
    stderr = (result.stderr or "").strip()
    if result.returncode != 0:
        return ProbeResult(output=output, cause=f"exit status {result.returncode}", stderr=stderr)
    return ProbeResult(output=output, stderr=stderr)


def verify_version(binaries: List[Path]) -> Optional[ProbeResult]:
    if not binaries:
        utils.warn("Skipping version check: no binary was collected")
        return None
    result = probe_version(binaries[0])
    if result.output:
        print(result.output, flush=True)
    if not result.ok:
        print(f"Version check failed: {result.cause}", flush=True)
        if result.stderr:
            print(result.stderr, flush=True)
    if not result.output:
        utils.warn(
            f"{binaries[0].name} --version produced no output; "
            "the binary is likely incompatible with this host"
        )
    return result
