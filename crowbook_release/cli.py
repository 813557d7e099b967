"""Build the crowbook release binary and package it for the current CI target."""
from __future__ import annotations

import argparse
import subprocess
from pathlib import Path
from typing import List, Mapping, Optional

from . import build, packaging, shell, utils
from .config import PackagerConfig


def _log_subprocess_failure(exc: subprocess.CalledProcessError) -> None:
    utils.error(f"Command failed (exit {exc.returncode}): {shell.stringify(exc.cmd)}")
    if exc.stdout:
        print("[stdout]")
        print(exc.stdout)
    if exc.stderr:
        print("[stderr]")
        print(exc.stderr)


def package_release(cfg: PackagerConfig, install: bool = True, skip_build: bool = False) -> packaging.ReleaseArchive:
    if not skip_build:
        build.run_build(cfg, install=install)
    binaries = build.collect_binaries(cfg)
    build.verify_version(binaries)
    archive = packaging.assemble(cfg, binaries)
    packaging.record_archive(cfg, archive)
    return archive


def main(argv: Optional[List[str]] = None, environ: Optional[Mapping[str, str]] = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--config", type=Path, help="Release settings YAML file.")
    parser.add_argument(
        "--skip-install",
        action="store_true",
        help="Do not install cross compilers or musl tools.",
    )
    parser.add_argument(
        "--skip-build",
        action="store_true",
        help="Package an existing target/<triple>/release tree without running cargo.",
    )
    args = parser.parse_args(argv)

    try:
        cfg = PackagerConfig.from_env(environ, args.config)
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc

    try:
        package_release(cfg, install=not args.skip_install, skip_build=args.skip_build)
    except subprocess.CalledProcessError as exc:
        _log_subprocess_failure(exc)
        raise SystemExit(exc.returncode or 1) from exc


if __name__ == "__main__":
    main()
