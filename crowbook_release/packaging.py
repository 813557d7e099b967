from __future__ import annotations

import shutil
import tarfile
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

from . import outputs, utils
from .config import PackagerConfig


@dataclass(frozen=True)
class ReleaseArchive:
    path: Path
    format: str
    name: str


def archive_path(cfg: PackagerConfig) -> Path:
    return cfg.output_dir / f"{cfg.release_name}.{cfg.os_family.archive_format}"


def checksum_file(path: Path) -> str:
    digest = utils.sha256_file(path)
    print(f"{digest}  {path.name}", flush=True)
    return digest


def populate_output_dir(cfg: PackagerConfig, binaries: Iterable[Path]) -> None:
    utils.recreate_dir(cfg.output_dir)
    for name in cfg.extra_files:
        shutil.copy2(cfg.workspace / name, cfg.output_dir / Path(name).name)
    for binary in binaries:
        shutil.copy2(binary, cfg.output_dir / binary.name)


def stage_release_dir(output_dir: Path, release_name: str) -> Path:
    entries = list(output_dir.iterdir())
    stage_dir = utils.ensure_dir(output_dir / release_name)
    for entry in entries:
        shutil.move(str(entry), str(stage_dir / entry.name))
    return stage_dir


def make_tarball(src_dir: Path, tarball: Path) -> None:
    tarball.parent.mkdir(parents=True, exist_ok=True)
    with tarfile.open(tarball, "w:gz") as tf:
        tf.add(src_dir, arcname=src_dir.name)


def make_zip(files: Iterable[Path], dest: Path) -> None:
    with zipfile.ZipFile(dest, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for path in files:
            zf.write(path, arcname=path.name)


def list_archives(output_dir: Path, pattern: str) -> List[Path]:
    return sorted(p.resolve() for p in output_dir.glob(pattern) if p.is_file())


def assemble(cfg: PackagerConfig, binaries: Iterable[Path]) -> ReleaseArchive:
    populate_output_dir(cfg, binaries)
    dest = archive_path(cfg)
    if cfg.os_family.is_unix:
        stage_dir = stage_release_dir(cfg.output_dir, cfg.release_name)
        make_tarball(stage_dir, dest)
    else:
        files = sorted(p for p in cfg.output_dir.iterdir() if p.is_file())
        make_zip(files, dest)
    utils.log(f"Created {dest}")
    checksum_file(dest)
    return ReleaseArchive(path=dest.resolve(), format=cfg.os_family.archive_format, name=cfg.release_name)


def record_archive(cfg: PackagerConfig, archive: ReleaseArchive) -> Optional[Path]:
    """Publish the archive path on the output channel.

    Windows reads the path back from the output directory listing and skips
    the record when nothing is listed; Unix records the constructed path.
    """
    if cfg.os_family.is_unix:
        outputs.append_output(cfg.github_output, "archive", str(archive.path))
        return archive.path
    listed = list_archives(cfg.output_dir, "*.zip")
    if not listed:
        utils.warn(f"No zip archive found in {cfg.output_dir}; archive output not recorded")
        return None
    outputs.append_output(cfg.github_output, "archive", str(listed[0]))
    return listed[0]
