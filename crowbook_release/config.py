from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

from .platform import OsFamily
from .targets import Target


BINARY_NAME = "crowbook"
DEFAULT_MANIFEST = "Cargo.toml"
DEFAULT_OUTPUT_DIR = "output"
DEFAULT_EXTRA_FILES = ("README.md", "LICENSE.md")
DEFAULT_SETTINGS_PATH = Path(".github") / "release.yaml"


class ReleaseSettings:
    """Optional YAML overrides for the packaging pipeline."""

    def __init__(self, data: Optional[Dict[str, Any]] = None, path: Optional[Path] = None):
        self.path = path
        self.data: Dict[str, Any] = data or {}

    @classmethod
    def load(cls, path: Path) -> "ReleaseSettings":
        try:
            loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as exc:
            raise SystemExit(f"Unable to read release settings {path}: {exc}") from exc
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise SystemExit(f"Release settings {path} must be a mapping")
        return cls(loaded, path)

    @property
    def pipeline(self) -> Dict[str, Any]:
        section = self.data.get("pipeline", {})
        return section if isinstance(section, dict) else {}

    def pipeline_setting(self, key: str, default: str) -> str:
        value = self.pipeline.get(key)
        return str(value) if value is not None else default

    @property
    def package_files(self) -> Tuple[str, ...]:
        package = self.data.get("package", {})
        files = package.get("files") if isinstance(package, dict) else None
        if not isinstance(files, list):
            return DEFAULT_EXTRA_FILES
        return tuple(str(f) for f in files)


def read_version(manifest: Path) -> str:
    """Return ``package.version`` from a Cargo manifest."""
    if not manifest.exists():
        raise SystemExit(f"Manifest not found: {manifest}")
    try:
        data = tomllib.loads(manifest.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise SystemExit(f"Unable to parse manifest {manifest}: {exc}") from exc
    package = data.get("package")
    version = package.get("version") if isinstance(package, dict) else None
    if not isinstance(version, str) or not version.strip():
        raise SystemExit(f"package.version missing from {manifest}")
    return version.strip()


def resolve_settings(workspace: Path, config_path: Optional[Path]) -> ReleaseSettings:
    if config_path is not None:
        return ReleaseSettings.load(config_path)
    default = workspace / DEFAULT_SETTINGS_PATH
    if default.exists():
        return ReleaseSettings.load(default)
    return ReleaseSettings()


@dataclass(frozen=True)
class PackagerConfig:
    os_family: OsFamily
    target: Target
    flags: str
    workspace: Path
    output_dir: Path
    binary: str
    version: str
    github_output: Optional[Path] = None
    extra_files: Tuple[str, ...] = DEFAULT_EXTRA_FILES

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        config_path: Optional[Path] = None,
    ) -> "PackagerConfig":
        env = os.environ if environ is None else environ

        triple = env.get("TARGET", "")
        if not triple.strip():
            raise SystemExit("TARGET environment variable is required")
        os_label = env.get("OS", "").strip()
        os_family = OsFamily.from_label(os_label) if os_label else OsFamily.detect()

        workspace = Path(env.get("GITHUB_WORKSPACE") or ".").resolve()
        settings = resolve_settings(workspace, config_path)
        manifest = workspace / settings.pipeline_setting("manifest", DEFAULT_MANIFEST)
        github_output = env.get("GITHUB_OUTPUT")

        return cls(
            os_family=os_family,
            target=Target(triple.strip()),
            flags=env.get("FLAGS", ""),
            workspace=workspace,
            output_dir=workspace / settings.pipeline_setting("output_dir", DEFAULT_OUTPUT_DIR),
            binary=settings.pipeline_setting("name", BINARY_NAME),
            version=read_version(manifest),
            github_output=Path(github_output) if github_output else None,
            extra_files=settings.package_files,
        )

    @property
    def release_name(self) -> str:
        return f"{self.binary}-{self.version}-{self.target}"

    @property
    def release_dir(self) -> Path:
        return self.workspace / "target" / self.target.triple / "release"
