import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from crowbook_release import shell
from crowbook_release.config import PackagerConfig


@dataclass
class Call:
    argv: List[str]
    cwd: Optional[Path]
    env: Dict[str, str] = field(default_factory=dict)


class Recorder:
    """Stands in for ``shell.run`` and remembers every command."""

    def __init__(self):
        self.calls: List[Call] = []
        self.version_output = "crowbook 0.1.0\n"
        self.version_returncode = 0
        self.version_stderr = ""
        self.version_error: Optional[OSError] = None
        self.fail_on: Optional[List[str]] = None

    @property
    def commands(self) -> List[List[str]]:
        return [c.argv for c in self.calls]

    def __call__(self, cmd, *, cwd=None, env=None, check=True, capture=False):
        argv = [str(part) for part in cmd]
        self.calls.append(Call(argv, cwd, dict(env or {})))
        if self.fail_on and argv[: len(self.fail_on)] == self.fail_on:
            raise subprocess.CalledProcessError(101, argv, output="", stderr="error: could not compile")
        if argv[1:] == ["--version"]:
            if self.version_error is not None:
                raise self.version_error
            return subprocess.CompletedProcess(argv, self.version_returncode, stdout=self.version_output, stderr=self.version_stderr)
        return subprocess.CompletedProcess(argv, 0, stdout="", stderr="")


@pytest.fixture
def recorder(monkeypatch):
    rec = Recorder()
    monkeypatch.setattr(shell, "run", rec)
    monkeypatch.setattr(shell, "command_exists", lambda name: False)
    return rec


@pytest.fixture
def workspace(tmp_path):
    root = tmp_path / "crowbook"
    root.mkdir()
    (root / "Cargo.toml").write_text(
        '[package]\nname = "crowbook"\nversion = "0.1.0"\n\n[dependencies]\n',
        encoding="utf-8",
    )
    (root / "Cargo.lock").write_text("# lock\n", encoding="utf-8")
    (root / "README.md").write_text("# Crowbook\n", encoding="utf-8")
    (root / "LICENSE.md").write_text("LGPL\n", encoding="utf-8")
    return root


def place_binary(workspace: Path, triple: str, name: str = "crowbook") -> Path:
    release_dir = workspace / "target" / triple / "release"
    release_dir.mkdir(parents=True, exist_ok=True)
    binary = release_dir / name
    binary.write_bytes(b"\x7fELF fake binary")
    (release_dir / "crowbook.d").write_text("deps\n", encoding="utf-8")
    (release_dir / "deps").mkdir(exist_ok=True)
    return binary


def make_env(workspace: Path, os_label: str, triple: str, flags: str = "") -> Dict[str, str]:
    return {
        "OS": os_label,
        "TARGET": triple,
        "FLAGS": flags,
        "GITHUB_WORKSPACE": str(workspace),
        "GITHUB_OUTPUT": str(workspace.parent / "github_output"),
    }


@pytest.fixture
def make_config(workspace):
    def factory(os_label: str, triple: str, flags: str = "") -> PackagerConfig:
        return PackagerConfig.from_env(make_env(workspace, os_label, triple, flags))

    return factory
