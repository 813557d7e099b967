from __future__ import annotations

import enum
import platform


class OsFamily(enum.Enum):
    LINUX = "linux"
    MACOS = "macos"
    WINDOWS = "windows"

    @classmethod
    def from_label(cls, label: str) -> "OsFamily":
        """Map a CI runner label such as ``ubuntu-22.04`` to its OS family."""
        name = label.strip().lower()
        if name.startswith(("ubuntu", "linux")):
            return cls.LINUX
        if name.startswith(("macos", "darwin")):
            return cls.MACOS
        if name.startswith(("windows", "win")):
            return cls.WINDOWS
        raise ValueError(f"Unsupported operating system '{label}'")

    @classmethod
    def detect(cls) -> "OsFamily":
        return cls.from_label(platform.system())

    @property
    def exe_suffix(self) -> str:
        return ".exe" if self is OsFamily.WINDOWS else ""

    @property
    def archive_format(self) -> str:
        return "zip" if self is OsFamily.WINDOWS else "tar.gz"

    @property
    def is_unix(self) -> bool:
        return self is not OsFamily.WINDOWS
