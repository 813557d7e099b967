from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Tuple

from .platform import OsFamily


@dataclass(frozen=True)
class Target:
    triple: str

    def __post_init__(self) -> None:
        if not self.triple or not self.triple.strip():
            raise ValueError("Target triple must not be empty")

    def __str__(self) -> str:
        return self.triple

    @property
    def is_musl(self) -> bool:
        return self.triple.endswith("-musl")

    @property
    def linker_env_key(self) -> str:
        return f"CARGO_TARGET_{self.triple.upper().replace('-', '_')}_LINKER"


class BuildRoute(enum.Enum):
    CROSS_AARCH64 = "cross-aarch64"
    CROSS_ARMV7 = "cross-armv7"
    LINUX_NATIVE = "linux-native"
    MACOS = "macos"
    WINDOWS = "windows"


@dataclass(frozen=True)
class BuildPlan:
    route: BuildRoute
    command: List[str]
    apt_packages: List[str] = field(default_factory=list)
    env: Dict[str, str] = field(default_factory=dict)


AARCH64_GNU = "aarch64-unknown-linux-gnu"
ARMV7_GNUEABIHF = "armv7-unknown-linux-gnueabihf"

# triple -> (apt package, linker binary)
CROSS_TOOLCHAINS: Dict[str, Tuple[str, str]] = {
    AARCH64_GNU: ("gcc-aarch64-linux-gnu", "aarch64-linux-gnu-gcc"),
    ARMV7_GNUEABIHF: ("gcc-arm-linux-gnueabihf", "arm-linux-gnueabihf-gcc"),
}


def release_build_command(target: Target, flags: str = "") -> List[str]:
    """Return ``cargo build --release --all --target <triple>`` plus any extra flags.

    Flags are split on whitespace and otherwise passed through untouched, so
    quotes and backslashes survive and an empty or blank value contributes
    no argument at all.
    """
    return ["cargo", "build", "--release", "--all", "--target", target.triple, *flags.split()]


def _cross_plan(route: BuildRoute) -> Callable[[Target, str], BuildPlan]:
    def plan(target: Target, flags: str) -> BuildPlan:
        package, linker = CROSS_TOOLCHAINS[target.triple]
        return BuildPlan(
            route=route,
            command=release_build_command(target, flags),
            apt_packages=[package],
            env={target.linker_env_key: linker},
        )

    return plan


def _linux_native_plan(target: Target, flags: str) -> BuildPlan:
    return BuildPlan(
        route=BuildRoute.LINUX_NATIVE,
        command=release_build_command(target, flags),
        apt_packages=["musl-tools"] if target.is_musl else [],
    )


def _macos_plan(target: Target, flags: str) -> BuildPlan:
    return BuildPlan(route=BuildRoute.MACOS, command=release_build_command(target, flags))


def _windows_plan(target: Target, flags: str) -> BuildPlan:
    return BuildPlan(route=BuildRoute.WINDOWS, command=release_build_command(target, flags))


_LINUX_CROSS = {
    AARCH64_GNU: _cross_plan(BuildRoute.CROSS_AARCH64),
    ARMV7_GNUEABIHF: _cross_plan(BuildRoute.CROSS_ARMV7),
}

_FAMILY_PLANS: Dict[OsFamily, Callable[[Target, str], BuildPlan]] = {
    OsFamily.MACOS: _macos_plan,
    OsFamily.WINDOWS: _windows_plan,
}


def select_build(os_family: OsFamily, target: Target, flags: str = "") -> BuildPlan:
    if os_family is OsFamily.LINUX:
        planner = _LINUX_CROSS.get(target.triple, _linux_native_plan)
    else:
        planner = _FAMILY_PLANS[os_family]
    return planner(target, flags)
