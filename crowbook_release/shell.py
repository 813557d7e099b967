"""Blocking subprocess helpers; every command is an argv list, never a shell string."""
import os
import shlex
import shutil
import subprocess
from pathlib import Path
from typing import Mapping, Optional, Sequence


Argv = Sequence[str]


def stringify(argv: Argv) -> str:
    """Render argv for the CI log, quoted so it can be pasted into a shell."""
    return " ".join(shlex.quote(str(part)) for part in argv)


def run(
    argv: Argv,
    *,
    cwd: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
    check: bool = True,
    capture: bool = False,
) -> subprocess.CompletedProcess:
    """Echo ``argv`` as ``[cmd] ...`` and run it to completion.

    ``env`` entries are layered over the current environment. A non-zero exit
    raises ``CalledProcessError`` unless ``check`` is false.
    """
    args = [str(part) for part in argv]
    print(f"[cmd] {stringify(args)}", flush=True)
    return subprocess.run(
        args,
        cwd=str(cwd) if cwd else None,
        env={**os.environ, **env} if env else None,
        check=check,
        capture_output=capture,
        text=True,
    )


def command_exists(name: str) -> bool:
    return shutil.which(name) is not None
