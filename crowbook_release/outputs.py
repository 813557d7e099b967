from pathlib import Path
from typing import Optional


def append_output(github_output: Optional[Path], key: str, value: str) -> None:
    """Append ``key=value`` to the workflow output file, or print it when running locally."""
    line = f"{key}={value}"
    if github_output is None:
        print(line, flush=True)
        return
    with github_output.open("a", encoding="utf-8") as fh:
        fh.write(line + "\n")
