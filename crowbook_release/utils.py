import hashlib
import shutil
from pathlib import Path


def log(message: str) -> None:
    print(f"::notice ::{message}", flush=True)


def warn(message: str) -> None:
    print(f"::warning ::{message}", flush=True)


def error(message: str) -> None:
    print(f"::error ::{message}", flush=True)


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def recreate_dir(path: Path) -> Path:
    if path.exists():
        shutil.rmtree(path)
    return ensure_dir(path)


def sha256_file(path: Path) -> str:
    digest = hashlib.sha256()
    with path.open("rb") as fh:
        for chunk in iter(lambda: fh.read(8192), b""):
            digest.update(chunk)
    return digest.hexdigest()
