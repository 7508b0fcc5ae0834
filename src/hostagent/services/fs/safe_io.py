from __future__ import annotations
import os, tempfile
from pathlib import Path
from typing import Optional
from hostagent.ports import FSPolicy


def ensure_dir(path: str | Path, fs: Optional[FSPolicy] = None) -> Path:
    if fs is not None:
        fs.require_write(str(path))
    p = Path(path)
    p.mkdir(parents=True, exist_ok=True)
    return p


def write_text_atomic(
    path: str | Path,
    data: str,
    fs: Optional[FSPolicy] = None,
    *,
    tmp_dir: str | Path | None = None,
) -> None:
    """Writes ``data`` to a temp file, then renames it onto ``path``.

    ``tmp_dir`` must live on the same filesystem as ``path``; it defaults to the
    parent directory.
    """
    if fs is not None:
        fs.require_write(str(path))
    p = Path(path)
    fd, tmp = tempfile.mkstemp(prefix=f".{p.name}.", suffix=".tmp", dir=str(tmp_dir or p.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, p)
    finally:
        try:
            os.unlink(tmp)
        except FileNotFoundError:
            pass


def remove_file(path: str | Path, fs: Optional[FSPolicy] = None) -> None:
    if fs is not None:
        fs.require_write(str(path))
    Path(path).unlink()


def list_names(path: str | Path) -> list[str]:
    """File names in ``path``; a missing directory reads as empty."""
    try:
        return sorted(e.name for e in os.scandir(path) if e.is_file())
    except FileNotFoundError:
        return []
