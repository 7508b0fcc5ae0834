# src/hostagent/services/policy/fs.py
from __future__ import annotations
from pathlib import Path


class SimpleFSPolicy:
    """
    Allows access only below roots registered up front.
    Paths are checked after resolve(), which covers traversal and symlinks.
    """

    def __init__(self) -> None:
        self._roots: list[Path] = []

    def allow_root(self, root: str | Path) -> None:
        p = Path(root).resolve()
        if p not in self._roots:
            self._roots.append(p)

    def is_allowed(self, path: str | Path) -> bool:
        p = Path(path).resolve()
        for r in self._roots:
            try:
                p.relative_to(r)
                return True
            except ValueError:
                continue
        return False

    def require_read(self, path: str | Path) -> None:
        if not self.is_allowed(path):
            raise PermissionError(f"fs policy: path not allowed: {Path(path).resolve()}")

    def require_write(self, path: str | Path) -> None:
        self.require_read(path)
