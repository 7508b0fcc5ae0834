# src/hostagent/adapters/fs/path_provider.py
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from hostagent.config import const
from hostagent.services.settings import Settings


@dataclass(slots=True)
class PathProvider:
    """Single source of truth for on-disk locations. Always works with pathlib.Path."""

    base: Path
    package_dir: Path

    def __init__(self, settings: Settings):
        object.__setattr__(self, "base", Path(settings.base_dir).expanduser().resolve())
        object.__setattr__(self, "package_dir", settings.package_dir.expanduser().resolve())

    def base_dir(self) -> Path:
        return self.base

    def logs_dir(self) -> Path:
        return (self.base / "logs").resolve()

    def download_dir(self) -> Path:
        return (self.base / "download").resolve()

    def update_dir(self) -> Path:
        return (self.base / "update").resolve()

    # --- mailbox ---
    def commands_dir(self) -> Path:
        return (self.base / const.COMMANDS_DIRNAME).resolve()

    def pending_dir(self) -> Path:
        return self.commands_dir() / const.PENDING_DIRNAME

    def submitted_dir(self) -> Path:
        return self.commands_dir() / const.SUBMITTED_DIRNAME

    def invalid_dir(self) -> Path:
        return self.commands_dir() / const.INVALID_DIRNAME

    def ensure_tree(self) -> None:
        # pending/submitted/invalid are created on demand, the consumer owns the last two
        for p in (self.base_dir(), self.logs_dir(), self.download_dir(), self.update_dir()):
            p.mkdir(parents=True, exist_ok=True)
