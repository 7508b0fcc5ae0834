from __future__ import annotations
from pathlib import Path
from typing import Any, Callable, Protocol

from hostagent.domain import Event


class EventBus(Protocol):
    def subscribe(self, type_prefix: str, handler: Callable[[Event], Any]) -> None: ...

    def publish(self, event: Event) -> None: ...


class FSPolicy(Protocol):
    def require_read(self, path: str) -> None: ...

    def require_write(self, path: str) -> None: ...


class PathProvider(Protocol):
    def base_dir(self) -> Path: ...

    def logs_dir(self) -> Path: ...

    def commands_dir(self) -> Path: ...

    def pending_dir(self) -> Path: ...

    def submitted_dir(self) -> Path: ...

    def invalid_dir(self) -> Path: ...
