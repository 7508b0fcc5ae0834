# tests/conftest.py
from __future__ import annotations
import os, sys, shutil, threading, time
from pathlib import Path
from typing import Optional

import pytest

from hostagent.apps.bootstrap import init_ctx, reset_ctx
from hostagent.domain import InstanceContext
from hostagent.services.agent_context import clear_ctx
from hostagent.services.settings import Settings

_MIN_PY = tuple(map(int, os.getenv("HOSTAGENT_MIN_PY", "3.10").split(".")))


# ---- simulated mailbox consumer ----
class FakeConsumer:
    """
    Plays the external agent: watches pending/ and moves each entry to
    submitted/<id>.<consumer_id> ("accept"), invalid/<id>.<reason> ("reject"),
    or leaves it alone ("ignore").
    """

    def __init__(self, paths, mode: str = "accept", consumer_id: str = "cmd-0001", delay: float = 0.0):
        self.paths = paths
        self.mode = mode
        self.consumer_id = consumer_id
        self.delay = delay
        self.seen: list[str] = []
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def _loop(self) -> None:
        pending = Path(self.paths.pending_dir())
        while not self._stop.is_set():
            names = [p.name for p in pending.iterdir()] if pending.exists() else []
            for name in names:
                if name.startswith(".") or name in self.seen:
                    continue
                self.seen.append(name)
                if self.mode == "ignore":
                    continue
                if self.delay:
                    time.sleep(self.delay)
                target_dir = Path(self.paths.submitted_dir() if self.mode == "accept" else self.paths.invalid_dir())
                target_dir.mkdir(parents=True, exist_ok=True)
                suffix = self.consumer_id if self.mode == "accept" else "schema"
                try:
                    shutil.move(str(pending / name), str(target_dir / f"{name}.{suffix}"))
                except FileNotFoundError:
                    pass
            time.sleep(0.01)

    def __enter__(self) -> "FakeConsumer":
        self._thread = threading.Thread(target=self._loop, daemon=True)
        self._thread.start()
        return self

    def __exit__(self, *exc) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=2)


@pytest.fixture
def consumer_factory():
    def make(mode: str = "accept", consumer_id: str = "cmd-0001", delay: float = 0.0) -> FakeConsumer:
        from hostagent.services.agent_context import get_ctx

        return FakeConsumer(get_ctx().paths, mode=mode, consumer_id=consumer_id, delay=delay)

    return make


@pytest.fixture
def ubuntu_profile() -> InstanceContext:
    return InstanceContext(
        region="eu-central-1",
        platform="ubuntu",
        platform_version="16.04",
        installer_name="ubuntu",
        arch="amd64",
        compress_format="tar.gz",
    )


# ---------- CLI application fixture ----------
@pytest.fixture
def cli_app():
    from hostagent.apps.cli.app import app

    return app


# ---------- autouse: every test gets its own context under tmp_path ----------
@pytest.fixture(autouse=True)
def _autocontext(tmp_path, monkeypatch):
    base_dir = tmp_path / "base"
    monkeypatch.setenv("HOSTAGENT_BASE_DIR", str(base_dir))
    monkeypatch.setenv("HOSTAGENT_REGION", "eu-central-1")
    # short polling keeps the timeout paths fast
    monkeypatch.setenv("HOSTAGENT_SUBMIT_ATTEMPTS", "5")
    monkeypatch.setenv("HOSTAGENT_SUBMIT_INTERVAL", "0.05")
    monkeypatch.setenv("HOSTAGENT_EXEC_TIMEOUT", "5")

    settings = Settings.from_sources(env_file=None).with_overrides(profile="test")
    reset_ctx()
    ctx = init_ctx(settings)
    try:
        yield ctx
    finally:
        clear_ctx()
        reset_ctx()


def pytest_sessionstart(session):
    if sys.version_info < _MIN_PY:
        from _pytest.outcomes import Exit

        raise Exit(
            f"hostagent tests require Python >= {'.'.join(map(str, _MIN_PY))}; current: {sys.version.split()[0]}",
            returncode=2,
        )
