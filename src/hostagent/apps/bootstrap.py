# src/hostagent/apps/bootstrap.py
from __future__ import annotations
from typing import Optional
from threading import RLock

from hostagent.adapters.fs.path_provider import PathProvider
from hostagent.services.agent_context import AgentContext, set_ctx
from hostagent.services.eventbus import LocalEventBus
from hostagent.services.exec.runner import ProcRunner
from hostagent.services.exec.service import ProcessExecutor
from hostagent.services.logging import attach_event_logger, setup_logging
from hostagent.services.mailbox.service import FsCommandMailbox
from hostagent.services.platform.service_probe import ServiceProbe
from hostagent.services.policy.fs import SimpleFSPolicy
from hostagent.services.settings import Settings


class _CtxHolder:
    _ctx: Optional[AgentContext] = None
    _lock = RLock()

    @classmethod
    def init(cls, settings: Optional[Settings] = None) -> AgentContext:
        with cls._lock:
            if cls._ctx is None or (settings is not None and settings != cls._ctx.settings):
                cls._ctx = _build(settings or Settings.from_sources())
            set_ctx(cls._ctx)
            return cls._ctx

    @classmethod
    def reload(cls, **overrides) -> AgentContext:
        with cls._lock:
            base = cls._ctx.settings if cls._ctx else Settings.from_sources()
            cls._ctx = _build(base.with_overrides(**overrides))
            set_ctx(cls._ctx)
            return cls._ctx

    @classmethod
    def reset(cls) -> None:
        with cls._lock:
            cls._ctx = None


def _build(settings: Settings) -> AgentContext:
    paths = PathProvider(settings)
    paths.ensure_tree()

    fs = SimpleFSPolicy()
    for root in (paths.base_dir(), paths.commands_dir(), paths.logs_dir(), paths.update_dir(), paths.download_dir()):
        fs.allow_root(root)

    bus = LocalEventBus()
    root_logger = setup_logging(paths, level=settings.log_level)
    attach_event_logger(bus, root_logger.getChild("events"))

    return AgentContext(
        settings=settings,
        paths=paths,
        bus=bus,
        fs=fs,
        mailbox=FsCommandMailbox(paths, fs=fs, bus=bus),
        executor=ProcessExecutor(runner=ProcRunner(), bus=bus, timeout_sec=settings.exec_timeout_sec),
        service_probe=ServiceProbe(service_name=settings.service_name, windows_service_name=settings.windows_service_name),
    )


def init_ctx(settings: Optional[Settings] = None) -> AgentContext:
    """Builds the application context once and publishes it."""
    return _CtxHolder.init(settings)


def reload_ctx(**overrides) -> AgentContext:
    """Rebuilds the context with overrides and publishes it."""
    return _CtxHolder.reload(**overrides)


def reset_ctx() -> None:
    _CtxHolder.reset()
