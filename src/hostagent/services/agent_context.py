# src/hostagent/services/agent_context.py
from __future__ import annotations
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from threading import Lock
from typing import Optional

from hostagent.domain import InstanceContext
from hostagent.ports import EventBus, FSPolicy, Mailbox, PathProvider
from hostagent.services.exec.service import ProcessExecutor
from hostagent.services.platform.profile import HostPlatformProbe, PlatformProbe, create_instance_context
from hostagent.services.platform.service_probe import ServiceProbe
from hostagent.services.settings import Settings

_CTX: ContextVar[Optional["AgentContext"]] = ContextVar("hostagent_ctx", default=None)


def set_ctx(ctx: AgentContext) -> None:
    """Publishes the current AgentContext (visible through get_ctx)."""
    _CTX.set(ctx)


def get_ctx() -> AgentContext:
    """Returns the current AgentContext or raises if the app was not bootstrapped."""
    ctx = _CTX.get()
    if ctx is None:
        raise RuntimeError("AgentContext is not initialized. Call set_ctx(...) during app bootstrap.")
    return ctx


def clear_ctx() -> None:
    _CTX.set(None)


@contextmanager
def use_ctx(ctx: AgentContext):
    """Temporarily swaps the context (handy in tests)."""
    token = _CTX.set(ctx)
    try:
        yield
    finally:
        _CTX.reset(token)


@dataclass(slots=True)
class AgentContext:
    settings: Settings
    paths: PathProvider
    bus: EventBus
    fs: FSPolicy
    mailbox: Mailbox
    executor: ProcessExecutor
    service_probe: ServiceProbe
    platform_probe: Optional[PlatformProbe] = None
    _profile: Optional[InstanceContext] = field(default=None, init=False, repr=False)
    _profile_lock: Lock = field(default_factory=Lock, init=False, repr=False)

    @property
    def profile(self) -> InstanceContext:
        """Platform profile of this host, probed once and then reused."""
        prof = self._profile
        if prof is None:
            with self._profile_lock:
                prof = self._profile
                if prof is None:
                    probe = self.platform_probe or HostPlatformProbe(region=self.settings.region)
                    prof = create_instance_context(probe)
                    object.__setattr__(self, "_profile", prof)
        return prof
