from __future__ import annotations
import time
from collections import defaultdict
from threading import RLock
from typing import Any, Callable, DefaultDict, List, Optional

from hostagent.domain import Event
from hostagent.ports import EventBus

Handler = Callable[[Event], Any]


class LocalEventBus(EventBus):
    """
    In-process bus keyed by event type prefix.
      * prefix "" or "*" subscribes to everything.
      * handlers run synchronously on the publishing thread (the exec watcher publishes too).
    """

    def __init__(self) -> None:
        self._subs: DefaultDict[str, List[Handler]] = defaultdict(list)
        self._lock = RLock()

    def subscribe(self, type_prefix: str, handler: Handler) -> None:
        with self._lock:
            self._subs[type_prefix].append(handler)

    def publish(self, event: Event) -> None:
        with self._lock:
            pairs = [(p, hs[:]) for p, hs in self._subs.items()]
        for prefix, handlers in pairs:
            if prefix == "*" or prefix == "" or event.type.startswith(prefix):
                for h in handlers:
                    h(event)


def emit(bus: Optional[EventBus], type_: str, payload: dict, source: str) -> None:
    if bus is None:
        return
    bus.publish(Event(type=type_, payload=payload, source=source, ts=time.time()))
