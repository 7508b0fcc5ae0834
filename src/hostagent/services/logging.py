from __future__ import annotations
import json
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional
from datetime import datetime, timezone

from hostagent.domain import Event
from hostagent.ports import EventBus, PathProvider


def _json_formatter(record: logging.LogRecord) -> str:
    base = {
        "level": record.levelname,
        "logger": record.name,
        "msg": record.getMessage(),
        "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
    }
    if hasattr(record, "extra"):
        try:
            base.update(record.extra)  # type: ignore[attr-defined]
        except (TypeError, ValueError):
            pass
    return json.dumps(base, ensure_ascii=False, default=str)


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        return _json_formatter(record)


def setup_logging(paths: PathProvider, level: str = "INFO") -> logging.Logger:
    """
    Logging setup:
      - console (stderr)
      - file {logs_dir}/hostagent.log (rotating)
    JSON lines so the output is easy to parse.
    """
    logs_dir = Path(paths.logs_dir())
    logs_dir.mkdir(parents=True, exist_ok=True)
    logfile = logs_dir / "hostagent.log"

    logger = logging.getLogger("hostagent")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    stream_h = logging.StreamHandler()
    stream_h.setFormatter(JsonFormatter())
    # console stays quiet unless something goes wrong; the file gets everything
    stream_h.setLevel(max(logger.level, logging.WARNING))

    file_h = RotatingFileHandler(logfile, maxBytes=5_000_000, backupCount=3, encoding="utf-8")
    file_h.setFormatter(JsonFormatter())
    file_h.setLevel(logger.level)

    logger.addHandler(stream_h)
    logger.addHandler(file_h)
    logger.propagate = False
    logger.info("logging.initialized", extra={"extra": {"logfile": str(logfile)}})
    return logger


def attach_event_logger(bus: EventBus, logger: Optional[logging.Logger] = None) -> None:
    """Subscribes a logger to every event on the bus."""
    base_logger = logger or logging.getLogger("hostagent.events")

    def _handler(ev: Event) -> None:
        iso_time = datetime.fromtimestamp(ev.ts, tz=timezone.utc).isoformat() if ev.ts else None
        base_logger.info(
            "event",
            extra={
                "extra": {
                    "time": iso_time,
                    "type": ev.type,
                    "source": ev.source,
                    "ts": ev.ts,
                    "payload": dict(ev.payload),
                }
            },
        )

    bus.subscribe("", _handler)
