# src/hostagent/services/mailbox/service.py
from __future__ import annotations
import logging
import time
import uuid
from pathlib import Path
from typing import Callable, Optional

from hostagent.config import const
from hostagent.domain import CommandDocument, EntryId, MailboxWriteFailure, Outcome
from hostagent.ports import EventBus, FSPolicy, Mailbox, PathProvider
from hostagent.services.documents.loader import parse_document, serialize
from hostagent.services.eventbus import emit
from hostagent.services.fs.safe_io import ensure_dir, list_names, remove_file, write_text_atomic

log = logging.getLogger("hostagent.mailbox")


def _gen_entry_id() -> EntryId:
    return EntryId(str(uuid.uuid4()))


def find_processed(entry_id: EntryId, folder: str | Path) -> Optional[str]:
    """
    Consumer id of the first file in ``folder`` that belongs to ``entry_id``
    (``<entry_id>...<sep><consumer_id>``), or None.
    """
    prefix = entry_id.value
    for name in list_names(folder):
        if name.startswith(prefix) and const.ENTRY_SUFFIX_SEPARATOR in name:
            return name.rsplit(const.ENTRY_SUFFIX_SEPARATOR, 1)[1]
    return None


class FsCommandMailbox(Mailbox):
    """
    Directory mailbox shared with an out-of-process consumer:
      pending/<id>                   written here
      submitted/<id>.<consumerId>    written by the consumer on acceptance
      invalid/<id>.<anything>        written by the consumer on rejection
    This side never writes to submitted/ or invalid/.
    """

    def __init__(
        self,
        paths: PathProvider,
        *,
        fs: Optional[FSPolicy] = None,
        bus: Optional[EventBus] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.paths = paths
        self.fs = fs
        self.bus = bus
        self._sleep = sleep

    def pending_path(self, entry_id: EntryId) -> Path:
        return Path(self.paths.pending_dir()) / entry_id.value

    # ---------- submit ----------

    def submit(self, content: str | CommandDocument) -> EntryId:
        document = content if isinstance(content, CommandDocument) else parse_document(content)
        payload = serialize(document)
        entry_id = _gen_entry_id()
        pending = Path(self.paths.pending_dir())
        try:
            ensure_dir(pending, self.fs)
        except OSError as e:
            log.error("mailbox.mkdir_failed", extra={"extra": {"dir": str(pending), "error": str(e)}})
            raise MailboxWriteFailure("failed to submit command") from e

        # temp file lives in the mailbox root, so the consumer never sees a partial entry in pending/
        write_text_atomic(self.pending_path(entry_id), payload, self.fs, tmp_dir=self.paths.commands_dir())
        emit(self.bus, "mailbox.submitted", {"id": entry_id.value, "bytes": len(payload)}, "mailbox")
        return entry_id

    # ---------- outcome ----------

    def check_outcome(self, entry_id: EntryId) -> Optional[Outcome]:
        """One scan of both areas; submitted/ is checked before invalid/."""
        consumer_id = find_processed(entry_id, self.paths.submitted_dir())
        if consumer_id is not None:
            return Outcome.submitted(consumer_id)
        if find_processed(entry_id, self.paths.invalid_dir()) is not None:
            return Outcome.invalid()
        return None

    def poll_outcome(
        self,
        entry_id: EntryId,
        max_attempts: int = const.SUBMIT_POLL_ATTEMPTS,
        poll_interval: float = const.SUBMIT_POLL_INTERVAL_SEC,
    ) -> Outcome:
        for _ in range(max_attempts):
            outcome = self.check_outcome(entry_id)
            if outcome is not None:
                return self._done(entry_id, outcome)
            self._sleep(poll_interval)

        self.withdraw(entry_id)
        # the consumer may have picked the entry up between the last scan and the delete
        outcome = self.check_outcome(entry_id)
        return self._done(entry_id, outcome or Outcome.timed_out())

    def withdraw(self, entry_id: EntryId) -> bool:
        """Best-effort removal of the pending copy. Returns True when a file was removed."""
        path = self.pending_path(entry_id)
        try:
            remove_file(path, self.fs)
        except FileNotFoundError:
            return False
        except OSError as e:
            log.warning("mailbox.withdraw_failed", extra={"extra": {"id": entry_id.value, "error": str(e)}})
            return False
        return True

    def _done(self, entry_id: EntryId, outcome: Outcome) -> Outcome:
        emit(
            self.bus,
            "mailbox.outcome",
            {"id": entry_id.value, "status": outcome.status.value, "consumer_id": outcome.consumer_id},
            "mailbox",
        )
        return outcome
