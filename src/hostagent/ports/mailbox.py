from __future__ import annotations
from typing import Protocol

from hostagent.domain import CommandDocument, EntryId, Outcome


class Mailbox(Protocol):
    """Hand-off of one command document to an out-of-process consumer."""

    def submit(self, content: str | CommandDocument) -> EntryId: ...

    def poll_outcome(self, entry_id: EntryId, max_attempts: int, poll_interval: float) -> Outcome: ...
