# src/hostagent/services/submission.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from hostagent.config import const
from hostagent.domain import Outcome, OutcomeStatus, ValidationFailure
from hostagent.ports import Mailbox
from hostagent.services.documents.loader import Fetcher, load_content, serialize
from hostagent.services.documents.validation import input_errors, validate_document

log = logging.getLogger("hostagent.submission")

SEND_COMMAND = "send-offline-command"
CONTENT_PARAM = "content"


def describe_outcome(outcome: Outcome) -> str:
    if outcome.status is OutcomeStatus.SUBMITTED:
        return f"successfully submitted with command id: {outcome.consumer_id}"
    if outcome.status is OutcomeStatus.INVALID:
        return "failed to submit document: document was invalid"
    return "failed to submit document: timed out"


@dataclass(slots=True)
class SubmissionWorkflow:
    """validate input -> load -> validate document -> mailbox submit -> bounded poll -> message."""

    mailbox: Mailbox
    poll_attempts: int = const.SUBMIT_POLL_ATTEMPTS
    poll_interval_sec: float = const.SUBMIT_POLL_INTERVAL_SEC
    fetch: Optional[Fetcher] = None

    def execute(
        self,
        subcommands: Sequence[str] | None,
        parameters: Mapping[str, Sequence[str]],
    ) -> str:
        """
        Returns the human-readable outcome. Rejection and timeout are results, not errors;
        only bad input, load and mailbox write problems raise.
        """
        messages = input_errors(SEND_COMMAND, CONTENT_PARAM, subcommands, parameters)
        if messages:
            raise ValidationFailure(messages)
        return self.submit(parameters[CONTENT_PARAM][0])

    def submit(self, raw_content: str) -> str:
        document = validate_document(load_content(raw_content, fetch=self.fetch))
        entry_id = self.mailbox.submit(serialize(document))
        log.info("submission.pending", extra={"extra": {"id": entry_id.value}})
        outcome = self.mailbox.poll_outcome(entry_id, self.poll_attempts, self.poll_interval_sec)
        log.info("submission.outcome", extra={"extra": {"id": entry_id.value, "status": outcome.status.value}})
        return describe_outcome(outcome)
