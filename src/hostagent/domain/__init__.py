from .types import (
    CommandDocument,
    EntryId,
    Event,
    ExecutionRequest,
    InstanceContext,
    Outcome,
    OutcomeStatus,
    PlatformProfile,
)
from .errors import (
    CommandFailure,
    HostAgentError,
    LoadFailure,
    MailboxWriteFailure,
    ProbeFailure,
    ValidationFailure,
)

__all__ = [
    "CommandDocument",
    "EntryId",
    "Event",
    "ExecutionRequest",
    "InstanceContext",
    "Outcome",
    "OutcomeStatus",
    "PlatformProfile",
    "CommandFailure",
    "HostAgentError",
    "LoadFailure",
    "MailboxWriteFailure",
    "ProbeFailure",
    "ValidationFailure",
]
