"""Error hierarchy shared by the submission front-end and the update utilities."""

from __future__ import annotations

from typing import Iterable, Optional


class HostAgentError(RuntimeError):
    """Base class for all hostagent failures surfaced to callers."""


class ValidationFailure(HostAgentError):
    """Raised with every validation message found, never a partial list."""

    def __init__(self, messages: Iterable[str]) -> None:
        self.messages = list(messages)
        super().__init__("\n".join(self.messages))


class LoadFailure(HostAgentError):
    """Raised when a command document cannot be fetched or parsed."""

    def __init__(self, message: str, *, source: Optional[str] = None) -> None:
        self.source = source
        super().__init__(message)


class MailboxWriteFailure(HostAgentError):
    """Raised when the pending area of the mailbox cannot be prepared."""


class CommandFailure(HostAgentError):
    """Raised when a supervised command exits with a non-zero status."""

    def __init__(self, exit_code: int, detail: Optional[str] = None, *, timed_out: bool = False) -> None:
        self.exit_code = exit_code
        self.detail = detail
        self.timed_out = timed_out
        message = f"The execution of command returned Exit Status: {exit_code}"
        if detail:
            message = f"{message} \n {detail}"
        super().__init__(message)


class ProbeFailure(HostAgentError):
    """Raised when the service status command could not be run."""

    def __init__(self, command: Iterable[str], detail: str) -> None:
        self.command = list(command)
        self.detail = detail
        super().__init__(f"service status command {' '.join(self.command)!r} failed: {detail}")


__all__ = [
    "HostAgentError",
    "ValidationFailure",
    "LoadFailure",
    "MailboxWriteFailure",
    "CommandFailure",
    "ProbeFailure",
]
