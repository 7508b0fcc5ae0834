from .contracts import EventBus, FSPolicy, PathProvider
from .executor import ExecResult, ProcessRunner
from .mailbox import Mailbox

__all__ = [
    "EventBus",
    "FSPolicy",
    "PathProvider",
    "ExecResult",
    "ProcessRunner",
    "Mailbox",
]
