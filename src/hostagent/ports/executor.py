from __future__ import annotations
from dataclasses import dataclass
from typing import BinaryIO, Optional, Protocol, Sequence


@dataclass
class ExecResult:
    exit_code: int  # raw status, signal terminations are reported as -1
    timed_out: bool
    killed: bool = False  # false when the process won the race against the kill
    killed_reason: Optional[str] = None
    pid: Optional[int] = None


class ProcessRunner(Protocol):
    def start_detached(self, cmd: Sequence[str], *, cwd: Optional[str] = None) -> int: ...

    def run_supervised(
        self,
        cmd: Sequence[str],
        *,
        cwd: Optional[str] = None,
        stdout: BinaryIO,
        stderr: BinaryIO,
        timeout_sec: float,
    ) -> ExecResult: ...
