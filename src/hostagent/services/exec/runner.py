from __future__ import annotations
import os, subprocess, threading
import logging
from dataclasses import dataclass
from typing import BinaryIO, Optional, Sequence
import psutil

from hostagent.config import const
from hostagent.ports import ExecResult, ProcessRunner

_IS_POSIX = os.name == "posix"

log = logging.getLogger("hostagent.exec")


def _kill_tree(pid: int) -> bool:
    """Kills ``pid`` and its descendants. Returns False when the process was already gone."""
    try:
        proc = psutil.Process(pid)
        children = proc.children(recursive=True)
    except psutil.NoSuchProcess:
        return False
    for c in children:
        try:
            c.kill()
        except psutil.NoSuchProcess:
            pass
    try:
        proc.kill()
    except psutil.NoSuchProcess:
        return False
    return True


def raw_exit_status(returncode: Optional[int]) -> int:
    # Popen reports a signal death as -signum; callers only get the ambiguous -1
    if returncode is None or returncode < 0:
        return const.AMBIGUOUS_EXIT_STATUS
    return returncode


@dataclass
class _WatchState:
    timed_out: bool = False
    killed: bool = False
    killed_reason: Optional[str] = None


class ProcRunner(ProcessRunner):
    def start_detached(self, cmd: Sequence[str], *, cwd: Optional[str] = None) -> int:
        kwargs: dict = {}
        if _IS_POSIX:
            kwargs["start_new_session"] = True
        else:
            kwargs["creationflags"] = subprocess.CREATE_NEW_PROCESS_GROUP | getattr(subprocess, "DETACHED_PROCESS", 0)
        p = subprocess.Popen(
            list(cmd),
            cwd=cwd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            **kwargs,
        )
        return p.pid

    def run_supervised(
        self,
        cmd: Sequence[str],
        *,
        cwd: Optional[str] = None,
        stdout: BinaryIO,
        stderr: BinaryIO,
        timeout_sec: float,
    ) -> ExecResult:
        p = subprocess.Popen(
            list(cmd),
            cwd=cwd,
            stdin=subprocess.DEVNULL,
            stdout=stdout,
            stderr=stderr,
        )

        exited = threading.Event()
        state = _WatchState()

        def _watch() -> None:
            if exited.wait(timeout_sec):
                return
            log.debug("exec.timeout", extra={"extra": {"pid": p.pid, "timeout": timeout_sec}})
            state.timed_out = True
            state.killed_reason = "wall_time_exceeded"
            state.killed = _kill_tree(p.pid)
            if state.killed:
                log.debug("exec.killed", extra={"extra": {"pid": p.pid}})
            else:
                # lost the race with a natural exit
                log.warning("exec.kill_failed", extra={"extra": {"pid": p.pid, "reason": "process already exited"}})

        watcher = threading.Thread(target=_watch, name=f"exec-watch-{p.pid}", daemon=True)
        watcher.start()
        try:
            returncode = p.wait()
        finally:
            exited.set()
            watcher.join()

        exit_code = raw_exit_status(returncode)
        if state.killed and not _IS_POSIX:
            # TerminateProcess leaves an arbitrary positive code behind
            exit_code = const.AMBIGUOUS_EXIT_STATUS
        return ExecResult(
            exit_code=exit_code,
            timed_out=state.timed_out,
            killed=state.killed,
            killed_reason=state.killed_reason,
            pid=p.pid,
        )
