# src/hostagent/services/exec/service.py
from __future__ import annotations
import logging
import os
import time
from pathlib import Path
from typing import Optional, Sequence

from hostagent.config import const
from hostagent.domain import CommandFailure, ExecutionRequest
from hostagent.ports import EventBus, ProcessRunner
from hostagent.services.eventbus import emit
from hostagent.services.update.util import update_output_directory, update_stderr_path, update_stdout_path

log = logging.getLogger("hostagent.exec")

_WINDOWS_PREFIX = ("powershell", "-ExecutionPolicy", "Bypass")


def platform_command(parts: Sequence[str], *, is_windows: Optional[bool] = None) -> list[str]:
    """Shapes ``parts`` for the host shell: powershell on Windows, unchanged elsewhere."""
    windows = (os.name == "nt") if is_windows is None else is_windows
    if windows:
        return [*_WINDOWS_PREFIX, *parts]
    return list(parts)


class ProcessExecutor:
    """
    Runs update-related command lines, either:
    - detached: started and forgotten, no output capture
    - supervised: output appended to ``<out_root>/output/{stdout,stderr}``, killed on timeout,
      non-zero exits raised as CommandFailure
    Publishes exec.start / exec.killed / exec.end on the bus.
    """

    def __init__(
        self,
        *,
        runner: ProcessRunner,
        bus: Optional[EventBus] = None,
        timeout_sec: float = const.DEFAULT_EXEC_TIMEOUT_SEC,
        is_windows: Optional[bool] = None,
    ) -> None:
        self.runner = runner
        self.bus = bus
        self.timeout_sec = timeout_sec
        self._is_windows = is_windows

    def execute(self, request: ExecutionRequest) -> None:
        parts = request.parts()
        if not parts:
            raise ValueError("empty command line")
        if request.is_async:
            self._start_detached(parts, request)
        else:
            self._run_supervised(parts, request)

    def run(
        self,
        command_line: str,
        *,
        working_dir: Optional[str] = None,
        out_root: Optional[str] = None,
        stdout_name: str = "",
        stderr_name: str = "",
        is_async: bool = False,
    ) -> None:
        self.execute(
            ExecutionRequest(
                command_line=command_line,
                working_dir=working_dir,
                out_root=out_root,
                stdout_name=stdout_name or const.DEFAULT_STDOUT,
                stderr_name=stderr_name or const.DEFAULT_STDERR,
                is_async=is_async,
            )
        )

    # ---------- modes ----------

    def _start_detached(self, parts: list[str], request: ExecutionRequest) -> None:
        pid = self.runner.start_detached(parts, cwd=request.working_dir)
        emit(self.bus, "exec.start", {"cmd": parts, "cwd": request.working_dir, "pid": pid, "async": True}, "exec.service")

    def _run_supervised(self, parts: list[str], request: ExecutionRequest) -> None:
        if not request.out_root:
            raise ValueError("supervised execution needs an output root")
        cmd = platform_command(parts, is_windows=self._is_windows)
        update_output_directory(request.out_root).mkdir(parents=True, exist_ok=True)
        stdout_path = update_stdout_path(request.out_root, request.stdout_name)
        stderr_path = update_stderr_path(request.out_root, request.stderr_name)

        # append so that consecutive commands of one update share the files
        with _open_append(stdout_path) as out, _open_append(stderr_path) as err:
            started_at = time.time()
            emit(
                self.bus,
                "exec.start",
                {"cmd": cmd, "cwd": request.working_dir, "timeout": self.timeout_sec, "async": False},
                "exec.service",
            )
            res = self.runner.run_supervised(cmd, cwd=request.working_dir, stdout=out, stderr=err, timeout_sec=self.timeout_sec)
            duration = time.time() - started_at

        exit_code = res.exit_code
        if res.killed:
            emit(self.bus, "exec.killed", {"cmd": cmd, "reason": res.killed_reason, "duration": duration}, "exec.service")
        if res.timed_out:
            if exit_code == const.AMBIGUOUS_EXIT_STATUS:
                exit_code = const.COMMAND_STOPPED_PREEMPTIVELY_EXIT_CODE
                log.info("The execution of command was timed out.", extra={"extra": {"cmd": cmd}})

        emit(
            self.bus,
            "exec.end",
            {"cmd": cmd, "exit": exit_code, "timed_out": res.timed_out, "duration": duration},
            "exec.service",
        )
        if exit_code != 0:
            detail = _describe(res.exit_code, res.timed_out)
            log.debug("command failed to run", extra={"extra": {"cmd": cmd, "exit": exit_code, "detail": detail}})
            raise CommandFailure(exit_code, detail, timed_out=res.timed_out)


def _open_append(path: Path):
    fd = os.open(path, os.O_APPEND | os.O_WRONLY | os.O_CREAT, 0o600)
    return os.fdopen(fd, "ab")


def _describe(raw_exit: int, timed_out: bool) -> str:
    if raw_exit == const.AMBIGUOUS_EXIT_STATUS:
        return "signal: killed (timed out)" if timed_out else "signal: killed"
    return f"exit status {raw_exit}"
