from __future__ import annotations

import subprocess
import sys
import time
from pathlib import Path

import pytest

from hostagent.config import const
from hostagent.domain import CommandFailure, ExecutionRequest
from hostagent.ports import ExecResult
from hostagent.services.eventbus import LocalEventBus
from hostagent.services.exec.runner import ProcRunner, _kill_tree, raw_exit_status
from hostagent.services.exec.service import ProcessExecutor, platform_command

posix_only = pytest.mark.skipif(sys.platform.startswith("win"), reason="POSIX signal semantics")


def _script(tmp_path: Path, name: str, body: str) -> Path:
    path = tmp_path / name
    path.write_text(body, encoding="utf-8")
    return path


def _executor(timeout: float = 5.0):
    bus = LocalEventBus()
    events = []
    bus.subscribe("exec.", events.append)
    return ProcessExecutor(runner=ProcRunner(), bus=bus, timeout_sec=timeout, is_windows=False), events


def test_zero_exit_and_appended_output(tmp_path):
    script = _script(tmp_path, "hello.py", "import sys\nprint('hello')\nprint('oops', file=sys.stderr)\n")
    executor, events = _executor()
    out_root = tmp_path / "update"
    for _ in range(2):
        executor.run(f"{sys.executable} {script}", working_dir=str(tmp_path), out_root=str(out_root))
    stdout = (out_root / "output" / "stdout").read_text(encoding="utf-8")
    stderr = (out_root / "output" / "stderr").read_text(encoding="utf-8")
    assert stdout.split() == ["hello", "hello"]
    assert stderr.split() == ["oops", "oops"]
    assert [e.type for e in events] == ["exec.start", "exec.end"] * 2


def test_custom_output_names(tmp_path):
    script = _script(tmp_path, "out.py", "print('x')\n")
    executor, _ = _executor()
    executor.execute(
        ExecutionRequest(
            command_line=f"{sys.executable} {script}",
            out_root=str(tmp_path),
            stdout_name="install.out",
            stderr_name="install.err",
        )
    )
    assert (tmp_path / "output" / "install.out").read_text(encoding="utf-8").strip() == "x"
    assert (tmp_path / "output" / "install.err").exists()


def test_non_zero_exit_raises_without_kill(tmp_path):
    script = _script(tmp_path, "exit3.py", "import sys\nsys.exit(3)\n")
    executor, events = _executor(timeout=10.0)
    with pytest.raises(CommandFailure) as ei:
        executor.run(f"{sys.executable} {script}", out_root=str(tmp_path))
    assert ei.value.exit_code == 3
    assert ei.value.timed_out is False
    assert "exec.killed" not in [e.type for e in events]


@posix_only
def test_timeout_kills_and_reports_stopped_preemptively(tmp_path):
    script = _script(tmp_path, "sleepy.py", "import time\ntime.sleep(30)\n")
    executor, events = _executor(timeout=0.5)
    started = time.monotonic()
    with pytest.raises(CommandFailure) as ei:
        executor.run(f"{sys.executable} {script}", out_root=str(tmp_path))
    assert time.monotonic() - started < 10
    assert ei.value.exit_code == const.COMMAND_STOPPED_PREEMPTIVELY_EXIT_CODE
    assert ei.value.exit_code != -1
    assert ei.value.timed_out is True
    assert [e.type for e in events] == ["exec.start", "exec.killed", "exec.end"]


def test_detached_start_returns_immediately(tmp_path):
    marker = tmp_path / "marker.txt"
    script = _script(tmp_path, "bg.py", f"import time\ntime.sleep(0.2)\nopen({str(marker)!r}, 'w').write('done')\n")
    executor, events = _executor()
    executor.run(f"{sys.executable} {script}", working_dir=str(tmp_path), is_async=True)
    assert events[0].payload["async"] is True
    assert not (tmp_path / "output").exists()
    deadline = time.monotonic() + 10
    while not marker.exists() and time.monotonic() < deadline:
        time.sleep(0.05)
    assert marker.exists()


def test_detached_start_failure_is_reported(tmp_path):
    executor, _ = _executor()
    with pytest.raises(OSError):
        executor.run("definitely-not-a-binary-8d1f --flag", working_dir=str(tmp_path), is_async=True)


# ---------- exit status mapping with a scripted runner ----------


class _ScriptedRunner:
    def __init__(self, result: ExecResult):
        self.result = result
        self.calls = []

    def start_detached(self, cmd, *, cwd=None):
        raise AssertionError("not used")

    def run_supervised(self, cmd, *, cwd=None, stdout, stderr, timeout_sec):
        self.calls.append(list(cmd))
        return self.result


def test_ambiguous_status_without_timeout_is_kept(tmp_path):
    executor = ProcessExecutor(runner=_ScriptedRunner(ExecResult(exit_code=-1, timed_out=False)), is_windows=False)
    with pytest.raises(CommandFailure) as ei:
        executor.run("updater -stop", out_root=str(tmp_path))
    assert ei.value.exit_code == -1


def test_ambiguous_status_after_timeout_is_remapped(tmp_path):
    executor = ProcessExecutor(runner=_ScriptedRunner(ExecResult(exit_code=-1, timed_out=True)), is_windows=False)
    with pytest.raises(CommandFailure) as ei:
        executor.run("updater -stop", out_root=str(tmp_path))
    assert ei.value.exit_code == 137


@pytest.mark.parametrize("killed, expected", [(True, ["exec.start", "exec.killed", "exec.end"]), (False, ["exec.start", "exec.end"])])
def test_killed_event_only_when_kill_landed(tmp_path, killed, expected):
    # killed=False: the timer fired but the process had already exited
    bus = LocalEventBus()
    events = []
    bus.subscribe("exec.", events.append)
    res = ExecResult(exit_code=0, timed_out=True, killed=killed, killed_reason="wall_time_exceeded")
    ProcessExecutor(runner=_ScriptedRunner(res), bus=bus, is_windows=False).run("updater -stop", out_root=str(tmp_path))
    assert [e.type for e in events] == expected


def test_windows_commands_go_through_powershell(tmp_path):
    runner = _ScriptedRunner(ExecResult(exit_code=0, timed_out=False))
    ProcessExecutor(runner=runner, is_windows=True).run("install.ps1 -version 2.0", out_root=str(tmp_path))
    assert runner.calls == [["powershell", "-ExecutionPolicy", "Bypass", "install.ps1", "-version", "2.0"]]
    assert platform_command(["a", "b"], is_windows=False) == ["a", "b"]


def test_raw_exit_status():
    assert raw_exit_status(0) == 0
    assert raw_exit_status(3) == 3
    assert raw_exit_status(-9) == -1


def test_kill_after_exit_is_soft():
    p = subprocess.Popen([sys.executable, "-c", "pass"])
    p.wait()
    assert _kill_tree(p.pid) is False
