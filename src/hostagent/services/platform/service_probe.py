from __future__ import annotations
import logging
import os
import subprocess
from typing import Callable, Optional, Sequence

from hostagent.config import const
from hostagent.domain import InstanceContext, ProbeFailure
from hostagent.services.platform.profile import uses_systemd

log = logging.getLogger("hostagent.service")

StatusRunner = Callable[[Sequence[str]], str]


def _run_status(cmd: Sequence[str]) -> str:
    try:
        res = subprocess.run(list(cmd), capture_output=True, text=True, check=True)
    except FileNotFoundError as e:
        raise ProbeFailure(cmd, f"command not found: {e.filename or cmd[0]}") from e
    except subprocess.CalledProcessError as e:
        raise ProbeFailure(cmd, f"exit status {e.returncode}: {(e.stderr or '').strip()}") from e
    except OSError as e:
        raise ProbeFailure(cmd, str(e)) from e
    return res.stdout


class ServiceProbe:
    """Tells whether the managed agent service is running on this host."""

    def __init__(
        self,
        *,
        service_name: str = const.SERVICE_NAME,
        windows_service_name: str = const.WINDOWS_SERVICE_NAME,
        runner: Optional[StatusRunner] = None,
        is_windows: Optional[bool] = None,
    ) -> None:
        self.service_name = service_name
        self.windows_service_name = windows_service_name
        self._run = runner or _run_status
        self._is_windows = (os.name == "nt") if is_windows is None else is_windows

    def status_command(self, profile: InstanceContext) -> tuple[list[str], str]:
        """Returns the status command for ``profile`` and the substring that means "running"."""
        if uses_systemd(profile):
            return ["systemctl", "status", f"{self.service_name}.service"], const.SYSTEMD_EXPECTED_STATUS
        # the non-systemd command depends on the host OS, not on the profile name
        if self._is_windows:
            return ["sc", "query", self.windows_service_name], const.WINDOWS_EXPECTED_STATUS
        return ["status", self.service_name], const.UPSTART_EXPECTED_STATUS

    def is_running(self, profile: InstanceContext) -> bool:
        cmd, expected = self.status_command(profile)
        output = self._run(cmd).strip()
        running = expected in output
        log.debug("service.status", extra={"extra": {"cmd": cmd, "running": running}})
        return running
