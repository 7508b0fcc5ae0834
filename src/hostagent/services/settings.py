# src/hostagent/services/settings.py
from __future__ import annotations
from dataclasses import dataclass, replace
import os
from pathlib import Path
from typing import Optional, Dict
from hostagent.config import const


def _parse_env_file(path: str) -> Dict[str, str]:
    data: Dict[str, str] = {}
    p = Path(path)
    if not p.exists():
        return data
    for line in p.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" in line:
            k, v = line.split("=", 1)
            data[k.strip()] = v.strip().strip('"').strip("'")
    return data


@dataclass(frozen=True, slots=True)
class Settings:
    package_dir = Path(__file__).resolve().parent.parent
    base_dir: Path
    profile: str = "default"
    region: str = ""
    log_level: str = "INFO"
    service_name: str = const.SERVICE_NAME
    windows_service_name: str = const.WINDOWS_SERVICE_NAME
    exec_timeout_sec: float = const.DEFAULT_EXEC_TIMEOUT_SEC
    submit_poll_attempts: int = const.SUBMIT_POLL_ATTEMPTS
    submit_poll_interval_sec: float = const.SUBMIT_POLL_INTERVAL_SEC

    @staticmethod
    def from_sources(env_file: Optional[str] = ".env") -> "Settings":
        env_file_vars = _parse_env_file(env_file) if env_file else {}

        def pick_env(key: str, default: Optional[str] = None) -> str:
            return os.environ.get(key) or env_file_vars.get(key) or (default or "")

        def _get_base_dir() -> Path:
            override_base = pick_env("HOSTAGENT_BASE_DIR")
            if override_base:
                return Path(override_base).expanduser().resolve()
            if os.name == "nt":
                root = Path(os.environ.get("PROGRAMDATA", Path.home() / "AppData" / "Local"))
                return (root / "HostAgent").resolve()
            return (Path.home() / ".hostagent").resolve()

        return Settings(
            base_dir=_get_base_dir(),
            profile=pick_env("HOSTAGENT_PROFILE", "default"),
            region=pick_env("HOSTAGENT_REGION"),
            log_level=pick_env("HOSTAGENT_LOG_LEVEL", "INFO"),
            service_name=pick_env("HOSTAGENT_SERVICE_NAME", const.SERVICE_NAME),
            windows_service_name=pick_env("HOSTAGENT_WINDOWS_SERVICE_NAME", const.WINDOWS_SERVICE_NAME),
            exec_timeout_sec=float(pick_env("HOSTAGENT_EXEC_TIMEOUT", str(const.DEFAULT_EXEC_TIMEOUT_SEC))),
            submit_poll_attempts=int(pick_env("HOSTAGENT_SUBMIT_ATTEMPTS", str(const.SUBMIT_POLL_ATTEMPTS))),
            submit_poll_interval_sec=float(pick_env("HOSTAGENT_SUBMIT_INTERVAL", str(const.SUBMIT_POLL_INTERVAL_SEC))),
        )

    def with_overrides(self, **kw) -> "Settings":
        # only the fields the CLI is allowed to change
        allowed = {"base_dir", "profile", "region", "exec_timeout_sec", "submit_poll_attempts", "submit_poll_interval_sec"}
        safe = {k: v for k, v in kw.items() if k in allowed and v is not None}
        if "base_dir" in safe:
            safe["base_dir"] = Path(safe["base_dir"]).expanduser().resolve()
        return replace(self, **safe)
