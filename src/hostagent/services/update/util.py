# src/hostagent/services/update/util.py
"""Helpers shared by the self-update workflow: artifact layout, messages, host checks."""

from __future__ import annotations
import logging
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional
import psutil

from hostagent.config import const
from hostagent.ports import PathProvider

log = logging.getLogger("hostagent.update")


class UpdateErrorCode(str, Enum):
    INVALID_SOURCE_VERSION = "ErrorInvalidSourceVersion"
    INVALID_TARGET_VERSION = "ErrorInvalidTargetVersion"
    ATTEMPT_TO_DOWNGRADE = "ErrorAttempToDowngrade"
    INITIALIZATION_FAILED = "ErrorInitializationFailed"
    INVALID_PACKAGE = "ErrorInvalidPackage"
    PACKAGE_NOT_ACCESSIBLE = "ErrorPackageNotAccessible"
    INVALID_CERTIFICATE = "ErrorInvalidCertificate"
    INVALID_MANIFEST = "ErrorInvalidManifest"
    INVALID_MANIFEST_LOCATION = "ErrorInvalidManifestLocation"
    UNINSTALL_FAILED = "ErrorUninstallFailed"
    INSTALL_FAILED = "ErrorInstallFailed"
    CANNOT_START_SERVICE = "ErrorCannotStartService"
    CANNOT_STOP_SERVICE = "ErrorCannotStopService"
    TIMEOUT = "ErrorTimeout"
    UNEXPECTED = "ErrorUnexpected"
    ENVIRONMENT_ISSUE = "ErrorEnvironmentIssue"
    LOADING_AGENT_VERSION = "ErrorLoadingAgentVersion"


# ---------- messages ----------


def build_message(err: Optional[BaseException], fmt: str, *args: object) -> str:
    message = fmt % args if args else fmt
    if err is not None:
        message = f"{message}, ErrorMessage={err}"
    return message


def build_messages(errs: Iterable[BaseException], fmt: str, *args: object) -> str:
    message = fmt % args if args else fmt
    joined = ", ".join(str(e) for e in errs)
    if joined:
        message = f"{message}, ErrorMessage={joined}"
    return message


def build_update_command(cmd: str, arg: str, value: str) -> str:
    if not value or not arg:
        return cmd
    return f"{cmd} -{arg} {value}"


# ---------- layout ----------


def update_artifact_folder(update_root: str | Path, package_name: str, version: str) -> Path:
    return Path(update_root) / package_name / version


def update_context_file_path(update_root: str | Path) -> Path:
    return Path(update_root) / const.UPDATE_CONTEXT_FILENAME


def update_output_directory(update_root: str | Path) -> Path:
    return Path(update_root) / const.DEFAULT_OUTPUT_FOLDER


def update_stdout_path(update_root: str | Path, file_name: str = "") -> Path:
    return update_output_directory(update_root) / (file_name or const.DEFAULT_STDOUT)


def update_stderr_path(update_root: str | Path, file_name: str = "") -> Path:
    return update_output_directory(update_root) / (file_name or const.DEFAULT_STDERR)


def update_plugin_result_file_path(update_root: str | Path) -> Path:
    return Path(update_root) / const.UPDATE_PLUGIN_RESULT_FILENAME


def updater_file_path(update_root: str | Path, updater_package_name: str, version: str) -> Path:
    return update_artifact_folder(update_root, updater_package_name, version) / const.UPDATER


def installer_file_path(update_root: str | Path, package_name: str, version: str) -> Path:
    return update_artifact_folder(update_root, package_name, version) / const.INSTALLER


def uninstaller_file_path(update_root: str | Path, package_name: str, version: str) -> Path:
    return update_artifact_folder(update_root, package_name, version) / const.UNINSTALLER


# ---------- host checks ----------


def create_update_download_folder(paths: PathProvider) -> Path:
    root = Path(paths.base_dir()) / "download" / "update"
    root.mkdir(parents=True, exist_ok=True)
    return root


def is_disk_space_sufficient_for_update(path: str | Path) -> bool:
    """True when the volume holding ``path`` has at least 100 MiB free."""
    try:
        usage = psutil.disk_usage(str(path))
    except OSError as e:
        log.info("update.disk_space_unavailable", extra={"extra": {"path": str(path), "error": str(e)}})
        raise
    if usage.free < const.MINIMUM_DISK_SPACE_FOR_UPDATE:
        log.info("update.disk_space_insufficient", extra={"extra": {"free_mb": usage.free // (1024 * 1024)}})
        return False
    return True
