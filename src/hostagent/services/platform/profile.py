# src/hostagent/services/platform/profile.py
from __future__ import annotations
import logging
import os
import platform as _platform
from types import MappingProxyType
from typing import Mapping, Protocol

from hostagent.config import const
from hostagent.domain import InstanceContext
from hostagent.services.platform.versions import version_compare

log = logging.getLogger("hostagent.platform")

# minimum platform version whose init system is systemd
SYSTEMD_MIN_VERSIONS: Mapping[str, str] = MappingProxyType(
    {
        const.PLATFORM_CENTOS: "7",
        const.PLATFORM_REDHAT: "7",
        const.PLATFORM_UBUNTU: "15",
    }
)

# (substring of the raw OS name, platform, installer name); first hit wins
_PLATFORM_RULES: tuple[tuple[str, str, str], ...] = (
    (const.PLATFORM_AMAZON_LINUX, const.PLATFORM_LINUX, const.PLATFORM_LINUX),
    (const.PLATFORM_REDHAT, const.PLATFORM_REDHAT, const.PLATFORM_LINUX),
    (const.PLATFORM_UBUNTU, const.PLATFORM_UBUNTU, const.PLATFORM_UBUNTU),
    (const.PLATFORM_CENTOS, const.PLATFORM_CENTOS, const.PLATFORM_LINUX),
)

_ARCH_ALIASES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
    "aarch64": "arm64",
    "arm64": "arm64",
}


class PlatformProbe(Protocol):
    def region(self) -> str: ...

    def platform_name(self) -> str: ...

    def platform_version(self) -> str: ...

    def machine(self) -> str: ...


class HostPlatformProbe:
    """Reads the raw OS description of the current host. Region comes from settings."""

    def __init__(self, region: str = "") -> None:
        self._region = region

    def region(self) -> str:
        return self._region

    def platform_name(self) -> str:
        if os.name == "nt":
            return const.PLATFORM_WINDOWS
        try:
            return _platform.freedesktop_os_release().get("NAME", _platform.system())
        except OSError:
            return _platform.system()

    def platform_version(self) -> str:
        if os.name == "nt":
            return _platform.version()
        try:
            return _platform.freedesktop_os_release().get("VERSION_ID", _platform.release())
        except OSError:
            return _platform.release()

    def machine(self) -> str:
        return _platform.machine()


def normalize_platform(raw_name: str) -> tuple[str, str]:
    """Maps a raw OS name to ``(platform, installer_name)``."""
    name = raw_name.lower()
    for needle, platform_name, installer in _PLATFORM_RULES:
        if needle in name:
            return platform_name, installer
    return const.PLATFORM_WINDOWS, const.PLATFORM_WINDOWS


def create_instance_context(probe: PlatformProbe) -> InstanceContext:
    region = probe.region()
    if not region:
        raise ValueError("Failed to get region, region is not configured (set HOSTAGENT_REGION)")
    platform_name, installer = normalize_platform(probe.platform_name())
    machine = probe.machine().lower()
    ctx = InstanceContext(
        region=region,
        platform=platform_name,
        platform_version=probe.platform_version(),
        installer_name=installer,
        arch=_ARCH_ALIASES.get(machine, machine),
        compress_format="zip" if platform_name == const.PLATFORM_WINDOWS else "tar.gz",
    )
    log.debug("platform.profile", extra={"extra": {"platform": ctx.platform, "version": ctx.platform_version, "arch": ctx.arch}})
    return ctx


def uses_systemd(profile: InstanceContext) -> bool:
    """True when the platform is listed in SYSTEMD_MIN_VERSIONS at or above the threshold.

    Raises ValueError when the recorded platform version is not a dotted number.
    """
    threshold = SYSTEMD_MIN_VERSIONS.get(profile.platform)
    if threshold is None:
        return False
    return version_compare(profile.platform_version, threshold) >= 0
