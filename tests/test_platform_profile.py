from __future__ import annotations

from dataclasses import replace

import pytest

from hostagent.services.agent_context import get_ctx
from hostagent.services.platform.profile import (
    SYSTEMD_MIN_VERSIONS,
    create_instance_context,
    normalize_platform,
    uses_systemd,
)
from hostagent.services.platform.versions import version_compare


@pytest.mark.parametrize(
    "a,b,expected",
    [
        ("7", "7", 0),
        ("7.0", "7", 0),
        ("7.2.1511", "7", 1),
        ("6.9", "7", -1),
        ("16.04", "15", 1),
        ("14.04", "15", -1),
        ("10", "9", 1),  # numeric, not lexical
        ("1.10", "1.9", 1),
    ],
)
def test_version_compare(a, b, expected):
    assert version_compare(a, b) == expected


@pytest.mark.parametrize("bad", ["", "7.x", "abc"])
def test_version_compare_rejects_garbage(bad):
    with pytest.raises(ValueError):
        version_compare(bad, "7")


def test_systemd_table_is_read_only():
    assert dict(SYSTEMD_MIN_VERSIONS) == {"centos": "7", "red hat": "7", "ubuntu": "15"}
    with pytest.raises(TypeError):
        SYSTEMD_MIN_VERSIONS["debian"] = "8"  # type: ignore[index]


def test_uses_systemd(ubuntu_profile):
    assert uses_systemd(ubuntu_profile)
    assert uses_systemd(replace(ubuntu_profile, platform="ubuntu", platform_version="15"))
    assert not uses_systemd(replace(ubuntu_profile, platform_version="14.04"))
    assert uses_systemd(replace(ubuntu_profile, platform="centos", platform_version="7.9.2009"))
    assert not uses_systemd(replace(ubuntu_profile, platform="red hat", platform_version="6.10"))
    assert not uses_systemd(replace(ubuntu_profile, platform="windows", platform_version="10.0"))


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("Amazon Linux", ("linux", "linux")),
        ("Red Hat Enterprise Linux Server", ("red hat", "linux")),
        ("Ubuntu", ("ubuntu", "ubuntu")),
        ("CentOS Linux", ("centos", "linux")),
        ("Microsoft Windows Server 2019", ("windows", "windows")),
    ],
)
def test_normalize_platform(raw, expected):
    assert normalize_platform(raw) == expected


class _Probe:
    def __init__(self, region="us-east-1", name="Ubuntu", version="20.04", machine="x86_64"):
        self._values = dict(region=region, name=name, version=version, machine=machine)

    def region(self):
        return self._values["region"]

    def platform_name(self):
        return self._values["name"]

    def platform_version(self):
        return self._values["version"]

    def machine(self):
        return self._values["machine"]


def test_create_instance_context():
    ctx = create_instance_context(_Probe())
    assert (ctx.platform, ctx.installer_name, ctx.arch, ctx.compress_format) == ("ubuntu", "ubuntu", "amd64", "tar.gz")
    assert ctx.file_name("hostagent") == "hostagent-ubuntu-amd64.tar.gz"

    win = create_instance_context(_Probe(name="Windows", version="10.0", machine="AMD64"))
    assert win.file_name("hostagent-updater") == "hostagent-updater-windows-amd64.zip"


def test_missing_region_is_an_error():
    with pytest.raises(ValueError, match="Failed to get region"):
        create_instance_context(_Probe(region=""))


def test_context_profile_is_built_once():
    ctx = get_ctx()
    probe = _Probe(name="CentOS Linux", version="7", machine="aarch64")
    object.__setattr__(ctx, "platform_probe", probe)
    first = ctx.profile
    probe._values["name"] = "Ubuntu"
    assert ctx.profile is first
    assert (first.platform, first.arch) == ("centos", "arm64")
