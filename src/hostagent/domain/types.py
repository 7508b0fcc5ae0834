# src/hostagent/domain/types.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional

from hostagent.config import const


@dataclass(frozen=True, slots=True)
class EntryId:
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Event:
    type: str
    payload: Mapping[str, Any]
    source: str
    ts: float


@dataclass(frozen=True, slots=True)
class CommandDocument:
    """Parsed command document. ``raw`` keeps every key so re-serialization is lossless."""

    raw: Mapping[str, Any]

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "CommandDocument":
        return cls(raw=MappingProxyType(dict(data)))

    @property
    def schema_version(self) -> str:
        value = self.raw.get("schemaVersion")
        return value if isinstance(value, str) else ""

    @property
    def runtime_config(self) -> Mapping[str, Any]:
        value = self.raw.get("runtimeConfig")
        return value if isinstance(value, Mapping) else MappingProxyType({})

    @property
    def main_steps(self) -> list[Any]:
        value = self.raw.get("mainSteps")
        return list(value) if isinstance(value, list) else []


class OutcomeStatus(str, Enum):
    SUBMITTED = "submitted"
    INVALID = "invalid"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True, slots=True)
class Outcome:
    status: OutcomeStatus
    consumer_id: Optional[str] = None

    @classmethod
    def submitted(cls, consumer_id: str) -> "Outcome":
        return cls(OutcomeStatus.SUBMITTED, consumer_id)

    @classmethod
    def invalid(cls) -> "Outcome":
        return cls(OutcomeStatus.INVALID)

    @classmethod
    def timed_out(cls) -> "Outcome":
        return cls(OutcomeStatus.TIMED_OUT)


@dataclass(frozen=True, slots=True)
class InstanceContext:
    region: str
    platform: str
    platform_version: str
    installer_name: str
    arch: str
    compress_format: str

    def file_name(self, package_name: str) -> str:
        """Downloadable artifact name: ``{package}-{installer}-{arch}.{compressed}``."""
        return f"{package_name}-{self.installer_name}-{self.arch}.{self.compress_format}"


# the rest of the code base talks about "platform profile"
PlatformProfile = InstanceContext


@dataclass(frozen=True, slots=True)
class ExecutionRequest:
    command_line: str
    working_dir: Optional[str] = None
    out_root: Optional[str] = None
    stdout_name: str = const.DEFAULT_STDOUT
    stderr_name: str = const.DEFAULT_STDERR
    is_async: bool = False

    def parts(self) -> list[str]:
        return self.command_line.split()
