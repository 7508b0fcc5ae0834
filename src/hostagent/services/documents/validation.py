from __future__ import annotations
import json
import os
from typing import Iterable, Mapping, Sequence
from urllib.parse import urlparse

from hostagent.domain import CommandDocument, ValidationFailure

SUPPORTED_SCHEMAS = ("1.2", "2.0")
_URL_SCHEMES = {"http", "https", "file"}


def is_valid_json(value: str) -> bool:
    try:
        json.loads(value)
    except (TypeError, ValueError):
        return False
    return True


def is_valid_url(value: str) -> bool:
    if not value:
        return False
    if os.path.isabs(value):
        return True
    parsed = urlparse(value)
    if parsed.scheme.lower() not in _URL_SCHEMES:
        return False
    return bool(parsed.netloc or parsed.path)


def document_errors(document: CommandDocument) -> list[str]:
    raw = document.raw
    if raw.get("schemaVersion") is not None and not isinstance(raw["schemaVersion"], str):
        return ["schemaVersion must be a string"]
    version = document.schema_version
    if version == "1.2":
        if raw.get("runtimeConfig") is not None and not isinstance(raw["runtimeConfig"], Mapping):
            return ["runtimeConfig must be an object"]
        if not document.runtime_config:
            return ["runtimeConfig cannot be empty"]
    elif version == "2.0":
        if raw.get("mainSteps") is not None and not isinstance(raw["mainSteps"], list):
            return ["mainSteps must be a list"]
        if not document.main_steps:
            return ["mainSteps cannot be empty"]
    else:
        return [f"unsupported schema version {version}"]
    return []


def validate_document(document: CommandDocument) -> CommandDocument:
    """Checks the schemaVersion / runtimeConfig / mainSteps invariant."""
    errors = document_errors(document)
    if errors:
        raise ValidationFailure(errors)
    return document


def format_flag(name: str) -> str:
    return f"--{name}"


def input_errors(
    command: str,
    required: str,
    subcommands: Sequence[str] | None,
    parameters: Mapping[str, Sequence[str]],
) -> list[str]:
    """
    Every problem with a CLI invocation, in order:
    subcommands (short-circuits), the required parameter, then unknown parameters.
    """
    messages: list[str] = []
    if subcommands:
        # a subcommand means the caller meant some other command; nothing else is worth reporting
        return [f"{command} does not support subcommand [{' '.join(subcommands)}]", ""]

    values: Iterable[str] | None = parameters.get(required)
    if values is None:
        messages.append(f"{format_flag(required)} is required")
    elif len(list(values)) != 1:
        messages.append(f"expected 1 value for parameter {format_flag(required)}")
    else:
        val = list(values)[0]
        if not is_valid_json(val) and not is_valid_url(val):
            messages.append(f"{format_flag(required)} value must be valid json or a URL")

    for key in parameters:
        if key != required:
            messages.append(f"unknown parameter {format_flag(key)}")
    return messages
