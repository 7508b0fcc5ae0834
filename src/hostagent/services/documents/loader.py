from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Any, Callable, Optional
import httpx

from hostagent.domain import CommandDocument, LoadFailure
from hostagent.services.documents.validation import is_valid_json

log = logging.getLogger("hostagent.documents")

Fetcher = Callable[[str], str]

_FILE_PREFIX = "file://"


def fetch_http(url: str) -> str:
    r = httpx.get(url, timeout=30.0, follow_redirects=True)
    r.raise_for_status()
    return r.text


def parse_document(text: str, source: Optional[str] = None) -> CommandDocument:
    try:
        data: Any = json.loads(text)
    except ValueError as e:
        raise LoadFailure(str(e), source=source) from e
    if not isinstance(data, dict):
        raise LoadFailure("command document must be a JSON object", source=source)
    return CommandDocument.from_mapping(data)


def load_content(raw: str, *, fetch: Optional[Fetcher] = None) -> CommandDocument:
    """
    Loads a command document from inline JSON or a reference to one:
      - ``file://`` prefix (any case) is stripped and the rest read as a local path
      - http(s) URLs are fetched
      - anything else is read as a local path
    """
    if is_valid_json(raw):
        return parse_document(raw)

    location = raw
    if location.lower().startswith(_FILE_PREFIX):
        location = location[len(_FILE_PREFIX):]

    if location.lower().startswith(("http://", "https://")):
        getter = fetch or fetch_http
        try:
            text = getter(location)
        except httpx.HTTPError as e:
            raise LoadFailure(str(e), source=location) from e
    else:
        try:
            text = Path(location).read_text(encoding="utf-8")
        except OSError as e:
            raise LoadFailure(str(e), source=location) from e

    log.debug("documents.loaded", extra={"extra": {"source": location, "bytes": len(text)}})
    return parse_document(text, source=location)


def serialize(document: CommandDocument) -> str:
    """Canonical form written to the mailbox: sorted keys, compact separators, UTF-8."""
    return json.dumps(dict(document.raw), ensure_ascii=False, sort_keys=True, separators=(",", ":"))
