"""records.py - The JSON document stored at every leaf path.

A record file maps each original key to ``{"value": ..., "count": n}``:

    {"John Smith": {"value": "j0hn@smith.com", "count": 2}}

Several original keys share one file when their sanitized, truncated forms
coincide. A file is never left empty on disk; the store deletes it instead.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterator, NamedTuple

from .exceptions import CorruptRecordError, StoreIOError
from .keys import sanitize
from .logger import get_logger

logger = get_logger(__name__)

Entries = dict[str, dict[str, Any]]


class Record(NamedTuple):
    key: str
    value: Any
    count: int


def dumps(entries: Entries) -> str:
    """Serialize entries; raises TypeError for payloads JSON cannot hold."""
    return json.dumps(entries, ensure_ascii=False)


def load(path: Path) -> Entries | None:
    """Read the record file at ``path``; ``None`` if there is none."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except OSError as e:
        logger.error(f"[records.load] cannot read {path}: {e}")
        raise StoreIOError("read record file", path, e) from e
    try:
        entries = json.loads(text)
    except json.JSONDecodeError as e:
        raise CorruptRecordError(path, f"invalid JSON ({e})") from e
    if not isinstance(entries, dict):
        raise CorruptRecordError(path, "top level is not an object")
    for key, entry in entries.items():
        if not isinstance(entry, dict) or "count" not in entry:
            raise CorruptRecordError(path, f"entry {key!r} has no count")
    return entries


def save(path: Path, entries: Entries) -> None:
    """Overwrite ``path`` with ``entries``. Empty mappings are refused."""
    if not entries:
        raise ValueError("refusing to persist an empty record file")
    write(path, dumps(entries))


def write(path: Path, text: str) -> None:
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        logger.error(f"[records.write] cannot write {path}: {e}")
        raise StoreIOError("write record file", path, e) from e


def iter_records(entries: Entries) -> Iterator[Record]:
    for key, entry in entries.items():
        yield Record(key, entry.get("value"), int(entry["count"]))


def find(entries: Entries | None, key: str, clean: str | None = None) -> Record | None:
    """Record stored under ``key``.

    Without an exact match, and when ``clean`` is given, the first record
    whose sanitized key equals ``clean`` is returned instead.
    """
    if not entries:
        return None
    if key not in entries:
        if clean is None:
            return None
        key = next((k for k in entries if sanitize(k) == clean), None)
        if key is None:
            return None
    entry = entries[key]
    return Record(key, entry.get("value"), int(entry["count"]))
