"""scanner.py - Prefix scans over the on-disk tree.

The scan encodes the prefix like a key, lists the directory holding its last
chunk and keeps only the entries whose names start with that chunk. Below
that first level every entry is a continuation of the prefix, so the rest of
the subtree is walked without name checks, depth first, using an explicit
stack of directory listings.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterator

from . import records
from .exceptions import StoreIOError
from .keys import sanitize
from .logger import get_logger
from .paths import encode
from .records import Record

logger = get_logger(__name__)

RecordFilter = Callable[[str, Any, int], bool]


@dataclass
class ScanContext:
    """State of one scan. Created per call and never shared."""

    prefix: str
    limit: int = 0  # effective limit; 0 = unbounded
    predicate: RecordFilter | None = None
    results: list[Record] = field(default_factory=list)
    files_read: int = 0
    records_seen: int = 0

    def below_limit(self) -> bool:
        return not self.limit or len(self.results) < self.limit

    def offer(self, record: Record) -> None:
        self.records_seen += 1
        # truncated paths and suffix look-alikes can put foreign keys here
        if not sanitize(record.key).startswith(self.prefix):
            return
        if self.predicate is not None and not self.predicate(
            record.key, record.value, record.count
        ):
            return
        self.results.append(record)


def _listdir(path: str) -> list[os.DirEntry]:
    try:
        with os.scandir(path) as it:
            return list(it)
    except FileNotFoundError:
        return []
    except OSError as e:
        logger.error(f"[scan] cannot list {path}: {e}")
        raise StoreIOError("list directory", path, e) from e


def scan(
    root_node: Path,
    prefix: str,
    piece_length: int,
    key_length_limit: int,
    suffix: str,
    limit: int = 0,
    predicate: RecordFilter | None = None,
) -> ScanContext:
    """Collect records whose sanitized key starts with ``sanitize(prefix)``.

    Stops as soon as ``limit`` records were accepted (0 = no limit). Records
    come back in directory listing order, which is filesystem dependent.
    """
    clean = sanitize(prefix)
    ctx = ScanContext(prefix=clean, limit=max(0, limit), predicate=predicate)
    start = encode(clean, root_node, piece_length, key_length_limit, suffix)

    first = [
        entry
        for entry in _listdir(str(start.parent_dir))
        if entry.name.startswith(start.node_name)
    ]
    stack: list[Iterator[os.DirEntry]] = [iter(first)]

    while stack and ctx.below_limit():
        entry = next(stack[-1], None)
        if entry is None:
            stack.pop()
            continue
        if entry.is_dir(follow_symlinks=False):
            stack.append(iter(_listdir(entry.path)))
        elif entry.name.endswith(suffix) and entry.is_file():
            _read_leaf(Path(entry.path), ctx)

    logger.debug(
        f"[scan] prefix={clean!r} files={ctx.files_read} "
        f"seen={ctx.records_seen} kept={len(ctx.results)}"
    )
    return ctx


def _read_leaf(path: Path, ctx: ScanContext) -> None:
    entries = records.load(path)
    if entries is None:
        # removed between listing and reading
        return
    ctx.files_read += 1
    for record in records.iter_records(entries):
        if not ctx.below_limit():
            break
        ctx.offer(record)
