"""store.py - FileTrie, a prefix tree that lives on the filesystem.

Layout below the store root:

    {root}/filetrie                      metadata descriptor (JSON)
    {root}/root/<chunk1>/.../<chunkN>.json leaf record files

Nothing is cached in memory besides the metadata; every read goes to disk.
"""

from __future__ import annotations

import errno
import random
from dataclasses import replace
from pathlib import Path
from typing import Any

from . import metadata, records, scanner
from .config import (
    DEFAULT_KEY_LENGTH_LIMIT,
    DEFAULT_PIECE_LENGTH,
    DEFAULT_RANDOM_POOL_FACTOR,
    DEFAULT_ROOT,
    DEFAULT_SUFFIX,
    DIR_MODE,
    METADATA_FILENAME,
    ROOT_NODE,
)
from .constants import SortMode
from .exceptions import InvalidKeyError, StoreIOError, StoreOpenError
from .keys import original_key, require_clean
from .logger import get_logger
from .metadata import TrieMetadata
from .metrics import TrieMetrics, default_metrics
from .ordering import effective_limit, order
from .paths import EncodedPath, encode
from .records import Record
from .scanner import RecordFilter

logger = get_logger(__name__)


class FileTrie:
    """
    Key/value store whose index is the directory tree itself.

    Keys are sanitized (lowercase alphanumerics), truncated to
    ``key_length_limit`` and cut into ``piece_length`` chunks that become
    directories; the last chunk names a JSON leaf file holding every original
    key that encodes there, with its value and occurrence count.

    A FileTrie has no internal locking. Concurrent mutation of the same root
    from several threads or processes is undefined; callers must serialize
    access themselves.
    """

    def __init__(
        self,
        root: str | Path = DEFAULT_ROOT,
        piece_length: int = DEFAULT_PIECE_LENGTH,
        key_length_limit: int = DEFAULT_KEY_LENGTH_LIMIT,
        suffix: str = DEFAULT_SUFFIX,
        random_pool_factor: int = DEFAULT_RANDOM_POOL_FACTOR,
        metrics: TrieMetrics | None = None,
    ) -> None:
        if not isinstance(root, (str, Path)) or len(str(root).strip()) < 2:
            root = DEFAULT_ROOT
        self.root: Path = Path(str(root).strip()).expanduser().absolute()
        self.root_node: Path = self.root / ROOT_NODE
        self.metadata_path: Path = self.root / METADATA_FILENAME
        self._metrics = metrics or default_metrics()
        self._closed = False

        if self._is_store(self.root):
            self._meta = metadata.load(self.metadata_path)
            logger.info(f"[FileTrie] Opened store at {self.root}")
        else:
            if self.root.exists() and not self.root.is_dir():
                raise StoreOpenError(
                    f"Specified path '{self.root}' exists, but is not a directory."
                )
            if self.metadata_path.is_file() and not self.root_node.is_dir():
                raise StoreOpenError(
                    f"Store at '{self.root}' has metadata but no '{ROOT_NODE}' node."
                )
            self._meta = TrieMetadata(
                piece_length=piece_length,
                suffix=suffix,
                key_length_limit=key_length_limit,
                random_pool_factor=random_pool_factor,
            ).normalized()
            self._mkdir(self.root_node)
            self._save_metadata()
            logger.info(f"[FileTrie] Created store at {self.root}")
        self._metrics.distinct_keys.labels(root=str(self.root)).set(self.key_count)

    @staticmethod
    def _is_store(root: Path) -> bool:
        return (
            root.is_dir()
            and (root / METADATA_FILENAME).is_file()
            and (root / ROOT_NODE).is_dir()
        )

    # ------------------------------------------------------------------
    # configuration
    # ------------------------------------------------------------------

    @property
    def piece_length(self) -> int:
        return self._meta.piece_length

    @property
    def key_length_limit(self) -> int:
        return self._meta.key_length_limit

    @property
    def suffix(self) -> str:
        return self._meta.suffix

    @property
    def random_pool_factor(self) -> int:
        return self._meta.random_pool_factor

    @random_pool_factor.setter
    def random_pool_factor(self, factor: int) -> None:
        if not isinstance(factor, int) or factor < 1:
            raise ValueError(f"random_pool_factor must be a positive int, got {factor!r}")
        updated = replace(self._meta, random_pool_factor=factor)
        metadata.save(self.metadata_path, updated)
        self._meta = updated

    @property
    def key_count(self) -> int:
        """Distinct original keys currently stored."""
        return self._meta.key_count

    def distinct_key_count(self) -> int:
        return self._meta.key_count

    @property
    def data(self) -> Any:
        """Arbitrary JSON payload persisted with the store metadata."""
        return self._meta.data

    @data.setter
    def data(self, value: Any) -> None:
        updated = replace(self._meta, data=value)
        metadata.save(self.metadata_path, updated)
        self._meta = updated

    @property
    def metadata(self) -> TrieMetadata:
        return self._meta

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def locate(self, key: Any) -> EncodedPath:
        """Encoded path of ``key``; raises InvalidKeyError for empty keys."""
        return self._encode(require_clean(key))

    def _encode(self, clean: str) -> EncodedPath:
        return encode(
            clean, self.root_node, self.piece_length, self.key_length_limit, self.suffix
        )

    def insert(self, key: Any, value: Any = None) -> bool:
        """
        Store ``value`` under ``key`` and bump its occurrence count.

        Values are stored as JSON and read back as JSON: tuples come back as
        lists and dict keys come back as strings.

        Returns False, without touching the disk, when the key sanitizes to
        nothing or the value cannot be written as JSON.
        """
        try:
            path = self.locate(key)
        except InvalidKeyError as e:
            logger.warning(f"[FileTrie.insert] {e}")
            self._metrics.observe("insert", False)
            return False

        name = original_key(key)
        entries = records.load(path.full_path) or {}
        entry = entries.get(name)
        if entry is None:
            entries[name] = {"value": value, "count": 1}
        else:
            entry["value"] = value
            entry["count"] = int(entry["count"]) + 1

        try:
            text = records.dumps(entries)
        except (TypeError, ValueError) as e:
            logger.warning(f"[FileTrie.insert] value for {name!r} is not JSON: {e}")
            self._metrics.observe("insert", False)
            return False

        self._mkdir(path.parent_dir)
        records.write(path.full_path, text)
        if entry is None:
            self._set_key_count(self.key_count + 1)
        logger.debug(f"[FileTrie.insert] {name!r} -> {path.full_path}")
        self._metrics.observe("insert", True)
        return True

    def record(self, key: Any) -> Record | None:
        """
        The stored record for ``key`` (value and count), or None.

        An exact original key wins. Otherwise the first record in the same
        leaf file with the same sanitized key answers, so "jane" finds "Jane".
        """
        try:
            clean = require_clean(key)
        except InvalidKeyError:
            return None
        path = self._encode(clean)
        return records.find(records.load(path.full_path), original_key(key), clean)

    def get(self, key: Any, default: Any = None) -> Any:
        found = self.record(key)
        self._metrics.observe("get", found is not None)
        return found.value if found is not None else default

    def has(self, key: Any) -> bool:
        found = self.record(key) is not None
        self._metrics.observe("has", found)
        return found

    def count(self, key: Any) -> int:
        found = self.record(key)
        self._metrics.observe("count", found is not None)
        return found.count if found is not None else 0

    def __contains__(self, key: Any) -> bool:
        return self.has(key)

    def remove(self, key: Any) -> bool:
        """
        Delete ``key`` with all its occurrences.

        When its leaf file empties, the file goes and so does every parent
        directory left childless, bottom-up, stopping below the root node.
        """
        try:
            path = self.locate(key)
        except InvalidKeyError as e:
            logger.warning(f"[FileTrie.remove] {e}")
            self._metrics.observe("remove", False)
            return False

        name = original_key(key)
        entries = records.load(path.full_path)
        if not entries or name not in entries:
            self._metrics.observe("remove", False)
            return False

        del entries[name]
        if entries:
            records.save(path.full_path, entries)
        else:
            try:
                path.full_path.unlink()
            except OSError as e:
                logger.error(f"[FileTrie.remove] cannot delete {path.full_path}: {e}")
                raise StoreIOError("delete record file", path.full_path, e) from e

        # the record is gone once its file is rewritten or unlinked
        self._set_key_count(self.key_count - 1)
        if not entries:
            self._prune(path.parent_dir)
        logger.debug(f"[FileTrie.remove] {name!r} from {path.full_path}")
        self._metrics.observe("remove", True)
        return True

    def _prune(self, directory: Path) -> int:
        """Remove empty directories from ``directory`` up to the root node."""
        pruned = 0
        current = directory
        while current != self.root_node and self.root_node in current.parents:
            try:
                current.rmdir()
            except FileNotFoundError:
                pass
            except OSError as e:
                if e.errno in (errno.ENOTEMPTY, errno.EEXIST):
                    break
                logger.error(f"[FileTrie._prune] cannot remove {current}: {e}")
                raise StoreIOError("remove directory", current, e) from e
            else:
                pruned += 1
            current = current.parent
        if pruned:
            self._metrics.pruned_directories.inc(pruned)
        return pruned

    # ------------------------------------------------------------------
    # prefix search
    # ------------------------------------------------------------------

    def scan(
        self,
        prefix: Any = "",
        limit: int = 0,
        sort: SortMode | int | str = SortMode.NONE,
        predicate: RecordFilter | None = None,
        rng: random.Random | None = None,
    ) -> list[Record]:
        """
        Records whose sanitized key starts with ``sanitize(prefix)``.

        ``limit`` caps the output (0 = no cap). With ``SortMode.RANDOM`` the
        scan gathers ``limit * random_pool_factor`` candidates first and
        samples from those. ``predicate(key, value, count)`` drops records
        before they count towards the limit.
        """
        mode = SortMode.from_value(sort)
        limit = max(0, int(limit))
        ctx = scanner.scan(
            self.root_node,
            prefix,
            self.piece_length,
            self.key_length_limit,
            self.suffix,
            limit=effective_limit(limit, mode, self.random_pool_factor),
            predicate=predicate,
        )
        self._metrics.scanned_records.inc(ctx.records_seen)
        self._metrics.observe("prefixed", True)
        return order(ctx.results, mode, limit, rng)

    def prefixed(
        self,
        prefix: Any = "",
        limit: int = 0,
        sort: SortMode | int | str = SortMode.NONE,
        predicate: RecordFilter | None = None,
        rng: random.Random | None = None,
    ) -> dict[str, Any]:
        """Like :meth:`scan` but as an ordered ``{key: value}`` mapping."""
        return {
            r.key: r.value for r in self.scan(prefix, limit, sort, predicate, rng)
        }

    # ------------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------------

    def _mkdir(self, directory: Path) -> None:
        try:
            directory.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"[FileTrie] cannot create {directory}: {e}")
            raise StoreIOError("create directory", directory, e) from e

    def _set_key_count(self, count: int) -> None:
        self._meta.key_count = max(0, count)
        self._metrics.distinct_keys.labels(root=str(self.root)).set(self._meta.key_count)
        self._save_metadata()

    def _save_metadata(self) -> None:
        metadata.save(self.metadata_path, self._meta)

    def close(self) -> None:
        """Persist metadata. Safe to call multiple times."""
        if self._closed:
            return
        self._save_metadata()
        self._closed = True

    def __enter__(self) -> FileTrie:
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"FileTrie(root={str(self.root)!r}, piece_length={self.piece_length}, "
            f"key_length_limit={self.key_length_limit}, suffix={self.suffix!r}, "
            f"keys={self.key_count})"
        )


def open(
    root: str | Path = DEFAULT_ROOT,
    piece_length: int = DEFAULT_PIECE_LENGTH,
    key_length_limit: int = DEFAULT_KEY_LENGTH_LIMIT,
    suffix: str = DEFAULT_SUFFIX,
    random_pool_factor: int = DEFAULT_RANDOM_POOL_FACTOR,
    metrics: TrieMetrics | None = None,
) -> FileTrie:
    """Open the store at ``root``, creating it first if needed.

    Settings found in an existing store win over the arguments.
    """
    return FileTrie(
        root,
        piece_length=piece_length,
        key_length_limit=key_length_limit,
        suffix=suffix,
        random_pool_factor=random_pool_factor,
        metrics=metrics,
    )
