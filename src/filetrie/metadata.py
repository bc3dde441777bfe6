"""metadata.py - The ``filetrie`` descriptor stored beside the root node.

The descriptor is a flat JSON object with named, versioned fields. Stores
written before the versioned format used ``piecelen``, ``fskeylen``,
``randompoolfactor`` and ``keycount``; those names are still read.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field, replace
from pathlib import Path
from typing import Any

from .config import (
    DEFAULT_KEY_LENGTH_LIMIT,
    DEFAULT_PIECE_LENGTH,
    DEFAULT_RANDOM_POOL_FACTOR,
    DEFAULT_SUFFIX,
    MAX_FILENAME_LENGTH,
    METADATA_VERSION,
)
from .exceptions import CorruptRecordError, StoreIOError
from .logger import get_logger

logger = get_logger(__name__)

LEGACY_FIELDS = {
    "piecelen": "piece_length",
    "fskeylen": "key_length_limit",
    "randompoolfactor": "random_pool_factor",
    "keycount": "key_count",
}


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class TrieMetadata:
    """Configuration and counters of one store."""

    piece_length: int = DEFAULT_PIECE_LENGTH
    suffix: str = DEFAULT_SUFFIX
    key_length_limit: int = DEFAULT_KEY_LENGTH_LIMIT  # 0 = unlimited
    random_pool_factor: int = DEFAULT_RANDOM_POOL_FACTOR
    key_count: int = 0
    data: Any = None  # free-form payload callers may attach
    version: int = field(default=METADATA_VERSION)

    def normalized(self) -> TrieMetadata:
        """Return a copy with out-of-range settings replaced by defaults."""
        suffix = self.suffix
        if (
            not isinstance(suffix, str)
            or not suffix.strip()
            or len(suffix) > MAX_FILENAME_LENGTH
        ):
            logger.warning(f"Invalid suffix {suffix!r}, using {DEFAULT_SUFFIX!r}")
            suffix = DEFAULT_SUFFIX
        suffix = suffix.strip()

        piece_length = self.piece_length
        if (
            not _is_int(piece_length)
            or piece_length < 1
            or piece_length + len(suffix) > MAX_FILENAME_LENGTH
        ):
            logger.warning(
                f"Invalid piece length {piece_length!r}, using {DEFAULT_PIECE_LENGTH}"
            )
            piece_length = DEFAULT_PIECE_LENGTH

        key_length_limit = self.key_length_limit
        if not _is_int(key_length_limit) or key_length_limit < 0:
            logger.warning(
                f"Invalid key length limit {key_length_limit!r}, "
                f"using {DEFAULT_KEY_LENGTH_LIMIT}"
            )
            key_length_limit = DEFAULT_KEY_LENGTH_LIMIT

        random_pool_factor = self.random_pool_factor
        if not _is_int(random_pool_factor) or random_pool_factor < 1:
            random_pool_factor = DEFAULT_RANDOM_POOL_FACTOR

        key_count = self.key_count if _is_int(self.key_count) else 0
        return replace(
            self,
            piece_length=piece_length,
            suffix=suffix,
            key_length_limit=key_length_limit,
            random_pool_factor=random_pool_factor,
            key_count=max(0, key_count),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> TrieMetadata:
        known = {f for f in cls.__dataclass_fields__}
        values: dict[str, Any] = {}
        for name, value in raw.items():
            name = LEGACY_FIELDS.get(name, name)
            if name in known:
                values[name] = value
        if "version" not in values:
            # descriptors without a version predate the versioned format
            values["version"] = 0
        return cls(**values).normalized()


def load(path: Path) -> TrieMetadata:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise StoreIOError("read metadata", path, e) from e
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise CorruptRecordError(path, f"invalid JSON ({e})") from e
    if not isinstance(raw, dict):
        raise CorruptRecordError(path, "metadata is not an object")
    return TrieMetadata.from_dict(raw)


def save(path: Path, meta: TrieMetadata) -> None:
    meta = replace(meta, version=METADATA_VERSION)
    try:
        path.write_text(json.dumps(meta.to_dict()) + "\n", encoding="utf-8")
    except OSError as e:
        logger.error(f"[metadata.save] cannot write {path}: {e}")
        raise StoreIOError("write metadata", path, e) from e
    except TypeError as e:
        raise TypeError(f"Store data is not JSON serializable: {e}") from e
