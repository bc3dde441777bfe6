"""FileTrie: a prefix-searchable key/value store kept in the filesystem."""

from .constants import SortMode
from .exceptions import (
    CorruptRecordError,
    FileTrieError,
    InvalidKeyError,
    StoreIOError,
    StoreOpenError,
    UnsortableValueError,
)
from .keys import sanitize
from .records import Record
from .store import FileTrie, open

__all__ = [
    "CorruptRecordError",
    "FileTrie",
    "FileTrieError",
    "InvalidKeyError",
    "Record",
    "SortMode",
    "StoreIOError",
    "StoreOpenError",
    "UnsortableValueError",
    "open",
    "sanitize",
]
