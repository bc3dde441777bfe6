"""exceptions.py - Exception hierarchy for FileTrie.

Defines exceptions for:
- Keys that sanitize to nothing
- Filesystem failures while reading or mutating the tree
- Damaged leaf or metadata documents
- Ordering results by values that cannot be compared
"""

from __future__ import annotations


class FileTrieError(Exception):
    """Base exception for all FileTrie errors."""

    pass


class InvalidKeyError(FileTrieError, ValueError):
    """Raised when a key sanitizes to the empty string.

    Public CRUD methods catch this and report failure instead.
    """

    def __init__(self, key):
        self.key = key
        super().__init__(f"Invalid key {key!r}: no alphanumeric characters")


class StoreOpenError(FileTrieError):
    """Raised when the store root cannot be used.

    Examples:
        - Root path exists but is a regular file
        - Root node is missing from an otherwise valid store
    """

    pass


class StoreIOError(FileTrieError, OSError):
    """Raised when a directory or file operation fails.

    ``FileExistsError`` while creating directories is not an error and is
    never wrapped.
    """

    def __init__(self, action: str, path, cause: OSError | None = None):
        self.action = action
        self.path = path
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Failed to {action} '{path}'{detail}")


class CorruptRecordError(StoreIOError):
    """Raised when a leaf or metadata document is not the expected JSON shape."""

    def __init__(self, path, reason: str):
        self.reason = reason
        super().__init__("decode", path)
        self.args = (f"Corrupt document '{path}': {reason}",)

    def __str__(self) -> str:
        return self.args[0]


class UnsortableValueError(FileTrieError, TypeError):
    """Raised when ordering by value meets payloads without a natural order.

    Example: mixing ``None`` and strings, or ordering dict payloads.
    """

    def __init__(self, mode, cause: Exception | None = None):
        self.mode = mode
        self.cause = cause
        super().__init__(f"Cannot order results by value ({mode}): {cause}")
