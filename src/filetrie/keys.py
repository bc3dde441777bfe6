"""keys.py: Key normalization for FileTrie"""

from __future__ import annotations

import re
from typing import Any

from .exceptions import InvalidKeyError

# A leading dot, anything non-alphanumeric, runs of dots and a trailing dot.
# Only ASCII letters and digits survive.
_STRIP = re.compile(r"^\.|[^A-Za-z0-9]|\.{2,}|\.$")


def original_key(key: Any) -> str:
    """The caller's key as it is stored inside a record file."""
    if isinstance(key, bytes):
        return key.decode("utf-8", errors="replace")
    return str(key)


def sanitize(key: Any) -> str:
    """
    Reduce ``key`` to the lowercase alphanumeric string used for paths.

    Returns "" when nothing survives; callers treat that as an invalid key.
    ``sanitize(sanitize(k)) == sanitize(k)`` for every ``k``.
    """
    return _STRIP.sub("", original_key(key)).lower()


def require_clean(key: Any) -> str:
    """Like :func:`sanitize` but raise :class:`InvalidKeyError` on empty output."""
    clean = sanitize(key)
    if not clean:
        raise InvalidKeyError(key)
    return clean
