"""constants.py - Enums shared by the scanner and the orderer."""

from __future__ import annotations

from enum import IntEnum

from .logger import get_logger

logger = get_logger(__name__)


class SortMode(IntEnum):
    NONE = 0  # directory listing order
    RANDOM = 1  # shuffled pool of limit * random_pool_factor
    COUNT_ASC = 2
    COUNT_DESC = 3
    KEY_ASC = 4
    KEY_DESC = 5
    VALUE_ASC = 6
    VALUE_DESC = 7

    @classmethod
    def from_value(cls, value: int | str | SortMode) -> SortMode:
        """Accept a member, its integer value or its name (any case)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper().replace("-", "_")]
            except KeyError as e:
                logger.warning(f"Unknown sort mode name: {value}")
                raise ValueError(f"Unknown sort mode: {value}") from e
        try:
            return cls(value)
        except ValueError as e:
            logger.warning(f"Unknown sort mode value: {value}")
            raise ValueError(f"Unknown sort mode: {value}") from e

    @property
    def descending(self) -> bool:
        return self in (SortMode.COUNT_DESC, SortMode.KEY_DESC, SortMode.VALUE_DESC)
