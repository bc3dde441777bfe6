"""ordering.py - Sorting and sampling of scan results."""

from __future__ import annotations

import random
from typing import Sequence

from .constants import SortMode
from .exceptions import UnsortableValueError
from .records import Record


def effective_limit(limit: int, mode: SortMode, random_pool_factor: int) -> int:
    """How many records a scan should gather before ordering."""
    if mode is SortMode.RANDOM:
        return limit * random_pool_factor
    return limit


def order(
    results: Sequence[Record],
    mode: SortMode | int = SortMode.NONE,
    limit: int = 0,
    rng: random.Random | None = None,
) -> list[Record]:
    """Apply ``mode`` to ``results`` and cut the output to ``limit`` (0 = all).

    RANDOM shuffles the whole pool before cutting it. Value modes raise
    UnsortableValueError when two payloads cannot be compared.
    """
    mode = SortMode.from_value(mode)
    ordered = list(results)

    match mode:
        case SortMode.NONE:
            pass
        case SortMode.RANDOM:
            (rng or random).shuffle(ordered)
        case SortMode.KEY_ASC | SortMode.KEY_DESC:
            ordered.sort(key=lambda r: r.key, reverse=mode.descending)
        case SortMode.COUNT_ASC | SortMode.COUNT_DESC:
            ordered.sort(key=lambda r: r.count, reverse=mode.descending)
        case SortMode.VALUE_ASC | SortMode.VALUE_DESC:
            try:
                ordered.sort(key=lambda r: r.value, reverse=mode.descending)
            except TypeError as e:
                raise UnsortableValueError(mode.name, e) from e

    if limit > 0:
        del ordered[limit:]
    return ordered
