"""pyskiplist: a sorted list built on a probabilistic skip list.

The package exposes the container via `pyskiplist.SkipList`, its error
hierarchy, and a msgpack snapshot codec in `pyskiplist.snapshot`.
"""

from __future__ import annotations

__all__ = [
    "SkipList",
    "Snapshot",
    "SkipListError",
    "InvalidArgumentError",
    "OutOfRangeError",
    "UnsupportedOperationError",
    "ConcurrentModificationError",
    "CapacityExceededError",
    "MissingDataError",
]

from .errors import (
    CapacityExceededError,
    ConcurrentModificationError,
    InvalidArgumentError,
    MissingDataError,
    OutOfRangeError,
    SkipListError,
    UnsupportedOperationError,
)
from .skiplist import SkipList, Snapshot
