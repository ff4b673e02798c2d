"""Exception hierarchy raised by the skip-list container.

Every error derives from :class:`SkipListError` *and* from the built-in
exception a caller of a regular Python sequence would expect, so both
``except SkipListError`` and ``except IndexError`` work.
"""
from __future__ import annotations

__all__ = [
    "SkipListError",
    "InvalidArgumentError",
    "OutOfRangeError",
    "UnsupportedOperationError",
    "ConcurrentModificationError",
    "CapacityExceededError",
    "MissingDataError",
]


class SkipListError(Exception):
    """Base class for all pyskiplist errors."""


class InvalidArgumentError(SkipListError, ValueError):
    pass


class OutOfRangeError(SkipListError, IndexError):
    def __init__(self, rank: int, count: int):
        super().__init__(f"rank {rank} out of range for skip list of length {count}")
        self.rank = rank
        self.count = count


class UnsupportedOperationError(SkipListError, TypeError):
    pass


class ConcurrentModificationError(SkipListError, RuntimeError):
    pass


class CapacityExceededError(SkipListError, ValueError):
    def __init__(self, needed: int, available: int):
        super().__init__(f"destination has room for {available} items, {needed} needed")
        self.needed = needed
        self.available = available


class MissingDataError(SkipListError, ValueError):
    pass
