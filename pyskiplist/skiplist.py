"""Sorted multiset backed by a probabilistic skip list.

Every node carries a *tower* of forward links, one per level it participates
in. Level 0 links every element in non-decreasing order; each higher level
skips over a random subset of the level below, which keeps the average cost
of a search at O(log n).

The head node is a sentinel whose links close the ring: a link with no
successor points back at the head instead of ``None``.

Complexities (average case):
    • search   – O(log n)
    • insert   – O(log n)
    • delete   – O(log n)
    • index    – O(n) (no per-node width bookkeeping)
    • iterate  – O(n)

The head starts with six levels and a 10 % promotion probability, and gains
one level per decade of elements (see :func:`pyskiplist.levels.desired_ceiling`).
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, MutableSequence
from typing import Any, Generic, NamedTuple, Optional, TypeVar

from .errors import (
    CapacityExceededError,
    ConcurrentModificationError,
    InvalidArgumentError,
    MissingDataError,
    OutOfRangeError,
    UnsupportedOperationError,
)
from .levels import LevelOracle, desired_ceiling
from .node import SkipListNode

__all__ = ["SkipList", "SkipListIterator", "Snapshot", "SNAPSHOT_VERSION"]

logger = logging.getLogger(__name__)

T = TypeVar("T")

_PROBABILITY = 0.1
_INITIAL_LEVEL_CEILING = 6
SNAPSHOT_VERSION = 1


class Snapshot(NamedTuple):
    """Linear image of a skip list: format version, length and sorted values.

    ``values`` is ``None`` for an empty list.
    """

    version: int
    count: int
    values: Optional[list[Any]]


class SkipList(Generic[T]):
    """Sorted list of comparable values allowing duplicates.

    Values only need ``<`` and ``==``. ``None`` is treated as "no value": it is
    ignored by :meth:`add` and never contained.

    Parameters
    ----------
    iterable:
        Initial values, added one by one.
    seed:
        Seed for the level generator, for reproducible tower shapes.
    """

    def __init__(self, iterable: Iterable[T] = (), *, seed: Optional[int] = None) -> None:
        self._reset(seed)
        for value in iterable:
            self.add(value)

    def _reset(self, seed: Optional[int]) -> None:
        self._head: SkipListNode[T] = SkipListNode(None, _INITIAL_LEVEL_CEILING)
        self._count = 0
        self._level = 1  # highest level in use
        self._version = 0  # bumped on every structural change
        self._seed = seed
        self._oracle = LevelOracle(_PROBABILITY, seed)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    @property
    def level_ceiling(self) -> int:
        """Number of levels on the head node; upper bound on any tower height."""
        return len(self._head.forward)

    @property
    def current_max_level(self) -> int:
        return self._level

    def __len__(self) -> int:
        return self._count

    # ------------------------------------------------------------------
    # Search helpers
    # ------------------------------------------------------------------
    def _find_predecessors(self, value: T) -> list[SkipListNode[T]]:
        """Return, per level, the last node whose value is strictly less than *value*.

        Levels above the ones in use point at the head. The node after
        ``update[0]`` at level 0 is the first node not less than *value*.
        """
        head = self._head
        update = [head] * len(head.forward)
        x = head
        for i in reversed(range(self._level)):
            while (nxt := x.forward[i]) is not head and nxt.value < value:  # type: ignore[operator]
                x = nxt
            update[i] = x
        return update

    def _node_at(self, rank: int) -> SkipListNode[T]:
        if not 0 <= rank < self._count:
            raise OutOfRangeError(rank, self._count)
        x = self._head
        for _ in range(rank + 1):
            x = x.forward[0]
        return x

    def _grow(self) -> None:
        head = self._head
        extra = desired_ceiling(self._count) - len(head.forward)
        if extra > 0:
            head.forward.extend([head] * extra)
            logger.debug("Level ceiling raised to %d at %d items", len(head.forward), self._count)

    # ------------------------------------------------------------------
    # Mutation API
    # ------------------------------------------------------------------
    def add(self, value: T) -> None:
        """Insert *value* before the first element not less than it.

        Among equal values the newest one therefore comes first.
        """
        if value is None:
            return
        update = self._find_predecessors(value)
        height = self._oracle.draw(self._level, len(self._head.forward))
        if height > self._level:
            # update[height - 1] is already the head
            self._level = height
        node: SkipListNode[T] = SkipListNode(value, height)
        for i in range(height):
            node.forward[i] = update[i].forward[i]
            update[i].forward[i] = node
        self._count += 1
        self._version += 1
        self._grow()

    def remove(self, value: T) -> bool:
        """Remove the first element equal to *value*; return whether one was found."""
        if value is None:
            return False
        update = self._find_predecessors(value)
        node = update[0].forward[0]
        if node is self._head or node.value != value:
            return False
        for i in range(node.height):
            update[i].forward[i] = node.forward[i]
        self._count -= 1
        self._version += 1
        return True

    def remove_at(self, rank: int) -> None:
        """Remove the element at sorted position *rank*."""
        self.remove(self._node_at(rank).value)  # type: ignore[arg-type]

    def clear(self) -> None:
        head = self._head
        for i in range(len(head.forward)):
            head.forward[i] = head
        self._count = 0
        self._level = 1
        self._version += 1
        logger.debug("Skip list cleared; level ceiling stays at %d", len(head.forward))

    def insert(self, rank: int, value: T) -> None:
        raise UnsupportedOperationError("cannot insert at a position into a sorted skip list; use add()")

    def __setitem__(self, rank: int, value: T) -> None:
        raise UnsupportedOperationError("skip list does not support item assignment")

    def __delitem__(self, rank: int) -> None:
        self.remove_at(rank)

    # ------------------------------------------------------------------
    # Query API
    # ------------------------------------------------------------------
    def __contains__(self, value: object) -> bool:
        if value is None:
            return False
        node = self._find_predecessors(value)[0].forward[0]  # type: ignore[arg-type]
        return node is not self._head and node.value == value

    def __getitem__(self, rank: int) -> T:
        return self._node_at(rank).value  # type: ignore[return-value]

    def index_of(self, value: T) -> int:
        """Sorted position of the first element equal to *value*, or -1."""
        if value is None:
            return -1
        head = self._head
        x = head.forward[0]
        rank = 0
        while x is not head and x.value < value:  # type: ignore[operator]
            x = x.forward[0]
            rank += 1
        if x is not head and x.value == value:
            return rank
        return -1

    def copy_to(self, destination: MutableSequence[T], offset: int = 0) -> None:
        """Write all elements, in order, into *destination* starting at *offset*."""
        if destination is None:
            raise InvalidArgumentError("destination must not be None")
        if offset < 0:
            raise InvalidArgumentError(f"offset must be >= 0, got {offset}")
        available = len(destination) - offset
        if available < self._count:
            raise CapacityExceededError(self._count, max(available, 0))
        for i, value in enumerate(self, offset):
            destination[i] = value

    # ------------------------------------------------------------------
    # Iteration helpers (ordered)
    # ------------------------------------------------------------------
    def __iter__(self) -> SkipListIterator[T]:
        return SkipListIterator(self)

    def debug_view(self) -> list[tuple[Optional[T], int]]:
        """``(value, height)`` of the head followed by every node in order."""
        head = self._head
        view: list[tuple[Optional[T], int]] = [(head.value, len(head.forward))]
        x = head.forward[0]
        while x is not head:
            view.append((x.value, x.height))
            x = x.forward[0]
        return view

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self)!r})"

    # ------------------------------------------------------------------
    # Snapshot / pickling 📦
    # ------------------------------------------------------------------
    def to_snapshot(self) -> Snapshot:
        return Snapshot(SNAPSHOT_VERSION, self._count, list(self) if self._count else None)

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot | tuple[int, int, Optional[list[Any]]], *, seed: Optional[int] = None) -> "SkipList[T]":
        """Rebuild a skip list by re-adding the snapshot's values in order."""
        sl: SkipList[T] = cls(seed=seed)
        sl._restore(snapshot)
        return sl

    def _restore(self, snapshot: Snapshot | tuple[int, int, Optional[list[Any]]]) -> None:
        version, count, values = snapshot
        if version != SNAPSHOT_VERSION:
            raise InvalidArgumentError(f"unsupported snapshot version {version!r}")
        if not isinstance(count, int) or isinstance(count, bool):
            raise InvalidArgumentError(f"snapshot count must be an integer, got {count!r}")
        if values is not None and not isinstance(values, list):
            raise InvalidArgumentError(f"snapshot values must be a list, got {type(values).__name__}")
        if count <= 0:
            return
        if values is None:
            raise MissingDataError(f"snapshot declares {count} values but carries none")
        if len(values) < count:
            raise MissingDataError(f"snapshot declares {count} values but carries {len(values)}")
        if len(values) > count:
            raise InvalidArgumentError(f"snapshot declares {count} values but carries {len(values)}")
        for value in values:
            self.add(value)
        logger.debug("Restored %d values from snapshot", count)

    # Pickling stores the values and the seed only. Towers are redrawn on load,
    # from the same seed, so a seeded list rebuilds the same way every time.
    def __getstate__(self) -> dict[str, Any]:
        return {"snapshot": self.to_snapshot(), "seed": self._seed}

    def __setstate__(self, state: dict[str, Any]) -> None:
        self._reset(state["seed"])
        self._restore(state["snapshot"])


class SkipListIterator(Generic[T]):
    """Forward cursor over level 0 that fails fast on structural changes.

    The owner's modification counter is captured when the cursor is created
    and compared before every element is produced.
    """

    __slots__ = ("_owner", "_node", "_expected", "_done")

    def __init__(self, owner: SkipList[T]) -> None:
        self._owner = owner
        self._node = owner._head
        self._expected = owner._version
        self._done = False

    def __iter__(self) -> SkipListIterator[T]:
        return self

    def __next__(self) -> T:
        if self._done:
            raise StopIteration
        owner = self._owner
        if owner._version != self._expected:
            self._done = True
            raise ConcurrentModificationError("skip list changed during iteration")
        nxt = self._node.forward[0]
        if nxt is owner._head:
            self._done = True
            raise StopIteration
        self._node = nxt
        return nxt.value  # type: ignore[return-value]
