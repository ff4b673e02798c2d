"""Skip-list tower node."""
from __future__ import annotations

from typing import Generic, Optional, TypeVar

from .errors import InvalidArgumentError

__all__ = ["SkipListNode"]

T = TypeVar("T")


class SkipListNode(Generic[T]):
    """A value plus one forward link per level it participates in.

    ``value`` and ``height`` are fixed at construction; the slots of
    ``forward`` are filled in by the owning :class:`~pyskiplist.SkipList`.
    Only the head sentinel has its ``forward`` list extended (by
    ``SkipList._grow``); ``height`` keeps the construction-time value.
    """

    __slots__ = ("_value", "_height", "forward")

    def __init__(self, value: Optional[T], height: int):
        if not isinstance(height, int) or height < 1:
            raise InvalidArgumentError(f"node height must be an integer >= 1, got {height!r}")
        self._value = value
        self._height = height
        self.forward: list[SkipListNode[T]] = [self] * height

    @property
    def value(self) -> Optional[T]:
        return self._value

    @property
    def height(self) -> int:
        return self._height

    def __repr__(self) -> str:  # pragma: no cover
        return f"Node<{self._value!r}:{self.height}>"
