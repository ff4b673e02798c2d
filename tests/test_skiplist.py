"""Unit tests for the SkipList container."""
import random

import pytest

from pyskiplist import (
    CapacityExceededError,
    ConcurrentModificationError,
    InvalidArgumentError,
    OutOfRangeError,
    SkipList,
    SkipListError,
    UnsupportedOperationError,
)

MIXED = [1, 25, 36, 41, 2, 37, 36, 12]
WITH_DUPLICATES = [1, 25, 25, 62, 26, 1, 6, 7, 8]


def check_structure(sl: SkipList):
    """Walk every level of the towers and verify the ring invariants."""
    head = sl._head
    assert len(head.forward) == sl.level_ceiling
    assert 1 <= sl.current_max_level <= sl.level_ceiling

    bottom = []
    x = head.forward[0]
    while x is not head:
        bottom.append(x)
        x = x.forward[0]
    assert len(bottom) == len(sl)
    values = [n.value for n in bottom]
    assert values == sorted(values)

    position = {id(n): i for i, n in enumerate(bottom)}
    for level in range(sl.level_ceiling):
        last = -1
        x = head.forward[level]
        while x is not head:
            assert x.height > level
            assert position[id(x)] > last
            last = position[id(x)]
            x = x.forward[level]
        # every node tall enough must be reachable on this level
        expected = [i for i, n in enumerate(bottom) if n.height > level]
        got = []
        x = head.forward[level]
        while x is not head:
            got.append(position[id(x)])
            x = x.forward[level]
        assert got == expected
    for n in bottom:
        assert n.height <= sl.current_max_level


@pytest.fixture
def mixed():
    sl = SkipList(seed=7)
    for v in MIXED:
        sl.add(v)
    return sl


def test_add_keeps_order(mixed):
    """Values come back sorted with duplicates kept."""
    assert list(mixed) == [1, 2, 12, 25, 36, 36, 37, 41]
    assert len(mixed) == 8
    check_structure(mixed)


def test_remove_one_duplicate(mixed):
    """Removing a duplicated value only drops one copy."""
    assert mixed.remove(36) is True
    assert len(mixed) == 7
    assert list(mixed).count(36) == 1
    assert 36 in mixed
    check_structure(mixed)


def test_index_empty_list():
    """Indexing an empty list fails."""
    sl = SkipList()
    with pytest.raises(OutOfRangeError):
        sl[0]
    with pytest.raises(IndexError):
        sl[0]


def test_remove_at_matches_reference():
    """remove_at follows positional deletion on a sorted list."""
    sl = SkipList(WITH_DUPLICATES, seed=3)
    expected = sorted(WITH_DUPLICATES)

    expected.pop(0)
    expected.pop(6)
    sl.remove_at(0)
    sl.remove_at(6)

    assert list(sl) == expected
    assert len(sl) == 7
    check_structure(sl)


def test_four_elements():
    sl = SkipList()
    for v in (1, 2, 3, 4):
        sl.add(v)
    assert len(sl) == 4
    assert list(sl) == [1, 2, 3, 4]


@pytest.mark.parametrize("seed", range(5))
def test_random_operations_match_sorted_list(seed):
    """Random adds/removes agree with a plain sorted reference list."""
    rnd = random.Random(seed)
    sl = SkipList(seed=seed)
    reference = []
    for _ in range(2000):
        v = rnd.randrange(200)
        if rnd.random() < 0.6:
            sl.add(v)
            reference.append(v)
            reference.sort()
        else:
            removed = sl.remove(v)
            assert removed == (v in reference)
            if removed:
                reference.remove(v)
    assert list(sl) == reference
    assert len(sl) == len(reference)
    check_structure(sl)
    for v in range(200):
        assert (v in sl) == (v in reference)
        assert sl.index_of(v) == (reference.index(v) if v in reference else -1)
    for rank, v in enumerate(reference):
        assert sl[rank] == v


def test_contains():
    sl = SkipList(WITH_DUPLICATES)
    for v in WITH_DUPLICATES:
        assert v in sl
    for v in (19, 219, 9, 34, 2):
        assert v not in sl


def test_contains_on_empty():
    sl = SkipList()
    assert 1 not in sl
    assert sl.remove(1) is False


def test_remove_missing_is_noop():
    sl = SkipList(WITH_DUPLICATES)
    before = list(sl)
    assert sl.remove(100) is False
    assert sl.remove(0) is False
    assert list(sl) == before
    assert len(sl) == len(WITH_DUPLICATES)


def test_remove_until_empty():
    sl = SkipList([5, 3, 5])
    assert sl.remove(5)
    assert sl.remove(3)
    assert sl.remove(5)
    assert len(sl) == 0
    assert list(sl) == []
    assert sl.remove(5) is False
    check_structure(sl)


def test_index_of():
    sl = SkipList(WITH_DUPLICATES)
    reference = sorted(WITH_DUPLICATES)
    for v in WITH_DUPLICATES:
        assert sl.index_of(v) == reference.index(v)
    for v in (19, 219, 9, 34, 2):
        assert sl.index_of(v) == -1


def test_getitem():
    sl = SkipList(WITH_DUPLICATES)
    reference = sorted(WITH_DUPLICATES)
    for rank, v in enumerate(reference):
        assert sl[rank] == v


@pytest.mark.parametrize("rank", [-1, 9, 100])
def test_getitem_out_of_range(rank):
    sl = SkipList(WITH_DUPLICATES)
    with pytest.raises(OutOfRangeError) as excinfo:
        sl[rank]
    assert excinfo.value.rank == rank
    assert excinfo.value.count == 9


@pytest.mark.parametrize("rank", [-1, 9])
def test_remove_at_out_of_range(rank):
    sl = SkipList(WITH_DUPLICATES)
    with pytest.raises(OutOfRangeError):
        sl.remove_at(rank)
    assert len(sl) == 9


def test_delitem():
    sl = SkipList([3, 1, 2])
    del sl[1]
    assert list(sl) == [1, 3]


def test_positional_writes_unsupported():
    sl = SkipList([1, 2, 3])
    with pytest.raises(UnsupportedOperationError):
        sl[0] = 5
    with pytest.raises(UnsupportedOperationError):
        sl.insert(0, 5)
    assert list(sl) == [1, 2, 3]


def test_errors_share_base_class():
    sl = SkipList()
    with pytest.raises(SkipListError):
        sl[0]
    with pytest.raises(SkipListError):
        sl.insert(0, 1)


def test_add_none_is_skipped():
    """None is silently ignored rather than stored or rejected."""
    sl = SkipList([2, 1])
    sl.add(None)
    assert len(sl) == 2
    assert list(sl) == [1, 2]
    assert None not in sl
    assert sl.remove(None) is False
    assert sl.index_of(None) == -1


def test_newest_equal_value_comes_first():
    """Equal values are spliced in front of older equals."""

    class Item:
        def __init__(self, key, tag):
            self.key = key
            self.tag = tag

        def __lt__(self, other):
            return self.key < other.key

        def __eq__(self, other):
            return self.key == other.key

    sl = SkipList(seed=1)
    sl.add(Item(1, "a"))
    sl.add(Item(2, "first"))
    sl.add(Item(2, "second"))
    sl.add(Item(3, "z"))
    sl.add(Item(2, "third"))
    assert [i.tag for i in sl] == ["a", "third", "second", "first", "z"]

    # remove drops the first equal node, i.e. the most recent insertion
    assert sl.remove(Item(2, None))
    assert [i.tag for i in sl] == ["a", "second", "first", "z"]
    assert sl.index_of(Item(2, None)) == 1


def test_clear():
    sl = SkipList(WITH_DUPLICATES)
    sl.clear()
    assert len(sl) == 0
    assert list(sl) == []
    assert sl.current_max_level == 1
    check_structure(sl)
    sl.add(4)
    assert list(sl) == [4]


def test_clear_empty_is_idempotent():
    sl = SkipList()
    sl.clear()
    sl.clear()
    assert len(sl) == 0
    assert list(sl) == []


def test_clear_keeps_level_ceiling():
    sl = SkipList(range(200), seed=5)
    ceiling = sl.level_ceiling
    assert ceiling == 6
    sl.clear()
    assert sl.level_ceiling == ceiling


def test_copy_to():
    sl = SkipList(WITH_DUPLICATES)
    out = [0] * len(WITH_DUPLICATES)
    sl.copy_to(out, 0)
    assert out == sorted(WITH_DUPLICATES)


def test_copy_to_offset():
    sl = SkipList([3, 1, 2])
    out = ["x"] * 5
    sl.copy_to(out, 2)
    assert out == ["x", "x", 1, 2, 3]


def test_copy_to_errors():
    sl = SkipList([3, 1, 2])
    with pytest.raises(InvalidArgumentError):
        sl.copy_to(None, 0)
    with pytest.raises(InvalidArgumentError):
        sl.copy_to([0] * 3, -1)
    with pytest.raises(CapacityExceededError) as excinfo:
        sl.copy_to([0] * 4, 2)
    assert excinfo.value.needed == 3
    assert excinfo.value.available == 2


def test_copy_to_empty_list_into_empty_destination():
    SkipList().copy_to([], 0)


def test_modification_during_iteration():
    sl = SkipList([1, 2, 3])
    it = iter(sl)
    assert next(it) == 1
    sl.add(4)
    with pytest.raises(ConcurrentModificationError):
        next(it)
    # the cursor is finished, the list itself is intact
    with pytest.raises(StopIteration):
        next(it)
    assert list(sl) == [1, 2, 3, 4]
    check_structure(sl)


@pytest.mark.parametrize("mutate", [
    lambda sl: sl.remove(2),
    lambda sl: sl.remove_at(0),
    lambda sl: sl.clear(),
])
def test_structural_changes_invalidate_iterators(mutate):
    sl = SkipList([1, 2, 3])
    with pytest.raises(RuntimeError):
        for _ in sl:
            mutate(sl)


def test_reads_do_not_invalidate_iterators():
    sl = SkipList([1, 2, 3])
    seen = []
    for v in sl:
        seen.append(v)
        assert v in sl
        assert sl.index_of(v) >= 0
        assert sl[0] == 1
        sl.remove(99)  # not found, no structural change
        sl.add(None)
    assert seen == [1, 2, 3]


def test_independent_iterators():
    sl = SkipList([1, 2, 3])
    a = iter(sl)
    b = iter(sl)
    assert next(a) == 1
    assert next(a) == 2
    assert next(b) == 1
    assert list(a) == [3]
    assert list(b) == [2, 3]


def test_strings():
    sl = SkipList(["pear", "apple", "fig"])
    assert list(sl) == ["apple", "fig", "pear"]


def test_repr():
    assert repr(SkipList([2, 1])) == "SkipList([1, 2])"


def test_debug_view():
    sl = SkipList([5, 1, 3], seed=11)
    view = sl.debug_view()
    assert view[0] == (None, sl.level_ceiling)
    assert [v for v, _ in view[1:]] == [1, 3, 5]
    assert all(1 <= h <= sl.current_max_level for _, h in view[1:])


def test_seed_gives_same_towers():
    a = SkipList(range(500), seed=42)
    b = SkipList(range(500), seed=42)
    assert a.debug_view() == b.debug_view()


def test_level_ceiling_growth():
    """The head gains levels as the list grows by decades."""
    sl = SkipList(seed=1)
    assert sl.level_ceiling == 6
    for v in range(1_000_000):
        sl.add(v)
    assert len(sl) == 1_000_000
    assert sl.level_ceiling > 6
    assert sl.level_ceiling == 7
    assert sl[999_999] == 999_999
