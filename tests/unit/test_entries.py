"""Unit tests for the Entries backing store."""

import pytest

from obstable import Entries, FrozenError, UsageError


@pytest.mark.unit
def test_length_counts_consecutive_positions_only():
    """length() stops at the first missing position and ignores named keys"""
    entries = Entries({0: "a", 1: "b", 3: "d", "name": "x"})

    assert entries.length() == 2
    assert len(entries) == 4
    assert not entries.is_sequence()


@pytest.mark.unit
def test_insert_appends_after_last_position():
    """insert() places the value at the next free position"""
    entries = Entries({0: 10, 1: 20, "tag": "t"})

    position = entries.insert(5)

    assert position == 2
    assert entries.unpack() == (10, 20, 5)


@pytest.mark.unit
def test_remove_at_shifts_later_positions_down():
    """remove_at() closes the gap left by the removed value"""
    entries = Entries({0: "a", 1: "b", 2: "c"})

    assert entries.remove_at(0) == "a"
    assert entries.copy() == {0: "b", 1: "c"}


@pytest.mark.unit
@pytest.mark.edge_case
@pytest.mark.parametrize("position", [-1, 3, "0"])
def test_remove_at_rejects_unresolvable_positions(position):
    """remove_at() raises UsageError outside the sequence"""
    entries = Entries({0: "a", 1: "b", 2: "c"})

    with pytest.raises(UsageError):
        entries.remove_at(position)
    assert entries.length() == 3


@pytest.mark.unit
def test_find_returns_first_matching_key_after_offset():
    """find() honours the init offset and returns None when absent"""
    entries = Entries({0: "x", 1: "y", 2: "x", "k": "z"})

    assert entries.find("x") == 0
    assert entries.find("x", 1) == 2
    assert entries.find("z") == "k"
    assert entries.find("missing") is None


@pytest.mark.unit
def test_unpack_uses_inclusive_ranges():
    """unpack(i, j) includes both ends; an empty range yields ()"""
    entries = Entries({0: 1, 1: 2, 2: 3, 3: 4})

    assert entries.unpack(1, 2) == (2, 3)
    assert entries.unpack(2) == (3, 4)
    assert entries.unpack(3, 1) == ()

    with pytest.raises(UsageError):
        entries.unpack(0, 10)


@pytest.mark.unit
def test_move_within_store_handles_overlap_forward():
    """Moving a block onto an overlapping later range keeps the source values"""
    entries = Entries({0: 1, 1: 2, 2: 3, 3: 4})

    entries.move(0, 2, 1)

    assert entries.unpack() == (1, 1, 2, 3)


@pytest.mark.unit
def test_move_within_store_handles_overlap_backward():
    """Moving a block onto an overlapping earlier range keeps the source values"""
    entries = Entries({0: 1, 1: 2, 2: 3, 3: 4})

    entries.move(1, 3, 0)

    assert entries.unpack() == (2, 3, 4, 4)


@pytest.mark.unit
def test_move_into_other_store_appends_at_destination():
    """move() copies into a different store and leaves the source intact"""
    source = Entries({0: "a", 1: "b", 2: "c"})
    dest = Entries({0: "x"})

    result = source.move(1, 2, 1, dest)

    assert result is dest
    assert dest.unpack() == ("x", "b", "c")
    assert source.unpack() == ("a", "b", "c")


@pytest.mark.unit
@pytest.mark.edge_case
def test_move_rejects_destination_past_end():
    """move() refuses to open a gap in the destination sequence"""
    entries = Entries({0: 1, 1: 2})

    with pytest.raises(UsageError):
        entries.move(0, 1, 5)


@pytest.mark.unit
def test_sort_with_less_than_comparator():
    """sort(comp) orders values by a strict less-than predicate"""
    entries = Entries({0: 3, 1: 1, 2: 2, "name": "keep"})

    entries.sort(lambda a, b: a > b)

    assert entries.unpack() == (3, 2, 1)
    assert entries["name"] == "keep"


@pytest.mark.unit
def test_sort_with_key_and_reverse():
    """sort() accepts list.sort style key and reverse"""
    entries = Entries({0: "bb", 1: "a", 2: "ccc"})

    entries.sort(key=len, reverse=True)

    assert entries.unpack() == ("ccc", "bb", "a")

    with pytest.raises(UsageError):
        entries.sort(lambda a, b: a < b, key=len)


@pytest.mark.unit
def test_concat_joins_scalars():
    """concat() joins strings and numbers with the separator"""
    entries = Entries({0: "a", 1: 2, 2: 3.5})

    assert entries.concat() == "a23.5"
    assert entries.concat(", ", 1) == "2, 3.5"
    assert entries.concat("-", 0, 0) == "a"


@pytest.mark.unit
@pytest.mark.edge_case
@pytest.mark.parametrize("bad", [None, True, {"x": 1}, [1]])
def test_concat_rejects_non_joinable_values(bad):
    """concat() raises UsageError for values that are not strings or numbers"""
    entries = Entries({0: "a", 1: bad})

    with pytest.raises(UsageError):
        entries.concat()


@pytest.mark.unit
def test_frozen_store_rejects_every_mutation():
    """A frozen store raises FrozenError on writes but still answers reads"""
    entries = Entries({0: 1, 1: 2}).freeze()

    for mutate in (
        lambda: entries.__setitem__(0, 9),
        lambda: entries.__delitem__(0),
        lambda: entries.insert(3),
        lambda: entries.remove_at(0),
        lambda: entries.move(0, 0, 1),
        lambda: entries.sort(),
        lambda: entries.clear(),
    ):
        with pytest.raises(FrozenError):
            mutate()

    assert entries.unpack() == (1, 2)
    assert entries.find(2) == 1
    assert entries.concat() == "12"


@pytest.mark.unit
def test_release_clears_even_when_frozen():
    """release() empties the store regardless of the frozen flag"""
    entries = Entries({0: 1}).freeze()

    entries.release()

    assert len(entries) == 0
