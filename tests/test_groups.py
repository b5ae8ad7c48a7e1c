from __future__ import annotations

import pytest

from augsuggest.groups import UNSET, GroupIndex, PositionVector, position_capacity


@pytest.mark.parametrize(
    ("position", "capacity"),
    [(1, 8), (6, 8), (7, 16), (8, 16), (15, 24), (16, 24)],
)
def test_position_capacity_grows_in_steps(position: int, capacity: int) -> None:
    assert position_capacity(position) == capacity
    assert position_capacity(position) > position


def test_position_vector_fills_new_slots() -> None:
    counters: PositionVector[int] = PositionVector(0, 2)
    counters[1] = 5
    counters.grow_to(4)
    assert [counters[i] for i in range(4)] == [0, 5, 0, 0]
    clone = counters.copy()
    clone[1] = 9
    assert counters[1] == 5

    unset: PositionVector[list[int]] = PositionVector()
    unset.grow_to(2)
    assert unset[1] is UNSET
    assert not unset[1]


def test_register_counts_same_tail_and_value() -> None:
    group = GroupIndex().resolve_group("/files/etc/hosts/")
    first = group.register("/ipaddr", 1, "127.0.0.1")
    again = group.register("/ipaddr", 2, "127.0.0.1")
    assert first == again
    tail = group.tails[first]
    assert tail.value_found == 2
    assert tail.found[1] == 1 and tail.found[2] == 1
    assert tail.found_with_value[1] == 1 and tail.found_with_value[2] == 1


def test_register_new_value_copies_found_counts() -> None:
    group = GroupIndex().resolve_group("/files/etc/hosts/")
    localhost = group.register("/canonical", 1, "localhost")
    other = group.register("/canonical", 2, "other")
    assert localhost != other
    assert group.tails[other].found[1] == 1
    assert group.tails[other].found[2] == 1
    assert group.tails[other].found_with_value[1] == 0
    assert group.tails[other].value_found == 1
    # The existing same-tail record also learns about position 2.
    assert group.tails[localhost].found[2] == 1
    assert group.tails[localhost].found_with_value[2] == 0


def test_register_repeated_tail_at_one_position() -> None:
    group = GroupIndex().resolve_group("/a/label")
    group.register("/alias", 1, "one")
    group.register("/alias", 1, "two")
    assert [group.tail(stub).value for stub in group.stubs_at(1)] == ["one", "two"]
    assert group.tails[1].found[1] == 2


def test_register_regexp_mode_bracket_matches_any_character() -> None:
    group = GroupIndex(use_regexp=True).resolve_group("/a/label")
    first = group.register("/k", 1, "a]")
    second = group.register("/k", 2, "ab")
    assert first == second
    assert len(group.tails) == 1
    assert group.tails[first].value_found == 2
    assert group.tails[first].found_with_value[2] == 1


def test_register_literal_mode_keeps_bracket_distinct() -> None:
    group = GroupIndex().resolve_group("/a/label")
    first = group.register("/k", 1, "a]")
    second = group.register("/k", 2, "ab")
    assert first != second
    assert len(group.tails) == 2
    assert group.tails[first].found_with_value[2] == 0


def test_register_grows_vectors_past_capacity() -> None:
    group = GroupIndex().resolve_group("/a/label")
    tail_id = group.register("/x", 1, "v")
    assert group.capacity == 8
    group.register("/x", 20, "v")
    assert group.capacity == position_capacity(20)
    assert group.max_position == 20
    assert len(group.tails[tail_id].found) == group.capacity
    assert group.tails[tail_id].found[20] == 1
    assert group.stubs_at(10) == []


def test_subgroup_collects_positions_holding_the_tail() -> None:
    group = GroupIndex().resolve_group("/r/e")
    shared = group.register("/a", 1, "1")
    group.register("/a", 2, "1")
    group.register("/a", 3, "2")
    subgroup = group.subgroup_for(shared)
    assert subgroup.members == (1, 2)
    assert subgroup.rank(2) == 2
    assert group.subgroup_for(shared) is subgroup


def test_group_index_resolves_by_head() -> None:
    index = GroupIndex()
    first = index.resolve_group("/a/label")
    assert index.resolve_group("/a/label") is first
    second = index.resolve_group("/b/")
    assert second.group_id == 1
    assert index.find("/b/") is second
    assert index.find("/missing") is None
    assert list(index) == [first, second]
