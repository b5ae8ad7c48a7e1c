"""Per-parent groups of positions and the tails observed under them.

A Group collects, for one head (the path up to a positional marker), every
``(simplified tail, value)`` pair seen at each position. Records are held in
plain lists and refer to each other by index, so there are no back pointers:

* ``GroupIndex.groups`` is ordered by first registration.
* ``Group.tails`` owns the Tail records; TailStubs and Subgroups refer to
  them by their index in that list.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, Iterator, TypeVar

from augsuggest.logs import get_logger
from augsuggest.model import Selection
from augsuggest.values import value_cmp

T = TypeVar("T")

logger = get_logger(__name__)

POSITION_GROWTH_STEP = 8


class _Unset:
    _instance: "_Unset | None" = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = _Unset()


def position_capacity(position: int) -> int:
    """Vector size needed to hold ``position``, in whole growth steps."""
    return (position + 1) // POSITION_GROWTH_STEP * POSITION_GROWTH_STEP + POSITION_GROWTH_STEP


class PositionVector(Generic[T]):
    """Position-indexed vector that grows in fixed steps.

    Slot 0 is never used; positions start at 1. Newly exposed slots hold the
    vector's fill value, which is ``UNSET`` unless a counter fill is given.
    """

    __slots__ = ("_fill", "_slots")

    def __init__(self, fill: object = UNSET, size: int = 0):
        self._fill = fill
        self._slots: list[object] = [fill] * size

    def __len__(self) -> int:
        return len(self._slots)

    def __getitem__(self, position: int):
        return self._slots[position]

    def __setitem__(self, position: int, value: object) -> None:
        self._slots[position] = value

    def grow_to(self, size: int) -> None:
        missing = size - len(self._slots)
        if missing > 0:
            self._slots.extend([self._fill] * missing)

    def copy(self) -> "PositionVector[T]":
        clone: PositionVector[T] = PositionVector(self._fill)
        clone._slots = list(self._slots)
        return clone


@dataclass
class Tail:
    simple_tail: str
    value: str | None
    found: PositionVector[int]
    found_with_value: PositionVector[int]
    value_found: int = 0


@dataclass(frozen=True)
class TailStub:
    tail_id: int


@dataclass(frozen=True)
class Subgroup:
    first_tail_id: int
    members: tuple[int, ...]

    def rank(self, position: int) -> int:
        return self.members.index(position) + 1


@dataclass
class Group:
    group_id: int
    head: str
    use_regexp: bool = False
    max_position: int = 0
    capacity: int = 0
    tails: list[Tail] = field(default_factory=list)
    stubs: PositionVector[list[TailStub]] = field(default_factory=PositionVector)
    selections: PositionVector[Selection] = field(default_factory=PositionVector)
    subgroups: dict[int, Subgroup] = field(default_factory=dict)

    def positions(self) -> range:
        return range(1, self.max_position + 1)

    def tail(self, stub: TailStub) -> Tail:
        return self.tails[stub.tail_id]

    def stubs_at(self, position: int) -> list[TailStub]:
        if position >= self.capacity:
            return []
        stubs = self.stubs[position]
        return stubs if stubs is not UNSET else []

    def register(self, simple_tail: str, position: int, value: str | None) -> int:
        """Record ``(simple_tail, value)`` at ``position``; return the tail id."""
        if position > self.max_position:
            self.max_position = position
            if position >= self.capacity:
                self._grow(position)

        found_here = 1
        matching_id: int | None = None
        same_tail: Tail | None = None
        for tail_id, tail in enumerate(self.tails):
            if tail.simple_tail != simple_tail:
                continue
            tail.found[position] += 1
            found_here = tail.found[position]
            equal, _ = value_cmp(tail.value, value, self.use_regexp)
            if equal:
                tail.found_with_value[position] += 1
                tail.value_found += 1
                matching_id = tail_id
            same_tail = tail

        if matching_id is None:
            if same_tail is not None:
                found = same_tail.found.copy()
            else:
                found = PositionVector(0, self.capacity)
            found[position] = found_here
            found_with_value: PositionVector[int] = PositionVector(0, self.capacity)
            found_with_value[position] = 1
            self.tails.append(
                Tail(
                    simple_tail=simple_tail,
                    value=value,
                    found=found,
                    found_with_value=found_with_value,
                    value_found=1,
                )
            )
            matching_id = len(self.tails) - 1

        self._append_stub(position, TailStub(matching_id))
        return matching_id

    def _append_stub(self, position: int, stub: TailStub) -> None:
        stubs = self.stubs[position]
        if stubs is UNSET:
            self.stubs[position] = [stub]
        else:
            stubs.append(stub)

    def _grow(self, position: int) -> None:
        new_capacity = position_capacity(position)
        logger.debug(
            "grow_position_vectors",
            head=self.head,
            position=position,
            capacity=new_capacity,
        )
        self.stubs.grow_to(new_capacity)
        self.selections.grow_to(new_capacity)
        for tail in self.tails:
            tail.found.grow_to(new_capacity)
            tail.found_with_value.grow_to(new_capacity)
        self.capacity = new_capacity

    def subgroup_for(self, first_tail_id: int) -> Subgroup:
        """Positions that hold ``first_tail_id`` anywhere in their stub list."""
        existing = self.subgroups.get(first_tail_id)
        if existing is not None:
            return existing
        members = tuple(
            position
            for position in self.positions()
            if any(stub.tail_id == first_tail_id for stub in self.stubs_at(position))
        )
        subgroup = Subgroup(first_tail_id=first_tail_id, members=members)
        self.subgroups[first_tail_id] = subgroup
        return subgroup


class GroupIndex:
    """All groups of one run, looked up by head."""

    def __init__(self, *, use_regexp: bool = False):
        self.use_regexp = use_regexp
        self.groups: list[Group] = []
        self._by_head: dict[str, int] = {}

    def __iter__(self) -> Iterator[Group]:
        return iter(self.groups)

    def __len__(self) -> int:
        return len(self.groups)

    def group(self, group_id: int) -> Group:
        return self.groups[group_id]

    def find(self, head: str) -> Group | None:
        group_id = self._by_head.get(head)
        return None if group_id is None else self.groups[group_id]

    def resolve_group(self, head: str) -> Group:
        group_id = self._by_head.get(head)
        if group_id is not None:
            return self.groups[group_id]
        group = Group(group_id=len(self.groups), head=head, use_regexp=self.use_regexp)
        self.groups.append(group)
        self._by_head[head] = group.group_id
        logger.debug("new_group", head=head, group_id=group.group_id)
        return group
