from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Leaf:
    """One (path, value) pair delivered by a tree provider in pre-order."""

    path: str
    value: str | None = None


class Tier(Enum):
    FIRST_TAIL = "first_tail"
    CHOSEN_TAIL = "chosen_tail"
    CHOSEN_TAIL_PLUS_FIRST_TAIL = "chosen_tail_plus_first_tail"
    FIRST_TAIL_PLUS_POSITION = "first_tail_plus_position"
    NO_PREDICATE = "no_predicate"


@dataclass(frozen=True)
class Selection:
    """Predicate chosen for one group position.

    ``chosen`` and ``first`` are indices into ``Group.tails``. The regex and
    width fields are filled in by the formatting passes after selection.
    """

    tier: Tier
    chosen: int | None = None
    first: int | None = None
    subgroup_position: int = 0
    chosen_re: str | None = None
    first_re: str | None = None
    re_width_chosen: int = 0
    re_width_first: int = 0
    pretty_width: int = 0


@dataclass(frozen=True)
class Diagnostic:
    kind: str
    head: str
    position: int
    message: str
