"""Choose, for every group position, the predicate that identifies it.

Preferences, first match wins:

1. the position's first significant tail, if its (tail, value) pair occurs
   once in the whole group;
2. a tail at this position whose pair occurs once in the group and whose
   bare tail exists at every position;
3. a tail which, together with the first tail, is unique among the
   positions sharing that first tail (the subgroup);
4. the first tail plus the position's rank within its subgroup.
"""

from __future__ import annotations

from dataclasses import replace

from augsuggest.config import SuggestConfig
from augsuggest.groups import Group, GroupIndex, TailStub
from augsuggest.logs import get_logger
from augsuggest.model import Diagnostic, Selection, Tier
from augsuggest.values import quote, regexp, value_cmp

logger = get_logger(__name__)

MAX_PRETTY_WIDTH = 30


def is_child(parent: str, child: str) -> bool:
    """True if ``child`` is ``parent`` followed by ``/`` and more path."""
    return child.startswith(parent) and child[len(parent):len(parent) + 1] == "/"


def find_first_tail(group: Group, stubs: list[TailStub]) -> int:
    """Index of the first significant stub.

    Valueless stubs that only exist to hold the following stub (its tail is
    a child path) are skipped, so ``/123 (null)`` and ``/123/tail (null)``
    give way to ``/123/tail/child``.
    """
    idx = 0
    while idx < len(stubs) - 1:
        tail = group.tail(stubs[idx])
        if tail.value:
            break
        if not is_child(tail.simple_tail, group.tail(stubs[idx + 1]).simple_tail):
            break
        idx += 1
    return idx


def _shadowed(group: Group, stubs: list[TailStub], first_idx: int, idx: int) -> bool:
    # Only the first appearance of a simple tail at a position can be used.
    simple_tail = group.tail(stubs[idx]).simple_tail
    return any(
        group.tail(stubs[check]).simple_tail == simple_tail
        for check in range(first_idx, idx)
    )


def _matches_rivals(group: Group, tail_id: int) -> bool:
    """True for a valueless tail whose field also appears with a value.

    ``[tail]`` then holds at every position that has the field at all, so
    the pair being unique in the group does not make the predicate unique.
    """
    tail = group.tails[tail_id]
    if tail.value is not None:
        return False
    return any(
        other_id != tail_id and other.simple_tail == tail.simple_tail
        for other_id, other in enumerate(group.tails)
    )


def choose_tail(group: Group, position: int) -> Selection:
    stubs = group.stubs_at(position)
    if not stubs:
        logger.warning("no_tail_at_position", head=group.head, position=position)
        return Selection(tier=Tier.NO_PREDICATE)

    first_idx = find_first_tail(group, stubs)
    first_id = stubs[first_idx].tail_id
    first = group.tails[first_id]
    first_matches_rivals = _matches_rivals(group, first_id)

    if first.value_found == 1 and not first_matches_rivals:
        if len(stubs) == 1 and first.simple_tail == "" and first.value is None:
            # A bare, valueless node: nothing below it to match on.
            logger.debug("bare_position", head=group.head, position=position)
            return Selection(tier=Tier.NO_PREDICATE, first=first_id)
        logger.debug(
            "tier_first_tail",
            head=group.head,
            position=position,
            tail=first.simple_tail,
            value=first.value,
        )
        return Selection(tier=Tier.FIRST_TAIL, chosen=first_id, first=first_id)

    for idx in range(first_idx, len(stubs)):
        tail = group.tail(stubs[idx])
        if tail.value_found != 1 or _matches_rivals(group, stubs[idx].tail_id):
            continue
        if not all(tail.found[pos] for pos in group.positions()):
            continue
        if _shadowed(group, stubs, first_idx, idx):
            continue
        logger.debug(
            "tier_chosen_tail",
            head=group.head,
            position=position,
            tail=tail.simple_tail,
            value=tail.value,
        )
        return Selection(tier=Tier.CHOSEN_TAIL, chosen=stubs[idx].tail_id, first=first_id)

    subgroup = group.subgroup_for(first_id)
    others = [member for member in subgroup.members if member != position]
    # A valueless first tail cannot narrow the positions outside its subgroup.
    candidates = () if first_matches_rivals else range(first_idx + 1, len(stubs))
    for idx in candidates:
        tail = group.tail(stubs[idx])
        if any(tail.found_with_value[pos] or not tail.found[pos] for pos in others):
            continue
        if _matches_rivals(group, stubs[idx].tail_id):
            continue
        if _shadowed(group, stubs, first_idx, idx):
            continue
        logger.debug(
            "tier_chosen_tail_plus_first_tail",
            head=group.head,
            position=position,
            first_tail=first.simple_tail,
            tail=tail.simple_tail,
            value=tail.value,
        )
        return Selection(
            tier=Tier.CHOSEN_TAIL_PLUS_FIRST_TAIL,
            chosen=stubs[idx].tail_id,
            first=first_id,
        )

    if first_matches_rivals:
        # [tail][n] counts every sibling that has the field.
        rank = sum(1 for pos in range(1, position + 1) if first.found[pos])
    else:
        rank = subgroup.rank(position)
    logger.debug(
        "tier_first_tail_plus_position",
        head=group.head,
        position=position,
        first_tail=first.simple_tail,
        rank=rank,
    )
    return Selection(
        tier=Tier.FIRST_TAIL_PLUS_POSITION,
        chosen=first_id,
        first=first_id,
        subgroup_position=rank,
    )


def _collision_width(group: Group, tail_id: int) -> int:
    """Longest common run between a tail's value and any same-tail rival."""
    target = group.tails[tail_id]
    width = 0
    for other_id, other in enumerate(group.tails):
        if other_id == tail_id or other.simple_tail != target.simple_tail:
            continue
        _, matched = value_cmp(other.value, target.value, group.use_regexp)
        width = max(width, matched)
    return width


def choose_re_width(group: Group, min_len: int) -> None:
    for position in group.positions():
        selection = group.selections[position]
        if selection.chosen is None:
            continue
        width_chosen = max(_collision_width(group, selection.chosen), min_len)
        updates: dict[str, object] = {
            "re_width_chosen": width_chosen,
            "chosen_re": regexp(group.tails[selection.chosen].value, width_chosen),
        }
        if selection.tier is Tier.CHOSEN_TAIL_PLUS_FIRST_TAIL:
            width_first = max(_collision_width(group, selection.first), min_len)
            updates["re_width_first"] = width_first
            updates["first_re"] = regexp(group.tails[selection.first].value, width_first)
        group.selections[position] = replace(selection, **updates)


def _rendered_width(group: Group, selection: Selection, use_regexp: bool) -> int:
    if selection.tier is Tier.CHOSEN_TAIL_PLUS_FIRST_TAIL:
        text = selection.first_re if use_regexp else quote(group.tails[selection.first].value)
    else:
        text = selection.chosen_re if use_regexp else quote(group.tails[selection.chosen].value)
    return len(text) if text else 0


def choose_pretty_width(group: Group, use_regexp: bool) -> None:
    """Align values of positions whose chosen tails name the same field."""
    widths: dict[int, int] = {}
    widest: dict[str, int] = {}
    for position in group.positions():
        selection = group.selections[position]
        if selection.chosen is None:
            continue
        width = _rendered_width(group, selection, use_regexp)
        widths[position] = width
        simple_tail = group.tails[selection.chosen].simple_tail
        if width <= MAX_PRETTY_WIDTH:
            widest[simple_tail] = max(widest.get(simple_tail, 0), width)
        else:
            widest.setdefault(simple_tail, 0)
    for position in widths:
        selection = group.selections[position]
        simple_tail = group.tails[selection.chosen].simple_tail
        group.selections[position] = replace(
            selection,
            pretty_width=min(widest[simple_tail], MAX_PRETTY_WIDTH),
        )


def choose_all_tails(index: GroupIndex, config: SuggestConfig) -> list[Diagnostic]:
    diagnostics: list[Diagnostic] = []
    for group in index:
        for position in group.positions():
            selection = choose_tail(group, position)
            if selection.tier is Tier.NO_PREDICATE and selection.first is None:
                diagnostics.append(
                    Diagnostic(
                        kind="missing_predicate",
                        head=group.head,
                        position=position,
                        message=f"{group.head}[{position}] has no recorded tail",
                    )
                )
            group.selections[position] = selection
        if config.use_regexp:
            choose_re_width(group, config.regexp_width)
        if config.pretty:
            choose_pretty_width(group, config.use_regexp)
    return diagnostics
