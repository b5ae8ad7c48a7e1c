"""Render ``set`` commands from the selections made for each group.

Predicates chosen from a tail other than the first one refer to a field that
may only be created by a later line of the script. Until the line that sets
that field has been rendered, the predicate also accepts a node where the
field is missing (``or count(tail)=0``). The per-position state lives here
and is advanced only while rendering.

Paired predicates use one spelling whatever the first value is, with no
space before the closing bracket::

    [a='1' and ( b='x' or count(b)=0 )]

augtool accepts it; scripts from older tools may differ from it by that one
space.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from augsuggest.config import SuggestConfig
from augsuggest.groups import Group, GroupIndex, Tail
from augsuggest.logs import get_logger
from augsuggest.model import Leaf, Selection, Tier
from augsuggest.segments import Segment
from augsuggest.selection import is_child
from augsuggest.values import quote

logger = get_logger(__name__)


class EmitState(Enum):
    FIXED = "fixed"
    CHOSEN_START = "chosen_start"
    CHOSEN_WIP = "chosen_wip"
    CHOSEN_DONE = "chosen_done"
    PAIRED_START = "paired_start"
    PAIRED_WIP = "paired_wip"
    PAIRED_DONE = "paired_done"
    NO_PREDICATE = "no_predicate"


_INITIAL_STATE = {
    Tier.FIRST_TAIL: EmitState.FIXED,
    Tier.FIRST_TAIL_PLUS_POSITION: EmitState.FIXED,
    Tier.CHOSEN_TAIL: EmitState.CHOSEN_START,
    Tier.CHOSEN_TAIL_PLUS_FIRST_TAIL: EmitState.PAIRED_START,
    Tier.NO_PREDICATE: EmitState.NO_PREDICATE,
}


def tail_expr(simple_tail: str) -> str:
    """``/path`` -> ``path``; an empty tail is the node itself, ``.``."""
    if simple_tail.startswith("/"):
        return simple_tail[1:]
    if not simple_tail:
        return "."
    return simple_tail


@dataclass
class Emitter:
    index: GroupIndex
    config: SuggestConfig
    states: dict[tuple[int, int], EmitState] = field(default_factory=dict)

    def state(self, group_id: int, position: int) -> EmitState:
        key = (group_id, position)
        state = self.states.get(key)
        if state is None:
            selection = self.index.group(group_id).selections[position]
            state = _INITIAL_STATE[selection.tier]
            self.states[key] = state
        return state

    def _advance(self, group: Group, position: int, state: EmitState) -> None:
        logger.debug(
            "emit_state",
            head=group.head,
            position=position,
            state=state.value,
        )
        self.states[(group.group_id, position)] = state

    def _clause(self, tail: Tail, regex: str | None, width: int) -> str:
        expr = tail_expr(tail.simple_tail)
        if tail.value is None:
            return expr
        if self.config.use_regexp:
            return f"{expr}=~regexp({regex.ljust(width)})"
        return f"{expr}={quote(tail.value).ljust(width)}"

    def render_segment(self, segment: Segment, value_qq: str | None) -> str:
        text = segment.segment
        if segment.is_sequence:
            text += self.config.seq_wildcard
        if segment.group_id is None or segment.position is None:
            return text
        group = self.index.group(segment.group_id)
        return text + self._predicate(group, segment, value_qq)

    def _predicate(self, group: Group, segment: Segment, value_qq: str | None) -> str:
        position = segment.position
        state = self.state(group.group_id, position)
        selection: Selection = group.selections[position]
        if state is EmitState.NO_PREDICATE:
            return "" if segment.is_sequence else "[*]"

        chosen = group.tails[selection.chosen]
        chosen_expr = tail_expr(chosen.simple_tail)
        creates_chosen = (
            chosen.simple_tail == segment.simplified_tail
            and quote(chosen.value) == value_qq
        )

        if state in (EmitState.FIXED, EmitState.CHOSEN_START, EmitState.CHOSEN_DONE):
            text = f"[{self._clause(chosen, selection.chosen_re, selection.pretty_width)}]"
            if selection.tier is Tier.FIRST_TAIL_PLUS_POSITION:
                text += f"[{selection.subgroup_position}]"
            if state is EmitState.CHOSEN_START:
                self._advance(group, position, EmitState.CHOSEN_WIP)
            return text

        if state is EmitState.CHOSEN_WIP:
            clause = self._clause(chosen, selection.chosen_re, selection.pretty_width)
            if creates_chosen:
                self._advance(group, position, EmitState.CHOSEN_DONE)
            return f"[{clause} or count({chosen_expr})=0]"

        first = group.tails[selection.first]
        first_clause = self._clause(first, selection.first_re, selection.pretty_width)
        chosen_clause = self._clause(chosen, selection.chosen_re, 0)
        if state is EmitState.PAIRED_WIP:
            if creates_chosen:
                self._advance(group, position, EmitState.PAIRED_DONE)
            return f"[{first_clause} and ( {chosen_clause} or count({chosen_expr})=0 )]"
        if state is EmitState.PAIRED_START:
            self._advance(group, position, EmitState.PAIRED_WIP)
        return f"[{first_clause} and {chosen_clause}]"

    def render_leaf(self, leaf: Leaf, segments: list[Segment]) -> str:
        value_qq = quote(leaf.value)
        path_expr = "".join(self.render_segment(segment, value_qq) for segment in segments)
        if value_qq is None:
            return f"set {path_expr}"
        return f"set {path_expr} {value_qq}"


def _starts_new_block(current: list[Segment], following: list[Segment]) -> bool:
    if not current or not following:
        return bool(current) != bool(following)
    this_seg, next_seg = current[0], following[0]
    if this_seg.group_id != next_seg.group_id:
        return True
    return this_seg.group_id is not None and this_seg.position != next_seg.position


def emit_script(
    leaves: list[Leaf],
    chains: list[list[Segment]],
    emitter: Emitter,
) -> list[str]:
    """One ``set`` line per leaf, in input order.

    A leaf without a value whose successor is one of its descendants is left
    out unless ``all_nodes`` is set, since setting the descendant creates it.
    """
    config = emitter.config
    lines: list[str] = []
    for idx, leaf in enumerate(leaves):
        value = leaf.value or None
        if config.verbose:
            if value is None:
                lines.append(f"#   {leaf.path}")
            else:
                lines.append(f"#   {leaf.path}  {quote(leaf.value)}")
        following = leaves[idx + 1] if idx + 1 < len(leaves) else None
        if (
            value is None
            and not config.all_nodes
            and following is not None
            and is_child(leaf.path, following.path)
        ):
            logger.debug("skip_parent_node", path=leaf.path)
            continue
        lines.append(emitter.render_leaf(leaf, chains[idx]))
        if config.pretty and following is not None:
            if _starts_new_block(chains[idx], chains[idx + 1]):
                lines.append("")
    return lines
