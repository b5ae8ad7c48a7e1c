"""Split positional paths into segments.

Given ``/head/label_a[12]/middle/3/tail`` the segments are::

    head            segment            position  simplified_tail
    /head/label_a   /head/label_a      12        /middle/seq::*/tail
    .../middle/     /middle/           3         /tail
    .../3/tail      /tail              None      ""

Label markers (``[N]``) are dropped from simplified tails, sequence markers
(``/N``) become ``/seq::*`` (or ``/*``), so tails from different positions
compare equal when they name the same field.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from augsuggest.groups import GroupIndex
from augsuggest.logs import get_logger

logger = get_logger(__name__)

_MARKER_RE = re.compile(
    r"\[(?P<label>0*[1-9][0-9]*)\]|/(?P<seq>0*[1-9][0-9]*)(?=/|\Z)"
)

SEQ_WILDCARD = "seq::*"
PLAIN_WILDCARD = "*"


@dataclass(frozen=True)
class Segment:
    head: str
    segment: str
    position: int | None
    simplified_tail: str
    group_id: int | None = None

    @property
    def is_sequence(self) -> bool:
        """True for a purely numeric marker such as ``/3``."""
        return self.segment.endswith("/")


def next_position(path: str, start: int = 0) -> tuple[int, int, int | None]:
    """Locate the next position marker at or after ``start``.

    Returns ``(head_end, next_start, position)``. For ``label[N]`` the head
    ends before ``[`` and the next segment starts after ``]``; for ``/N`` the
    head keeps the leading ``/`` and the next segment starts at the following
    ``/``. Without a marker both offsets are ``len(path)`` and position is
    ``None``. Unclosed or non-numeric brackets are ordinary path text.
    """
    match = _MARKER_RE.search(path, start)
    if match is None:
        return len(path), len(path), None
    if match.group("label") is not None:
        return match.start(), match.end(), int(match.group("label"))
    return match.start() + 1, match.end(), int(match.group("seq"))


def simplify_tail(tail: str, noseq: bool = False) -> str:
    wildcard = "/" + (PLAIN_WILDCARD if noseq else SEQ_WILDCARD)

    def _replace(match: re.Match[str]) -> str:
        if match.group("label") is not None:
            return ""
        return wildcard

    return _MARKER_RE.sub(_replace, tail)


def split_path(
    path: str,
    value: str | None,
    index: GroupIndex,
    *,
    noseq: bool = False,
) -> list[Segment]:
    """Segment ``path`` and register each positioned segment in ``index``.

    Registration happens as each segment is produced, so the group of an
    outer segment already exists when the inner segments are registered.
    """
    segments: list[Segment] = []
    seg_start = 0
    while seg_start < len(path):
        head_end, next_start, position = next_position(path, seg_start)
        head = path[:head_end]
        simplified = simplify_tail(path[next_start:], noseq)
        group_id: int | None = None
        if position is not None:
            group = index.resolve_group(head)
            group.register(simplified, position, value)
            group_id = group.group_id
        segment = Segment(
            head=head,
            segment=head[seg_start:],
            position=position,
            simplified_tail=simplified,
            group_id=group_id,
        )
        logger.debug(
            "segment",
            head=segment.head,
            segment=segment.segment,
            position=position,
            simplified_tail=simplified,
        )
        segments.append(segment)
        seg_start = next_start
    return segments
