from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from augsuggest.config import SuggestConfig
from augsuggest.emission import Emitter, emit_script
from augsuggest.exceptions import OutOfMemory
from augsuggest.groups import GroupIndex
from augsuggest.logs import get_logger
from augsuggest.model import Diagnostic, Leaf, Tier
from augsuggest.schema import DiagnosticDTO, SelectionDTO, SuggestReportDTO
from augsuggest.segments import Segment, split_path
from augsuggest.selection import choose_all_tails

logger = get_logger(__name__)


@dataclass
class RunResult:
    lines: list[str]
    diagnostics: list[Diagnostic]
    index: GroupIndex
    leaf_count: int

    def script(self) -> str:
        if not self.lines:
            return ""
        return "\n".join(self.lines) + "\n"


@dataclass
class SuggestRun:
    """State of one run: segmentation, then selection, then emission."""

    config: SuggestConfig = field(default_factory=SuggestConfig)
    index: GroupIndex = field(init=False)

    def __post_init__(self) -> None:
        self.index = GroupIndex(use_regexp=self.config.use_regexp)

    def segment(self, leaves: list[Leaf]) -> list[list[Segment]]:
        return [
            split_path(leaf.path, leaf.value, self.index, noseq=self.config.noseq)
            for leaf in leaves
        ]

    def select(self) -> list[Diagnostic]:
        return choose_all_tails(self.index, self.config)

    def emit(self, leaves: list[Leaf], chains: list[list[Segment]]) -> list[str]:
        return emit_script(leaves, chains, Emitter(self.index, self.config))

    def run(self, leaves: Iterable[Leaf]) -> RunResult:
        try:
            leaf_list = list(leaves)
            chains = self.segment(leaf_list)
            logger.info("segmented", leaves=len(leaf_list), groups=len(self.index))
            diagnostics = self.select()
            for diagnostic in diagnostics:
                logger.warning(diagnostic.kind, head=diagnostic.head, position=diagnostic.position)
            lines = self.emit(leaf_list, chains)
        except MemoryError as exc:
            raise OutOfMemory("while building the set-command script") from exc
        return RunResult(
            lines=lines,
            diagnostics=diagnostics,
            index=self.index,
            leaf_count=len(leaf_list),
        )


def suggest(leaves: Iterable[Leaf], config: SuggestConfig | None = None) -> RunResult:
    return SuggestRun(config or SuggestConfig()).run(leaves)


def build_report(result: RunResult) -> SuggestReportDTO:
    selections: list[SelectionDTO] = []
    tier_counts: dict[str, int] = {tier.value: 0 for tier in Tier}
    for group in result.index:
        for position in group.positions():
            selection = group.selections[position]
            tier_counts[selection.tier.value] += 1
            chosen = None if selection.chosen is None else group.tails[selection.chosen]
            first = None if selection.first is None else group.tails[selection.first]
            selections.append(
                SelectionDTO(
                    head=group.head,
                    position=position,
                    tier=selection.tier.value,
                    tail=None if chosen is None else chosen.simple_tail,
                    value=None if chosen is None else chosen.value,
                    first_tail=None if first is None else first.simple_tail,
                    first_value=None if first is None else first.value,
                    subgroup_position=selection.subgroup_position or None,
                )
            )
    return SuggestReportDTO(
        lines=result.lines,
        diagnostics=[
            DiagnosticDTO(
                kind=diagnostic.kind,
                head=diagnostic.head,
                position=diagnostic.position,
                message=diagnostic.message,
            )
            for diagnostic in result.diagnostics
        ],
        selections=selections,
        stats={
            "leaves": result.leaf_count,
            "groups": len(result.index),
            "lines": sum(1 for line in result.lines if line.startswith("set ")),
            **{f"tier_{name}": count for name, count in tier_counts.items()},
        },
    )
