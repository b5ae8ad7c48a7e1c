from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel


class DiagnosticDTO(BaseModel):
    kind: str
    head: str
    position: int
    message: str


class SelectionDTO(BaseModel):
    head: str
    position: int
    tier: str
    tail: Optional[str] = None
    value: Optional[str] = None
    first_tail: Optional[str] = None
    first_value: Optional[str] = None
    subgroup_position: Optional[int] = None


class SuggestReportDTO(BaseModel):
    lines: List[str]
    diagnostics: List[DiagnosticDTO] = []
    selections: List[SelectionDTO] = []
    stats: Dict[str, int] = {}
