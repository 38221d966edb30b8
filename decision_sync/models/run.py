"""Run-level statistics consumed by the step summary."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from .decision import DecisionRecord


class PageSummary(BaseModel):
    """Identifier and title of a page listed in the statistics."""

    id: int
    title: str


class RunStatistics(BaseModel):
    """Where every discovered page ended up during a run."""

    discovered: int = 0
    skipped_structural: List[PageSummary] = Field(default_factory=list)
    skipped_no_summary: List[PageSummary] = Field(default_factory=list)
    decisions: List[DecisionRecord] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def included_count(self) -> int:
        return len(self.decisions)
