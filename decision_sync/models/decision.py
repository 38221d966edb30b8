"""Decision record models."""

from __future__ import annotations

from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class Classification(str, Enum):
    """Closed set of categories used to group decisions."""

    STANDARD = "Standard"
    ARCHITECTURAL = "Architectural"
    STRATEGIC = "Strategic"
    UNKNOWN = "Unknown"


class DecisionRecord(BaseModel):
    """A page recognised as an actual decision."""

    id: int
    title: str
    status: str
    classification: Classification = Classification.UNKNOWN
    bullets: List[str] = Field(default_factory=list)
