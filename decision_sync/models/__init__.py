"""Typed models shared across the application."""

from .decision import Classification, DecisionRecord
from .document import DocumentRef, FetchOutcome
from .run import PageSummary, RunStatistics

__all__ = [
    "Classification",
    "DecisionRecord",
    "DocumentRef",
    "FetchOutcome",
    "PageSummary",
    "RunStatistics",
]
