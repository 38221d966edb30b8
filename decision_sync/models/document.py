"""Page-level data models."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class DocumentRef(BaseModel):
    """Lightweight reference to a page found during discovery."""

    model_config = ConfigDict(frozen=True)

    id: int
    title: str


class FetchOutcome(BaseModel):
    """Settled result of fetching one page body."""

    ref: DocumentRef
    body: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.body is not None
