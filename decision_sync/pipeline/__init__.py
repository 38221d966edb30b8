"""Pipeline stages that turn fetched pages into the reference document."""

from .classify import classify_outcomes
from .sync import SyncResult, is_successful, run_sync

__all__ = ["SyncResult", "classify_outcomes", "is_successful", "run_sync"]
