"""Sort fetched pages into decisions, structural pages and failures."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

from decision_sync.config import SyncConfig
from decision_sync.extraction.fields import extract_classification, extract_status
from decision_sync.extraction.sections import extract_summary_bullets
from decision_sync.models.decision import DecisionRecord
from decision_sync.models.document import FetchOutcome
from decision_sync.models.run import PageSummary, RunStatistics

logger = logging.getLogger(__name__)

DEBUG_SNIPPET_CHARS = 3000


def unique_outcomes(outcomes: Iterable[FetchOutcome]) -> List[FetchOutcome]:
    """Keep the first outcome per page id so each page is counted once."""
    unique: List[FetchOutcome] = []
    seen_ids = set()
    for outcome in outcomes:
        if outcome.ref.id in seen_ids:
            logger.warning("Ignoring duplicate page [%s] %s", outcome.ref.id, outcome.ref.title)
            continue
        seen_ids.add(outcome.ref.id)
        unique.append(outcome)
    return unique


def classify_outcomes(
    outcomes: Iterable[FetchOutcome],
    config: SyncConfig,
    discovered: Optional[int] = None,
) -> Tuple[List[DecisionRecord], RunStatistics]:
    """Classify every settled fetch and account for it in the statistics.

    Each page ends in exactly one bucket: errored, structural, missing
    summary or included. Repeated page ids count once, at their first
    outcome. Pages with a recognised status but no summary bullets are
    still emitted as decisions when ``config.include_missing_summary`` is
    set.
    """
    outcome_list = unique_outcomes(outcomes)
    stats = RunStatistics(
        discovered=len(outcome_list) if discovered is None else discovered
    )
    decisions: List[DecisionRecord] = []

    for outcome in outcome_list:
        ref = outcome.ref
        if not outcome.ok:
            stats.errors.append(outcome.error or f"Page {ref.id} returned no body")
            continue

        body = outcome.body or ""
        status = extract_status(body)
        if status not in config.known_statuses:
            logger.info("SKIP [%s] %s (structural)", ref.id, ref.title)
            if config.debug_bodies:
                logger.debug("Body snippet [%s]:\n%s", ref.id, body[:DEBUG_SNIPPET_CHARS])
            stats.skipped_structural.append(PageSummary(id=ref.id, title=ref.title))
            continue

        record = DecisionRecord(
            id=ref.id,
            title=ref.title,
            status=status,
            classification=extract_classification(body),
            bullets=extract_summary_bullets(body),
        )
        if not record.bullets:
            logger.info("SKIP [%s] %s (no AI Summary — Developer)", ref.id, ref.title)
            stats.skipped_no_summary.append(PageSummary(id=ref.id, title=ref.title))
            if not config.include_missing_summary:
                continue
        else:
            logger.info(
                "OK   [%s] %s (%s, %s)",
                ref.id,
                ref.title,
                record.classification.value,
                status,
            )
        decisions.append(record)

    stats.decisions = list(decisions)
    return decisions, stats
