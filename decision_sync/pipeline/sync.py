"""Sync the Confluence Decision Log into the developer reference document."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

import httpx
from pydantic import BaseModel

from decision_sync.config import SyncConfig, settings
from decision_sync.confluence.client import ConfluenceClient, ConfluenceError, build_credential
from decision_sync.models.decision import DecisionRecord
from decision_sync.models.run import RunStatistics
from decision_sync.pipeline.classify import classify_outcomes
from decision_sync.render.markdown import render_decisions
from decision_sync.render.step_summary import render_step_summary, write_step_summary

logger = logging.getLogger(__name__)


class SyncResult(BaseModel):
    """Everything a run produced, before anything is written to disk."""

    markdown: str
    decisions: List[DecisionRecord]
    stats: RunStatistics
    success: bool

    @property
    def publishable(self) -> bool:
        """Output is only published when every page was fetched."""
        return not self.stats.has_errors


def is_successful(stats: RunStatistics, config: SyncConfig) -> bool:
    if stats.has_errors:
        return False
    if config.fail_on_missing_summary and stats.skipped_no_summary:
        return False
    return True


async def run_sync(
    config: SyncConfig,
    credential: str,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> SyncResult:
    """Discover, fetch, classify and render one run.

    A discovery failure raises before any body is requested. Body failures
    are recorded in the statistics and the run carries on.
    """
    async with ConfluenceClient(config, credential, transport=transport) as client:
        logger.info("Discovering pages under Decision Log root (%s)", config.root_id)
        refs = await client.discover_all()
        logger.info("Found %s pages. Fetching bodies", len(refs))
        outcomes = await client.fetch_bodies(refs)

    decisions, stats = classify_outcomes(outcomes, config, discovered=len(refs))
    return SyncResult(
        markdown=render_decisions(decisions, config),
        decisions=decisions,
        stats=stats,
        success=is_successful(stats, config),
    )


def write_output(markdown: str, output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(markdown, encoding="utf-8")


def main() -> None:
    """CLI entry point."""
    logging.basicConfig(level=settings.log_level)
    config = settings.sync_config()
    try:
        credential = build_credential(settings.confluence_email, settings.confluence_api_token)
    except ValueError as exc:
        logger.error("%s", exc)
        sys.exit(1)

    try:
        result = asyncio.run(run_sync(config, credential))
    except ConfluenceError as exc:
        logger.error("Sync aborted: %s", exc)
        sys.exit(1)

    if result.stats.has_errors:
        logger.error("Errors fetching pages:")
        for error in result.stats.errors:
            logger.error("  %s", error)

    output_written = False
    if result.publishable:
        write_output(result.markdown, config.output_path)
        output_written = True
        logger.info("Wrote %s (%s decisions)", config.output_path, len(result.decisions))
    else:
        logger.error("Not writing %s because some pages failed to fetch", config.output_path)

    write_step_summary(
        render_step_summary(result.stats, config, output_written),
        settings.step_summary_path_obj,
    )

    if not result.success:
        sys.exit(1)
    logger.info("Done.")


if __name__ == "__main__":
    main()
