"""Markdown run report for the GitHub Actions step summary."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from decision_sync.config import SyncConfig
from decision_sync.models.run import PageSummary, RunStatistics

logger = logging.getLogger(__name__)


def _details(summary: str, header: List[str], rows: List[str]) -> List[str]:
    return ["<details>", f"<summary>{summary}</summary>", "", *header, *rows, "</details>", ""]


def render_step_summary(
    stats: RunStatistics,
    config: SyncConfig,
    output_written: bool,
) -> str:
    """Render counts and itemised lists for every bucket of the run."""
    failed = stats.has_errors
    icon = "❌" if failed else "✅"
    label = "Errors encountered" if failed else "Decisions synced"

    lines: List[str] = [
        f"## {icon} Sync decisions — {label}",
        "",
        "| | Count |",
        "|---|---|",
        f"| Pages discovered under Decision Log | {stats.discovered} |",
        f"| Structural pages skipped (no status) | {len(stats.skipped_structural)} |",
        f"| Decision pages without AI Summary | {len(stats.skipped_no_summary)} |",
        f"| Decisions included in output | {stats.included_count} |",
        f"| Errors | {len(stats.errors)} |",
        "",
    ]

    if output_written:
        lines.extend([f"**Output:** `{config.output_path.as_posix()}` updated", ""])

    if failed:
        lines.extend(["### ❌ Errors", ""])
        lines.extend(f"- {error}" for error in stats.errors)
        lines.append("")

    lines.extend(
        _details(
            "Decisions included",
            ["| Title | ID | Classification | Status |", "|---|---|---|---|"],
            [
                f"| [{d.title}]({config.page_url(d.id)}) | {d.id} | {d.classification.value} | {d.status} |"
                for d in stats.decisions
            ],
        )
    )

    if stats.skipped_no_summary:
        lines.extend(
            _details(
                "Decision pages without AI Summary — Developer",
                ["| Title | ID |", "|---|---|"],
                [_linked_row(page, config) for page in stats.skipped_no_summary],
            )
        )

    if stats.skipped_structural:
        lines.extend(
            _details(
                "Structural pages skipped",
                ["| Title | ID |", "|---|---|"],
                [f"| {page.title} | {page.id} |" for page in stats.skipped_structural],
            )
        )

    return "\n".join(lines)


def _linked_row(page: PageSummary, config: SyncConfig) -> str:
    return f"| [{page.title}]({config.page_url(page.id)}) | {page.id} |"


def write_step_summary(text: str, path: Optional[Path]) -> None:
    """Append the report to the CI summary file, if one is configured."""
    if path is None:
        logger.debug("No step summary path configured; skipping report")
        return
    with path.open("a", encoding="utf-8") as handle:
        handle.write(text)
    logger.info("Appended run summary to %s", path)
