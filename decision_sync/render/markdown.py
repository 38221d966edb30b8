"""Render classified decisions into the developer reference document."""

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from decision_sync.config import SyncConfig
from decision_sync.models.decision import Classification, DecisionRecord

PREAMBLE: Sequence[str] = (
    "# NXD Decision Log — Developer AI Reference",
    "",
    "<!-- AUTO-GENERATED — do not edit by hand.",
    "     Run `decision-sync` to regenerate from Confluence. -->",
    "",
    "Contains the actionable constraints extracted from each NXD platform",
    "decision. Read by AI coding assistants to enforce standards.",
    "",
    "---",
    "",
)

SECTION_LABELS: Dict[Classification, str] = {
    Classification.STANDARD: "Standards — How we implement (binding on all code)",
    Classification.ARCHITECTURAL: "Architectural — What we adopt (binding technology choices)",
    Classification.STRATEGIC: "Strategic — What and why (principles that constrain all decisions)",
}
UNCLASSIFIED_LABEL = "Proposed / Unclassified"


def _render_bullets(decision: DecisionRecord) -> List[str]:
    return [f"- {bullet}" for bullet in decision.bullets]


def format_decision(decision: DecisionRecord, config: SyncConfig) -> List[str]:
    heading = f"**[{decision.title}]({config.page_url(decision.id)})** ({decision.id}) — {decision.status}"
    return [heading, *_render_bullets(decision), ""]


def format_unclassified(decision: DecisionRecord) -> List[str]:
    heading = f"**{decision.title}** ({decision.id}) — {decision.status}"
    return [heading, *_render_bullets(decision), ""]


def render_decisions(decisions: Iterable[DecisionRecord], config: SyncConfig) -> str:
    """Return the markdown document, grouped in fixed classification order."""
    decision_list = list(decisions)
    lines: List[str] = list(PREAMBLE)

    for classification, label in SECTION_LABELS.items():
        group = [d for d in decision_list if d.classification == classification]
        if not group:
            continue
        lines.extend([f"## {label}", ""])
        for decision in group:
            lines.extend(format_decision(decision, config))
        lines.extend(["---", ""])

    unclassified = [d for d in decision_list if d.classification not in SECTION_LABELS]
    if unclassified:
        lines.extend([f"## {UNCLASSIFIED_LABEL}", ""])
        for decision in unclassified:
            lines.extend(format_unclassified(decision))
        lines.extend(["---", ""])

    return "\n".join(lines)
