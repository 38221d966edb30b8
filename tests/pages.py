"""Storage-format page bodies shaped like the Decision Log templates."""

from __future__ import annotations

from typing import Iterable, Optional


def glance_table(status: str = "", classification: str = "") -> str:
    return (
        "<table><tbody>"
        "<tr><th><p><strong>At a Glance</strong></p></th></tr>"
        f"<tr><td><p><strong>Status</strong></p></td><td><p>{status}</p></td></tr>"
        f"<tr><td><p><strong>Classification</strong></p></td><td><p>{classification}</p></td></tr>"
        "<tr><td><p><strong>Owner</strong></p></td><td><p>Platform team</p></td></tr>"
        "</tbody></table>"
    )


def summary_section(
    bullets: Iterable[str],
    heading: str = "AI Summary &mdash; Developer",
    level: int = 2,
) -> str:
    items = "".join(f"<li><p>{bullet}</p></li>" for bullet in bullets)
    return f"<h{level}>{heading}</h{level}><ul>{items}</ul>"


def decision_page(
    status: str = "Accepted",
    classification: str = "Standard",
    bullets: Optional[Iterable[str]] = ("Use structured logging",),
) -> str:
    parts = [
        "<h1>Context</h1><p>Why we needed to decide.</p>",
        glance_table(status, classification),
    ]
    if bullets is not None:
        parts.append(summary_section(bullets))
    parts.append("<h2>Consequences</h2><ul><li>Not a summary bullet</li></ul>")
    return "".join(parts)


def structural_page() -> str:
    return "<p>This folder groups decisions.</p><ac:structured-macro ac:name=\"children\"/>"
