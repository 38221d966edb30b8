"""Pull the developer bullets out of the "AI Summary — Developer" section."""

from __future__ import annotations

import logging
import re
from typing import List, Optional

from decision_sync.extraction.markup import collapse_whitespace, normalize_markup

logger = logging.getLogger(__name__)

HEADING_PATTERN = re.compile(r"<h([1-6])\b[^>]*>(.*?)</h\1\s*>", re.IGNORECASE | re.DOTALL)
HEADING_OPEN_PATTERN = re.compile(r"<h[1-6]\b[^>]*>", re.IGNORECASE)
LIST_ITEM_PATTERN = re.compile(r"<li\b[^>]*>(.*?)</li\s*>", re.IGNORECASE | re.DOTALL)
SUMMARY_TITLE_PATTERN = re.compile(
    r"AI\s+Summary\s*[-–—]\s*Developer", re.IGNORECASE
)
PLACEHOLDER_PREFIX = "_"


def find_summary_section(body: str) -> Optional[str]:
    """Return the markup between the summary heading and the next heading."""
    for heading in HEADING_PATTERN.finditer(body):
        title = collapse_whitespace(normalize_markup(heading.group(2)))
        if not SUMMARY_TITLE_PATTERN.fullmatch(title):
            continue
        remainder = body[heading.end():]
        next_heading = HEADING_OPEN_PATTERN.search(remainder)
        return remainder[: next_heading.start()] if next_heading else remainder
    return None


def extract_summary_bullets(body: str) -> List[str]:
    """Collect the list items of the developer summary in source order.

    Placeholder items (leading underscore) and empty items are dropped. A page
    without the heading yields an empty list.
    """
    section = find_summary_section(body)
    if section is None:
        return []

    bullets: List[str] = []
    for item in LIST_ITEM_PATTERN.findall(section):
        text = collapse_whitespace(normalize_markup(item))
        if not text or text.startswith(PLACEHOLDER_PREFIX):
            continue
        bullets.append(text)
    logger.debug("Extracted %s summary bullets", len(bullets))
    return bullets
