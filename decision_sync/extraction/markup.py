"""Tag stripping for the small subset of Confluence storage markup we read."""

from __future__ import annotations

import re

LINE_BREAK_PATTERN = re.compile(r"<br\b[^>]*>", re.IGNORECASE)
BLOCK_TAG_PATTERN = re.compile(r"</?(?:p|li|tr|th|td|h[1-6]|div|ul|ol)\b[^>]*>", re.IGNORECASE)
ANY_TAG_PATTERN = re.compile(r"<[^>]+>")
WHITESPACE_PATTERN = re.compile(r"\s+")

ENTITIES = {
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
    "&nbsp;": " ",
    "&mdash;": "—",
    "&ndash;": "–",
}
ENTITY_PATTERN = re.compile("|".join(re.escape(entity) for entity in ENTITIES))


def decode_entities(text: str) -> str:
    """Decode the fixed entity set in a single pass."""
    return ENTITY_PATTERN.sub(lambda match: ENTITIES[match.group(0)], text)


def normalize_markup(fragment: str) -> str:
    """Return the plain text of a markup fragment.

    Line breaks and block-level tags become newlines, every other tag is
    dropped, and entities are decoded. Unbalanced or malformed tags are
    stripped permissively. Line structure is preserved.
    """
    text = LINE_BREAK_PATTERN.sub("\n", fragment)
    text = BLOCK_TAG_PATTERN.sub("\n", text)
    text = ANY_TAG_PATTERN.sub("", text)
    return decode_entities(text)


def collapse_whitespace(text: str) -> str:
    return WHITESPACE_PATTERN.sub(" ", text).strip()
