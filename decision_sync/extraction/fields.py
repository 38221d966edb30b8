"""Read label/value pairs from the "At a Glance" table of a decision page."""

from __future__ import annotations

import re
from typing import Iterator, List, Tuple

from decision_sync.extraction.markup import collapse_whitespace, normalize_markup
from decision_sync.models.decision import Classification

ROW_PATTERN = re.compile(r"<tr\b[^>]*>(.*?)</tr>", re.IGNORECASE | re.DOTALL)
CELL_PATTERN = re.compile(r"<t[hd]\b[^>]*>(.*?)</t[hd]>", re.IGNORECASE | re.DOTALL)

STATUS_LABEL = "Status"
CLASSIFICATION_LABEL = "Classification"

# Checked in order; the first keyword contained in the raw value wins.
CLASSIFICATION_KEYWORDS: Tuple[Classification, ...] = (
    Classification.STANDARD,
    Classification.ARCHITECTURAL,
    Classification.STRATEGIC,
)


def iter_table_rows(body: str) -> Iterator[List[str]]:
    """Yield the raw cell markup of every table row, header or data cells alike."""
    for row in ROW_PATTERN.finditer(body):
        yield CELL_PATTERN.findall(row.group(1))


def extract_field(body: str, label: str) -> str:
    """Return the value cell next to ``label``, or an empty string.

    Labels are compared case-insensitively after tag stripping. Rows with
    fewer than two cells are ignored and the first matching row wins.
    """
    wanted = label.strip().lower()
    for cells in iter_table_rows(body):
        if len(cells) < 2:
            continue
        if collapse_whitespace(normalize_markup(cells[0])).lower() == wanted:
            return normalize_markup(cells[1]).strip()
    return ""


def extract_status(body: str) -> str:
    return extract_field(body, STATUS_LABEL)


def extract_classification(body: str) -> Classification:
    raw = extract_field(body, CLASSIFICATION_LABEL)
    for classification in CLASSIFICATION_KEYWORDS:
        if classification.value in raw:
            return classification
    return Classification.UNKNOWN
