"""Regex-based readers for Confluence storage markup."""

from .fields import extract_classification, extract_field, extract_status
from .markup import collapse_whitespace, normalize_markup
from .sections import extract_summary_bullets

__all__ = [
    "collapse_whitespace",
    "extract_classification",
    "extract_field",
    "extract_status",
    "extract_summary_bullets",
    "normalize_markup",
]
