"""Confluence REST integration."""

from .client import (
    ConfluenceClient,
    ConfluenceError,
    DiscoveryError,
    PageFetchError,
    build_credential,
)

__all__ = [
    "ConfluenceClient",
    "ConfluenceError",
    "DiscoveryError",
    "PageFetchError",
    "build_credential",
]
