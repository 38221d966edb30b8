"""Confluence Decision Log to developer reference sync."""
