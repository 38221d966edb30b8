"""Output renderers."""

from .markdown import render_decisions
from .step_summary import render_step_summary, write_step_summary

__all__ = ["render_decisions", "render_step_summary", "write_step_summary"]
