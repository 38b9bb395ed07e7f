"""Orchestration package."""

from filter_builder.orchestrator.builder import FilterBuilder, draft_filter, reduce

__all__ = [
    "FilterBuilder",
    "draft_filter",
    "reduce",
]
