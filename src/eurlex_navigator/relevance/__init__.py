"""Article-to-recital relevance linking."""

from .relevance_engine import RelevanceEngine, build_relevance_map

__all__ = [
    "RelevanceEngine",
    "build_relevance_map",
]
