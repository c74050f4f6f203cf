"""Free-text search over articles, recitals and annexes."""

from .search_engine import (
    MIN_QUERY_LENGTH,
    SearchIndexEngine,
    build_search_index,
    collect_units,
    display_title,
    search,
)

__all__ = [
    "MIN_QUERY_LENGTH",
    "SearchIndexEngine",
    "build_search_index",
    "collect_units",
    "display_title",
    "search",
]
