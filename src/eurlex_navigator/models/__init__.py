"""Data models and enums for the EUR-Lex Navigator."""

from .enums import NodeKind, PendingHeader, UnitType
from .document import (
    Annex,
    Article,
    Division,
    DivisionHeading,
    Document,
    Recital,
    document_cache_key,
    recital_sort_key,
)
from .relevance import RelatedRecital, RelevanceMap, relevance_map_to_dict
from .search import SearchDocument, SearchIndex, SearchResult, SearchUnit

__all__ = [
    # Enums
    "NodeKind",
    "PendingHeader",
    "UnitType",
    # Document models
    "Annex",
    "Article",
    "Division",
    "DivisionHeading",
    "Document",
    "Recital",
    "document_cache_key",
    "recital_sort_key",
    # Relevance models
    "RelatedRecital",
    "RelevanceMap",
    "relevance_map_to_dict",
    # Search models
    "SearchDocument",
    "SearchIndex",
    "SearchResult",
    "SearchUnit",
]
