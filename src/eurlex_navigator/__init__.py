"""
EUR-Lex Navigator

Structural parsing of EU legislative texts, article-to-recital relevance
linking and free-text search over articles, recitals and annexes.
"""

__version__ = "0.1.0"

# Export main components
from .models.document import (
    Annex,
    Article,
    Division,
    DivisionHeading,
    Document,
    Recital,
    document_cache_key,
)
from .models.enums import NodeKind, UnitType
from .models.relevance import RelatedRecital, RelevanceMap
from .models.search import SearchIndex, SearchResult, SearchUnit
from .parsers import DocumentParser, DocumentSerializer, ParseDiagnostics, ParseError, parse_any
from .relevance import RelevanceEngine, build_relevance_map
from .search import SearchIndexEngine, build_search_index, collect_units, search
from .corpus import LoadedLaw, build_corpus_index, combine_documents, load_laws
from .navigation import build_table_of_contents, inject_definition_tooltips
from .pipeline import PipelineConfig, PipelineResult, ProcessingPipeline
from .config import (
    ConfigurationManager,
    ConfigurationError,
    LawEntry,
    RelevanceSettings,
    SearchSettings,
    SummarizerSettings,
    SystemConfiguration,
    ValidationResult,
)

__all__ = [
    "Annex",
    "Article",
    "Division",
    "DivisionHeading",
    "Document",
    "Recital",
    "document_cache_key",
    "NodeKind",
    "UnitType",
    "RelatedRecital",
    "RelevanceMap",
    "SearchIndex",
    "SearchResult",
    "SearchUnit",
    "DocumentParser",
    "DocumentSerializer",
    "ParseDiagnostics",
    "ParseError",
    "parse_any",
    "RelevanceEngine",
    "build_relevance_map",
    "SearchIndexEngine",
    "build_search_index",
    "collect_units",
    "search",
    "LoadedLaw",
    "build_corpus_index",
    "combine_documents",
    "load_laws",
    "build_table_of_contents",
    "inject_definition_tooltips",
    "PipelineConfig",
    "PipelineResult",
    "ProcessingPipeline",
    "ConfigurationManager",
    "ConfigurationError",
    "LawEntry",
    "RelevanceSettings",
    "SearchSettings",
    "SummarizerSettings",
    "SystemConfiguration",
    "ValidationResult",
]
