"""Abstract interfaces for the EUR-Lex Navigator."""

from .parser import IDocumentParser
from .relevance import IRelevanceEngine
from .search import ISearchEngine
from .summarizer import ISummarizer

__all__ = [
    "IDocumentParser",
    "IRelevanceEngine",
    "ISearchEngine",
    "ISummarizer",
]
