"""Relevance-related data models for the EUR-Lex Navigator."""

from dataclasses import dataclass
from typing import Any, Dict, Tuple

from .document import Recital


@dataclass(frozen=True)
class RelatedRecital:
    """A recital linked to an article, with its similarity score."""
    recital: Recital
    relevance_score: float
    keywords: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the flat record shape used by callers for caching."""
        return {
            "recital_number": self.recital.number,
            "recital_text": self.recital.text,
            "recital_html": self.recital.html,
            "relevanceScore": self.relevance_score,
            "keywords": list(self.keywords),
        }


# Article number -> related recitals, descending by relevance score.
RelevanceMap = Dict[str, Tuple[RelatedRecital, ...]]


def relevance_map_to_dict(relevance_map: RelevanceMap) -> Dict[str, list]:
    """Convert a relevance map to plain JSON-serializable data."""
    return {
        number: [entry.to_dict() for entry in entries]
        for number, entries in relevance_map.items()
    }
