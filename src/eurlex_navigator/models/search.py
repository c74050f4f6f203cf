"""Search-related data models for the EUR-Lex Navigator."""

from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

from ..vectorspace.tfidf import TfidfVector
from .enums import UnitType


@dataclass(frozen=True)
class SearchUnit:
    """
    A document unit handed to the index builder.

    Units may come from several laws; ``law_key`` and ``law_label`` tell
    them apart.
    """
    type: UnitType
    id: str
    title: str
    html: str
    law_key: Optional[str] = None
    law_label: Optional[str] = None


@dataclass(frozen=True)
class SearchDocument:
    """Per-unit representation stored in a search index."""
    type: UnitType
    id: str
    title: str
    plain_text: str
    preview_text: str
    tokens: Tuple[str, ...]
    vector: TfidfVector
    law_key: Optional[str] = None
    law_label: Optional[str] = None


@dataclass(frozen=True)
class SearchIndex:
    """
    Query-ready index over a fixed set of units.

    Must be rebuilt whenever the underlying set of units changes.
    """
    documents: Tuple[SearchDocument, ...] = ()
    idf: Mapping[str, float] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.documents)


@dataclass(frozen=True)
class SearchResult:
    """A ranked search hit, without the internal vector payload."""
    type: UnitType
    id: str
    title: str
    plain_text: str
    preview_text: str
    score: float
    law_key: Optional[str] = None
    law_label: Optional[str] = None

    @classmethod
    def from_document(cls, doc: SearchDocument, score: float) -> "SearchResult":
        return cls(
            type=doc.type,
            id=doc.id,
            title=doc.title,
            plain_text=doc.plain_text,
            preview_text=doc.preview_text,
            score=score,
            law_key=doc.law_key,
            law_label=doc.law_label,
        )
