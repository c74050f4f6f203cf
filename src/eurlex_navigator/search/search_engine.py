"""Search Index Engine implementation for the EUR-Lex Navigator.

Builds a TF-IDF index over articles, recitals and annexes (of one or
several laws) and ranks them against free-text queries. Citation-style
queries such as "Article 5" or "12" are thin for TF-IDF, so exact id and
title matches earn fixed bonuses on top of the vector score.
"""

import logging
import re
from html import escape
from typing import List, Optional, Sequence

from ..config.models import SearchSettings
from ..interfaces.search import ISearchEngine
from ..models.document import Document
from ..models.enums import UnitType
from ..models.search import SearchDocument, SearchIndex, SearchResult, SearchUnit
from ..parsers.html_utils import strip_tags
from ..performance import timed_operation
from ..vectorspace import compute_idf, compute_tfidf_vector, cosine_similarity, tokenize

logger = logging.getLogger(__name__)

# Shorter queries never match anything.
MIN_QUERY_LENGTH = 2

_WHITESPACE = re.compile(r"\s+")


def collect_units(
    document: Document,
    law_key: Optional[str] = None,
    law_label: Optional[str] = None,
) -> List[SearchUnit]:
    """
    Turn a parsed document into index units, articles first.

    Args:
        document: Parsed document.
        law_key: Identifier of the law the document belongs to.
        law_label: Human-readable law name shown with results.

    Returns:
        One SearchUnit per article, recital and annex.
    """
    units = [
        SearchUnit(UnitType.ARTICLE, a.number, a.title, a.body_html, law_key, law_label)
        for a in document.articles
    ]
    units.extend(
        SearchUnit(UnitType.RECITAL, r.number, "", r.html or escape(r.text), law_key, law_label)
        for r in document.recitals
    )
    units.extend(
        SearchUnit(UnitType.ANNEX, a.id, a.title, a.html, law_key, law_label)
        for a in document.annexes
    )
    return units


def display_title(unit: SearchUnit) -> str:
    """Human-readable title of a unit, e.g. "Art. 5 - Scope" or "Recital 12"."""
    if unit.type is UnitType.ARTICLE:
        return f"Art. {unit.id} - {unit.title}" if unit.title else f"Art. {unit.id}"
    if unit.type is UnitType.RECITAL:
        return f"Recital {unit.id}"
    return unit.title or f"Annex {unit.id}"


class SearchIndexEngine(ISearchEngine):
    """
    Search engine over document units.

    Indexes are immutable values; build a new one whenever the set of
    loaded documents changes.
    """

    def __init__(self, settings: Optional[SearchSettings] = None):
        self._settings = settings or SearchSettings()

    @property
    def settings(self) -> SearchSettings:
        return self._settings

    @timed_operation("build_search_index")
    def build_index(self, units: Sequence[SearchUnit]) -> SearchIndex:
        """
        Build a query-ready index over articles, recitals and annexes.

        Args:
            units: Units to index, possibly from several laws.

        Returns:
            SearchIndex holding one vector per unit and the shared IDF.
        """
        prepared = []
        for unit in units:
            title = display_title(unit)
            plain_text = strip_tags(unit.html)
            tokens = tokenize(f"{plain_text} {title}")
            # Type keyword and id are kept even when the tokenizer would drop them
            tokens.extend([unit.type.value, unit.id.lower()])
            prepared.append((unit, title, plain_text, tokens))

        idf = compute_idf(tokens for _, _, _, tokens in prepared)

        documents = tuple(
            SearchDocument(
                type=unit.type,
                id=unit.id,
                title=title,
                plain_text=plain_text,
                preview_text=self._preview(plain_text),
                tokens=tuple(tokens),
                vector=compute_tfidf_vector(tokens, idf),
                law_key=unit.law_key,
                law_label=unit.law_label,
            )
            for unit, title, plain_text, tokens in prepared
        )

        logger.debug(f"Indexed {len(documents)} units, {len(idf)} terms")
        return SearchIndex(documents=documents, idf=idf)

    def search(self, query: str, index: SearchIndex) -> List[SearchResult]:
        """
        Rank indexed units against a free-text query.

        Queries without any meaningful token (stop words, numbers,
        punctuation) fall back to substring matching, where every hit
        scores 1. Id and title bonuses apply in both modes.

        Args:
            query: User query.
            index: Index built by ``build_index``.

        Returns:
            Results with score above the floor, best first; empty for
            queries shorter than two characters.
        """
        query = (query or "").strip()
        if len(query) < MIN_QUERY_LENGTH:
            return []

        lowered = query.lower()
        compact = _WHITESPACE.sub("", lowered)
        query_tokens = tokenize(query)

        if query_tokens:
            query_vector = compute_tfidf_vector(query_tokens, index.idf)

            def base_score(doc: SearchDocument) -> float:
                return cosine_similarity(query_vector, doc.vector) * self._settings.similarity_scale
        else:
            def base_score(doc: SearchDocument) -> float:
                hit = lowered in doc.plain_text.lower() or lowered in doc.title.lower()
                return 1.0 if hit else 0.0

        results = []
        for doc in index.documents:
            score = base_score(doc) + self._bonus(doc, lowered, compact)
            if score > self._settings.score_floor:
                results.append(SearchResult.from_document(doc, score))

        results.sort(key=lambda r: r.score, reverse=True)
        return results

    def _bonus(self, doc: SearchDocument, lowered: str, compact: str) -> float:
        bonus = 0.0
        doc_id = doc.id.lower()
        if lowered == doc_id:
            bonus += self._settings.id_match_bonus
        if doc.type in (UnitType.ARTICLE, UnitType.RECITAL) and compact == f"{doc.type.value}{doc_id}":
            bonus += self._settings.id_match_bonus
        if lowered in doc.title.lower():
            bonus += self._settings.title_match_bonus
        return bonus

    def _preview(self, plain_text: str) -> str:
        return plain_text[:self._settings.preview_length] + "..."


def build_search_index(units: Sequence[SearchUnit], settings: Optional[SearchSettings] = None) -> SearchIndex:
    """Convenience function to build a search index."""
    return SearchIndexEngine(settings).build_index(units)


def search(query: str, index: SearchIndex, settings: Optional[SearchSettings] = None) -> List[SearchResult]:
    """Convenience function to query a search index."""
    return SearchIndexEngine(settings).search(query, index)
