"""Search engine interface for the EUR-Lex Navigator."""

from abc import ABC, abstractmethod
from typing import List, Sequence

from ..models.search import SearchIndex, SearchResult, SearchUnit


class ISearchEngine(ABC):
    """
    Abstract interface for free-text search over document units.

    Implementations build an immutable index once and answer queries
    against it.
    """

    @abstractmethod
    def build_index(self, units: Sequence[SearchUnit]) -> SearchIndex:
        """
        Build a query-ready index over articles, recitals and annexes.

        Args:
            units: Units to index, possibly from several laws.

        Returns:
            SearchIndex holding one vector per unit and the shared IDF.
        """
        pass

    @abstractmethod
    def search(self, query: str, index: SearchIndex) -> List[SearchResult]:
        """
        Rank indexed units against a free-text query.

        Args:
            query: User query.
            index: Index built by ``build_index``.

        Returns:
            Results sorted by descending score; empty for queries shorter
            than two characters.
        """
        pass
