"""Relevance engine interface for the EUR-Lex Navigator."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from ..models.document import Article, Recital
from ..models.relevance import RelevanceMap


class IRelevanceEngine(ABC):
    """
    Abstract interface for article-to-recital linking.

    Implementations score every recital against every article and keep
    the links that clear the similarity threshold.
    """

    @abstractmethod
    def build_relevance_map(
        self,
        articles: Sequence[Article],
        recitals: Sequence[Recital],
        exclusive: Optional[bool] = None,
    ) -> RelevanceMap:
        """
        Link recitals to the articles they most likely explain.

        Args:
            articles: Articles of one document, in parse order.
            recitals: Recitals of the same document.
            exclusive: Assign each recital to its single best article
                (default) or to every article above the threshold.

        Returns:
            Mapping from article number to related recitals, best first.
        """
        pass

    @abstractmethod
    def get_similarity_threshold(self) -> float:
        """
        Get the minimum similarity a link must exceed.

        Returns:
            The current threshold (0.0 to 1.0).
        """
        pass

    @abstractmethod
    def set_similarity_threshold(self, threshold: float) -> None:
        """
        Set the minimum similarity a link must exceed.

        Args:
            threshold: The new threshold (0.0 to 1.0).

        Raises:
            ValueError: If threshold is not between 0.0 and 1.0.
        """
        pass
