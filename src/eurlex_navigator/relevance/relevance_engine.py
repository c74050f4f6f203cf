"""Relevance Engine implementation for the EUR-Lex Navigator.

Links each recital to the article(s) it most likely explains, using
TF-IDF vectors over the article corpus and cosine similarity.
"""

import logging
from dataclasses import dataclass, replace
from typing import Dict, List, Mapping, Optional, Sequence

from ..config.models import RelevanceSettings
from ..interfaces.relevance import IRelevanceEngine
from ..models.document import Article, Recital
from ..models.relevance import RelatedRecital, RelevanceMap
from ..parsers.html_utils import strip_tags
from ..performance import timed_operation
from ..vectorspace import TfidfVector, compute_idf, compute_tfidf_vector, cosine_similarity, tokenize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _ArticleVector:
    number: str
    vector: TfidfVector


class RelevanceEngine(IRelevanceEngine):
    """
    Relevance engine for article-to-recital linking.

    The article corpus alone defines the vector space; recitals are
    projected into it, so terms that never occur in an article carry
    no weight.
    """

    def __init__(self, settings: Optional[RelevanceSettings] = None):
        """
        Initialize the relevance engine.

        Args:
            settings: Threshold, title weight, keyword count and mode.
        """
        self._settings = replace(settings) if settings else RelevanceSettings()
        self._check_threshold(self._settings.similarity_threshold)

    @property
    def settings(self) -> RelevanceSettings:
        return self._settings

    @timed_operation("build_relevance_map")
    def build_relevance_map(
        self,
        articles: Sequence[Article],
        recitals: Sequence[Recital],
        exclusive: Optional[bool] = None,
    ) -> RelevanceMap:
        """
        Link recitals to the articles they most likely explain.

        In exclusive mode a recital goes to its single best article; on
        equal scores the earlier article wins. In non-exclusive mode it goes
        to every article whose score clears the threshold. Every article
        number is a key of the result, possibly with an empty bucket.

        Args:
            articles: Articles of one document, in parse order.
            recitals: Recitals of the same document.
            exclusive: Override of ``settings.exclusive``.

        Returns:
            Mapping from article number to related recitals, best first.
        """
        if exclusive is None:
            exclusive = self._settings.exclusive

        if not articles:
            return {}

        buckets: Dict[str, List[RelatedRecital]] = {a.number: [] for a in articles}

        corpus = [self._article_tokens(article) for article in articles]
        idf = compute_idf(corpus)
        article_vectors = [
            _ArticleVector(article.number, compute_tfidf_vector(tokens, idf))
            for article, tokens in zip(articles, corpus)
        ]

        linked = 0
        for recital in recitals:
            recital_vector = compute_tfidf_vector(tokenize(recital.text), idf)
            if exclusive:
                matches = self._best_match(recital_vector, article_vectors)
            else:
                matches = self._all_matches(recital_vector, article_vectors)

            for article_vector, score in matches:
                buckets[article_vector.number].append(RelatedRecital(
                    recital=recital,
                    relevance_score=score,
                    keywords=self._shared_keywords(recital_vector, article_vector.vector, idf),
                ))
            if matches:
                linked += 1

        logger.debug(
            f"Linked {linked}/{len(recitals)} recitals to {len(articles)} articles "
            f"({'exclusive' if exclusive else 'non-exclusive'} mode)"
        )

        return {
            number: tuple(sorted(entries, key=lambda e: e.relevance_score, reverse=True))
            for number, entries in buckets.items()
        }

    def _article_tokens(self, article: Article) -> List[str]:
        title_tokens = tokenize(article.title)
        body_tokens = tokenize(strip_tags(article.body_html))
        return title_tokens * self._settings.title_weight + body_tokens

    def _best_match(
        self,
        recital_vector: TfidfVector,
        article_vectors: Sequence[_ArticleVector],
    ) -> List[tuple]:
        best_score = 0.0
        best: Optional[_ArticleVector] = None
        for article_vector in article_vectors:
            score = cosine_similarity(recital_vector, article_vector.vector)
            if score > best_score:
                best_score = score
                best = article_vector

        if best is not None and best_score > self._settings.similarity_threshold:
            return [(best, best_score)]
        return []

    def _all_matches(
        self,
        recital_vector: TfidfVector,
        article_vectors: Sequence[_ArticleVector],
    ) -> List[tuple]:
        matches = []
        for article_vector in article_vectors:
            score = cosine_similarity(recital_vector, article_vector.vector)
            if score > self._settings.similarity_threshold:
                matches.append((article_vector, score))
        return matches

    def _shared_keywords(
        self,
        recital_vector: TfidfVector,
        article_vector: TfidfVector,
        idf: Mapping[str, float],
    ) -> tuple:
        shared = [term for term in recital_vector.weights if term in article_vector]
        shared.sort(key=lambda term: idf[term], reverse=True)
        return tuple(shared[:self._settings.max_keywords])

    def get_similarity_threshold(self) -> float:
        """Get the minimum similarity a link must exceed."""
        return self._settings.similarity_threshold

    def set_similarity_threshold(self, threshold: float) -> None:
        """
        Set the minimum similarity a link must exceed.

        Raises:
            ValueError: If threshold is not between 0.0 and 1.0.
        """
        self._check_threshold(threshold)
        self._settings.similarity_threshold = threshold

    @staticmethod
    def _check_threshold(threshold: float) -> None:
        if not 0.0 <= threshold <= 1.0:
            raise ValueError("Threshold must be between 0.0 and 1.0")


def build_relevance_map(
    articles: Sequence[Article],
    recitals: Sequence[Recital],
    exclusive: Optional[bool] = None,
    settings: Optional[RelevanceSettings] = None,
) -> RelevanceMap:
    """Convenience function to link recitals to articles."""
    return RelevanceEngine(settings).build_relevance_map(articles, recitals, exclusive=exclusive)
