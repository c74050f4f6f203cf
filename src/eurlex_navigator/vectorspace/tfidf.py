"""TF-IDF vectorization and cosine similarity over sparse term vectors.

Vectors are plain term -> weight mappings with a cached Euclidean norm.
All functions are pure, so several vector spaces (one per corpus) can
coexist and be built from worker threads.
"""

import math
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, Mapping, Sequence


@dataclass(frozen=True)
class TfidfVector:
    """Sparse TF-IDF vector with its precomputed magnitude."""
    weights: Mapping[str, float] = field(default_factory=dict)
    magnitude: float = 0.0

    def __len__(self) -> int:
        return len(self.weights)

    def __contains__(self, term: object) -> bool:
        return term in self.weights


def compute_idf(corpus: Iterable[Sequence[str]]) -> Dict[str, float]:
    """
    Compute inverse document frequency over a corpus of token lists.

    ``idf(t) = log10(N / df(t))`` where ``df`` counts the documents that
    contain the term at least once.

    Args:
        corpus: One token sequence per document.

    Returns:
        Mapping of term to IDF score. Empty for an empty corpus.
    """
    document_frequency: Counter = Counter()
    total = 0
    for tokens in corpus:
        total += 1
        document_frequency.update(set(tokens))

    return {
        term: math.log10(total / count)
        for term, count in document_frequency.items()
    }


def compute_tfidf_vector(tokens: Sequence[str], idf: Mapping[str, float]) -> TfidfVector:
    """
    Build a TF-IDF vector for a token list.

    Terms missing from ``idf`` contribute nothing.

    Args:
        tokens: Document tokens; raw counts are used as term frequency.
        idf: IDF mapping of the reference corpus.

    Returns:
        TfidfVector with weights and cached magnitude.
    """
    weights: Dict[str, float] = {}
    squared = 0.0
    for term, count in Counter(tokens).items():
        if term in idf:
            score = count * idf[term]
            weights[term] = score
            squared += score * score
    return TfidfVector(weights=weights, magnitude=math.sqrt(squared))


def cosine_similarity(vec_a: TfidfVector, vec_b: TfidfVector) -> float:
    """
    Compute cosine similarity between two TF-IDF vectors.

    Args:
        vec_a: First vector.
        vec_b: Second vector.

    Returns:
        Similarity in [0, 1]; exactly 0.0 when either magnitude is zero.
    """
    if vec_a.magnitude == 0 or vec_b.magnitude == 0:
        return 0.0

    smaller, larger = vec_a.weights, vec_b.weights
    if len(smaller) > len(larger):
        smaller, larger = larger, smaller

    dot_product = 0.0
    for term, weight in smaller.items():
        other = larger.get(term)
        if other is not None:
            dot_product += weight * other

    return dot_product / (vec_a.magnitude * vec_b.magnitude)
