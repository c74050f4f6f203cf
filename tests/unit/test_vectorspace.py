"""Unit tests for the TF-IDF vector-space library."""

import math

import pytest

from eurlex_navigator.vectorspace import (
    STOP_WORDS,
    TfidfVector,
    compute_idf,
    compute_tfidf_vector,
    cosine_similarity,
    tokenize,
)


class TestTokenize:
    """Tests for tokenization."""

    def test_lowercases_and_strips_punctuation(self):
        """Test punctuation becomes whitespace and case is folded."""
        assert tokenize("Biometric-Data, Processing!") == ["biometric", "data", "processing"]

    def test_drops_short_tokens(self):
        """Test tokens of two characters or fewer are dropped."""
        assert tokenize("AI is ok but risk") == ["risk"]

    def test_drops_stop_words(self):
        """Test general and EU-legal stop words are dropped."""
        tokens = tokenize("Whereas the Commission shall adopt this Regulation pursuant to Article 5")
        assert tokens == ["adopt", "this"]

    def test_keeps_duplicates_in_order(self):
        """Test repeated words are kept for term frequency."""
        assert tokenize("data data controller") == ["data", "data", "controller"]

    def test_empty_input(self):
        """Test empty and None text give no tokens."""
        assert tokenize("") == []
        assert tokenize(None) == []

    def test_stop_words_include_legal_boilerplate(self):
        """Test the stop-word set covers legal boilerplate terms."""
        for word in ("regulation", "whereas", "pursuant", "paragraph", "article"):
            assert word in STOP_WORDS

    def test_before_and_here_are_stop_words(self):
        """Test 'before' and 'here' are filtered and their misspellings are not."""
        assert tokenize("before here processing") == ["processing"]
        assert tokenize("befolat heatere") == ["befolat", "heatere"]


class TestComputeIdf:
    """Tests for inverse document frequency."""

    def test_idf_uses_document_frequency(self):
        """Test df counts documents, not occurrences."""
        corpus = [["data", "data", "risk"], ["data"], ["model"], ["model"]]
        idf = compute_idf(corpus)

        assert idf["data"] == pytest.approx(math.log10(4 / 2))
        assert idf["risk"] == pytest.approx(math.log10(4 / 1))
        assert idf["model"] == pytest.approx(math.log10(4 / 2))

    def test_term_in_every_document_scores_zero(self):
        """Test a term present everywhere carries no weight."""
        idf = compute_idf([["data"], ["data", "risk"]])
        assert idf["data"] == 0.0

    def test_empty_corpus(self):
        """Test an empty corpus gives an empty mapping."""
        assert compute_idf([]) == {}


class TestComputeTfidfVector:
    """Tests for TF-IDF vectorization."""

    def test_weights_are_count_times_idf(self):
        """Test raw term counts are multiplied by idf."""
        idf = {"data": 0.5, "risk": 2.0}
        vector = compute_tfidf_vector(["data", "data", "risk"], idf)

        assert vector.weights == {"data": 1.0, "risk": 2.0}
        assert vector.magnitude == pytest.approx(math.sqrt(1.0 + 4.0))

    def test_terms_missing_from_idf_are_dropped(self):
        """Test unknown terms contribute nothing."""
        vector = compute_tfidf_vector(["unknown", "data"], {"data": 1.0})

        assert "unknown" not in vector
        assert len(vector) == 1

    def test_empty_tokens_give_zero_magnitude(self):
        """Test an empty token list yields a degenerate vector."""
        vector = compute_tfidf_vector([], {"data": 1.0})

        assert vector.magnitude == 0.0
        assert len(vector) == 0


class TestCosineSimilarity:
    """Tests for cosine similarity."""

    def test_identical_vectors(self):
        """Test a vector is fully similar to itself."""
        vector = compute_tfidf_vector(["data", "risk"], {"data": 1.0, "risk": 2.0})
        assert cosine_similarity(vector, vector) == pytest.approx(1.0)

    def test_disjoint_vectors(self):
        """Test vectors without shared terms score zero."""
        idf = {"data": 1.0, "risk": 1.0}
        a = compute_tfidf_vector(["data"], idf)
        b = compute_tfidf_vector(["risk"], idf)
        assert cosine_similarity(a, b) == 0.0

    def test_degenerate_vector_scores_exactly_zero(self):
        """Test zero-magnitude vectors give 0 instead of NaN."""
        empty = TfidfVector()
        other = compute_tfidf_vector(["data"], {"data": 1.0})

        assert cosine_similarity(empty, other) == 0.0
        assert cosine_similarity(other, empty) == 0.0
        assert cosine_similarity(empty, empty) == 0.0

    def test_symmetric_and_bounded(self):
        """Test similarity is symmetric and within [0, 1]."""
        idf = compute_idf([
            ["impact", "assessment", "data"],
            ["market", "competition"],
            ["data", "protection", "impact"],
        ])
        a = compute_tfidf_vector(["impact", "assessment", "data", "data"], idf)
        b = compute_tfidf_vector(["data", "protection", "impact", "market"], idf)

        score = cosine_similarity(a, b)
        assert score == pytest.approx(cosine_similarity(b, a))
        assert 0.0 <= score <= 1.0 + 1e-9
