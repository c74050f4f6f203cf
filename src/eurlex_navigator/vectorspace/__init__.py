"""TF-IDF vector-space library shared by the relevance and search engines."""

from .tfidf import TfidfVector, compute_idf, compute_tfidf_vector, cosine_similarity
from .tokenizer import MIN_TOKEN_LENGTH, STOP_WORDS, tokenize

__all__ = [
    "TfidfVector",
    "compute_idf",
    "compute_tfidf_vector",
    "cosine_similarity",
    "MIN_TOKEN_LENGTH",
    "STOP_WORDS",
    "tokenize",
]
