"""Tokenization for EU legal text (English)."""

import re
from typing import List

# General English stop words plus EU-legal boilerplate. Changing this set
# changes relevance and search rankings.
STOP_WORDS = frozenset([
    "a", "an", "the", "and", "or", "but", "if", "then", "else", "when", "at",
    "by", "for", "with", "about", "against", "between", "into", "through",
    "during", "before", "after", "above", "below", "to", "from", "up", "down",
    "in", "out", "on", "off", "over", "under", "again", "further",
    "once", "here", "there", "where", "why", "how", "all", "any",
    "both", "each", "few", "more", "most", "other", "some", "such", "no", "nor",
    "not", "only", "own", "same", "so", "than", "too", "very", "can", "will",
    "just", "don", "should", "now",
    "union", "member", "states", "commission", "regulation", "directive",
    "decision", "article", "paragraph", "eu", "european", "law", "act",
    "provisions", "measures", "shall", "may", "accordance", "order", "laying",
    "establishing", "regarding", "whereas", "pursuant",
])

MIN_TOKEN_LENGTH = 3

_NON_WORD = re.compile(r"[^\w\s]")


def tokenize(text: str) -> List[str]:
    """
    Split text into lowercase word tokens.

    Punctuation becomes whitespace; tokens shorter than three characters
    and stop words are dropped.

    Args:
        text: Plain text to tokenize.

    Returns:
        Tokens in order of appearance, duplicates kept.
    """
    if not text:
        return []
    cleaned = _NON_WORD.sub(" ", text.lower())
    return [
        word for word in cleaned.split()
        if len(word) >= MIN_TOKEN_LENGTH and word not in STOP_WORDS
    ]
