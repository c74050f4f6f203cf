"""Document-related data models for the EUR-Lex Navigator."""

import re
from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class DivisionHeading:
    """
    Chapter or section heading an article belongs to.

    Both fields are empty when the article sits outside any such division.
    """
    number: str = ""  # "CHAPTER III", "SECTION 2"
    title: str = ""

    @property
    def is_empty(self) -> bool:
        """Check if no heading was recorded."""
        return not self.number and not self.title

    @property
    def label(self) -> str:
        """Human-readable "number — title" label, empty parts dropped."""
        return " — ".join(part for part in (self.number, self.title) if part).strip()


@dataclass(frozen=True)
class Division:
    """Chapter and section ancestry captured when an article is parsed."""
    chapter: DivisionHeading = field(default_factory=DivisionHeading)
    section: DivisionHeading = field(default_factory=DivisionHeading)


@dataclass(frozen=True)
class Article:
    """
    A numbered binding provision of a legal instrument.

    The number is kept as a string because some instruments use
    identifiers such as "4a".
    """
    number: str
    title: str = ""
    division: Division = field(default_factory=Division)
    body_html: str = ""


@dataclass(frozen=True)
class Recital:
    """A numbered preamble paragraph explaining legislative intent."""
    number: str
    text: str = ""
    html: str = ""

    @property
    def numeric_value(self) -> int:
        """Integer value of the number; 0 when it holds no digits."""
        return recital_sort_key(self.number)


@dataclass(frozen=True)
class Annex:
    """A supplementary appendix of a legal instrument."""
    id: str  # "III", "2", or the full title when no identifier is found
    title: str = ""
    html: str = ""


@dataclass(frozen=True)
class Document:
    """
    Normalized result of parsing one legal instrument.

    Articles and annexes are kept in parse order, recitals in ascending
    numeric order. A document is never mutated after parsing.
    """
    title: str = ""
    articles: Tuple[Article, ...] = ()
    recitals: Tuple[Recital, ...] = ()
    annexes: Tuple[Annex, ...] = ()
    source_url: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        """Check if parsing recognised no structural unit at all."""
        return not (self.articles or self.recitals or self.annexes)

    def get_article(self, number: str) -> Optional[Article]:
        """Get the first article with the given number."""
        for article in self.articles:
            if article.number == number:
                return article
        return None

    def get_recital(self, number: str) -> Optional[Recital]:
        """Get the first recital with the given number."""
        for recital in self.recitals:
            if recital.number == number:
                return recital
        return None

    def get_annex(self, annex_id: str) -> Optional[Annex]:
        """Get the first annex with the given identifier."""
        for annex in self.annexes:
            if annex.id == annex_id:
                return annex
        return None


def recital_sort_key(number: str) -> int:
    """Numeric value of a recital number; non-numeric numbers count as 0."""
    digits = re.sub(r"\D+", "", number or "")
    return int(digits) if digits else 0


def document_cache_key(document: Document) -> str:
    """
    Derive a content-based key for caller-side caching.

    Combines the title with article and recital counts, so re-parsing the
    same source yields the same key.
    """
    safe_title = re.sub(r"\s+", "_", document.title)[:50] or "untitled"
    return f"{safe_title}_{len(document.articles)}_{len(document.recitals)}"
