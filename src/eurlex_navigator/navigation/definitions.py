"""Defined-term extraction and tooltip injection.

Definitions articles list entries such as "(1) 'AI system' means ...".
Occurrences of those terms elsewhere can be wrapped in a
``span.defined-term`` that carries the definition for hover display.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Sequence

from bs4 import BeautifulSoup, NavigableString, Tag

from ..models.document import Article
from ..parsers.classifier import ARTICLE_TITLE_CLASSES
from ..parsers.html_utils import class_set, element_text, make_soup

logger = logging.getLogger(__name__)

DEFINED_TERM_CLASS = "defined-term"
DEFINITIONS_TITLES = ("definition", "definitions")

_DEFINITION_ENTRY = re.compile(
    r"^(?:\(\w+\)\s*)?[‘'\"“](?P<term>[^’'\"”]{2,})[’'\"”]\s+means?\s+(?P<definition>.+)$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class Definition:
    """A defined term and its definition text."""
    term: str
    definition: str


def is_definitions_article(html: str) -> bool:
    """Check if article markup carries a "Definitions" title."""
    return bool(html) and _has_definitions_heading(make_soup(html))


def extract_definitions(article: Article) -> List[Definition]:
    """
    Read "'term' means ..." entries from a definitions article.

    Each table cell or paragraph is checked on its own, so numbered
    entries laid out as two-cell rows are found too. The first definition
    of a term wins.
    """
    if not article.body_html:
        return []

    soup = make_soup(article.body_html)
    found: List[Definition] = []
    seen = set()
    for el in soup.find_all(["p", "td"]):
        if el.name == "td" and el.find("p") is not None:
            continue
        match = _DEFINITION_ENTRY.match(element_text(el))
        if not match:
            continue
        term = match.group("term").strip()
        if term.lower() in seen:
            continue
        seen.add(term.lower())
        found.append(Definition(term=term, definition=match.group("definition").strip().rstrip(";")))

    logger.debug(f"Extracted {len(found)} definitions from article {article.number}")
    return found


def find_definitions(articles: Iterable[Article]) -> List[Definition]:
    """Collect definitions from every article titled "Definitions"."""
    definitions: List[Definition] = []
    for article in articles:
        if article.title.strip().lower() in DEFINITIONS_TITLES or is_definitions_article(article.body_html):
            definitions.extend(extract_definitions(article))
    return definitions


def inject_definition_tooltips(
    html: str,
    definitions: Sequence[Definition],
    skip_definitions_article: bool = False,
) -> str:
    """
    Wrap occurrences of defined terms in tooltip spans.

    Matching is whole-word and case-insensitive, longest terms first, and
    only touches text nodes. Text already inside a defined-term span is
    left alone.

    Args:
        html: Markup to annotate.
        definitions: Terms and their definitions.
        skip_definitions_article: Return the definitions article unchanged.

    Returns:
        Annotated markup; the input itself when nothing was wrapped.
    """
    if not html or not definitions:
        return html

    soup = make_soup(html)
    if skip_definitions_article and _has_definitions_heading(soup):
        return html

    wrapped = 0
    for entry in sorted(definitions, key=lambda d: len(d.term), reverse=True):
        if not entry.term:
            continue
        pattern = re.compile(rf"(?<![\w-]){re.escape(entry.term)}(?![\w-])", re.IGNORECASE)
        for text in soup.find_all(string=True):
            if type(text) is not NavigableString or _inside_defined_term(text):
                continue
            wrapped += _wrap_matches(soup, text, pattern, entry.definition)

    return soup.decode() if wrapped else html


def _wrap_matches(soup: BeautifulSoup, text: NavigableString, pattern: re.Pattern, definition: str) -> int:
    value = str(text)
    pieces: list = []
    position = 0
    for match in pattern.finditer(value):
        if match.start() > position:
            pieces.append(NavigableString(value[position:match.start()]))
        span = soup.new_tag("span", attrs={
            "class": DEFINED_TERM_CLASS,
            "data-definition": definition,
            "title": definition,
        })
        span.string = match.group(0)
        pieces.append(span)
        position = match.end()

    if not pieces:
        return 0
    if position < len(value):
        pieces.append(NavigableString(value[position:]))
    text.replace_with(*pieces)
    return sum(1 for piece in pieces if isinstance(piece, Tag))


def _inside_defined_term(text: NavigableString) -> bool:
    return any(
        parent.name == "span" and DEFINED_TERM_CLASS in class_set(parent)
        for parent in text.parents
    )


def _has_definitions_heading(soup: BeautifulSoup) -> bool:
    return any(
        element_text(title).lower() in DEFINITIONS_TITLES
        for title in soup.find_all("p", class_=list(ARTICLE_TITLE_CLASSES))
    )
