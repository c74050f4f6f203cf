"""Document title derivation.

Legal titles follow the pattern "SHORT NAME of DATE ... concerning TOPIC
(Short Title)". The main title keeps the part before the first " of ",
and a trailing parenthesized short title, when present, is put in front.
"""

import re
from typing import Iterable, Optional

from bs4 import Tag

from .classifier import DOCUMENT_TITLE_CLASSES
from .html_utils import element_text, has_any_class, normalize_text

ACRONYMS = ("EU", "EC", "EEC", "EURATOM")

_WORD_START = re.compile(r"\b\w")
_ACRONYM = re.compile(r"\b(" + "|".join(ACRONYMS) + r")\b", re.IGNORECASE)
_PARENTHESIZED = re.compile(r"\(([^()]*)\)")
_DOCUMENT_NUMBER = re.compile(
    r"^(?:(?:EU|EC|EEC|Euratom|CFSP|JHA)(?:\s*[,/]\s*|\s+)?)+$"
    r"|^(?:No\.?\s*)?[\d\s/.,\-]+$",
    re.IGNORECASE,
)
_BOILERPLATE = ("text with eea relevance", "recast", "codification")


def is_title_marker(el: Tag) -> bool:
    """Check if an element carries one of the document title classes."""
    return el.name is not None and has_any_class(el, DOCUMENT_TITLE_CLASSES)


def format_main_title(text: str) -> str:
    """
    Normalize a raw title line into a short main title.

    Args:
        text: Raw title text, e.g. "REGULATION (EU) 2024/1689 OF THE ...".

    Returns:
        Title-cased text cut at the first " of ", acronyms upper-cased.
    """
    lowered = normalize_text(text).lower()
    titled = _WORD_START.sub(lambda m: m.group(0).upper(), lowered)
    cut = titled.lower().find(" of ")
    if cut >= 0:
        titled = titled[:cut]
    return _ACRONYM.sub(lambda m: m.group(1).upper(), titled).strip()


def find_short_title(texts: Iterable[str]) -> Optional[str]:
    """
    Find a parenthesized short title such as "(Artificial Intelligence Act)".

    Boilerplate remarks and bare document-number references like "(EU)"
    are skipped. Within one text, the last parenthetical wins.
    """
    for text in texts:
        for candidate in reversed(_PARENTHESIZED.findall(text)):
            name = normalize_text(candidate).strip("‘’'\"“” ")
            if _is_short_title(name):
                return name
    return None


def _is_short_title(name: str) -> bool:
    if not name or not name[0].isupper():
        return False
    lowered = name.lower()
    if any(phrase in lowered for phrase in _BOILERPLATE):
        return False
    return _DOCUMENT_NUMBER.match(name) is None


def derive_title(root: Tag) -> str:
    """
    Derive the best-effort document title from parsed markup.

    Args:
        root: Root of the parsed document tree.

    Returns:
        "{short title} — {main title}", the main title alone, or "".
    """
    markers = root.find_all(is_title_marker)
    if not markers:
        return ""

    main_title = format_main_title(element_text(markers[0]))
    short_title = find_short_title(element_text(el) for el in markers)

    if not short_title or short_title.lower() == main_title.lower():
        return main_title
    if not main_title:
        return short_title
    return f"{short_title} — {main_title}"
