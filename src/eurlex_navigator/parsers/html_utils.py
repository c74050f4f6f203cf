"""Markup helpers: text normalization, inner markup and sanitization."""

import re
import warnings
from typing import Iterable, Optional

from bs4 import BeautifulSoup, Tag, XMLParsedAsHTMLWarning

# EUR-Lex serves XHTML with an XML declaration; it is parsed as HTML on purpose.
warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)

HTML_PARSER = "html.parser"

_UNSAFE_TAGS = [
    "script", "style", "iframe", "object", "embed", "link", "meta", "base",
    "animate", "set", "animatemotion", "animatetransform",
]
_URL_ATTRIBUTES = ("href", "src", "action", "formaction", "xlink:href")
_UNSAFE_SCHEMES = ("javascript:", "vbscript:")
_URL_IGNORED_CHARS = re.compile(r"[\x00-\x20\x7f]+")
_WHITESPACE = re.compile(r"\s+")


def make_soup(markup: str) -> BeautifulSoup:
    """Parse markup into a BeautifulSoup tree."""
    return BeautifulSoup(markup, HTML_PARSER)


def normalize_text(text: Optional[str]) -> str:
    """Collapse whitespace (non-breaking spaces included) and trim."""
    if not text:
        return ""
    return _WHITESPACE.sub(" ", text.replace("\u00a0", " ")).strip()


def element_text(el: Optional[Tag]) -> str:
    """Whitespace-normalized text content of an element."""
    if el is None:
        return ""
    return normalize_text(el.get_text())


def class_set(el: Tag) -> set[str]:
    """Class names of an element as a set."""
    classes = el.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    return set(classes)


def has_any_class(el: Tag, classes: Iterable[str]) -> bool:
    """Check if the element carries at least one of the given classes."""
    return not class_set(el).isdisjoint(classes)


def sanitize_html(markup: str) -> str:
    """
    Remove active content from a markup fragment.

    Drops script-like elements (SVG animation elements included, since
    they can rewrite attributes), ``on*`` event handler attributes and
    URLs with an executable scheme. Works on an independent copy of the
    markup.

    Args:
        markup: HTML fragment.

    Returns:
        Sanitized HTML fragment, safe for direct rendering.
    """
    if not markup:
        return ""
    soup = make_soup(markup)
    for tag in soup.find_all(_UNSAFE_TAGS):
        tag.decompose()
    for tag in soup.find_all(True):
        for attr in list(tag.attrs):
            name = attr.lower()
            if name.startswith("on"):
                del tag.attrs[attr]
            elif name in _URL_ATTRIBUTES and _is_unsafe_url(tag.attrs[attr]):
                del tag.attrs[attr]
    return soup.decode()


def _is_unsafe_url(value) -> bool:
    # Browsers skip whitespace and control characters inside the scheme
    if isinstance(value, list):
        value = " ".join(value)
    compact = _URL_IGNORED_CHARS.sub("", str(value)).lower()
    return compact.startswith(_UNSAFE_SCHEMES)


def inner_html(el: Optional[Tag]) -> str:
    """Sanitized inner markup of an element."""
    if el is None:
        return ""
    return sanitize_html(el.decode_contents())


def strip_tags(html: Optional[str]) -> str:
    """Plain text of a markup fragment, whitespace-normalized."""
    if not html:
        return ""
    return normalize_text(make_soup(html).get_text(" "))
