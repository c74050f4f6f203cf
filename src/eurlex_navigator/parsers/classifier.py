"""Structural classification of EUR-Lex markup elements.

Both markup dialects published by EUR-Lex are covered: the Official
Journal ("OJ") layout and the consolidated layout. Each element is
classified once, and the scanner dispatches on the resulting NodeKind.
"""

import re

from bs4 import Tag

from ..models.enums import NodeKind
from .html_utils import class_set, element_text

# Chapter / section number line, e.g. "CHAPTER III" or "SECTION 2"
DIVISION_HEADING_CLASSES = frozenset({"title-division-1", "oj-ti-section-1"})
# Line following a division heading, carrying its title
DIVISION_TITLE_CLASSES = frozenset({"title-division-2", "oj-ti-section-2"})

ARTICLE_MARKER_CLASSES = frozenset({"oj-ti-art", "title-article-norm"})
ARTICLE_TITLE_CLASSES = frozenset({"oj-sti-art", "stitle-article-norm"})

ANNEX_HEADING_CLASSES = frozenset({
    "oj-ti-annex", "oj-ti-annex-1", "title-annex-norm", "title-annex-1",
})
ANNEX_SUBTITLE_CLASSES = frozenset({
    "oj-doc-ti", "oj-ti-annex-2", "stitle-annex-norm", "title-annex-2",
})

DOCUMENT_TITLE_CLASSES = ("oj-doc-ti", "title-doc-first", "doc-ti")

RECITAL_NUMBER_CLASSES = frozenset({"recital-number", "oj-recital-num"})

ARTICLE_CONTAINER_CLASS = "eli-subdivision"
ANNEX_CONTAINER_CLASSES = frozenset({"eli-subdivision", "eli-container"})

RECITAL_ID_PREFIX = "rct_"

ANNEX_HEADING_PATTERN = re.compile(r"^ANNEX(?:\s+((?:[IVXLC]+|\d+)[a-z]?))?$", re.IGNORECASE)


def classify_node(el: Tag) -> NodeKind:
    """
    Decide the structural role of a markup element.

    Args:
        el: Element visited during the document scan.

    Returns:
        The NodeKind of the element; NodeKind.OTHER when it plays no role.
    """
    classes = class_set(el)

    if el.name == "p":
        if not classes.isdisjoint(DIVISION_HEADING_CLASSES):
            upper = element_text(el).upper()
            if upper.startswith("SECTION"):
                return NodeKind.SECTION_HEADING
            # CHAPTER and anything unrecognised open a chapter
            return NodeKind.CHAPTER_HEADING
        if not classes.isdisjoint(DIVISION_TITLE_CLASSES):
            return NodeKind.HEADING_TITLE
        if not classes.isdisjoint(ARTICLE_MARKER_CLASSES):
            return NodeKind.ARTICLE_MARKER
        if is_annex_heading(el, classes):
            return NodeKind.ANNEX_HEADING
        return NodeKind.OTHER

    if el.name == "div" and is_recital_block(el, classes):
        return NodeKind.RECITAL_BLOCK

    return NodeKind.OTHER


def is_recital_block(el: Tag, classes: set[str]) -> bool:
    """Check for the OJ recital container (div.eli-subdivision#rct_*)."""
    element_id = el.get("id") or ""
    return ARTICLE_CONTAINER_CLASS in classes and element_id.startswith(RECITAL_ID_PREFIX)


def is_annex_heading(el: Tag, classes: set[str]) -> bool:
    """Check for an annex heading by class or by "ANNEX <n>" text."""
    if not classes.isdisjoint(ANNEX_HEADING_CLASSES):
        return True
    return ANNEX_HEADING_PATTERN.match(element_text(el)) is not None
