"""Enumerations for the EUR-Lex Navigator."""

from enum import Enum


class UnitType(Enum):
    """Kinds of document units that can be indexed and searched."""
    ARTICLE = "article"
    RECITAL = "recital"
    ANNEX = "annex"


class NodeKind(Enum):
    """Structural role of a markup element, decided once per element."""
    CHAPTER_HEADING = "chapter_heading"
    SECTION_HEADING = "section_heading"
    HEADING_TITLE = "heading_title"
    RECITAL_BLOCK = "recital_block"
    ARTICLE_MARKER = "article_marker"
    ANNEX_HEADING = "annex_heading"
    OTHER = "other"


class PendingHeader(Enum):
    """Heading whose title line is still expected during a scan."""
    CHAPTER = "chapter"
    SECTION = "section"
