"""Reading aids: table of contents and defined-term tooltips."""

from .definitions import (
    Definition,
    extract_definitions,
    find_definitions,
    inject_definition_tooltips,
    is_definitions_article,
)
from .toc import TableOfContents, TocChapter, TocSection, build_table_of_contents

__all__ = [
    "Definition",
    "extract_definitions",
    "find_definitions",
    "inject_definition_tooltips",
    "is_definitions_article",
    "TableOfContents",
    "TocChapter",
    "TocSection",
    "build_table_of_contents",
]
