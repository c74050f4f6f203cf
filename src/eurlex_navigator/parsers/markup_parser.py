"""EUR-Lex markup (HTML/XHTML) parser implementation."""

import copy
import logging
import re
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, List, Optional

from bs4 import Tag

from ..models.document import (
    Annex,
    Article,
    Division,
    DivisionHeading,
    Document,
    Recital,
    recital_sort_key,
)
from ..models.enums import NodeKind, PendingHeader
from .classifier import (
    ANNEX_CONTAINER_CLASSES,
    ANNEX_HEADING_PATTERN,
    ANNEX_SUBTITLE_CLASSES,
    ARTICLE_CONTAINER_CLASS,
    ARTICLE_TITLE_CLASSES,
    RECITAL_NUMBER_CLASSES,
    classify_node,
)
from .exceptions import ParseDiagnostics, ParseError, describe_element
from .html_utils import class_set, element_text, has_any_class, inner_html, make_soup, sanitize_html
from .title import derive_title

logger = logging.getLogger(__name__)

ANNEX_SUBTITLE_STYLE_CLASS = "annex-subtitle"
ANNEX_ID_PREFIX = "anx_"


@dataclass
class ScanState:
    """
    Mutable cursor state of one document scan.

    A fresh state is created per parse, which keeps the parser re-entrant.
    """
    current_chapter: DivisionHeading = field(default_factory=DivisionHeading)
    current_section: DivisionHeading = field(default_factory=DivisionHeading)
    pending_header: Optional[PendingHeader] = None
    articles: List[Article] = field(default_factory=list)
    recitals: List[Recital] = field(default_factory=list)
    annexes: List[Annex] = field(default_factory=list)

    def division(self) -> Division:
        """Snapshot of the current chapter/section ancestry."""
        return Division(chapter=self.current_chapter, section=self.current_section)


class MarkupParser:
    """
    Parser for EUR-Lex legal documents in HTML/XHTML form.

    Handles the Official Journal layout (table-based recitals, ``oj-*``
    classes) and the consolidated layout (``title-*-norm`` classes) in a
    single forward scan in document order.
    """

    ARTICLE_NUMBER_PATTERN = re.compile(r"(?i:Article)\s+(\d+[a-z]*)")
    RECITAL_CELL_NUMBER_PATTERN = re.compile(r"\(?\s*(\d+)\s*\)?")
    ANNEX_ID_PATTERN = re.compile(r"^(?i:ANNEX)\s*((?:[IVXLC]+|\d+)[a-z]?)\b")

    def __init__(self):
        self._handlers: Dict[NodeKind, Callable[[Tag, ScanState, ParseDiagnostics], None]] = {
            NodeKind.CHAPTER_HEADING: self._handle_chapter_heading,
            NodeKind.SECTION_HEADING: self._handle_section_heading,
            NodeKind.HEADING_TITLE: self._handle_heading_title,
            NodeKind.RECITAL_BLOCK: self._handle_recital_block,
            NodeKind.ARTICLE_MARKER: self._handle_article_marker,
            NodeKind.ANNEX_HEADING: self._handle_annex_heading,
        }

    def parse(self, markup: str, diagnostics: Optional[ParseDiagnostics] = None) -> Document:
        """
        Parse legal markup into a Document.

        Never raises for malformed or unrecognised markup: problems are
        recorded in ``diagnostics`` and the result is partial or empty.

        Args:
            markup: Raw HTML/XHTML text.
            diagnostics: Optional collector for parse errors and warnings.

        Returns:
            Document with articles, recitals, annexes and title.
        """
        diagnostics = diagnostics or ParseDiagnostics()

        try:
            soup = make_soup(markup)
        except Exception as e:
            diagnostics.add_error(ParseError.wrap("markup", e))
            return Document()

        root: Tag = soup.body or soup
        state = ScanState()

        for el in root.find_all(True):
            kind = classify_node(el)
            handler = self._handlers.get(kind)
            if handler is None:
                continue
            try:
                handler(el, state, diagnostics)
            except Exception as e:
                diagnostics.add_error(ParseError.wrap(kind.value, e, el))

        try:
            title = derive_title(soup)
        except Exception as e:
            diagnostics.add_error(ParseError.wrap("title", e))
            title = ""

        recitals = sorted(state.recitals, key=lambda r: recital_sort_key(r.number))

        if not (state.articles or recitals or state.annexes):
            diagnostics.add_warning("No articles, recitals or annexes recognised")

        logger.debug(
            f"Parsed {len(state.articles)} articles, {len(recitals)} recitals, "
            f"{len(state.annexes)} annexes"
        )

        return Document(
            title=title,
            articles=tuple(state.articles),
            recitals=tuple(recitals),
            annexes=tuple(state.annexes),
        )

    # =========================================================================
    # Chapter / section headings
    # =========================================================================

    def _handle_chapter_heading(self, el: Tag, state: ScanState, diagnostics: ParseDiagnostics) -> None:
        text = element_text(el)
        if not text.upper().startswith("CHAPTER"):
            diagnostics.add_warning(f"Division heading treated as chapter: {text!r}", describe_element(el))
        state.current_chapter = DivisionHeading(number=text)
        state.current_section = DivisionHeading()
        state.pending_header = PendingHeader.CHAPTER

    def _handle_section_heading(self, el: Tag, state: ScanState, diagnostics: ParseDiagnostics) -> None:
        state.current_section = DivisionHeading(number=element_text(el))
        state.pending_header = PendingHeader.SECTION

    def _handle_heading_title(self, el: Tag, state: ScanState, diagnostics: ParseDiagnostics) -> None:
        text = element_text(el)
        if state.pending_header is PendingHeader.CHAPTER:
            state.current_chapter = replace(state.current_chapter, title=text)
        elif state.pending_header is PendingHeader.SECTION:
            state.current_section = replace(state.current_section, title=text)
        state.pending_header = None

    # =========================================================================
    # Recitals
    # =========================================================================

    def _handle_recital_block(self, el: Tag, state: ScanState, diagnostics: ParseDiagnostics) -> None:
        position = len(state.recitals) + 1
        cells = el.select("table td")

        if len(cells) >= 2:
            number = self._recital_number_from_cell(cells[0], position, diagnostics)
            text_cell = cells[1]
            state.recitals.append(Recital(
                number=number,
                text=element_text(text_cell),
                html=inner_html(text_cell),
            ))
            return

        # No two-cell layout: the whole block is one recital
        number_el = el.find(
            lambda t: has_any_class(t, RECITAL_NUMBER_CLASSES) or t.name == "strong"
        )
        number = re.sub(r"\D+", "", element_text(number_el))
        if not number:
            diagnostics.add_warning(f"Recital number missing, using position {position}", describe_element(el))
            number = str(position)
        state.recitals.append(Recital(
            number=number,
            text=element_text(el),
            html=inner_html(el),
        ))

    def _recital_number_from_cell(self, cell: Tag, position: int, diagnostics: ParseDiagnostics) -> str:
        text = element_text(cell)
        match = self.RECITAL_CELL_NUMBER_PATTERN.search(text)
        if match:
            return match.group(1)
        if text:
            return text
        diagnostics.add_warning(f"Recital number missing, using position {position}", describe_element(cell))
        return str(position)

    # =========================================================================
    # Articles
    # =========================================================================

    def _handle_article_marker(self, el: Tag, state: ScanState, diagnostics: ParseDiagnostics) -> None:
        container = _nearest_container(el, {ARTICLE_CONTAINER_CLASS}) or el.parent or el
        marker_text = element_text(el)

        match = self.ARTICLE_NUMBER_PATTERN.search(marker_text)
        if match:
            number = match.group(1)
        elif marker_text:
            number = marker_text
        else:
            number = str(len(state.articles) + 1)
            diagnostics.add_warning(f"Article number missing, using position {number}", describe_element(el))

        title_el = container.find(
            lambda t: t.name == "p" and has_any_class(t, ARTICLE_TITLE_CLASSES)
        )

        state.articles.append(Article(
            number=number,
            title=element_text(title_el),
            division=state.division(),
            body_html=inner_html(container),
        ))

    # =========================================================================
    # Annexes
    # =========================================================================

    def _handle_annex_heading(self, el: Tag, state: ScanState, diagnostics: ParseDiagnostics) -> None:
        heading = element_text(el)
        subtitle_el = self._find_annex_subtitle(el)
        subtitle = element_text(subtitle_el)
        title = f"{heading} — {subtitle}" if subtitle else heading

        container = _nearest_container(el, ANNEX_CONTAINER_CLASSES, id_prefix=ANNEX_ID_PREFIX)
        container = container or el.parent
        html = self._clean_annex_body(container, el, subtitle_el) if container is not None else ""

        match = self.ANNEX_ID_PATTERN.match(heading)
        annex_id = match.group(1) if match else title

        state.annexes.append(Annex(id=annex_id, title=title, html=html))

    def _find_annex_subtitle(self, heading: Tag) -> Optional[Tag]:
        """Locate the subtitle line that accompanies an annex heading."""
        sibling = heading.find_next_sibling(True)
        if sibling is not None:
            if sibling.name == "p" and has_any_class(sibling, ANNEX_SUBTITLE_CLASSES):
                return sibling
            if sibling.name == "div" and "eli-title" in class_set(sibling):
                return sibling.find("p")

        following = heading.find_next("p")
        if (
            following is not None
            and has_any_class(following, ANNEX_SUBTITLE_CLASSES)
            and ANNEX_HEADING_PATTERN.match(element_text(following)) is None
        ):
            return following
        return None

    def _clean_annex_body(self, container: Tag, heading: Tag, subtitle: Optional[Tag]) -> str:
        """
        Build the annex body markup without its heading.

        Works on a deep copy of the container so the parsed tree is never
        modified; the subtitle is re-tagged for styling.
        """
        originals = container.find_all(True)
        heading_index = _index_of(originals, heading)
        subtitle_index = _index_of(originals, subtitle) if subtitle is not None else None

        snapshot = copy.copy(container)
        copies = snapshot.find_all(True)

        if subtitle_index is not None:
            copies[subtitle_index].attrs["class"] = [ANNEX_SUBTITLE_STYLE_CLASS]
        if heading_index is not None:
            copies[heading_index].decompose()

        return sanitize_html(snapshot.decode_contents())


def _nearest_container(el: Tag, classes: set, id_prefix: Optional[str] = None) -> Optional[Tag]:
    """Nearest ancestor div carrying one of ``classes`` (or an id prefix)."""
    for parent in el.parents:
        if parent.name != "div":
            continue
        if has_any_class(parent, classes):
            return parent
        if id_prefix and (parent.get("id") or "").strip().startswith(id_prefix):
            return parent
    return None


def _index_of(tags: List[Tag], target: Optional[Tag]) -> Optional[int]:
    for index, tag in enumerate(tags):
        if tag is target:
            return index
    return None
