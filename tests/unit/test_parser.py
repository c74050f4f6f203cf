"""Unit tests for the EUR-Lex markup parser."""

import json

import pytest

from eurlex_navigator.models import Document, NodeKind
from eurlex_navigator.parsers import (
    DocumentParser,
    MarkupParser,
    ParseDiagnostics,
    classify_node,
    parse_any,
    sanitize_html,
    serialize_document,
)
from eurlex_navigator.parsers.html_utils import make_soup


OJ_MARKUP = """<?xml version="1.0" encoding="UTF-8"?>
<html><head><title>AI Act</title></head><body>
<p class="oj-doc-ti">REGULATION (EU) 2024/1689 OF THE EUROPEAN PARLIAMENT AND OF THE COUNCIL</p>
<p class="oj-doc-ti">of 13 June 2024</p>
<p class="oj-doc-ti">laying down harmonised rules on artificial intelligence (Artificial Intelligence Act)</p>
<div class="eli-subdivision" id="rct_2"><table><tr>
  <td><p class="oj-normal">(2)</p></td>
  <td><p class="oj-normal">This Regulation should be applied in accordance with Union values.</p></td>
</tr></table></div>
<div class="eli-subdivision" id="rct_1"><table><tr>
  <td>(1)</td>
  <td>Recognition of AI as...</td>
</tr></table></div>
<p class="oj-ti-section-1">CHAPTER I</p>
<p class="oj-ti-section-2">GENERAL PROVISIONS</p>
<div class="eli-subdivision" id="art_1">
  <p class="oj-ti-art">Article 1</p>
  <div class="eli-title"><p class="oj-sti-art">Subject matter</p></div>
  <p class="oj-normal">The purpose of this Regulation is to improve the internal market.</p>
</div>
<p class="oj-ti-section-1">SECTION 1</p>
<p class="oj-ti-section-2">Classification of AI systems as high-risk</p>
<div class="eli-subdivision" id="art_6">
  <p class="oj-ti-art">Article 6</p>
  <div class="eli-title"><p class="oj-sti-art">Classification rules for high-risk AI systems</p></div>
  <p class="oj-normal">An AI system shall be considered high-risk.</p>
</div>
<p class="oj-ti-section-1">CHAPTER II</p>
<p class="oj-ti-section-2">PROHIBITED AI PRACTICES</p>
<div class="eli-subdivision" id="art_5">
  <p class="oj-ti-art">Article 5</p>
  <div class="eli-title"><p class="oj-sti-art">Prohibited AI practices</p></div>
  <p class="oj-normal">The following AI practices shall be prohibited.</p>
</div>
<div class="eli-container" id="anx_III">
  <p class="oj-doc-ti">ANNEX III</p>
  <p class="oj-doc-ti">High-risk AI systems referred to in Article 6(2)</p>
  <p class="oj-normal">Biometrics, in so far as their use is permitted.</p>
</div>
</body></html>
"""

CONSOLIDATED_MARKUP = """<html><body>
<p class="title-doc-first">Regulation (EU) 2016/679 of the European Parliament and of the Council of 27 April 2016</p>
<p class="title-division-1">CHAPTER I</p>
<p class="title-division-2">General provisions</p>
<div class="eli-subdivision" id="art_1">
  <p class="title-article-norm">Article 1</p>
  <p class="stitle-article-norm">Subject-matter and objectives</p>
  <div class="norm">This Regulation lays down rules relating to the protection of natural persons.</div>
</div>
<div class="eli-subdivision" id="art_4a">
  <p class="title-article-norm">Article 4a</p>
  <div class="norm">Inserted provision.</div>
</div>
<div class="eli-container" id="anx_I">
  <p class="title-annex-1">ANNEX I</p>
  <p class="title-annex-2">List of supervisory authorities</p>
  <div class="norm">Body of the annex.</div>
</div>
</body></html>
"""


def _first(markup: str):
    return make_soup(markup).find(True)


class TestClassifyNode:
    """Tests for per-element structural classification."""

    def test_chapter_and_section_markers(self):
        """Test division markers are split by their text prefix."""
        assert classify_node(_first('<p class="oj-ti-section-1">CHAPTER III</p>')) == NodeKind.CHAPTER_HEADING
        assert classify_node(_first('<p class="title-division-1">Section 2</p>')) == NodeKind.SECTION_HEADING

    def test_unknown_division_marker_is_chapter(self):
        """Test a division marker that is neither chapter nor section opens a chapter."""
        assert classify_node(_first('<p class="title-division-1">TITLE II</p>')) == NodeKind.CHAPTER_HEADING

    def test_heading_title(self):
        """Test the second line of a two-line heading."""
        assert classify_node(_first('<p class="oj-ti-section-2">Definitions</p>')) == NodeKind.HEADING_TITLE

    def test_article_markers_of_both_dialects(self):
        """Test OJ and consolidated article number markers."""
        assert classify_node(_first('<p class="oj-ti-art">Article 5</p>')) == NodeKind.ARTICLE_MARKER
        assert classify_node(_first('<p class="title-article-norm">Article 5</p>')) == NodeKind.ARTICLE_MARKER

    def test_recital_block(self):
        """Test recital containers need both the class and the rct_ id."""
        assert classify_node(_first('<div class="eli-subdivision" id="rct_4"></div>')) == NodeKind.RECITAL_BLOCK
        assert classify_node(_first('<div class="eli-subdivision" id="art_4"></div>')) == NodeKind.OTHER

    def test_annex_heading_by_text_or_class(self):
        """Test annex headings are found by text pattern or by class."""
        assert classify_node(_first("<p>ANNEX IV</p>")) == NodeKind.ANNEX_HEADING
        assert classify_node(_first("<p>ANNEX</p>")) == NodeKind.ANNEX_HEADING
        assert classify_node(_first('<p class="title-annex-norm">Annex to the Regulation</p>')) == NodeKind.ANNEX_HEADING
        assert classify_node(_first("<p>Annex II</p>")) == NodeKind.ANNEX_HEADING

    def test_body_text_mentioning_annex_is_not_a_heading(self):
        """Test prose starting with 'Annex' is not taken for a heading."""
        assert classify_node(_first("<p>Annex III lists the high-risk systems.</p>")) == NodeKind.OTHER

    def test_unrelated_elements(self):
        """Test elements without a structural role."""
        assert classify_node(_first('<span class="oj-ti-art">Article 5</span>')) == NodeKind.OTHER
        assert classify_node(_first("<p>Plain paragraph</p>")) == NodeKind.OTHER


class TestOfficialJournalLayout:
    """Tests for the Official Journal markup dialect."""

    @pytest.fixture
    def document(self) -> Document:
        return parse_any(OJ_MARKUP)

    def test_title_with_short_name(self, document):
        """Test the short title is put in front of the main title."""
        assert document.title == "Artificial Intelligence Act — Regulation (EU) 2024/1689"

    def test_two_cell_recital(self, document):
        """Test number and content come from the two table cells."""
        first = document.recitals[0]
        assert first.number == "1"
        assert first.text == "Recognition of AI as..."
        assert first.html == "Recognition of AI as..."

    def test_recitals_sorted_numerically(self, document):
        """Test recitals are ordered by number, not by position."""
        assert [r.number for r in document.recitals] == ["1", "2"]
        assert document.recitals[1].text == (
            "This Regulation should be applied in accordance with Union values."
        )
        assert document.recitals[1].html.startswith('<p class="oj-normal">')

    def test_articles_in_document_order(self, document):
        """Test articles keep parse order."""
        assert [a.number for a in document.articles] == ["1", "6", "5"]

    def test_article_title_and_body(self, document):
        """Test the title is read from the article container."""
        article = document.get_article("1")
        assert article.title == "Subject matter"
        assert "improve the internal market" in article.body_html
        assert 'class="oj-ti-art"' in article.body_html

    def test_divisions_follow_headings(self, document):
        """Test chapter and section ancestry captured per article."""
        first = document.get_article("1").division
        assert first.chapter.number == "CHAPTER I"
        assert first.chapter.title == "GENERAL PROVISIONS"
        assert first.section.is_empty

        sixth = document.get_article("6").division
        assert sixth.chapter.number == "CHAPTER I"
        assert sixth.section.number == "SECTION 1"
        assert sixth.section.title == "Classification of AI systems as high-risk"

    def test_new_chapter_resets_section(self, document):
        """Test a chapter heading clears the current section."""
        fifth = document.get_article("5").division
        assert fifth.chapter.number == "CHAPTER II"
        assert fifth.chapter.title == "PROHIBITED AI PRACTICES"
        assert fifth.section.is_empty

    def test_annex(self, document):
        """Test annex id, combined title and cleaned body."""
        assert len(document.annexes) == 1
        annex = document.annexes[0]
        assert annex.id == "III"
        assert annex.title == "ANNEX III — High-risk AI systems referred to in Article 6(2)"
        assert ">ANNEX III<" not in annex.html
        assert '<p class="annex-subtitle">High-risk AI systems referred to in Article 6(2)</p>' in annex.html
        assert "Biometrics" in annex.html

    def test_parsing_is_repeatable(self):
        """Test parsing the same markup twice gives equal documents."""
        assert parse_any(OJ_MARKUP) == parse_any(OJ_MARKUP)

    def test_snapshot_of_parsed_document_is_idempotent(self, document):
        """Test the JSON snapshot of a parsed document parses back to it."""
        assert parse_any(serialize_document(document)) == document
        assert parse_any(serialize_document(parse_any(CONSOLIDATED_MARKUP))) == parse_any(CONSOLIDATED_MARKUP)


class TestConsolidatedLayout:
    """Tests for the consolidated markup dialect."""

    @pytest.fixture
    def document(self) -> Document:
        return parse_any(CONSOLIDATED_MARKUP)

    def test_title_without_short_name(self, document):
        """Test the main title is cut at the first ' of '."""
        assert document.title == "Regulation (EU) 2016/679"

    def test_articles(self, document):
        """Test article numbers, titles and divisions."""
        assert [a.number for a in document.articles] == ["1", "4a"]
        assert document.articles[0].title == "Subject-matter and objectives"
        assert document.articles[1].title == ""
        assert document.articles[1].division.chapter.title == "General provisions"

    def test_annex_subtitle_class(self, document):
        """Test consolidated annex headings and subtitles."""
        annex = document.get_annex("I")
        assert annex is not None
        assert annex.title == "ANNEX I — List of supervisory authorities"
        assert "Body of the annex." in annex.html

    def test_no_recitals(self, document):
        """Test consolidated texts without a preamble."""
        assert document.recitals == ()


class TestFallbacks:
    """Tests for degraded and unusual markup."""

    def test_recital_without_table(self):
        """Test a recital block without two cells uses its numbering marker."""
        markup = (
            '<div class="eli-subdivision" id="rct_7">'
            '<span class="oj-recital-num">(7)</span> Trustworthy AI matters.</div>'
        )
        document = parse_any(markup)
        assert len(document.recitals) == 1
        assert document.recitals[0].number == "7"
        assert "Trustworthy AI matters." in document.recitals[0].text

    def test_recital_number_falls_back_to_position(self):
        """Test recitals without any number get their sequential position."""
        markup = (
            '<div class="eli-subdivision" id="rct_a">First.</div>'
            '<div class="eli-subdivision" id="rct_b">Second.</div>'
        )
        document = parse_any(markup)
        assert [r.number for r in document.recitals] == ["1", "2"]
        assert [r.text for r in document.recitals] == ["First.", "Second."]

    def test_article_marker_without_number(self):
        """Test an unnumbered marker keeps its text as number."""
        document = parse_any('<div class="eli-subdivision"><p class="oj-ti-art">Final article</p></div>')
        assert document.articles[0].number == "Final article"

    def test_article_without_container(self):
        """Test the parent block is used when no subdivision wraps the article."""
        document = parse_any('<section><p class="oj-ti-art">Article 3</p><p>Text.</p></section>')
        article = document.articles[0]
        assert article.number == "3"
        assert "Text." in article.body_html
        assert article.division.chapter.is_empty

    def test_unclosed_markup(self):
        """Test unterminated elements still yield what can be recognised."""
        document = parse_any('<div class="eli-subdivision"><p class="oj-ti-art">Article 9</p><p>Risk management')
        assert [a.number for a in document.articles] == ["9"]

    def test_annex_without_identifier(self):
        """Test an annex without numeral uses its full title as id."""
        document = parse_any("<div><p>ANNEX</p><p>Content.</p></div>")
        annex = document.annexes[0]
        assert annex.id == "ANNEX"
        assert annex.title == "ANNEX"
        assert "Content." in annex.html

    def test_annex_cleaning_leaves_tree_untouched(self):
        """Test annex cleaning works on a snapshot of the container."""
        soup = make_soup('<div class="eli-container"><p>ANNEX II</p><p class="oj-doc-ti">Scope</p><p>Body.</p></div>')
        container = soup.find("div")
        heading, subtitle = container.find_all("p")[:2]
        before = str(soup)

        html = MarkupParser()._clean_annex_body(container, heading, subtitle)

        assert str(soup) == before
        assert html == '<p class="annex-subtitle">Scope</p><p>Body.</p>'

    def test_unrecognised_markup_gives_empty_document(self):
        """Test markup of an unknown layout degrades to an empty document."""
        document = parse_any("<html><body><p>Nothing to see.</p></body></html>")
        assert document == Document()
        assert document.is_empty

    def test_bodies_are_sanitized(self):
        """Test script elements and handlers are removed from stored markup."""
        markup = (
            '<div class="eli-subdivision"><p class="oj-ti-art">Article 2</p>'
            '<script>alert(1)</script>'
            '<p onclick="steal()">Scope</p>'
            '<a href="javascript:void(0)">link</a></div>'
        )
        body = parse_any(markup).articles[0].body_html
        assert "<script" not in body
        assert "onclick" not in body
        assert "javascript:" not in body
        assert "Scope" in body


class TestInputHandling:
    """Tests for input type handling and JSON detection."""

    @pytest.mark.parametrize("value", [None, "", "   \n\t"])
    def test_empty_input(self, value):
        """Test missing or blank input returns an empty document."""
        assert parse_any(value) == Document()

    def test_bytes_input(self):
        """Test bytes are decoded as UTF-8."""
        document = parse_any(OJ_MARKUP.encode("utf-8"))
        assert len(document.articles) == 3

    def test_bytes_with_byte_order_mark(self):
        """Test a UTF-8 BOM does not hide a JSON snapshot."""
        snapshot = {"title": "Data Act", "articles": [{"article_number": "1", "article_html": "<p>Rules.</p>"}]}
        document = parse_any(json.dumps(snapshot).encode("utf-8-sig"))

        assert document.title == "Data Act"
        assert [a.number for a in document.articles] == ["1"]

    def test_invalid_type_raises(self):
        """Test non-text arguments are programmer errors."""
        with pytest.raises(TypeError):
            parse_any(42)
        with pytest.raises(TypeError):
            parse_any(["<p>"])

    def test_prestructured_json(self):
        """Test a JSON snapshot is wrapped without markup parsing."""
        snapshot = {
            "title": "Data Act",
            "articles": [{
                "article_number": "1",
                "article_title": "Subject matter",
                "article_html": "<p>Rules on data.</p>",
                "division": {"chapter": {"number": "CHAPTER I", "title": "General"}, "section": None},
            }],
            "recitals": [
                {"recital_number": "3", "recital_text": "Third."},
                {"recital_number": "x", "recital_text": "Unnumbered."},
                {"recital_number": "1", "recital_text": "First."},
            ],
        }
        document = parse_any(json.dumps(snapshot))

        assert document.title == "Data Act"
        assert document.articles[0].division.chapter.title == "General"
        assert document.articles[0].division.section.is_empty
        assert [r.number for r in document.recitals] == ["x", "1", "3"]
        assert document.annexes == ()

    def test_json_without_unit_arrays_falls_through(self):
        """Test other JSON objects are treated as markup text."""
        assert parse_any('{"foo": [1, 2]}') == Document()

    def test_broken_json_falls_through(self):
        """Test malformed JSON silently falls back to markup parsing."""
        assert parse_any('{"articles": [') == Document()


class TestDiagnostics:
    """Tests for parse diagnostics."""

    def test_warnings_for_unrecognised_markup(self):
        """Test an empty result is reported as a warning."""
        document, diagnostics = DocumentParser().parse_with_diagnostics("<p>Nothing</p>", source="page.html")

        assert document.is_empty
        assert isinstance(diagnostics, ParseDiagnostics)
        assert not diagnostics.has_errors()
        assert diagnostics.get_summary()["warning_count"] >= 1
        assert diagnostics.get_summary()["source"] == "page.html"

    def test_positional_fallback_is_reported(self):
        """Test falling back to a positional recital number is recorded."""
        _, diagnostics = DocumentParser().parse_with_diagnostics(
            '<div class="eli-subdivision" id="rct_a">No number.</div>'
        )
        assert any("position 1" in w for w in diagnostics.warnings)

    def test_handler_failure_is_recorded(self):
        """Test a failing element is recorded and the scan continues."""
        parser = MarkupParser()

        def explode(el, state, diagnostics):
            raise KeyError("colspan")

        parser._handlers[NodeKind.RECITAL_BLOCK] = explode
        diagnostics = ParseDiagnostics(source="aia.xhtml")
        document = parser.parse(OJ_MARKUP, diagnostics)

        assert document.recitals == ()
        assert len(document.articles) > 0
        assert diagnostics.has_errors()
        error = diagnostics.errors[0]
        assert error.stage == "recital_block"
        assert "id=rct_" in error.element
        assert error.cause.startswith("KeyError")
        assert diagnostics.get_summary()["errors_by_stage"] == {"recital_block": len(diagnostics.errors)}


class TestSanitizeHtml:
    """Tests for markup sanitization."""

    def test_removes_active_content(self):
        """Test unsafe elements, handlers and javascript URLs are dropped."""
        cleaned = sanitize_html(
            '<p onmouseover="x()">Text</p><iframe src="https://example.org"></iframe>'
            '<style>p {}</style><img src="JavaScript:alert(1)">'
        )
        assert cleaned == "<p>Text</p><img/>"

    def test_scheme_with_embedded_whitespace(self):
        """Test javascript URLs split by tabs, newlines or control characters are dropped."""
        assert sanitize_html('<a href="java&#9;script:alert(1)">x</a>') == "<a>x</a>"
        assert sanitize_html('<a href=" &#10;JAVA\nSCRIPT:alert(1)">x</a>') == "<a>x</a>"
        assert sanitize_html('<img src="java&#1;script:alert(1)">') == "<img/>"

    def test_svg_animation_elements_removed(self):
        """Test animation elements that can rewrite links are dropped."""
        cleaned = sanitize_html(
            '<svg><a><animate attributeName="href" values="javascript:alert(1)"/>'
            '<set attributeName="href" to="javascript:alert(1)"/><text>x</text></a></svg>'
            '<base href="https://attacker.example/">'
        )
        assert "javascript" not in cleaned
        assert "<animate" not in cleaned
        assert "<set" not in cleaned
        assert "<base" not in cleaned
        assert "<text>x</text>" in cleaned

    def test_ordinary_links_kept(self):
        """Test http and fragment links survive."""
        markup = '<a href="https://eur-lex.europa.eu/eli/reg/2024/1689/oj">OJ</a><a href="#art_5">Article 5</a>'
        assert sanitize_html(markup) == markup

    def test_keeps_regular_markup(self):
        """Test ordinary markup passes unchanged."""
        assert sanitize_html('<p class="oj-normal">A <em>b</em></p>') == '<p class="oj-normal">A <em>b</em></p>'

    def test_empty(self):
        """Test empty input gives an empty string."""
        assert sanitize_html("") == ""
