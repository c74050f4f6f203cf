"""Unit tests for document title derivation."""

from eurlex_navigator.parsers import derive_title, format_main_title
from eurlex_navigator.parsers.html_utils import make_soup
from eurlex_navigator.parsers.title import find_short_title


class TestFormatMainTitle:
    """Tests for main title normalization."""

    def test_cut_at_first_of(self):
        """Test the title keeps the part before the first ' of '."""
        assert format_main_title(
            "REGULATION (EU) 2024/1689 OF THE EUROPEAN PARLIAMENT AND OF THE COUNCIL"
        ) == "Regulation (EU) 2024/1689"

    def test_acronyms_upper_cased(self):
        """Test known acronyms survive title casing."""
        assert format_main_title("DIRECTIVE (EC) NO 95/46") == "Directive (EC) No 95/46"
        assert format_main_title("Council Decision (Euratom) 2020/1") == "Council Decision (EURATOM) 2020/1"

    def test_whitespace_normalized(self):
        """Test runs of whitespace collapse to single spaces."""
        assert format_main_title("  regulation\n (eu)   2022/868 ") == "Regulation (EU) 2022/868"

    def test_empty(self):
        """Test an empty line gives an empty title."""
        assert format_main_title("") == ""


class TestFindShortTitle:
    """Tests for short title detection."""

    def test_document_number_references_skipped(self):
        """Test parenthesized document references are not short titles."""
        assert find_short_title(["REGULATION (EU) 2016/679", "(Text with EEA relevance)"]) is None

    def test_last_parenthetical_wins(self):
        """Test the trailing parenthetical of a line is preferred."""
        text = "amending Regulations (EC) No 300/2008 (Artificial Intelligence Act)"
        assert find_short_title([text]) == "Artificial Intelligence Act"

    def test_lowercase_remark_skipped(self):
        """Test lowercase remarks are not taken for names."""
        assert find_short_title(["rules (see below)"]) is None


class TestDeriveTitle:
    """Tests for deriving a document title from markup."""

    def test_short_and_main_title(self):
        """Test the AI Act title with its short name in front."""
        soup = make_soup(
            '<p class="oj-doc-ti">REGULATION (EU) 2024/1689 OF THE EUROPEAN PARLIAMENT AND OF THE COUNCIL</p>'
            '<p class="oj-doc-ti">of 13 June 2024</p>'
            '<p class="oj-doc-ti">laying down harmonised rules on artificial intelligence '
            'and amending Regulations (EC) No 300/2008 (Artificial Intelligence Act)</p>'
            '<p class="oj-doc-ti">(Text with EEA relevance)</p>'
        )
        assert derive_title(soup) == "Artificial Intelligence Act — Regulation (EU) 2024/1689"

    def test_main_title_only(self):
        """Test a document without short name keeps the main title."""
        soup = make_soup('<p class="title-doc-first">Directive (EU) 2019/790 of the European Parliament</p>')
        assert derive_title(soup) == "Directive (EU) 2019/790"

    def test_no_title_markers(self):
        """Test a document without title markers gives an empty title."""
        assert derive_title(make_soup("<p>Article 1</p>")) == ""

    def test_short_title_equal_to_main_title(self):
        """Test the short title is not repeated when it equals the main title."""
        soup = make_soup('<p class="doc-ti">Data Act</p><p class="doc-ti">(Data Act)</p>')
        assert derive_title(soup) == "Data Act"
