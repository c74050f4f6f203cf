"""Document parsers for the EUR-Lex Navigator."""

from .base import DocumentParser, parse_any
from .markup_parser import MarkupParser, ScanState
from .classifier import classify_node
from .html_utils import sanitize_html, strip_tags
from .title import derive_title, format_main_title
from .serialization import DocumentSerializer, serialize_document, deserialize_document
from .exceptions import ParseDiagnostics, ParseError

__all__ = [
    "DocumentParser",
    "parse_any",
    "MarkupParser",
    "ScanState",
    "classify_node",
    "sanitize_html",
    "strip_tags",
    "derive_title",
    "format_main_title",
    "DocumentSerializer",
    "serialize_document",
    "deserialize_document",
    "ParseDiagnostics",
    "ParseError",
]
