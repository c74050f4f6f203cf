"""Base document parser implementation."""

import json
import logging
from typing import Any, Optional, Tuple

from ..interfaces.parser import IDocumentParser
from ..models.document import Document
from ..performance import timed_operation
from .exceptions import ParseDiagnostics
from .markup_parser import MarkupParser
from .serialization import DocumentSerializer, is_prestructured

logger = logging.getLogger(__name__)


class DocumentParser(IDocumentParser):
    """
    Main document parser with content-based input detection.

    A JSON snapshot holding ``articles``, ``recitals`` or ``annexes``
    arrays is wrapped directly; anything else is parsed as EUR-Lex markup.
    """

    def __init__(self):
        self._markup_parser = MarkupParser()
        self._serializer = DocumentSerializer()

    @timed_operation("parse_any")
    def parse_any(self, text: Any) -> Document:
        """
        Parse raw document text and return its structured representation.

        Args:
            text: HTML/XHTML markup or a JSON snapshot, as str or bytes.

        Returns:
            Document; empty when nothing could be recognised.

        Raises:
            TypeError: If ``text`` is not str, bytes or None.
        """
        document, _ = self.parse_with_diagnostics(text)
        return document

    def parse_with_diagnostics(
        self,
        text: Any,
        source: str = "<markup>",
    ) -> Tuple[Document, ParseDiagnostics]:
        """
        Parse raw document text and report what went wrong along the way.

        Args:
            text: HTML/XHTML markup or a JSON snapshot, as str or bytes.
            source: Name used for the input in log messages.

        Returns:
            Tuple of (Document, ParseDiagnostics).

        Raises:
            TypeError: If ``text`` is not str, bytes or None.
        """
        diagnostics = ParseDiagnostics(source=source)
        content = self._coerce_text(text)

        if not content or not content.strip():
            diagnostics.add_warning("Empty input")
            return Document(), diagnostics

        data = self._try_load_json(content)
        if data is not None:
            logger.debug(f"Using pre-structured JSON input for {source}")
            return self._serializer.from_data(data), diagnostics

        return self._markup_parser.parse(content, diagnostics), diagnostics

    def serialize(self, doc: Document) -> str:
        """
        Serialize a Document to JSON string.

        Args:
            doc: The Document to serialize.

        Returns:
            JSON string representation of the document.
        """
        return self._serializer.serialize(doc)

    def deserialize(self, json_str: str) -> Document:
        """
        Deserialize a JSON string to a Document.

        Args:
            json_str: JSON string to deserialize.

        Returns:
            Document reconstructed from the JSON.

        Raises:
            ValueError: If the JSON is invalid or malformed.
        """
        return self._serializer.deserialize(json_str)

    @staticmethod
    def _coerce_text(text: Any) -> str:
        if text is None:
            return ""
        if isinstance(text, (bytes, bytearray)):
            return bytes(text).decode("utf-8-sig", errors="replace")
        if isinstance(text, str):
            return text
        raise TypeError(
            f"Expected str, bytes or None, got {type(text).__name__}"
        )

    @staticmethod
    def _try_load_json(content: str) -> Optional[dict]:
        """Decode a pre-structured snapshot; None for anything else."""
        stripped = content.lstrip()
        if not stripped.startswith("{"):
            return None
        try:
            data = json.loads(stripped)
        except json.JSONDecodeError:
            return None
        return data if is_prestructured(data) else None


_default_parser = DocumentParser()


def parse_any(text: Any) -> Document:
    """Parse markup or a JSON snapshot with the shared stateless parser."""
    return _default_parser.parse_any(text)
