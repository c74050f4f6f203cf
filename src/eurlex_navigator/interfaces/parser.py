"""Document parser interface for the EUR-Lex Navigator."""

from abc import ABC, abstractmethod
from typing import Any

from ..models.document import Document


class IDocumentParser(ABC):
    """
    Abstract interface for legal document parsing.

    Implementations turn raw markup or a pre-structured JSON snapshot
    into a normalized Document.
    """

    @abstractmethod
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
        pass

    @abstractmethod
    def serialize(self, doc: Document) -> str:
        """
        Serialize a Document to JSON string.

        Args:
            doc: The Document to serialize.

        Returns:
            JSON string representation of the document.
        """
        pass

    @abstractmethod
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
        pass
