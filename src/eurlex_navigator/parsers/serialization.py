"""Serialization and deserialization utilities for parsed documents."""

import json
import logging
from typing import Any, Optional

from ..models.document import (
    Annex,
    Article,
    Division,
    DivisionHeading,
    Document,
    Recital,
    recital_sort_key,
)

logger = logging.getLogger(__name__)

UNIT_ARRAY_KEYS = ("articles", "recitals", "annexes")


def is_prestructured(data: Any) -> bool:
    """Check if decoded JSON holds at least one of the unit arrays."""
    return isinstance(data, dict) and any(
        isinstance(data.get(key), list) for key in UNIT_ARRAY_KEYS
    )


class DocumentSerializer:
    """
    Handles serialization and deserialization of Document structures.

    The JSON layout is the pre-structured snapshot format accepted by
    ``parse_any``, so ``parse_any(serialize(doc)) == doc``.
    """

    @staticmethod
    def serialize(doc: Document) -> str:
        """
        Serialize a Document to JSON string.

        Args:
            doc: The Document to serialize.

        Returns:
            JSON string representation of the document.
        """
        return json.dumps(
            DocumentSerializer.to_dict(doc),
            ensure_ascii=False,
            indent=2
        )

    @staticmethod
    def deserialize(json_str: str) -> Document:
        """
        Deserialize a JSON string to a Document.

        Args:
            json_str: JSON string to deserialize.

        Returns:
            Document reconstructed from the JSON.

        Raises:
            ValueError: If the JSON is invalid or not a document snapshot.
        """
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON: {str(e)}")

        if not is_prestructured(data):
            raise ValueError(
                "Expected object with an 'articles', 'recitals' or 'annexes' array"
            )

        return DocumentSerializer.from_data(data)

    @staticmethod
    def to_dict(doc: Document) -> dict[str, Any]:
        """Convert Document to dictionary."""
        data: dict[str, Any] = {
            "title": doc.title,
            "articles": [DocumentSerializer._article_to_dict(a) for a in doc.articles],
            "recitals": [DocumentSerializer._recital_to_dict(r) for r in doc.recitals],
            "annexes": [DocumentSerializer._annex_to_dict(a) for a in doc.annexes],
        }
        if doc.source_url is not None:
            data["source_url"] = doc.source_url
        return data

    @staticmethod
    def from_data(data: dict[str, Any]) -> Document:
        """
        Build a Document from decoded pre-structured data.

        Lenient: entries that are not objects are skipped with a warning,
        missing fields fall back to defaults, and recitals are put in
        ascending numeric order.
        """
        articles = [
            DocumentSerializer._dict_to_article(entry, index)
            for index, entry in _objects(data.get("articles"), "article")
        ]
        recitals = [
            DocumentSerializer._dict_to_recital(entry, index)
            for index, entry in _objects(data.get("recitals"), "recital")
        ]
        annexes = [
            DocumentSerializer._dict_to_annex(entry, index)
            for index, entry in _objects(data.get("annexes"), "annex")
        ]
        recitals.sort(key=lambda r: recital_sort_key(r.number))

        source_url = data.get("source_url") or data.get("eurlex")

        return Document(
            title=_as_text(data.get("title")),
            articles=tuple(articles),
            recitals=tuple(recitals),
            annexes=tuple(annexes),
            source_url=str(source_url) if source_url else None,
        )

    @staticmethod
    def _article_to_dict(article: Article) -> dict[str, Any]:
        """Convert Article to dictionary."""
        return {
            "article_number": article.number,
            "article_title": article.title,
            "division": {
                "chapter": _heading_to_dict(article.division.chapter),
                "section": (
                    None if article.division.section.is_empty
                    else _heading_to_dict(article.division.section)
                ),
            },
            "article_html": article.body_html,
        }

    @staticmethod
    def _dict_to_article(data: dict[str, Any], index: int) -> Article:
        """Convert dictionary to Article."""
        division = data.get("division") or {}
        if not isinstance(division, dict):
            division = {}
        return Article(
            number=_as_text(data.get("article_number")) or str(index + 1),
            title=_as_text(data.get("article_title")),
            division=Division(
                chapter=_dict_to_heading(division.get("chapter")),
                section=_dict_to_heading(division.get("section")),
            ),
            body_html=_as_text(data.get("article_html")),
        )

    @staticmethod
    def _recital_to_dict(recital: Recital) -> dict[str, Any]:
        """Convert Recital to dictionary."""
        return {
            "recital_number": recital.number,
            "recital_text": recital.text,
            "recital_html": recital.html,
        }

    @staticmethod
    def _dict_to_recital(data: dict[str, Any], index: int) -> Recital:
        """Convert dictionary to Recital."""
        return Recital(
            number=_as_text(data.get("recital_number")) or str(index + 1),
            text=_as_text(data.get("recital_text")),
            html=_as_text(data.get("recital_html")),
        )

    @staticmethod
    def _annex_to_dict(annex: Annex) -> dict[str, Any]:
        """Convert Annex to dictionary."""
        return {
            "annex_id": annex.id,
            "annex_title": annex.title,
            "annex_html": annex.html,
        }

    @staticmethod
    def _dict_to_annex(data: dict[str, Any], index: int) -> Annex:
        """Convert dictionary to Annex."""
        title = _as_text(data.get("annex_title"))
        return Annex(
            id=_as_text(data.get("annex_id")) or title or str(index + 1),
            title=title,
            html=_as_text(data.get("annex_html")),
        )


def _objects(entries: Any, kind: str):
    if not isinstance(entries, list):
        return
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            logger.warning(f"Skipping {kind} entry {index}: expected object, got {type(entry).__name__}")
            continue
        yield index, entry


def _as_text(value: Optional[Any]) -> str:
    if value is None:
        return ""
    return str(value)


def _heading_to_dict(heading: DivisionHeading) -> dict[str, str]:
    return {"number": heading.number, "title": heading.title}


def _dict_to_heading(data: Any) -> DivisionHeading:
    if not isinstance(data, dict):
        return DivisionHeading()
    return DivisionHeading(
        number=_as_text(data.get("number")),
        title=_as_text(data.get("title")),
    )


def serialize_document(doc: Document) -> str:
    """Convenience function to serialize a Document."""
    return DocumentSerializer.serialize(doc)


def deserialize_document(json_str: str) -> Document:
    """Convenience function to deserialize a Document."""
    return DocumentSerializer.deserialize(json_str)
