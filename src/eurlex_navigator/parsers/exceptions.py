"""Errors and diagnostics collected while scanning EUR-Lex markup."""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from bs4 import Tag

from .html_utils import class_set

logger = logging.getLogger(__name__)


def describe_element(el: Optional[Tag]) -> str:
    """Short ``<tag id=... class=...>`` label for messages."""
    if el is None:
        return ""
    parts = [el.name or "?"]
    if el.get("id"):
        parts.append(f"id={el.get('id')}")
    classes = class_set(el)
    if classes:
        parts.append(f"class={' '.join(sorted(classes))}")
    return "<" + " ".join(parts) + ">"


@dataclass
class ParseError(Exception):
    """
    A markup element the scan could not turn into a unit.

    Never raised out of the parser; the scan records it and moves on
    to the next element.

    Attributes:
        message: What went wrong.
        stage: Which part of the scan failed ("markup", "title" or a node kind).
        element: Label of the offending element, see ``describe_element``.
        cause: Text of the underlying exception, if any.
    """
    message: str
    stage: str = "markup"
    element: str = ""
    cause: Optional[str] = None

    def __post_init__(self):
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.element:
            return f"{self.message} at {self.element}"
        return self.message

    @classmethod
    def wrap(cls, stage: str, exc: Exception, el: Optional[Tag] = None) -> "ParseError":
        """Build an error for ``exc`` raised while handling ``el``."""
        return cls(
            message=f"Failed to handle {stage}: {exc}",
            stage=stage,
            element=describe_element(el),
            cause=f"{type(exc).__name__}: {exc}",
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stage": self.stage,
            "message": self.message,
            "element": self.element,
            "cause": self.cause,
        }


@dataclass
class ParseDiagnostics:
    """
    Problems met while parsing one source.

    Errors mean a unit or the title was lost; warnings mean a fallback
    value was used (a positional number, a heading kept as chapter).
    """

    source: str = "<markup>"
    errors: List[ParseError] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, error: ParseError) -> None:
        self.errors.append(error)
        logger.warning(f"{self.source}: {error}")

    def add_warning(self, message: str, location: Optional[str] = None) -> None:
        warning = f"{message} (at {location})" if location else message
        self.warnings.append(warning)
        logger.debug(f"{self.source}: {warning}")

    def has_errors(self) -> bool:
        return bool(self.errors)

    def get_summary(self) -> Dict[str, Any]:
        """Counts per failing stage plus the raw messages."""
        return {
            "source": self.source,
            "error_count": len(self.errors),
            "warning_count": len(self.warnings),
            "errors_by_stage": dict(Counter(e.stage for e in self.errors)),
            "errors": [e.to_dict() for e in self.errors],
            "warnings": list(self.warnings),
        }
