"""Multi-law corpus: loading several laws and searching across them."""

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Union

from .config.models import LawEntry, SearchSettings
from .interfaces.parser import IDocumentParser
from .models.document import Document
from .models.enums import UnitType
from .models.search import SearchIndex, SearchUnit
from .parsers.base import DocumentParser
from .search.search_engine import SearchIndexEngine, collect_units

logger = logging.getLogger(__name__)

LawReader = Callable[[LawEntry], Union[str, bytes]]


@dataclass(frozen=True)
class LoadedLaw:
    """A parsed document together with the law it belongs to."""
    key: str
    label: str
    document: Document


def file_reader(base_dir: Union[str, Path] = ".") -> LawReader:
    """Reader that resolves a law's locator against ``base_dir``."""
    base = Path(base_dir)

    def read(entry: LawEntry) -> bytes:
        return (base / entry.locator).read_bytes()

    return read


def load_laws(
    entries: Iterable[LawEntry],
    reader: LawReader,
    hidden: Sequence[str] = (),
    parser: Optional[IDocumentParser] = None,
) -> List[LoadedLaw]:
    """
    Read and parse catalogue entries.

    A law that cannot be read is logged and skipped so the remaining
    laws still load.

    Args:
        entries: Catalogue entries to load, in order.
        reader: Returns the raw source text of an entry.
        hidden: Keys of laws to leave out.
        parser: Parser to use; a DocumentParser by default.

    Returns:
        Loaded laws in catalogue order.
    """
    parser = parser or DocumentParser()
    loaded: List[LoadedLaw] = []

    for entry in entries:
        if entry.key in hidden:
            continue
        try:
            text = reader(entry)
        except OSError as e:
            logger.error(f"Failed to load law {entry.key} from {entry.locator}: {e}")
            continue

        document = parser.parse_any(text)
        if document.is_empty:
            logger.warning(f"Law {entry.key} has no recognisable articles, recitals or annexes")
        if document.source_url is None and entry.url:
            document = replace(document, source_url=entry.url)
        loaded.append(LoadedLaw(key=entry.key, label=entry.label, document=document))

    logger.info(f"Loaded {len(loaded)} laws")
    return loaded


def combine_documents(laws: Iterable[LoadedLaw]) -> List[SearchUnit]:
    """
    Merge the units of several laws, each tagged with its law key and label.

    All articles come first, then all recitals, then all annexes, each
    group in law order.
    """
    articles: List[SearchUnit] = []
    recitals: List[SearchUnit] = []
    annexes: List[SearchUnit] = []

    for law in laws:
        for unit in collect_units(law.document, law_key=law.key, law_label=law.label):
            if unit.type is UnitType.ARTICLE:
                articles.append(unit)
            elif unit.type is UnitType.RECITAL:
                recitals.append(unit)
            else:
                annexes.append(unit)

    return articles + recitals + annexes


def build_corpus_index(
    laws: Iterable[LoadedLaw],
    settings: Optional[SearchSettings] = None,
) -> SearchIndex:
    """Build one search index over all units of several laws."""
    return SearchIndexEngine(settings).build_index(combine_documents(laws))
