"""End-to-end processing pipeline for the EUR-Lex Navigator.

This module wires the parser, the relevance engine and the search engine
together: raw text goes in, a parsed document with its article-to-recital
map (and optionally a search index) comes out.
"""

import logging
import re
import time
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .config.config_manager import ConfigurationManager
from .corpus import LoadedLaw, combine_documents
from .interfaces.parser import IDocumentParser
from .interfaces.relevance import IRelevanceEngine
from .interfaces.search import ISearchEngine
from .models.document import Document, document_cache_key
from .models.relevance import RelevanceMap
from .models.search import SearchIndex
from .parsers.base import DocumentParser
from .parsers.exceptions import ParseDiagnostics
from .performance import PerformanceMonitor
from .relevance.relevance_engine import RelevanceEngine
from .search.search_engine import SearchIndexEngine, collect_units


logger = logging.getLogger(__name__)

UNTITLED_LAW = "Untitled Law"

_HTML_VIEW = re.compile(r"/TXT/HTML/")


@dataclass
class PipelineConfig:
    """Configuration for the processing pipeline."""

    # Directory with relevance.json / search.json / summarizer.json / laws.json
    config_dir: Optional[str] = None

    # Overrides RelevanceSettings.exclusive when set
    exclusive_relevance: Optional[bool] = None

    # Also build a single-document search index in process()
    build_search_index: bool = False

    # Stages slower than this (seconds) are logged as warnings
    slow_operation_threshold: float = 5.0


@dataclass
class PipelineResult:
    """Result of processing one document."""

    success: bool
    document: Document = field(default_factory=Document)
    relevance_map: RelevanceMap = field(default_factory=dict)
    search_index: Optional[SearchIndex] = None
    diagnostics: Optional[ParseDiagnostics] = None
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    processing_time: float = 0.0
    cache_key: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class PipelineStats:
    """Running totals over every ``process`` call."""

    total_executions: int = 0
    successful_executions: int = 0
    failed_executions: int = 0
    empty_documents: int = 0
    units_parsed: int = 0
    recitals_linked: int = 0
    total_processing_time: float = 0.0

    @property
    def average_processing_time(self) -> float:
        if not self.total_executions:
            return 0.0
        return self.total_processing_time / self.total_executions

    def record(self, result: "PipelineResult") -> None:
        self.total_executions += 1
        if result.success:
            self.successful_executions += 1
        else:
            self.failed_executions += 1
        document = result.document
        if document.is_empty:
            self.empty_documents += 1
        self.units_parsed += len(document.articles) + len(document.recitals) + len(document.annexes)
        self.recitals_linked += sum(len(related) for related in result.relevance_map.values())
        self.total_processing_time += result.processing_time


def normalize_source_url(url: str) -> str:
    """Point an EUR-Lex URL at the main text view instead of the HTML view."""
    return _HTML_VIEW.sub("/TXT/", url, count=1)


def apply_metadata(document: Document, metadata: Optional[Mapping[str, Any]]) -> Document:
    """
    Apply captured page metadata to a parsed document.

    The metadata title replaces an empty or "Untitled Law" title; the
    metadata URL, normalized to the main text view, becomes the source URL.
    """
    if not metadata:
        return document

    changes: Dict[str, Any] = {}
    title = metadata.get("title")
    if title and (not document.title or document.title == UNTITLED_LAW):
        changes["title"] = str(title)

    url = metadata.get("url")
    if url:
        changes["source_url"] = normalize_source_url(str(url))

    return replace(document, **changes) if changes else document


class ProcessingPipeline:
    """
    Main processing pipeline for EUR-Lex documents.

    Parses a document, links its recitals to articles and optionally
    indexes it, collecting diagnostics and timings along the way.
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        parser: Optional[IDocumentParser] = None,
        relevance_engine: Optional[IRelevanceEngine] = None,
        search_engine: Optional[ISearchEngine] = None,
        config_manager: Optional[ConfigurationManager] = None,
    ):
        """
        Initialize the processing pipeline.

        Args:
            config: Pipeline configuration.
            parser: Optional document parser (created if not provided).
            relevance_engine: Optional relevance engine (created if not provided).
            search_engine: Optional search engine (created if not provided).
            config_manager: Optional configuration manager (created if not provided).
        """
        self.config = config or PipelineConfig()
        self.stats = PipelineStats()
        self.performance_monitor = PerformanceMonitor(
            slow_operation_threshold=self.config.slow_operation_threshold
        )

        self._config_manager = config_manager or ConfigurationManager(
            config_dir=self.config.config_dir
        )

        if self.config.config_dir:
            result = self._config_manager.load_from_directory(self.config.config_dir)
            if result.is_valid:
                logger.info(f"Loaded configuration from {self.config.config_dir}")
            else:
                logger.warning(
                    f"Configuration in {self.config.config_dir} is invalid, "
                    f"using defaults where needed: {result.errors}"
                )

        system_config = self._config_manager.configuration
        self._parser = parser or DocumentParser()
        self._relevance_engine = relevance_engine or RelevanceEngine(system_config.relevance)
        self._search_engine = search_engine or SearchIndexEngine(system_config.search)

        logger.info("Processing pipeline initialized")

    @property
    def config_manager(self) -> ConfigurationManager:
        return self._config_manager

    def process(
        self,
        text: Any,
        metadata: Optional[Mapping[str, Any]] = None,
        source: str = "<markup>",
    ) -> PipelineResult:
        """
        Parse a document and link its recitals to articles.

        Args:
            text: HTML/XHTML markup or a JSON snapshot.
            metadata: Optional captured page metadata (``title``, ``url``).
            source: Name used for the input in logs and diagnostics.

        Returns:
            PipelineResult; ``success`` is False when the document is empty
            or a stage failed.

        Raises:
            TypeError: If ``text`` is not str, bytes or None.
        """
        start_time = time.time()
        result = PipelineResult(success=False)
        monitor = self.performance_monitor

        try:
            with monitor.track("pipeline_execution", source=source) as run:
                logger.info(f"Starting pipeline execution for {source}")

                with monitor.track("parse_document", source=source) as parse_run:
                    document, diagnostics = self._parse(text, source)
                    parse_run.details["units"] = len(collect_units(document))

                document = apply_metadata(document, metadata)
                result.document = document
                result.diagnostics = diagnostics
                result.warnings.extend(diagnostics.warnings)
                result.errors.extend(str(e) for e in diagnostics.errors)
                result.cache_key = document_cache_key(document)

                if document.is_empty:
                    result.errors.append(
                        f"Could not parse document {source}: no articles, recitals or annexes found"
                    )
                    logger.warning(result.errors[-1])
                    run.fail(result.errors[-1])
                else:
                    logger.info(
                        f"Parsed {source}: {len(document.articles)} articles, "
                        f"{len(document.recitals)} recitals, {len(document.annexes)} annexes"
                    )
                    self._link_and_index(result)
                    result.success = True

        except TypeError:
            raise

        except Exception as e:
            error_msg = f"Pipeline execution failed: {str(e)}"
            result.errors.append(error_msg)
            logger.exception(error_msg)

        finally:
            result.processing_time = time.time() - start_time
            self.stats.record(result)

        result.metadata["performance_stats"] = monitor.get_all_stats()
        logger.info(f"Pipeline execution for {source} finished in {result.processing_time:.2f}s")
        return result

    def _link_and_index(self, result: PipelineResult) -> None:
        document = result.document
        with self.performance_monitor.track("build_relevance_map", recitals=len(document.recitals)):
            result.relevance_map = self._relevance_engine.build_relevance_map(
                document.articles,
                document.recitals,
                exclusive=self.config.exclusive_relevance,
            )

        if self.config.build_search_index:
            with self.performance_monitor.track("build_search_index"):
                result.search_index = self._search_engine.build_index(collect_units(document))

    def _parse(self, text: Any, source: str):
        if isinstance(self._parser, DocumentParser):
            return self._parser.parse_with_diagnostics(text, source=source)
        return self._parser.parse_any(text), ParseDiagnostics(source=source)

    def build_index(self, laws: Iterable[LoadedLaw]) -> SearchIndex:
        """
        Build one search index over several loaded laws.

        Args:
            laws: Parsed laws with their keys and labels.

        Returns:
            SearchIndex whose results carry law key and label.
        """
        with self.performance_monitor.track("build_corpus_index") as run:
            index = self._search_engine.build_index(combine_documents(laws))
            run.details["units"] = len(index)
        logger.info(f"Built corpus index with {len(index)} units")
        return index

    def get_stats(self) -> PipelineStats:
        return self.stats

    def get_performance_stats(self) -> Dict[str, Dict[str, Any]]:
        """Timing summaries per stage, keyed by stage name."""
        return self.performance_monitor.get_all_stats()
