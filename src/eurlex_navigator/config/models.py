"""Data models for configuration management."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class RelevanceSettings:
    """
    Tuning of the article-to-recital relevance engine.

    A recital is linked only when its cosine similarity is strictly
    greater than ``similarity_threshold``.
    """
    similarity_threshold: float = 0.1
    title_weight: int = 3  # times article title tokens are repeated
    max_keywords: int = 3
    exclusive: bool = True


@dataclass
class SearchSettings:
    """Scoring constants of the search index engine."""
    preview_length: int = 150
    similarity_scale: float = 100.0
    id_match_bonus: float = 200.0
    title_match_bonus: float = 50.0
    score_floor: float = 0.5


@dataclass
class SummarizerSettings:
    """Input truncation limits for summarization prompts."""
    recital_max_chars: int = 2000
    article_max_chars: int = 4000


@dataclass
class LawEntry:
    """
    Catalogue entry for a known legal instrument.

    Used only to label documents and locate their source text.
    """
    key: str
    label: str
    locator: str  # storage path of the source markup
    url: Optional[str] = None
    expected_articles: Optional[int] = None
    expected_recitals: Optional[int] = None
    expected_annexes: Optional[int] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


def _celex_url(celex: str) -> str:
    return f"https://eur-lex.europa.eu/legal-content/EN/TXT/?uri=CELEX:{celex}"


DEFAULT_LAWS: List[LawEntry] = [
    LawEntry("aia", "AI Act (EU 2024/1689)", "data/aia.xhtml", _celex_url("32024R1689")),
    LawEntry("gdpr", "GDPR (EU 2016/679)", "data/gdpr.xml", _celex_url("32016R0679")),
    LawEntry("dma", "DMA (EU 2022/1925)", "data/dma.xhtml", _celex_url("32022R1925")),
    LawEntry("dsa", "DSA (EU 2022/2065)", "data/dsa.xhtml", _celex_url("32022R2065")),
    LawEntry("data-act", "Data Act (EU 2023/2854)", "data/da.xhtml", _celex_url("32023R2854")),
    LawEntry("dga", "Data Governance Act (EU 2022/868)", "data/dga.html", _celex_url("32022R0868")),
]


@dataclass
class ValidationResult:
    """Result of configuration validation."""
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        """Add an error message."""
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str) -> None:
        """Add a warning message."""
        self.warnings.append(message)

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        """Merge another validation result into this one."""
        return ValidationResult(
            is_valid=self.is_valid and other.is_valid,
            errors=self.errors + other.errors,
            warnings=self.warnings + other.warnings
        )


class ConfigurationError(Exception):
    """Exception raised for configuration errors."""

    def __init__(self, message: str, validation_result: Optional[ValidationResult] = None):
        super().__init__(message)
        self.message = message
        self.validation_result = validation_result


@dataclass
class SystemConfiguration:
    """
    Complete system configuration.

    Aggregates all configuration types into a single structure.
    """
    relevance: RelevanceSettings = field(default_factory=RelevanceSettings)
    search: SearchSettings = field(default_factory=SearchSettings)
    summarizer: SummarizerSettings = field(default_factory=SummarizerSettings)
    laws: List[LawEntry] = field(default_factory=lambda: list(DEFAULT_LAWS))
    version: int = 1
    metadata: Dict[str, Any] = field(default_factory=dict)

    def get_law(self, key: str) -> Optional[LawEntry]:
        """Get a catalogue entry by key."""
        for law in self.laws:
            if law.key == key:
                return law
        return None
