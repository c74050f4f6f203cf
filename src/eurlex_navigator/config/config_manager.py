"""Configuration Manager implementation for the EUR-Lex Navigator.

This module provides functionality to load, validate, and manage the
relevance, search and summarizer settings and the law registry.
"""

import json
import logging
from dataclasses import asdict, fields, replace
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Type, TypeVar, Union

from .models import (
    ConfigurationError,
    LawEntry,
    RelevanceSettings,
    SearchSettings,
    SummarizerSettings,
    SystemConfiguration,
    ValidationResult,
)

logger = logging.getLogger(__name__)

S = TypeVar("S")

Source = Union[str, Path, Dict[str, Any], List[Dict[str, Any]]]

# Per-field checks: (predicate, description of the accepted values)
FieldCheck = Tuple[Callable[[Any], bool], str]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


RELEVANCE_CHECKS: Dict[str, FieldCheck] = {
    "similarity_threshold": (lambda v: _is_number(v) and 0.0 <= v <= 1.0, "a number between 0.0 and 1.0"),
    "title_weight": (lambda v: _is_int(v) and v >= 1, "an integer >= 1"),
    "max_keywords": (lambda v: _is_int(v) and v >= 0, "an integer >= 0"),
    "exclusive": (lambda v: isinstance(v, bool), "a boolean"),
}

SEARCH_CHECKS: Dict[str, FieldCheck] = {
    "preview_length": (lambda v: _is_int(v) and v >= 0, "an integer >= 0"),
    "similarity_scale": (lambda v: _is_number(v) and v > 0, "a positive number"),
    "id_match_bonus": (lambda v: _is_number(v) and v >= 0, "a number >= 0"),
    "title_match_bonus": (lambda v: _is_number(v) and v >= 0, "a number >= 0"),
    "score_floor": (lambda v: _is_number(v) and v >= 0, "a number >= 0"),
}

SUMMARIZER_CHECKS: Dict[str, FieldCheck] = {
    "recital_max_chars": (lambda v: _is_int(v) and v > 0, "a positive integer"),
    "article_max_chars": (lambda v: _is_int(v) and v > 0, "a positive integer"),
}


class ConfigurationManager:
    """
    Manager for system configuration.

    Handles loading, validation, and access to engine settings and the
    law registry. Defaults apply to anything never loaded.
    """

    def __init__(self, config_dir: Optional[Union[str, Path]] = None):
        """
        Initialize the configuration manager.

        Args:
            config_dir: Optional directory path for configuration files.
        """
        self._config_dir = Path(config_dir) if config_dir else None
        self._configuration = SystemConfiguration()
        self._is_loaded = False

    @property
    def configuration(self) -> SystemConfiguration:
        """Get the current system configuration."""
        return self._configuration

    @property
    def is_loaded(self) -> bool:
        """Check if configuration has been loaded."""
        return self._is_loaded

    # =========================================================================
    # Engine Settings
    # =========================================================================

    def load_relevance_settings(self, source: Source) -> ValidationResult:
        """
        Load and validate relevance engine settings.

        Args:
            source: File path or dictionary.

        Returns:
            ValidationResult indicating success or failure with details.

        Raises:
            ConfigurationError: If validation fails and configuration cannot be applied.
        """
        result, settings = self._load_settings(
            source, RelevanceSettings, RELEVANCE_CHECKS, "Relevance settings"
        )
        self._configuration.relevance = settings
        self._is_loaded = True
        return result

    def load_search_settings(self, source: Source) -> ValidationResult:
        """
        Load and validate search engine settings.

        Raises:
            ConfigurationError: If validation fails and configuration cannot be applied.
        """
        result, settings = self._load_settings(
            source, SearchSettings, SEARCH_CHECKS, "Search settings"
        )
        self._configuration.search = settings
        self._is_loaded = True
        return result

    def load_summarizer_settings(self, source: Source) -> ValidationResult:
        """
        Load and validate summarizer truncation settings.

        Raises:
            ConfigurationError: If validation fails and configuration cannot be applied.
        """
        result, settings = self._load_settings(
            source, SummarizerSettings, SUMMARIZER_CHECKS, "Summarizer settings"
        )
        self._configuration.summarizer = settings
        self._is_loaded = True
        return result

    def _load_settings(
        self,
        source: Source,
        settings_cls: Type[S],
        checks: Dict[str, FieldCheck],
        prefix: str,
    ) -> Tuple[ValidationResult, S]:
        raw_data = self._parse_source(source)
        result = ValidationResult(is_valid=True)

        if not isinstance(raw_data, dict):
            result.add_error(f"{prefix}: expected an object, got {type(raw_data).__name__}")
            raise ConfigurationError(f"{prefix} validation failed", validation_result=result)

        known = {f.name for f in fields(settings_cls)}
        values: Dict[str, Any] = {}

        for key, value in raw_data.items():
            if key not in known:
                result.add_warning(f"{prefix}: Unknown field '{key}' ignored")
                continue
            check, expected = checks[key]
            if not check(value):
                result.add_error(f"{prefix}: '{key}' must be {expected}, got {value!r}")
                continue
            values[key] = value

        if not result.is_valid:
            raise ConfigurationError(f"{prefix} validation failed", validation_result=result)

        return result, replace(settings_cls(), **values)

    # =========================================================================
    # Law Registry
    # =========================================================================

    def load_law_registry(self, source: Source) -> ValidationResult:
        """
        Load and validate the law registry.

        Supports loading from:
        - JSON file path
        - Dictionary with a "laws" list, or a single entry
        - List of entry dictionaries

        Args:
            source: File path, dictionary, or list of dictionaries.

        Returns:
            ValidationResult indicating success or failure with details.

        Raises:
            ConfigurationError: If validation fails and configuration cannot be applied.
        """
        raw_data = self._parse_source(source)

        if isinstance(raw_data, dict):
            if "laws" in raw_data:
                laws_data = raw_data["laws"]
            else:
                laws_data = [raw_data]
        else:
            laws_data = raw_data

        result = ValidationResult(is_valid=True)
        laws: List[LawEntry] = []

        if not isinstance(laws_data, list):
            result.add_error("Law registry: 'laws' must be a list")
            laws_data = []

        for i, law_dict in enumerate(laws_data):
            law_result, law = self._validate_law_entry(law_dict, index=i)
            result = result.merge(law_result)
            if law:
                laws.append(law)

        keys = [law.key for law in laws]
        duplicates = [key for key in keys if keys.count(key) > 1]
        if duplicates:
            result.add_error(f"Duplicate law keys found: {set(duplicates)}")

        if not result.is_valid:
            raise ConfigurationError(
                "Law registry validation failed",
                validation_result=result
            )

        self._configuration.laws = laws
        self._is_loaded = True
        logger.info(f"Loaded {len(laws)} law registry entries")

        return result

    def _validate_law_entry(
        self,
        data: Any,
        index: int = 0
    ) -> Tuple[ValidationResult, Optional[LawEntry]]:
        """Validate a single law registry entry."""
        result = ValidationResult(is_valid=True)
        prefix = f"Law entry [{index}]"

        if not isinstance(data, dict):
            result.add_error(f"{prefix}: expected an object")
            return result, None

        for field_name in ("key", "label", "locator"):
            if field_name not in data:
                result.add_error(f"{prefix}: Missing required field '{field_name}'")
            elif not isinstance(data[field_name], str) or not data[field_name].strip():
                result.add_error(f"{prefix}: '{field_name}' must be a non-empty string")

        url = data.get("url")
        if url is not None and (not isinstance(url, str) or not url.startswith(("http://", "https://"))):
            result.add_error(f"{prefix}: 'url' must be an http(s) URL")

        for count_field in ("expected_articles", "expected_recitals", "expected_annexes"):
            value = data.get(count_field)
            if value is not None and (not _is_int(value) or value < 0):
                result.add_error(f"{prefix}: '{count_field}' must be a non-negative integer")

        if not result.is_valid:
            return result, None

        law = LawEntry(
            key=data["key"].strip(),
            label=data["label"].strip(),
            locator=data["locator"].strip(),
            url=url,
            expected_articles=data.get("expected_articles"),
            expected_recitals=data.get("expected_recitals"),
            expected_annexes=data.get("expected_annexes"),
            metadata=data.get("metadata", {}),
        )

        return result, law

    def get_law(self, key: str) -> Optional[LawEntry]:
        """Get a law registry entry by key."""
        return self._configuration.get_law(key)

    # =========================================================================
    # Configuration Validation
    # =========================================================================

    def validate_configuration(
        self,
        config: Optional[SystemConfiguration] = None
    ) -> ValidationResult:
        """
        Validate the complete system configuration.

        Checks field ranges of every settings block and the consistency
        of the law registry.

        Args:
            config: Configuration to validate. Uses current config if None.

        Returns:
            ValidationResult with all errors and warnings.
        """
        config = config or self._configuration
        result = ValidationResult(is_valid=True)

        result = result.merge(self._check_fields(config.relevance, RELEVANCE_CHECKS, "Relevance settings"))
        result = result.merge(self._check_fields(config.search, SEARCH_CHECKS, "Search settings"))
        result = result.merge(self._check_fields(config.summarizer, SUMMARIZER_CHECKS, "Summarizer settings"))
        result = result.merge(self._validate_registry_consistency(config))

        return result

    def _check_fields(self, settings: Any, checks: Dict[str, FieldCheck], prefix: str) -> ValidationResult:
        result = ValidationResult(is_valid=True)
        for name, (check, expected) in checks.items():
            value = getattr(settings, name)
            if not check(value):
                result.add_error(f"{prefix}: '{name}' must be {expected}, got {value!r}")
        return result

    def _validate_registry_consistency(self, config: SystemConfiguration) -> ValidationResult:
        """Validate the law registry for internal consistency."""
        result = ValidationResult(is_valid=True)

        if not config.laws:
            result.add_warning("Law registry is empty")

        seen_locators: Dict[str, str] = {}  # locator -> law key
        for law in config.laws:
            if law.locator in seen_locators:
                result.add_warning(
                    f"Locator '{law.locator}' is shared by laws "
                    f"'{law.key}' and '{seen_locators[law.locator]}'"
                )
            else:
                seen_locators[law.locator] = law.key

        return result

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def _parse_source(self, source: Source) -> Union[Dict[str, Any], List[Dict[str, Any]]]:
        """Parse configuration source to raw data."""
        if isinstance(source, (str, Path)):
            path = Path(source)
            if not path.exists():
                raise ConfigurationError(f"Configuration file not found: {path}")

            try:
                with open(path, "r", encoding="utf-8") as f:
                    return json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"Invalid JSON in {path}: {e}")

        return source

    def load_from_directory(self, config_dir: Union[str, Path]) -> ValidationResult:
        """
        Load all configuration files from a directory.

        Expects files named:
        - relevance.json
        - search.json
        - summarizer.json
        - laws.json

        Missing files leave the corresponding defaults in place.

        Args:
            config_dir: Directory containing configuration files.

        Returns:
            Combined ValidationResult for all loaded configurations.
        """
        config_dir = Path(config_dir)
        result = ValidationResult(is_valid=True)

        loaders = [
            ("relevance.json", "Relevance settings", self.load_relevance_settings),
            ("search.json", "Search settings", self.load_search_settings),
            ("summarizer.json", "Summarizer settings", self.load_summarizer_settings),
            ("laws.json", "Law registry", self.load_law_registry),
        ]

        for filename, name, loader in loaders:
            path = config_dir / filename
            if not path.exists():
                continue
            try:
                result = result.merge(loader(path))
            except ConfigurationError as e:
                result.add_error(f"{name} loading failed: {e.message}")
                if e.validation_result:
                    result = result.merge(e.validation_result)

        if not result.is_valid:
            logger.warning(f"Configuration in {config_dir} has {len(result.errors)} error(s)")

        self._config_dir = config_dir
        return result

    def save_to_directory(
        self,
        config_dir: Optional[Union[str, Path]] = None
    ) -> None:
        """
        Save current configuration to a directory.

        Args:
            config_dir: Directory to save to. Uses current config_dir if None.
        """
        config_dir = Path(config_dir) if config_dir else self._config_dir
        if not config_dir:
            raise ConfigurationError("No configuration directory specified")

        config_dir.mkdir(parents=True, exist_ok=True)

        data = self.to_dict()
        files = {
            "relevance.json": data["relevance"],
            "search.json": data["search"],
            "summarizer.json": data["summarizer"],
            "laws.json": {"laws": data["laws"]},
        }
        for filename, content in files.items():
            with open(config_dir / filename, "w", encoding="utf-8") as f:
                json.dump(content, f, indent=2, ensure_ascii=False)

    def reset(self) -> None:
        """Reset configuration to defaults."""
        self._configuration = SystemConfiguration()
        self._is_loaded = False

    def to_dict(self) -> Dict[str, Any]:
        """Export current configuration as a dictionary."""
        return {
            "version": self._configuration.version,
            "relevance": asdict(self._configuration.relevance),
            "search": asdict(self._configuration.search),
            "summarizer": asdict(self._configuration.summarizer),
            "laws": [asdict(law) for law in self._configuration.laws],
            "metadata": self._configuration.metadata,
        }
