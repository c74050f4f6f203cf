"""Configuration management for the EUR-Lex Navigator."""

from .config_manager import ConfigurationManager
from .models import (
    DEFAULT_LAWS,
    LawEntry,
    RelevanceSettings,
    SearchSettings,
    SummarizerSettings,
    SystemConfiguration,
    ConfigurationError,
    ValidationResult,
)

__all__ = [
    "ConfigurationManager",
    "DEFAULT_LAWS",
    "LawEntry",
    "RelevanceSettings",
    "SearchSettings",
    "SummarizerSettings",
    "SystemConfiguration",
    "ConfigurationError",
    "ValidationResult",
]
