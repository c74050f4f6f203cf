"""Recital titles and article summaries from an external summarizer.

The summarizer is an opaque ISummarizer; failures are logged and turned
into ``None`` so that one bad item never stops a batch.
"""

import logging
from typing import Callable, Dict, Optional, Sequence

from .config.models import SummarizerSettings
from .interfaces.summarizer import ISummarizer
from .models.document import Article, Recital
from .parsers.html_utils import strip_tags

logger = logging.getLogger(__name__)

# (position, total, generated text or None)
ProgressCallback = Callable[[int, int, Optional[str]], None]

RECITAL_TITLE_PROMPT = "Write a short headline for the following recital:\n\n{text}"
ARTICLE_SUMMARY_PROMPT = "Summarize the following article in two sentences:\n\n{text}"


def generate_recital_title(
    summarizer: Optional[ISummarizer],
    recital_text: str,
    settings: Optional[SummarizerSettings] = None,
) -> Optional[str]:
    """
    Generate a headline for one recital.

    Returns:
        The headline, or None when there is no summarizer, no text, or
        the summarizer fails.
    """
    settings = settings or SummarizerSettings()
    return _generate(
        summarizer,
        RECITAL_TITLE_PROMPT,
        recital_text,
        settings.recital_max_chars,
        "recital title",
    )


def generate_article_summary(
    summarizer: Optional[ISummarizer],
    article_text: str,
    settings: Optional[SummarizerSettings] = None,
) -> Optional[str]:
    """Generate a short summary for one article; None on failure."""
    settings = settings or SummarizerSettings()
    return _generate(
        summarizer,
        ARTICLE_SUMMARY_PROMPT,
        article_text,
        settings.article_max_chars,
        "article summary",
    )


def generate_recital_titles(
    summarizer: Optional[ISummarizer],
    recitals: Sequence[Recital],
    on_progress: Optional[ProgressCallback] = None,
    settings: Optional[SummarizerSettings] = None,
) -> Dict[str, str]:
    """
    Generate headlines for many recitals.

    Args:
        summarizer: Text generator; nothing is generated when None.
        recitals: Recitals to title.
        on_progress: Called after each recital with (position, total, title).
        settings: Truncation limits.

    Returns:
        Recital number to headline, for the recitals that succeeded.
    """
    titles: Dict[str, str] = {}
    if summarizer is None:
        logger.warning("No summarizer available for generating recital titles")
        return titles

    total = len(recitals)
    for position, recital in enumerate(recitals, start=1):
        text = recital.text or strip_tags(recital.html)
        title = generate_recital_title(summarizer, text, settings)
        if title:
            titles[recital.number] = title
        if on_progress:
            on_progress(position, total, title)

    return titles


def generate_article_summaries(
    summarizer: Optional[ISummarizer],
    articles: Sequence[Article],
    on_progress: Optional[ProgressCallback] = None,
    settings: Optional[SummarizerSettings] = None,
) -> Dict[str, str]:
    """Generate summaries for many articles; see ``generate_recital_titles``."""
    summaries: Dict[str, str] = {}
    if summarizer is None:
        logger.warning("No summarizer available for generating article summaries")
        return summaries

    total = len(articles)
    for position, article in enumerate(articles, start=1):
        summary = generate_article_summary(summarizer, strip_tags(article.body_html), settings)
        if summary:
            summaries[article.number] = summary
        if on_progress:
            on_progress(position, total, summary)

    return summaries


def _generate(
    summarizer: Optional[ISummarizer],
    template: str,
    text: str,
    max_chars: int,
    what: str,
) -> Optional[str]:
    if summarizer is None or not text:
        return None
    try:
        result = summarizer.summarize(template.format(text=text[:max_chars]))
    except Exception as e:
        logger.warning(f"Failed to generate {what}: {e}")
        return None
    result = (result or "").strip()
    return result or None
