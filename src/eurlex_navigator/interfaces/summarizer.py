"""Summarizer interface for the EUR-Lex Navigator."""

from abc import ABC, abstractmethod


class ISummarizer(ABC):
    """
    Abstract interface for an external generative text capability.

    The navigator only sends prompts and receives text; how the text is
    produced is up to the implementation.
    """

    @abstractmethod
    def summarize(self, prompt: str) -> str:
        """
        Produce text for a prompt.

        Args:
            prompt: Complete instruction including the source text.

        Returns:
            Generated text.

        Raises:
            Exception: Any failure of the underlying capability.
        """
        pass
