"""Table of contents grouped by chapter and section."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from ..models.document import Article

UNTITLED_CHAPTER = "(Untitled Chapter)"


@dataclass
class TocSection:
    """Articles of one section, in document order."""
    label: str
    articles: List[Article] = field(default_factory=list)


@dataclass
class TocChapter:
    """
    One chapter entry of the table of contents.

    Articles outside any section are listed directly on the chapter.
    """
    label: str
    articles: List[Article] = field(default_factory=list)
    sections: List[TocSection] = field(default_factory=list)

    def contains(self, article_number: str) -> bool:
        """Check if the article is listed in this chapter or its sections."""
        if any(a.number == article_number for a in self.articles):
            return True
        return any(
            a.number == article_number
            for section in self.sections
            for a in section.articles
        )


@dataclass
class TableOfContents:
    """Chapters in first-seen order."""
    chapters: List[TocChapter] = field(default_factory=list)

    def find_chapter(self, article_number: str) -> Optional[TocChapter]:
        """Get the chapter listing the given article, if any."""
        for chapter in self.chapters:
            if chapter.contains(article_number):
                return chapter
        return None

    def __len__(self) -> int:
        return len(self.chapters)


def build_table_of_contents(articles: Sequence[Article]) -> TableOfContents:
    """
    Group articles by chapter label, then section label.

    Chapters and sections keep the order in which they are first seen.
    Articles without a chapter go under "(Untitled Chapter)".
    """
    toc = TableOfContents()
    chapters: Dict[str, TocChapter] = {}
    sections: Dict[tuple, TocSection] = {}

    for article in articles:
        chapter_label = article.division.chapter.label or UNTITLED_CHAPTER
        section_label = article.division.section.label

        chapter = chapters.get(chapter_label)
        if chapter is None:
            chapter = chapters[chapter_label] = TocChapter(label=chapter_label)
            toc.chapters.append(chapter)

        if not section_label:
            chapter.articles.append(article)
            continue

        key = (chapter_label, section_label)
        section = sections.get(key)
        if section is None:
            section = sections[key] = TocSection(label=section_label)
            chapter.sections.append(section)
        section.articles.append(article)

    return toc
