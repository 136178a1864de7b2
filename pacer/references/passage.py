# pacer/references/passage.py
"""
Resolved passages and their display strings.
"""

from dataclasses import dataclass, asdict
from typing import Optional


def to_display_ref(
    book: str,
    chapter: int,
    start: int,
    end: Optional[int] = None,
    end_chapter: Optional[int] = None,
) -> str:
    """
    Format a passage for display.

    Examples:
        to_display_ref("John", 3, 16)             -> "John 3:16"
        to_display_ref("John", 3, 16, 18)         -> "John 3:16-18"
        to_display_ref("John", 3, 36, 2, 4)       -> "John 3:36-4:2"
    """
    if end_chapter and end_chapter != chapter:
        return f"{book} {chapter}:{start}-{end_chapter}:{end or 1}"
    if end and end != start:
        return f"{book} {chapter}:{start}-{end}"
    return f"{book} {chapter}:{start}"


@dataclass
class Passage:
    """
    A resolved, corpus-validated span of scripture.

    Attributes:
        book: Canonical book name
        chapter: Starting chapter
        start_verse: Starting verse
        end_chapter: Ending chapter (== chapter unless the passage crosses chapters)
        end_verse: Ending verse
        display_ref: Human-readable reference ("John 3:16-18")
        is_chapter: True when the passage stands for a whole chapter
            ("Acts chapter 2", "Matthew 21 to 22") and was defaulted to verse 1
    """
    book: str
    chapter: int
    start_verse: int
    end_chapter: int
    end_verse: int
    display_ref: str
    is_chapter: bool = False

    @property
    def is_single_verse(self) -> bool:
        return self.chapter == self.end_chapter and self.start_verse == self.end_verse

    def to_dict(self) -> dict:
        return asdict(self)


def make_passage(
    book: str,
    chapter: int,
    start_verse: int,
    end_verse: Optional[int] = None,
    end_chapter: Optional[int] = None,
    is_chapter: bool = False,
) -> Passage:
    end_chapter = end_chapter or chapter
    end_verse = end_verse or start_verse
    return Passage(
        book=book,
        chapter=chapter,
        start_verse=start_verse,
        end_chapter=end_chapter,
        end_verse=end_verse,
        display_ref=to_display_ref(book, chapter, start_verse, end_verse, end_chapter),
        is_chapter=is_chapter,
    )
