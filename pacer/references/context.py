# pacer/references/context.py
"""
Per-session parse context.

The caller owns one ParseContext per transcript session and passes it to
every ReferenceEngine.resolve() call. The engine only mutates it after a
successful resolution.
"""

from dataclasses import dataclass, asdict
from typing import Optional

from .passage import Passage


@dataclass
class ParseContext:
    """
    Last resolved location in a session.

    Attributes:
        book: Canonical book of the last passage
        chapter: Starting chapter of the last passage
        verse: Last verse of the last passage (navigation anchor)
        end_chapter: Ending chapter of the last passage
        end_verse: Ending verse of the last passage
        full_reference: "Book EC:EV" of the last passage end
    """
    book: Optional[str] = None
    chapter: Optional[int] = None
    verse: Optional[int] = None
    end_chapter: Optional[int] = None
    end_verse: Optional[int] = None
    full_reference: Optional[str] = None

    def is_empty(self) -> bool:
        return self.book is None

    def reset(self):
        self.book = None
        self.chapter = None
        self.verse = None
        self.end_chapter = None
        self.end_verse = None
        self.full_reference = None

    def update_from(self, passages: list[Passage]):
        """Move the context to the end of the last passage."""
        if not passages:
            return
        last = passages[-1]
        self.book = last.book
        self.chapter = last.chapter
        self.verse = last.end_verse
        self.end_chapter = last.end_chapter
        self.end_verse = last.end_verse
        self.full_reference = f"{last.book} {last.end_chapter}:{last.end_verse}"

    def snapshot(self) -> dict:
        return asdict(self)
