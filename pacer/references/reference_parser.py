# pacer/references/reference_parser.py
"""
Grammar parse for canonical scripture reference strings.

Handles the forms ReferenceExtractor produces, plus typed input:
- Single verse: "Genesis 1:1", "Gen 1:1", "1John 3:16"
- Verse ranges: "Genesis 1:1-3"
- Verse lists: "Romans 3:4-5, 7" (one ParsedReference per merged range)
- Cross-chapter: "John 3:36-4:2"
- Chapter-only: "Psalm 23" (returns verse_start=1, verse_end=None, is_chapter=True)
- Single-chapter books: "Jude 3" (chapter 1, verse 3)
- Several references separated by ";" or prose
"""

import re
from dataclasses import dataclass
from typing import Optional

from .books import BOOKS_REGEX_FLEX, SINGLE_CHAPTER_BOOKS, resolve_book_name
from .ranges import parse_verse_list


@dataclass
class ParsedReference:
    """
    A parsed scripture reference, before corpus validation.

    Attributes:
        book: Canonical book name (e.g., "Genesis", "1 John")
        chapter: Chapter number
        verse_start: Starting verse (1 for chapter-only references)
        verse_end: Ending verse (None for single verse or chapter)
        end_chapter: Ending chapter for cross-chapter ranges (None otherwise)
        original: Matched input text
        is_chapter: True if this is a chapter-only reference
    """
    book: str
    chapter: int
    verse_start: int
    verse_end: Optional[int] = None
    end_chapter: Optional[int] = None
    original: str = ""
    is_chapter: bool = False

    @property
    def normalized(self) -> str:
        """Return normalized reference string."""
        if self.is_chapter:
            return f"{self.book} {self.chapter}"
        if self.end_chapter and self.end_chapter != self.chapter:
            return f"{self.book} {self.chapter}:{self.verse_start}-{self.end_chapter}:{self.verse_end}"
        if self.verse_end and self.verse_end != self.verse_start:
            return f"{self.book} {self.chapter}:{self.verse_start}-{self.verse_end}"
        return f"{self.book} {self.chapter}:{self.verse_start}"


# Book, chapter, then optionally ":verse" followed by either a cross-chapter
# end ("-4:2") or a verse list tail ("-18", ", 20", "-5, 7")
REFERENCE_PATTERN = re.compile(
    rf"\b(?P<book>{BOOKS_REGEX_FLEX})\s*(?P<chapter>\d{{1,3}})"
    r"(?:\s*:\s*(?P<verse>\d{1,3})"
    r"(?:\s*-\s*(?P<end_chapter>\d{1,3})\s*:\s*(?P<end_verse>\d{1,3})"
    rf"|(?P<tail>(?:\s*[,-]\s*(?!{BOOKS_REGEX_FLEX})\d{{1,3}}(?!\d|\s*:))*)))?"
    r"(?!\d)",
    re.IGNORECASE,
)


def _references_from_match(match: re.Match) -> list[ParsedReference]:
    book = resolve_book_name(match.group("book"))
    if not book:
        return []

    chapter = int(match.group("chapter"))
    original = match.group(0).strip()
    if chapter <= 0:
        return []

    if match.group("verse") is None:
        if book in SINGLE_CHAPTER_BOOKS and chapter != 1:
            # "Jude 3": the lone number is the verse
            return [ParsedReference(book, 1, chapter, original=original)]
        return [ParsedReference(
            book=book,
            chapter=chapter,
            verse_start=1,
            verse_end=None,
            original=original,
            is_chapter=True,
        )]

    verse = int(match.group("verse"))
    if match.group("end_chapter"):
        end_chapter = int(match.group("end_chapter"))
        end_verse = int(match.group("end_verse"))
        if verse <= 0 or end_verse <= 0:
            return []
        if end_chapter > chapter:
            return [ParsedReference(
                book=book,
                chapter=chapter,
                verse_start=verse,
                verse_end=end_verse,
                end_chapter=end_chapter,
                original=original,
            )]
        if end_chapter == chapter and end_verse > verse:
            return [ParsedReference(book, chapter, verse, end_verse, original=original)]
        return [ParsedReference(book, chapter, verse, original=original)]

    refs = []
    for verse_range in parse_verse_list(f"{verse}{match.group('tail') or ''}"):
        refs.append(ParsedReference(
            book=book,
            chapter=chapter,
            verse_start=verse_range.start,
            verse_end=verse_range.end if verse_range.end != verse_range.start else None,
            original=original,
        ))
    return refs


def parse_reference(ref_string: str) -> Optional[ParsedReference]:
    """
    Parse a single scripture reference string.

    Handles many formats:
    - "Genesis 1:1"
    - "Gen 1:1"
    - "Genesis 1:1-3"
    - "1 John 3:16"
    - "1John 3:16"
    - "John 3:36-4:2"
    - "Psalm 23" (chapter only)

    Args:
        ref_string: The reference string to parse

    Returns:
        ParsedReference object or None if parsing fails
    """
    if not ref_string:
        return None

    ref_string = re.sub(r'\s+', ' ', ref_string.strip())
    match = REFERENCE_PATTERN.fullmatch(ref_string)
    if not match:
        return None

    refs = _references_from_match(match)
    return refs[0] if refs else None


def find_references(text: str) -> list[ParsedReference]:
    """
    Find all scripture references in a text block, in order of appearance.

    Args:
        text: Canonical text from ReferenceExtractor (or typed input)

    Returns:
        List of ParsedReference objects found, duplicates removed
    """
    refs = []
    seen = set()

    for match in REFERENCE_PATTERN.finditer(text):
        for parsed in _references_from_match(match):
            if parsed.normalized not in seen:
                refs.append(parsed)
                seen.add(parsed.normalized)

    return refs


def is_valid_reference(ref_string: str) -> bool:
    """
    Check if a string is a syntactically valid scripture reference.

    Args:
        ref_string: String to check

    Returns:
        True if valid reference, False otherwise
    """
    return parse_reference(ref_string) is not None
