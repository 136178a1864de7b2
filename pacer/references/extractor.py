# pacer/references/extractor.py
"""
Phrasing rewrites from normalized text to canonical "Book C:V[-V]" strings.

Input has already been through TextNormalizer, so numbers are digits and
roman numerals are gone. Each rewrite is a plain str -> str function over
the whole text; ReferenceExtractor.extract() runs them in a fixed order:

Phase 1 (verse-level phrasing)
    "Daniel2:16Daniel 2:17"                -> "Daniel 2:16 Daniel 2:17"
    "Luke chapter 21:5"                    -> "Luke 21:5"
    "Luke chapter 4 verse 1 to 2"          -> "Luke 4:1-2"
    "Psalms 107, thank you, verse 15, 16"  -> "Psalms 107:15-16"
    "Romans 3, 5"                          -> "Romans 3:5"
    "Romans 8 28" (aggressive speech only) -> "Romans 8:28"
    "John 3:16 and 17"                     -> "John 3:16-17"

Combined-digit disambiguation runs between the phases when a
disambiguator is supplied.

Phase 2 (chapter-level phrasing)
    "Exodus chapters 30 and 31"            -> "Exodus 30; Exodus 31"
    "Matthew 21 to 22"                     -> "Matthew 21; Matthew 22"
    "Acts chapter 2", "chapter 2 of Acts"  -> "Acts 2"
"""

import logging
import re

from .books import BOOKS_REGEX_FLEX, BookRecognizer
from .ranges import format_ranges, parse_verse_list

logger = logging.getLogger(__name__)


BOOK_PREFIX = r"(?:\bin\s+)?(?:\bthe\s+)?(?:\bbook\s+of\s+)?"
VERSE_WORD = r"(?:verses|verse|vv|vs|v)"
CHAPTER_WORD = r"(?:chapter|ch)"
CONNECTOR = r"(?:,|-|&|\band\b|\bto\b|\bthrough\b|\bthru\b)"

# A verse number that is not the start of another book or of a "c:v" pair
LIST_ITEM = rf"(?!{BOOKS_REGEX_FLEX})\d{{1,3}}(?!\d|\s*:)"
VERSE_LIST = rf"\d{{1,3}}(?!\d|\s*:)(?:\s*{CONNECTOR}\s*(?:{VERSE_WORD}\s+)?{LIST_ITEM})*"

CONCATENATED_RE = re.compile(
    rf"(\d{{1,3}}:\d{{1,3}}(?:-\d{{1,3}})?)({BOOKS_REGEX_FLEX})", re.IGNORECASE
)
MISSING_SPACE_RE = re.compile(
    rf"\b({BOOKS_REGEX_FLEX})(\d{{1,3}}(?::\d{{1,3}})?)", re.IGNORECASE
)
CHAPTER_COLON_RE = re.compile(
    rf"{BOOK_PREFIX}\b({BOOKS_REGEX_FLEX})\s+{CHAPTER_WORD}\s+(\d{{1,3}}:\d{{1,3}}(?:-\d{{1,3}})?)\b",
    re.IGNORECASE,
)
VERSE_LIST_RE = re.compile(
    rf"{BOOK_PREFIX}\b({BOOKS_REGEX_FLEX})\s+(?:{CHAPTER_WORD}\s+)?(\d{{1,3}})\s*,?\s*"
    rf"{VERSE_WORD}\s+({VERSE_LIST})",
    re.IGNORECASE,
)
VERSE_LATER_RE = re.compile(
    rf"\b({BOOKS_REGEX_FLEX})\s+(?:{CHAPTER_WORD}\s+)?(\d{{1,3}})\b(?!\s*:)([^\d]{{0,80}}?)"
    rf"\b{VERSE_WORD}\s+({VERSE_LIST})",
    re.IGNORECASE,
)
COMMA_SEPARATED_RE = re.compile(
    rf"{BOOK_PREFIX}\b({BOOKS_REGEX_FLEX})\s+(\d{{1,3}})\s*,\s*(\d{{1,3}})(?!\d|\s*:)",
    re.IGNORECASE,
)
TRAILING_LIST_RE = re.compile(
    rf"\b({BOOKS_REGEX_FLEX})\s+(\d{{1,3}}):(\d{{1,3}})((?:\s*{CONNECTOR}\s*{LIST_ITEM}){{1,6}})",
    re.IGNORECASE,
)
SPACE_SEPARATED_RE = re.compile(
    rf"{BOOK_PREFIX}\b({BOOKS_REGEX_FLEX})\s+(\d{{1,3}})\s+(\d{{1,3}})(?!\d|\s*:)",
    re.IGNORECASE,
)
CHAPTER_LIST_RE = re.compile(
    rf"\b({BOOKS_REGEX_FLEX})\s+(?:chapters\s+(\d{{1,3}})\s*(?:,|-|\band\b|\bto\b|\bthrough\b)"
    rf"|{CHAPTER_WORD}\s+(\d{{1,3}})\s*(?:-|\band\b|\bto\b|\bthrough\b))\s*(\d{{1,3}})\b(?!\s*:)",
    re.IGNORECASE,
)
CHAPTER_RANGE_RE = re.compile(
    rf"\b({BOOKS_REGEX_FLEX})\s+(\d{{1,3}})\s*(?:-|\band\b|\bto\b|\bthrough\b)\s*(\d{{1,3}})\b"
    r"(?!\s*(?:to|-)\s*\d)",
    re.IGNORECASE,
)
VERSE_CUE_RE = re.compile(rf"\b{VERSE_WORD}\b", re.IGNORECASE)
BOOK_CHAPTER_RE = re.compile(
    rf"{BOOK_PREFIX}\b({BOOKS_REGEX_FLEX})\s+{CHAPTER_WORD}\s+(\d{{1,3}})\b(?!\s*:)",
    re.IGNORECASE,
)
CHAPTER_OF_BOOK_RE = re.compile(
    rf"\b{CHAPTER_WORD}\s+(\d{{1,3}})\s+of\s+(?:the\s+)?(?:book\s+of\s+)?({BOOKS_REGEX_FLEX})\b",
    re.IGNORECASE,
)


def _book(text: str) -> str:
    # "Gen." -> "Gen"; the grammar parse resolves the spelling
    return text.strip().rstrip(".")


def _with_ranges(match: re.Match, book: str, chapter: str, verse_list: str) -> str:
    formatted = format_ranges(parse_verse_list(verse_list))
    if not formatted:
        return match.group(0)
    return f"{_book(book)} {chapter}:{formatted}"


def split_concatenated_references(text: str) -> str:
    """"Daniel 2:16Daniel 2:17" -> "Daniel 2:16 Daniel 2:17"."""
    return CONCATENATED_RE.sub(r"\1 \2", text)


def insert_missing_book_space(text: str) -> str:
    """"Daniel2:16" -> "Daniel 2:16"."""
    return MISSING_SPACE_RE.sub(r"\1 \2", text)


def rewrite_chapter_colon(text: str) -> str:
    """"Luke chapter 21:5" -> "Luke 21:5"."""
    return CHAPTER_COLON_RE.sub(lambda m: f"{_book(m.group(1))} {m.group(2)}", text)


def rewrite_verse_list(text: str) -> str:
    """"Romans chapter 3 verses 4, 5 and 7" -> "Romans 3:4-5, 7"."""
    return VERSE_LIST_RE.sub(lambda m: _with_ranges(m, m.group(1), m.group(2), m.group(3)), text)


def rewrite_verse_later(text: str) -> str:
    """
    "Psalms 107, thank you Holy Spirit, verse 15 and 16" -> "Psalms 107:15-16".

    The filler between chapter and "verse" may not contain digits, so
    "Isaiah 56, I mean 58, 6 to 14" is left for the comma rewrite.
    """
    return VERSE_LATER_RE.sub(lambda m: _with_ranges(m, m.group(1), m.group(2), m.group(4)), text)


def rewrite_comma_separated(text: str) -> str:
    """"Romans 3, 5" -> "Romans 3:5"."""
    return COMMA_SEPARATED_RE.sub(
        lambda m: f"{_book(m.group(1))} {m.group(2)}:{m.group(3)}", text
    )


def rewrite_trailing_list(text: str) -> str:
    """"John 3:16 and 17" -> "John 3:16-17", "Isaiah 58:6 to 14" -> "Isaiah 58:6-14"."""
    return TRAILING_LIST_RE.sub(
        lambda m: _with_ranges(m, m.group(1), m.group(2), f"{m.group(3)} {m.group(4)}"), text
    )


def rewrite_space_separated(text: str) -> str:
    """"Romans 8 28" -> "Romans 8:28". Live speech only."""
    return SPACE_SEPARATED_RE.sub(
        lambda m: f"{_book(m.group(1))} {m.group(2)}:{m.group(3)}", text
    )


def rewrite_chapter_list(text: str) -> str:
    """"Exodus chapters 30 and 31" -> "Exodus 30; Exodus 31"."""
    def _replace(match: re.Match) -> str:
        book = _book(match.group(1))
        first = match.group(2) or match.group(3)
        return f"{book} {first}; {book} {match.group(4)}"

    return CHAPTER_LIST_RE.sub(_replace, text)


def rewrite_chapter_range(text: str) -> str:
    """
    "Matthew 21 to 22" -> "Matthew 21; Matthew 22".

    Only when the text has no "c:v" pair and no verse keyword anywhere, so
    "Isaiah 58, 6 to 14" is never read as chapters.
    """
    if ":" in text or VERSE_CUE_RE.search(text):
        return text

    def _replace(match: re.Match) -> str:
        book = _book(match.group(1))
        return f"{book} {match.group(2)}; {book} {match.group(3)}"

    return CHAPTER_RANGE_RE.sub(_replace, text)


def rewrite_chapter_only(text: str) -> str:
    """"Acts chapter 2" / "chapter 2 of Acts" -> "Acts 2"."""
    text = CHAPTER_OF_BOOK_RE.sub(lambda m: f"{_book(m.group(2))} {m.group(1)}", text)
    return BOOK_CHAPTER_RE.sub(lambda m: f"{_book(m.group(1))} {m.group(2)}", text)


VERSE_REWRITES = (
    ("concatenated_references", split_concatenated_references),
    ("missing_book_space", insert_missing_book_space),
    ("chapter_colon", rewrite_chapter_colon),
    ("verse_list", rewrite_verse_list),
    ("verse_later", rewrite_verse_later),
    ("comma_separated", rewrite_comma_separated),
)

CHAPTER_REWRITES = (
    ("chapter_list", rewrite_chapter_list),
    ("chapter_range", rewrite_chapter_range),
    ("chapter_only", rewrite_chapter_only),
)


class ReferenceExtractor:
    """
    Applies the phrasing rewrites to normalized text.

    Text without a book mention is returned unchanged.

    Usage:
        extractor = ReferenceExtractor()
        extractor.extract("Luke chapter 4 verse 1 to 2")   # "Luke 4:1-2"
        extractor.extract("Romans 8 28", aggressive_speech=True)  # "Romans 8:28"
    """

    def __init__(self, books: BookRecognizer = None):
        self.books = books or BookRecognizer()

    def extract(self, text: str, aggressive_speech: bool = False, disambiguator=None) -> str:
        """
        Rewrite text into canonical reference form.

        Args:
            text: Normalized text
            aggressive_speech: Also read "Book C V" as "Book C:V"
            disambiguator: Optional CombinedDigitDisambiguator run between phases

        Returns:
            Rewritten text
        """
        if not self.books.contains_book(text):
            return text

        for name, rewrite in VERSE_REWRITES:
            text = self._apply(name, rewrite, text)
        if aggressive_speech:
            text = self._apply("space_separated", rewrite_space_separated, text)
        text = self._apply("trailing_list", rewrite_trailing_list, text)

        if disambiguator is not None:
            text = self._apply("combined_digits", disambiguator.apply, text)

        for name, rewrite in CHAPTER_REWRITES:
            text = self._apply(name, rewrite, text)
        return text

    def _apply(self, name: str, rewrite, text: str) -> str:
        rewritten = rewrite(text)
        if rewritten != text:
            logger.debug(f"[extract] {name}: {text!r} -> {rewritten!r}")
        return rewritten
