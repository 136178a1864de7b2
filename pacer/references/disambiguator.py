# pacer/references/disambiguator.py
"""
Combined chapter+verse digit splitting.

Speech-to-text often drops the separator: "John 316" for John 3:16, or
"Psalms 107" for ... Psalms 107 (a real chapter) or Psalms 10:7. The only
safe arbiter is the corpus: every split of the digit run is tried and the
text is rewritten only when exactly one split names a real verse.
"""

import logging
import re

from .books import BOOKS_REGEX_FLEX, resolve_book_name
from .corpus import VerseCorpus, VerseKey

logger = logging.getLogger(__name__)

COMBINED_DIGITS_RE = re.compile(
    rf"(?:\b(?:the\s+)?(?:book\s+of\s+))?\b(?P<book>{BOOKS_REGEX_FLEX})\s*(?P<combined>\d{{3,5}})\b",
    re.IGNORECASE,
)
CHAPTER_CUE_RE = re.compile(r"\b(?:verses|verse|vs|v)\b", re.IGNORECASE)
# "Psalms 119 to 120" is a chapter range, not 11:9
CHAPTER_RANGE_RE = re.compile(r"\s*(?:-|\bto\b|\bthrough\b|\bthru\b|\band\b)\s*\d", re.IGNORECASE)
CHAPTER_CUE_WINDOW = 100
CLOSING_PUNCTUATION = "),.;"

# Chapter numbers are one or two digits in practice
CHAPTER_SPLITS = (1, 2)


class CombinedDigitDisambiguator:
    """
    Rewrites "Book NNN" to "Book C:V" when the corpus allows exactly one reading.

    Usage:
        disambiguator = CombinedDigitDisambiguator(corpus)
        disambiguator.candidates("John", "316")   # [VerseKey("John", 3, 16)]
        disambiguator.apply("John 316")           # "John 3:16"
    """

    def __init__(self, corpus: VerseCorpus):
        self.corpus = corpus

    def candidates(self, book: str, digits: str) -> list[VerseKey]:
        """All splits of a digit run that exist in the corpus."""
        found = []
        for split in CHAPTER_SPLITS:
            if len(digits) <= split:
                continue
            chapter, verse = int(digits[:split]), int(digits[split:])
            if chapter <= 0 or verse <= 0:
                continue
            key = VerseKey(book, chapter, verse)
            if self.corpus.exists(key):
                found.append(key)
        return found

    def _is_chapter_mention(self, text: str, end: int) -> bool:
        next_char = text[end:end + 1]
        if next_char == ":" or (next_char and next_char in CLOSING_PUNCTUATION):
            return True
        if CHAPTER_RANGE_RE.match(text, end):
            return True
        return bool(CHAPTER_CUE_RE.search(text[end:end + CHAPTER_CUE_WINDOW]))

    def apply(self, text: str) -> str:
        result = text
        pos = 0
        while True:
            match = COMBINED_DIGITS_RE.search(result, pos)
            if not match:
                return result
            pos = match.end()

            if self._is_chapter_mention(result, match.end()):
                continue

            book = resolve_book_name(match.group("book"))
            if not book:
                continue

            valid = self.candidates(book, match.group("combined"))
            if len(valid) != 1:
                if len(valid) > 1:
                    logger.debug(f"Ambiguous digits {match.group(0)!r}: {[str(k) for k in valid]}")
                continue

            replacement = str(valid[0])
            result = result[:match.start()] + replacement + result[match.end():]
            pos = match.start() + len(replacement)
