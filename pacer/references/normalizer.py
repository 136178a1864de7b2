# pacer/references/normalizer.py
"""
Text normalization for spoken and typed scripture references.

Speech-to-text output rarely looks like "John 3:16". It looks like
"John. Chapter three, verse sixteen" or "II Samuel chapter iv". The steps
here rewrite raw text into a digit-based form that the extractor can match.

Every step is a pure str -> str function. TextNormalizer.steps fixes their
order; the order is part of the contract:

1. preprocess                      periods, word commas, typos, misheard book names
2. normalize_roman_book_numerals   "II Samuel" -> "2 Samuel" (before number words)
3. words_to_numbers                "twenty three" -> "23", "first" -> "1"
4. strip_ordinal_suffixes          "21st" -> "21"
5. normalize_roman_chapter_verse   "chapter iv" -> "chapter 4"
6. normalize_spoken_chapter_digits "Psalms 1 0 7 verse" -> "Psalms 107 verse"
7. normalize_verse_keyword_spacing "21, verse" -> "21 verse", "from verse" -> "verse"
"""

import logging
import re
from typing import Callable, Dict, List, Optional, Tuple

from .books import BOOKS_REGEX_FLEX, NUMBERED_BOOK_STEMS
from .rules_loader import get_homophones, get_transcription_errors, get_typos

logger = logging.getLogger(__name__)


ONES = {
    "zero": 0, "one": 1, "two": 2, "three": 3, "four": 4,
    "five": 5, "six": 6, "seven": 7, "eight": 8, "nine": 9,
}
TEENS = {
    "ten": 10, "eleven": 11, "twelve": 12, "thirteen": 13, "fourteen": 14,
    "fifteen": 15, "sixteen": 16, "seventeen": 17, "eighteen": 18, "nineteen": 19,
}
TENS = {
    "twenty": 20, "thirty": 30, "forty": 40, "fifty": 50,
    "sixty": 60, "seventy": 70, "eighty": 80, "ninety": 90,
}
ORDINALS = {
    "first": 1, "second": 2, "third": 3, "fourth": 4, "fifth": 5,
    "sixth": 6, "seventh": 7, "eighth": 8, "ninth": 9, "tenth": 10,
    "eleventh": 11, "twelfth": 12,
}
NUMBER_WORDS = {**ONES, **TEENS, **TENS, **ORDINALS}

NUMBER_WORDS_PATTERN = (
    "(?:" + "|".join(sorted([*NUMBER_WORDS, "hundred"], key=len, reverse=True)) + ")"
)

_ONES_OR_ORDINAL = "|".join(
    sorted([w for w in [*ONES, *ORDINALS] if NUMBER_WORDS[w] < 10 and w != "zero"],
           key=len, reverse=True)
)
COMPOUND_NUMBER_RE = re.compile(
    rf"\b({'|'.join(TENS)})(?:\s+|-)({_ONES_OR_ORDINAL})\b", re.IGNORECASE
)
SIMPLE_NUMBER_RE = re.compile(
    rf"\b({'|'.join(sorted(NUMBER_WORDS, key=len, reverse=True))})\b", re.IGNORECASE
)
HUNDRED_RE = re.compile(
    r"\b(?:(\d)\s+)?hundred(?:(?:\s+and)?\s+(\d{1,2})\b)?", re.IGNORECASE
)
ORDINAL_SUFFIX_RE = re.compile(r"\b(\d{1,3})(?:st|nd|rd|th)\b", re.IGNORECASE)

ROMAN_BOOK_RE = re.compile(
    rf"\b(I{{1,3}})\.?\s+(?=(?:{'|'.join(NUMBERED_BOOK_STEMS)})\b)", re.IGNORECASE
)
ROMAN_LABEL_RE = re.compile(
    r"\b(chapter|ch|verses|verse|vs|v)\s+([ivxlc]{1,6})\b", re.IGNORECASE
)
ROMAN_VALUES = {"i": 1, "v": 5, "x": 10, "l": 50, "c": 100}

SPOKEN_CHAPTER_DIGITS_RE = re.compile(
    rf"\b({BOOKS_REGEX_FLEX})\s+(?:chapter\s+)?(\d)\s+(\d)\s+(\d)"
    r"(?=\s*(?:,\s*)?(?:verses|verse|vs|v)\b)",
    re.IGNORECASE,
)
STRAY_SLASH_RE = re.compile(rf"[\\/]+(?={BOOKS_REGEX_FLEX})", re.IGNORECASE)
DASH_RE = re.compile("[–—]")


def collapse_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def normalize_dash_variants(text: str) -> str:
    """En/em dashes -> hyphen."""
    return DASH_RE.sub("-", text)


def fix_typos(text: str, typos: Dict[str, str]) -> str:
    for typo, fixed in typos.items():
        text = re.sub(rf"\b{re.escape(typo)}\b", fixed, text, flags=re.IGNORECASE)
    return text


def correct_transcription_errors(text: str, corrections: Dict[str, str]) -> str:
    """
    Fix misheard book names ("axe chapter 1" -> "Acts chapter 1").

    A correction only applies when the phrase is followed by a number, a
    number word, or "chapter"/"ch", so "look at this" stays untouched.
    Longer phrases are applied first.
    """
    follow = rf"(?=\s+(?:\d+|{NUMBER_WORDS_PATTERN}|chapter|ch)\b)"
    for error in sorted(corrections, key=len, reverse=True):
        phrase = r"\s+".join(re.escape(part) for part in error.split())
        pattern = re.compile(rf"\b{phrase}\b{follow}", re.IGNORECASE)
        text = pattern.sub(corrections[error], text)
    return text


def correct_homophones(text: str, homophones: Dict[str, str]) -> str:
    """Words that sound like a book, only before "chapter" ("due chapter 2")."""
    for word, book in homophones.items():
        text = re.sub(
            rf"\b{re.escape(word)}\s+(?=(?:chapter|ch)\b)",
            f"{book} ",
            text,
            flags=re.IGNORECASE,
        )
    return text


def preprocess(
    text: str,
    corrections: Optional[Dict[str, str]] = None,
    homophones: Optional[Dict[str, str]] = None,
    typos: Optional[Dict[str, str]] = None,
) -> str:
    """
    First-pass cleanup of raw transcript text.

    - "Luke. Three. Three." -> "Luke Three Three"
    - "Romans, three, five" -> "Romans three five" (commas after digits survive)
    - typo and misheard book name fixes
    - "\\Psalms 91:2" -> "Psalms 91:2"
    """
    text = re.sub(r"\.\s*", " ", text)
    text = re.sub(r"([A-Za-z])\s*,\s*(?=[A-Za-z0-9])", r"\1 ", text)

    text = fix_typos(text, typos or {})
    text = correct_transcription_errors(text, corrections or {})
    text = correct_homophones(text, homophones or {})
    text = STRAY_SLASH_RE.sub("", text)

    text = normalize_dash_variants(text)
    return collapse_whitespace(text)


def normalize_roman_book_numerals(text: str) -> str:
    """"II Samuel" -> "2 Samuel", "iii John" -> "3 John"."""
    return ROMAN_BOOK_RE.sub(lambda m: f"{len(m.group(1))} ", text)


def words_to_numbers(text: str) -> str:
    """
    Replace spoken numbers with digits.

    Handles compounds ("twenty-three", "forty first"), ordinals ("third")
    and hundreds ("one hundred and nineteen" -> "119").
    """
    text = COMPOUND_NUMBER_RE.sub(
        lambda m: str(TENS[m.group(1).lower()] + NUMBER_WORDS[m.group(2).lower()]),
        text,
    )
    text = SIMPLE_NUMBER_RE.sub(lambda m: str(NUMBER_WORDS[m.group(1).lower()]), text)
    return HUNDRED_RE.sub(
        lambda m: str(int(m.group(1) or 1) * 100 + int(m.group(2) or 0)),
        text,
    )


def strip_ordinal_suffixes(text: str) -> str:
    return ORDINAL_SUFFIX_RE.sub(r"\1", text)


def int_to_roman(value: int) -> str:
    numerals = (
        (100, "c"), (90, "xc"), (50, "l"), (40, "xl"),
        (10, "x"), (9, "ix"), (5, "v"), (4, "iv"), (1, "i"),
    )
    out = []
    for amount, numeral in numerals:
        while value >= amount:
            out.append(numeral)
            value -= amount
    return "".join(out)


def roman_to_int(roman: str) -> Optional[int]:
    """Parse a well-formed roman numeral; words like "civil" return None."""
    total = 0
    prev = 0
    for char in reversed(roman.lower()):
        value = ROMAN_VALUES.get(char)
        if not value:
            return None
        if value < prev:
            total -= value
        else:
            total += value
            prev = value
    if total <= 0 or int_to_roman(total) != roman.lower():
        return None
    return total


def normalize_roman_chapter_verse(text: str) -> str:
    """
    "chapter iv" -> "chapter 4", "verse xii" -> "verse 12".

    A lone "I" followed by another word is the pronoun ("in this verse I
    see") and is left alone.
    """
    def _replace(match: re.Match) -> str:
        label, roman = match.group(1), match.group(2)
        if roman.lower() == "i" and re.match(r"\s+[A-Za-z]", match.string[match.end():]):
            return match.group(0)
        value = roman_to_int(roman)
        if not value:
            return match.group(0)
        return f"{label} {value}"

    return ROMAN_LABEL_RE.sub(_replace, text)


def normalize_spoken_chapter_digits(text: str) -> str:
    """Digits read one at a time: "Psalms 1 0 7 verse 15" -> "Psalms 107 verse 15"."""
    return SPOKEN_CHAPTER_DIGITS_RE.sub(
        lambda m: f"{m.group(1)} {m.group(2)}{m.group(3)}{m.group(4)}", text
    )


def normalize_verse_keyword_spacing(text: str) -> str:
    text = normalize_dash_variants(text)
    text = re.sub(r"\b(\d{1,3})\s*,\s*(?=(?:verses|verse|vs|v)\b)", r"\1 ", text, flags=re.IGNORECASE)
    text = re.sub(r"\bfrom\s+(verses|verse|vv|vs|v)\b", r"\1", text, flags=re.IGNORECASE)
    return collapse_whitespace(text)


class TextNormalizer:
    """
    Ordered normalization pipeline.

    Usage:
        normalizer = TextNormalizer()
        normalizer.normalize("Second Kings, chapter five, verse twenty-one")
        # -> "2 Kings chapter 5 verse 21"

        for name, output in normalizer.trace("John chapter iii verse 16"):
            print(name, output)
    """

    def __init__(self, rules_path: str = None):
        corrections = get_transcription_errors(rules_path)
        homophones = get_homophones(rules_path)
        typos = get_typos(rules_path)

        def _preprocess(text: str) -> str:
            return preprocess(text, corrections, homophones, typos)

        self.steps: Tuple[Tuple[str, Callable[[str], str]], ...] = (
            ("preprocess", _preprocess),
            ("roman_book_numerals", normalize_roman_book_numerals),
            ("words_to_numbers", words_to_numbers),
            ("ordinal_suffixes", strip_ordinal_suffixes),
            ("roman_chapter_verse", normalize_roman_chapter_verse),
            ("spoken_chapter_digits", normalize_spoken_chapter_digits),
            ("verse_keyword_spacing", normalize_verse_keyword_spacing),
        )

    def normalize(self, text: str) -> str:
        for _, step in self.steps:
            text = step(text)
        return text

    def trace(self, text: str) -> List[Tuple[str, str]]:
        """Run every step and return (step name, output) pairs."""
        outputs = []
        for name, step in self.steps:
            text = step(text)
            outputs.append((name, text))
        return outputs
