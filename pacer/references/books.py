# pacer/references/books.py
"""
Bible book names, abbreviations and book detection.

A single table drives everything: the canonical 66-book list, the alias map
used to resolve a spelling to its canonical name, and the compiled patterns
used to find book mentions in text.

Two pattern families are kept separate:
- STRICT: full names ("Genesis", "1 Corinthians", "Song of Songs"). A strict
  match anywhere counts as a book mention.
- ABBREV: shorthand ("Gen", "1 Cor", "Ps"). An abbreviation only counts when
  it is followed by a chapter number, "chapter"/"ch", or "c:v". Ambiguous
  two-letter forms ("Is", "Am") are left out entirely.
"""

import re
from typing import Optional


# (canonical name, extra full-name spellings, abbreviations)
BOOKS = [
    # Torah/Pentateuch
    ("Genesis", [], ["Gen"]),
    ("Exodus", [], ["Exod"]),
    ("Leviticus", [], ["Lev"]),
    ("Numbers", [], ["Num"]),
    ("Deuteronomy", [], ["Deut"]),

    # Historical Books
    ("Joshua", [], ["Josh"]),
    ("Judges", [], ["Judg"]),
    ("Ruth", [], []),
    ("1 Samuel", [], ["1 Sam"]),
    ("2 Samuel", [], ["2 Sam"]),
    ("1 Kings", [], ["1 Kgs"]),
    ("2 Kings", [], ["2 Kgs"]),
    ("1 Chronicles", [], ["1 Chr"]),
    ("2 Chronicles", [], ["2 Chr"]),
    ("Ezra", [], []),
    ("Nehemiah", [], ["Neh"]),
    ("Esther", [], ["Esth"]),

    # Wisdom/Poetry
    ("Job", [], []),
    ("Psalms", ["Psalm"], ["Ps"]),
    ("Proverbs", ["Proverb"], ["Prov"]),
    ("Ecclesiastes", [], ["Eccl"]),
    ("Song of Solomon", ["Song of Songs", "Canticles"], ["Song", "Cant"]),

    # Major Prophets
    ("Isaiah", [], ["Isa"]),
    ("Jeremiah", [], ["Jer"]),
    ("Lamentations", [], ["Lam"]),
    ("Ezekiel", [], ["Ezek"]),
    ("Daniel", [], ["Dan"]),

    # Minor Prophets
    ("Hosea", [], ["Hos"]),
    ("Joel", [], []),
    ("Amos", [], []),
    ("Obadiah", [], ["Obad"]),
    ("Jonah", [], []),
    ("Micah", [], ["Mic"]),
    ("Nahum", [], ["Nah"]),
    ("Habakkuk", [], ["Hab"]),
    ("Zephaniah", [], ["Zeph"]),
    ("Haggai", [], ["Hag"]),
    ("Zechariah", [], ["Zech"]),
    ("Malachi", [], ["Mal"]),

    # Gospels and Acts
    ("Matthew", [], ["Matt"]),
    ("Mark", [], []),
    ("Luke", [], []),
    ("John", [], ["Jn"]),
    ("Acts", [], []),

    # Pauline Epistles
    ("Romans", [], ["Rom"]),
    ("1 Corinthians", [], ["1 Cor"]),
    ("2 Corinthians", [], ["2 Cor"]),
    ("Galatians", [], ["Gal"]),
    ("Ephesians", [], ["Eph"]),
    ("Philippians", [], ["Phil"]),
    ("Colossians", [], ["Col"]),
    ("1 Thessalonians", [], ["1 Thess"]),
    ("2 Thessalonians", [], ["2 Thess"]),
    ("1 Timothy", [], ["1 Tim"]),
    ("2 Timothy", [], ["2 Tim"]),
    ("Titus", [], []),
    ("Philemon", [], ["Phlm"]),

    # General Epistles
    ("Hebrews", [], ["Heb"]),
    ("James", [], ["Jas"]),
    ("1 Peter", [], ["1 Pet"]),
    ("2 Peter", [], ["2 Pet"]),
    ("1 John", [], ["1 Jn"]),
    ("2 John", [], ["2 Jn"]),
    ("3 John", [], ["3 Jn"]),
    ("Jude", [], []),

    # Revelation
    ("Revelation", [], ["Rev"]),
]

CANONICAL_BOOKS = [name for name, _, _ in BOOKS]

# Books whose numbered forms take a roman-numeral prefix in speech ("II Kings")
NUMBERED_BOOK_STEMS = (
    "Samuel", "Kings", "Chronicles", "Corinthians",
    "Thessalonians", "Timothy", "Peter", "John",
)

# One chapter only: "Jude 3" is Jude 1:3
SINGLE_CHAPTER_BOOKS = frozenset({"Obadiah", "Philemon", "2 John", "3 John", "Jude"})


def _alias_key(name: str) -> str:
    """Lookup key for an alias: lowercase, no periods, single spaces."""
    key = name.lower().replace(".", " ")
    key = re.sub(r"\s+", " ", key).strip()
    # "1john" / "1 john" share a key
    return re.sub(r"^([1-3])\s*(?=[a-z])", r"\1 ", key)


def _alias_pattern(alias: str) -> str:
    """Regex fragment for an alias, tolerant of spacing ("1John", "Song  of Songs")."""
    parts = alias.split(" ")
    if parts[0].isdigit():
        return parts[0] + r"\s*" + r"\s+".join(re.escape(p) for p in parts[1:])
    return r"\s+".join(re.escape(p) for p in parts)


def _alternation(aliases: list[str]) -> str:
    # Longest first so "Psalms" wins over "Psalm" and "Philemon" over "Phil"
    ordered = sorted(set(aliases), key=lambda a: (-len(a), a))
    return "(?:" + "|".join(_alias_pattern(a) for a in ordered) + ")"


# Book name mapping - every known spelling to its canonical name
BOOK_NAMES: dict[str, str] = {}
for _canonical, _extra, _abbrevs in BOOKS:
    for _alias in [_canonical, *_extra, *_abbrevs]:
        BOOK_NAMES[_alias_key(_alias)] = _canonical

BOOKS_REGEX_STRICT = _alternation(
    [name for name, extra, _ in BOOKS for name in [name, *extra]]
)
BOOKS_REGEX_ABBREV = _alternation(
    [abbrev for _, _, abbrevs in BOOKS for abbrev in abbrevs]
)
# Any book spelling; abbreviations may carry a trailing period
BOOKS_REGEX_FLEX = rf"(?:{BOOKS_REGEX_STRICT}|{BOOKS_REGEX_ABBREV}\.?)"

# No trailing \b: "Daniel2:16" still mentions Daniel
BOOK_PATTERN_STRICT = re.compile(rf"\b{BOOKS_REGEX_STRICT}(?![A-Za-z])", re.IGNORECASE)
BOOK_ABBREV_CONTEXT_PATTERN = re.compile(
    rf"\b{BOOKS_REGEX_ABBREV}\b\.?(?=\s*(?:\d{{1,3}}|chapter\b|ch\b))",
    re.IGNORECASE,
)
BOOK_ABBREV_JOINED_PATTERN = re.compile(
    rf"\b{BOOKS_REGEX_ABBREV}\.?\s*\d{{1,3}}(?::\d{{1,3}})?\b",
    re.IGNORECASE,
)


def resolve_book_name(name: str) -> Optional[str]:
    """
    Resolve any recognized spelling to its canonical book name.

    Args:
        name: Book text as found in input ("ps", "1john", "Song of Songs")

    Returns:
        Canonical name (e.g., "Psalms", "1 John") or None if unknown
    """
    if not name:
        return None
    return BOOK_NAMES.get(_alias_key(name))


def is_canonical_book(name: str) -> bool:
    return name in CANONICAL_BOOKS


class BookRecognizer:
    """
    Detects Bible book mentions in normalized text.

    Usage:
        recognizer = BookRecognizer()
        recognizer.contains_book("turn to Romans 8")     # True
        recognizer.contains_book("Is this ok?")          # False
        recognizer.contains_book("Gen 1:1")              # True
    """

    def __init__(self):
        self.strict = BOOK_PATTERN_STRICT
        self.abbrev_context = BOOK_ABBREV_CONTEXT_PATTERN
        self.abbrev_joined = BOOK_ABBREV_JOINED_PATTERN

    def contains_book(self, text: str) -> bool:
        """
        Check whether text mentions a Bible book.

        Full names count anywhere. Abbreviations only count when followed
        by a chapter number, "chapter"/"ch", or a "c:v" pair.
        """
        if not text:
            return False
        if self.strict.search(text):
            return True
        return bool(
            self.abbrev_context.search(text) or self.abbrev_joined.search(text)
        )
