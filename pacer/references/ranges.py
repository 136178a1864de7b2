# pacer/references/ranges.py
"""
Verse list parsing.

Turns the tail of a spoken or typed reference ("15 and 16", "15-18",
"4, 5 and 7", "29 through 31") into sorted, merged VerseRange values.
"""

import re
from dataclasses import dataclass
from typing import Optional

from .books import BOOKS_REGEX_FLEX
from .normalizer import normalize_dash_variants

MAX_VERSE = 200

VERSE_KEYWORD = r"(?:verses|verse|vv|vs|v)"

# Stops a free-form verse list at the next chapter or book mention
VERSE_LIST_STOP_RE = re.compile(rf"\b(?:chapter|ch|{BOOKS_REGEX_FLEX})\b", re.IGNORECASE)
VERSE_LIST_TOKEN_RE = re.compile(rf"\b{VERSE_KEYWORD}\s+([^.;\n]{{0,80}})", re.IGNORECASE)
RANGE_TOKEN_RE = re.compile(r"^(\d{1,3})\s*(?:-|to)\s*(\d{1,3})$", re.IGNORECASE)
EXPLICIT_VERSE_RE = re.compile(
    rf"\b{VERSE_KEYWORD}\s+(\d{{1,3}})(?:\s*(?:-|to|through|thru)\s*(\d{{1,3}}))?",
    re.IGNORECASE,
)


@dataclass
class VerseRange:
    """
    Inclusive verse span within one chapter.

    Attributes:
        start: First verse (1-based)
        end: Last verse, >= start
    """
    start: int
    end: int

    def __str__(self) -> str:
        if self.start == self.end:
            return str(self.start)
        return f"{self.start}-{self.end}"


def is_valid_verse_number(value: int) -> bool:
    return 0 < value <= MAX_VERSE


def merge_ranges(ranges: list[VerseRange]) -> list[VerseRange]:
    """
    Sort by start and merge overlapping or adjacent ranges.

    [15-16, 18, 17] -> [15-18]
    """
    if not ranges:
        return []
    ordered = sorted(ranges, key=lambda r: (r.start, r.end))
    merged = [VerseRange(ordered[0].start, ordered[0].end)]
    for current in ordered[1:]:
        last = merged[-1]
        if current.start <= last.end + 1:
            last.end = max(last.end, current.end)
        else:
            merged.append(VerseRange(current.start, current.end))
    return merged


def parse_verse_list(raw: str) -> list[VerseRange]:
    """
    Parse a verse list into merged ranges.

    Args:
        raw: Verse list text, e.g. "15 and 16", "15-18, 20", "4 through 6"

    Returns:
        Merged VerseRange list; numbers <= 0 or > 200 are dropped
    """
    cleaned = normalize_dash_variants(raw or "")
    cleaned = re.sub(r"\b(?:through|thru)\b", "to", cleaned, flags=re.IGNORECASE)
    cleaned = re.sub(r"\band\b|&", ",", cleaned, flags=re.IGNORECASE)
    cleaned = re.sub(rf"\b{VERSE_KEYWORD}\b", " ", cleaned, flags=re.IGNORECASE)
    cleaned = re.sub(r"\s+", " ", cleaned).strip()
    if not cleaned:
        return []

    ranges = []
    for token in re.split(r"[,;]+", cleaned):
        token = token.strip()
        if not token:
            continue

        range_match = RANGE_TOKEN_RE.match(token)
        if range_match:
            start, end = int(range_match.group(1)), int(range_match.group(2))
            if is_valid_verse_number(start) and is_valid_verse_number(end):
                ranges.append(VerseRange(min(start, end), max(start, end)))
            continue

        for number in re.findall(r"\d+", token):
            value = int(number)
            if is_valid_verse_number(value):
                ranges.append(VerseRange(value, value))

    return merge_ranges(ranges)


def format_ranges(ranges: list[VerseRange]) -> Optional[str]:
    """Render ranges as "15-18, 20"; None when there is nothing to render."""
    if not ranges:
        return None
    return ", ".join(str(r) for r in merge_ranges(ranges))


def trim_verse_list_tail(raw: str) -> str:
    """Cut a verse list at the next "chapter" or book mention."""
    if not raw:
        return raw
    match = VERSE_LIST_STOP_RE.search(raw)
    return (raw[:match.start()] if match else raw).strip()


def extract_verse_ranges(text: str) -> list[VerseRange]:
    """
    Find verse numbers introduced by a verse keyword anywhere in text.

    Used for book-less continuation: "and verse 16", "verses 2 and 3".
    """
    ranges = []
    token = VERSE_LIST_TOKEN_RE.search(text)
    if token:
        ranges.extend(parse_verse_list(trim_verse_list_tail(token.group(1))))

    for match in EXPLICIT_VERSE_RE.finditer(text):
        start = int(match.group(1))
        end = int(match.group(2)) if match.group(2) else start
        if is_valid_verse_number(start) and is_valid_verse_number(end):
            ranges.append(VerseRange(min(start, end), max(start, end)))

    return merge_ranges(ranges)
