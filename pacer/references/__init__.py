# pacer/references/__init__.py
"""
Scripture reference resolution for live speech and typed queries.

This package provides:
- ReferenceEngine: Stateful resolution of text to corpus-validated passages
- ParseContext: Caller-owned per-session carry-over state
- Passage: Resolved span of scripture with display string
- VerseCorpus: Immutable "Book C:V" -> text lookup
- TextNormalizer: Ordered speech/typo normalization steps
- BookRecognizer: 66-book detection with context-guarded abbreviations
- ReferenceExtractor: Phrasing rewrites to canonical "Book C:V" form
- CombinedDigitDisambiguator: Corpus-validated "John 316" -> "John 3:16"
- ParsedReference / find_references: Grammar parse of canonical strings
"""

from .books import (
    BookRecognizer,
    BOOK_NAMES,
    CANONICAL_BOOKS,
    resolve_book_name,
    is_canonical_book,
)
from .corpus import (
    VerseCorpus,
    VerseKey,
    clean_text,
    load_corpus,
)
from .normalizer import TextNormalizer
from .ranges import (
    VerseRange,
    parse_verse_list,
    merge_ranges,
    format_ranges,
    extract_verse_ranges,
)
from .disambiguator import CombinedDigitDisambiguator
from .extractor import ReferenceExtractor
from .reference_parser import (
    ParsedReference,
    parse_reference,
    find_references,
    is_valid_reference,
)
from .passage import Passage, make_passage, to_display_ref
from .context import ParseContext
from .engine import ReferenceEngine, DetectedVerse, detect_navigation
from .rules_loader import load_speech_rules, reload_speech_rules

__all__ = [
    # Engine (primary interface)
    "ReferenceEngine",
    "ParseContext",
    "Passage",
    "DetectedVerse",
    "detect_navigation",
    # Corpus
    "VerseCorpus",
    "VerseKey",
    "clean_text",
    "load_corpus",
    # Books
    "BookRecognizer",
    "BOOK_NAMES",
    "CANONICAL_BOOKS",
    "resolve_book_name",
    "is_canonical_book",
    # Normalization and extraction
    "TextNormalizer",
    "ReferenceExtractor",
    "CombinedDigitDisambiguator",
    # Verse ranges
    "VerseRange",
    "parse_verse_list",
    "merge_ranges",
    "format_ranges",
    "extract_verse_ranges",
    # Reference parsing
    "ParsedReference",
    "parse_reference",
    "find_references",
    "is_valid_reference",
    # Display
    "make_passage",
    "to_display_ref",
    # Speech rules
    "load_speech_rules",
    "reload_speech_rules",
]
