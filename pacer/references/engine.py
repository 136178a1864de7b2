# pacer/references/engine.py
"""
Reference resolution engine.

Ties the pipeline together for one call:

    text ─► navigation? ─► numbered list? ─► TextNormalizer ─► book?
              │                                              │
              ▼                                  yes ◄───────┴───────► no
         ParseContext                             │                    │
                                   ReferenceExtractor                  contextual
                                   (+ CombinedDigitDisambiguator)      continuation
                                                  │                    │
                                           grammar parse               │
                                                  ▼                    ▼
                                             corpus validation ◄───────┘
                                                  │
                                        ParseContext.update_from()

The engine itself is immutable after construction; all per-session state
lives in the ParseContext the caller passes in.
"""

import logging
import re
from dataclasses import dataclass, asdict
from typing import Optional

from ..core.config import AGGRESSIVE_SPEECH, DEBUG_PARSE
from .books import BookRecognizer
from .context import ParseContext
from .corpus import VerseCorpus, VerseKey, clean_text, load_corpus
from .disambiguator import CombinedDigitDisambiguator
from .extractor import ReferenceExtractor
from .normalizer import NUMBER_WORDS_PATTERN, TextNormalizer
from .passage import Passage, make_passage
from .ranges import extract_verse_ranges
from .reference_parser import ParsedReference, find_references

logger = logging.getLogger(__name__)


# Chapter patterns first: "go back a chapter" is not "go back"
NAVIGATION_PATTERNS = (
    ("next_chapter", re.compile(r"\bnext\s+chapter\b|\bchapter\s+after\b")),
    ("previous_chapter", re.compile(
        r"\b(?:previous|prior|last)\s+chapter\b|\bgo\s+back\s+a\s+chapter\b"
    )),
    ("next", re.compile(r"\bnext\s+(?:verse|scripture|one)\b|\bgo\s+(?:to\s+)?next\b|\bshow\s+next\b")),
    ("previous", re.compile(r"\b(?:previous|last)\s+(?:verse|scripture|one)\b|\bgo\s+back\b")),
)

EXPLICIT_CHAPTER_RE = re.compile(r"\b(?:chapter|ch)\s*(\d{1,3})\b", re.IGNORECASE)
CHAPTER_VERSE_CUE_RE = re.compile(r"\b(?:chapter|ch|verse|verses|v|vs)\b")
NUMBERED_LIST_RE = re.compile(rf"\bnumber\s+(?:\d{{1,3}}|{NUMBER_WORDS_PATTERN})\b")


def detect_navigation(text: str) -> Optional[str]:
    """
    Classify a navigation command.

    Returns:
        "next", "previous", "next_chapter", "previous_chapter" or None
    """
    lowered = text.lower().strip()
    for command, pattern in NAVIGATION_PATTERNS:
        if pattern.search(lowered):
            return command
    return None


def is_likely_numbered_list(text: str, books: BookRecognizer) -> bool:
    """
    "point number three", "number 2 on the list": list chatter, not scripture.

    The book "Numbers" and any chapter/verse cue keep the text eligible.
    """
    lowered = (text or "").lower().strip()
    if not re.search(r"\bnumber\b", lowered):
        return False
    if re.search(r"\bnumbers\b", lowered):
        return False
    if books.contains_book(lowered):
        return False
    if CHAPTER_VERSE_CUE_RE.search(lowered) or re.search(r"\d{1,3}:\d{1,3}", lowered):
        return False
    return bool(NUMBERED_LIST_RE.search(lowered))


@dataclass
class DetectedVerse:
    """
    A single looked-up verse, ready for display.

    Attributes:
        reference: "Book C:V"
        display_ref: "Book C:V"
        verse_text: Cleaned verse text
        book: Canonical book name
        chapter: Chapter number
        verse: Verse number
        transcript_text: The input text that produced this verse
        is_navigation_result: True when produced by "next verse" etc.
    """
    reference: str
    display_ref: str
    verse_text: str
    book: str
    chapter: int
    verse: int
    transcript_text: str
    is_navigation_result: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


class ReferenceEngine:
    """
    Resolves free-form text to corpus-validated passages.

    Usage:
        engine = ReferenceEngine()              # loads the configured corpus
        context = ParseContext()

        engine.resolve("Turn to Psalms 91:2", context)   # [Passage(Psalms 91:2)]
        engine.resolve("verse 3", context)               # [Passage(Psalms 91:3)]
        engine.resolve("next verse", context)            # [Passage(Psalms 91:4)]

        for verse in engine.detect_and_lookup("John 3:16-17", context):
            print(verse.display_ref, verse.verse_text)
    """

    def __init__(
        self,
        corpus: VerseCorpus = None,
        rules_path: str = None,
        aggressive_speech: bool = AGGRESSIVE_SPEECH,
        debug: bool = DEBUG_PARSE,
    ):
        self.corpus = corpus or load_corpus()
        self.books = BookRecognizer()
        self.normalizer = TextNormalizer(rules_path)
        self.extractor = ReferenceExtractor(self.books)
        self.disambiguator = CombinedDigitDisambiguator(self.corpus)
        self.aggressive_speech = aggressive_speech
        self.debug = debug

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve(
        self,
        text: str,
        context: ParseContext,
        aggressive_speech: bool = None,
    ) -> list[Passage]:
        """
        Resolve text to passages, updating context on success.

        Args:
            text: Raw transcript chunk or typed query
            context: Caller-owned session context
            aggressive_speech: Override the engine default for "Book C V"

        Returns:
            Passages in order of appearance; [] when nothing resolves
        """
        passages, _ = self._resolve(text, context, aggressive_speech)
        return passages

    def _resolve(
        self,
        text: str,
        context: ParseContext,
        aggressive_speech: bool = None,
    ) -> tuple[list[Passage], bool]:
        if not text or not text.strip():
            return [], False
        if aggressive_speech is None:
            aggressive_speech = self.aggressive_speech

        normalized = self._normalize(text)
        has_book = self.books.contains_book(normalized)

        command = None if has_book else detect_navigation(text)
        if command:
            passages = self._navigate(command, context)
            if passages:
                context.update_from(passages)
            return passages, True

        if is_likely_numbered_list(text, self.books):
            logger.debug(f"[parse] numbered list, skipped: {text!r}")
            return [], False

        if has_book:
            canonical = self.extractor.extract(normalized, aggressive_speech, self.disambiguator)
            if self.debug:
                logger.debug(f"[parse] canonical: {canonical!r}")
            passages = self._validate_all(find_references(canonical))
        else:
            passages = self._resolve_contextual(normalized, context)

        if self.debug:
            logger.debug(f"[parse] passages: {[p.display_ref for p in passages]}")

        if passages:
            context.update_from(passages)
        return passages, False

    def _normalize(self, text: str) -> str:
        if not self.debug:
            return self.normalizer.normalize(text)

        logger.debug(f"[parse] raw: {text!r}")
        output = text
        for name, output in self.normalizer.trace(text):
            logger.debug(f"[parse] {name}: {output!r}")
        return output

    def _resolve_contextual(self, text: str, context: ParseContext) -> list[Passage]:
        """
        Book-less continuation: "verse 16", "chapter 5 verse 2", "chapter 8".

        Needs a book in context and either an explicit chapter or a verse list.
        """
        if context.is_empty():
            return []

        chapter_match = EXPLICIT_CHAPTER_RE.search(text)
        explicit_chapter = int(chapter_match.group(1)) if chapter_match else None
        if explicit_chapter is not None and explicit_chapter <= 0:
            explicit_chapter = None

        ranges = extract_verse_ranges(text)
        chapter = explicit_chapter or context.chapter

        if chapter and ranges:
            refs = [
                ParsedReference(context.book, chapter, r.start, r.end, original=text)
                for r in ranges
            ]
        elif explicit_chapter:
            refs = [ParsedReference(context.book, explicit_chapter, 1, original=text, is_chapter=True)]
        else:
            return []

        return self._validate_all(refs)

    def _validate_all(self, refs: list[ParsedReference]) -> list[Passage]:
        passages = []
        for ref in refs:
            passage = self._validate(ref)
            if passage:
                passages.append(passage)
        return passages

    def _validate(self, ref: ParsedReference) -> Optional[Passage]:
        """
        Check a parsed reference against the corpus.

        The start verse must exist. An end beyond the chapter is clamped to
        the chapter's last verse.
        """
        if not self.corpus.exists(VerseKey(ref.book, ref.chapter, ref.verse_start)):
            logger.debug(f"[parse] not in corpus: {ref.normalized}")
            return None

        end_chapter = ref.end_chapter or ref.chapter
        end_verse = ref.verse_end or ref.verse_start

        if end_chapter != ref.chapter and self.corpus.last_verse(ref.book, end_chapter) is None:
            end_chapter = ref.chapter
            end_verse = self.corpus.last_verse(ref.book, ref.chapter)

        last = self.corpus.last_verse(ref.book, end_chapter)
        if end_verse > last:
            logger.debug(f"[parse] clamped {ref.normalized} to verse {last}")
            end_verse = last
        if end_chapter == ref.chapter and end_verse < ref.verse_start:
            end_verse = ref.verse_start

        return make_passage(
            ref.book,
            ref.chapter,
            ref.verse_start,
            end_verse=end_verse,
            end_chapter=end_chapter,
            is_chapter=ref.is_chapter,
        )

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _navigate(self, command: str, context: ParseContext) -> list[Passage]:
        if context.is_empty() or not context.chapter:
            return []

        chapter = context.end_chapter or context.chapter
        target = None

        if command in ("next", "previous"):
            if not context.verse:
                return []
            anchor = VerseKey(context.book, chapter, context.verse)
            if command == "next":
                target = self.corpus.next_key(anchor)
            else:
                target = self.corpus.previous_key(anchor)
            is_chapter = False
        else:
            step = 1 if command == "next_chapter" else -1
            candidate = VerseKey(context.book, chapter + step, 1)
            if candidate.chapter > 0 and self.corpus.exists(candidate):
                target = candidate
            is_chapter = True

        if target is None:
            return []
        return [make_passage(target.book, target.chapter, target.verse, is_chapter=is_chapter)]

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def lookup_verses(self, passage: Passage) -> list[tuple[VerseKey, str]]:
        """All verses of a passage with cleaned text."""
        return [
            (key, clean_text(self.corpus.text(key)))
            for key in self.corpus.expand(passage)
        ]

    def detect_and_lookup(
        self,
        text: str,
        context: ParseContext,
        aggressive_speech: bool = None,
    ) -> list[DetectedVerse]:
        """
        Resolve text and expand every passage to single verses.

        Returns:
            DetectedVerse records in passage order
        """
        passages, is_navigation = self._resolve(text, context, aggressive_speech)
        results = []
        for passage in passages:
            for key, verse_text in self.lookup_verses(passage):
                results.append(DetectedVerse(
                    reference=str(key),
                    display_ref=str(key),
                    verse_text=verse_text,
                    book=key.book,
                    chapter=key.chapter,
                    verse=key.verse,
                    transcript_text=text,
                    is_navigation_result=is_navigation,
                ))
        return results
