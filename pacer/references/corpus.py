# pacer/references/corpus.py
"""
Verse corpus: the authoritative "Book Chapter:Verse" -> text lookup.

The corpus is a single JSON object:

    {
        "Genesis 1:1": "In the beginning God created the heaven and the earth.",
        "Genesis 1:2": "And the earth was without form, and void; ...",
        ...
    }

It is loaded once, fully, and never mutated afterwards. A missing or broken
corpus is fatal: the engine cannot validate anything without it.
"""

import json
import logging
import re
from pathlib import Path
from typing import NamedTuple, Optional, Union

import requests

from ..core.config import CACHE_DIR, DOWNLOAD_TIMEOUT, VERSES_PATH, VERSES_URL
from ..utils.errors import CorpusDownloadError, CorpusLoadError

logger = logging.getLogger(__name__)

KEY_PATTERN = re.compile(r"^(?P<book>\S.*?) (?P<chapter>\d{1,3}):(?P<verse>\d{1,3})$")


class VerseKey(NamedTuple):
    """Canonical verse address, rendered as "Book C:V"."""
    book: str
    chapter: int
    verse: int

    def __str__(self) -> str:
        return f"{self.book} {self.chapter}:{self.verse}"

    @classmethod
    def parse(cls, key: str) -> Optional["VerseKey"]:
        match = KEY_PATTERN.match(key.strip())
        if not match:
            return None
        return cls(match.group("book"), int(match.group("chapter")), int(match.group("verse")))


KeyLike = Union[VerseKey, str]


def clean_text(text: str) -> str:
    """Strip a leading paragraph mark and the brackets around italic words."""
    text = re.sub(r"^#\s*", "", text)
    return re.sub(r"\[([^\]]+)\]", r"\1", text)


class VerseCorpus:
    """
    Immutable verse lookup.

    Usage:
        corpus = VerseCorpus.from_file("data/verses-kjv.json")
        corpus.exists("John 3:16")                     # True
        corpus.text(VerseKey("John", 3, 16))           # "For God so loved ..."
        corpus.last_verse("John", 3)                   # 36
        corpus.next_key(VerseKey("John", 3, 36))       # VerseKey("John", 4, 1)
    """

    def __init__(self, verses: dict):
        if not isinstance(verses, dict):
            raise CorpusLoadError("Verse corpus must be a JSON object")
        if not verses:
            raise CorpusLoadError("Verse corpus is empty")

        self._verses: dict[str, str] = {}
        self._last_verse: dict[tuple[str, int], int] = {}
        for raw_key, text in verses.items():
            key = VerseKey.parse(str(raw_key))
            if key is None or key.chapter <= 0 or key.verse <= 0:
                raise CorpusLoadError(f"Malformed verse key: {raw_key!r}")
            if not isinstance(text, str):
                raise CorpusLoadError(f"Verse text must be a string: {raw_key!r}")
            self._verses[str(key)] = text
            chapter = (key.book, key.chapter)
            self._last_verse[chapter] = max(self._last_verse.get(chapter, 0), key.verse)

    def __len__(self) -> int:
        return len(self._verses)

    def __contains__(self, key: KeyLike) -> bool:
        return self.exists(key)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "VerseCorpus":
        """
        Load a corpus from a JSON file.

        Raises:
            CorpusLoadError: If the file is missing, unreadable or malformed
        """
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                verses = json.load(f)
        except FileNotFoundError:
            raise CorpusLoadError(f"Verse corpus not found: {path}")
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise CorpusLoadError(f"Verse corpus is not valid JSON: {path}: {e}")
        except OSError as e:
            raise CorpusLoadError(f"Failed to read verse corpus {path}: {e}")

        corpus = cls(verses)
        logger.info(f"Loaded {len(corpus)} verses from {path}")
        return corpus

    @classmethod
    def from_url(cls, url: str, cache_path: Union[str, Path]) -> "VerseCorpus":
        """
        Load a corpus from a URL, caching the download on disk.

        The cached file is served on every later call; delete it to refresh.

        Raises:
            CorpusDownloadError: If the download fails and nothing is cached
            CorpusLoadError: If the downloaded file is not a valid corpus
        """
        cache_path = Path(cache_path)
        if cache_path.exists():
            logger.debug(f"Cache hit for verse corpus: {cache_path}")
            return cls.from_file(cache_path)

        cache_path.parent.mkdir(parents=True, exist_ok=True)
        part_path = cache_path.with_name(cache_path.name + ".part")

        logger.info(f"Downloading verse corpus from {url}")
        try:
            _download_file(url, part_path)
        except requests.RequestException as e:
            part_path.unlink(missing_ok=True)
            raise CorpusDownloadError(f"Failed to download verse corpus from {url}: {e}")

        # Only a valid corpus is promoted to the cache
        try:
            corpus = cls.from_file(part_path)
        except CorpusLoadError:
            part_path.unlink(missing_ok=True)
            raise

        part_path.replace(cache_path)
        return corpus

    def _key(self, key: KeyLike) -> str:
        return str(key) if isinstance(key, VerseKey) else key.strip()

    def exists(self, key: KeyLike) -> bool:
        return self._key(key) in self._verses

    def text(self, key: KeyLike) -> Optional[str]:
        return self._verses.get(self._key(key))

    def last_verse(self, book: str, chapter: int) -> Optional[int]:
        """Highest verse number present in a chapter, or None if the chapter is unknown."""
        return self._last_verse.get((book, chapter))

    def next_key(self, key: VerseKey) -> Optional[VerseKey]:
        """The following verse, crossing into the next chapter when needed."""
        following = VerseKey(key.book, key.chapter, key.verse + 1)
        if self.exists(following):
            return following
        first_of_next = VerseKey(key.book, key.chapter + 1, 1)
        if self.exists(first_of_next):
            return first_of_next
        return None

    def previous_key(self, key: VerseKey) -> Optional[VerseKey]:
        """The preceding verse, crossing back to the last verse of the previous chapter."""
        if key.verse > 1:
            preceding = VerseKey(key.book, key.chapter, key.verse - 1)
            if self.exists(preceding):
                return preceding
        if key.chapter > 1:
            last = self.last_verse(key.book, key.chapter - 1)
            if last:
                return VerseKey(key.book, key.chapter - 1, last)
        return None

    def expand(self, passage) -> list[VerseKey]:
        """
        Every existing verse key covered by a passage, in order.

        Cross-chapter passages run to the end of each intermediate chapter.
        """
        keys = []
        end_chapter = passage.end_chapter or passage.chapter
        for chapter in range(passage.chapter, end_chapter + 1):
            start = passage.start_verse if chapter == passage.chapter else 1
            if chapter == end_chapter:
                end = passage.end_verse or start
            else:
                end = self.last_verse(passage.book, chapter)
            if not end or end < start:
                continue
            for verse in range(start, end + 1):
                key = VerseKey(passage.book, chapter, verse)
                if self.exists(key):
                    keys.append(key)
        return keys


def _download_file(url: str, dest_path: Path, timeout: int = DOWNLOAD_TIMEOUT):
    """Stream a download to disk."""
    response = requests.get(url, stream=True, timeout=timeout)
    response.raise_for_status()

    with open(dest_path, "wb") as f:
        for chunk in response.iter_content(chunk_size=8192):
            f.write(chunk)


def load_corpus(path: Union[str, Path] = None, url: str = None) -> VerseCorpus:
    """
    Load the configured corpus.

    A local file wins; otherwise the corpus is downloaded from the
    configured URL into the cache directory.

    Raises:
        CorpusLoadError: If neither a file nor a URL is available
    """
    path = Path(path or VERSES_PATH)
    url = url or VERSES_URL

    if path.exists() or not url:
        return VerseCorpus.from_file(path)

    return VerseCorpus.from_url(url, CACHE_DIR / path.name)
