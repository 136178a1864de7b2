# tests/test_extractor.py
"""
Tests for the phrasing rewrites. Inputs are already normalized text.
"""

from pacer.references.disambiguator import CombinedDigitDisambiguator
from pacer.references.extractor import (
    ReferenceExtractor,
    rewrite_chapter_range,
    rewrite_comma_separated,
    rewrite_trailing_list,
    rewrite_verse_later,
)


def test_pass_through_full_reference():
    extractor = ReferenceExtractor()
    assert extractor.extract("Malachi 3:6") == "Malachi 3:6"
    assert extractor.extract("John 3:36-4:2") == "John 3:36-4:2"


def test_chapter_keyword_with_colon():
    assert ReferenceExtractor().extract("Luke chapter 21:5") == "Luke 21:5"


def test_chapter_verse_phrase():
    extractor = ReferenceExtractor()
    assert extractor.extract("Luke chapter 4 verse 1 to 2") == "Luke 4:1-2"
    assert extractor.extract("Romans chapter 3 verses 4, 5 and 7") == "Romans 3:4-5, 7"
    assert extractor.extract("2 Kings chapter 5 verse 21") == "2 Kings 5:21"


def test_verse_keyword_after_filler():
    extractor = ReferenceExtractor()
    text = "Psalms 107, thank you Holy Spirit verse 15 and 16"
    assert extractor.extract(text) == "Psalms 107:15-16"


def test_verse_keyword_filler_is_bounded():
    long_filler = "Psalms 107 " + "and the Lord is good " * 5 + "verse 15"
    assert rewrite_verse_later(long_filler) == long_filler


def test_verse_keyword_filler_has_no_digits():
    text = "Isaiah 56 I mean 58 and verse 6"
    assert rewrite_verse_later(text) == text


def test_comma_separated_chapter_verse():
    assert rewrite_comma_separated("Romans 3, 5") == "Romans 3:5"
    assert ReferenceExtractor().extract("Isaiah 58, 6 to 14") == "Isaiah 58:6-14"


def test_trailing_list_after_full_reference():
    assert rewrite_trailing_list("John 3:16 and 17") == "John 3:16-17"
    assert rewrite_trailing_list("Isaiah 58:6, 8 and 10") == "Isaiah 58:6, 8, 10"
    # the "4" starts a new c:v pair, not a verse
    assert rewrite_trailing_list("John 3:36-4:2") == "John 3:36-4:2"


def test_space_separated_only_in_aggressive_mode():
    extractor = ReferenceExtractor()
    assert extractor.extract("Romans 8 28", aggressive_speech=True) == "Romans 8:28"
    assert extractor.extract("Romans 8 28", aggressive_speech=False) == "Romans 8 28"


def test_chapter_lists_and_ranges():
    extractor = ReferenceExtractor()
    assert extractor.extract("Exodus chapters 30 and 31") == "Exodus 30; Exodus 31"
    assert extractor.extract("Matthew 21 to 22") == "Matthew 21; Matthew 22"


def test_chapter_range_needs_no_verse_cue():
    assert rewrite_chapter_range("Matthew 21 to 22 verse 3") == "Matthew 21 to 22 verse 3"
    assert rewrite_chapter_range("Matthew 21:1 to 22") == "Matthew 21:1 to 22"


def test_chapter_only():
    extractor = ReferenceExtractor()
    assert extractor.extract("Acts chapter 2") == "Acts 2"
    assert extractor.extract("chapter 2 of Acts") == "Acts 2"
    assert extractor.extract("in the book of Acts chapter 2") == "Acts 2"


def test_missing_space_and_concatenation():
    extractor = ReferenceExtractor()
    assert extractor.extract("Daniel2:16") == "Daniel 2:16"
    assert extractor.extract("Daniel2:16Daniel 2:17") == "Daniel 2:16 Daniel 2:17"


def test_text_without_book_is_untouched():
    extractor = ReferenceExtractor()
    assert extractor.extract("chapter 3 verse 5") == "chapter 3 verse 5"
    assert extractor.extract("that's 3 to 4 of them") == "that's 3 to 4 of them"


def test_combined_digits_between_phases(corpus):
    extractor = ReferenceExtractor()
    disambiguator = CombinedDigitDisambiguator(corpus)
    assert extractor.extract("John 316", disambiguator=disambiguator) == "John 3:16"
    assert extractor.extract("Psalms chapter 107", disambiguator=disambiguator) == "Psalms 107"
    assert extractor.extract("Psalms 119 to 120", disambiguator=disambiguator) == (
        "Psalms 119; Psalms 120"
    )
