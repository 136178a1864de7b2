# tests/test_normalizer.py
"""
Tests for the text normalization steps.
"""

from pacer.references.normalizer import (
    TextNormalizer,
    correct_homophones,
    correct_transcription_errors,
    normalize_roman_book_numerals,
    normalize_roman_chapter_verse,
    normalize_spoken_chapter_digits,
    normalize_verse_keyword_spacing,
    preprocess,
    roman_to_int,
    strip_ordinal_suffixes,
    words_to_numbers,
)


def test_preprocess_periods_and_word_commas():
    assert preprocess("Luke. Three. Three.") == "Luke Three Three"
    assert preprocess("Romans, three, five") == "Romans three five"


def test_preprocess_keeps_commas_after_digits():
    assert preprocess("John 3:16, 17") == "John 3:16, 17"


def test_preprocess_slashes_and_dashes():
    assert preprocess("\\Psalms 91:2") == "Psalms 91:2"
    assert preprocess("Isaiah 58:6–14") == "Isaiah 58:6-14"


def test_transcription_errors_need_a_number_cue():
    corrections = {"axe": "Acts", "look": "Luke"}
    assert correct_transcription_errors("axe chapter 2", corrections) == "Acts chapter 2"
    assert correct_transcription_errors("look six eleven", corrections) == "Luke six eleven"
    assert correct_transcription_errors("look at this", corrections) == "look at this"


def test_longer_transcription_errors_win():
    corrections = {"fast": "Wrong", "fast chronicles": "Chronicles"}
    assert correct_transcription_errors("fast chronicles 7", corrections) == "Chronicles 7"


def test_homophones_only_before_chapter():
    homophones = {"due": "Joel"}
    assert correct_homophones("due chapter 2", homophones) == "Joel chapter 2"
    assert correct_homophones("due to the rain", homophones) == "due to the rain"


def test_roman_book_numerals():
    assert normalize_roman_book_numerals("II Samuel 3") == "2 Samuel 3"
    assert normalize_roman_book_numerals("iii John 4") == "3 John 4"
    assert normalize_roman_book_numerals("I am here") == "I am here"


def test_words_to_numbers():
    assert words_to_numbers("twenty three") == "23"
    assert words_to_numbers("twenty-first") == "21"
    assert words_to_numbers("third") == "3"
    assert words_to_numbers("one hundred and nineteen") == "119"
    assert words_to_numbers("Psalm one hundred nineteen") == "Psalm 119"
    assert words_to_numbers("John three sixteen") == "John 3 16"


def test_strip_ordinal_suffixes():
    assert strip_ordinal_suffixes("the 21st chapter") == "the 21 chapter"
    assert strip_ordinal_suffixes("2nd Kings") == "2 Kings"


def test_roman_to_int():
    assert roman_to_int("iv") == 4
    assert roman_to_int("XII") == 12
    assert roman_to_int("civil") is None
    assert roman_to_int("iiii") is None


def test_roman_chapter_and_verse():
    assert normalize_roman_chapter_verse("chapter iv") == "chapter 4"
    assert normalize_roman_chapter_verse("verse xii") == "verse 12"
    assert normalize_roman_chapter_verse("in this verse I see") == "in this verse I see"
    assert normalize_roman_chapter_verse("verse civil") == "verse civil"


def test_spoken_chapter_digits():
    assert normalize_spoken_chapter_digits("Psalms 1 0 7 verse 15") == "Psalms 107 verse 15"
    assert normalize_spoken_chapter_digits("Psalms 1 0 7") == "Psalms 1 0 7"


def test_verse_keyword_spacing():
    assert normalize_verse_keyword_spacing("Psalm 66, verse 3") == "Psalm 66 verse 3"
    assert normalize_verse_keyword_spacing("from verse 18") == "verse 18"


def test_pipeline_order_and_trace():
    normalizer = TextNormalizer()
    names = [name for name, _ in normalizer.steps]
    assert names == [
        "preprocess",
        "roman_book_numerals",
        "words_to_numbers",
        "ordinal_suffixes",
        "roman_chapter_verse",
        "spoken_chapter_digits",
        "verse_keyword_spacing",
    ]

    trace = normalizer.trace("John chapter iii verse 16")
    assert len(trace) == len(names)
    assert trace[-1][1] == "John chapter 3 verse 16"


def test_full_normalization():
    normalizer = TextNormalizer()
    assert normalizer.normalize("Second Kings, chapter five, verse twenty-one") == (
        "2 Kings chapter 5 verse 21"
    )
    assert normalizer.normalize("axe chapter two") == "Acts chapter 2"
    assert normalizer.normalize("II Samuel chaper iv") == "2 Samuel chapter 4"
