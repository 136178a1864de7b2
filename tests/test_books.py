# tests/test_books.py
"""
Tests for book detection and name resolution.
"""

from pacer.references.books import (
    BookRecognizer,
    CANONICAL_BOOKS,
    is_canonical_book,
    resolve_book_name,
)


def test_sixty_six_books():
    assert len(CANONICAL_BOOKS) == 66
    assert CANONICAL_BOOKS[0] == "Genesis"
    assert CANONICAL_BOOKS[-1] == "Revelation"


def test_resolve_full_names_and_abbreviations():
    assert resolve_book_name("Genesis") == "Genesis"
    assert resolve_book_name("gen") == "Genesis"
    assert resolve_book_name("Gen.") == "Genesis"
    assert resolve_book_name("Psalm") == "Psalms"
    assert resolve_book_name("ps") == "Psalms"
    assert resolve_book_name("Song of Songs") == "Song of Solomon"
    assert resolve_book_name("Jn") == "John"


def test_resolve_numbered_books():
    assert resolve_book_name("1 John") == "1 John"
    assert resolve_book_name("1john") == "1 John"
    assert resolve_book_name("2  Kings") == "2 Kings"
    assert resolve_book_name("1 Cor") == "1 Corinthians"


def test_resolve_unknown():
    assert resolve_book_name("Hezekiah") is None
    assert resolve_book_name("") is None
    assert resolve_book_name(None) is None


def test_is_canonical_book():
    assert is_canonical_book("1 Samuel")
    assert not is_canonical_book("1 Sam")


def test_contains_book_strict_names_anywhere():
    books = BookRecognizer()
    assert books.contains_book("turn with me to Romans")
    assert books.contains_book("the book of Jude is short")


def test_contains_book_abbreviation_needs_number_cue():
    books = BookRecognizer()
    assert books.contains_book("Gen 1:1")
    assert books.contains_book("Matt chapter 5")
    assert books.contains_book("Rom8:28")
    assert not books.contains_book("Phil said hello")
    assert not books.contains_book("the gen z crowd")


def test_ambiguous_two_letter_words_are_not_books():
    books = BookRecognizer()
    assert not books.contains_book("Is this ok?")
    assert not books.contains_book("I am 3 years in")
    assert not books.contains_book("that's a good point")
