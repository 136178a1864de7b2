# tests/test_disambiguator.py
from pacer.references.corpus import VerseKey
from pacer.references.disambiguator import CombinedDigitDisambiguator


def test_candidates_only_returns_corpus_verses(corpus):
    disambiguator = CombinedDigitDisambiguator(corpus)
    assert disambiguator.candidates("John", "316") == [VerseKey("John", 3, 16)]
    assert disambiguator.candidates("Genesis", "123") == [
        VerseKey("Genesis", 1, 23),
        VerseKey("Genesis", 12, 3),
    ]
    assert disambiguator.candidates("John", "999") == []


def test_unique_split_is_substituted(corpus):
    disambiguator = CombinedDigitDisambiguator(corpus)
    assert disambiguator.apply("John 316") == "John 3:16"
    assert disambiguator.apply("turn to John316 please") == "turn to John 3:16 please"
    assert disambiguator.apply("Psalms 107") == "Psalms 10:7"


def test_ambiguous_split_is_left_alone(corpus):
    disambiguator = CombinedDigitDisambiguator(corpus)
    assert disambiguator.apply("Genesis 123") == "Genesis 123"


def test_chapter_mentions_are_not_split(corpus):
    disambiguator = CombinedDigitDisambiguator(corpus)
    assert disambiguator.apply("Psalms 107:15") == "Psalms 107:15"
    assert disambiguator.apply("Psalms 107, thank you Lord, verse 15") == (
        "Psalms 107, thank you Lord, verse 15"
    )
    assert disambiguator.apply("Psalms 107 and then verse 16") == "Psalms 107 and then verse 16"
    assert disambiguator.apply("Psalms 119 to 120") == "Psalms 119 to 120"


def test_zero_verse_is_never_a_candidate(corpus):
    disambiguator = CombinedDigitDisambiguator(corpus)
    assert disambiguator.candidates("Acts", "200") == []
    assert disambiguator.apply("Acts 200") == "Acts 200"
