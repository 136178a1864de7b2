# tests/test_ranges.py
from pacer.references.ranges import (
    VerseRange,
    extract_verse_ranges,
    format_ranges,
    merge_ranges,
    parse_verse_list,
    trim_verse_list_tail,
)


def test_parse_single_and_lists():
    assert parse_verse_list("16") == [VerseRange(16, 16)]
    assert parse_verse_list("4, 5 and 7") == [VerseRange(4, 5), VerseRange(7, 7)]
    assert parse_verse_list("15 & 16") == [VerseRange(15, 16)]


def test_parse_range_operators():
    assert parse_verse_list("15-18") == [VerseRange(15, 18)]
    assert parse_verse_list("6 to 14") == [VerseRange(6, 14)]
    assert parse_verse_list("29 through 31") == [VerseRange(29, 31)]
    assert parse_verse_list("1 thru 3") == [VerseRange(1, 3)]
    assert parse_verse_list("18 – 15") == [VerseRange(15, 18)]


def test_parse_drops_out_of_range_numbers():
    assert parse_verse_list("0, 3, 250") == [VerseRange(3, 3)]
    assert parse_verse_list("") == []
    assert parse_verse_list("verses") == []


def test_merge_overlapping_and_adjacent():
    merged = merge_ranges([VerseRange(18, 18), VerseRange(15, 16), VerseRange(17, 17), VerseRange(20, 22)])
    assert merged == [VerseRange(15, 18), VerseRange(20, 22)]
    assert merge_ranges([]) == []


def test_format_ranges():
    assert format_ranges([VerseRange(15, 18), VerseRange(20, 20)]) == "15-18, 20"
    assert format_ranges([]) is None


def test_trim_verse_list_tail():
    assert trim_verse_list_tail("15 and 16 and then Romans 8") == "15 and 16 and then"
    assert trim_verse_list_tail("3 chapter 4") == "3"


def test_extract_verse_ranges():
    assert extract_verse_ranges("and verse 16") == [VerseRange(16, 16)]
    assert extract_verse_ranges("verses 2 and 3") == [VerseRange(2, 3)]
    assert extract_verse_ranges("verse 29 to 31") == [VerseRange(29, 31)]
    assert extract_verse_ranges("nothing here 12") == []
