# tests/test_corpus.py
"""
Tests for VerseCorpus loading, lookup and navigation helpers.
"""

import json
from unittest.mock import MagicMock, patch

import pytest
import requests

from pacer.references.corpus import VerseCorpus, VerseKey, clean_text, load_corpus
from pacer.references.passage import make_passage
from pacer.utils.errors import CorpusDownloadError, CorpusLoadError

from conftest import SAMPLE_VERSES


def test_exists_and_text(corpus):
    assert corpus.exists("John 3:16")
    assert corpus.exists(VerseKey("John", 3, 16))
    assert "John 3:16" in corpus
    assert not corpus.exists("John 3:99")
    assert corpus.text("Malachi 3:6").startswith("For I [am] the LORD")
    assert corpus.text("Hezekiah 1:1") is None


def test_verse_key_round_trip():
    key = VerseKey.parse("1 John 3:16")
    assert key == VerseKey("1 John", 3, 16)
    assert str(key) == "1 John 3:16"
    assert VerseKey.parse("John") is None


def test_clean_text():
    assert clean_text("# The LORD [is] my shepherd") == "The LORD is my shepherd"
    assert clean_text("plain") == "plain"


def test_last_verse(corpus):
    assert corpus.last_verse("Isaiah", 58) == 14
    assert corpus.last_verse("Isaiah", 99) is None


def test_next_and_previous_cross_chapters(corpus):
    assert corpus.next_key(VerseKey("John", 3, 16)) == VerseKey("John", 3, 17)
    assert corpus.next_key(VerseKey("John", 3, 36)) == VerseKey("John", 4, 1)
    assert corpus.previous_key(VerseKey("John", 4, 1)) == VerseKey("John", 3, 36)
    assert corpus.previous_key(VerseKey("Genesis", 1, 1)) is None
    assert corpus.next_key(VerseKey("Jude", 1, 3)) is None


def test_expand_single_chapter(corpus):
    keys = corpus.expand(make_passage("Isaiah", 45, 1, 3))
    assert [str(k) for k in keys] == ["Isaiah 45:1", "Isaiah 45:2", "Isaiah 45:3"]


def test_expand_cross_chapter(corpus):
    keys = corpus.expand(make_passage("John", 3, 36, end_verse=2, end_chapter=4))
    assert [str(k) for k in keys] == ["John 3:36", "John 4:1", "John 4:2"]


def test_from_file_missing(tmp_path):
    with pytest.raises(CorpusLoadError):
        VerseCorpus.from_file(tmp_path / "nope.json")


def test_from_file_invalid_json(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(CorpusLoadError):
        VerseCorpus.from_file(path)


@pytest.mark.parametrize("payload", [
    [],
    {},
    {"John three sixteen": "For God so loved the world"},
    {"John 3:16": 42},
])
def test_from_file_rejects_bad_payloads(tmp_path, payload):
    path = tmp_path / "verses.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    with pytest.raises(CorpusLoadError):
        VerseCorpus.from_file(path)


def _mock_response(data):
    response = MagicMock()
    body = data if isinstance(data, bytes) else json.dumps(data).encode("utf-8")
    response.iter_content.return_value = [body]
    return response


def test_from_url_downloads_then_uses_cache(tmp_path):
    cache_path = tmp_path / "cache" / "verses.json"
    data = {"John 3:16": "For God so loved the world"}

    with patch("pacer.references.corpus.requests.get", return_value=_mock_response(data)) as mock_get:
        corpus = VerseCorpus.from_url("https://example.org/verses.json", cache_path)
        assert corpus.exists("John 3:16")
        assert cache_path.exists()

        VerseCorpus.from_url("https://example.org/verses.json", cache_path)
        assert mock_get.call_count == 1


def test_from_url_failure_leaves_no_partial_file(tmp_path):
    cache_path = tmp_path / "verses.json"

    with patch("pacer.references.corpus.requests.get", side_effect=requests.ConnectionError("offline")):
        with pytest.raises(CorpusDownloadError):
            VerseCorpus.from_url("https://example.org/verses.json", cache_path)

    assert not cache_path.exists()
    assert list(tmp_path.iterdir()) == []


def test_from_url_invalid_payload_is_not_cached(tmp_path):
    cache_path = tmp_path / "verses.json"
    url = "https://example.org/verses.json"

    with patch("pacer.references.corpus.requests.get",
               return_value=_mock_response(b"<html>502 Bad Gateway</html>")):
        with pytest.raises(CorpusLoadError):
            VerseCorpus.from_url(url, cache_path)

    assert list(tmp_path.iterdir()) == []

    data = {"John 3:16": "For God so loved the world"}
    with patch("pacer.references.corpus.requests.get", return_value=_mock_response(data)) as mock_get:
        corpus = VerseCorpus.from_url(url, cache_path)

    assert mock_get.call_count == 1
    assert corpus.exists("John 3:16")
    assert cache_path.exists()


def test_load_corpus_prefers_local_file():
    corpus = load_corpus(path=SAMPLE_VERSES, url="https://example.org/unused.json")
    assert corpus.exists("Romans 8:28")


def test_load_corpus_downloads_when_file_missing(tmp_path):
    data = {"Acts 2:1": "And when the day of Pentecost was fully come"}

    with patch("pacer.references.corpus.CACHE_DIR", tmp_path), \
            patch("pacer.references.corpus.requests.get", return_value=_mock_response(data)):
        corpus = load_corpus(path=tmp_path / "missing" / "verses-kjv.json", url="https://example.org/kjv.json")

    assert corpus.exists("Acts 2:1")
    assert (tmp_path / "verses-kjv.json").exists()
