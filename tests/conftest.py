# tests/conftest.py
from pathlib import Path

import pytest

from pacer.references.context import ParseContext
from pacer.references.corpus import VerseCorpus
from pacer.references.engine import ReferenceEngine

DATA_DIR = Path(__file__).parent / "data"
SAMPLE_VERSES = DATA_DIR / "verses-sample.json"


@pytest.fixture(scope="session")
def corpus():
    return VerseCorpus.from_file(SAMPLE_VERSES)


@pytest.fixture(scope="session")
def engine(corpus):
    return ReferenceEngine(corpus=corpus, aggressive_speech=True, debug=False)


@pytest.fixture
def context():
    return ParseContext()
