# pacer/utils/errors.py
"""
Exception hierarchy for the reference engine.

"No reference found" is never an error: resolution returns an empty list.
Exceptions are reserved for conditions the engine cannot operate under,
which all happen at construction time:

- CorpusError: verse corpus could not be read, parsed or downloaded
- RulesError: speech rules file is malformed
"""


class PacerError(Exception):
    """Base exception for all engine errors."""
    pass


class CorpusError(PacerError):
    """Base exception for verse corpus problems."""
    pass


class CorpusLoadError(CorpusError):
    """Raised when the corpus file is missing, unreadable or malformed."""
    pass


class CorpusDownloadError(CorpusError):
    """Raised when the corpus download fails and no cached copy exists."""
    pass


class RulesError(PacerError):
    """Raised when the speech rules config has an unexpected shape."""
    pass
