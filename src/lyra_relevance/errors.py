"""Exceptions raised by the weighting and relevance engine."""


class LyraError(Exception):
    """Base class for all errors raised by lyra_relevance."""


class CorpusFormatError(LyraError, ValueError):
    """Raised when a corpus record is missing a field or has the wrong type."""


class VocabularyNotBuiltError(LyraError, RuntimeError):
    """Raised when a weighting pass or query runs before the vocabulary exists."""


class StaleVocabularyError(VocabularyNotBuiltError):
    """Raised when the vocabulary was built for an earlier corpus snapshot."""


class WeightsNotComputedError(LyraError, RuntimeError):
    """Raised when a query reads songs that have no weights for the current vocabulary."""
