"""Feature vocabulary shared by every weighting pass and query of a corpus snapshot."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from functools import cached_property

from lyra_relevance.errors import StaleVocabularyError, VocabularyNotBuiltError
from lyra_relevance.songs import SongCorpus

logger = logging.getLogger(__name__)


class Vocabulary:
    """
    Lexicographically ordered, distinct normalized tokens of a corpus.

    Args:
        tokens: Distinct tokens. They are sorted, so position i is stable for
            the lifetime of the vocabulary.
        snapshot: Corpus snapshot the vocabulary was built from.
    """

    def __init__(self, tokens: list[str], snapshot: int = 0):
        self.tokens: tuple[str, ...] = tuple(sorted(set(tokens)))
        self.snapshot = snapshot

    def __len__(self) -> int:
        return len(self.tokens)

    def __getitem__(self, index: int) -> str:
        return self.tokens[index]

    def __iter__(self) -> Iterator[str]:
        return iter(self.tokens)

    def __contains__(self, token: object) -> bool:
        return token in self.index

    def __repr__(self) -> str:
        return f"Vocabulary(size={len(self.tokens)}, snapshot={self.snapshot})"

    @cached_property
    def index(self) -> dict[str, int]:
        """Token -> position in the vocabulary order."""
        return {token: idx for idx, token in enumerate(self.tokens)}

    def position(self, token: str) -> int | None:
        return self.index.get(token)


def build_vocabulary(corpus: SongCorpus) -> Vocabulary:
    """Collect the distinct normalized tokens of every song in the corpus."""
    tokens = {token for song in corpus for token in song.normalized_tokens}
    vocabulary = Vocabulary(list(tokens), snapshot=corpus.snapshot)
    logger.info("Built vocabulary of %d tokens from %d songs", len(vocabulary), len(corpus))
    return vocabulary


def ensure_current(vocabulary: Vocabulary | None, corpus: SongCorpus) -> Vocabulary:
    """Return the vocabulary if it was built for the corpus' current snapshot."""
    if vocabulary is None:
        raise VocabularyNotBuiltError("Vocabulary has not been built for this corpus")
    if vocabulary.snapshot != corpus.snapshot:
        raise StaleVocabularyError(
            f"Vocabulary was built for snapshot {vocabulary.snapshot}, "
            f"corpus is at snapshot {corpus.snapshot}"
        )
    return vocabulary
