"""Stateful entry point holding the vocabulary of a song corpus."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable

from lyra_relevance import relevance
from lyra_relevance.config import Config
from lyra_relevance.errors import VocabularyNotBuiltError, WeightsNotComputedError
from lyra_relevance.relevance import SongFilter
from lyra_relevance.songs import SongCorpus
from lyra_relevance.vocabulary import Vocabulary, build_vocabulary, ensure_current
from lyra_relevance.weighting import weigh_corpus

logger = logging.getLogger(__name__)


class LyricsAnalyzer:
    """
    Token frequency analysis of a song corpus.

    The vocabulary is built once per corpus snapshot and reused by every
    weighting pass and query. Weighting passes are serialized by a lock, and a
    batch of queries holds the same lock so no pass can run underneath it.

    Args:
        corpus: Songs supplied by the corpus provider.
    """

    def __init__(self, corpus: SongCorpus):
        self.corpus = corpus
        self._vocabulary: Vocabulary | None = None
        self._lock = threading.Lock()

    @property
    def vocabulary(self) -> Vocabulary:
        if self._vocabulary is None:
            raise VocabularyNotBuiltError("Call build_vocabulary() or compute_weights() first")
        return self._vocabulary

    @property
    def is_weighted(self) -> bool:
        vocabulary = self._vocabulary
        if vocabulary is None or vocabulary.snapshot != self.corpus.snapshot:
            return False
        return all(song.is_weighted_with(vocabulary) for song in self.corpus)

    def _require_weights(self) -> Vocabulary:
        vocabulary = ensure_current(self._vocabulary, self.corpus)
        if not self.is_weighted:
            raise WeightsNotComputedError("Call compute_weights() before querying")
        return vocabulary

    def build_vocabulary(self) -> Vocabulary:
        """Build the vocabulary for the current snapshot, invalidating earlier weights."""
        with self._lock:
            self._vocabulary = build_vocabulary(self.corpus)
            return self._vocabulary

    def compute_weights(self) -> SongCorpus:
        """
        Weight every song of the corpus (TF-IDF).

        Builds the vocabulary first if it is missing or the corpus changed since.
        """
        with self._lock:
            if self._vocabulary is None or self._vocabulary.snapshot != self.corpus.snapshot:
                self._vocabulary = build_vocabulary(self.corpus)
            return weigh_corpus(self.corpus, self._vocabulary)

    def most_relevant_tokens(
        self,
        year_from: int,
        year_to: int,
        include_compilations: bool = Config.include_compilations,
        top_n: int = Config.top_n,
        artists: Iterable[str] | None = None,
    ) -> dict[int, set[str]]:
        """
        Most characteristic tokens of the given artists between two years.

        Artists default to every artist of the corpus.
        """
        selected = self.corpus.artists if artists is None else artists
        with self._lock:
            vocabulary = self._require_weights()
            return relevance.most_relevant_tokens(
                self.corpus, vocabulary, year_from, year_to, include_compilations, top_n, selected
            )

    def most_relevant_tokens_by_section(
        self,
        year_from: int,
        year_to: int,
        include_compilations: bool = Config.include_compilations,
        top_n: int = Config.top_n,
        artists: Iterable[str] | None = None,
        section_length: int | None = None,
    ) -> dict[tuple[int, int], dict[int, set[str]]]:
        """Run `most_relevant_tokens` for each time section of the year range."""
        selected = self.corpus.artists if artists is None else artists
        with self._lock:
            vocabulary = self._require_weights()
            return relevance.most_relevant_tokens_by_section(
                self.corpus,
                vocabulary,
                year_from,
                year_to,
                include_compilations,
                top_n,
                selected,
                section_length=section_length,
            )

    def batch_most_relevant_tokens(
        self,
        filters: list[SongFilter],
        top_n: int = Config.top_n,
    ) -> list[dict[int, set[str]]]:
        with self._lock:
            vocabulary = self._require_weights()
            return relevance.batch_most_relevant_tokens(self.corpus, vocabulary, filters, top_n)
