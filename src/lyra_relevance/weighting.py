"""
TF-IDF weighting pass.

For song d and vocabulary token t:

    weight(t, d) = count(t, d) / max_count(d) * ln(N / df(t))

and 0 when t does not occur in d. Document frequencies are recomputed on every
pass, so a pass is a pure function of the corpus content and the vocabulary.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from lyra_relevance.frequencies import (
    document_frequencies,
    document_frequency_array,
    term_count_matrix,
    term_frequencies,
)
from lyra_relevance.songs import SongCorpus
from lyra_relevance.vocabulary import Vocabulary, ensure_current

if TYPE_CHECKING:
    from numpy.typing import NDArray

logger = logging.getLogger(__name__)


def inverse_document_frequency(df: NDArray[np.float64], N: int) -> NDArray[np.float64]:
    """
    Classic IDF: ln(N / df).

    Tokens with df == 0 (not present in the corpus) get 0 instead of infinity.
    Since df <= N the result lies in [0, ln N].
    """
    df = np.asarray(df, dtype=np.float64)
    idf = np.zeros_like(df)
    present = df > 0
    if N > 0:
        idf[present] = np.log(N / df[present])
    return idf


def weigh_corpus(corpus: SongCorpus, vocabulary: Vocabulary | None) -> SongCorpus:
    """
    Run a weighting pass over the corpus.

    Writes `term_frequencies`, `weights` and `weighted_with` on every song in
    place and returns the same corpus.

    Raises:
        VocabularyNotBuiltError: if no vocabulary is given.
        StaleVocabularyError: if the vocabulary belongs to another corpus snapshot.
    """
    vocabulary = ensure_current(vocabulary, corpus)

    df = document_frequencies(corpus)
    idf = inverse_document_frequency(document_frequency_array(df, vocabulary), len(corpus))

    counts = []
    max_counts = np.ones(len(corpus), dtype=np.float64)
    for row, song in enumerate(corpus):
        song_counts, max_count = term_frequencies(song)
        counts.append(song_counts)
        max_counts[row] = max_count

    matrix = term_count_matrix(counts, vocabulary)

    for row, song in enumerate(corpus):
        start, end = matrix.indptr[row], matrix.indptr[row + 1]
        cols = matrix.indices[start:end]
        weights = np.zeros(len(vocabulary), dtype=np.float64)
        weights[cols] = matrix.data[start:end] / max_counts[row] * idf[cols]

        song.term_frequencies = counts[row]
        song.weights = weights
        song.weighted_with = vocabulary

    logger.info("Weighted %d songs against %d vocabulary tokens", len(corpus), len(vocabulary))
    return corpus
