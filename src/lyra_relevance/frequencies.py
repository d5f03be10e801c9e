"""
Term and document frequency counting.

All counts are taken over normalized tokens (see `normalize_token`), the same
form the vocabulary is built from.
"""

from __future__ import annotations

from collections import Counter

import numpy as np
from scipy.sparse import csr_matrix

from lyra_relevance.songs import Song, SongCorpus, normalize_tokens
from lyra_relevance.vocabulary import Vocabulary


def term_frequencies(song: Song) -> tuple[Counter[str], int]:
    """
    Count the tokens of a song.

    Returns:
        (counts, max_count): counts in first-occurrence order, and the highest
        count in the song. max_count is at least 1, so it is always a valid divisor.
    """
    counts = Counter(normalize_tokens(song.tokens))
    max_count = max(counts.values(), default=0)
    return counts, max(max_count, 1)


def document_frequencies(corpus: SongCorpus) -> Counter[str]:
    """Number of songs each token appears in at least once."""
    return Counter(token for song in corpus for token in set(song.normalized_tokens))


def term_count_matrix(
    counts: list[Counter[str]],
    vocabulary: Vocabulary,
) -> csr_matrix:
    """
    Sparse (songs x vocabulary) matrix of raw counts.

    Tokens that are not part of the vocabulary are ignored.
    """
    rows: list[int] = []
    cols: list[int] = []
    values: list[float] = []
    for row, song_counts in enumerate(counts):
        for token, count in song_counts.items():
            col = vocabulary.position(token)
            if col is None:
                continue
            rows.append(row)
            cols.append(col)
            values.append(count)

    return csr_matrix(
        (np.array(values, dtype=np.float64), (np.array(rows, dtype=np.int64), np.array(cols, dtype=np.int64))),
        shape=(len(counts), len(vocabulary)),
    )


def document_frequency_array(df: Counter[str], vocabulary: Vocabulary) -> np.ndarray:
    """Document frequencies laid out in vocabulary order."""
    return np.array([df.get(token, 0) for token in vocabulary], dtype=np.float64)
