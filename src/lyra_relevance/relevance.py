"""
Time-windowed relevance ranking over a weighted corpus.

A query selects the songs of a set of artists within a year range, averages
their TF-IDF vectors, ranks the vocabulary by mean weight and groups the top
tokens by how often they occur in the selected songs:

    {summed raw frequency (descending): {tokens sharing it}}

Usage:
    from lyra_relevance.relevance import most_relevant_tokens

    result = most_relevant_tokens(corpus, vocabulary, 1960, 1969, True, 10, ["bob dylan"])
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from lyra_relevance.config import Config
from lyra_relevance.errors import WeightsNotComputedError
from lyra_relevance.songs import Song, SongCorpus
from lyra_relevance.vocabulary import Vocabulary, ensure_current

if TYPE_CHECKING:
    from numpy.typing import NDArray

logger = logging.getLogger(__name__)


# =============================================================================
# Filtering
# =============================================================================


def artist_set(artists: Iterable[str]) -> frozenset[str]:
    """Artist names as a set. A bare string is rejected rather than split into characters."""
    if isinstance(artists, str):
        raise TypeError(f"artists must be a collection of names, not a single string ({artists!r})")
    return frozenset(artists)


@dataclass(frozen=True)
class SongFilter:
    """Selection of songs by year range (inclusive), artist and compilation flag."""

    year_from: int
    year_to: int
    artists: frozenset[str]
    include_compilations: bool = True

    @classmethod
    def create(
        cls,
        year_from: int,
        year_to: int,
        artists: Iterable[str],
        include_compilations: bool = True,
    ) -> "SongFilter":
        return cls(year_from, year_to, artist_set(artists), include_compilations)

    def matches(self, song: Song) -> bool:
        if not self.include_compilations and song.is_compilation:
            return False
        if song.artist not in self.artists:
            return False
        return self.year_from <= song.year <= self.year_to


def ensure_weighted(corpus: SongCorpus, vocabulary: Vocabulary | None) -> Vocabulary:
    """
    Check that a weighting pass filled every song's vector for the current vocabulary.

    Raises:
        VocabularyNotBuiltError: if the vocabulary is missing or stale.
        WeightsNotComputedError: if any song of the corpus lacks weights for it.
    """
    vocabulary = ensure_current(vocabulary, corpus)
    for song in corpus:
        if not song.is_weighted_with(vocabulary):
            raise WeightsNotComputedError(
                f"Song {song.id!r} has no weights for the current vocabulary; run a weighting pass first"
            )
    return vocabulary


def select_songs(corpus: SongCorpus, song_filter: SongFilter) -> list[Song]:
    return [song for song in corpus if song_filter.matches(song)]


# =============================================================================
# Aggregation steps
# =============================================================================


def average_weights(songs: list[Song], vocabulary: Vocabulary) -> NDArray[np.float64] | None:
    """
    Mean weight per vocabulary position over the given songs.

    Returns None for an empty selection instead of a NaN vector.

    Raises:
        WeightsNotComputedError: if a song was not weighted against this vocabulary.
    """
    if not songs:
        return None
    for song in songs:
        if not song.is_weighted_with(vocabulary):
            raise WeightsNotComputedError(
                f"Song {song.id!r} has no weights for the current vocabulary; run a weighting pass first"
            )
    stacked = np.vstack([song.weights for song in songs])
    return stacked.sum(axis=0) / len(songs)


def rank_tokens(mean_weights: NDArray[np.float64], vocabulary: Vocabulary, top_n: int) -> list[str]:
    """
    Vocabulary tokens ordered by descending mean weight, cut to the first `top_n`.

    The vocabulary is sorted, so a stable sort on the negated weights breaks
    ties lexicographically.
    """
    if top_n < 0:
        raise ValueError(f"top_n must be non-negative, got {top_n}")
    order = np.argsort(-mean_weights, kind="stable")[:top_n]
    return [vocabulary[int(idx)] for idx in order]


def aggregate_frequencies(songs: list[Song], tokens: list[str]) -> dict[str, int]:
    """Summed raw count of each token over the songs. Tokens that never occur are left out."""
    totals: dict[str, int] = {}
    for token in tokens:
        total = sum(song.term_frequencies.get(token, 0) for song in songs)
        if total > 0:
            totals[token] = total
    return totals


def bucket_by_frequency(totals: dict[str, int]) -> dict[int, set[str]]:
    """Group tokens by frequency, highest frequency first."""
    buckets: dict[int, set[str]] = {}
    for token, frequency in totals.items():
        buckets.setdefault(frequency, set()).add(token)
    return {frequency: buckets[frequency] for frequency in sorted(buckets, reverse=True)}


# =============================================================================
# Queries
# =============================================================================


def query(
    corpus: SongCorpus,
    vocabulary: Vocabulary | None,
    song_filter: SongFilter,
    top_n: int,
) -> dict[int, set[str]]:
    """Run a relevance query for a prepared `SongFilter`."""
    vocabulary = ensure_weighted(corpus, vocabulary)
    if top_n < 0:
        raise ValueError(f"top_n must be non-negative, got {top_n}")

    songs = select_songs(corpus, song_filter)
    mean_weights = average_weights(songs, vocabulary)
    if mean_weights is None:
        logger.debug(
            "No songs match years %d-%d for %d artists", song_filter.year_from, song_filter.year_to,
            len(song_filter.artists),
        )
        return {}

    top_tokens = rank_tokens(mean_weights, vocabulary, top_n)
    return bucket_by_frequency(aggregate_frequencies(songs, top_tokens))


def most_relevant_tokens(
    corpus: SongCorpus,
    vocabulary: Vocabulary | None,
    year_from: int,
    year_to: int,
    include_compilations: bool,
    top_n: int,
    artists: Iterable[str],
) -> dict[int, set[str]]:
    """
    Most characteristic tokens of the artists' songs between two years (inclusive).

    Args:
        corpus: Weighted corpus.
        vocabulary: Vocabulary the corpus was weighted against.
        year_from: First year of the section.
        year_to: Last year of the section.
        include_compilations: Whether songs from compilations count.
        top_n: Number of tokens to rank. Fewer are returned if the vocabulary is smaller.
        artists: Artist names to include.

    Returns:
        Mapping of summed raw frequency (descending) to the tokens sharing it.
        Empty when no song matches the filter.
    """
    song_filter = SongFilter.create(year_from, year_to, artists, include_compilations)
    return query(corpus, vocabulary, song_filter, top_n)


def time_sections(year_from: int, year_to: int, length: int) -> list[tuple[int, int]]:
    """Split [year_from, year_to] into consecutive inclusive windows of `length` years."""
    if length <= 0:
        raise ValueError(f"Section length must be positive, got {length}")
    sections = []
    start = year_from
    while start <= year_to:
        end = min(start + length - 1, year_to)
        sections.append((start, end))
        start = end + 1
    return sections


def most_relevant_tokens_by_section(
    corpus: SongCorpus,
    vocabulary: Vocabulary | None,
    year_from: int,
    year_to: int,
    include_compilations: bool,
    top_n: int,
    artists: Iterable[str],
    section_length: int | None = None,
) -> dict[tuple[int, int], dict[int, set[str]]]:
    """Run `most_relevant_tokens` for each time section of the year range."""
    vocabulary = ensure_weighted(corpus, vocabulary)
    length = section_length if section_length is not None else Config.section_length
    artists = artist_set(artists)
    filters = [
        SongFilter(start, end, artists, include_compilations)
        for start, end in time_sections(year_from, year_to, length)
    ]
    results = batch_most_relevant_tokens(corpus, vocabulary, filters, top_n)
    return {(f.year_from, f.year_to): result for f, result in zip(filters, results)}


def batch_most_relevant_tokens(
    corpus: SongCorpus,
    vocabulary: Vocabulary | None,
    filters: list[SongFilter],
    top_n: int,
    num_workers: int | None = None,
    min_queries_for_parallel: int | None = None,
) -> list[dict[int, set[str]]]:
    """
    Run several read-only queries, in parallel for larger batches.

    Must not run concurrently with a weighting pass over the same corpus.
    """
    vocabulary = ensure_weighted(corpus, vocabulary)
    if not filters:
        return []
    workers = num_workers if num_workers is not None else Config.num_workers
    threshold = min_queries_for_parallel if min_queries_for_parallel is not None else Config.min_queries_for_parallel

    def run_single(song_filter: SongFilter) -> dict[int, set[str]]:
        return query(corpus, vocabulary, song_filter, top_n)

    # For small batches, run sequentially
    if len(filters) < threshold or workers <= 1:
        return [run_single(song_filter) for song_filter in filters]

    logger.debug("Running %d relevance queries on %d workers", len(filters), workers)
    with ThreadPoolExecutor(max_workers=workers) as executor:
        return list(executor.map(run_single, filters))
