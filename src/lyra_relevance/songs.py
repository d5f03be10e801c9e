"""
Song model and the corpus container handed over by the corpus provider.

Tokens arrive already tokenized. The engine only applies `normalize_token`
(trim + lower-case) before counting or comparing them.
"""

from __future__ import annotations

import json
from collections import Counter
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from lyra_relevance.errors import CorpusFormatError

if TYPE_CHECKING:
    import numpy as np
    from numpy.typing import NDArray

    from lyra_relevance.vocabulary import Vocabulary


def normalize_token(token: str) -> str:
    """Trim surrounding whitespace and lower-case a token."""
    return token.strip().lower()


def normalize_tokens(tokens: Iterable[str]) -> list[str]:
    """Normalize a token sequence, dropping tokens that end up empty."""
    normalized = (normalize_token(token) for token in tokens)
    return [token for token in normalized if token]


@dataclass(eq=False)
class Song:
    """
    A single song of the corpus.

    Args:
        id: Identifier assigned by the corpus provider.
        artist: Artist name, matched exactly by relevance queries.
        year: Publication year.
        is_compilation: Whether the song was published on a compilation.
        tokens: Tokenized lyrics, in order.

    Attributes:
        term_frequencies: Raw count of each normalized token, written by a weighting pass.
        weights: TF-IDF vector aligned to the vocabulary order, written by a weighting pass.
        weighted_with: Vocabulary the current weights were computed against.
    """

    id: str
    artist: str
    year: int
    is_compilation: bool = False
    tokens: list[str] = field(default_factory=list)

    term_frequencies: Counter[str] = field(default_factory=Counter, repr=False)
    weights: NDArray[np.float64] | None = field(default=None, repr=False)
    weighted_with: Vocabulary | None = field(default=None, repr=False)

    @property
    def normalized_tokens(self) -> list[str]:
        return normalize_tokens(self.tokens)

    def is_weighted_with(self, vocabulary: Vocabulary) -> bool:
        return self.weights is not None and self.weighted_with is vocabulary


def _require(record: Mapping[str, Any], key: str, index: int) -> Any:
    if key not in record:
        raise CorpusFormatError(f"Record {index} is missing the {key!r} field")
    return record[key]


def song_from_record(record: Mapping[str, Any], index: int = 0) -> Song:
    """Build a `Song` from a provider record (dict, JSON object or dataset row)."""
    tokens = _require(record, "tokens", index)
    if isinstance(tokens, str) or not isinstance(tokens, Iterable):
        raise CorpusFormatError(f"Record {index}: 'tokens' must be a sequence of strings")
    tokens = list(tokens)
    if not all(isinstance(token, str) for token in tokens):
        raise CorpusFormatError(f"Record {index}: 'tokens' must be a sequence of strings")

    year = _require(record, "year", index)
    if isinstance(year, bool) or not isinstance(year, int):
        raise CorpusFormatError(f"Record {index}: 'year' must be an integer, got {year!r}")

    compilation = record.get("is_compilation", record.get("compilation", False))
    if not isinstance(compilation, bool):
        raise CorpusFormatError(f"Record {index}: 'compilation' must be a boolean, got {compilation!r}")

    song_id = record.get("id")
    return Song(
        id=str(song_id) if song_id is not None else str(index),
        artist=str(_require(record, "artist", index)),
        year=year,
        is_compilation=compilation,
        tokens=tokens,
    )


class SongCorpus:
    """
    Ordered collection of songs with a snapshot counter.

    The snapshot changes every time songs are added, so a vocabulary built
    earlier can be recognised as stale.

    Args:
        songs: Songs supplied by the corpus provider.
    """

    def __init__(self, songs: Iterable[Song] = ()):
        self.songs: list[Song] = list(songs)
        self.snapshot = 0

    def __len__(self) -> int:
        return len(self.songs)

    def __getitem__(self, index: int) -> Song:
        return self.songs[index]

    def __iter__(self) -> Iterator[Song]:
        return iter(self.songs)

    def add(self, song: Song) -> None:
        self.songs.append(song)
        self.snapshot += 1

    def extend(self, songs: Iterable[Song]) -> None:
        added = list(songs)
        if added:
            self.songs.extend(added)
            self.snapshot += 1

    @property
    def artists(self) -> list[str]:
        """Distinct artist names, sorted."""
        return sorted({song.artist for song in self.songs})

    @property
    def year_range(self) -> tuple[int, int] | None:
        if not self.songs:
            return None
        years = [song.year for song in self.songs]
        return min(years), max(years)

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "SongCorpus":
        return cls(song_from_record(record, index) for index, record in enumerate(records))

    @classmethod
    def from_jsonl(cls, path: str | Path) -> "SongCorpus":
        records = []
        with Path(path).open(encoding="utf-8") as handle:
            for line_number, line in enumerate(handle, start=1):
                if not line.strip():
                    continue
                try:
                    records.append(json.loads(line))
                except json.JSONDecodeError as exc:
                    raise CorpusFormatError(f"{path}:{line_number}: invalid JSON ({exc.msg})") from exc
        return cls.from_records(records)
