import pytest

from lyra_relevance.songs import Song, SongCorpus


@pytest.fixture
def two_song_corpus() -> SongCorpus:
    return SongCorpus(
        [
            Song("doc1", "X", 2000, False, ["a", "a", "b"]),
            Song("doc2", "X", 2001, False, ["b", "c"]),
        ]
    )


@pytest.fixture
def discography() -> SongCorpus:
    return SongCorpus(
        [
            Song("1", "bob dylan", 1963, False, "the times they are a changin".split()),
            Song("2", "bob dylan", 1965, False, "how does it feel to be on your own".split()),
            Song("3", "bob dylan", 1966, True, "rainy day women rainy day".split()),
            Song("4", "frank zappa", 1966, False, "who are the brain police".split()),
            Song("5", "frank zappa", 1974, False, "dont eat the yellow snow yellow snow".split()),
            Song("6", "bob dylan", 1975, False, "tangled up in blue tangled up".split()),
        ]
    )
