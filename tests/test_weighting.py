import math

import numpy as np
import pytest

from lyra_relevance.errors import StaleVocabularyError, VocabularyNotBuiltError
from lyra_relevance.frequencies import document_frequencies
from lyra_relevance.songs import Song, SongCorpus
from lyra_relevance.vocabulary import build_vocabulary
from lyra_relevance.weighting import inverse_document_frequency, weigh_corpus


def test_weights_of_two_song_corpus(two_song_corpus):
    vocabulary = build_vocabulary(two_song_corpus)
    result = weigh_corpus(two_song_corpus, vocabulary)
    assert result is two_song_corpus

    doc1, doc2 = two_song_corpus
    assert np.allclose(doc1.weights, [math.log(2), 0.0, 0.0])
    assert np.allclose(doc2.weights, [0.0, 0.0, math.log(2)])
    assert np.isclose(doc1.weights[0], 0.6931, atol=1e-4)
    assert doc1.term_frequencies == {"a": 2, "b": 1}
    assert doc1.weighted_with is vocabulary


def test_vector_length_matches_vocabulary(discography):
    vocabulary = build_vocabulary(discography)
    weigh_corpus(discography, vocabulary)
    for song in discography:
        assert song.weights.shape == (len(vocabulary),)


def test_nonzero_weight_only_for_occurring_tokens(discography):
    vocabulary = build_vocabulary(discography)
    weigh_corpus(discography, vocabulary)
    df = document_frequencies(discography)

    for song in discography:
        for idx, token in enumerate(vocabulary):
            occurs = song.term_frequencies.get(token, 0) > 0
            if song.weights[idx] != 0:
                assert occurs
            if occurs and df[token] < len(discography):
                assert song.weights[idx] > 0
            assert song.weights[idx] >= 0


def test_weighting_pass_is_idempotent(discography):
    vocabulary = build_vocabulary(discography)
    weigh_corpus(discography, vocabulary)
    first = [song.weights.copy() for song in discography]
    weigh_corpus(discography, vocabulary)
    for before, song in zip(first, discography):
        assert np.array_equal(before, song.weights)
        assert before.tobytes() == song.weights.tobytes()


def test_weighting_counts_normalized_tokens():
    corpus = SongCorpus(
        [
            Song("1", "X", 2000, tokens=["Rain", "rain", "sun"]),
            Song("2", "X", 2000, tokens=["sun"]),
        ]
    )
    vocabulary = build_vocabulary(corpus)
    weigh_corpus(corpus, vocabulary)
    assert list(vocabulary) == ["rain", "sun"]
    assert np.isclose(corpus[0].weights[0], math.log(2))


def test_empty_corpus():
    corpus = SongCorpus()
    vocabulary = build_vocabulary(corpus)
    assert weigh_corpus(corpus, vocabulary) is corpus


def test_empty_song_gets_zero_vector(two_song_corpus):
    two_song_corpus.add(Song("doc3", "X", 2002, tokens=[]))
    vocabulary = build_vocabulary(two_song_corpus)
    weigh_corpus(two_song_corpus, vocabulary)
    assert np.array_equal(two_song_corpus[2].weights, np.zeros(3))


def test_requires_vocabulary(two_song_corpus):
    with pytest.raises(VocabularyNotBuiltError):
        weigh_corpus(two_song_corpus, None)


def test_rejects_stale_vocabulary(two_song_corpus):
    vocabulary = build_vocabulary(two_song_corpus)
    two_song_corpus.add(Song("doc3", "Y", 2002, tokens=["d"]))
    with pytest.raises(StaleVocabularyError):
        weigh_corpus(two_song_corpus, vocabulary)


def test_inverse_document_frequency():
    idf = inverse_document_frequency(np.array([1.0, 2.0, 4.0, 0.0]), 4)
    assert np.allclose(idf, [math.log(4), math.log(2), 0.0, 0.0])
    assert np.all(idf >= 0)
    assert np.all(idf <= math.log(4))
