"""
Tests for the bitword encoder: layout, trailing-word handling and round trips.
"""

import numpy as np
import pytest

from bibit.algorithms.encoder import (
    EncodedMatrix,
    decode,
    decode_words,
    encode,
    word_bit_counts,
)
from bibit.errors import InvalidInputError


class TestEncodeLayout:

    def test_msb_is_lowest_column(self):
        enc = encode(np.array([[1, 0, 1, 1, 0, 1, 1, 1]]), bwl=3)
        assert enc.words.tolist() == [[5, 5, 3]]

    def test_scenario_rows(self, scenario_matrix):
        enc = encode(scenario_matrix, bwl=4)
        assert enc.words[:, 0].tolist() == [12, 13, 14, 3]

        enc = encode(scenario_matrix, bwl=3)
        assert enc.words.tolist() == [[6, 0], [6, 1], [7, 0], [1, 1]]

    def test_shape_and_word_bits(self, random_matrix):
        enc = encode(random_matrix, bwl=4)
        assert enc.words.shape == (30, 6)
        assert enc.n_rows == 30
        assert enc.n_words == 6
        assert enc.n_cols == 21
        assert enc.word_bits.tolist() == [4, 4, 4, 4, 4, 1]
        assert enc.masks.tolist() == [15, 15, 15, 15, 15, 1]

    def test_exact_multiple_has_full_last_word(self):
        assert word_bit_counts(12, 4).tolist() == [4, 4, 4]
        assert word_bit_counts(13, 4).tolist() == [4, 4, 4, 1]

    def test_bwl_wider_than_matrix(self):
        enc = encode(np.array([[1, 0, 1]]), bwl=8)
        assert enc.word_bits.tolist() == [3]
        assert enc.words.tolist() == [[5]]

    def test_full_64_bit_words(self):
        row = np.ones((1, 64), dtype=np.uint8)
        enc = encode(row, bwl=64)
        assert int(enc.words[0, 0]) == 2 ** 64 - 1
        assert int(enc.masks[0]) == 2 ** 64 - 1

    def test_words_are_read_only(self, scenario_matrix):
        enc = encode(scenario_matrix, bwl=2)
        with pytest.raises(ValueError):
            enc.words[0, 0] = 0

    def test_input_not_modified(self, random_matrix):
        before = random_matrix.copy()
        encode(random_matrix, bwl=5)
        np.testing.assert_array_equal(random_matrix, before)

    def test_deterministic(self, random_matrix):
        a = encode(random_matrix, bwl=3)
        b = encode(random_matrix, bwl=3)
        np.testing.assert_array_equal(a.words, b.words)

    def test_rejects_bad_bwl(self, scenario_matrix):
        with pytest.raises(InvalidInputError):
            encode(scenario_matrix, bwl=1)
        with pytest.raises(InvalidInputError):
            encode(scenario_matrix, bwl=65)

    def test_rejects_non_binary(self):
        with pytest.raises(InvalidInputError):
            encode(np.array([[0, 2], [1, 0]]), bwl=2)

    def test_mismatched_layout_fails_loudly(self, scenario_matrix):
        enc = encode(scenario_matrix, bwl=2)
        with pytest.raises(ValueError):
            EncodedMatrix(
                words=enc.words,
                bwl=2,
                n_cols=5,
                word_bits=enc.word_bits,
                masks=enc.masks,
            )


class TestDecode:

    @pytest.mark.parametrize("bwl", [2, 3, 4, 5, 7, 8, 21, 30])
    def test_round_trip(self, random_matrix, bwl):
        np.testing.assert_array_equal(decode(encode(random_matrix, bwl)), random_matrix)

    def test_round_trip_sparse_rows(self):
        rng = np.random.default_rng(11)
        x = (rng.random((10, 37)) < 0.05).astype(np.uint8)
        for bwl in range(2, 10):
            np.testing.assert_array_equal(decode(encode(x, bwl)), x)

    def test_padding_bits_ignored(self, scenario_matrix):
        enc = encode(scenario_matrix, bwl=3)
        dirty = enc.words.copy()
        dirty[:, -1] |= np.uint64(0b110)
        np.testing.assert_array_equal(decode_words(dirty, enc), scenario_matrix)

    def test_single_row(self, scenario_matrix):
        enc = encode(scenario_matrix, bwl=3)
        assert decode_words(enc.words[1], enc).tolist() == [1, 1, 0, 1]

    def test_wrong_word_count(self, scenario_matrix):
        enc = encode(scenario_matrix, bwl=3)
        with pytest.raises(ValueError):
            decode_words(np.zeros(5, dtype=np.uint64), enc)
