from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np
from numpy.typing import NDArray

from ..utils.validation import BinaryMatrix, validate_binary_matrix, validate_bwl

WordMatrix = NDArray[np.uint64]


@dataclass(frozen=True, eq=False)
class EncodedMatrix:
    """
    Bitword encoding of a binary matrix.

    Attributes:
        words: (I, ceil(J / bwl)) read-only uint64 array. Word k of a row holds
            columns [k*bwl, k*bwl + word_bits[k]) with the lowest column index
            in the most significant valid bit.
        bwl: Bitword width.
        n_cols: Number of columns J of the original matrix.
        word_bits: Valid low-order bits per word. Equal to bwl except for a
            short final word.
        masks: Per-word masks keeping only the valid bits.
    """

    words: WordMatrix
    bwl: int
    n_cols: int
    word_bits: NDArray[np.int64]
    masks: WordMatrix

    def __post_init__(self):
        if self.words.ndim != 2 or self.words.shape[1] != len(self.word_bits):
            raise ValueError(
                f"Word matrix shape {self.words.shape} does not match "
                f"{len(self.word_bits)} words per row."
            )
        if int(self.word_bits.sum()) != self.n_cols:
            raise ValueError(
                f"Word bit counts sum to {int(self.word_bits.sum())}, expected {self.n_cols}."
            )

    @property
    def n_rows(self) -> int:
        return self.words.shape[0]

    @property
    def n_words(self) -> int:
        return self.words.shape[1]

    def masked(self, words: WordMatrix) -> WordMatrix:
        """Clear the meaningless high bits of every word (1-D or 2-D input)."""
        return words & self.masks


def word_bit_counts(n_cols: int, bwl: int) -> NDArray[np.int64]:
    """
    Number of valid bits per encoded word: bwl everywhere, except the last
    word which carries bwl - (ceil(J/bwl)*bwl - J) bits.
    """
    n_words = -(-n_cols // bwl)
    bits = np.full(n_words, bwl, dtype=np.int64)
    bits[-1] = bwl - (n_words * bwl - n_cols)
    return bits


def _column_layout(word_bits: NDArray[np.int64], bwl: int) -> Tuple[NDArray[np.intp], NDArray[np.uint64]]:
    """Word index and in-word shift of every original column."""
    n_cols = int(word_bits.sum())
    cols = np.arange(n_cols)
    groups = cols // bwl
    shifts = word_bits[groups] - 1 - (cols % bwl)
    return groups, shifts.astype(np.uint64)


def encode(matrix: BinaryMatrix, bwl: int) -> EncodedMatrix:
    """
    Pack every row of a binary matrix into bitwords of width `bwl`.

    Columns are split into consecutive groups of `bwl` (the last group may be
    shorter). Each group becomes the unsigned integer whose binary digits,
    most significant first, are the group's 0/1 values. A short last group is
    not left-padded.

    Example (bwl=3, one row):
        1 0 1 | 1 0 1 | 1 1  ->  [5, 5, 3]

    Args:
        matrix: I x J binary matrix.
        bwl: Bitword width, 2 <= bwl <= 64.

    Returns:
        EncodedMatrix with I rows and ceil(J / bwl) words per row.
    """
    return _encode_validated(validate_binary_matrix(matrix), validate_bwl(bwl))


def _encode_validated(x: BinaryMatrix, bwl: int) -> EncodedMatrix:
    """Packing step of encode() for a matrix and bwl that were already validated."""
    n_cols = x.shape[1]

    word_bits = word_bit_counts(n_cols, bwl)
    _, shifts = _column_layout(word_bits, bwl)

    contributions = x.astype(np.uint64) << shifts
    words = np.bitwise_or.reduceat(contributions, np.arange(0, n_cols, bwl), axis=1)
    words = np.ascontiguousarray(words, dtype=np.uint64)
    words.setflags(write=False)

    masks = np.array([(1 << int(b)) - 1 for b in word_bits], dtype=np.uint64)
    masks.setflags(write=False)

    return EncodedMatrix(words=words, bwl=bwl, n_cols=n_cols, word_bits=word_bits, masks=masks)


def decode_words(words: WordMatrix, xenc: EncodedMatrix) -> BinaryMatrix:
    """
    Expand bitwords back to 0/1 columns.

    `words` is either one encoded row (shape (W,)) or a stack of rows
    (shape (k, W)); only the valid bits of each word are read, so padding
    bits left over from bitwise operations are ignored.
    """
    words = np.asarray(words, dtype=np.uint64)
    if words.shape[-1] != xenc.n_words:
        raise ValueError(f"Expected {xenc.n_words} words per row, got {words.shape[-1]}.")

    groups, shifts = _column_layout(xenc.word_bits, xenc.bwl)
    bits = (words[..., groups] >> shifts) & np.uint64(1)
    return bits.astype(np.uint8)


def decode(xenc: EncodedMatrix) -> BinaryMatrix:
    """Reconstruct the original binary matrix from its encoding."""
    return decode_words(xenc.words, xenc)
