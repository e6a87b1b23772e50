from __future__ import annotations

import numbers
from typing import List, Sequence

import numpy as np
from numpy.typing import NDArray
from scipy import sparse

from ..errors import InvalidInputError

BinaryMatrix = NDArray[np.uint8]

# Words are stored as numpy.uint64
MAX_BWL = 64


def validate_binary_matrix(matrix) -> BinaryMatrix:
    """
    Check that `matrix` is a non-empty 2-D matrix of 0/1 values.

    Accepts numpy arrays, nested lists, pandas DataFrames and scipy.sparse
    matrices. Returns a C-contiguous uint8 copy; the caller's object is never
    modified.

    Raises:
        InvalidInputError: wrong dimensionality, empty, or non-binary values.
    """
    if sparse.issparse(matrix):
        matrix = matrix.toarray()

    try:
        arr = np.asarray(matrix)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"Matrix is not numeric: {exc}") from exc

    # Bool, integer or float only; strings and objects are never coerced
    if arr.dtype.kind not in "biuf":
        raise InvalidInputError(f"Matrix must be numeric or boolean, got dtype {arr.dtype}.")

    if arr.ndim != 2:
        raise InvalidInputError(f"Expected a 2-D matrix, got {arr.ndim} dimension(s).")

    n_rows, n_cols = arr.shape
    if n_rows == 0 or n_cols == 0:
        raise InvalidInputError(f"Matrix must be non-empty, got shape {arr.shape}.")

    # NaN fails both comparisons
    non_binary = ~((arr == 0) | (arr == 1))
    if np.any(non_binary):
        i, j = np.argwhere(non_binary)[0]
        raise InvalidInputError(
            f"Matrix must contain only 0/1 values; found {arr[i, j]!r} at ({i}, {j})."
        )

    return np.ascontiguousarray(arr, dtype=np.uint8)


def validate_bwl(bwl) -> int:
    if not _is_int(bwl):
        raise InvalidInputError(f"bwl must be an integer, got {bwl!r}.")
    if bwl < 2 or bwl > MAX_BWL:
        raise InvalidInputError(f"bwl must be in [2, {MAX_BWL}], got {bwl}.")
    return int(bwl)


def validate_threshold(value, name: str) -> int:
    if not _is_int(value):
        raise InvalidInputError(f"{name} must be an integer, got {value!r}.")
    if value < 1:
        raise InvalidInputError(f"{name} must be positive, got {value}.")
    return int(value)


def validate_range(values: Sequence[int], name: str) -> List[int]:
    """Return `values` as a list of ints, rejecting empty or non-positive ranges."""
    values = list(values)
    if not values:
        raise InvalidInputError(f"{name} must not be empty.")
    for v in values:
        if not _is_int(v) or v < 1:
            raise InvalidInputError(f"{name} must contain positive integers, got {v!r}.")
    return [int(v) for v in values]


def _is_int(value) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)
