from __future__ import annotations

from typing import List, Optional, Tuple

import numpy as np
from numpy.typing import NDArray

BinaryMatrix = NDArray[np.uint8]
Block = Tuple[NDArray[np.intp], NDArray[np.intp]]


def _fill_empty(matrix: BinaryMatrix, rng: np.random.Generator) -> None:
    """Set one random entry in every all-zero row and column (in place)."""
    n_rows, n_cols = matrix.shape

    # Ensure no empty rows
    for i in range(n_rows):
        if not matrix[i].any():
            matrix[i, rng.integers(0, n_cols)] = 1

    # Ensure no empty columns
    for j in range(n_cols):
        if not matrix[:, j].any():
            matrix[rng.integers(0, n_rows), j] = 1


def random_binary_matrix(
    n_rows: int,
    n_cols: int,
    density: float = 0.2,
    rng: Optional[np.random.Generator] = None,
) -> BinaryMatrix:
    """
    Generate an n_rows x n_cols presence/absence matrix.

    Args:
        n_rows: Number of rows (samples).
        n_cols: Number of columns (features).
        density: Probability of a 1 in (0, 1].
        rng: Optional numpy random generator.

    Returns:
        uint8 matrix with no all-zero row or column.
    """
    if rng is None:
        rng = np.random.default_rng()

    matrix = (rng.random((n_rows, n_cols)) < density).astype(np.uint8)
    _fill_empty(matrix, rng)
    return matrix


def planted_bicluster_matrix(
    n_rows: int,
    n_cols: int,
    n_biclusters: int = 3,
    block_rows: int = 5,
    block_cols: int = 4,
    density: float = 0.05,
    seed: int | None = None,
) -> Tuple[BinaryMatrix, List[Block]]:
    """
    Generate a sparse binary matrix with planted all-ones biclusters.

    Properties:
    - sparse background noise with the given density
    - `n_biclusters` blocks of block_rows x block_cols ones on randomly
      chosen (possibly overlapping) rows and columns
    - no all-zero row or column

    Returns:
        (matrix, blocks) where each block is (sorted row indices, sorted column indices).
    """
    assert block_rows <= n_rows and block_cols <= n_cols
    rng = np.random.default_rng(seed)

    matrix = (rng.random((n_rows, n_cols)) < density).astype(np.uint8)

    blocks: List[Block] = []
    for _ in range(n_biclusters):
        rows = np.sort(rng.choice(n_rows, size=block_rows, replace=False))
        cols = np.sort(rng.choice(n_cols, size=block_cols, replace=False))
        matrix[np.ix_(rows, cols)] = 1
        blocks.append((rows, cols))

    _fill_empty(matrix, rng)
    return matrix, blocks
