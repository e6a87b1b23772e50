"""
Shared fixtures for the Bibit test suite.
"""

import numpy as np
import pytest


@pytest.fixture
def scenario_matrix():
    """4x4 matrix with a single 3-row bicluster on the first two columns."""
    return np.array(
        [
            [1, 1, 0, 0],
            [1, 1, 0, 1],
            [1, 1, 1, 0],
            [0, 0, 1, 1],
        ],
        dtype=np.uint8,
    )


@pytest.fixture
def random_matrix():
    """Seeded 30x21 binary matrix; 21 columns is not a multiple of most bwl values."""
    rng = np.random.default_rng(7)
    return (rng.random((30, 21)) < 0.45).astype(np.uint8)
