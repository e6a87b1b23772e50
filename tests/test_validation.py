"""
Tests for up-front input validation.
"""

import numpy as np
import pandas as pd
import pytest
from scipy import sparse

from bibit.errors import BibitError, InvalidInputError
from bibit.utils.validation import (
    validate_binary_matrix,
    validate_bwl,
    validate_range,
    validate_threshold,
)


class TestValidateBinaryMatrix:

    def test_returns_uint8_copy(self, scenario_matrix):
        out = validate_binary_matrix(scenario_matrix.astype(float))
        assert out.dtype == np.uint8
        np.testing.assert_array_equal(out, scenario_matrix)

    def test_accepts_lists_and_bools(self):
        out = validate_binary_matrix([[True, False], [False, True]])
        assert out.tolist() == [[1, 0], [0, 1]]

    def test_accepts_sparse(self, scenario_matrix):
        out = validate_binary_matrix(sparse.csr_matrix(scenario_matrix))
        np.testing.assert_array_equal(out, scenario_matrix)

    def test_accepts_dataframe(self, scenario_matrix):
        out = validate_binary_matrix(pd.DataFrame(scenario_matrix))
        np.testing.assert_array_equal(out, scenario_matrix)

    @pytest.mark.parametrize(
        "matrix",
        [
            [[0, 1], [2, 0]],
            [[0, 1], [np.nan, 0]],
            [[0.5, 1]],
            [[-1, 0]],
        ],
    )
    def test_rejects_non_binary(self, matrix):
        with pytest.raises(InvalidInputError):
            validate_binary_matrix(matrix)

    @pytest.mark.parametrize("matrix", [[1, 0, 1], np.zeros((0, 3)), np.zeros((3, 0)), np.zeros((2, 2, 2))])
    def test_rejects_bad_shape(self, matrix):
        with pytest.raises(InvalidInputError):
            validate_binary_matrix(matrix)

    def test_rejects_non_numeric(self):
        with pytest.raises(InvalidInputError):
            validate_binary_matrix([["a", "b"]])

    @pytest.mark.parametrize(
        "matrix",
        [
            [["1", "0"], ["0", "1"]],
            np.array([[1, None], [0, 1]], dtype=object),
            np.array([[1 + 0j, 0j]]),
        ],
    )
    def test_rejects_non_numeric_dtypes(self, matrix):
        with pytest.raises(InvalidInputError, match="dtype"):
            validate_binary_matrix(matrix)

    def test_error_hierarchy(self):
        with pytest.raises(ValueError):
            validate_binary_matrix([[3]])
        assert issubclass(InvalidInputError, BibitError)


class TestValidateParameters:

    def test_bwl_bounds(self):
        assert validate_bwl(2) == 2
        assert validate_bwl(np.int64(64)) == 64
        for bad in (1, 0, 65, 2.0, True, "3"):
            with pytest.raises(InvalidInputError):
                validate_bwl(bad)

    def test_threshold(self):
        assert validate_threshold(1, "mnr") == 1
        with pytest.raises(InvalidInputError, match="mnc"):
            validate_threshold(0, "mnc")

    def test_range(self):
        assert validate_range(range(2, 5), "mnr_range") == [2, 3, 4]
        with pytest.raises(InvalidInputError, match="empty"):
            validate_range([], "mnr_range")
        with pytest.raises(InvalidInputError):
            validate_range([2, 0], "mnc_range")
