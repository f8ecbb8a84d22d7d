"""
Tests for input validation utilities.

Validates every function in core/validation.py:
    - check_array: conversion, float64 copy, non-numeric rejection
    - check_finite / check_no_nan: NaN/Inf detection
    - check_ndim / check_1d / check_2d / check_length / check_square
    - check_nonnegative / check_scalar_finite / check_alpha / check_count
"""

import numpy as np
import pytest

from pyinctools.core.exceptions import DimensionError, ValidationError
from pyinctools.core.validation import (
    check_1d,
    check_2d,
    check_alpha,
    check_array,
    check_count,
    check_finite,
    check_length,
    check_no_nan,
    check_nonnegative,
    check_scalar_finite,
    check_square,
)


# ═══════════════════════════════════════════════════════════════════════
# Arrays
# ═══════════════════════════════════════════════════════════════════════


class TestCheckArray:

    def test_list_to_float64(self):
        result = check_array([1, 2, 3], "mu")
        assert result.dtype == np.float64
        np.testing.assert_array_equal(result, [1.0, 2.0, 3.0])

    def test_returns_copy(self):
        arr = np.array([1.0, 2.0])
        result = check_array(arr, "mu")
        result[0] = 99.0
        assert arr[0] == 1.0

    def test_rejects_object_dtype(self):
        with pytest.raises(ValidationError, match="object dtype"):
            check_array([None, 1, 2.0], "mu")

    def test_rejects_strings(self):
        with pytest.raises(ValidationError, match="non-numeric dtype"):
            check_array(["a", "b"], "mu")


class TestFiniteChecks:

    def test_finite_passes(self):
        check_finite(np.array([1.0, 2.0]), "mu")

    def test_nan_rejected(self):
        with pytest.raises(ValidationError, match="1 NaN"):
            check_finite(np.array([1.0, np.nan]), "mu")

    def test_inf_rejected_by_finite(self):
        with pytest.raises(ValidationError, match="1 Inf"):
            check_finite(np.array([1.0, np.inf]), "mu")

    def test_inf_allowed_by_no_nan(self):
        check_no_nan(np.array([-np.inf, np.inf]), "upper")

    def test_nan_rejected_by_no_nan(self):
        with pytest.raises(ValidationError, match="NaN"):
            check_no_nan(np.array([0.0, np.nan]), "lower")


class TestShapeChecks:

    def test_1d_rejects_2d(self):
        with pytest.raises(DimensionError, match="expected 1D"):
            check_1d(np.zeros((2, 2)), "mu")

    def test_2d_rejects_1d(self):
        with pytest.raises(DimensionError, match="expected 2D"):
            check_2d(np.zeros(3), "sigma")

    def test_length(self):
        check_length(np.zeros(4), 4, "lower")
        with pytest.raises(DimensionError, match="expected length 4, got 3"):
            check_length(np.zeros(3), 4, "lower")

    def test_square(self):
        check_square(np.eye(3), 3, "sigma")
        with pytest.raises(DimensionError, match=r"\(3, 3\)"):
            check_square(np.eye(2), 3, "sigma")


# ═══════════════════════════════════════════════════════════════════════
# Scalars
# ═══════════════════════════════════════════════════════════════════════


class TestScalarChecks:

    def test_nonnegative(self):
        check_nonnegative(0.0, "se_prev")
        with pytest.raises(ValidationError, match=">= 0"):
            check_nonnegative(-0.1, "se_prev")

    def test_nonnegative_rejects_nan(self):
        with pytest.raises(ValidationError, match="finite"):
            check_nonnegative(np.nan, "se_prev")

    def test_scalar_finite_accepts_numpy_float(self):
        check_scalar_finite(np.float64(0.2), "prev")

    def test_scalar_finite_rejects_bool(self):
        with pytest.raises(ValidationError, match="real number"):
            check_scalar_finite(True, "prev")

    def test_scalar_finite_rejects_string(self):
        with pytest.raises(ValidationError, match="real number"):
            check_scalar_finite("0.2", "prev")

    @pytest.mark.parametrize("alpha", [0.0, 1.0, -0.05, 1.5])
    def test_alpha_out_of_range(self, alpha):
        with pytest.raises(ValidationError, match=r"\(0, 1\)"):
            check_alpha(alpha)

    def test_alpha_valid(self):
        check_alpha(0.05)

    def test_count(self):
        check_count(0, "bootstrap_draws")
        check_count(np.int64(5), "n", minimum=1)

    def test_count_rejects_float(self):
        with pytest.raises(ValidationError, match="integer"):
            check_count(10.0, "n")

    def test_count_below_minimum(self):
        with pytest.raises(ValidationError, match=">= 1"):
            check_count(0, "max_iter", minimum=1)
