"""
Input validation utilities for pyinctools.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

import numbers

import numpy as np
from numpy.typing import ArrayLike, NDArray
from typing import Any

from pyinctools.core.exceptions import ValidationError, DimensionError


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Validate and convert input to a float64 numpy array.

    Rejects inputs that result in object dtype (indicating mixed types or
    non-numeric data) and non-numeric dtypes.

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray of dtype float64 (always a copy)

    Raises:
        ValidationError: If input cannot be converted to numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    if not np.issubdtype(result.dtype, np.number):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )

    return result.astype(np.float64, copy=True)


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array contains no NaN or Inf values.

    Raises:
        ValidationError: If array contains non-finite values
    """
    if not np.all(np.isfinite(array)):
        n_nan = int(np.sum(np.isnan(array)))
        n_inf = int(np.sum(np.isinf(array)))
        raise ValidationError(
            f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)"
        )


def check_no_nan(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array contains no NaN values (±Inf allowed).

    Truncation bounds may be infinite but never NaN.

    Raises:
        ValidationError: If array contains NaN
    """
    n_nan = int(np.sum(np.isnan(array)))
    if n_nan > 0:
        raise ValidationError(f"{name}: contains {n_nan} NaN values")


def check_ndim(array: NDArray[np.floating[Any]], ndim: int, name: str) -> None:
    """
    Verify array has exactly the specified number of dimensions.

    Raises:
        DimensionError: If array has wrong number of dimensions
    """
    if array.ndim != ndim:
        raise DimensionError(
            f"{name}: expected {ndim}D array, got {array.ndim}D with shape {array.shape}"
        )


def check_1d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Verify array is 1-dimensional."""
    check_ndim(array, 1, name)


def check_2d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Verify array is 2-dimensional."""
    check_ndim(array, 2, name)


def check_length(array: NDArray[np.floating[Any]], length: int, name: str) -> None:
    """
    Verify a 1D array has exactly the given length.

    Raises:
        DimensionError: If the length differs
    """
    if array.shape[0] != length:
        raise DimensionError(
            f"{name}: expected length {length}, got {array.shape[0]}"
        )


def check_square(array: NDArray[np.floating[Any]], size: int, name: str) -> None:
    """
    Verify a 2D array has shape (size, size).

    Raises:
        DimensionError: If the shape differs
    """
    if array.shape != (size, size):
        raise DimensionError(
            f"{name}: shape {array.shape} does not match mean vector length {size} "
            f"(expected ({size}, {size}))"
        )


def check_nonnegative(value: float, name: str) -> None:
    """
    Verify a scalar is finite and >= 0.

    Raises:
        ValidationError: If value is negative or non-finite
    """
    if not np.isfinite(value):
        raise ValidationError(f"{name}: must be finite, got {value}")
    if value < 0:
        raise ValidationError(f"{name}: must be >= 0, got {value}")


def check_scalar_finite(value: float, name: str) -> None:
    """
    Verify a scalar is a finite real number.

    Raises:
        ValidationError: If value is not a finite real
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ValidationError(
            f"{name}: expected a real number, got {type(value).__name__}"
        )
    if not np.isfinite(value):
        raise ValidationError(f"{name}: must be finite, got {value}")


def check_alpha(alpha: float, name: str = "alpha") -> None:
    """
    Verify a significance level lies strictly inside (0, 1).

    Raises:
        ValidationError: If alpha is outside (0, 1)
    """
    check_scalar_finite(alpha, name)
    if not 0.0 < alpha < 1.0:
        raise ValidationError(f"{name}: must be in (0, 1), got {alpha}")


def check_count(value: int, name: str, minimum: int = 0) -> None:
    """
    Verify an integer count is at least `minimum`.

    Raises:
        ValidationError: If value is not an integer or is below minimum
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ValidationError(
            f"{name}: expected an integer, got {type(value).__name__}"
        )
    if value < minimum:
        raise ValidationError(f"{name}: must be >= {minimum}, got {value}")
