"""
Design class for truncated multivariate normal sampling.

TMVNDesign encapsulates everything a sampling backend needs: the number
of draws, the mean vector, the covariance matrix, the truncation box,
the requested method and the random generator. Immutable, validated at
construction.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyinctools.core.capabilities import ALL_METHODS, METHOD_AUTO
from pyinctools.core.compute.tolerances import PSD_TOLERANCE
from pyinctools.core.exceptions import ValidationError
from pyinctools.core.validation import (
    check_1d,
    check_2d,
    check_array,
    check_count,
    check_finite,
    check_length,
    check_no_nan,
    check_square,
)


def resolve_rng(
    rng: np.random.Generator | None,
    seed: int | None,
) -> np.random.Generator:
    """
    Return the generator a call should draw from.

    An explicit generator wins; otherwise a fresh one is seeded from
    `seed` (or from OS entropy when seed is None). Passing both is
    ambiguous and rejected.
    """
    if rng is not None and seed is not None:
        raise ValidationError("Pass either rng or seed, not both")
    if rng is not None:
        if not isinstance(rng, np.random.Generator):
            raise ValidationError(
                f"rng must be a numpy.random.Generator, got {type(rng).__name__}"
            )
        return rng
    return np.random.default_rng(seed)


@dataclass(frozen=True)
class TMVNDesign:
    """
    Frozen design for truncated multivariate normal sampling.

    Attributes:
        n: Number of samples to draw.
        mu: Mean vector, shape (d,).
        sigma: Covariance matrix, shape (d, d).
        lower: Lower truncation bounds, shape (d,). -inf allowed.
        upper: Upper truncation bounds, shape (d,). +inf allowed.
        method: "auto", "gibbs" or "rejection".
        rng: Generator every draw is taken from.
        max_iter: Optional cap on rejection-sampler retry iterations.
    """
    n: int
    mu: NDArray[np.floating[Any]]
    sigma: NDArray[np.floating[Any]]
    lower: NDArray[np.floating[Any]]
    upper: NDArray[np.floating[Any]]
    method: str
    rng: np.random.Generator
    max_iter: int | None

    @property
    def dim(self) -> int:
        """Dimensionality d."""
        return self.mu.shape[0]

    @classmethod
    def for_sampling(
        cls,
        n: int,
        mu: ArrayLike,
        sigma: ArrayLike,
        lower: ArrayLike,
        upper: ArrayLike,
        *,
        method: str = METHOD_AUTO,
        rng: np.random.Generator | None = None,
        seed: int | None = None,
        max_iter: int | None = None,
    ) -> TMVNDesign:
        """
        Create a sampling design with validation.

        Args:
            n: Number of samples. Must be >= 0.
            mu: Mean vector (length d).
            sigma: Covariance matrix (d x d), symmetric and positive
                semi-definite.
            lower: Lower bounds (length d).
            upper: Upper bounds (length d).
            method: "auto" (default), "gibbs" or "rejection".
            rng: Explicit numpy Generator.
            seed: Seed for a fresh Generator when rng is not given.
            max_iter: Cap on rejection retry iterations (None = no cap).

        Returns:
            Validated TMVNDesign.

        Raises:
            DimensionError: If sigma or the bounds disagree with len(mu).
            ValidationError: If inputs are otherwise invalid.
        """
        check_count(n, "n")

        mu_arr = check_array(mu, "mu")
        check_1d(mu_arr, "mu")
        check_finite(mu_arr, "mu")
        d = mu_arr.shape[0]
        if d < 1:
            raise ValidationError("mu must have at least one element")

        sigma_arr = check_array(sigma, "sigma")
        check_2d(sigma_arr, "sigma")
        check_square(sigma_arr, d, "sigma")
        check_finite(sigma_arr, "sigma")
        if np.any(np.diag(sigma_arr) < 0):
            raise ValidationError(
                f"sigma: diagonal must be non-negative, got {np.diag(sigma_arr)}"
            )
        if not np.allclose(sigma_arr, sigma_arr.T):
            raise ValidationError("sigma: covariance matrix must be symmetric")
        min_eig = float(np.linalg.eigvalsh(sigma_arr).min())
        scale = float(np.abs(sigma_arr).max())
        if min_eig < -PSD_TOLERANCE * scale:
            raise ValidationError(
                f"sigma: covariance matrix is not positive semi-definite "
                f"(smallest eigenvalue {min_eig:.3g})"
            )

        lower_arr = check_array(lower, "lower")
        upper_arr = check_array(upper, "upper")
        check_1d(lower_arr, "lower")
        check_1d(upper_arr, "upper")
        check_length(lower_arr, d, "lower")
        check_length(upper_arr, d, "upper")
        check_no_nan(lower_arr, "lower")
        check_no_nan(upper_arr, "upper")
        if np.any(lower_arr > upper_arr):
            bad = np.where(lower_arr > upper_arr)[0].tolist()
            raise ValidationError(
                f"lower must not exceed upper (violated at dimensions {bad})"
            )

        if method not in ALL_METHODS:
            raise ValidationError(
                f"Unknown method: {method!r}. "
                f"Use 'auto', 'gibbs', or 'rejection'."
            )

        if max_iter is not None:
            check_count(max_iter, "max_iter", minimum=1)

        return cls(
            n=int(n),
            mu=mu_arr,
            sigma=sigma_arr,
            lower=lower_arr,
            upper=upper_arr,
            method=method,
            rng=resolve_rng(rng, seed),
            max_iter=max_iter,
        )
