"""
Solver dispatch for truncated multivariate normal sampling.

rtmvnorm() classifies the covariance matrix and routes to the
independent (Gibbs) or rejection backend, or honours an explicit method
after checking it applies. This is the only place dispatch lives.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike

from pyinctools.core.capabilities import (
    METHOD_AUTO,
    METHOD_GIBBS,
    METHOD_REJECTION,
    REJECTION_DIMENSION,
)
from pyinctools.core.exceptions import (
    CapabilityWarning,
    DimensionError,
    ValidationError,
    warn,
)
from pyinctools.tmvnorm._classify import is_diagonal
from pyinctools.tmvnorm.backends.gibbs import IndependentGibbsBackend
from pyinctools.tmvnorm.backends.rejection import RejectionBackend
from pyinctools.tmvnorm.design import TMVNDesign
from pyinctools.tmvnorm.solution import TMVNSolution


def _get_backend(design: TMVNDesign):
    """
    Select the sampling backend for a design.

    | method    | diagonal Sigma | correlated Sigma                        |
    |-----------|----------------|-----------------------------------------|
    | auto      | Gibbs          | rejection (warns when d != 4)           |
    | gibbs     | Gibbs          | ValidationError                         |
    | rejection | rejection      | rejection; DimensionError when d != 4   |
    """
    diagonal = is_diagonal(design.sigma)
    d = design.dim
    method = design.method

    if method == METHOD_AUTO:
        if diagonal:
            return IndependentGibbsBackend()
        if d != REJECTION_DIMENSION:
            warn(
                f"Rejection sampling currently only supports "
                f"{REJECTION_DIMENSION} dimensions. Covariance is "
                f"non-diagonal with {d} dimensions; the rejection sampler "
                f"requires exactly {REJECTION_DIMENSION}.",
                CapabilityWarning,
            )
        return RejectionBackend()
    if method == METHOD_GIBBS:
        if not diagonal:
            raise ValidationError(
                "Gibbs sampling requires a diagonal covariance matrix "
                "(sigma is not diagonal). Use method='rejection' or "
                "method='auto'."
            )
        return IndependentGibbsBackend()
    if method == METHOD_REJECTION:
        if d != REJECTION_DIMENSION:
            raise DimensionError(
                f"Rejection sampling currently only supports "
                f"{REJECTION_DIMENSION} dimensions, got {d}"
            )
        return RejectionBackend()
    raise ValidationError(
        f"Unknown method: {method!r}. Use 'auto', 'gibbs', or 'rejection'."
    )


def rtmvnorm(
    n: int | TMVNDesign,
    mu: ArrayLike | None = None,
    sigma: ArrayLike | None = None,
    lower: ArrayLike | None = None,
    upper: ArrayLike | None = None,
    *,
    method: str = METHOD_AUTO,
    rng: np.random.Generator | None = None,
    seed: int | None = None,
    max_iter: int | None = None,
) -> TMVNSolution:
    """
    Sample from a truncated multivariate normal distribution.

    Parameters
    ----------
    n : int or TMVNDesign
        Number of samples, or a pre-built TMVNDesign (remaining
        arguments are then ignored).
    mu : array-like
        Mean vector, length d.
    sigma : array-like
        Covariance matrix, d x d.
    lower, upper : array-like
        Truncation bounds, length d. Use -inf / inf for open sides.
    method : str
        "auto" (default) picks Gibbs for a diagonal sigma (every
        off-diagonal |entry| <= 1e-10) and rejection otherwise.
        "gibbs" forces independent sampling and fails on a correlated
        sigma. "rejection" forces rejection sampling, 4 dimensions only.
    rng : numpy.random.Generator or None
        Generator to draw from. Same generator state gives the same
        sample matrix.
    seed : int or None
        Seed for a fresh generator when rng is not given.
    max_iter : int or None
        Cap on rejection retry iterations. None (default) retries until
        n rows are accepted.

    Returns
    -------
    TMVNSolution
        Sample matrix of shape (n, d) plus method metadata.

    Raises
    ------
    DimensionError
        Shapes disagree with len(mu), or rejection forced at d != 4.
    ValidationError
        Gibbs forced on a correlated sigma, unknown method, bad inputs.
    CapabilityError
        Correlated sigma at a dimension the rejection sampler lacks.
    ConvergenceError
        max_iter reached before n rows were accepted.
    """
    if isinstance(n, TMVNDesign):
        design = n
    else:
        design = TMVNDesign.for_sampling(
            n, mu, sigma, lower, upper,
            method=method,
            rng=rng,
            seed=seed,
            max_iter=max_iter,
        )

    be = _get_backend(design)
    result = be.solve(design)
    return TMVNSolution(_result=result, _design=design)
