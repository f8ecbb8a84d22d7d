"""
Common data structures for incidence estimation.

IncidenceParams and DifferenceParams are the parameter payloads wrapped
by Result[P] and exposed through the Solution classes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray
from scipy import stats as sp_stats


@dataclass(frozen=True)
class IncidenceParams:
    """
    Parameter payload for a single-survey incidence estimate.

    - incidence: Kassanjee point estimate (times `per`)
    - conf_int: (lower, upper), shape (2,)
    - se: standard error
    - rse: se / |incidence|
    - se_inf_ss: SE due to MDRI and FRR alone (delta method only)
    - cov_prev_incidence, cor_prev_incidence: 2x2 covariance and
      correlation matrices of (prevalence draws, incidence draws),
      bootstrap only
    - bootstrap_incidence: incidence per bootstrap draw, bootstrap only
    """
    incidence: float
    conf_int: NDArray[np.floating[Any]]         # shape (2,)
    se: float
    rse: float
    alpha: float
    se_inf_ss: float | None = None
    cov_prev_incidence: NDArray[np.floating[Any]] | None = None   # shape (2, 2)
    cor_prev_incidence: NDArray[np.floating[Any]] | None = None   # shape (2, 2)
    bootstrap_incidence: NDArray[np.floating[Any]] | None = None  # shape (R,)


@dataclass(frozen=True)
class DifferenceParams:
    """
    Parameter payload for a two-group incidence difference.

    - difference: I_1 - I_2, each clamped at 0 first
    - incidence: the two clamped point estimates, shape (2,)
    - conf_int: (lower, upper) at the Bonferroni-adjusted alpha
    - p_value: two-sided, 2 * Phi(-|difference| / se)
    - bootstrap_differences: per-draw differences, only when requested
    """
    difference: float
    incidence: NDArray[np.floating[Any]]        # shape (2,)
    conf_int: NDArray[np.floating[Any]]         # shape (2,)
    se: float
    rse: float
    p_value: float
    alpha: float
    bootstrap_differences: NDArray[np.floating[Any]] | None = None  # shape (R,)


def relative_se(se: float, estimate: float) -> float:
    """se / |estimate|; inf (or nan when se is 0) for a zero estimate."""
    with np.errstate(divide='ignore', invalid='ignore'):
        return float(np.float64(se) / abs(np.float64(estimate)))


def two_sided_p(estimate: float, se: float) -> float:
    """2 * Phi(-|estimate| / se) under the normal approximation."""
    with np.errstate(divide='ignore', invalid='ignore'):
        z = -abs(np.float64(estimate)) / np.float64(se)
    return float(2.0 * sp_stats.norm.cdf(z))
