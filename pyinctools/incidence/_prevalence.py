"""
Prevalence from survey counts.

Normal-approximation point estimate and standard error (inflated by a
design effect), with an optional exact Clopper-Pearson interval computed
from F-distribution quantiles.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray
from scipy import stats as sp_stats

from pyinctools.core.exceptions import (
    ApproximationWarning,
    ValidationError,
    warn,
)
from pyinctools.core.validation import check_alpha, check_count


@dataclass(frozen=True)
class PrevalenceEstimate:
    """
    Proportion estimated from counts.

    Attributes
    ----------
    p : float
        positives / n.
    se : float
        sqrt(p (1 - p) / n) * design_effect.
    conf_int : ndarray or None
        Clopper-Pearson interval, shape (2,). None unless requested.
    """
    p: float
    se: float
    conf_int: NDArray[np.floating[Any]] | None = None

    def __iter__(self):
        # Allows `p, se = prevalence(...)`.
        yield self.p
        yield self.se


def prevalence(
    positives: int,
    n: int,
    design_effect: float = 1.0,
    *,
    ci: bool = False,
    alpha: float = 0.05,
) -> PrevalenceEstimate:
    """
    Estimate prevalence from the number of positive results in a sample.

    Parameters
    ----------
    positives : int
        Number of positive results.
    n : int
        Number tested. n = 0 is replaced by 1 with a warning.
    design_effect : float
        Multiplier on the standard error for clustered designs.
    ci : bool
        Also compute the Clopper-Pearson interval.
    alpha : float
        Significance level for the interval.

    Returns
    -------
    PrevalenceEstimate
    """
    check_count(positives, "positives")
    check_count(n, "n")
    check_alpha(alpha)
    if not np.isfinite(design_effect) or design_effect <= 0:
        raise ValidationError(
            f"design_effect must be finite and > 0, got {design_effect}"
        )
    if positives > max(n, 1):
        raise ValidationError(
            f"positives ({positives}) cannot exceed n ({n})"
        )

    if n == 0:
        warn(
            "n = 0: prevalence undefined. n set to 1.",
            ApproximationWarning,
        )
        n = 1
    if positives < 5:
        warn(
            "Too few successes for the normal approximation to be valid",
            ApproximationWarning,
        )
    if n - positives < 5:
        warn(
            "Sample size too small for the normal approximation to be valid",
            ApproximationWarning,
        )

    p = positives / n
    se = float(np.sqrt(p * (1.0 - p) / n) * design_effect)

    if not ci:
        return PrevalenceEstimate(p=p, se=se)

    if positives == 0:
        lb = 0.0
        ub = 1.0 - (alpha / 2.0) ** (1.0 / n)
    elif positives == n:
        lb = (alpha / 2.0) ** (1.0 / n)
        ub = 1.0
    else:
        f_lo = sp_stats.f.ppf(alpha / 2.0, 2 * positives, 2 * (n - positives + 1))
        f_hi = sp_stats.f.ppf(1.0 - alpha / 2.0, 2 * (positives + 1), 2 * (n - positives))
        lb = 1.0 / (1.0 + (n - positives + 1) / (positives * f_lo))
        ub = 1.0 / (1.0 + (n - positives) / ((positives + 1) * f_hi))

    return PrevalenceEstimate(p=p, se=se, conf_int=np.array([lb, ub]))
