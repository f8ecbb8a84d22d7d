"""
Solver dispatch for incidence estimation.

incprops() and incdif() build a design, pick the delta-method or the
bootstrap backend from `bootstrap_draws`, and wrap the result.
inccounts() derives prevalences from survey counts first.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike

from pyinctools.core.exceptions import ValidationError, warn
from pyinctools.incidence._prevalence import PrevalenceEstimate, prevalence
from pyinctools.incidence.backends.bootstrap import (
    BootstrapBackend,
    BootstrapDifferenceBackend,
)
from pyinctools.incidence.backends.delta import (
    DeltaDifferenceBackend,
    DeltaMethodBackend,
)
from pyinctools.incidence.design import (
    DEFAULT_T,
    DEFAULT_TIMECONVERSION,
    DifferenceDesign,
    IncidenceDesign,
)
from pyinctools.incidence.solution import DifferenceSolution, IncidenceSolution

__all__ = ['incprops', 'incdif', 'inccounts', 'prevalence', 'PrevalenceEstimate']


def _get_backend(design: IncidenceDesign | DifferenceDesign):
    """
    Select the estimation backend.

    | design           | bootstrap_draws == 0   | bootstrap_draws > 0        |
    |------------------|------------------------|----------------------------|
    | IncidenceDesign  | DeltaMethodBackend     | BootstrapBackend           |
    | DifferenceDesign | DeltaDifferenceBackend | BootstrapDifferenceBackend |
    """
    if isinstance(design, DifferenceDesign):
        if design.is_bootstrap:
            return BootstrapDifferenceBackend()
        return DeltaDifferenceBackend()
    if design.is_bootstrap:
        return BootstrapBackend()
    return DeltaMethodBackend()


def incprops(
    prev: float,
    se_prev: float,
    prev_r: float,
    se_prev_r: float,
    mdri: float,
    se_mdri: float,
    frr: float,
    se_frr: float,
    *,
    covar: float = 0.0,
    T: float = DEFAULT_T,
    timeconversion: float = DEFAULT_TIMECONVERSION,
    bootstrap_draws: int = 0,
    alpha: float = 0.05,
    per: float = 1,
    use_gibbs_bootstrap: bool = False,
    bootstrap_from_counts: bool = False,
    counts=None,
    rng: np.random.Generator | None = None,
    seed: int | None = None,
    max_iter: int | None = None,
) -> IncidenceSolution:
    """
    Estimate incidence from the prevalence of infection and the prevalence
    of recent infection (Kassanjee estimator).

        I = P (P_R - FRR) / ((1 - P) (MDRI - FRR * T))

    Parameters
    ----------
    prev, se_prev : float
        Prevalence of HIV and its standard error.
    prev_r, se_prev_r : float
        Prevalence of recency among positives and its standard error.
    mdri, se_mdri : float
        Mean duration of recent infection and its standard error, in the
        same unit as T (days by default).
    frr, se_frr : float
        False-recent rate and its standard error.
    covar : float
        Covariance of prev and prev_r. Negative values are set to 0.
    T : float
        Recency time cutoff, same unit as mdri.
    timeconversion : float
        Divides mdri, se_mdri and T to give the incidence time unit
        (365.25: days to years).
    bootstrap_draws : int
        0 (default) for the delta method, otherwise number of bootstrap
        draws.
    alpha : float
        Confidence interval significance level.
    per : float
        Incidence and SE are multiplied by this (e.g. 100 for
        per-100-person-years).
    use_gibbs_bootstrap : bool
        Independent bootstrap draws via the inverse-CDF sampler instead
        of scipy's truncnorm.
    bootstrap_from_counts : bool
        Redraw prevalences from binomial counts; needs `counts`.
    counts : (n_total, n_tested_recency) or None
        Survey counts for the from-counts bootstrap.
    rng, seed
        Generator (or seed for a fresh one) for all bootstrap draws.
    max_iter : int or None
        Cap on rejection retries when covar > 0.

    Returns
    -------
    IncidenceSolution

    Examples
    --------
    >>> sol = incprops(0.2, 0.015, 0.1, 0.02, 130, 15, 0.01, 0.005)
    >>> round(sol.incidence, 4)
    0.067
    """
    design = IncidenceDesign.for_props(
        prev, se_prev, prev_r, se_prev_r, mdri, se_mdri, frr, se_frr,
        covar=covar,
        T=T,
        timeconversion=timeconversion,
        bootstrap_draws=bootstrap_draws,
        alpha=alpha,
        per=per,
        use_gibbs_bootstrap=use_gibbs_bootstrap,
        bootstrap_from_counts=bootstrap_from_counts,
        counts=counts,
        rng=rng,
        seed=seed,
        max_iter=max_iter,
    )
    be = _get_backend(design)
    result = be.solve(design)
    return IncidenceSolution(_result=result, _design=design)


def incdif(
    prev: ArrayLike,
    se_prev: ArrayLike,
    prev_r: ArrayLike,
    se_prev_r: ArrayLike,
    mdri: float,
    se_mdri: float,
    frr: float,
    se_frr: float,
    *,
    covar: ArrayLike | None = None,
    T: float = DEFAULT_T,
    timeconversion: float = DEFAULT_TIMECONVERSION,
    bootstrap_draws: int = 0,
    alpha: float = 0.05,
    bonferroni: int = 1,
    per: float = 1,
    output_bootstrap: bool = False,
    use_gibbs_bootstrap: bool = False,
    bootstrap_from_counts: bool = False,
    counts=None,
    rng: np.random.Generator | None = None,
    seed: int | None = None,
) -> DifferenceSolution:
    """
    Difference in incidence between two groups sharing MDRI and FRR.

    Parameters
    ----------
    prev, se_prev, prev_r, se_prev_r : array-like, length 2
        Per-group prevalences and standard errors.
    mdri, se_mdri, frr, se_frr : float
        Shared test properties.
    covar : array-like of length 2, or None
        Per-group cov(prev, prev_r). None means [0, 0]. The bootstrap
        only supports zero covariance.
    bonferroni : int
        Number of comparisons; alpha is divided by it.
    output_bootstrap : bool
        Keep the per-draw differences on the solution.
    counts : (n1_total, n1_tested, n2_total, n2_tested) or None
        Survey counts for the from-counts bootstrap.

    Remaining parameters are as for incprops().

    Returns
    -------
    DifferenceSolution

    Raises
    ------
    CapabilityError
        Bootstrap requested with a positive covariance.
    """
    design = DifferenceDesign.for_difference(
        prev, se_prev, prev_r, se_prev_r, mdri, se_mdri, frr, se_frr,
        covar=covar,
        T=T,
        timeconversion=timeconversion,
        bootstrap_draws=bootstrap_draws,
        alpha=alpha,
        bonferroni=bonferroni,
        per=per,
        output_bootstrap=output_bootstrap,
        use_gibbs_bootstrap=use_gibbs_bootstrap,
        bootstrap_from_counts=bootstrap_from_counts,
        counts=counts,
        rng=rng,
        seed=seed,
    )
    be = _get_backend(design)
    result = be.solve(design)
    return DifferenceSolution(_result=result, _design=design)


def _resolve_covar(covar: float | None, cov: float | None) -> float:
    if cov is not None:
        if covar is not None and cov != covar:
            raise ValidationError(
                "Both 'cov' and 'covar' were provided with different values "
                f"(cov={cov}, covar={covar}). Use only 'covar'."
            )
        warn(
            "The 'cov' argument is deprecated; use 'covar' instead.",
            DeprecationWarning,
        )
        return cov
    if covar is not None:
        return covar
    return 0.0


def inccounts(
    n: int,
    npos: int,
    n_tested_recency: int,
    n_recent: int,
    mdri: float,
    frr: float,
    *,
    de_npos: float = 1.0,
    de_recent: float = 1.0,
    se_mdri: float = 0.0,
    se_frr: float = 0.0,
    covar: float | None = None,
    cov: float | None = None,
    T: float = DEFAULT_T,
    timeconversion: float = DEFAULT_TIMECONVERSION,
    bootstrap_draws: int = 0,
    alpha: float = 0.05,
    per: float = 1,
    use_gibbs_bootstrap: bool = False,
    bootstrap_from_counts: bool = False,
    rng: np.random.Generator | None = None,
    seed: int | None = None,
    max_iter: int | None = None,
) -> IncidenceSolution:
    """
    Incidence from survey counts.

    prev = npos / n and prev_r = n_recent / n_tested_recency, with SEs
    inflated by the design effects de_npos and de_recent, are passed to
    incprops(). With bootstrap_from_counts the bootstrap redraws the
    counts binomially from (n, n_tested_recency).

    `cov` is a deprecated alias for `covar`.
    """
    covar_value = _resolve_covar(covar, cov)

    prev, se_prev = prevalence(npos, n, de_npos)
    prev_r, se_prev_r = prevalence(n_recent, n_tested_recency, de_recent)

    return incprops(
        prev, se_prev, prev_r, se_prev_r, mdri, se_mdri, frr, se_frr,
        covar=covar_value,
        T=T,
        timeconversion=timeconversion,
        bootstrap_draws=bootstrap_draws,
        alpha=alpha,
        per=per,
        use_gibbs_bootstrap=use_gibbs_bootstrap,
        bootstrap_from_counts=bootstrap_from_counts,
        counts=(n, n_tested_recency) if bootstrap_from_counts else None,
        rng=rng,
        seed=seed,
        max_iter=max_iter,
    )
