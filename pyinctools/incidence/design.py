"""
Design classes for incidence estimation.

IncidenceDesign (one survey) and DifferenceDesign (two groups sharing
MDRI and FRR) hold every input a backend needs. Immutable, validated at
construction. MDRI, its SE and T are stored already divided by
`timeconversion`, i.e. in the time unit of the incidence.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyinctools.core.exceptions import ValidationError
from pyinctools.core.validation import (
    check_1d,
    check_alpha,
    check_array,
    check_count,
    check_finite,
    check_length,
    check_nonnegative,
    check_scalar_finite,
)
from pyinctools.tmvnorm.design import resolve_rng

DEFAULT_T = 730.5
DEFAULT_TIMECONVERSION = 365.25


def _check_units(T: float, timeconversion: float, per: float) -> None:
    check_scalar_finite(T, "T")
    if T < 0:
        raise ValidationError(f"T must be >= 0, got {T}")
    check_scalar_finite(timeconversion, "timeconversion")
    if timeconversion <= 0:
        raise ValidationError(
            f"timeconversion must be > 0, got {timeconversion}"
        )
    check_scalar_finite(per, "per")
    if per <= 0:
        raise ValidationError(f"per must be > 0, got {per}")


def _check_counts(
    counts,
    length: int,
    bootstrap_draws: int,
) -> tuple[int, ...]:
    if bootstrap_draws == 0:
        raise ValidationError(
            "Cannot bootstrap from counts if bootstrapping is not being "
            "performed (bootstrap_draws=0)"
        )
    if counts is None or len(counts) != length:
        raise ValidationError(
            f"bootstrap_from_counts requires counts of length {length}, "
            f"got {counts!r}"
        )
    for i, c in enumerate(counts):
        check_count(c, f"counts[{i}]", minimum=1)
    return tuple(int(c) for c in counts)


def _check_binomial_p(values, name: str) -> None:
    arr = np.atleast_1d(np.asarray(values, dtype=np.float64))
    if np.any((arr < 0) | (arr > 1)):
        raise ValidationError(
            f"{name} must lie in [0, 1] to bootstrap from counts, got {values}"
        )


def _check_group_vector(values: ArrayLike, name: str) -> NDArray[np.floating[Any]]:
    arr = check_array(values, name)
    check_1d(arr, name)
    check_length(arr, 2, name)
    check_finite(arr, name)
    return arr


@dataclass(frozen=True)
class IncidenceDesign:
    """
    Frozen design for single-survey incidence estimation.

    Attributes:
        prev, se_prev: Prevalence and its standard error.
        prev_r, se_prev_r: Recency prevalence and its standard error.
        mdri, se_mdri: MDRI and SE, in incidence time units.
        frr, se_frr: False-recent rate and SE.
        covar: Covariance of prev and prev_r.
        T: Recency time cutoff, in incidence time units.
        timeconversion: Factor MDRI and T were divided by.
        per: Multiplier applied to the incidence and its SE.
        alpha: Significance level of the confidence interval.
        bootstrap_draws: 0 for the delta method, else number of draws.
        use_gibbs_bootstrap: Independent draws via the inverse-CDF sampler
            rather than scipy's truncnorm.
        bootstrap_from_counts: Draw prevalences from binomial counts.
        counts: (n_total, n_tested_recency) for count bootstrap.
        rng: Generator every bootstrap draw is taken from.
        max_iter: Cap on rejection retry iterations for correlated draws.
    """
    prev: float
    se_prev: float
    prev_r: float
    se_prev_r: float
    mdri: float
    se_mdri: float
    frr: float
    se_frr: float
    covar: float
    T: float
    timeconversion: float
    per: float
    alpha: float
    bootstrap_draws: int
    use_gibbs_bootstrap: bool
    bootstrap_from_counts: bool
    counts: tuple[int, ...] | None
    rng: np.random.Generator
    max_iter: int | None

    @property
    def is_bootstrap(self) -> bool:
        return self.bootstrap_draws > 0

    @classmethod
    def for_props(
        cls,
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
    ) -> IncidenceDesign:
        """
        Create a single-survey design with validation.

        MDRI, se_mdri and T are given in the same unit (typically days);
        they are divided by `timeconversion` here.

        Raises:
            ValidationError: If inputs are invalid.
        """
        for value, name in ((prev, "prev"), (prev_r, "prev_r"),
                            (mdri, "mdri"), (frr, "frr"), (covar, "covar")):
            check_scalar_finite(value, name)
        for value, name in ((se_prev, "se_prev"), (se_prev_r, "se_prev_r"),
                            (se_mdri, "se_mdri"), (se_frr, "se_frr")):
            check_scalar_finite(value, name)
            check_nonnegative(value, name)
        _check_units(T, timeconversion, per)
        check_alpha(alpha)
        check_count(bootstrap_draws, "bootstrap_draws")
        if max_iter is not None:
            check_count(max_iter, "max_iter", minimum=1)

        if bootstrap_from_counts:
            counts = _check_counts(counts, 2, bootstrap_draws)
            _check_binomial_p(prev, "prev")
            _check_binomial_p(prev_r, "prev_r")
        else:
            counts = None

        return cls(
            prev=float(prev),
            se_prev=float(se_prev),
            prev_r=float(prev_r),
            se_prev_r=float(se_prev_r),
            mdri=mdri / timeconversion,
            se_mdri=se_mdri / timeconversion,
            frr=float(frr),
            se_frr=float(se_frr),
            covar=float(covar),
            T=T / timeconversion,
            timeconversion=float(timeconversion),
            per=per,
            alpha=float(alpha),
            bootstrap_draws=int(bootstrap_draws),
            use_gibbs_bootstrap=bool(use_gibbs_bootstrap),
            bootstrap_from_counts=bool(bootstrap_from_counts),
            counts=counts,
            rng=resolve_rng(rng, seed),
            max_iter=max_iter,
        )


@dataclass(frozen=True)
class DifferenceDesign:
    """
    Frozen design for the difference in incidence between two groups.

    Group-specific inputs are arrays of shape (2,); MDRI and FRR are
    shared. `alpha` is already divided by the Bonferroni factor;
    `alpha_nominal` keeps the value the caller passed.
    """
    prev: NDArray[np.floating[Any]]
    se_prev: NDArray[np.floating[Any]]
    prev_r: NDArray[np.floating[Any]]
    se_prev_r: NDArray[np.floating[Any]]
    mdri: float
    se_mdri: float
    frr: float
    se_frr: float
    covar: NDArray[np.floating[Any]]
    T: float
    timeconversion: float
    per: float
    alpha: float
    alpha_nominal: float
    bonferroni: int
    bootstrap_draws: int
    output_bootstrap: bool
    use_gibbs_bootstrap: bool
    bootstrap_from_counts: bool
    counts: tuple[int, ...] | None
    rng: np.random.Generator

    @property
    def is_bootstrap(self) -> bool:
        return self.bootstrap_draws > 0

    @classmethod
    def for_difference(
        cls,
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
    ) -> DifferenceDesign:
        """
        Create a two-group difference design with validation.

        covar defaults to None and is resolved to [0, 0] here.

        Raises:
            DimensionError: If a group vector does not have length 2.
            ValidationError: If inputs are otherwise invalid.
        """
        prev_arr = _check_group_vector(prev, "prev")
        se_prev_arr = _check_group_vector(se_prev, "se_prev")
        prev_r_arr = _check_group_vector(prev_r, "prev_r")
        se_prev_r_arr = _check_group_vector(se_prev_r, "se_prev_r")
        if np.any(se_prev_arr < 0) or np.any(se_prev_r_arr < 0):
            raise ValidationError("Standard errors must be >= 0")

        if covar is None:
            covar_arr = np.zeros(2)
        else:
            covar_arr = _check_group_vector(covar, "covar")

        for value, name in ((mdri, "mdri"), (frr, "frr")):
            check_scalar_finite(value, name)
        for value, name in ((se_mdri, "se_mdri"), (se_frr, "se_frr")):
            check_scalar_finite(value, name)
            check_nonnegative(value, name)
        _check_units(T, timeconversion, per)
        check_alpha(alpha)
        check_count(bootstrap_draws, "bootstrap_draws")
        if isinstance(bonferroni, bool) or not isinstance(bonferroni, (int, np.integer)) \
                or bonferroni < 1:
            raise ValidationError(
                "Bonferroni correction only possible with positive integers "
                f"for number of comparisons, got {bonferroni!r}"
            )

        if bootstrap_from_counts:
            counts = _check_counts(counts, 4, bootstrap_draws)
            _check_binomial_p(prev_arr, "prev")
            _check_binomial_p(prev_r_arr, "prev_r")
        else:
            counts = None

        return cls(
            prev=prev_arr,
            se_prev=se_prev_arr,
            prev_r=prev_r_arr,
            se_prev_r=se_prev_r_arr,
            mdri=mdri / timeconversion,
            se_mdri=se_mdri / timeconversion,
            frr=float(frr),
            se_frr=float(se_frr),
            covar=covar_arr,
            T=T / timeconversion,
            timeconversion=float(timeconversion),
            per=per,
            alpha=float(alpha) / int(bonferroni),
            alpha_nominal=float(alpha),
            bonferroni=int(bonferroni),
            bootstrap_draws=int(bootstrap_draws),
            output_bootstrap=bool(output_bootstrap),
            use_gibbs_bootstrap=bool(use_gibbs_bootstrap),
            bootstrap_from_counts=bool(bootstrap_from_counts),
            counts=counts,
            rng=resolve_rng(rng, seed),
        )
