"""
Parametric bootstrap backends for incidence and incidence difference.

Each input is redrawn from a normal distribution truncated to its
admissible range (or, in from-counts mode, prevalences are redrawn from
binomial counts), the estimator is applied row by row, and the standard
error and interval are read off the resulting series.
"""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import NDArray
from scipy import stats as sp_stats

from pyinctools.core.capabilities import METHOD_AUTO, REJECTION_DIMENSION
from pyinctools.core.compute.timing import Timer
from pyinctools.core.exceptions import (
    AssumptionWarning,
    CapabilityError,
    ValidationError,
)
from pyinctools.core.result import Result
from pyinctools.incidence._adjust import (
    clamp_covariance,
    clamp_negative_draws,
    emit,
    replace_zero_se,
)
from pyinctools.incidence._common import (
    DifferenceParams,
    IncidenceParams,
    relative_se,
    two_sided_p,
)
from pyinctools.incidence._kassanjee import kassanjee
from pyinctools.incidence.backends.delta import group_incidence
from pyinctools.incidence.design import DifferenceDesign, IncidenceDesign
from pyinctools.tmvnorm import rtmvnorm, rtnorm

_UNIT = (0.0, 1.0)
_POSITIVE = (0.0, np.inf)

_COUNTS_ASSUMPTION = (
    "Bootstrapping from counts assumes zero covariance between the "
    "prevalence and recency-prevalence draws"
)


def _draw_independent(
    columns: list[tuple[float, float, tuple[float, float]]],
    n: int,
    rng: np.random.Generator,
    use_gibbs: bool,
) -> NDArray[np.floating[Any]]:
    """
    One truncated-normal column per (mean, se, (lower, upper)) entry.

    use_gibbs selects the inverse-CDF sampler; otherwise scipy's
    truncnorm is used. Both draw from `rng`.
    """
    out = np.empty((n, len(columns)), dtype=np.float64)
    for j, (mean, se, (lo, hi)) in enumerate(columns):
        if use_gibbs:
            out[:, j] = rtnorm(n, mean, se, lo, hi, rng)
        else:
            a = (lo - mean) / se
            b = (hi - mean) / se
            out[:, j] = sp_stats.truncnorm.rvs(
                a, b, loc=mean, scale=se, size=n, random_state=rng,
            )
    return out


def _sampler_name(use_gibbs: bool) -> str:
    return 'rtnorm' if use_gibbs else 'truncnorm'


def _quantile_interval(series: np.ndarray, alpha: float) -> np.ndarray:
    return np.quantile(series, [alpha / 2.0, 1.0 - alpha / 2.0])


class BootstrapBackend:
    """Single-survey incidence with bootstrap standard error and interval."""

    @property
    def name(self) -> str:
        return 'cpu_bootstrap'

    def solve(self, design: IncidenceDesign) -> Result[IncidenceParams]:
        timer = Timer()
        timer.start()
        warnings_list: list[str] = []
        R = design.bootstrap_draws

        with timer.section('point_estimate'):
            pe = float(kassanjee(
                design.prev, design.prev_r, design.mdri, design.frr, design.T,
            )) * design.per

        with timer.section('sampling'):
            if design.bootstrap_from_counts:
                prev, prev_r, mdri, frr, sampler = self._draw_counts(
                    design, warnings_list,
                )
                covar = 0.0
            else:
                prev, prev_r, mdri, frr, sampler, covar = self._draw_normal(
                    design, warnings_list,
                )

        with timer.section('summary_statistics'):
            series = kassanjee(prev, prev_r, mdri, frr, design.T) * design.per
            se = float(np.std(series, ddof=1))
            ci = _quantile_interval(series, design.alpha)
            pair = np.vstack([prev, series])
            cov_prev_incidence = np.cov(pair)
            cor_prev_incidence = np.corrcoef(pair)

        timer.stop()

        params = IncidenceParams(
            incidence=pe,
            conf_int=ci,
            se=se,
            rse=relative_se(se, pe),
            alpha=design.alpha,
            cov_prev_incidence=cov_prev_incidence,
            cor_prev_incidence=cor_prev_incidence,
            bootstrap_incidence=series,
        )

        return Result(
            params=params,
            info={
                'method': 'bootstrap',
                'sampler': sampler,
                'bootstrap_draws': R,
                'from_counts': design.bootstrap_from_counts,
                'covar': covar,
                'T': design.T,
                'per': design.per,
            },
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )

    def _draw_counts(self, design: IncidenceDesign, warnings_list: list[str]):
        n_total, n_tested = design.counts
        R = design.bootstrap_draws
        rng = design.rng

        emit(warnings_list, _COUNTS_ASSUMPTION, AssumptionWarning)
        ses = replace_zero_se(
            {'se_mdri': design.se_mdri, 'se_frr': design.se_frr},
            warnings_list,
        )

        npos = rng.binomial(n_total, design.prev, size=R)
        n_recent = rng.binomial(n_tested, design.prev_r, size=R)
        prev = npos / n_total
        prev_r = n_recent / np.maximum(np.minimum(n_tested, npos), 1)

        shared = _draw_independent(
            [
                (design.mdri, ses['se_mdri'], _POSITIVE),
                (design.frr, ses['se_frr'], _UNIT),
            ],
            R, rng, design.use_gibbs_bootstrap,
        )
        sampler = 'binomial+' + _sampler_name(design.use_gibbs_bootstrap)
        return prev, prev_r, shared[:, 0], shared[:, 1], sampler

    def _draw_normal(self, design: IncidenceDesign, warnings_list: list[str]):
        R = design.bootstrap_draws
        ses = replace_zero_se(
            {
                'se_prev': design.se_prev,
                'se_prev_r': design.se_prev_r,
                'se_mdri': design.se_mdri,
                'se_frr': design.se_frr,
            },
            warnings_list,
        )
        covar = clamp_covariance(design.covar, warnings_list)
        bound = ses['se_prev'] * ses['se_prev_r']
        if covar > bound:
            raise ValidationError(
                f"covar={covar:g} exceeds se_prev * se_prev_r = {bound:g}; "
                f"the covariance matrix of the draws would not be positive "
                f"semi-definite"
            )

        if covar == 0.0:
            draws = _draw_independent(
                [
                    (design.prev, ses['se_prev'], _UNIT),
                    (design.prev_r, ses['se_prev_r'], _UNIT),
                    (design.mdri, ses['se_mdri'], _POSITIVE),
                    (design.frr, ses['se_frr'], _UNIT),
                ],
                R, design.rng, design.use_gibbs_bootstrap,
            )
            sampler = _sampler_name(design.use_gibbs_bootstrap)
        else:
            sigma = np.diag([
                ses['se_prev'] ** 2,
                ses['se_prev_r'] ** 2,
                ses['se_mdri'] ** 2,
                ses['se_frr'] ** 2,
            ])
            sigma[0, 1] = sigma[1, 0] = covar
            sol = rtmvnorm(
                R,
                mu=[design.prev, design.prev_r, design.mdri, design.frr],
                sigma=sigma,
                lower=[0.0, 0.0, 0.0, 0.0],
                upper=[1.0, 1.0, np.inf, 1.0],
                method=METHOD_AUTO,
                rng=design.rng,
                max_iter=design.max_iter,
            )
            draws = sol.samples
            sampler = sol.method
            warnings_list.extend(sol.warnings)

        return draws[:, 0], draws[:, 1], draws[:, 2], draws[:, 3], sampler, covar


class BootstrapDifferenceBackend:
    """
    Two-group incidence difference with bootstrap standard error.

    Only independent draws are supported: the six inputs (two prevalences
    and two recency prevalences plus the shared MDRI and FRR) would need a
    6-dimensional correlated sampler otherwise.
    """

    @property
    def name(self) -> str:
        return 'cpu_bootstrap_difference'

    def solve(self, design: DifferenceDesign) -> Result[DifferenceParams]:
        timer = Timer()
        timer.start()
        warnings_list: list[str] = []
        R = design.bootstrap_draws

        covar = np.array([
            clamp_covariance(c, warnings_list) for c in design.covar
        ])

        with timer.section('point_estimate'):
            incidence = group_incidence(design, warnings_list)
            pe = float(incidence[0] - incidence[1])

        with timer.section('sampling'):
            if design.bootstrap_from_counts:
                cols, sampler = self._draw_counts(design, warnings_list)
                covar = np.zeros(2)
            else:
                if np.any(covar > 0.0):
                    raise CapabilityError(
                        "Bootstrapping a difference with non-zero covariance "
                        "between prev and prev_r needs a 6-dimensional "
                        "correlated sampler; rejection sampling supports only "
                        f"{REJECTION_DIMENSION} dimensions. Use covar=[0, 0] "
                        "or the delta method (bootstrap_draws=0).",
                        dimension=6,
                        supported_dimension=REJECTION_DIMENSION,
                    )
                cols, sampler = self._draw_normal(design, warnings_list)

        with timer.section('summary_statistics'):
            p1, pr1, p2, pr2, mdri, frr = cols
            inc_1 = kassanjee(p1, pr1, mdri, frr, design.T) * design.per
            inc_2 = kassanjee(p2, pr2, mdri, frr, design.T) * design.per
            inc_1, inc_2 = clamp_negative_draws(inc_1, inc_2, warnings_list)
            differences = inc_1 - inc_2
            se = float(np.std(differences, ddof=1))
            ci = _quantile_interval(differences, design.alpha)
            p_value = two_sided_p(pe, se)

        timer.stop()

        params = DifferenceParams(
            difference=pe,
            incidence=incidence,
            conf_int=ci,
            se=se,
            rse=relative_se(se, pe),
            p_value=p_value,
            alpha=design.alpha,
            bootstrap_differences=differences if design.output_bootstrap else None,
        )

        return Result(
            params=params,
            info={
                'method': 'bootstrap',
                'sampler': sampler,
                'bootstrap_draws': R,
                'from_counts': design.bootstrap_from_counts,
                'covar': covar,
                'bonferroni': design.bonferroni,
                'alpha_nominal': design.alpha_nominal,
                'T': design.T,
                'per': design.per,
            },
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )

    def _draw_counts(self, design: DifferenceDesign, warnings_list: list[str]):
        n1_total, n1_tested, n2_total, n2_tested = design.counts
        R = design.bootstrap_draws
        rng = design.rng

        emit(warnings_list, _COUNTS_ASSUMPTION, AssumptionWarning)
        ses = replace_zero_se(
            {'se_mdri': design.se_mdri, 'se_frr': design.se_frr},
            warnings_list,
        )

        cols = []
        for g, (n_total, n_tested) in enumerate(
            ((n1_total, n1_tested), (n2_total, n2_tested))
        ):
            npos = rng.binomial(n_total, design.prev[g], size=R)
            n_recent = rng.binomial(n_tested, design.prev_r[g], size=R)
            cols.append(npos / n_total)
            cols.append(n_recent / n_tested)

        shared = _draw_independent(
            [
                (design.mdri, ses['se_mdri'], _POSITIVE),
                (design.frr, ses['se_frr'], _UNIT),
            ],
            R, rng, design.use_gibbs_bootstrap,
        )
        cols.extend([shared[:, 0], shared[:, 1]])
        return cols, 'binomial+' + _sampler_name(design.use_gibbs_bootstrap)

    def _draw_normal(self, design: DifferenceDesign, warnings_list: list[str]):
        ses = replace_zero_se(
            {
                'se_prev[0]': design.se_prev[0],
                'se_prev_r[0]': design.se_prev_r[0],
                'se_prev[1]': design.se_prev[1],
                'se_prev_r[1]': design.se_prev_r[1],
                'se_mdri': design.se_mdri,
                'se_frr': design.se_frr,
            },
            warnings_list,
        )
        draws = _draw_independent(
            [
                (design.prev[0], ses['se_prev[0]'], _UNIT),
                (design.prev_r[0], ses['se_prev_r[0]'], _UNIT),
                (design.prev[1], ses['se_prev[1]'], _UNIT),
                (design.prev_r[1], ses['se_prev_r[1]'], _UNIT),
                (design.mdri, ses['se_mdri'], _POSITIVE),
                (design.frr, ses['se_frr'], _UNIT),
            ],
            design.bootstrap_draws, design.rng, design.use_gibbs_bootstrap,
        )
        return [draws[:, j] for j in range(6)], _sampler_name(
            design.use_gibbs_bootstrap
        )
