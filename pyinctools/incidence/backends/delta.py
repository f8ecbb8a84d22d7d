"""
Delta-method backends for incidence and incidence difference.

Closed-form first-order variance; the confidence interval is the normal
interval centred on the point estimate.
"""

from __future__ import annotations

import numpy as np
from scipy import stats as sp_stats

from pyinctools.core.compute.timing import Timer
from pyinctools.core.result import Result
from pyinctools.incidence._adjust import (
    clamp_covariance,
    clamp_negative_estimate,
    flag_zero_se,
)
from pyinctools.incidence._common import (
    DifferenceParams,
    IncidenceParams,
    relative_se,
    two_sided_p,
)
from pyinctools.incidence._kassanjee import (
    delta_method_difference_se,
    delta_method_se,
    kassanjee,
)
from pyinctools.incidence.design import DifferenceDesign, IncidenceDesign


def normal_interval(estimate: float, se: float, alpha: float) -> np.ndarray:
    """[estimate + z_{alpha/2} se, estimate + z_{1-alpha/2} se]."""
    z = sp_stats.norm.ppf([alpha / 2.0, 1.0 - alpha / 2.0])
    return estimate + z * se


def group_incidence(design: DifferenceDesign, warnings_list: list[str]) -> np.ndarray:
    """Point estimate per group, negative values clamped to 0."""
    return np.array([
        clamp_negative_estimate(
            float(kassanjee(
                design.prev[g], design.prev_r[g],
                design.mdri, design.frr, design.T,
            )) * design.per,
            warnings_list,
        )
        for g in (0, 1)
    ])


class DeltaMethodBackend:
    """Single-survey incidence with delta-method standard error."""

    @property
    def name(self) -> str:
        return 'cpu_delta'

    def solve(self, design: IncidenceDesign) -> Result[IncidenceParams]:
        timer = Timer()
        timer.start()
        warnings_list: list[str] = []

        flag_zero_se(
            {
                'se_prev': design.se_prev,
                'se_prev_r': design.se_prev_r,
                'se_mdri': design.se_mdri,
                'se_frr': design.se_frr,
            },
            warnings_list,
        )
        covar = clamp_covariance(design.covar, warnings_list)

        with timer.section('point_estimate'):
            pe = float(kassanjee(
                design.prev, design.prev_r, design.mdri, design.frr, design.T,
            )) * design.per

        with timer.section('delta_method'):
            se, se_inf_ss = delta_method_se(
                design.prev, design.prev_r, design.mdri, design.frr, design.T,
                design.se_prev, design.se_prev_r, design.se_mdri, design.se_frr,
                covar,
            )
            se *= design.per
            se_inf_ss *= design.per
            ci = normal_interval(pe, se, design.alpha)

        timer.stop()

        params = IncidenceParams(
            incidence=pe,
            conf_int=ci,
            se=se,
            rse=relative_se(se, pe),
            alpha=design.alpha,
            se_inf_ss=se_inf_ss,
        )

        return Result(
            params=params,
            info={
                'method': 'delta',
                'covar': covar,
                'T': design.T,
                'per': design.per,
            },
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )


class DeltaDifferenceBackend:
    """Two-group incidence difference with delta-method standard error."""

    @property
    def name(self) -> str:
        return 'cpu_delta_difference'

    def solve(self, design: DifferenceDesign) -> Result[DifferenceParams]:
        timer = Timer()
        timer.start()
        warnings_list: list[str] = []

        flag_zero_se(
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
        covar = np.array([
            clamp_covariance(c, warnings_list) for c in design.covar
        ])

        with timer.section('point_estimate'):
            incidence = group_incidence(design, warnings_list)
            pe = float(incidence[0] - incidence[1])

        with timer.section('delta_method'):
            se = delta_method_difference_se(
                design.prev, design.prev_r, design.mdri, design.frr, design.T,
                design.se_prev, design.se_prev_r, design.se_mdri, design.se_frr,
                covar,
            ) * design.per
            ci = normal_interval(pe, se, design.alpha)
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
        )

        return Result(
            params=params,
            info={
                'method': 'delta',
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
