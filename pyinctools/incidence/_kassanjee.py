"""
Kassanjee incidence estimator and its delta-method variance.

    I = P * (P_R - FRR) / [(1 - P) * (MDRI - FRR * T)]

P is prevalence, P_R the prevalence of recency among positives, MDRI the
mean duration of recent infection and FRR the false-recent rate. MDRI and
T must already be expressed in the time unit of the incidence.

Reference: Kassanjee R, et al. (2012). A new general biomarker-based
incidence estimator. Epidemiology, 23(5), 721-728.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike


def kassanjee(prev, prev_r, mdri, frr, T):
    """
    Point estimate of incidence. Vectorised over numpy arrays.
    """
    prev = np.asarray(prev, dtype=np.float64)
    return (prev * (prev_r - frr)) / ((1.0 - prev) * (mdri - frr * T))


def kassanjee_partials(
    prev: float,
    prev_r: float,
    mdri: float,
    frr: float,
    T: float,
) -> tuple[float, float, float, float]:
    """
    First-order partial derivatives of the estimator.

    Returns:
        (dI/dP, dI/dP_R, dI/dMDRI, dI/dFRR) at the given point.
    """
    one_minus = 1.0 - prev
    window = mdri - frr * T
    d_prev = (prev_r - frr) / (one_minus ** 2 * window)
    d_prev_r = prev / (one_minus * window)
    d_mdri = (frr * prev - prev_r * prev) / (one_minus * window ** 2)
    d_frr = (prev * (T * prev_r - mdri)) / (one_minus * window ** 2)
    return d_prev, d_prev_r, d_mdri, d_frr


def delta_method_se(
    prev: float,
    prev_r: float,
    mdri: float,
    frr: float,
    T: float,
    se_prev: float,
    se_prev_r: float,
    se_mdri: float,
    se_frr: float,
    covar: float = 0.0,
) -> tuple[float, float]:
    """
    Delta-method standard error of the incidence estimate.

        Var(I) = sum_i (dI/dx_i)^2 se_i^2 + 2 dI/dP dI/dP_R cov(P, P_R)

    Returns:
        (se, se_inf_ss). se_inf_ss is the part due to MDRI and FRR alone,
        i.e. the standard error that would remain with an infinitely
        large survey.
    """
    d_prev, d_prev_r, d_mdri, d_frr = kassanjee_partials(prev, prev_r, mdri, frr, T)
    calibration = d_mdri ** 2 * se_mdri ** 2 + d_frr ** 2 * se_frr ** 2
    survey = (
        d_prev ** 2 * se_prev ** 2
        + d_prev_r ** 2 * se_prev_r ** 2
        + 2.0 * d_prev * d_prev_r * covar
    )
    return float(np.sqrt(survey + calibration)), float(np.sqrt(calibration))


def delta_method_difference_se(
    prev: ArrayLike,
    prev_r: ArrayLike,
    mdri: float,
    frr: float,
    T: float,
    se_prev: ArrayLike,
    se_prev_r: ArrayLike,
    se_mdri: float,
    se_frr: float,
    covar: ArrayLike = (0.0, 0.0),
) -> float:
    """
    Delta-method standard error of I_1 - I_2.

    The groups are independent in their own prevalences but share MDRI and
    FRR, so the calibration terms enter through the difference of the two
    groups' partials.
    """
    parts = [
        kassanjee_partials(prev[g], prev_r[g], mdri, frr, T)
        for g in (0, 1)
    ]
    variance = 0.0
    for g, (d_prev, d_prev_r, _, _) in enumerate(parts):
        variance += (
            d_prev ** 2 * se_prev[g] ** 2
            + d_prev_r ** 2 * se_prev_r[g] ** 2
            + 2.0 * d_prev * d_prev_r * covar[g]
        )
    variance += (parts[0][2] - parts[1][2]) ** 2 * se_mdri ** 2
    variance += (parts[0][3] - parts[1][3]) ** 2 * se_frr ** 2
    return float(np.sqrt(variance))
