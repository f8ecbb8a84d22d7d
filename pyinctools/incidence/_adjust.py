"""
Input adjustments applied before estimation.

Each adjustment that changes or flags a value warns through the warnings
module and appends the same message to the backend's warnings list, so
the condition is visible both live and on the returned Result.
"""

from __future__ import annotations

import numpy as np

from pyinctools.core.compute.tolerances import ZERO_SE_EPSILON
from pyinctools.core.exceptions import (
    ClampedValueWarning,
    DegenerateInputWarning,
    warn,
)


def emit(
    warnings_list: list[str],
    message: str,
    category: type[Warning],
) -> None:
    """Warn and record `message`."""
    warnings_list.append(message)
    warn(message, category)


def flag_zero_se(
    ses: dict[str, float],
    warnings_list: list[str],
) -> None:
    """Delta method: report zero SEs, leave them as they are."""
    for name, se in ses.items():
        if se == 0.0:
            emit(
                warnings_list,
                f"{name} of zero supplied. Variance of incidence estimate "
                f"likely incorrect.",
                DegenerateInputWarning,
            )


def replace_zero_se(
    ses: dict[str, float],
    warnings_list: list[str],
) -> dict[str, float]:
    """Bootstrap: substitute ZERO_SE_EPSILON for zero SEs."""
    out = {}
    for name, se in ses.items():
        if se == 0.0:
            emit(
                warnings_list,
                f"{name} of zero supplied. Set to {ZERO_SE_EPSILON}.",
                DegenerateInputWarning,
            )
            se = ZERO_SE_EPSILON
        out[name] = se
    return out


def clamp_covariance(covar: float, warnings_list: list[str]) -> float:
    """A negative cov(prev, prev_r) is set to 0."""
    if covar < 0.0:
        emit(
            warnings_list,
            "Covariance of prev and prev_r cannot be negative, set to 0.0",
            ClampedValueWarning,
        )
        return 0.0
    return covar


def clamp_negative_estimate(value: float, warnings_list: list[str]) -> float:
    """Negative point estimate set to 0 before differencing."""
    if value < 0.0:
        emit(
            warnings_list,
            "Negative point estimate set to 0.0 for difference calculation",
            ClampedValueWarning,
        )
        return 0.0
    return value


def clamp_negative_draws(
    draws_1: np.ndarray,
    draws_2: np.ndarray,
    warnings_list: list[str],
) -> tuple[np.ndarray, np.ndarray]:
    """Negative bootstrap incidences set to 0 before differencing."""
    if np.any(draws_1 < 0) or np.any(draws_2 < 0):
        emit(
            warnings_list,
            "Negative bootstrapped incidence estimates set to 0.0 for "
            "difference calculations",
            ClampedValueWarning,
        )
    return np.maximum(draws_1, 0.0), np.maximum(draws_2, 0.0)
