"""
Incidence solution types.

IncidenceSolution wraps Result[IncidenceParams]; DifferenceSolution wraps
Result[DifferenceParams]. Both format a short report via summary().
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from pyinctools.core.result import Result
from pyinctools.incidence._common import DifferenceParams, IncidenceParams

if TYPE_CHECKING:
    from pyinctools.incidence.design import DifferenceDesign, IncidenceDesign


def _pct(alpha: float) -> str:
    return f"{100.0 * (1.0 - alpha):g}"


@dataclass
class IncidenceSolution:
    """
    User-facing single-survey incidence results.

    Delta-method results carry `se_inf_ss`; bootstrap results carry the
    per-draw series and the prevalence/incidence covariance matrices.
    """
    _result: Result[IncidenceParams]
    _design: 'IncidenceDesign'

    # --- Estimate ---

    @property
    def incidence(self) -> float:
        """Kassanjee point estimate, times `per`."""
        return self._result.params.incidence

    @property
    def conf_int(self) -> NDArray[np.floating[Any]]:
        """Confidence interval, shape (2,)."""
        return self._result.params.conf_int

    @property
    def se(self) -> float:
        return self._result.params.se

    @property
    def rse(self) -> float:
        """Relative standard error, se / |incidence|."""
        return self._result.params.rse

    @property
    def alpha(self) -> float:
        return self._result.params.alpha

    @property
    def se_inf_ss(self) -> float | None:
        """SE from MDRI and FRR uncertainty only (delta method)."""
        return self._result.params.se_inf_ss

    @property
    def cov_prev_incidence(self) -> NDArray[np.floating[Any]] | None:
        return self._result.params.cov_prev_incidence

    @property
    def cor_prev_incidence(self) -> NDArray[np.floating[Any]] | None:
        return self._result.params.cor_prev_incidence

    @property
    def bootstrap_incidence(self) -> NDArray[np.floating[Any]] | None:
        return self._result.params.bootstrap_incidence

    @property
    def method(self) -> str:
        """'delta' or 'bootstrap'."""
        return self._result.info['method']

    # --- Metadata ---

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def has_warning(self, substring: str) -> bool:
        return self._result.has_warning(substring)

    # --- Formatting ---

    def summary(self) -> str:
        lo, hi = self.conf_int
        lines = [
            "\nINCIDENCE ESTIMATE",
            "",
            f"Method: {self.method}",
            f"Incidence: {self.incidence:.6g}",
            f"{_pct(self.alpha)}% CI: [{lo:.6g}, {hi:.6g}]",
            f"SE: {self.se:.6g}   RSE: {self.rse:.4g}",
        ]
        if self.se_inf_ss is not None:
            lines.append(f"SE (infinite sample size): {self.se_inf_ss:.6g}")
        if self.cor_prev_incidence is not None:
            lines.append(
                f"Cor(prevalence, incidence): {self.cor_prev_incidence[0, 1]:.4f}"
            )
        if self.warnings:
            lines.append("")
            lines.extend(f"Warning: {w}" for w in self.warnings)
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"IncidenceSolution(incidence={self.incidence:.6g}, "
            f"se={self.se:.6g}, method={self.method!r})"
        )


@dataclass
class DifferenceSolution:
    """User-facing results for the difference in incidence of two groups."""
    _result: Result[DifferenceParams]
    _design: 'DifferenceDesign'

    @property
    def difference(self) -> float:
        """I_1 - I_2 after clamping each estimate at 0."""
        return self._result.params.difference

    @property
    def incidence(self) -> NDArray[np.floating[Any]]:
        """Per-group point estimates, shape (2,)."""
        return self._result.params.incidence

    @property
    def conf_int(self) -> NDArray[np.floating[Any]]:
        return self._result.params.conf_int

    @property
    def se(self) -> float:
        return self._result.params.se

    @property
    def rse(self) -> float:
        return self._result.params.rse

    @property
    def p_value(self) -> float:
        return self._result.params.p_value

    @property
    def alpha(self) -> float:
        """Significance level after Bonferroni adjustment."""
        return self._result.params.alpha

    @property
    def bootstrap_differences(self) -> NDArray[np.floating[Any]] | None:
        return self._result.params.bootstrap_differences

    @property
    def method(self) -> str:
        return self._result.info['method']

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def has_warning(self, substring: str) -> bool:
        return self._result.has_warning(substring)

    def summary(self) -> str:
        lo, hi = self.conf_int
        bonferroni = self.info.get('bonferroni', 1)
        lines = [
            "\nINCIDENCE DIFFERENCE",
            "",
            f"Method: {self.method}",
            f"Incidence: {self.incidence[0]:.6g} (group 1), "
            f"{self.incidence[1]:.6g} (group 2)",
            f"Difference: {self.difference:.6g}",
            f"{_pct(self.alpha)}% CI: [{lo:.6g}, {hi:.6g}]"
            + (f" (Bonferroni, {bonferroni} comparisons)" if bonferroni > 1 else ""),
            f"SE: {self.se:.6g}   RSE: {self.rse:.4g}",
            f"p-value: {self.p_value:.4g}",
        ]
        if self.warnings:
            lines.append("")
            lines.extend(f"Warning: {w}" for w in self.warnings)
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"DifferenceSolution(difference={self.difference:.6g}, "
            f"p_value={self.p_value:.4g}, method={self.method!r})"
        )
