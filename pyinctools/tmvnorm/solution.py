"""
Solution wrapper for truncated multivariate normal sampling.

TMVNSolution wraps Result[TMVNParams] and provides convenient accessors
and a short summary of the draws.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from pyinctools.core.result import Result
from pyinctools.tmvnorm._common import TMVNParams

if TYPE_CHECKING:
    from pyinctools.tmvnorm.design import TMVNDesign


@dataclass
class TMVNSolution:
    """
    User-facing sampling results.

    The sample matrix is available as `samples` (shape (n, d)); metadata
    reports which algorithm ran and how many draws it needed.
    """
    _result: Result[TMVNParams]
    _design: 'TMVNDesign'

    # --- Draws ---

    @property
    def samples(self) -> NDArray[np.floating[Any]]:
        """Sample matrix, shape (n, d)."""
        return self._result.params.samples

    @property
    def n(self) -> int:
        return self._result.params.n

    @property
    def dim(self) -> int:
        return self._result.params.dim

    @property
    def method(self) -> str:
        """Algorithm that produced the draws: 'gibbs' or 'rejection'."""
        return self._result.params.method

    @property
    def is_diagonal(self) -> bool:
        """Whether the covariance matrix was classified as diagonal."""
        return self._result.info['is_diagonal']

    @property
    def acceptance_rate(self) -> float:
        """Fraction of untruncated draws that were kept (1.0 for Gibbs)."""
        return self._result.info['acceptance_rate']

    # --- Input echo ---

    @property
    def mu(self) -> NDArray:
        return self._design.mu

    @property
    def lower(self) -> NDArray:
        return self._design.lower

    @property
    def upper(self) -> NDArray:
        return self._design.upper

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

    # --- Display ---

    def summary(self) -> str:
        """Per-dimension bounds, means and standard deviations of the draws."""
        lines = [
            "\nTRUNCATED MULTIVARIATE NORMAL SAMPLE",
            "",
            f"Method: {self.method} (acceptance rate {self.acceptance_rate:.4f})",
            f"Draws: {self.n}, dimensions: {self.dim}",
            "",
            f"{'':>6s} {'lower':>10s} {'upper':>10s} {'mean':>12s} {'sd':>12s}",
        ]
        if self.n > 0:
            means = self.samples.mean(axis=0)
            sds = self.samples.std(axis=0, ddof=1) if self.n > 1 else np.zeros(self.dim)
        else:
            means = np.full(self.dim, np.nan)
            sds = np.full(self.dim, np.nan)
        for i in range(self.dim):
            lines.append(
                f"{f'x{i+1}':>6s} {self.lower[i]:10.4g} {self.upper[i]:10.4g} "
                f"{means[i]:12.6f} {sds[i]:12.6f}"
            )
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"TMVNSolution(n={self.n}, dim={self.dim}, "
            f"method={self.method!r}, backend={self.backend_name!r})"
        )
