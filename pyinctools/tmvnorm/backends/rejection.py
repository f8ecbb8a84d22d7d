"""
Rejection backend for truncated multivariate normal sampling.

Draws from the untruncated N(mu, Sigma) and keeps rows inside the
truncation box. A trial batch estimates the rejection rate so the main
batch is sized to need few retries.

Only REJECTION_DIMENSION (4) dimensions are supported: the sampler exists
for the correlated (P, P_R) pair alongside independent MDRI and FRR.

Performance cliff: when the box holds almost none of the probability
mass the rejection rate approaches 1 and the retry loop can run for a
very long time. It terminates with probability 1 whenever the rate is
strictly below 1; pass max_iter to fail fast instead.
"""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import NDArray

from pyinctools.core.capabilities import METHOD_REJECTION, REJECTION_DIMENSION
from pyinctools.core.compute.timing import Timer
from pyinctools.core.compute.tolerances import REJECTION_TRIAL_DRAWS
from pyinctools.core.exceptions import CapabilityError, ConvergenceError
from pyinctools.core.result import Result
from pyinctools.tmvnorm._classify import is_diagonal
from pyinctools.tmvnorm._common import TMVNParams
from pyinctools.tmvnorm.design import TMVNDesign


class RejectionBackend:
    """CPU backend for correlated 4-dimensional truncated normals."""

    @property
    def name(self) -> str:
        return 'cpu_rejection'

    def solve(self, design: TMVNDesign) -> Result[TMVNParams]:
        """Draw exactly design.n in-box rows and return Result[TMVNParams]."""
        d = design.dim
        if d != REJECTION_DIMENSION:
            raise CapabilityError(
                f"Rejection sampling only supports {REJECTION_DIMENSION} "
                f"dimensions, got {d}",
                dimension=d,
                supported_dimension=REJECTION_DIMENSION,
            )

        timer = Timer()
        timer.start()

        n = design.n

        with timer.section('acceptance_rate'):
            trial = self._draw(design, REJECTION_TRIAL_DRAWS)
            rr = 1.0 - float(np.mean(self._in_box(design, trial)))

        kept: list[NDArray] = []
        accepted = 0
        n_drawn = REJECTION_TRIAL_DRAWS
        iterations = 0

        with timer.section('sampling'):
            if n > 0:
                size = int(round(n + n * rr))
                batch = self._draw(design, size)
                batch = batch[self._in_box(design, batch)]
                kept.append(batch)
                accepted = batch.shape[0]
                n_drawn += size

                while accepted < n:
                    if design.max_iter is not None and iterations >= design.max_iter:
                        raise ConvergenceError(
                            f"Rejection sampler accepted {accepted} of {n} draws "
                            f"after {iterations} retry iterations "
                            f"(trial rejection rate {rr:.4f}). The truncation "
                            f"box likely has near-zero probability mass.",
                            iterations=iterations,
                            reason='max_iterations',
                            accepted=accepted,
                            requested=n,
                        )
                    size = int(round(n * rr + 1))
                    extra = self._draw(design, size)
                    extra = extra[self._in_box(design, extra)]
                    kept.append(extra)
                    accepted += extra.shape[0]
                    n_drawn += size
                    iterations += 1

        if kept:
            samples = np.concatenate(kept, axis=0)[:n]
        else:
            samples = np.empty((0, d), dtype=np.float64)

        timer.stop()

        return Result(
            params=TMVNParams(samples=samples, n=n, dim=d, method=METHOD_REJECTION),
            info={
                'method': METHOD_REJECTION,
                'is_diagonal': is_diagonal(design.sigma),
                'trial_rejection_rate': rr,
                'iterations': iterations,
                'n_drawn': n_drawn,
                'acceptance_rate': (n / n_drawn) if n_drawn else 1.0,
            },
            timing=timer.result(),
            backend_name=self.name,
        )

    def _draw(self, design: TMVNDesign, size: int) -> NDArray[np.floating[Any]]:
        """Untruncated N(mu, sigma) rows, shape (size, d)."""
        return design.rng.multivariate_normal(design.mu, design.sigma, size=size)

    def _in_box(
        self,
        design: TMVNDesign,
        rows: NDArray[np.floating[Any]],
    ) -> NDArray[np.bool_]:
        """Boolean mask of rows inside [lower, upper] in every dimension."""
        return np.all((rows >= design.lower) & (rows <= design.upper), axis=1)
