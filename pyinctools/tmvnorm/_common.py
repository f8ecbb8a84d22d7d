"""
Common data structures for truncated multivariate normal sampling.

TMVNParams is the parameter payload wrapped by Result[P] and exposed
through TMVNSolution.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class TMVNParams:
    """
    Parameter payload for a sampling call.

    - samples: (n, d) matrix, every row inside [lower, upper]
    - n: number of rows
    - dim: number of columns
    - method: algorithm that produced the rows ("gibbs" | "rejection")
    """
    samples: NDArray[np.floating[Any]]         # shape (n, d)
    n: int
    dim: int
    method: str
