"""
Structural classification of covariance matrices.
"""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import NDArray

from pyinctools.core.compute.tolerances import DIAGONAL_TOLERANCE


def is_diagonal(
    sigma: NDArray[np.floating[Any]],
    tol: float = DIAGONAL_TOLERANCE,
) -> bool:
    """
    True when every off-diagonal |sigma[i, j]| is at most `tol`.

    Recomputed on every call; the result decides between independent
    (Gibbs) and rejection sampling.
    """
    off_diagonal = sigma - np.diag(np.diag(sigma))
    return bool(np.all(np.abs(off_diagonal) <= tol))
