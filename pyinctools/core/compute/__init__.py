"""
Shared compute infrastructure for pyinctools.

IMPORTANT: This is NOT where sampling or estimation backends live. Those
go in {domain}/backends/. This module contains shared NUMERIC
infrastructure.

Submodules:
    timing: Execution timing utilities
    tolerances: Numerical thresholds and substitution constants
"""

from pyinctools.core.compute.timing import Timer
from pyinctools.core.compute.tolerances import (
    DIAGONAL_TOLERANCE,
    PSD_TOLERANCE,
    ZERO_SE_EPSILON,
    REJECTION_TRIAL_DRAWS,
)

__all__ = [
    # Timing
    "Timer",
    # Tolerances
    "DIAGONAL_TOLERANCE",
    "PSD_TOLERANCE",
    "ZERO_SE_EPSILON",
    "REJECTION_TRIAL_DRAWS",
]
