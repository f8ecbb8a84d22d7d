"""
Core infrastructure for pyinctools.

This module provides shared abstractions and utilities used by the
sampling engine (tmvnorm) and the estimators (incidence).

Key components:
    result: Generic Result[P] envelope
    exceptions: Exception and warning hierarchy
    validation: Input validators
    capabilities: Sampling method strings and supported dimensions
    compute: Timing and numerical tolerances
"""

from pyinctools.core.result import Result
from pyinctools.core.exceptions import (
    IncToolsError,
    ValidationError,
    DimensionError,
    CapabilityError,
    ConvergenceError,
    IncToolsWarning,
    DegenerateInputWarning,
    ClampedValueWarning,
    CapabilityWarning,
    ApproximationWarning,
    AssumptionWarning,
)

__all__ = [
    # Result
    "Result",
    # Exceptions
    "IncToolsError",
    "ValidationError",
    "DimensionError",
    "CapabilityError",
    "ConvergenceError",
    # Warnings
    "IncToolsWarning",
    "DegenerateInputWarning",
    "ClampedValueWarning",
    "CapabilityWarning",
    "ApproximationWarning",
    "AssumptionWarning",
]
