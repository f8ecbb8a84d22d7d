"""
Exception and warning hierarchy for pyinctools.

All exceptions inherit from IncToolsError so any library-specific failure
can be caught in one place. Non-fatal conditions (a substituted epsilon, a
clamped covariance) are reported through warning classes deriving from
IncToolsWarning; the same messages are also recorded on the returned
Result so callers can inspect them without a warnings filter.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""

import sys
import warnings


class IncToolsError(Exception):
    """Base exception for all pyinctools errors."""
    pass


class ValidationError(IncToolsError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks: an invalid
    alpha, an unknown sampling method, forcing independent sampling on a
    correlated covariance matrix, a Bonferroni factor below one.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when the covariance matrix or truncation bounds disagree with
    the length of the mean vector.
    """
    pass


class CapabilityError(IncToolsError):
    """
    Requested computation is outside what the sampler supports.

    The rejection sampler only handles a fixed dimensionality. Correlated
    sampling at any other dimension raises this error rather than silently
    degrading to independent sampling.

    Attributes:
        dimension: Dimensionality that was requested
        supported_dimension: Dimensionality the sampler supports
    """

    def __init__(
        self,
        message: str,
        dimension: int | None = None,
        supported_dimension: int | None = None,
    ):
        super().__init__(message)
        self.dimension = dimension
        self.supported_dimension = supported_dimension


class ConvergenceError(IncToolsError):
    """
    Iterative algorithm stopped before reaching its target.

    Raised by the rejection sampler when an optional iteration cap is hit
    before enough in-bounds draws have been accepted.

    Attributes:
        iterations: Number of retry iterations completed
        reason: Why the loop stopped (e.g., 'max_iterations')
        accepted: Number of in-bounds draws accepted so far
        requested: Number of draws that were requested
    """

    def __init__(
        self,
        message: str,
        iterations: int,
        reason: str | None = None,
        accepted: int | None = None,
        requested: int | None = None,
    ):
        super().__init__(message)
        self.iterations = iterations
        self.reason = reason
        self.accepted = accepted
        self.requested = requested


class IncToolsWarning(UserWarning):
    """Base class for all pyinctools warnings."""
    pass


class DegenerateInputWarning(IncToolsWarning):
    """
    A standard error of zero was supplied.

    Under the delta method the variance is computed as-is and flagged as
    unreliable; under bootstrap the SE is replaced by a small epsilon.
    """
    pass


class ClampedValueWarning(IncToolsWarning):
    """A negative covariance or incidence estimate was set to zero."""
    pass


class CapabilityWarning(IncToolsWarning):
    """Correlated sampling requested at an unsupported dimensionality."""
    pass


class ApproximationWarning(IncToolsWarning):
    """Counts are too small for the normal approximation to be valid."""
    pass


class AssumptionWarning(IncToolsWarning):
    """A modelling assumption was imposed (e.g. zero covariance)."""
    pass


def warn(message: str, category: type[Warning]) -> None:
    """
    Issue a warning attributed to the first caller outside pyinctools.

    Package warnings are raised at varying call depths, so the stacklevel
    is found by walking out of the package frames.
    """
    frame = sys._getframe(1)
    level = 2
    while frame is not None:
        name = frame.f_globals.get('__name__', '')
        if name != 'pyinctools' and not name.startswith('pyinctools.'):
            break
        frame = frame.f_back
        level += 1
    warnings.warn(message, category, stacklevel=level)
