"""
Generic result container for all pyinctools computations.

The Result class provides a standardized envelope that sampling and
estimation results share. This enables common handling of timing,
warnings and reproducibility metadata while each domain defines its own
parameter payload.

Design decisions:
    - Generic over parameter payload P for type safety
    - info dict for flexible metadata (method, acceptance rate, clamps)
    - timing is optional (don't burden unit tests)
    - Immutable (frozen=True) for reproducibility
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')  # Parameter payload type


def _default_provenance() -> dict[str, str]:
    """Library versions that produced a result."""
    import numpy
    import scipy
    from pyinctools import __version__

    return {
        'pyinctools_version': __version__,
        'numpy_version': numpy.__version__,
        'scipy_version': scipy.__version__,
    }


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope for sampling and estimation.

    Type Parameters:
        P: The domain-specific parameter payload type

    Attributes:
        params: Domain-specific parameters (samples, estimates, etc.)
        info: Structured metadata (method, acceptance rate, diagnostics)
        timing: Execution timing breakdown, or None if not measured
        backend_name: Identifier of the backend that produced this result
        warnings: Non-fatal issues encountered during computation
        provenance: Versions of the libraries used

    Examples:
        >>> Result(
        ...     params=TMVNParams(samples=x, n=1000, dim=4),
        ...     info={'method': 'gibbs', 'acceptance_rate': 1.0},
        ...     timing={'total_seconds': 0.01},
        ...     backend_name='cpu_gibbs'
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)
    provenance: dict[str, str] = field(default_factory=_default_provenance)

    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)
