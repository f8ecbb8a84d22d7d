"""
Sampling method constants for pyinctools.

This module is the SINGLE SOURCE OF TRUTH for sampling method strings and
for the dimensionality the rejection sampler supports. Import from here,
never use raw strings.

Usage:
    from pyinctools.core.capabilities import (
        METHOD_AUTO,
        METHOD_GIBBS,
        METHOD_REJECTION,
        REJECTION_DIMENSION,
    )
"""

# Pick Gibbs for diagonal covariance, rejection otherwise
METHOD_AUTO = 'auto'

# Force independent (Gibbs) sampling; covariance must be diagonal
METHOD_GIBBS = 'gibbs'

# Force rejection sampling; dimension must equal REJECTION_DIMENSION
METHOD_REJECTION = 'rejection'

ALL_METHODS = frozenset({
    METHOD_AUTO,
    METHOD_GIBBS,
    METHOD_REJECTION,
})

# The rejection sampler was built and validated for the four Kassanjee
# parameters (P, P_R, MDRI, FRR) only.
REJECTION_DIMENSION = 4

__all__ = [
    'METHOD_AUTO',
    'METHOD_GIBBS',
    'METHOD_REJECTION',
    'ALL_METHODS',
    'REJECTION_DIMENSION',
]
