"""
Incidence estimation backends.
"""

from pyinctools.incidence.backends.delta import (
    DeltaDifferenceBackend,
    DeltaMethodBackend,
)
from pyinctools.incidence.backends.bootstrap import (
    BootstrapBackend,
    BootstrapDifferenceBackend,
)

__all__ = [
    'DeltaMethodBackend',
    'DeltaDifferenceBackend',
    'BootstrapBackend',
    'BootstrapDifferenceBackend',
]
