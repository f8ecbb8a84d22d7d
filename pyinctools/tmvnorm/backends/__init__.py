"""
Truncated multivariate normal sampling backends.
"""

from pyinctools.tmvnorm.backends.gibbs import IndependentGibbsBackend
from pyinctools.tmvnorm.backends.rejection import RejectionBackend

__all__ = ['IndependentGibbsBackend', 'RejectionBackend']
