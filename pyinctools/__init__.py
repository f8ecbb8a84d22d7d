"""
PyIncTools: HIV incidence estimation from cross-sectional surveys.

Kassanjee incidence estimates from prevalence and recency prevalence,
with delta-method or bootstrap uncertainty, and the truncated
multivariate normal sampler the bootstrap draws from.

Submodules:
    tmvnorm: Truncated (multivariate) normal sampling
    incidence: Incidence, incidence difference, prevalence from counts
"""

__version__ = "0.1.0"

from pyinctools import tmvnorm
from pyinctools import incidence
from pyinctools.tmvnorm import rtmvnorm, rtnorm
from pyinctools.incidence import inccounts, incdif, incprops, prevalence

__all__ = [
    "__version__",
    "tmvnorm",
    "incidence",
    "rtmvnorm",
    "rtnorm",
    "incprops",
    "incdif",
    "inccounts",
    "prevalence",
]
