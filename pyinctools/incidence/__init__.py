"""
Incidence estimation from recency-test surveys.

    incprops: incidence from prevalence and recency prevalence
    incdif: difference in incidence between two groups
    inccounts: incidence from survey counts
    prevalence: proportion and SE from counts, optional exact CI

Uncertainty comes from the delta method (bootstrap_draws=0) or from a
parametric bootstrap over truncated normal draws.

Usage:
    from pyinctools.incidence import incprops

    sol = incprops(0.2, 0.015, 0.1, 0.02, 130, 15, 0.01, 0.005)
    sol.incidence
    sol.conf_int
    print(sol.summary())
"""

from pyinctools.incidence.solvers import inccounts, incdif, incprops
from pyinctools.incidence._prevalence import PrevalenceEstimate, prevalence
from pyinctools.incidence._kassanjee import kassanjee
from pyinctools.incidence.design import DifferenceDesign, IncidenceDesign
from pyinctools.incidence._common import DifferenceParams, IncidenceParams
from pyinctools.incidence.solution import DifferenceSolution, IncidenceSolution

__all__ = [
    "incprops",
    "incdif",
    "inccounts",
    "prevalence",
    "PrevalenceEstimate",
    "kassanjee",
    "IncidenceDesign",
    "DifferenceDesign",
    "IncidenceParams",
    "DifferenceParams",
    "IncidenceSolution",
    "DifferenceSolution",
]
