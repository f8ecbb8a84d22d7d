"""
Truncated multivariate normal sampling.

Two interchangeable algorithms and an automatic selector:

    Gibbs (independent): diagonal covariance, any dimension, every draw
        accepted. Each column comes from the univariate inverse-CDF
        sampler rtnorm().
    Rejection: any full-rank covariance, exactly 4 dimensions. Draws
        from the untruncated normal and keeps in-box rows.

Usage:
    from pyinctools.tmvnorm import rtmvnorm

    sol = rtmvnorm(1000, mu, sigma, lower, upper, seed=42)
    sol.samples      # (1000, d)
    sol.method       # 'gibbs' or 'rejection'
"""

from pyinctools.tmvnorm.solvers import rtmvnorm
from pyinctools.tmvnorm._univariate import rtnorm
from pyinctools.tmvnorm._classify import is_diagonal
from pyinctools.tmvnorm.design import TMVNDesign
from pyinctools.tmvnorm._common import TMVNParams
from pyinctools.tmvnorm.solution import TMVNSolution

__all__ = [
    "rtmvnorm",
    "rtnorm",
    "is_diagonal",
    "TMVNDesign",
    "TMVNParams",
    "TMVNSolution",
]
