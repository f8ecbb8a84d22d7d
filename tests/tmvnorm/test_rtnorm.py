"""
Tests for the univariate inverse-CDF truncated normal sampler.
"""

import numpy as np
import pytest
from scipy import stats as sp_stats

from pyinctools.core.exceptions import ValidationError
from pyinctools.tmvnorm import rtnorm


class TestBounds:

    def test_two_sided(self, rng):
        x = rtnorm(5000, 0.2, 0.1, 0.0, 1.0, rng)
        assert x.shape == (5000,)
        assert np.all(x >= 0.0) and np.all(x <= 1.0)

    def test_half_line(self, rng):
        x = rtnorm(2000, 0.35, 0.04, 0.0, np.inf, rng)
        assert np.all(x >= 0.0)

    def test_far_right_tail(self, rng):
        # Whole interval sits 8 SDs above the mean.
        x = rtnorm(1000, 0.0, 1.0, 8.0, 9.0, rng)
        assert np.all(np.isfinite(x))
        assert np.all(x >= 8.0) and np.all(x <= 9.0)

    def test_far_left_tail(self, rng):
        x = rtnorm(1000, 0.0, 1.0, -9.0, -8.0, rng)
        assert np.all(np.isfinite(x))
        assert np.all(x >= -9.0) and np.all(x <= -8.0)

    def test_right_tail_past_underflow(self, rng):
        # norm.sf(39) underflows to 0 in double precision.
        x = rtnorm(5, 0.0, 1.0, 39.0, np.inf, rng)
        assert np.all(np.isfinite(x))
        assert np.all(x >= 39.0)
        assert np.all(x < 40.0)

    def test_left_tail_past_underflow(self, rng):
        x = rtnorm(5, 0.0, 1.0, -np.inf, -39.0, rng)
        assert np.all(np.isfinite(x))
        assert np.all(x <= -39.0)
        assert np.all(x > -40.0)

    def test_zero_draws(self, rng):
        assert rtnorm(0, 0.0, 1.0, -1.0, 1.0, rng).shape == (0,)


class TestDistribution:

    def test_mean_matches_truncnorm(self, rng):
        mu, sigma, lo, hi = 0.1, 0.05, 0.0, 1.0
        x = rtnorm(20000, mu, sigma, lo, hi, rng)
        a, b = (lo - mu) / sigma, (hi - mu) / sigma
        expected = sp_stats.truncnorm.mean(a, b, loc=mu, scale=sigma)
        assert x.mean() == pytest.approx(expected, abs=2e-3)

    def test_kolmogorov_smirnov(self, rng):
        mu, sigma, lo, hi = 0.0, 1.0, -0.5, 2.0
        x = rtnorm(5000, mu, sigma, lo, hi, rng)
        a, b = (lo - mu) / sigma, (hi - mu) / sigma
        stat, p = sp_stats.kstest(x, sp_stats.truncnorm(a, b, loc=mu, scale=sigma).cdf)
        assert p > 0.001


class TestValidation:

    def test_zero_sigma(self, rng):
        with pytest.raises(ValidationError, match="sigma"):
            rtnorm(10, 0.0, 0.0, -1.0, 1.0, rng)

    def test_lower_above_upper(self, rng):
        with pytest.raises(ValidationError, match="must not exceed"):
            rtnorm(10, 0.0, 1.0, 1.0, 0.0, rng)

    def test_nan_bound(self, rng):
        with pytest.raises(ValidationError, match="NaN"):
            rtnorm(10, 0.0, 1.0, np.nan, 1.0, rng)

    def test_negative_n(self, rng):
        with pytest.raises(ValidationError):
            rtnorm(-1, 0.0, 1.0, -1.0, 1.0, rng)
