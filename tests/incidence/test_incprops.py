"""
Tests for incprops(): delta method and bootstrap.

Scenario: P = 0.2 (SE 0.015), P_R = 0.1 (SE 0.02), MDRI = 130 days
(SE 15), FRR = 0.01 (SE 0.005), T = 730.5 days, giving I ~ 0.06698
per person-year.
"""

import warnings

import numpy as np
import pytest

from pyinctools.core.exceptions import (
    AssumptionWarning,
    ClampedValueWarning,
    DegenerateInputWarning,
    ValidationError,
)
from pyinctools.incidence import IncidenceSolution, incprops
from pyinctools.incidence._kassanjee import delta_method_se, kassanjee

# Closed-form quantities agree to double precision.
RTOL_EXACT = 1e-10

EXPECTED_I = 0.2 * (0.1 - 0.01) / (0.8 * (130 / 365.25 - 0.01 * 2.0))


# ═══════════════════════════════════════════════════════════════════════
# Delta method
# ═══════════════════════════════════════════════════════════════════════


class TestDeltaMethod:

    def test_point_estimate(self, survey_inputs):
        sol = incprops(**survey_inputs)
        assert sol.incidence == pytest.approx(EXPECTED_I, rel=RTOL_EXACT)
        assert sol.incidence == pytest.approx(0.06698, abs=1e-5)

    def test_metadata(self, survey_inputs):
        sol = incprops(**survey_inputs)
        assert isinstance(sol, IncidenceSolution)
        assert sol.method == 'delta'
        assert sol.backend_name == 'cpu_delta'
        assert sol.bootstrap_incidence is None
        assert sol.cov_prev_incidence is None
        assert sol.warnings == ()

    def test_se_matches_delta_formula(self, survey_inputs):
        sol = incprops(**survey_inputs)
        se, se_inf_ss = delta_method_se(
            0.2, 0.1, 130 / 365.25, 0.01, 2.0,
            0.015, 0.02, 15 / 365.25, 0.005,
        )
        assert sol.se == pytest.approx(se, rel=RTOL_EXACT)
        assert sol.se_inf_ss == pytest.approx(se_inf_ss, rel=RTOL_EXACT)
        assert sol.rse == pytest.approx(se / EXPECTED_I, rel=RTOL_EXACT)

    def test_interval_symmetric(self, survey_inputs):
        sol = incprops(**survey_inputs)
        lo, hi = sol.conf_int
        assert lo < sol.incidence < hi
        assert (lo + hi) / 2 == pytest.approx(sol.incidence, rel=1e-12)
        assert hi - sol.incidence == pytest.approx(1.959963984540054 * sol.se, rel=1e-9)

    def test_alpha_widens_interval(self, survey_inputs):
        narrow = incprops(**survey_inputs, alpha=0.2)
        wide = incprops(**survey_inputs, alpha=0.01)
        assert np.diff(wide.conf_int)[0] > np.diff(narrow.conf_int)[0]

    def test_per_scales(self, survey_inputs):
        base = incprops(**survey_inputs)
        scaled = incprops(**survey_inputs, per=100)
        assert scaled.incidence == pytest.approx(100 * base.incidence)
        assert scaled.se == pytest.approx(100 * base.se)
        assert scaled.se_inf_ss == pytest.approx(100 * base.se_inf_ss)
        assert scaled.rse == pytest.approx(base.rse)

    def test_timeconversion(self, survey_inputs):
        # Same quantities expressed in years directly.
        inputs = dict(survey_inputs, mdri=130 / 365.25, se_mdri=15 / 365.25)
        sol = incprops(**inputs, T=2.0, timeconversion=1.0)
        assert sol.incidence == pytest.approx(EXPECTED_I, rel=1e-12)

    def test_covariance_increases_se(self, survey_inputs):
        base = incprops(**survey_inputs)
        corr = incprops(**survey_inputs, covar=1e-4)
        assert corr.se > base.se
        assert corr.incidence == base.incidence

    def test_negative_covariance_clamped(self, survey_inputs):
        with pytest.warns(ClampedValueWarning, match="cannot be negative"):
            sol = incprops(**survey_inputs, covar=-1e-4)
        assert sol.info['covar'] == 0.0
        assert sol.se == pytest.approx(incprops(**survey_inputs).se)
        assert sol.has_warning("cannot be negative")

    def test_warning_attributed_to_caller(self, survey_inputs):
        with pytest.warns(ClampedValueWarning) as record:
            incprops(**survey_inputs, covar=-1e-4)
        assert record[0].filename == __file__

    def test_zero_se_flagged_not_replaced(self, survey_inputs):
        inputs = dict(survey_inputs, se_mdri=0.0)
        with pytest.warns(DegenerateInputWarning, match="likely incorrect"):
            sol = incprops(**inputs)
        assert sol.has_warning("se_mdri of zero supplied")
        _, se_inf_ss = delta_method_se(
            0.2, 0.1, 130 / 365.25, 0.01, 2.0, 0.015, 0.02, 0.0, 0.005,
        )
        assert sol.se_inf_ss == pytest.approx(se_inf_ss)

    def test_summary(self, survey_inputs):
        text = incprops(**survey_inputs).summary()
        assert "INCIDENCE ESTIMATE" in text
        assert "95% CI" in text
        assert "infinite sample size" in text


# ═══════════════════════════════════════════════════════════════════════
# Bootstrap
# ═══════════════════════════════════════════════════════════════════════


class TestBootstrap:

    def test_point_estimate_unchanged(self, survey_inputs):
        delta = incprops(**survey_inputs)
        boot = incprops(**survey_inputs, bootstrap_draws=500, seed=1)
        assert boot.incidence == delta.incidence

    def test_outputs(self, survey_inputs):
        R = 2000
        sol = incprops(**survey_inputs, bootstrap_draws=R, seed=2)
        assert sol.method == 'bootstrap'
        assert sol.backend_name == 'cpu_bootstrap'
        assert sol.se_inf_ss is None
        assert sol.bootstrap_incidence.shape == (R,)
        assert sol.se == pytest.approx(np.std(sol.bootstrap_incidence, ddof=1))
        np.testing.assert_allclose(
            sol.conf_int, np.quantile(sol.bootstrap_incidence, [0.025, 0.975]),
        )
        assert sol.cov_prev_incidence.shape == (2, 2)
        np.testing.assert_allclose(np.diag(sol.cor_prev_incidence), 1.0)

    def test_se_close_to_delta(self, survey_inputs):
        delta = incprops(**survey_inputs)
        boot = incprops(**survey_inputs, bootstrap_draws=5000, seed=3)
        assert boot.se == pytest.approx(delta.se, rel=0.2)

    def test_prevalence_incidence_positively_correlated(self, survey_inputs):
        sol = incprops(**survey_inputs, bootstrap_draws=3000, seed=4)
        assert sol.cor_prev_incidence[0, 1] > 0

    def test_seed_reproducible(self, survey_inputs):
        a = incprops(**survey_inputs, bootstrap_draws=300, seed=10)
        b = incprops(**survey_inputs, bootstrap_draws=300, seed=10)
        np.testing.assert_array_equal(a.bootstrap_incidence, b.bootstrap_incidence)
        np.testing.assert_array_equal(a.conf_int, b.conf_int)

    def test_generator_reproducible(self, survey_inputs):
        a = incprops(**survey_inputs, bootstrap_draws=300, rng=np.random.default_rng(8))
        b = incprops(**survey_inputs, bootstrap_draws=300, rng=np.random.default_rng(8))
        np.testing.assert_array_equal(a.bootstrap_incidence, b.bootstrap_incidence)

    def test_samplers_agree(self, survey_inputs):
        lib = incprops(**survey_inputs, bootstrap_draws=10_000, seed=5)
        inv = incprops(**survey_inputs, bootstrap_draws=10_000, seed=6,
                       use_gibbs_bootstrap=True)
        assert lib.info['sampler'] == 'truncnorm'
        assert inv.info['sampler'] == 'rtnorm'
        assert inv.se == pytest.approx(lib.se, rel=0.08)
        assert np.mean(inv.bootstrap_incidence) == pytest.approx(
            np.mean(lib.bootstrap_incidence), rel=0.02,
        )

    def test_correlated_uses_rejection(self, survey_inputs):
        sol = incprops(**survey_inputs, covar=1e-4, bootstrap_draws=1000, seed=7)
        assert sol.info['sampler'] == 'rejection'
        assert sol.bootstrap_incidence.shape == (1000,)

    def test_covariance_widens_bootstrap(self, survey_inputs):
        base = incprops(**survey_inputs, bootstrap_draws=8000, seed=9)
        corr = incprops(**survey_inputs, covar=2e-4, bootstrap_draws=8000, seed=9)
        assert corr.se > base.se

    def test_zero_se_replaced(self, survey_inputs):
        inputs = dict(survey_inputs, se_frr=0.0)
        with pytest.warns(DegenerateInputWarning, match="Set to 1e-10"):
            sol = incprops(**inputs, bootstrap_draws=200, seed=1)
        assert sol.has_warning("se_frr of zero supplied")
        assert np.all(np.isfinite(sol.bootstrap_incidence))

    def test_negative_covariance_clamped(self, survey_inputs):
        with pytest.warns(ClampedValueWarning):
            sol = incprops(**survey_inputs, covar=-1e-4,
                           bootstrap_draws=200, seed=1)
        assert sol.info['covar'] == 0.0
        assert sol.info['sampler'] == 'truncnorm'

    def test_warning_attributed_to_caller(self, survey_inputs):
        inputs = dict(survey_inputs, se_frr=0.0)
        with pytest.warns(DegenerateInputWarning) as record:
            incprops(**inputs, bootstrap_draws=100, seed=1)
        degenerate = [w for w in record
                      if issubclass(w.category, DegenerateInputWarning)]
        assert [w.filename for w in degenerate] == [__file__]

    def test_covariance_beyond_substituted_se(self, survey_inputs):
        # se_prev = 0 is replaced by 1e-10, so cov(P, P_R) may be at most 2e-12.
        inputs = dict(survey_inputs, se_prev=0.0)
        with pytest.warns(DegenerateInputWarning):
            with pytest.raises(ValidationError, match="positive semi-definite"):
                incprops(**inputs, covar=1e-4, bootstrap_draws=2000, seed=1)

    def test_covariance_beyond_se_product(self, survey_inputs):
        with pytest.raises(ValidationError, match=r"se_prev \* se_prev_r"):
            incprops(**survey_inputs, covar=4e-4, bootstrap_draws=100, seed=1)


class TestBootstrapFromCounts:

    def test_counts_mode(self, survey_inputs):
        with pytest.warns(AssumptionWarning, match="zero covariance"):
            sol = incprops(**survey_inputs, bootstrap_draws=2000, seed=1,
                           bootstrap_from_counts=True, counts=(5000, 900))
        assert sol.info['from_counts'] is True
        assert sol.info['sampler'].startswith('binomial')
        assert sol.bootstrap_incidence.shape == (2000,)
        assert sol.incidence == pytest.approx(EXPECTED_I)

    def test_counts_mode_reports_zero_covariance(self, survey_inputs):
        with pytest.warns(AssumptionWarning):
            sol = incprops(**survey_inputs, covar=1e-4, bootstrap_draws=500,
                           seed=1, bootstrap_from_counts=True,
                           counts=(5000, 900))
        assert sol.info['covar'] == 0.0

    def test_requires_draws(self, survey_inputs):
        with pytest.raises(ValidationError, match="bootstrap_draws=0"):
            incprops(**survey_inputs, bootstrap_from_counts=True, counts=(5000, 900))

    def test_requires_counts(self, survey_inputs):
        with pytest.raises(ValidationError, match="counts"):
            incprops(**survey_inputs, bootstrap_draws=100,
                     bootstrap_from_counts=True)

    def test_rejects_zero_count(self, survey_inputs):
        with pytest.raises(ValidationError):
            incprops(**survey_inputs, bootstrap_draws=100,
                     bootstrap_from_counts=True, counts=(5000, 0))

    def test_rejects_prevalence_outside_unit_interval(self, survey_inputs):
        inputs = dict(survey_inputs, prev_r=1.2)
        with pytest.raises(ValidationError, match=r"\[0, 1\]"):
            incprops(**inputs, bootstrap_draws=100,
                     bootstrap_from_counts=True, counts=(5000, 900))

    def test_counts_ignored_without_flag(self, survey_inputs):
        with warnings.catch_warnings():
            warnings.simplefilter("error", AssumptionWarning)
            sol = incprops(**survey_inputs, bootstrap_draws=100, seed=1,
                           counts=(5000, 900))
        assert sol.info['from_counts'] is False


# ═══════════════════════════════════════════════════════════════════════
# Validation
# ═══════════════════════════════════════════════════════════════════════


class TestValidation:

    @pytest.mark.parametrize("alpha", [0.0, 1.0, 1.5])
    def test_alpha(self, survey_inputs, alpha):
        with pytest.raises(ValidationError, match="alpha"):
            incprops(**survey_inputs, alpha=alpha)

    def test_negative_se(self, survey_inputs):
        with pytest.raises(ValidationError, match="se_prev"):
            incprops(**dict(survey_inputs, se_prev=-0.01))

    def test_non_finite_mean(self, survey_inputs):
        with pytest.raises(ValidationError, match="prev"):
            incprops(**dict(survey_inputs, prev=np.nan))

    def test_negative_draws(self, survey_inputs):
        with pytest.raises(ValidationError, match="bootstrap_draws"):
            incprops(**survey_inputs, bootstrap_draws=-1)

    def test_non_positive_per(self, survey_inputs):
        with pytest.raises(ValidationError, match="per"):
            incprops(**survey_inputs, per=0)

    def test_estimator_defined_outside_unit_interval(self, survey_inputs):
        sol = incprops(**dict(survey_inputs, prev_r=0.005))
        assert sol.incidence < 0
        assert sol.incidence == pytest.approx(
            float(kassanjee(0.2, 0.005, 130 / 365.25, 0.01, 2.0)),
        )
