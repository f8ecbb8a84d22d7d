"""
Tests for the Result[P] envelope.

Validates:
    - Construction with arbitrary payload types
    - Frozen immutability
    - Default factories (warnings, provenance)
    - has_warning()
"""

from dataclasses import FrozenInstanceError, dataclass

import pytest

import pyinctools
from pyinctools.core.result import Result, _default_provenance


@dataclass(frozen=True)
class FakeParams:
    """Minimal payload for testing."""
    value: float


def _result(**kwargs):
    defaults = dict(
        params=FakeParams(value=1.0),
        info={},
        timing=None,
        backend_name="cpu",
    )
    defaults.update(kwargs)
    return Result(**defaults)


# ═══════════════════════════════════════════════════════════════════════
# Construction and defaults
# ═══════════════════════════════════════════════════════════════════════


class TestResultConstruction:

    def test_basic_creation(self):
        result = _result(
            params=FakeParams(value=42.0),
            info={"method": "gibbs", "acceptance_rate": 1.0},
            timing={"total_seconds": 0.01},
            backend_name="cpu_gibbs",
        )
        assert result.params.value == 42.0
        assert result.info["method"] == "gibbs"
        assert result.timing["total_seconds"] == 0.01
        assert result.backend_name == "cpu_gibbs"

    def test_warnings_default_empty(self):
        result = _result()
        assert result.warnings == ()
        assert isinstance(result.warnings, tuple)

    def test_provenance_auto_generated(self):
        result = _result()
        assert result.provenance["pyinctools_version"] == pyinctools.__version__
        assert "numpy_version" in result.provenance
        assert "scipy_version" in result.provenance

    def test_provenance_explicit_override(self):
        result = _result(provenance={"custom": "metadata"})
        assert result.provenance == {"custom": "metadata"}

    def test_default_provenance_fresh_dict(self):
        assert _default_provenance() is not _default_provenance()


class TestImmutability:

    def test_cannot_set_params(self):
        result = _result()
        with pytest.raises(FrozenInstanceError):
            result.params = FakeParams(value=2.0)

    def test_cannot_set_warnings(self):
        result = _result()
        with pytest.raises(FrozenInstanceError):
            result.warnings = ("new warning",)


# ═══════════════════════════════════════════════════════════════════════
# has_warning()
# ═══════════════════════════════════════════════════════════════════════


class TestHasWarning:

    def test_no_warnings_returns_false(self):
        assert _result().has_warning("anything") is False

    def test_substring_match(self):
        result = _result(warnings=("se_mdri of zero supplied. Set to 1e-10.",))
        assert result.has_warning("se_mdri") is True
        assert result.has_warning("1e-10") is True

    def test_no_match(self):
        result = _result(warnings=("Covariance clamped",))
        assert result.has_warning("Negative point estimate") is False
