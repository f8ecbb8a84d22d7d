"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def survey_inputs():
    """Single-survey inputs: prev, se_prev, prev_r, se_prev_r, mdri, se_mdri, frr, se_frr."""
    return dict(
        prev=0.20, se_prev=0.015,
        prev_r=0.10, se_prev_r=0.02,
        mdri=130.0, se_mdri=15.0,
        frr=0.01, se_frr=0.005,
    )


@pytest.fixture
def two_group_inputs():
    """Two groups sharing MDRI and FRR."""
    return dict(
        prev=[0.20, 0.21], se_prev=[0.0100, 0.0102],
        prev_r=[0.10, 0.13], se_prev_r=[0.0100, 0.0105],
        mdri=130.0, se_mdri=15.0,
        frr=0.01, se_frr=0.005,
    )
