# tests/test_bootstrap.py
"""
Tests for the residual bootstrap.
"""

import numpy as np
import pytest

from tsreg.core.exceptions import EmptyValueError, InvalidValueError
from tsreg.models.bootstrap.residual import BootstrapMethod, simulate_white_noise


class TestSimulateWhiteNoise:
    """Tests for simulate_white_noise."""

    @pytest.fixture
    def resid(self):
        return np.array([-1.5, -0.25, 0.0, 0.75, 2.0])

    def test_seeded_draws_are_reproducible(self, resid):
        a = simulate_white_noise(resid, 100, random_state=123)
        b = simulate_white_noise(resid, 100, random_state=123)
        np.testing.assert_array_equal(a, b)

    def test_draws_come_from_residuals(self, resid):
        draws = simulate_white_noise(resid, 500, random_state=1)
        assert draws.shape == (500,)
        assert np.all(np.isin(draws, resid))
        # every residual is drawn at least once in 500 draws from 5 values
        assert set(draws.tolist()) == set(resid.tolist())

    def test_generator_state_is_used(self, resid):
        gen = np.random.default_rng(9)
        first = simulate_white_noise(resid, 50, random_state=gen)
        second = simulate_white_noise(resid, 50, random_state=gen)
        assert not np.array_equal(first, second)

    def test_unseeded_draws(self, resid):
        draws = simulate_white_noise(resid, 20)
        assert np.all(np.isin(draws, resid))

    def test_uniform_frequencies(self, rng):
        resid = np.arange(4.0)
        draws = simulate_white_noise(resid, 40_000, random_state=rng)
        freq = np.array([np.mean(draws == v) for v in resid])
        np.testing.assert_allclose(freq, 0.25, atol=0.02)

    def test_zero_length(self, resid):
        draws = simulate_white_noise(resid, 0, random_state=0)
        assert draws.shape == (0,)

    def test_unsupported_methods(self, resid):
        for method in ("parametric", "wild", BootstrapMethod.WILD, "block"):
            with pytest.raises(InvalidValueError):
                simulate_white_noise(resid, 10, method=method)

    def test_method_tags(self):
        assert BootstrapMethod.from_string("NonParametric") is BootstrapMethod.NONPARAMETRIC
        with pytest.raises(InvalidValueError):
            BootstrapMethod.from_string("stationary")

    def test_invalid_inputs(self, resid):
        with pytest.raises(EmptyValueError):
            simulate_white_noise([], 10)
        with pytest.raises(InvalidValueError):
            simulate_white_noise(resid, -1)
        with pytest.raises(InvalidValueError):
            simulate_white_noise(resid, 10, random_state="seed")
