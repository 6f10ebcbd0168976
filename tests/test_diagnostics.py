# tests/test_diagnostics.py
"""
Tests for the residual diagnostics: Ljung-Box and AR order detection.
"""

import numpy as np
import pytest
import statsmodels.api as sm
from statsmodels.stats.diagnostic import acorr_ljungbox

from tsreg.core.exceptions import EmptyValueError, InvalidValueError
from tsreg.models.time_series.diagnostics import (
    ARFit, LjungBoxResult, detect_ar, ljung_box_test
)


class TestLjungBox:
    """Tests for ljung_box_test."""

    @pytest.mark.parametrize("lags", [1, 5, 20])
    def test_matches_statsmodels(self, stationary_ar1, lags):
        res = ljung_box_test(stationary_ar1, lags)
        ref = acorr_ljungbox(stationary_ar1, lags=[lags])

        assert res.q_stat == pytest.approx(float(ref["lb_stat"].iloc[0]), rel=1e-8)
        assert res.p_value == pytest.approx(float(ref["lb_pvalue"].iloc[0]),
                                            rel=1e-6, abs=1e-300)

    def test_white_noise_not_rejected(self, rng):
        reject, q_stat, p_value = ljung_box_test(rng.standard_normal(1000), 10, alpha=0.001)
        assert not reject
        assert q_stat > 0
        assert 0.001 <= p_value <= 1.0

    def test_white_noise_size_over_seeds(self):
        # under the null, rejections at alpha = 0.01 stay rare across seeded trials
        rejections = sum(
            ljung_box_test(np.random.default_rng(seed).standard_normal(500), 10, alpha=0.01).reject
            for seed in range(300)
        )
        assert 1.0 - rejections / 300 >= 0.97

    def test_autocorrelated_rejected(self, stationary_ar1):
        res = ljung_box_test(stationary_ar1, 10)
        assert isinstance(res, LjungBoxResult)
        assert res.reject
        assert res.autocorrelations.shape == (10,)
        assert res.autocorrelations[0] == pytest.approx(0.3, abs=0.08)
        assert "Reject the null hypothesis" in res.summary()

    def test_errors(self):
        with pytest.raises(EmptyValueError):
            ljung_box_test([], 1)
        with pytest.raises(InvalidValueError):
            ljung_box_test([1.0, 2.0, 0.5], 0)
        with pytest.raises(InvalidValueError):
            ljung_box_test([1.0, 2.0, 0.5], 3)
        with pytest.raises(InvalidValueError, match="zero variance"):
            ljung_box_test(np.full(50, 0.25), 5)


class TestDetectAR:
    """Tests for detect_ar."""

    @pytest.fixture
    def ar2(self, rng):
        n = 3000
        e = rng.standard_normal(n + 200)
        x = np.zeros(n + 200)
        for t in range(2, n + 200):
            x[t] = 0.5 * x[t - 1] - 0.3 * x[t - 2] + e[t]
        return x[200:]

    def test_recovers_ar2(self, ar2):
        best_p, fits = detect_ar(ar2, 4)

        assert best_p >= 2
        assert [f.order for f in fits] == [0, 1, 2, 3, 4]
        np.testing.assert_allclose(fits[2].coefficients[:2], [0.5, -0.3], atol=0.06)
        assert fits[2].aic < fits[1].aic < fits[0].aic

    def test_matches_statsmodels_regression(self, ar2):
        _, fits = detect_ar(ar2, 3)
        n = len(ar2)
        X = np.column_stack([ar2[2:n - 1], ar2[1:n - 2], ar2[0:n - 3], np.ones(n - 3)])
        ref = sm.OLS(ar2[3:], X).fit()

        np.testing.assert_allclose(fits[3].coefficients, ref.params, rtol=1e-8)
        np.testing.assert_allclose(fits[3].p_values, ref.pvalues, rtol=1e-6, atol=1e-300)
        assert fits[3].aic == pytest.approx(ref.aic, rel=1e-10)

    def test_white_noise_baseline(self):
        r = np.array([1.0, -1.0, 2.0, 0.0, -2.0])
        best_p, fits = detect_ar(r, 0)

        ref = sm.OLS(r, np.ones(5)).fit()
        assert best_p == 0
        assert len(fits) == 1
        assert isinstance(fits[0], ARFit)
        assert fits[0].aic == pytest.approx(ref.aic)
        assert fits[0].bic == pytest.approx(ref.bic)
        assert fits[0].p_values is None
        np.testing.assert_allclose(fits[0].coefficients, [0.0])

    def test_unfittable_orders_are_skipped(self):
        r = np.array([0.3, -1.2, 0.8, 0.1, -0.5, 1.1])
        _, fits = detect_ar(r, 6)
        assert all(f.order < 3 for f in fits)

    def test_errors(self):
        with pytest.raises(EmptyValueError):
            detect_ar([], 2)
        with pytest.raises(InvalidValueError):
            detect_ar([1.0, 2.0, 3.0], -1)
