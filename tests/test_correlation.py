# tests/test_correlation.py
"""
Tests for the autocorrelation engine and the power-law fit of its decay.
"""

import numpy as np
import pytest
from hypothesis import assume, given, settings, strategies as st
from statsmodels.tsa.stattools import acf as sm_acf

from tsreg.core.config import set_config
from tsreg.core.exceptions import EmptyValueError, InvalidValueError
from tsreg.models.time_series.correlation import (
    MultiSegments, autocorr_single, new_multi_segments
)
from tsreg.models.time_series.power_law import LogACFFit, auto_fit_range, fit_log_acf


class TestAutocorrSingle:
    """Tests for the single-series ACF."""

    def test_lag_zero_is_one(self, rng):
        acf = autocorr_single(rng.standard_normal(300), 20)
        assert acf[0] == pytest.approx(1.0, abs=1e-12)
        assert acf.shape == (20,)

    def test_matches_statsmodels_adjusted_acf(self, stationary_ar1):
        acf = autocorr_single(stationary_ar1, 25)
        ref = sm_acf(stationary_ar1, nlags=24, adjusted=True, fft=False)
        np.testing.assert_allclose(acf, ref, atol=1e-10)

    def test_lags_beyond_length_are_nan(self):
        acf = autocorr_single([1.0, 3.0, 2.0, 5.0], 6)
        assert np.all(np.isfinite(acf[:4]))
        assert np.all(np.isnan(acf[4:]))

    def test_errors(self):
        with pytest.raises(EmptyValueError):
            autocorr_single([], 5)
        with pytest.raises(InvalidValueError):
            autocorr_single([1.0, 2.0, 3.0, 4.0], 0)
        with pytest.raises(InvalidValueError):
            autocorr_single([2.0, 2.0, 2.0, 2.0], 2)


class TestMultiSegments:
    """Tests for the pooled segment ACF estimators."""

    def test_moments(self):
        ms = new_multi_segments([[1.0, 2.0, 3.0], [], [4.0, 5.0]])
        data = np.arange(1.0, 6.0)
        assert ms.total_n == 5
        assert len(ms) == 3
        assert ms.mean == pytest.approx(data.mean())
        assert ms.variance == pytest.approx(data.var())

    def test_immutable(self):
        ms = MultiSegments([[1.0, 2.0, 4.0]])
        with pytest.raises(AttributeError):
            ms.mean = 0.0
        with pytest.raises(ValueError):
            ms.segments[0][0] = 10.0

    def test_input_is_copied(self):
        seg = np.array([1.0, 2.0, 4.0])
        ms = MultiSegments([seg])
        seg[0] = 100.0
        assert ms.segments[0][0] == 1.0

    def test_construction_errors(self):
        with pytest.raises(EmptyValueError):
            MultiSegments([])
        with pytest.raises(EmptyValueError):
            MultiSegments([[], []])
        with pytest.raises(InvalidValueError):
            MultiSegments([[1.0, 1.0], [1.0]])

    def test_single_segment_matches_single_series(self, stationary_ar1):
        ms = MultiSegments([stationary_ar1])
        np.testing.assert_allclose(ms.autocorr_segments(30),
                                   autocorr_single(stationary_ar1, 30), atol=1e-10)

    def test_ar1_segments(self, ar1_segments):
        acf = MultiSegments(ar1_segments).autocorr_segments(50)
        assert acf[0] == pytest.approx(1.0, abs=1e-12)
        assert acf[1] == pytest.approx(0.6, abs=0.02)
        assert acf[2] == pytest.approx(0.36, abs=0.03)

    def test_estimators_agree(self, ar1_segments):
        ms = MultiSegments(ar1_segments)
        direct = ms.autocorr_segments(100)
        np.testing.assert_allclose(ms.autocorr_segments_parallel(100), direct, atol=1e-12)
        np.testing.assert_allclose(ms.autocorr_segments_fft(100), direct, atol=1e-6)

    def test_nan_tail(self, uneven_segments):
        ms = MultiSegments(uneven_segments)
        for acf in (ms.autocorr_segments(450),
                    ms.autocorr_segments_parallel(450, n_workers=3),
                    ms.autocorr_segments_fft(450)):
            assert np.all(np.isfinite(acf[:400]))
            assert np.all(np.isnan(acf[400:]))

    def test_parallel_worker_counts(self, uneven_segments):
        ms = MultiSegments(uneven_segments)
        direct = ms.autocorr_segments(60)
        for workers in (1, 2, 7, 64):
            np.testing.assert_allclose(
                ms.autocorr_segments_parallel(60, n_workers=workers), direct, atol=1e-12
            )

    def test_parallel_uses_configured_workers(self, uneven_segments):
        set_config("performance", "max_workers", 2)
        ms = MultiSegments(uneven_segments)
        np.testing.assert_allclose(ms.autocorr_segments_parallel(40),
                                   ms.autocorr_segments(40), atol=1e-12)

    def test_max_lag_must_be_positive(self, ar1_segments):
        ms = MultiSegments(ar1_segments)
        for method in (ms.autocorr_segments, ms.autocorr_segments_parallel,
                       ms.autocorr_segments_fft):
            with pytest.raises(InvalidValueError):
                method(0)
        with pytest.raises(InvalidValueError):
            ms.autocorr_segments_parallel(10, n_workers=0)

    @given(
        lengths=st.lists(st.integers(min_value=0, max_value=60), min_size=1, max_size=6),
        max_lag=st.integers(min_value=1, max_value=80),
        seed=st.integers(min_value=0, max_value=10_000),
    )
    @settings(max_examples=40, deadline=None)
    def test_estimators_agree_property(self, lengths, max_lag, seed):
        assume(sum(lengths) >= 2)
        rng = np.random.default_rng(seed)
        ms = MultiSegments([rng.standard_normal(n) for n in lengths])

        direct = ms.autocorr_segments(max_lag)
        np.testing.assert_allclose(ms.autocorr_segments_parallel(max_lag, n_workers=3),
                                   direct, atol=1e-12)
        np.testing.assert_allclose(ms.autocorr_segments_fft(max_lag), direct, atol=1e-6)


class TestSignalWeight:
    """Tests for the running sign balance."""

    def test_hand_computed(self):
        ms = MultiSegments([[1.0, -1.0, 2.0], [-3.0]])
        share, imbalance = ms.signal_weight(2.0)
        np.testing.assert_allclose(share, [0.5, 0.25, 0.375])
        np.testing.assert_allclose(imbalance, [0.5, 0.0, -0.5])

    def test_zero_leading_value_is_nan(self):
        ms = MultiSegments([[0.0, 1.0, -1.0]])
        share, imbalance = ms.signal_weight(1.0)
        assert np.isnan(share[0])
        np.testing.assert_allclose(share[1:], [1.0, 0.5])
        np.testing.assert_allclose(imbalance, [0.0, -1.0, 0.0])

    def test_invalid_sum_qty(self):
        ms = MultiSegments([[1.0, -1.0]])
        with pytest.raises(InvalidValueError):
            ms.signal_weight(0.0)


class TestPowerLaw:
    """Tests for auto_fit_range and fit_log_acf."""

    def test_exact_power_law(self):
        lags = np.arange(1, 80, dtype=float)
        acf = np.concatenate([[1.0], 0.9 * lags ** -0.4])

        fit = fit_log_acf(acf, 10)

        assert isinstance(fit, LogACFFit)
        assert fit.gamma == pytest.approx(0.4, abs=1e-10)
        assert fit.intercept == pytest.approx(np.log(0.9), abs=1e-10)
        assert fit.r_squared == pytest.approx(1.0, abs=1e-10)
        assert (fit.start_lag, fit.end_lag) == (1, 79)

        gamma, intercept, r2, model = fit
        assert model.coefficients[1] == pytest.approx(-gamma)

    def test_uses_leading_positive_run(self):
        acf = np.array([1.0, -0.1, 0.5, 0.4, 0.3, 0.25, np.nan, 0.2, 0.1])
        fit = fit_log_acf(acf, 3)
        assert (fit.start_lag, fit.end_lag) == (2, 5)
        assert fit.regression.nobs == 4

    def test_ar1_acf(self, ar1_segments):
        acf = MultiSegments(ar1_segments).autocorr_segments(50)
        fit = fit_log_acf(acf, 5)
        assert fit.gamma > 0
        assert fit.start_lag == 1

    def test_errors(self):
        with pytest.raises(InvalidValueError):
            fit_log_acf([1.0, 0.5], 1)
        with pytest.raises(InvalidValueError):
            fit_log_acf([1.0, -0.2, -0.1, 0.0], 1)
        with pytest.raises(InvalidValueError):
            fit_log_acf([1.0, 0.5, 0.4, -0.1, 0.3], 3)
        with pytest.raises(EmptyValueError):
            fit_log_acf([], 3)

    def test_fit_range_central_window(self):
        acf = np.concatenate([[1.0, 0.9], np.linspace(0.8, 0.01, 98)])
        start, end = auto_fit_range(acf)
        positive = np.arange(2, 100)
        assert start == positive[int(0.2 * len(positive))]
        assert end == positive[int(0.8 * len(positive))]

    def test_fit_range_fallback(self):
        acf = np.concatenate([[1.0], 0.5 ** np.arange(1, 10), -np.ones(40)])
        assert auto_fit_range(acf) == (2, int(0.3 * len(acf)))

    def test_fit_range_skips_nan_and_negative(self):
        acf = np.full(100, 0.2)
        acf[0] = 1.0
        acf[10:30] = np.nan
        acf[50:60] = -0.05
        start, end = auto_fit_range(acf)
        positive = np.array([k for k in range(2, 100) if k < 10 or 30 <= k < 50 or k >= 60])
        assert start == positive[int(0.2 * len(positive))]
        assert end == positive[int(0.8 * len(positive))]
