# tests/test_ols.py
"""
Tests for OLS regression.

Covers the closed-form fit and its inference against statsmodels, the
pseudo-inverse fallback for singular designs, the input checks and the
univariate closed-form regression.
"""

import numpy as np
import pandas as pd
import pytest
import statsmodels.api as sm
from hypothesis import given, settings, strategies as st

from tsreg.core.exceptions import (
    DimensionError, EmptyValueError, ErrorCode, InvalidValueError, NumericError,
    NumericWarning, TsregError
)
from tsreg.core.results import RegressionResult
from tsreg.models.cross_section.ols import ols, ols_mat, simple_regression


class TestOLS:
    """Tests for ols and ols_mat."""

    def test_exact_fit(self):
        X = np.array([[1.0, 1.0], [1.0, 2.0], [1.0, 3.0], [1.0, 4.0]])
        y = np.array([2.0, 4.0, 6.0, 8.0])

        res = ols_mat(X, y)

        np.testing.assert_allclose(res.coefficients, [0.0, 2.0], atol=1e-10)
        assert res.r_squared == pytest.approx(1.0, abs=1e-12)
        np.testing.assert_allclose(res.std_errors, 0.0, atol=1e-6)
        np.testing.assert_allclose(res.residuals, 0.0, atol=1e-10)
        assert not res.used_pseudo_inverse
        assert isinstance(res, RegressionResult)

    def test_normal_equations_hold(self, regression_data):
        X, y, _ = regression_data
        res = ols(X, y, with_intercept=True)

        Xc = np.column_stack([np.ones(len(y)), X])
        np.testing.assert_allclose(Xc.T @ res.residuals, 0.0, atol=1e-8)

    def test_recovers_coefficients(self, regression_data):
        X, y, beta = regression_data
        res = ols(X, y, with_intercept=True)
        np.testing.assert_allclose(res.coefficients, beta, atol=0.15)

    def test_matches_statsmodels(self, regression_data):
        X, y, _ = regression_data
        res = ols(X, y, with_intercept=True)
        ref = sm.OLS(y, sm.add_constant(X)).fit()

        np.testing.assert_allclose(res.coefficients, ref.params, rtol=1e-10)
        np.testing.assert_allclose(res.std_errors, ref.bse, rtol=1e-8)
        np.testing.assert_allclose(res.t_stats, ref.tvalues, rtol=1e-8)
        np.testing.assert_allclose(res.p_values, ref.pvalues, rtol=1e-6, atol=1e-300)
        assert res.r_squared == pytest.approx(ref.rsquared, rel=1e-10)
        assert res.adj_r_squared == pytest.approx(ref.rsquared_adj, rel=1e-10)
        assert res.sigma2 == pytest.approx(ref.scale, rel=1e-10)
        assert res.log_likelihood == pytest.approx(ref.llf, rel=1e-10)
        assert res.aic == pytest.approx(ref.aic, rel=1e-10)
        assert res.bic == pytest.approx(ref.bic, rel=1e-10)

    def test_statistics_ranges(self, regression_data):
        X, y, _ = regression_data
        res = ols(X, y, with_intercept=True)

        assert np.all(res.std_errors >= 0)
        assert np.all((res.p_values >= 0) & (res.p_values <= 1))
        assert 0.0 <= res.r_squared <= 1.0
        assert res.adj_r_squared <= res.r_squared
        assert res.nobs == 200
        assert res.nparams == 4

    def test_pseudo_inverse_fallback(self):
        x = np.arange(1.0, 6.0)
        X = np.column_stack([np.ones(5), x, x])
        y = x.copy()

        with pytest.warns(NumericWarning):
            res = ols_mat(X, y)

        assert res.used_pseudo_inverse
        assert np.all(np.isfinite(res.coefficients))
        np.testing.assert_allclose(res.residuals, 0.0, atol=1e-10)
        # minimum-norm solution splits the weight between the twin columns
        assert res.coefficients[1] == pytest.approx(res.coefficients[2], abs=1e-8)

    def test_pandas_input(self, regression_data):
        X, y, _ = regression_data
        df = pd.DataFrame(X, columns=["a", "b", "c"])
        res_pd = ols(df, pd.Series(y), with_intercept=True)
        res_np = ols(X, y, with_intercept=True)
        np.testing.assert_allclose(res_pd.coefficients, res_np.coefficients)

    def test_single_regressor_vector(self, rng):
        x = rng.standard_normal(50)
        y = 2.0 * x + 1.0
        res = ols(x, y, with_intercept=True)
        np.testing.assert_allclose(res.coefficients, [1.0, 2.0], atol=1e-10)

    def test_empty_inputs(self):
        with pytest.raises(EmptyValueError) as exc:
            ols_mat(np.empty((0, 2)), [])
        assert exc.value.code is ErrorCode.EMPTY_VALUE

        with pytest.raises(EmptyValueError):
            ols_mat(np.ones((3, 1)), [])

    def test_length_mismatch(self):
        with pytest.raises(DimensionError) as exc:
            ols_mat(np.ones((4, 1)), [1.0, 2.0, 3.0])
        assert exc.value.code is ErrorCode.INVALID_VALUE

    def test_not_enough_observations(self):
        X = np.array([[1.0, 1.0], [1.0, 2.0]])
        with pytest.raises(InvalidValueError) as exc:
            ols_mat(X, [1.0, 2.0])
        assert exc.value.code is ErrorCode.INVALID_VALUE

    @pytest.mark.parametrize("bad", [np.nan, np.inf])
    def test_non_finite_design_is_invalid(self, regression_data, bad):
        X, y, _ = regression_data
        X = X.copy()
        X[3, 1] = bad

        with pytest.warns(NumericWarning), pytest.raises(TsregError) as exc:
            ols_mat(X, y)

        assert exc.value.code is ErrorCode.INVALID_VALUE
        assert isinstance(exc.value, NumericError)
        assert "SVD failed" in exc.value.message

    def test_result_is_immutable(self, regression_data):
        X, y, _ = regression_data
        res = ols(X, y)
        with pytest.raises(ValueError):
            res.coefficients[0] = 0.0
        with pytest.raises(AttributeError):
            res.sigma2 = 1.0

    def test_result_exports(self, regression_data):
        X, y, _ = regression_data
        res = ols(X, y, with_intercept=True)

        d = res.to_dict()
        assert d["nobs"] == 200
        assert len(d["coefficients"]) == 4

        frame = res.to_dataframe(["const", "a", "b", "c"])
        assert list(frame.index) == ["const", "a", "b", "c"]
        np.testing.assert_allclose(frame["Coefficient"].to_numpy(), res.coefficients)

        text = res.summary(["const", "a", "b", "c"])
        assert "Model: OLS" in text
        assert "const" in text

        np.testing.assert_allclose(res.predict(np.column_stack([np.ones(200), X])),
                                   y - res.residuals)

    @given(
        n=st.integers(min_value=10, max_value=80),
        k=st.integers(min_value=1, max_value=4),
        seed=st.integers(min_value=0, max_value=10_000),
    )
    @settings(max_examples=25, deadline=None)
    def test_orthogonality_property(self, n, k, seed):
        rng = np.random.default_rng(seed)
        X = rng.standard_normal((n, k))
        y = rng.standard_normal(n)

        res = ols(X, y, with_intercept=True)

        Xc = np.column_stack([np.ones(n), X])
        np.testing.assert_allclose(Xc.T @ res.residuals, 0.0, atol=1e-8)
        assert np.all(res.std_errors >= 0)
        assert np.all((res.p_values >= 0) & (res.p_values <= 1))
        assert 0.0 <= res.r_squared <= 1.0 + 1e-12
        assert res.adj_r_squared <= res.r_squared + 1e-12


class TestSimpleRegression:
    """Tests for the closed-form univariate fit."""

    def test_line(self):
        x = np.array([0.0, 1.0, 2.0, 3.0])
        slope, intercept = simple_regression(x, 3.0 * x - 1.0)
        assert slope == pytest.approx(3.0)
        assert intercept == pytest.approx(-1.0)

    def test_nan_pairs_dropped(self):
        x = np.array([0.0, 1.0, np.nan, 3.0, 4.0])
        y = np.array([1.0, 3.0, 5.0, np.nan, 9.0])
        slope, intercept = simple_regression(x, y)
        assert slope == pytest.approx(2.0)
        assert intercept == pytest.approx(1.0)

    def test_length_mismatch_gives_nan(self):
        slope, intercept = simple_regression([1.0, 2.0], [1.0])
        assert np.isnan(slope) and np.isnan(intercept)

    def test_matches_ols(self, rng):
        x = rng.standard_normal(100)
        y = 0.3 + 1.7 * x + rng.standard_normal(100)
        slope, intercept = simple_regression(x, y)
        res = ols(x, y, with_intercept=True)
        assert slope == pytest.approx(res.coefficients[1], rel=1e-10)
        assert intercept == pytest.approx(res.coefficients[0], rel=1e-10)
