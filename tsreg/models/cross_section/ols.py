# tsreg/models/cross_section/ols.py
"""
Ordinary Least Squares (OLS) Regression Module

Multiple linear regression through the normal equations with classical
Gaussian inference. ``X'X`` is inverted directly when possible; when it is
singular the SVD pseudo-inverse is used instead, a NumericWarning is issued
and the fit carries on.

The fit reports coefficients, standard errors ``sqrt(sigma^2 * diag((X'X)^-1))``,
t-statistics, two-sided Student-t p-values with ``n - k`` degrees of freedom,
residuals, ``sigma^2 = RSS / (n - k)``, R-squared, adjusted R-squared and the
Gaussian AIC / BIC.

Functions:
    ols: Fit from a design matrix and response, optionally adding an intercept
    ols_mat: Fit from a design matrix that already holds every regressor
    simple_regression: Closed-form slope and intercept of a univariate fit
"""

import logging
from typing import Tuple

import numpy as np
from scipy import stats

from tsreg.core.config import get_numerical_config
from tsreg.core.exceptions import raise_dimension_error, raise_invalid_error
from tsreg.core.results import RegressionResult
from tsreg.core.types import MatrixLike, Vector, VectorLike
from tsreg.core.validation import validate_matrix, validate_vector
from tsreg.utils.matrix_ops import add_constant, invert_gram

# Set up module-level logger
logger = logging.getLogger("tsreg.models.cross_section.ols")


def _gaussian_information(rss: float, n: int, k: int) -> Tuple[float, float, float]:
    """Gaussian log-likelihood, AIC and BIC of a fit with residual sum of squares ``rss``."""
    with np.errstate(divide="ignore"):
        log_lik = -0.5 * n * (1.0 + np.log(2.0 * np.pi * rss / n))
    aic = -2.0 * log_lik + 2.0 * k
    bic = -2.0 * log_lik + k * np.log(n)
    return float(log_lik), float(aic), float(bic)


def ols_mat(X: MatrixLike, y: VectorLike) -> RegressionResult:
    """
    Fit ``y = X b + e`` by least squares.

    The design is used as given; add an intercept column beforehand (or call
    ``ols(X, y, with_intercept=True)``) if one is wanted.

    Args:
        X: Design matrix (n x k)
        y: Response vector (n,)

    Returns:
        RegressionResult: Coefficients, inference and fit statistics

    Raises:
        EmptyValueError: If X or y is empty
        InvalidValueError: If the number of rows of X differs from len(y),
            if n <= k, or if the pseudo-inverse fallback fails

    Examples:
        >>> import numpy as np
        >>> from tsreg.models.cross_section.ols import ols_mat
        >>> X = np.array([[1.0, 1.0], [1.0, 2.0], [1.0, 3.0], [1.0, 4.0]])
        >>> res = ols_mat(X, [2.0, 4.0, 6.0, 8.0])
        >>> np.round(res.coefficients, 10)
        array([0., 2.])
    """
    X = validate_matrix(X, "X")
    y = validate_vector(y, "y")
    n, k = X.shape

    if n != len(y):
        raise_dimension_error(
            f"X has {n} rows but y has {len(y)} elements",
            array_name="y",
            expected_shape=(n,),
            actual_shape=y.shape
        )

    df = n - k
    if df <= 0:
        raise_invalid_error(
            f"degrees of freedom n - k = {df} must be positive",
            param_name="n - k",
            param_value=df,
            constraint="number of observations must exceed number of parameters"
        )

    cfg = get_numerical_config()

    G = X.T @ X
    G_inv, used_pinv = invert_gram(G, cfg.pinv_tolerance)

    beta = G_inv @ (X.T @ y)
    resid = y - X @ beta
    rss = float(resid @ resid)
    sigma2 = rss / df

    with np.errstate(divide="ignore", invalid="ignore"):
        std_errors = np.sqrt(np.maximum(sigma2 * np.diag(G_inv), 0.0))
        t_stats = beta / std_errors
        p_values = 2.0 * stats.t.sf(np.abs(t_stats), df)

        tss = float(np.sum((y - y.mean()) ** 2))
        r_squared = 1.0 - rss / tss
        adj_r_squared = 1.0 - (1.0 - r_squared) * (n - 1) / df

    log_lik, aic, bic = _gaussian_information(rss, n, k)

    logger.debug(f"OLS fit: n={n}, k={k}, rss={rss:.6g}, pseudo_inverse={used_pinv}")

    return RegressionResult(
        coefficients=beta,
        std_errors=std_errors,
        t_stats=t_stats,
        p_values=p_values,
        residuals=resid,
        sigma2=sigma2,
        r_squared=r_squared,
        adj_r_squared=adj_r_squared,
        aic=aic,
        bic=bic,
        nobs=n,
        nparams=k,
        log_likelihood=log_lik,
        used_pseudo_inverse=used_pinv,
        model_name="OLS",
    )


def ols(X: MatrixLike, y: VectorLike, with_intercept: bool = False) -> RegressionResult:
    """
    Fit a multiple linear regression, optionally prepending an intercept column.

    Args:
        X: Regressors (n x k); a 1-D input is a single regressor
        y: Response vector (n,)
        with_intercept: Prepend a column of ones to X

    Returns:
        RegressionResult: Coefficients (intercept first when added), inference
        and fit statistics

    Raises:
        EmptyValueError: If X or y is empty
        InvalidValueError: On a length mismatch, when n <= k, or when the
            pseudo-inverse fallback fails
    """
    X = validate_matrix(X, "X")
    y = validate_vector(y, "y")
    if with_intercept:
        X = add_constant(X)
    return ols_mat(X, y)


def simple_regression(x: VectorLike, y: VectorLike) -> Tuple[float, float]:
    """
    Slope and intercept of ``y = a + b x`` in closed form.

    Pairs in which either value is NaN are dropped first. A length mismatch
    is not an error here; it yields ``(nan, nan)``.

    Args:
        x: Regressor
        y: Response

    Returns:
        Tuple[float, float]: (slope, intercept)
    """
    x = np.asarray(x, dtype=np.float64).ravel()
    y = np.asarray(y, dtype=np.float64).ravel()
    if len(x) != len(y):
        return np.nan, np.nan

    mask = ~(np.isnan(x) | np.isnan(y))
    x, y = x[mask], y[mask]
    n = len(x)
    if n == 0:
        return np.nan, np.nan

    x_bar, y_bar = x.mean(), y.mean()
    with np.errstate(divide="ignore", invalid="ignore"):
        slope = (x @ y - n * x_bar * y_bar) / (x @ x - n * x_bar ** 2)
    intercept = y_bar - slope * x_bar
    return float(slope), float(intercept)
