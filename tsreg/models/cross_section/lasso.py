# tsreg/models/cross_section/lasso.py
"""
L1-Penalized (LASSO) Regression Module

Linear and logistic LASSO with an unpenalized intercept. The penalty follows
the sample-normalized convention:

- linear:   (1/2n) ||y - X b||^2 + alpha_eff ||b||_1
- logistic: (1/n) sum_i [log(1 + e^{x_i b}) - y_i x_i b] + alpha_eff ||b||_1

where ``alpha_eff = alpha / n``. The intercept (column 0 when requested) is
never penalized and never standardized; every other column is scaled by its
population standard deviation (and centred when there is an intercept) before
fitting and the coefficients are mapped back to the original scale afterwards.

The linear problem is solved by coordinate descent, the logistic one by
proximal gradient descent (ISTA) with a backtracking step. Both inner loops
are numba kernels in ``_numba_core``.

Classical standard errors do not exist for these estimators, so the
``std_errors``, ``t_stats`` and ``p_values`` of the result are zeros.
"""

import logging

import numpy as np

from tsreg.core.config import get_numerical_config
from tsreg.core.exceptions import (
    raise_dimension_error, raise_invalid_error, warn_convergence
)
from tsreg.core.results import RegressionResult
from tsreg.core.types import MatrixLike, VectorLike
from tsreg.core.validation import validate_matrix, validate_vector
from tsreg.models.cross_section._numba_core import _lasso_cd_core, _lasso_ista_core
from tsreg.models.cross_section.ols import _gaussian_information
from tsreg.utils.matrix_ops import (
    add_constant, destandardize_coefficients, standardize_columns
)

# Set up module-level logger
logger = logging.getLogger("tsreg.models.cross_section.lasso")


def _sigmoid(s: np.ndarray, saturation: float) -> np.ndarray:
    p = 1.0 / (1.0 + np.exp(-np.clip(s, -saturation, saturation)))
    p[s > saturation] = 1.0
    p[s < -saturation] = 0.0
    return p


def lasso(X: MatrixLike,
          y: VectorLike,
          alpha: float,
          use_logistic: bool = False,
          with_intercept: bool = True) -> RegressionResult:
    """
    Fit a linear or logistic LASSO regression.

    Args:
        X: Regressors (n x k), without an intercept column
        y: Response (n,); 0/1 labels when ``use_logistic`` is set
        alpha: Penalty on the un-normalized scale, divided by n internally
        use_logistic: Fit the logistic loss instead of squared error
        with_intercept: Prepend an unpenalized intercept

    Returns:
        RegressionResult: Coefficients on the original scale (intercept first
        when requested), residuals and fit statistics. For the linear model
        ``sigma2``, R-squared (when the response varies) and the Gaussian
        AIC / BIC (when n > k) are reported. For the logistic model AIC / BIC
        come from the Bernoulli log-likelihood and ``r_squared`` is McFadden's
        pseudo R-squared.

    Raises:
        EmptyValueError: If X or y is empty
        InvalidValueError: If the row counts differ or alpha is negative or
            not finite

    Examples:
        >>> import numpy as np
        >>> from tsreg.models.cross_section.lasso import lasso
        >>> rng = np.random.default_rng(0)
        >>> X = rng.standard_normal((200, 3))
        >>> y = X @ np.array([1.5, 0.0, -1.0]) + 0.01 * rng.standard_normal(200)
        >>> res = lasso(X, y, alpha=0.1)
        >>> res.coefficients.shape
        (4,)
    """
    X = validate_matrix(X, "X")
    y = validate_vector(y, "y")
    n = X.shape[0]

    if len(y) != n:
        raise_dimension_error(
            f"y has {len(y)} elements but X has {n} rows",
            array_name="y",
            expected_shape=(n,),
            actual_shape=y.shape
        )
    if not np.isfinite(alpha) or alpha < 0:
        raise_invalid_error(
            "alpha must be a finite non-negative number",
            param_name="alpha",
            param_value=alpha,
            constraint=">= 0"
        )

    cfg = get_numerical_config()
    alpha_eff = float(alpha) / n

    X_eff = add_constant(X) if with_intercept else X.copy()
    X_std = np.ascontiguousarray(X_eff.copy())
    means, stds = standardize_columns(X_std, with_intercept)

    if use_logistic:
        beta_std, n_iter, max_change = _lasso_ista_core(
            X_std, y, alpha_eff, with_intercept, cfg.lasso_tol, cfg.lasso_max_iter,
            cfg.logistic_saturation, cfg.backtracking_steps
        )
    else:
        beta_std, n_iter, max_change = _lasso_cd_core(
            X_std, y, alpha_eff, with_intercept, cfg.lasso_tol, cfg.lasso_max_iter,
            cfg.gram_floor
        )

    solver = "ISTA" if use_logistic else "coordinate descent"
    if max_change >= cfg.lasso_tol:
        logger.debug(f"LASSO {solver} stopped after {n_iter} iterations, "
                     f"max change {max_change:.3g}")
        warn_convergence(
            f"LASSO {solver} did not converge",
            iterations=n_iter,
            tolerance=cfg.lasso_tol,
            max_change=float(max_change)
        )
    else:
        logger.debug(f"LASSO {solver} converged in {n_iter} iterations")

    beta = destandardize_coefficients(beta_std, means, stds, with_intercept)
    k = len(beta)
    zeros = np.zeros(k)
    linear_predictor = X_eff @ beta

    if use_logistic:
        return _logistic_summary(beta, zeros, y, linear_predictor, n, k, cfg)

    resid = y - linear_predictor
    rss = float(resid @ resid)
    tss = float(np.sum((y - y.mean()) ** 2))

    sigma2 = rss / (n - k) if n > k else np.nan
    r_squared = 1.0 - rss / tss if tss > 0 else 0.0
    log_lik = aic = bic = 0.0
    if n > k:
        log_lik, aic, bic = _gaussian_information(rss, n, k)

    return RegressionResult(
        coefficients=beta,
        std_errors=zeros,
        t_stats=zeros,
        p_values=zeros,
        residuals=resid,
        sigma2=sigma2,
        r_squared=r_squared,
        adj_r_squared=0.0,
        aic=aic,
        bic=bic,
        nobs=n,
        nparams=k,
        log_likelihood=log_lik,
        model_name="LASSO",
    )


def _logistic_summary(beta, zeros, y, linear_predictor, n, k, cfg) -> RegressionResult:
    eps = cfg.probability_clip
    prob = _sigmoid(linear_predictor, cfg.logistic_saturation)
    p = np.clip(prob, eps, 1.0 - eps)
    log_lik = float(np.sum(y * np.log(p) + (1.0 - y) * np.log(1.0 - p)))

    y_bar = float(y.mean())
    ll_null = n * (y_bar * np.log(y_bar + eps) + (1.0 - y_bar) * np.log(1.0 - y_bar + eps))

    aic = -2.0 * log_lik + 2.0 * k
    bic = -2.0 * log_lik + k * np.log(n)
    r_squared = 1.0 - log_lik / ll_null if ll_null != 0 else 0.0

    return RegressionResult(
        coefficients=beta,
        std_errors=zeros,
        t_stats=zeros,
        p_values=zeros,
        residuals=y - prob,
        sigma2=0.0,
        r_squared=r_squared,
        adj_r_squared=0.0,
        aic=aic,
        bic=bic,
        nobs=n,
        nparams=k,
        log_likelihood=log_lik,
        model_name="Logistic LASSO",
    )
