# tsreg/models/time_series/diagnostics.py
"""
Residual Diagnostics Module

Checks applied to the residuals of a fitted ADF regression (or any other
residual series):

- Ljung-Box portmanteau test for autocorrelation up to a given lag
- AR order detection by AIC over autoregressions of increasing order

Functions:
    ljung_box_test: Ljung-Box Q statistic, p-value and decision
    detect_ar: Best AR(p) order for a residual series
"""

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

import numpy as np
from scipy import stats

from tsreg.core.exceptions import TsregError, raise_invalid_error
from tsreg.core.results import ModelResult, array_field
from tsreg.core.types import VectorLike
from tsreg.core.validation import validate_positive_int, validate_vector
from tsreg.models.cross_section.ols import _gaussian_information, ols_mat

# Set up module-level logger
logger = logging.getLogger("tsreg.models.time_series.diagnostics")


@dataclass(frozen=True, eq=False)
class LjungBoxResult(ModelResult):
    """
    Result of the Ljung-Box test.

    Unpacks as ``reject, q_stat, p_value``.

    Attributes:
        reject: Whether the null of no autocorrelation is rejected at ``alpha``
        q_stat: Ljung-Box Q statistic
        p_value: Upper-tail chi-squared probability with ``lags`` degrees of freedom
        lags: Number of lags in the statistic
        alpha: Significance level of the decision
        autocorrelations: Sample autocorrelations for lags 1 .. lags
    """

    reject: bool
    q_stat: float
    p_value: float
    lags: int
    alpha: float
    autocorrelations: np.ndarray = array_field()

    def __post_init__(self) -> None:
        self._freeze_arrays()

    def __iter__(self) -> Iterator:
        return iter((self.reject, self.q_stat, self.p_value))

    def summary(self) -> str:
        header = "Ljung-Box Test Results\n"
        header += "=" * (len(header) - 1) + "\n\n"
        body = f"Lags: {self.lags}\n"
        body += f"Q statistic: {self.q_stat:.6f}\n"
        body += f"p-value: {self.p_value:.6f}\n\n"
        if self.reject:
            body += (f"Reject the null hypothesis at the {self.alpha:g} level: "
                     "the residuals are autocorrelated.\n")
        else:
            body += (f"Cannot reject the null hypothesis at the {self.alpha:g} level: "
                     "no evidence of autocorrelation.\n")
        return header + body


@dataclass(frozen=True, eq=False)
class ARFit(ModelResult):
    """
    One autoregression fitted by detect_ar.

    Attributes:
        order: AR order p
        coefficients: ``[phi_1 .. phi_p, c]``; for p = 0 just the mean
        aic: Akaike information criterion
        bic: Bayesian information criterion
        p_values: p-values of the coefficients (None for p = 0)
    """

    order: int
    coefficients: np.ndarray = array_field()
    aic: float = 0.0
    bic: float = 0.0
    p_values: Optional[np.ndarray] = array_field(default=None)

    def __post_init__(self) -> None:
        self._freeze_arrays()

    def summary(self) -> str:
        coefs = ", ".join(f"{c:.6f}" for c in self.coefficients)
        return f"AR({self.order}): AIC={self.aic:.6f}, BIC={self.bic:.6f}, coefficients=[{coefs}]"


def ljung_box_test(resid: VectorLike, lags: int, alpha: float = 0.05) -> LjungBoxResult:
    """
    Ljung-Box test for autocorrelation in a residual series.

    ``Q = n (n + 2) sum_{k=1..L} rho_k^2 / (n - k)`` where ``rho_k`` is the
    lag-k sample autocorrelation around the mean. Under the null of white
    noise Q is chi-squared with L degrees of freedom.

    Args:
        resid: Residual series of length n
        lags: Number of lags L, 0 < L < n
        alpha: Significance level of the decision

    Returns:
        LjungBoxResult: Decision, statistic and p-value

    Raises:
        EmptyValueError: If resid is empty
        InvalidValueError: If lags is not positive, n <= lags or resid is constant

    Examples:
        >>> import numpy as np
        >>> from tsreg.models.time_series.diagnostics import ljung_box_test
        >>> rng = np.random.default_rng(1)
        >>> reject, q, p = ljung_box_test(rng.standard_normal(500), 10, 0.01)
    """
    r = validate_vector(resid, "resid")
    lags = validate_positive_int(lags, "lags")
    n = len(r)
    if n <= lags:
        raise_invalid_error(
            f"sample of {n} observations is too small for {lags} lags",
            param_name="lags",
            param_value=lags,
            constraint=f"< {n}"
        )

    u = r - r.mean()
    denom = float(u @ u)
    if denom == 0.0:
        raise_invalid_error(
            "residual series has zero variance",
            param_name="resid",
            constraint="variance > 0"
        )

    rho = np.array([u[k:] @ u[:-k] for k in range(1, lags + 1)]) / denom
    k = np.arange(1, lags + 1)
    q_stat = float(n * (n + 2) * np.sum(rho ** 2 / (n - k)))
    p_value = float(stats.chi2.sf(q_stat, lags))

    return LjungBoxResult(
        reject=bool(p_value < alpha),
        q_stat=q_stat,
        p_value=p_value,
        lags=lags,
        alpha=alpha,
        autocorrelations=rho,
    )


def detect_ar(resid: VectorLike, p_max: int) -> Tuple[int, List[ARFit]]:
    """
    Choose the autoregressive order of a residual series by AIC.

    The white-noise baseline AR(0) is the mean alone, scored with the same
    Gaussian likelihood as the regressions so the criteria are comparable.
    For p = 1 .. p_max, ``r_t`` is regressed by OLS on
    ``[r_{t-1} .. r_{t-p}, 1]``; orders whose regression cannot be fitted are
    left out.

    Args:
        resid: Residual series
        p_max: Largest order tried

    Returns:
        Tuple[int, List[ARFit]]: The order with the lowest AIC and every
        fitted model, AR(0) first

    Raises:
        EmptyValueError: If resid is empty
        InvalidValueError: If p_max is negative
    """
    r = validate_vector(resid, "resid")
    p_max = validate_positive_int(p_max, "p_max", allow_zero=True)
    n = len(r)

    mean = float(r.mean())
    ss = float(np.sum((r - mean) ** 2))
    _, aic0, bic0 = _gaussian_information(ss, n, 1)

    fits = [ARFit(order=0, coefficients=[mean], aic=float(aic0), bic=float(bic0))]
    best_p, best_aic = 0, aic0

    for p in range(1, p_max + 1):
        T = n - p
        if T <= 0:
            break
        X = np.column_stack([r[p - j - 1:n - j - 1] for j in range(p)] + [np.ones(T)])
        try:
            model = ols_mat(X, r[p:])
        except TsregError as e:
            logger.debug(f"AR({p}) skipped: {e.message}")
            continue

        fits.append(ARFit(order=p, coefficients=model.coefficients,
                          aic=model.aic, bic=model.bic, p_values=model.p_values))
        if model.aic < best_aic:
            best_p, best_aic = p, model.aic

    logger.debug(f"detect_ar: best order {best_p} of {p_max}")
    return best_p, fits
