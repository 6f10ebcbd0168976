# tsreg/models/time_series/power_law.py
"""
Power-law decay of the autocorrelation function.

A long-memory ACF decays like ``rho_k ~ C * k^(-gamma)``, which is a straight
line in log-log coordinates. fit_log_acf estimates gamma by OLS of
``log(ACF[k])`` on ``log(k)`` over the leading run of positive lags, and
auto_fit_range proposes a lag window that avoids both the short-lag
transient and the noisy tail.

Functions:
    auto_fit_range: Central 60% of the positive lags (k >= 2)
    fit_log_acf: Log-log OLS fit of the ACF decay exponent
"""

import logging
from dataclasses import dataclass
from typing import Iterator

import numpy as np

from tsreg.core.exceptions import TsregError, raise_invalid_error
from tsreg.core.results import ModelResult, RegressionResult
from tsreg.core.types import LagRange, VectorLike
from tsreg.core.validation import validate_positive_int, validate_vector
from tsreg.models.cross_section.ols import ols

# Set up module-level logger
logger = logging.getLogger("tsreg.models.time_series.power_law")

# Below this many positive lags the percentile window is not meaningful
_MIN_POSITIVE_LAGS = 20


@dataclass(frozen=True, eq=False)
class LogACFFit(ModelResult):
    """
    Result of a log-log fit of the ACF.

    Unpacks as ``gamma, intercept, r_squared, regression``.

    Attributes:
        gamma: Decay exponent, minus the log-log slope
        intercept: Intercept of the log-log regression (log C)
        r_squared: R-squared of the log-log regression
        regression: Full OLS result on ``[1, log k]``
        start_lag: First lag used
        end_lag: Last lag used (inclusive)
    """

    gamma: float
    intercept: float
    r_squared: float
    regression: RegressionResult
    start_lag: int
    end_lag: int

    def __iter__(self) -> Iterator:
        return iter((self.gamma, self.intercept, self.r_squared, self.regression))

    def summary(self) -> str:
        lines = [
            "Log-log ACF fit",
            "===============",
            f"Lags: {self.start_lag} .. {self.end_lag}",
            f"gamma: {self.gamma:.6f}",
            f"Intercept: {self.intercept:.6f}",
            f"R-squared: {self.r_squared:.6f}",
        ]
        return "\n".join(lines) + "\n"


def auto_fit_range(acf: VectorLike) -> LagRange:
    """
    Lag window for the power-law fit.

    Collects the lags ``k >= 2`` with a positive ACF and drops the first and
    last 20% of them. The end is moved to at least ``start + 5`` and at most
    ``len(acf) - 1``. With fewer than 20 positive lags the window falls back
    to ``(2, int(0.3 * len(acf)))``.

    Args:
        acf: Autocorrelation values indexed by lag

    Returns:
        Tuple[int, int]: (start, end) lags

    Raises:
        EmptyValueError: If acf is empty
    """
    acf = validate_vector(acf, "acf")
    n = len(acf)

    with np.errstate(invalid="ignore"):
        positive = np.flatnonzero(acf[2:] > 0) + 2

    if len(positive) < _MIN_POSITIVE_LAGS:
        return 2, int(0.3 * n)

    start = int(positive[int(0.2 * len(positive))])
    end = int(positive[int(0.8 * len(positive))])
    if end <= start + 5:
        end = start + 5
    if end >= n:
        end = n - 1
    return start, end


def fit_log_acf(acf: VectorLike, min_points: int) -> LogACFFit:
    """
    Estimate the ACF decay exponent by a log-log regression.

    The fit uses the run of consecutive positive, non-NaN ACF values that
    starts at the first such lag ``k >= 1`` and regresses ``log(ACF[k])`` on
    ``[1, log(k)]``. ``gamma`` is minus the slope.

    Args:
        acf: Autocorrelation values indexed by lag (lag 0 is ignored)
        min_points: Smallest acceptable number of lags in the run

    Returns:
        LogACFFit: gamma, intercept, R-squared and the OLS result

    Raises:
        EmptyValueError: If acf is empty
        InvalidValueError: If acf has fewer than 3 values, no lag is positive,
            the positive run is shorter than min_points, or the regression
            cannot be fitted

    Examples:
        >>> import numpy as np
        >>> from tsreg.models.time_series.power_law import fit_log_acf
        >>> lags = np.arange(1, 50)
        >>> acf = np.concatenate([[1.0], 0.8 * lags ** -0.5])
        >>> round(fit_log_acf(acf, 10).gamma, 6)
        0.5
    """
    acf = validate_vector(acf, "acf")
    min_points = validate_positive_int(min_points, "min_points")
    n = len(acf)
    if n < 3:
        raise_invalid_error(
            f"need at least 3 ACF values, got {n}",
            param_name="acf",
            param_value=n,
            constraint="len(acf) >= 3"
        )

    with np.errstate(invalid="ignore"):
        usable = acf > 0
    usable[0] = False

    candidates = np.flatnonzero(usable)
    if len(candidates) == 0:
        raise_invalid_error(
            "ACF has no positive value at lag >= 1",
            param_name="acf"
        )
    start = int(candidates[0])
    end = start
    while end + 1 < n and usable[end + 1]:
        end += 1

    n_points = end - start + 1
    if n_points < min_points:
        raise_invalid_error(
            f"positive ACF run has {n_points} lags, fewer than min_points={min_points}",
            param_name="min_points",
            param_value=min_points,
            context={"start_lag": start, "end_lag": end}
        )

    lags = np.arange(start, end + 1, dtype=np.float64)
    try:
        reg = ols(np.log(lags), np.log(acf[start:end + 1]), with_intercept=True)
    except TsregError as e:
        raise_invalid_error(
            f"log-log regression failed: {e.message}",
            param_name="acf",
            context={"start_lag": start, "end_lag": end}
        )

    logger.debug(f"Log-ACF fit over lags {start}..{end}: slope={reg.coefficients[1]:.6g}")

    return LogACFFit(
        gamma=-float(reg.coefficients[1]),
        intercept=float(reg.coefficients[0]),
        r_squared=float(reg.r_squared),
        regression=reg,
        start_lag=start,
        end_lag=end,
    )
