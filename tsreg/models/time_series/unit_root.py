# tsreg/models/time_series/unit_root.py
"""
Augmented Dickey-Fuller Unit Root Test

The ADF regression for a (log-)price series y is

    dy_t = gamma * y_{t-1} + [c] + [tau * t] + sum_{i=1..L} phi_i * dy_{t-i} + e_t

with the deterministic terms chosen by the trend tag (``n``: none, ``c``:
constant, ``ct``: constant and linear trend). The test statistic is the
t-statistic of gamma. The left-tailed test (H0: unit root, H1: stationary)
rejects for large negative values; the right-tailed test looks for explosive
behaviour and rejects for large positive values.

Every candidate lag order 0 .. max_lag is fitted on the same sample, the rows
``t >= max_lag + 1``, so their information criteria are comparable. The order
is picked by AIC, BIC or the most negative t-statistic.

Critical values are the asymptotic Dickey-Fuller quantiles; the reported
p-value is the Student-t p-value of gamma from the regression, which is not
a Dickey-Fuller p-value and is given for reference only.

Classes:
    TrendType: Deterministic terms of the regression
    LagSelectionMethod: Criterion for the lag order
    Tail: Left (stationarity) or right (explosiveness) alternative
    ADFResult: Outcome of the test

Functions:
    adf_test: Run the ADF test with automatic lag selection
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple, Union

import numpy as np

from tsreg.core.exceptions import (
    TsregError, raise_invalid_error, raise_numeric_error
)
from tsreg.core.results import ModelResult, RegressionResult, array_field
from tsreg.core.types import Matrix, Vector, VectorLike
from tsreg.core.validation import validate_positive_int, validate_vector
from tsreg.models.cross_section.ols import ols_mat

# Set up module-level logger
logger = logging.getLogger("tsreg.models.time_series.unit_root")

# Candidates with fewer rows than this are not fitted
MIN_ADF_OBSERVATIONS = 10


class TrendType(str, Enum):
    """Deterministic terms of the ADF regression."""

    NONE = "n"
    """No constant, no trend."""

    CONSTANT = "c"
    """Constant only."""

    CONSTANT_TREND = "ct"
    """Constant and linear time trend."""

    @classmethod
    def from_string(cls, value: Union[str, "TrendType"]) -> "TrendType":
        """Convert a tag to a TrendType.

        Raises:
            InvalidValueError: If the tag is not ``n``, ``c`` or ``ct``
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise_invalid_error(
                f"Invalid trend type: {value!r}. Must be one of 'n', 'c' or 'ct'",
                param_name="trend",
                param_value=value
            )


class LagSelectionMethod(str, Enum):
    """Criterion used to choose the number of lagged differences."""

    AIC = "AIC"
    BIC = "BIC"
    T_STAT = "t-stat"

    @classmethod
    def from_string(cls, value: Union[str, "LagSelectionMethod"]) -> "LagSelectionMethod":
        """Convert a tag to a LagSelectionMethod (case-insensitive).

        Raises:
            InvalidValueError: If the tag is not ``AIC``, ``BIC`` or ``t-stat``
        """
        if isinstance(value, cls):
            return value
        lowered = str(value).lower()
        for member in cls:
            if member.value.lower() == lowered:
                return member
        raise_invalid_error(
            f"Invalid lag selection method: {value!r}. Must be one of 'AIC', 'BIC' or 't-stat'",
            param_name="lag_mode",
            param_value=value
        )


class Tail(str, Enum):
    """Side of the alternative hypothesis."""

    LEFT = "left"
    RIGHT = "right"

    @classmethod
    def from_string(cls, value: Union[str, "Tail"]) -> "Tail":
        """Convert a tag to a Tail; ``left_tail`` / ``right_tail`` are accepted.

        Raises:
            InvalidValueError: For any other tag
        """
        if isinstance(value, cls):
            return value
        lowered = str(value).lower()
        if lowered in ("left", "left_tail"):
            return cls.LEFT
        if lowered in ("right", "right_tail"):
            return cls.RIGHT
        raise_invalid_error(
            f"Invalid tail: {value!r}. Must be 'left' or 'right'",
            param_name="tail",
            param_value=value
        )


_LEFT_CRITICAL_VALUES: Dict[TrendType, Dict[str, float]] = {
    TrendType.NONE: {"1%": -2.58, "5%": -1.95, "10%": -1.62},
    TrendType.CONSTANT: {"1%": -3.43, "5%": -2.86, "10%": -2.57},
    TrendType.CONSTANT_TREND: {"1%": -3.96, "5%": -3.41, "10%": -3.13},
}


def critical_values(trend: Union[str, TrendType],
                    tail: Union[str, Tail] = Tail.LEFT) -> Dict[str, float]:
    """Asymptotic ADF critical values at 1%, 5% and 10% for a trend and tail."""
    trend = TrendType.from_string(trend)
    tail = Tail.from_string(tail)
    sign = 1.0 if tail is Tail.LEFT else -1.0
    return {level: sign * value for level, value in _LEFT_CRITICAL_VALUES[trend].items()}


@dataclass(frozen=True, eq=False)
class ADFResult(ModelResult):
    """
    Result of an Augmented Dickey-Fuller test.

    Attributes:
        gamma: Coefficient of y_{t-1}
        t_stat: ADF statistic (t-statistic of gamma)
        p_value: Student-t p-value of gamma from the regression
        used_lag: Selected number of lagged differences
        nobs: Rows of the regression
        aic: AIC of the selected regression
        bic: BIC of the selected regression
        method: Lag selection criterion
        trend: Deterministic terms
        critical_values: Critical values keyed by "1%", "5%", "10%"
        tail: Side of the alternative
        residuals: Residuals of the selected regression
        coefficients: Coefficients ``[gamma, (c), (tau), phi_1 .. phi_L]``
    """

    gamma: float
    t_stat: float
    p_value: float
    used_lag: int
    nobs: int
    aic: float
    bic: float
    method: LagSelectionMethod
    trend: TrendType
    critical_values: Dict[str, float]
    tail: Tail
    residuals: np.ndarray = array_field()
    coefficients: np.ndarray = array_field()

    def __post_init__(self) -> None:
        self._freeze_arrays()

    def get_estimate(self) -> Tuple[TrendType, float, float]:
        """
        Deterministic terms of the selected regression.

        Returns:
            Tuple[TrendType, float, float]: (trend, constant, trend slope);
            terms absent from the regression are 0
        """
        if self.trend is TrendType.CONSTANT and len(self.coefficients) >= 2:
            return self.trend, float(self.coefficients[1]), 0.0
        if self.trend is TrendType.CONSTANT_TREND and len(self.coefficients) >= 3:
            return self.trend, float(self.coefficients[1]), float(self.coefficients[2])
        return self.trend, 0.0, 0.0

    def rejects_null(self, level: str = "5%") -> bool:
        """
        Whether the statistic lies beyond the critical value at ``level``.

        Raises:
            InvalidValueError: If level is not "1%", "5%" or "10%"
        """
        if level not in self.critical_values:
            raise_invalid_error(
                f"Unknown significance level {level!r}",
                param_name="level",
                param_value=level,
                constraint="one of '1%', '5%', '10%'"
            )
        cv = self.critical_values[level]
        if self.tail is Tail.LEFT:
            return self.t_stat < cv
        return self.t_stat > cv

    def summary(self) -> str:
        """Generate a text summary of the test results.

        Returns:
            str: A formatted string containing the test results summary
        """
        header = "Augmented Dickey-Fuller Test Results\n"
        header += "=" * (len(header) - 1) + "\n\n"

        config = "Test Configuration:\n"
        config += f"  Trend specification: {self.trend.value}\n"
        config += f"  Tail: {self.tail.value}\n"
        config += f"  Lags: {self.used_lag} (selected using {self.method.value})\n"
        config += f"  Number of observations: {self.nobs}\n\n"

        results = "Test Results:\n"
        results += f"  gamma: {self.gamma:.6f}\n"
        results += f"  Test statistic: {self.t_stat:.6f}\n"
        results += f"  p-value (t): {self.p_value:.6f}\n"
        results += f"  AIC: {self.aic:.6f}    BIC: {self.bic:.6f}\n\n"

        cv = "Critical Values:\n"
        for level in ("1%", "5%", "10%"):
            cv += f"  {level}: {self.critical_values[level]:.2f}\n"
        cv += "\n"

        conclusion = "Conclusion:\n"
        alternative = "stationary" if self.tail is Tail.LEFT else "explosive"
        for level in ("1%", "5%", "10%"):
            if self.rejects_null(level):
                conclusion += f"  Reject the unit root at the {level} level; "
                conclusion += f"the series appears {alternative}.\n"
                break
        else:
            conclusion += "  Cannot reject the unit root at the 10% level.\n"

        return header + config + results + cv + conclusion


def _adf_design(y: Vector, lag: int, max_lag: int, trend: TrendType) -> Tuple[Matrix, Vector]:
    """Design ``[y_{t-1}, (1), (t), dy_{t-1} .. dy_{t-lag}]`` and response on rows t > max_lag."""
    dy = np.diff(y)
    dy1 = dy[max_lag:]
    T = len(dy1)

    columns = [y[max_lag:max_lag + T]]
    if trend is not TrendType.NONE:
        columns.append(np.ones(T))
    if trend is TrendType.CONSTANT_TREND:
        columns.append(np.arange(1, T + 1, dtype=np.float64))
    for j in range(1, lag + 1):
        columns.append(dy[max_lag - j:max_lag - j + T])

    return np.column_stack(columns), dy1


def _is_better(candidate: RegressionResult,
               best: Optional[RegressionResult],
               method: LagSelectionMethod) -> bool:
    if best is None:
        return True
    if method is LagSelectionMethod.AIC:
        return candidate.aic < best.aic
    if method is LagSelectionMethod.BIC:
        return candidate.bic < best.bic
    return candidate.t_stats[0] < best.t_stats[0] or best.t_stats[0] == 0


def adf_test(log_price: VectorLike,
             trend: Union[str, TrendType] = "c",
             max_lag: int = 0,
             lag_mode: Union[str, LagSelectionMethod] = "AIC",
             tail: Union[str, Tail] = "left") -> ADFResult:
    """
    Augmented Dickey-Fuller test with automatic lag selection.

    Args:
        log_price: Series to test, usually log prices
        trend: ``"n"``, ``"c"`` or ``"ct"``
        max_lag: Largest number of lagged differences considered
        lag_mode: ``"AIC"``, ``"BIC"`` or ``"t-stat"``
        tail: ``"left"`` (stationarity) or ``"right"`` (explosiveness)

    Returns:
        ADFResult: Statistics of the selected regression

    Raises:
        EmptyValueError: If the series is empty
        InvalidValueError: For an unknown tag, a negative max_lag, a series
            shorter than 2, or when no candidate regression can be fitted

    Examples:
        >>> import numpy as np
        >>> from tsreg.models.time_series.unit_root import adf_test
        >>> rng = np.random.default_rng(0)
        >>> walk = np.cumsum(rng.standard_normal(500))
        >>> res = adf_test(walk, trend="c", max_lag=4)
        >>> res.rejects_null("5%")
        False
    """
    y = validate_vector(log_price, "log_price")
    trend = TrendType.from_string(trend)
    method = LagSelectionMethod.from_string(lag_mode)
    tail = Tail.from_string(tail)
    max_lag = validate_positive_int(max_lag, "max_lag", allow_zero=True)

    if len(y) < 2:
        raise_invalid_error(
            "ADF test needs at least 2 observations",
            param_name="log_price",
            param_value=len(y),
            constraint="len >= 2"
        )

    best: Optional[RegressionResult] = None
    best_lag = 0
    n_rows = len(y) - 1 - max_lag

    for lag in range(max_lag + 1):
        if n_rows < MIN_ADF_OBSERVATIONS:
            logger.debug(f"ADF lag {lag} skipped: {n_rows} rows")
            continue
        X, dy1 = _adf_design(y, lag, max_lag, trend)
        try:
            model = ols_mat(X, dy1)
        except TsregError as e:
            logger.debug(f"ADF lag {lag} skipped: {e.message}")
            continue
        if _is_better(model, best, method):
            best = model
            best_lag = lag

    if (best is None or best.aic == np.inf or best.bic == np.inf
            or best.t_stats[0] == 0 or np.isnan(best.t_stats[0])):
        raise_numeric_error(
            "ADF test failed: no usable regression, the sample may be too short "
            "or the data degenerate",
            operation="adf_test",
            issue="no valid candidate",
            context={"nobs": len(y), "max_lag": max_lag}
        )

    logger.info(f"ADF ({trend.value}, {tail.value}): selected lag {best_lag} by "
                f"{method.value}, t={best.t_stats[0]:.4f}")

    return ADFResult(
        gamma=float(best.coefficients[0]),
        t_stat=float(best.t_stats[0]),
        p_value=float(best.p_values[0]),
        used_lag=best_lag,
        nobs=best.nobs,
        aic=float(best.aic),
        bic=float(best.bic),
        method=method,
        trend=trend,
        critical_values=critical_values(trend, tail),
        tail=tail,
        residuals=best.residuals,
        coefficients=best.coefficients,
    )
