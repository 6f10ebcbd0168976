# tsreg/__init__.py
"""
tsreg - Classical time-series and regression statistics

Numerical building blocks for a trading and research pipeline:

- OLS multiple regression with full inference and a pseudo-inverse fallback
- Linear and logistic LASSO
- Autocorrelation of single series and of segment collections, and the
  power-law fit of its decay
- Augmented Dickey-Fuller test, Ljung-Box test and residual bootstrap

Every fallible function returns its result or raises a TsregError whose
``code`` is EMPTY_VALUE or INVALID_VALUE.
"""

import logging
from typing import Union

# Set up package-wide logger
logger = logging.getLogger("tsreg")

from .version import __version__, __title__, __description__, __license__
from .core.config import initialize_config

# Attach the console handler and apply TSREG_* environment overrides
initialize_config()

from . import core
from . import utils
from . import models

from .core.exceptions import (
    ErrorCode,
    TsregError,
    EmptyValueError,
    InvalidValueError,
    ConvergenceWarning,
    NumericWarning,
)
from .core.results import RegressionResult
from .models.cross_section import lasso, ols, ols_mat, simple_regression
from .models.time_series import (
    ADFResult,
    LagSelectionMethod,
    LjungBoxResult,
    LogACFFit,
    MultiSegments,
    Tail,
    TrendType,
    adf_test,
    auto_fit_range,
    autocorr_single,
    detect_ar,
    fit_log_acf,
    ljung_box_test,
    new_multi_segments,
)
from .models.bootstrap import BootstrapMethod, simulate_white_noise
from .utils import HistogramBin, convolve, correlate, hist


def get_version() -> str:
    """Return the tsreg version string."""
    return __version__


def set_log_level(level: Union[int, str]) -> None:
    """
    Set the level of the package logger.

    Args:
        level: A logging level number or name such as ``"DEBUG"``
    """
    if isinstance(level, str):
        level = level.upper()
    logger.setLevel(level)


__all__ = [
    '__version__',
    'get_version',
    'set_log_level',
    'core',
    'utils',
    'models',
    'ErrorCode',
    'TsregError',
    'EmptyValueError',
    'InvalidValueError',
    'ConvergenceWarning',
    'NumericWarning',
    'RegressionResult',
    'ols',
    'ols_mat',
    'simple_regression',
    'lasso',
    'ADFResult',
    'LagSelectionMethod',
    'LjungBoxResult',
    'LogACFFit',
    'MultiSegments',
    'Tail',
    'TrendType',
    'adf_test',
    'auto_fit_range',
    'autocorr_single',
    'detect_ar',
    'fit_log_acf',
    'ljung_box_test',
    'new_multi_segments',
    'BootstrapMethod',
    'simulate_white_noise',
    'HistogramBin',
    'convolve',
    'correlate',
    'hist',
]
