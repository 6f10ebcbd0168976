# tsreg/models/__init__.py
"""
tsreg Models Module

Estimators and tests, grouped by the kind of data they work on:

- cross_section: OLS and LASSO regression
- time_series: autocorrelation, power-law fit, ADF test, residual diagnostics
- bootstrap: residual resampling
"""

import logging

# Set up module-level logger
logger = logging.getLogger("tsreg.models")

from . import cross_section
from . import time_series
from . import bootstrap

from .cross_section import lasso, ols, ols_mat, simple_regression
from .time_series import (
    ADFResult,
    LjungBoxResult,
    LogACFFit,
    MultiSegments,
    adf_test,
    auto_fit_range,
    autocorr_single,
    detect_ar,
    fit_log_acf,
    ljung_box_test,
    new_multi_segments,
)
from .bootstrap import simulate_white_noise

__all__ = [
    'cross_section',
    'time_series',
    'bootstrap',
    'ols',
    'ols_mat',
    'simple_regression',
    'lasso',
    'ADFResult',
    'LjungBoxResult',
    'LogACFFit',
    'MultiSegments',
    'adf_test',
    'auto_fit_range',
    'autocorr_single',
    'detect_ar',
    'fit_log_acf',
    'ljung_box_test',
    'new_multi_segments',
    'simulate_white_noise',
]
