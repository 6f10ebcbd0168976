"""
tsreg Time Series Module

Key components:
- Autocorrelation of a single series and of segment collections (direct,
  thread-parallel and FFT estimators)
- Power-law fit of the ACF decay
- Augmented Dickey-Fuller unit root test
- Residual diagnostics (Ljung-Box, AR order detection)
"""

import logging

# Set up module-level logger
logger = logging.getLogger("tsreg.models.time_series")

from .correlation import MultiSegments, autocorr_single, new_multi_segments
from .power_law import LogACFFit, auto_fit_range, fit_log_acf
from .unit_root import (
    ADFResult,
    LagSelectionMethod,
    Tail,
    TrendType,
    adf_test,
    critical_values,
)
from .diagnostics import ARFit, LjungBoxResult, detect_ar, ljung_box_test

__all__ = [
    'MultiSegments',
    'autocorr_single',
    'new_multi_segments',
    'LogACFFit',
    'auto_fit_range',
    'fit_log_acf',
    'ADFResult',
    'LagSelectionMethod',
    'Tail',
    'TrendType',
    'adf_test',
    'critical_values',
    'ARFit',
    'LjungBoxResult',
    'detect_ar',
    'ljung_box_test',
]
