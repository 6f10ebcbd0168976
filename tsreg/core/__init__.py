"""
tsreg Core Module

Foundation shared by every estimator in the package: the exception hierarchy
and its error codes, configuration, input validation, type aliases and the
regression result record.
"""

import logging

# Set up module-level logger
logger = logging.getLogger("tsreg.core")

from .exceptions import (
    ErrorCode,
    TsregError,
    EmptyValueError,
    InvalidValueError,
    DimensionError,
    NumericError,
    TsregWarning,
    ConvergenceWarning,
    NumericWarning,
)

from .config import (
    get_config,
    set_config,
    reset_config,
    get_numerical_config,
    get_performance_config,
    NumericalConfig,
    PerformanceConfig,
    LoggingConfig,
)

from .results import ModelResult, RegressionResult

from .validation import (
    validate_vector,
    validate_matrix,
    validate_segments,
    validate_positive_int,
)

__all__ = [
    'ErrorCode',
    'TsregError',
    'EmptyValueError',
    'InvalidValueError',
    'DimensionError',
    'NumericError',
    'TsregWarning',
    'ConvergenceWarning',
    'NumericWarning',
    'get_config',
    'set_config',
    'reset_config',
    'get_numerical_config',
    'get_performance_config',
    'NumericalConfig',
    'PerformanceConfig',
    'LoggingConfig',
    'ModelResult',
    'RegressionResult',
    'validate_vector',
    'validate_matrix',
    'validate_segments',
    'validate_positive_int',
]
