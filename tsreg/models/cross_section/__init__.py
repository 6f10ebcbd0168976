"""
tsreg Cross-Sectional Regression Module

Key components:
- ols / ols_mat: Ordinary least squares with pseudo-inverse fallback
- simple_regression: Closed-form univariate slope and intercept
- lasso: Linear (coordinate descent) and logistic (ISTA) LASSO
"""

import logging

# Set up module-level logger
logger = logging.getLogger("tsreg.models.cross_section")

from .ols import ols, ols_mat, simple_regression
from .lasso import lasso

__all__ = [
    'ols',
    'ols_mat',
    'simple_regression',
    'lasso',
]
