"""
tsreg Utilities Module

Helpers shared by the estimators:

- Matrix operations (add_constant, pseudo-inverse, normal-equation inversion,
  column standardization)
- Correlation, convolution and FFT helpers
- Equal-width histogram
"""

import logging

# Set up module-level logger
logger = logging.getLogger("tsreg.utils")

from .matrix_ops import (
    add_constant,
    pseudo_inverse,
    invert_gram,
    standardize_columns,
    destandardize_coefficients,
)

from .signal import (
    correlate,
    convolve,
    next_pow2,
    real_fft,
    inverse_real_fft,
)

from .misc import HistogramBin, hist

__all__ = [
    'add_constant',
    'pseudo_inverse',
    'invert_gram',
    'standardize_columns',
    'destandardize_coefficients',
    'correlate',
    'convolve',
    'next_pow2',
    'real_fft',
    'inverse_real_fft',
    'HistogramBin',
    'hist',
]
