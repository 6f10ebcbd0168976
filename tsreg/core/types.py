# tsreg/core/types.py

"""
Core type annotations for tsreg.

Type aliases used across the package so that signatures document whether a
function expects a matrix, a vector, or a collection of segments.
"""

from typing import Literal, Sequence, Tuple, Union

import numpy as np
import pandas as pd

# NumPy array type aliases
Vector = np.ndarray  # 1D array
Matrix = np.ndarray  # 2D array, rows are observations

# Inputs accepted at the public boundary and converted on entry
VectorLike = Union[np.ndarray, pd.Series, Sequence[float]]
MatrixLike = Union[np.ndarray, pd.DataFrame, Sequence[Sequence[float]]]
SegmentsLike = Sequence[VectorLike]

# Random state accepted by the bootstrap sampler
RandomStateLike = Union[None, int, np.random.Generator]

# Correlation / convolution modes
CorrelationMode = Literal["full", "valid", "same"]

# (start, end) lag range for the power-law fit
LagRange = Tuple[int, int]
