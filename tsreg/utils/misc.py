# tsreg/utils/misc.py
"""
Miscellaneous numerical utilities.
"""

import logging
from dataclasses import dataclass
from typing import List

import numpy as np

from tsreg.core.config import get_numerical_config
from tsreg.core.types import VectorLike

logger = logging.getLogger("tsreg.utils.misc")


@dataclass(frozen=True)
class HistogramBin:
    """One bucket of an equal-width histogram covering ``[start, end)``."""
    start: float
    end: float
    count: int


def hist(data: VectorLike, bins: int) -> List[HistogramBin]:
    """
    Equal-width histogram over ``[min(data), max(data)]``.

    The maximum value is counted in the last bin. When all values are equal
    the range is widened by a tiny amount, relative to the magnitude of the
    values, so that every value lands in bin 0.
    NaN values are ignored.

    Args:
        data: Values to bin
        bins: Number of buckets

    Returns:
        List[HistogramBin]: ``bins`` buckets in increasing order, or an empty
        list when there is no data or ``bins`` is not positive

    Examples:
        >>> from tsreg.utils.misc import hist
        >>> [b.count for b in hist([0.0, 0.5, 1.0, 1.0], 2)]
        [1, 3]
    """
    values = np.asarray(data, dtype=np.float64).ravel()
    values = values[~np.isnan(values)]
    if values.size == 0 or bins <= 0:
        return []

    lo, hi = float(values.min()), float(values.max())
    if hi == lo:
        hi = lo + max(abs(lo), 1.0) * get_numerical_config().degenerate_range

    width = (hi - lo) / bins
    idx = np.floor((values - lo) / width).astype(np.int64)
    idx = np.clip(idx, 0, bins - 1)
    counts = np.bincount(idx, minlength=bins)

    return [
        HistogramBin(start=lo + i * width, end=lo + (i + 1) * width, count=int(counts[i]))
        for i in range(bins)
    ]
