"""
Numba-accelerated core functions for time series analysis.

Segments of different lengths are passed to the kernels as one flat array plus
an ``offsets`` array (segment i occupies ``flat[offsets[i]:offsets[i + 1]]``),
which avoids reflected lists of arrays in nopython mode.

The per-lag numerator kernel is compiled with ``nogil=True`` so the parallel
multi-segment ACF can run it from several Python threads at once.
"""

import logging
from typing import Tuple

import numpy as np
from numba import jit

# Set up module-level logger
logger = logging.getLogger("tsreg.models.time_series._numba_core")


@jit(nopython=True, cache=True)
def welford_mean_variance(x: np.ndarray) -> Tuple[float, float]:
    """
    Mean and population variance (divide by n) in one pass.

    Returns:
        Tuple[float, float]: (mean, variance); (nan, nan) for an empty input
    """
    n = 0
    mean = 0.0
    m2 = 0.0
    for i in range(x.shape[0]):
        n += 1
        delta = x[i] - mean
        mean += delta / n
        m2 += delta * (x[i] - mean)
    if n == 0:
        return np.nan, np.nan
    return mean, m2 / n


@jit(nopython=True, cache=True, nogil=True)
def segment_lag_numerator(flat: np.ndarray,
                          offsets: np.ndarray,
                          mean: float,
                          k: int) -> Tuple[float, int]:
    """
    Lag-k cross-product sum and pair count over all segments.

    ``num = sum_j sum_t (s_t - mean)(s_{t+k} - mean)`` and
    ``pairs = sum_j max(0, n_j - k)``.
    """
    num = 0.0
    pairs = 0
    for j in range(offsets.shape[0] - 1):
        lo = offsets[j]
        nk = offsets[j + 1] - lo - k
        if nk <= 0:
            continue
        for i in range(nk):
            num += (flat[lo + i] - mean) * (flat[lo + i + k] - mean)
        pairs += nk
    return num, pairs


@jit(nopython=True, cache=True)
def segments_acf_direct(flat: np.ndarray,
                        offsets: np.ndarray,
                        mean: float,
                        variance: float,
                        max_lag: int) -> np.ndarray:
    """
    Multi-segment ACF for lags 0 .. max_lag - 1.

    The first lag without any pair and every larger lag are NaN.
    """
    acf = np.empty(max_lag)
    for k in range(max_lag):
        num, pairs = segment_lag_numerator(flat, offsets, mean, k)
        if pairs == 0:
            for j in range(k, max_lag):
                acf[j] = np.nan
            break
        acf[k] = num / (variance * pairs)
    return acf


@jit(nopython=True, cache=True)
def segment_signal_weight(flat: np.ndarray,
                          offsets: np.ndarray,
                          max_len: int,
                          sum_qty: float) -> Tuple[np.ndarray, np.ndarray]:
    """
    Running sign shares averaged across segments.

    For every position i of every segment, with ``total`` the running sum of
    ``|v|`` and ``pos`` the running sum of positive values:
    ``share[i] += pos / total`` and ``imbalance[i] += (total - 2 pos) / sum_qty``.
    Both arrays are divided by the number of segments.
    """
    n_seg = offsets.shape[0] - 1
    share = np.zeros(max_len)
    imbalance = np.zeros(max_len)
    for j in range(n_seg):
        total = 0.0
        pos = 0.0
        for i in range(offsets[j + 1] - offsets[j]):
            v = flat[offsets[j] + i]
            total += abs(v)
            if v > 0:
                pos += v
            if total == 0.0:
                share[i] += np.nan
            else:
                share[i] += pos / total
            imbalance[i] += (total - 2.0 * pos) / sum_qty
    for i in range(max_len):
        share[i] /= n_seg
        imbalance[i] /= n_seg
    return share, imbalance
