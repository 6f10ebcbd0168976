# tsreg/models/time_series/correlation.py
"""
Autocorrelation Estimation Module

Sample autocorrelation of a single series and of a collection of segments of
differing length (for example one segment per trading day). For segments the
ACF pools the lag products of every segment around one global mean and
variance:

    num_k   = sum_j sum_t (s_t - mu)(s_{t+k} - mu)
    pairs_k = sum_j max(0, n_j - k)
    ACF[k]  = num_k / (sigma^2 * pairs_k)

where ``sigma^2`` is the population variance of all observations. A lag with
no pairs is NaN, and so is every larger lag.

Three estimators give the same values: a direct O(N * L) loop, the same loop
spread over a pool of worker threads, and an FFT version that is O(N log N)
per segment.

Functions:
    autocorr_single: ACF of one series through the full self-correlation
    new_multi_segments: Build a MultiSegments summary from raw segments

Classes:
    MultiSegments: Immutable segment collection with pooled ACF estimators
"""

import logging
import os
import queue
import threading
from typing import List, Optional, Tuple

import numpy as np

from tsreg.core.config import get_performance_config
from tsreg.core.exceptions import raise_invalid_error
from tsreg.core.types import SegmentsLike, Vector, VectorLike
from tsreg.core.validation import (
    validate_positive_int, validate_segments, validate_vector
)
from tsreg.models.time_series._numba_core import (
    segment_lag_numerator,
    segment_signal_weight,
    segments_acf_direct,
    welford_mean_variance,
)
from tsreg.utils.signal import correlate, inverse_real_fft, next_pow2, real_fft

# Set up module-level logger
logger = logging.getLogger("tsreg.models.time_series.correlation")


def _normalize(num: np.ndarray, pairs: np.ndarray, variance: float) -> Vector:
    """Divide by ``variance * pairs`` and NaN-fill from the first lag without pairs."""
    acf = np.full(len(num), np.nan)
    empty = np.flatnonzero(pairs == 0)
    stop = empty[0] if len(empty) else len(num)
    acf[:stop] = num[:stop] / (variance * pairs[:stop])
    return acf


def autocorr_single(series: VectorLike, max_lag: int) -> Vector:
    """
    Sample autocorrelation of one series for lags 0 .. max_lag - 1.

    The de-meaned series ``u`` is correlated with itself over the full
    window; lag k is then normalized by ``var * (n - k)`` with
    ``var = sum(u^2) / n``, so lag 0 is exactly 1. Lags at or beyond the
    series length are NaN.

    Args:
        series: Observations
        max_lag: Number of lags to return (including lag 0)

    Returns:
        np.ndarray: ACF of length ``max_lag``

    Raises:
        EmptyValueError: If the series is empty
        InvalidValueError: If max_lag is not positive, the series has two or
            fewer observations, or it is constant

    Examples:
        >>> import numpy as np
        >>> from tsreg.models.time_series.correlation import autocorr_single
        >>> acf = autocorr_single(np.sin(np.arange(200) / 5.0), 10)
        >>> float(acf[0])
        1.0
    """
    s = validate_vector(series, "series")
    max_lag = validate_positive_int(max_lag, "max_lag")
    n = len(s)

    u = s - s.mean()
    var = float(u @ u) / n
    if var == 0.0:
        raise_invalid_error(
            "series has zero variance",
            param_name="series",
            constraint="variance > 0"
        )

    full = correlate(u, u, "full")
    right = full[n - 1:]

    m = min(max_lag, n)
    acf = np.full(max_lag, np.nan)
    acf[:m] = right[:m] / (var * (n - np.arange(m)))
    return acf


class MultiSegments:
    """
    Immutable collection of series segments with pooled moments.

    The global mean and population variance are computed once, with
    Welford's algorithm, when the collection is built. Segments are stored
    as read-only float64 arrays; empty segments are allowed as long as at
    least one segment has data.

    Args:
        segments: Sequence of one-dimensional series

    Raises:
        EmptyValueError: If there are no segments or all of them are empty
        InvalidValueError: If the pooled variance is zero

    Examples:
        >>> import numpy as np
        >>> from tsreg.models.time_series.correlation import MultiSegments
        >>> ms = MultiSegments([np.arange(5.0), np.arange(3.0)])
        >>> ms.total_n
        8
    """

    __slots__ = ("_segments", "_flat", "_offsets", "_total_n", "_mean", "_variance")

    def __init__(self, segments: SegmentsLike) -> None:
        arrays = validate_segments(segments, "segments")

        frozen = []
        for arr in arrays:
            arr = arr.copy()
            arr.setflags(write=False)
            frozen.append(arr)

        lengths = np.array([len(a) for a in frozen], dtype=np.int64)
        offsets = np.zeros(len(frozen) + 1, dtype=np.int64)
        np.cumsum(lengths, out=offsets[1:])
        flat = np.ascontiguousarray(np.concatenate(frozen), dtype=np.float64)
        flat.setflags(write=False)

        mean, variance = welford_mean_variance(flat)
        if not variance > 0.0:
            raise_invalid_error(
                "pooled variance of the segments must be positive",
                param_name="segments",
                param_value=variance,
                constraint="variance > 0"
            )

        object.__setattr__(self, "_segments", tuple(frozen))
        object.__setattr__(self, "_flat", flat)
        object.__setattr__(self, "_offsets", offsets)
        object.__setattr__(self, "_total_n", int(offsets[-1]))
        object.__setattr__(self, "_mean", float(mean))
        object.__setattr__(self, "_variance", float(variance))

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __len__(self) -> int:
        return len(self._segments)

    def __repr__(self) -> str:
        return (f"MultiSegments(n_segments={len(self)}, total_n={self._total_n}, "
                f"mean={self._mean:.6g}, variance={self._variance:.6g})")

    @property
    def segments(self) -> Tuple[Vector, ...]:
        return self._segments

    @property
    def total_n(self) -> int:
        """Number of observations across all segments."""
        return self._total_n

    @property
    def mean(self) -> float:
        return self._mean

    @property
    def variance(self) -> float:
        """Population variance (divide by total_n) of all observations."""
        return self._variance

    def autocorr_segments(self, max_lag: int) -> Vector:
        """
        Pooled ACF for lags 0 .. max_lag - 1, computed lag by lag.

        Raises:
            InvalidValueError: If max_lag is not positive
        """
        max_lag = validate_positive_int(max_lag, "max_lag")
        return segments_acf_direct(self._flat, self._offsets, self._mean,
                                   self._variance, max_lag)

    def autocorr_segments_parallel(self, max_lag: int,
                                   n_workers: Optional[int] = None) -> Vector:
        """
        Pooled ACF computed by a fixed pool of worker threads.

        Lags are handed out through a bounded queue; each worker writes the
        lag it computed into its own slot of a pre-allocated output, and the
        call returns once every worker has been joined. The per-lag kernel
        releases the GIL, so the workers run concurrently. The output equals
        that of autocorr_segments.

        Args:
            max_lag: Number of lags (including lag 0)
            n_workers: Pool size; defaults to ``performance.max_workers`` from
                the configuration, then to ``os.cpu_count()``

        Returns:
            np.ndarray: ACF of length ``max_lag``

        Raises:
            InvalidValueError: If max_lag or n_workers is not positive
        """
        max_lag = validate_positive_int(max_lag, "max_lag")
        if n_workers is None:
            n_workers = get_performance_config().max_workers or os.cpu_count() or 1
        n_workers = validate_positive_int(n_workers, "n_workers")

        num = np.zeros(max_lag)
        pairs = np.zeros(max_lag, dtype=np.int64)
        tasks: "queue.Queue[Optional[int]]" = queue.Queue(maxsize=n_workers)
        errors: List[BaseException] = []

        flat, offsets, mean = self._flat, self._offsets, self._mean

        def worker() -> None:
            while True:
                k = tasks.get()
                if k is None:
                    return
                try:
                    num[k], pairs[k] = segment_lag_numerator(flat, offsets, mean, k)
                except Exception as e:  # re-raised by the caller after join
                    errors.append(e)

        logger.debug(f"Parallel ACF: {max_lag} lags on {n_workers} worker threads")

        threads = [threading.Thread(target=worker, daemon=True) for _ in range(n_workers)]
        for t in threads:
            t.start()
        for k in range(max_lag):
            tasks.put(k)
        for _ in threads:
            tasks.put(None)
        for t in threads:
            t.join()

        if errors:
            raise errors[0]
        return _normalize(num, pairs, self._variance)

    def autocorr_segments_fft(self, max_lag: int) -> Vector:
        """
        Pooled ACF through per-segment FFTs.

        Each de-meaned segment of length T is zero-padded to
        ``L = next_pow2(2 T)``, so the circular correlation equals the linear
        one, and its power spectrum is transformed back and scaled by 1 / L.

        Raises:
            InvalidValueError: If max_lag is not positive
        """
        max_lag = validate_positive_int(max_lag, "max_lag")

        num = np.zeros(max_lag)
        pairs = np.zeros(max_lag, dtype=np.int64)
        for seg in self._segments:
            T = len(seg)
            if T == 0:
                continue
            L = next_pow2(2 * T)
            padded = np.zeros(L)
            padded[:T] = seg - self._mean

            spectrum = real_fft(padded)
            power = spectrum.real ** 2 + spectrum.imag ** 2
            r = inverse_real_fft(power, L) / L

            m = min(max_lag, T)
            num[:m] += r[:m]
            pairs[:m] += T - np.arange(m)

        return _normalize(num, pairs, self._variance)

    def signal_weight(self, sum_qty: float) -> Tuple[Vector, Vector]:
        """
        Running sign balance of the segments, averaged position by position.

        Along each segment the running absolute sum ``A`` and running sum of
        positive values ``P`` are tracked. Position i collects ``P / A`` (the
        positive share so far) and ``(A - 2 P) / sum_qty`` (the signed
        imbalance scaled by a reference quantity). Both are divided by the
        number of segments, so positions only reached by longer segments are
        diluted by the shorter ones.

        Args:
            sum_qty: Reference quantity used to scale the imbalance

        Returns:
            Tuple[np.ndarray, np.ndarray]: (positive share, scaled imbalance),
            each as long as the longest segment

        Raises:
            InvalidValueError: If sum_qty is zero or not finite
        """
        if not np.isfinite(sum_qty) or sum_qty == 0:
            raise_invalid_error(
                "sum_qty must be finite and non-zero",
                param_name="sum_qty",
                param_value=sum_qty
            )
        max_len = int(np.max(np.diff(self._offsets)))
        return segment_signal_weight(self._flat, self._offsets, max_len, float(sum_qty))


def new_multi_segments(segments: SegmentsLike) -> MultiSegments:
    """
    Build a MultiSegments collection.

    Raises:
        EmptyValueError: If there are no segments or all of them are empty
        InvalidValueError: If the pooled variance is zero
    """
    return MultiSegments(segments)
