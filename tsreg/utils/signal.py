# tsreg/utils/signal.py
"""
Discrete correlation, convolution and FFT helpers.

correlate follows the NumPy definition ``c[k] = sum_l a[l + k] * v[l]`` and
convolve is correlate against the reversed kernel. The three modes slice the
full output differently from NumPy:

- ``full``: length n + m - 1, starting at 0
- ``valid``: length n, starting at m - 1 (requires m <= n)
- ``same``: length n - m + 1, starting at (m - 1) // 2

The FFT pair uses an unnormalized inverse, so ``inverse_real_fft(real_fft(x))``
returns ``L * x`` and callers apply the ``1 / L`` factor themselves.
"""

import logging
from typing import Tuple

import numpy as np
from scipy import fft as sp_fft
from scipy import signal as sp_signal

from tsreg.core.exceptions import raise_invalid_error
from tsreg.core.types import CorrelationMode, Vector, VectorLike
from tsreg.core.validation import validate_vector

logger = logging.getLogger("tsreg.utils.signal")

_MODES = ("full", "valid", "same")


def _output_window(n: int, m: int, mode: str) -> Tuple[int, int]:
    if mode == "full":
        return 0, n + m - 1
    if mode == "valid":
        return m - 1, n
    return (m - 1) // 2, n - m + 1


def correlate(a: VectorLike, v: VectorLike, mode: CorrelationMode = "full") -> Vector:
    """
    Cross-correlation of two sequences.

    Args:
        a: First sequence, length n
        v: Second sequence, length m
        mode: One of ``"full"``, ``"valid"`` or ``"same"``

    Returns:
        np.ndarray: The correlation sliced according to ``mode``

    Raises:
        EmptyValueError: If either input is empty
        InvalidValueError: If either input has two or fewer elements, the mode
            is unknown, or the mode's output window is empty (``valid`` or
            ``same`` with m > n)

    Examples:
        >>> from tsreg.utils.signal import correlate
        >>> correlate([1.0, 2.0, 3.0], [0.0, 1.0, 0.5])
        array([0.5, 2. , 3.5, 3. , 0. ])
    """
    a = validate_vector(a, "a")
    v = validate_vector(v, "v")
    n, m = len(a), len(v)

    if n <= 2 or m <= 2:
        raise_invalid_error(
            "correlate needs more than two elements in each input",
            param_name="len(a), len(v)",
            param_value=(n, m),
            constraint="> 2"
        )
    if mode not in _MODES:
        raise_invalid_error(
            f"invalid mode {mode!r}, expected 'full', 'same' or 'valid'",
            param_name="mode",
            param_value=mode
        )
    if mode in ("valid", "same") and m > n:
        raise_invalid_error(
            f"mode {mode!r} requires len(v) <= len(a)",
            param_name="mode",
            param_value=mode,
            context={"len(a)": n, "len(v)": m}
        )

    full = sp_signal.convolve(a, v[::-1], mode="full", method="auto")
    start, length = _output_window(n, m, mode)
    return np.ascontiguousarray(full[start:start + length])


def convolve(a: VectorLike, v: VectorLike, mode: CorrelationMode = "full") -> Vector:
    """
    Discrete linear convolution, ``correlate(a, v[::-1], mode)``.

    Raises:
        EmptyValueError: If either input is empty
        InvalidValueError: Under the same conditions as correlate
    """
    v = validate_vector(v, "v")
    return correlate(a, v[::-1], mode)


def next_pow2(n: int) -> int:
    """Smallest power of two that is at least ``n`` (1 for n <= 1)."""
    if n <= 1:
        return 1
    return 1 << (int(n) - 1).bit_length()


def real_fft(x: Vector) -> np.ndarray:
    """Unnormalized forward FFT of a real sequence (``n // 2 + 1`` bins)."""
    return sp_fft.rfft(x, norm="backward")


def inverse_real_fft(c: np.ndarray, n: int) -> Vector:
    """Inverse of real_fft without the ``1 / n`` factor."""
    return sp_fft.irfft(c, n, norm="forward")
