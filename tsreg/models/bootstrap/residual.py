# tsreg/models/bootstrap/residual.py
"""
Residual bootstrap for simulating white noise.

Resamples the residuals of a fitted model to build synthetic innovation
series, for example to simulate paths under an ADF null. Only the
nonparametric (i.i.d. with replacement) scheme is available; the parametric
and wild schemes are recognised but not supported.

Without an explicit ``random_state`` every call draws a fresh seed from the
monotonic clock, so two calls return different samples. Pass an integer or a
``numpy.random.Generator`` for reproducible draws.
"""

import logging
import time
from enum import Enum
from typing import Union

import numpy as np

from tsreg.core.exceptions import raise_invalid_error
from tsreg.core.types import RandomStateLike, Vector, VectorLike
from tsreg.core.validation import validate_positive_int, validate_vector

# Set up module-level logger
logger = logging.getLogger("tsreg.models.bootstrap.residual")


class BootstrapMethod(str, Enum):
    """Residual resampling schemes."""

    PARAMETRIC = "parametric"
    NONPARAMETRIC = "nonparametric"
    WILD = "wild"

    @classmethod
    def from_string(cls, value: Union[str, "BootstrapMethod"]) -> "BootstrapMethod":
        """Convert a tag to a BootstrapMethod.

        Raises:
            InvalidValueError: If the tag is unknown
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise_invalid_error(
                f"Unknown residual sampling method: {value!r}",
                param_name="method",
                param_value=value,
                constraint="one of 'parametric', 'nonparametric', 'wild'"
            )


def _make_rng(random_state: RandomStateLike) -> np.random.Generator:
    if isinstance(random_state, np.random.Generator):
        return random_state
    if random_state is None:
        return np.random.default_rng(time.monotonic_ns())
    if isinstance(random_state, bool) or not isinstance(random_state, (int, np.integer)):
        raise_invalid_error(
            "random_state must be None, an integer or numpy.random.Generator",
            param_name="random_state",
            param_value=type(random_state).__name__
        )
    return np.random.default_rng(random_state)


def simulate_white_noise(resid: VectorLike,
                         length: int,
                         method: Union[str, BootstrapMethod] = BootstrapMethod.NONPARAMETRIC,
                         random_state: RandomStateLike = None) -> Vector:
    """
    Draw a white-noise series from the empirical residual distribution.

    Args:
        resid: Residuals to resample
        length: Number of values to draw
        method: Sampling scheme; only ``"nonparametric"`` is supported
        random_state: Seed or generator; None seeds from the monotonic clock

    Returns:
        np.ndarray: ``length`` residuals drawn uniformly with replacement

    Raises:
        EmptyValueError: If resid is empty
        InvalidValueError: If the method is unknown or unsupported, or length
            is negative

    Examples:
        >>> from tsreg.models.bootstrap.residual import simulate_white_noise
        >>> draws = simulate_white_noise([0.1, -0.2, 0.3], 5, random_state=42)
        >>> draws.shape
        (5,)
    """
    method = BootstrapMethod.from_string(method)
    if method is not BootstrapMethod.NONPARAMETRIC:
        raise_invalid_error(
            f"residual sampling method {method.value!r} is not implemented",
            param_name="method",
            param_value=method.value,
            constraint="'nonparametric'"
        )

    r = validate_vector(resid, "resid")
    length = validate_positive_int(length, "length", allow_zero=True)

    rng = _make_rng(random_state)
    idx = rng.integers(0, len(r), size=length)
    return r[idx]
