'''
Pytest configuration and fixtures for the tsreg test suite.

Provides seeded data generators (design matrices, AR(1) segments, random
walks) shared by the regression, correlation and unit root tests.
'''

from typing import List, Tuple

import numpy as np
import pytest

from tsreg.core.config import reset_config


# ---- Environment ----

@pytest.fixture(autouse=True)
def _restore_config():
    """Undo any set_config made by a test."""
    yield
    reset_config()


# ---- Basic Data Generation Fixtures ----

@pytest.fixture
def rng() -> np.random.Generator:
    """Provide a seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


def simulate_ar1(rng: np.random.Generator, n: int, phi: float, burn: int = 200) -> np.ndarray:
    """AR(1) path ``x_t = phi x_{t-1} + e_t`` with a discarded burn-in."""
    e = rng.standard_normal(n + burn)
    x = np.zeros(n + burn)
    for t in range(1, n + burn):
        x[t] = phi * x[t - 1] + e[t]
    return x[burn:]


@pytest.fixture
def regression_data(rng: np.random.Generator) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Well-conditioned design (200 x 3, no intercept column) with known coefficients."""
    n = 200
    X = rng.standard_normal((n, 3))
    beta = np.array([1.5, -0.7, 0.3])
    y = 0.5 + X @ beta + 0.5 * rng.standard_normal(n)
    return X, y, np.concatenate([[0.5], beta])


@pytest.fixture
def lasso_data(rng: np.random.Generator) -> Tuple[np.ndarray, np.ndarray]:
    """200 x 5 standard-normal design, y = X [3, 0, 0, -2, 0] + small noise."""
    X = rng.standard_normal((200, 5))
    y = X @ np.array([3.0, 0.0, 0.0, -2.0, 0.0]) + 0.1 * rng.standard_normal(200)
    return X, y


@pytest.fixture
def ar1_segments(rng: np.random.Generator) -> List[np.ndarray]:
    """Five AR(1) segments of length 2000 with phi = 0.6."""
    return [simulate_ar1(rng, 2000, 0.6) for _ in range(5)]


@pytest.fixture
def uneven_segments(rng: np.random.Generator) -> List[np.ndarray]:
    """Segments of very different lengths, including an empty one."""
    lengths = [50, 3, 0, 400, 17, 1]
    return [simulate_ar1(rng, n, 0.4, burn=20) if n else np.array([]) for n in lengths]


@pytest.fixture
def random_walk(rng: np.random.Generator) -> np.ndarray:
    """Gaussian random walk of length 1000."""
    return np.cumsum(rng.standard_normal(1000))


@pytest.fixture
def stationary_ar1(rng: np.random.Generator) -> np.ndarray:
    """AR(1) with phi = 0.3, length 1000."""
    return simulate_ar1(rng, 1000, 0.3)
