# tsreg/utils/matrix_ops.py
"""
Matrix Operations Module

Dense linear-algebra helpers shared by the regression solvers: building a
design with an intercept, the SVD pseudo-inverse, inversion of the normal
equation matrix with a pseudo-inverse fallback, and the column
standardization used by LASSO together with its inverse on the coefficients.

Functions:
    add_constant: Prepend a column of ones to a design matrix
    pseudo_inverse: Moore-Penrose inverse through a thin SVD
    invert_gram: Invert X'X, falling back to the pseudo-inverse when singular
    standardize_columns: Scale (and, with an intercept, center) columns in place
    destandardize_coefficients: Map standardized coefficients to the original scale
"""

import logging
from typing import Optional, Tuple

import numpy as np
from scipy import linalg

from tsreg.core.exceptions import raise_numeric_error, warn_numeric
from tsreg.core.types import Matrix, Vector

# Set up module-level logger
logger = logging.getLogger("tsreg.utils.matrix_ops")

# Inverses of matrices with a larger condition number are treated as failed
CONDITION_TOLERANCE = 1e16


def add_constant(X: Matrix) -> Matrix:
    """
    Prepend a column of ones to a design matrix.

    Args:
        X: Design matrix of shape (n, k)

    Returns:
        np.ndarray: New matrix of shape (n, k + 1) whose first column is ones

    Examples:
        >>> import numpy as np
        >>> from tsreg.utils.matrix_ops import add_constant
        >>> add_constant(np.array([[2.0], [3.0]]))
        array([[1., 2.],
               [1., 3.]])
    """
    X = np.asarray(X, dtype=np.float64)
    if X.ndim == 1:
        X = X.reshape(-1, 1)
    return np.column_stack([np.ones(X.shape[0]), X])


def pseudo_inverse(A: Matrix, tol: float = 1e-12) -> Matrix:
    """
    Compute the Moore-Penrose pseudo-inverse through a thin SVD.

    Singular values at or below ``tol`` get a zero reciprocal, so directions
    that the data do not identify contribute nothing to the solution.

    Args:
        A: Matrix to invert, shape (m, k)
        tol: Absolute threshold on the singular values

    Returns:
        np.ndarray: The pseudo-inverse, shape (k, m)

    Raises:
        NumericError: If the SVD does not converge or A contains NaN or Inf
    """
    A = np.asarray(A, dtype=np.float64)
    try:
        U, s, Vt = linalg.svd(A, full_matrices=False)
    except (linalg.LinAlgError, ValueError) as e:
        raise_numeric_error(
            "SVD failed while computing the pseudo-inverse",
            operation="pseudo_inverse",
            issue=str(e)
        )

    s_inv = np.zeros_like(s)
    keep = s > tol
    s_inv[keep] = 1.0 / s[keep]
    return (Vt.T * s_inv) @ U.T


def invert_gram(G: Matrix, tol: float = 1e-12) -> Tuple[Matrix, bool]:
    """
    Invert a normal-equation matrix X'X.

    The direct inverse is attempted first. When it fails, is not finite, or
    the matrix is numerically singular, the SVD pseudo-inverse is used instead
    and a NumericWarning is issued.

    Args:
        G: Square symmetric matrix
        tol: Singular value threshold for the pseudo-inverse

    Returns:
        Tuple[np.ndarray, bool]: The inverse and whether the pseudo-inverse was used

    Raises:
        NumericError: If the fallback SVD fails as well
    """
    G = np.asarray(G, dtype=np.float64)
    reason: Optional[str] = None
    try:
        G_inv = linalg.inv(G)
        if not np.all(np.isfinite(G_inv)):
            reason = "inverse contains non-finite values"
        elif np.linalg.cond(G) > CONDITION_TOLERANCE:
            reason = "matrix is numerically singular"
    except (linalg.LinAlgError, ValueError) as e:
        reason = str(e)

    if reason is None:
        return G_inv, False

    logger.warning(f"X'X could not be inverted ({reason}); using the pseudo-inverse")
    warn_numeric(
        "Normal-equation matrix is singular, falling back to the pseudo-inverse",
        operation="invert_gram",
        issue=reason,
        value=G
    )
    return pseudo_inverse(G, tol), True


def standardize_columns(X: Matrix, with_intercept: bool) -> Tuple[Vector, Vector]:
    """
    Scale the columns of X in place, centering them when there is an intercept.

    Each column is divided by its population standard deviation; a column
    with zero variance keeps a scale of one. With an intercept, column 0 is
    left untouched (recorded as mean 0, std 1) and the other columns are also
    shifted to zero mean. Without an intercept the columns are only scaled and
    the recorded means are zero.

    Args:
        X: Design matrix, modified in place
        with_intercept: Whether column 0 is an intercept column

    Returns:
        Tuple[np.ndarray, np.ndarray]: Column means and standard deviations
    """
    k = X.shape[1]
    means = np.zeros(k)
    stds = np.ones(k)
    start = 1 if with_intercept else 0

    if k > start:
        block = X[:, start:]
        sd = block.std(axis=0)
        sd[sd == 0] = 1.0
        if with_intercept:
            mu = block.mean(axis=0)
            X[:, start:] = (block - mu) / sd
            means[start:] = mu
        else:
            X[:, start:] = block / sd
        stds[start:] = sd

    return means, stds


def destandardize_coefficients(beta_std: Vector,
                               means: Vector,
                               stds: Vector,
                               with_intercept: bool) -> Vector:
    """
    Map coefficients fitted on standardized columns back to the original scale.

    ``beta_j = beta_std_j / std_j`` and, with an intercept,
    ``beta_0 = beta_std_0 - sum_j (mean_j / std_j) * beta_std_j``.

    Args:
        beta_std: Coefficients on the standardized design
        means: Column means returned by standardize_columns
        stds: Column standard deviations returned by standardize_columns
        with_intercept: Whether coefficient 0 is the intercept

    Returns:
        np.ndarray: Coefficients on the original scale
    """
    beta = beta_std / stds
    if with_intercept:
        beta[0] = beta_std[0] - np.sum(means[1:] / stds[1:] * beta_std[1:])
    return beta
