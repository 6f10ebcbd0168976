'''
Numba-Accelerated Core Functions for Penalized Regression

JIT-compiled inner loops of the two LASSO solvers. The wrappers in lasso.py
take care of validation, the intercept column, standardization and the
summary statistics; the kernels here only iterate on an already prepared,
standardized design.

Functions:
    _soft_threshold: Proximal operator of the L1 norm
    _lasso_cd_core: Coordinate descent for the squared-error LASSO objective
    _logistic_l1_objective: Penalized logistic loss with saturated log-sum-exp
    _lasso_ista_core: Proximal gradient (ISTA) with backtracking for logistic LASSO
'''

import logging
from typing import Tuple

import numpy as np
from numba import jit

# Set up module-level logger
logger = logging.getLogger("tsreg.models.cross_section._numba_core")


@jit(nopython=True, cache=True)
def _soft_threshold(z: float, a: float) -> float:
    """S(z, a) = sign(z) * max(|z| - a, 0)."""
    if z > a:
        return z - a
    if z < -a:
        return z + a
    return 0.0


@jit(nopython=True, cache=True)
def _lasso_cd_core(X: np.ndarray,
                   y: np.ndarray,
                   alpha: float,
                   with_intercept: bool,
                   tol: float,
                   max_iter: int,
                   gram_floor: float) -> Tuple[np.ndarray, int, float]:
    """
    Coordinate descent for ``(1/2n)||y - X b||^2 + alpha * ||b||_1``.

    Column 0 is an unpenalized intercept when ``with_intercept`` is set; it is
    updated first in every sweep to the mean partial residual. The residual
    vector is maintained incrementally so a sweep costs O(n * p).

    Args:
        X: Standardized design (n x p), including the intercept column if any
        y: Response (n,)
        alpha: Penalty, already divided by n
        with_intercept: Whether column 0 is the intercept
        tol: Stop when the largest coefficient change in a sweep is below this
        max_iter: Maximum number of sweeps
        gram_floor: Lower bound for (1/n)||X_j||^2

    Returns:
        Tuple containing:
            - beta: Coefficients on the standardized scale (p,)
            - n_iter: Number of sweeps performed
            - max_change: Largest coefficient change in the final sweep
    """
    n, p = X.shape
    beta = np.zeros(p)
    resid = y.copy()
    start = 1 if with_intercept else 0

    g = np.empty(p)
    for j in range(p):
        s = 0.0
        for i in range(n):
            s += X[i, j] * X[i, j]
        g[j] = s / n
        if g[j] == 0.0:
            g[j] = gram_floor

    max_change = np.inf
    n_iter = 0
    for it in range(max_iter):
        n_iter = it + 1
        max_change = 0.0

        if with_intercept:
            # mean of y - sum_{j>=1} x_ij b_j
            s = 0.0
            for i in range(n):
                s += resid[i]
            new_b0 = s / n + beta[0]
            delta = new_b0 - beta[0]
            if abs(delta) > max_change:
                max_change = abs(delta)
            if delta != 0.0:
                for i in range(n):
                    resid[i] -= delta
            beta[0] = new_b0

        for j in range(start, p):
            rho = 0.0
            for i in range(n):
                rho += X[i, j] * resid[i]
            rho = rho / n + g[j] * beta[j]

            new_bj = _soft_threshold(rho, alpha) / g[j]
            if np.isnan(new_bj) or np.isinf(new_bj):
                new_bj = 0.0

            delta = new_bj - beta[j]
            if abs(delta) > max_change:
                max_change = abs(delta)
            if delta != 0.0:
                for i in range(n):
                    resid[i] -= X[i, j] * delta
            beta[j] = new_bj

        if max_change < tol:
            break

    return beta, n_iter, max_change


@jit(nopython=True, cache=True)
def _logistic_l1_objective(X: np.ndarray,
                           y: np.ndarray,
                           beta: np.ndarray,
                           alpha: float,
                           start: int,
                           saturation: float) -> float:
    """
    ``(1/n) sum_i [log(1 + e^{s_i}) - y_i s_i] + alpha * sum_{j>=start} |b_j|``.

    ``log(1 + e^s)`` is replaced by ``s`` above ``saturation`` and by 0 below
    ``-saturation``.
    """
    n, p = X.shape
    loss = 0.0
    for i in range(n):
        s = 0.0
        for j in range(p):
            s += X[i, j] * beta[j]
        if s > saturation:
            loss += s - y[i] * s
        elif s < -saturation:
            loss += -y[i] * s
        else:
            loss += np.log1p(np.exp(s)) - y[i] * s
    loss /= n

    l1 = 0.0
    for j in range(start, p):
        l1 += abs(beta[j])
    return loss + alpha * l1


@jit(nopython=True, cache=True)
def _lasso_ista_core(X: np.ndarray,
                     y: np.ndarray,
                     alpha: float,
                     with_intercept: bool,
                     tol: float,
                     max_iter: int,
                     saturation: float,
                     backtracking_steps: int) -> Tuple[np.ndarray, int, float]:
    """
    Proximal gradient descent for the L1-penalized logistic loss.

    The step starts at 1/L with ``L = max_j ||X_j||^2 / (4n)``. Each iteration
    takes a gradient step (plain for the intercept, soft-thresholded for the
    other coefficients) and halves the step up to ``backtracking_steps`` times
    while the objective increases. The reduced step carries over to later
    iterations.

    Args:
        X: Standardized design (n x p), including the intercept column if any
        y: 0/1 response (n,)
        alpha: Penalty, already divided by n
        with_intercept: Whether column 0 is the unpenalized intercept
        tol: Stop when the largest coefficient change is below this
        max_iter: Maximum number of iterations
        saturation: Bound on the linear predictor used by the sigmoid and the loss
        backtracking_steps: Maximum step halvings per iteration

    Returns:
        Tuple containing:
            - beta: Coefficients on the standardized scale (p,)
            - n_iter: Number of iterations performed
            - max_change: Largest coefficient change in the final iteration
    """
    n, p = X.shape
    beta = np.zeros(p)
    start = 1 if with_intercept else 0

    max_col_sq = 0.0
    for j in range(p):
        s = 0.0
        for i in range(n):
            s += X[i, j] * X[i, j]
        if s > max_col_sq:
            max_col_sq = s
    L = (max_col_sq / n) * 0.25
    if L <= 0.0:
        L = 1.0
    step = 1.0 / L

    prob = np.empty(n)
    grad = np.empty(p)
    new_beta = np.empty(p)
    max_change = np.inf
    n_iter = 0

    for it in range(max_iter):
        n_iter = it + 1

        for i in range(n):
            s = 0.0
            for j in range(p):
                s += X[i, j] * beta[j]
            if s > saturation:
                prob[i] = 1.0
            elif s < -saturation:
                prob[i] = 0.0
            else:
                prob[i] = 1.0 / (1.0 + np.exp(-s))

        for j in range(p):
            s = 0.0
            for i in range(n):
                s += X[i, j] * (prob[i] - y[i])
            grad[j] = s / n

        if with_intercept:
            new_beta[0] = beta[0] - step * grad[0]
        for j in range(start, p):
            new_beta[j] = _soft_threshold(beta[j] - step * grad[j], step * alpha)

        old_obj = _logistic_l1_objective(X, y, beta, alpha, start, saturation)
        for bt in range(backtracking_steps):
            new_obj = _logistic_l1_objective(X, y, new_beta, alpha, start, saturation)
            if new_obj <= old_obj:
                break
            step *= 0.5
            if with_intercept:
                new_beta[0] = beta[0] - step * grad[0]
            for j in range(start, p):
                new_beta[j] = _soft_threshold(beta[j] - step * grad[j], step * alpha)

        max_change = 0.0
        for j in range(p):
            d = abs(new_beta[j] - beta[j])
            if d > max_change:
                max_change = d
            beta[j] = new_beta[j]

        if max_change < tol:
            break

    return beta, n_iter, max_change
