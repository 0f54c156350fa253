"""Numerical and validation helpers shared by the distribution models.

Provides row-wise multivariate normal log densities, covariance checks,
weight resolution, and the lag-window design used by autoregressive models.
"""

from typing import Optional

import numpy as np

from ..errors import InvalidDataError, InvalidParameterError

LOG_2PI = np.log(2 * np.pi)


def ensure_2d(x: np.ndarray, name: str = "array", dim: Optional[int] = None) -> np.ndarray:
    """Ensure array is 2D with observations along the first axis.

    Scalars become (1, 1). A 1D array becomes a single column, except that
    when `dim` > 1 and the array has exactly `dim` entries it is read as one
    observation row.

    Args:
        x: Input array.
        name: Argument name used in error messages.
        dim: Expected number of columns, if known.

    Returns:
        2D float array.

    Raises:
        InvalidDataError: If the array has more than two dimensions or
            contains NaN or infinite values.

    Examples:
        >>> ensure_2d(np.array([1.0, 2.0])).shape
        (2, 1)
        >>> ensure_2d(np.array([1.0, 2.0]), dim=2).shape
        (1, 2)
    """
    x = np.asarray(x, dtype=float)
    if x.ndim == 0:
        x = x.reshape(1, 1)
    elif x.ndim == 1:
        if dim is not None and dim > 1 and len(x) == dim:
            x = x.reshape(1, -1)
        else:
            x = x.reshape(-1, 1)
    elif x.ndim > 2:
        raise InvalidDataError(f"{name} must be at most 2D, got shape {x.shape}")
    if not np.all(np.isfinite(x)):
        raise InvalidDataError(f"{name} contains NaN or infinite values")
    return x


def check_weights(w: Optional[np.ndarray], n_obs: int) -> np.ndarray:
    """Resolve and validate a per-observation weight vector.

    Args:
        w: Weights, shape (n_obs,). If None, all ones.
        n_obs: Number of observation rows the weights must cover.

    Returns:
        1D float array of length n_obs.

    Raises:
        InvalidDataError: If the length does not match or weights are
            negative or not finite.
    """
    if w is None:
        return np.ones(n_obs)
    w = np.asarray(w, dtype=float)
    if w.ndim != 1:
        w = w.reshape(-1)
    if len(w) != n_obs:
        raise InvalidDataError(f"weight length {len(w)} != number of observations {n_obs}")
    if not np.all(np.isfinite(w)):
        raise InvalidDataError("weights contain NaN or infinite values")
    if np.any(w < 0):
        raise InvalidDataError("weights must be non-negative")
    return w


def check_covariance(cov: np.ndarray, dim: int, name: str = "cov") -> np.ndarray:
    """Check that a covariance matrix is (dim, dim), symmetric and positive definite.

    Returns:
        Lower Cholesky factor of the covariance.

    Raises:
        InvalidParameterError: If any check fails.
    """
    if cov is None:
        raise InvalidParameterError(f"{name} is not set")
    cov = np.asarray(cov)
    if cov.shape != (dim, dim):
        raise InvalidParameterError(f"{name} shape {cov.shape} != ({dim}, {dim})")
    if not np.allclose(cov, cov.T, atol=1e-10):
        raise InvalidParameterError(f"{name} is not symmetric")
    try:
        return np.linalg.cholesky(cov)
    except np.linalg.LinAlgError:
        raise InvalidParameterError(f"{name} is not positive definite")


def log_normal_pdf_rows(residuals: np.ndarray, cov: np.ndarray) -> np.ndarray:
    """Log multivariate normal density of each zero-mean residual row.

    Uses the Cholesky factor of the covariance for numerical stability:
        log N(r; 0, S) = -0.5 d log(2 pi) - 0.5 log|S| - 0.5 r' S^-1 r

    Args:
        residuals: Residuals, shape (n, d).
        cov: Covariance matrix, shape (d, d). Must be positive definite.

    Returns:
        Log densities, shape (n,).

    Examples:
        >>> log_normal_pdf_rows(np.zeros((1, 1)), np.eye(1))
        array([-0.91893853])
    """
    residuals = np.asarray(residuals, dtype=float)
    d = residuals.shape[1]
    L = check_covariance(cov, d)

    # Solve L z = r for every row at once
    z = np.linalg.solve(L, residuals.T)
    half_log_det = np.sum(np.log(np.diag(L)))
    quad = np.sum(z**2, axis=0)

    return -0.5 * d * LOG_2PI - half_log_det - 0.5 * quad


def weighted_covariance(
    residuals: np.ndarray, w: np.ndarray, reg_covar: float = 0.0
) -> np.ndarray:
    """Weighted covariance of residual rows with diagonal regularization.

    Args:
        residuals: Residuals, shape (n, d).
        w: Non-negative weights, shape (n,).
        reg_covar: Value added to the diagonal.

    Returns:
        Covariance, shape (d, d).
    """
    total = np.sum(w)
    if total <= 0:
        raise InvalidDataError("weights must have positive total mass")
    weighted = np.sqrt(w)[:, np.newaxis] * residuals
    cov = weighted.T @ weighted / total
    cov = 0.5 * (cov + cov.T)
    return cov + reg_covar * np.eye(residuals.shape[1])


def add_intercept(X: np.ndarray, n_coef: int) -> np.ndarray:
    """Prepend a column of ones unless the caller already supplied it.

    Args:
        X: Covariates, shape (n, k).
        n_coef: Number of coefficient rows including the intercept.

    Returns:
        Design matrix with n_coef columns.

    Raises:
        InvalidDataError: If X has neither n_coef - 1 nor n_coef columns.
    """
    if X.shape[1] == n_coef - 1:
        return np.column_stack([np.ones(len(X)), X])
    if X.shape[1] == n_coef:
        return X
    raise InvalidDataError(
        f"covariates have {X.shape[1]} columns, expected {n_coef - 1} (or {n_coef} "
        "with intercept column)"
    )


def lag_window(history: np.ndarray, order: int) -> np.ndarray:
    """Flatten the last `order` rows of a history into one covariate row.

    The most recent row comes first, followed by older lags.

    Example:
        >>> lag_window(np.array([[1.0], [2.0], [3.0]]), order=2)
        array([[3., 2.]])
    """
    if len(history) < order:
        raise InvalidDataError(f"need at least {order} history rows, got {len(history)}")
    window = history[len(history) - order :][::-1]
    return window.reshape(1, -1)


def lag_design(Y_prev: np.ndarray, Y: np.ndarray, order: int) -> np.ndarray:
    """Build the autoregressive design matrix for a block of target rows.

    Each target row Y[t] is paired with its `order` immediately preceding rows
    taken from vstack(Y_prev, Y), concatenated most recent first:
        [y_{t-1}, y_{t-2}, ..., y_{t-order}]

    Args:
        Y_prev: Rows preceding Y, shape (m, d) with m >= order. Only the last
            `order` rows are used.
        Y: Target rows, shape (n, d).
        order: Number of lags.

    Returns:
        Design matrix, shape (n, order * d).

    Example:
        >>> Y_prev = np.array([[1.0], [2.0]])
        >>> Y = np.array([[3.0], [4.0]])
        >>> lag_design(Y_prev, Y, order=2)
        array([[2., 1.],
               [3., 2.]])
    """
    if order < 1:
        raise InvalidParameterError(f"order must be >= 1, got {order}")
    if len(Y_prev) < order:
        raise InvalidDataError(f"Y_prev must have at least {order} rows, got {len(Y_prev)}")
    if Y_prev.shape[1] != Y.shape[1]:
        raise InvalidDataError(
            f"Y_prev has {Y_prev.shape[1]} columns but Y has {Y.shape[1]}"
        )

    history = np.vstack([Y_prev[len(Y_prev) - order :], Y])
    n, d = Y.shape
    X = np.zeros((n, order * d))
    for j in range(order):
        # lag j+1 of target t sits at history row t + order - 1 - j
        X[:, j * d : (j + 1) * d] = history[order - 1 - j : order - 1 - j + n]
    return X
