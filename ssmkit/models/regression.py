"""Regression distribution models: Gaussian and Bernoulli (logistic) regression.

Both models map a covariate row to the parameters of a response distribution
through a coefficient matrix, optionally with an intercept. Covariates may be
passed with or without the leading column of ones.

References:
    Bishop, C. M. (2006). Pattern Recognition and Machine Learning.
    Springer, Chapters 3-4.
"""

from __future__ import annotations

from typing import Optional, Tuple

import numpy as np
from scipy import optimize
from scipy.special import expit, log_expit

from ..config import FitConfig
from ..errors import InvalidDataError, InvalidParameterError
from ..logging import get_logger
from .base import Model
from .utils import (
    add_intercept,
    check_covariance,
    check_weights,
    ensure_2d,
    log_normal_pdf_rows,
    weighted_covariance,
)

logger = get_logger(__name__)


class _Regression(Model):
    """Shared design-matrix handling for regression models."""

    def __init__(
        self,
        input_dim: int,
        include_intercept: bool,
        ridge: float,
        config: Optional[FitConfig],
        rng: Optional[np.random.Generator],
    ):
        super().__init__(config=config, rng=rng)
        if input_dim < 1:
            raise InvalidParameterError(f"input_dim must be >= 1, got {input_dim}")
        self.input_dim = input_dim
        self.include_intercept = include_intercept
        self.ridge = ridge

    @property
    def n_coef(self) -> int:
        """Number of coefficient rows, including the intercept."""
        return self.input_dim + int(self.include_intercept)

    def _design(self, Phi: np.ndarray) -> np.ndarray:
        X = ensure_2d(Phi, "Phi")
        if self.include_intercept:
            return add_intercept(X, self.n_coef)
        if X.shape[1] != self.input_dim:
            raise InvalidDataError(f"Phi has {X.shape[1]} columns, expected {self.input_dim}")
        return X

    def _penalty(self) -> np.ndarray:
        """Diagonal ridge penalty that leaves the intercept unpenalized."""
        diag = np.full(self.n_coef, float(self.ridge))
        if self.include_intercept:
            diag[0] = 0.0
        return np.diag(diag)

    def _check_rows(self, X: np.ndarray, Y: Optional[np.ndarray], w: Optional[np.ndarray]):
        if Y is not None and len(Y) != len(X):
            raise InvalidDataError(f"Phi has {len(X)} rows but Y has {len(Y)}")
        if w is not None:
            check_weights(w, len(X))

    def _validate_ridge(self) -> None:
        if self.ridge < 0:
            raise InvalidParameterError(f"ridge must be non-negative, got {self.ridge}")


class GaussianRegression(_Regression):
    """Multivariate linear regression with Gaussian noise.

    Models each response row as:
        y_t = x_t' beta + eps_t,   eps_t ~ N(0, cov)

    where x_t is the covariate row (with a leading 1 when include_intercept).

    Attributes:
        input_dim: Number of covariates (excluding intercept).
        output_dim: Response dimension.
        include_intercept: Whether an intercept row is part of beta.
        beta: Coefficients, shape (input_dim [+ 1], output_dim).
        cov: Noise covariance, shape (output_dim, output_dim).
        ridge: L2 penalty on non-intercept coefficients used in fit.
    """

    def __init__(
        self,
        input_dim: int,
        output_dim: int,
        include_intercept: bool = True,
        beta: Optional[np.ndarray] = None,
        cov: Optional[np.ndarray] = None,
        ridge: float = 0.0,
        config: Optional[FitConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        super().__init__(input_dim, include_intercept, ridge, config, rng)
        if output_dim < 1:
            raise InvalidParameterError(f"output_dim must be >= 1, got {output_dim}")
        self.output_dim = output_dim
        self.beta = (
            np.zeros((self.n_coef, output_dim)) if beta is None else np.asarray(beta, dtype=float)
        )
        self.cov = np.eye(output_dim) if cov is None else np.asarray(cov, dtype=float)

    def validate_model(self) -> None:
        if self.beta is None:
            raise InvalidParameterError("beta is not set")
        if self.beta.shape != (self.n_coef, self.output_dim):
            raise InvalidParameterError(
                f"beta shape {self.beta.shape} != ({self.n_coef}, {self.output_dim})"
            )
        if not np.all(np.isfinite(self.beta)):
            raise InvalidParameterError("beta contains NaN or infinite values")
        check_covariance(self.cov, self.output_dim)
        self._validate_ridge()

    def validate_data(
        self,
        Phi: np.ndarray,
        Y: Optional[np.ndarray] = None,
        w: Optional[np.ndarray] = None,
    ) -> None:
        X = self._design(Phi)
        if Y is not None:
            Y = ensure_2d(Y, "Y", self.output_dim)
            if Y.shape[1] != self.output_dim:
                raise InvalidDataError(f"Y has {Y.shape[1]} columns, expected {self.output_dim}")
        self._check_rows(X, Y, w)

    def predict(self, Phi: np.ndarray) -> np.ndarray:
        """Conditional mean of the response, shape (n, output_dim)."""
        return self._design(Phi) @ self.beta

    def sample(self, Phi: np.ndarray, rng: Optional[np.random.Generator] = None) -> np.ndarray:
        """Draw one response per covariate row, shape (n, output_dim)."""
        mean = self.predict(Phi)
        noise = self._rng(rng).multivariate_normal(
            np.zeros(self.output_dim), self.cov, size=len(mean)
        )
        return mean + noise

    def loglikelihood(self, Phi: np.ndarray, Y: np.ndarray) -> np.ndarray:
        Y = ensure_2d(Y, "Y", self.output_dim)
        return log_normal_pdf_rows(Y - self.predict(Phi), self.cov)

    def fit(
        self, Phi: np.ndarray, Y: np.ndarray, w: Optional[np.ndarray] = None
    ) -> "GaussianRegression":
        """Weighted ridge least squares for beta, then weighted residual covariance.

        Args:
            Phi: Covariates, shape (n, input_dim) or (n, input_dim + 1).
            Y: Responses, shape (n, output_dim).
            w: Non-negative weights, shape (n,). If None, all ones.

        Returns:
            self (for chaining).
        """
        Y = ensure_2d(Y, "Y", self.output_dim)
        w = check_weights(w, len(Y))
        self.validate_data(Phi, Y, w)
        X = self._design(Phi)

        XtW = X.T * w
        A = XtW @ X + self._penalty()
        b = XtW @ Y

        try:
            beta = np.linalg.solve(A, b)
        except np.linalg.LinAlgError:
            # Fallback to pseudo-inverse
            beta = np.linalg.pinv(A) @ b

        self.beta = beta
        self.cov = weighted_covariance(Y - X @ beta, w, self.config.reg_covar)

        logger.debug(
            "Fitted GaussianRegression on %d observations (weight mass %.4g)",
            len(Y),
            np.sum(w),
        )
        return self

    def __repr__(self) -> str:
        return (
            f"GaussianRegression(input_dim={self.input_dim}, output_dim={self.output_dim}, "
            f"include_intercept={self.include_intercept})"
        )


class BernoulliRegression(_Regression):
    """Logistic regression for a binary response.

    Models:
        P(y_t = 1 | x_t) = logistic(x_t' beta)

    Attributes:
        input_dim: Number of covariates (excluding intercept).
        include_intercept: Whether beta[0] is an intercept.
        beta: Coefficients, shape (input_dim [+ 1],).
        ridge: L2 penalty on non-intercept coefficients used in fit.
    """

    output_dim = 1

    def __init__(
        self,
        input_dim: int,
        include_intercept: bool = True,
        beta: Optional[np.ndarray] = None,
        ridge: float = 0.0,
        config: Optional[FitConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        super().__init__(input_dim, include_intercept, ridge, config, rng)
        self.beta = np.zeros(self.n_coef) if beta is None else np.asarray(beta, dtype=float)

    def validate_model(self) -> None:
        if self.beta is None:
            raise InvalidParameterError("beta is not set")
        if self.beta.shape != (self.n_coef,):
            raise InvalidParameterError(f"beta shape {self.beta.shape} != ({self.n_coef},)")
        if not np.all(np.isfinite(self.beta)):
            raise InvalidParameterError("beta contains NaN or infinite values")
        self._validate_ridge()

    def validate_data(
        self,
        Phi: np.ndarray,
        Y: Optional[np.ndarray] = None,
        w: Optional[np.ndarray] = None,
    ) -> None:
        X = self._design(Phi)
        if Y is not None:
            Y = ensure_2d(Y, "Y")
            if Y.shape[1] != 1:
                raise InvalidDataError(f"Y must have a single column, got {Y.shape[1]}")
            if np.any((Y < 0) | (Y > 1)):
                raise InvalidDataError("Y values must lie in [0, 1]")
        self._check_rows(X, Y, w)

    def predict_proba(self, Phi: np.ndarray) -> np.ndarray:
        """Success probability for each covariate row, shape (n,)."""
        return expit(self._design(Phi) @ self.beta)

    def sample(self, Phi: np.ndarray, rng: Optional[np.random.Generator] = None) -> np.ndarray:
        """Draw one binary response per covariate row, shape (n, 1)."""
        p = self.predict_proba(Phi)
        return self._rng(rng).binomial(1, p).astype(float).reshape(-1, 1)

    def loglikelihood(
        self, Phi: np.ndarray, Y: np.ndarray, w: Optional[np.ndarray] = None
    ) -> np.ndarray:
        """Weighted Bernoulli log-likelihood of each row.

        Computes w_t * (y_t log p_t + (1 - y_t) log(1 - p_t)) with the log
        probabilities taken directly from the linear predictor.
        """
        y = ensure_2d(Y, "Y").reshape(-1)
        w = check_weights(w, len(y))
        z = self._design(Phi) @ self.beta
        return w * (y * log_expit(z) + (1 - y) * log_expit(-z))

    def _objective(
        self, beta: np.ndarray, X: np.ndarray, y: np.ndarray, w: np.ndarray, penalty: np.ndarray
    ) -> Tuple[float, np.ndarray]:
        z = X @ beta
        nll = -np.sum(w * (y * log_expit(z) + (1 - y) * log_expit(-z)))
        grad = -X.T @ (w * (y - expit(z)))

        nll += 0.5 * beta @ penalty @ beta
        grad += penalty @ beta
        return nll, grad

    def fit(
        self, Phi: np.ndarray, Y: np.ndarray, w: Optional[np.ndarray] = None
    ) -> "BernoulliRegression":
        """Weighted penalized maximum likelihood via L-BFGS-B.

        Starts from the current coefficients. Non-convergence within
        `config.max_iter` iterations is logged; the last iterate is kept.

        Args:
            Phi: Covariates, shape (n, input_dim) or (n, input_dim + 1).
            Y: Binary responses, shape (n, 1).
            w: Non-negative weights, shape (n,). If None, all ones.

        Returns:
            self (for chaining).
        """
        y = ensure_2d(Y, "Y").reshape(-1)
        w = check_weights(w, len(y))
        self.validate_data(Phi, Y, w)
        X = self._design(Phi)

        x0 = self.beta if self.beta is not None else np.zeros(self.n_coef)
        result = optimize.minimize(
            self._objective,
            x0,
            args=(X, y, w, self._penalty()),
            jac=True,
            method="L-BFGS-B",
            options={"maxiter": self.config.max_iter, "gtol": self.config.tol},
        )
        if not result.success:
            logger.warning("BernoulliRegression fit did not converge: %s", result.message)

        self.beta = result.x
        logger.debug(
            "Fitted BernoulliRegression on %d observations in %d iterations",
            len(y),
            result.nit,
        )
        return self

    def __repr__(self) -> str:
        return (
            f"BernoulliRegression(input_dim={self.input_dim}, "
            f"include_intercept={self.include_intercept})"
        )
