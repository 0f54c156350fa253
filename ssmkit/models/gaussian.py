"""Multivariate Gaussian distribution model."""

from __future__ import annotations

from typing import Optional

import numpy as np

from ..config import FitConfig
from ..errors import InvalidDataError, InvalidParameterError
from ..logging import get_logger
from .base import Model
from .utils import (
    check_covariance,
    check_weights,
    ensure_2d,
    log_normal_pdf_rows,
    weighted_covariance,
)

logger = get_logger(__name__)


class Gaussian(Model):
    """Multivariate normal distribution N(mean, cov).

    Attributes:
        output_dim: Dimension d of each observation.
        mean: Mean vector, shape (d,).
        cov: Covariance matrix, shape (d, d).
    """

    def __init__(
        self,
        output_dim: int,
        mean: Optional[np.ndarray] = None,
        cov: Optional[np.ndarray] = None,
        config: Optional[FitConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        """Initialize Gaussian.

        Args:
            output_dim: Observation dimension. Must be >= 1.
            mean: Mean vector, shape (output_dim,). If None, zeros.
            cov: Covariance, shape (output_dim, output_dim). If None, identity.
            config: Fit settings.
            rng: Default random number generator for sampling.
        """
        super().__init__(config=config, rng=rng)
        if output_dim < 1:
            raise InvalidParameterError(f"output_dim must be >= 1, got {output_dim}")
        self.output_dim = output_dim
        self.mean = np.zeros(output_dim) if mean is None else np.asarray(mean, dtype=float)
        self.cov = np.eye(output_dim) if cov is None else np.asarray(cov, dtype=float)

    def validate_model(self) -> None:
        if self.mean is None:
            raise InvalidParameterError("mean is not set")
        if self.mean.shape != (self.output_dim,):
            raise InvalidParameterError(
                f"mean shape {self.mean.shape} != ({self.output_dim},)"
            )
        if not np.all(np.isfinite(self.mean)):
            raise InvalidParameterError("mean contains NaN or infinite values")
        check_covariance(self.cov, self.output_dim)

    def validate_data(self, Y: np.ndarray, w: Optional[np.ndarray] = None) -> None:
        Y = ensure_2d(Y, "Y", self.output_dim)
        if Y.shape[1] != self.output_dim:
            raise InvalidDataError(f"Y has {Y.shape[1]} columns, expected {self.output_dim}")
        if w is not None:
            check_weights(w, len(Y))

    def sample(self, n: int = 1, rng: Optional[np.random.Generator] = None) -> np.ndarray:
        """Draw n observations, shape (n, output_dim)."""
        return self._rng(rng).multivariate_normal(self.mean, self.cov, size=n)

    def loglikelihood(self, Y: np.ndarray) -> np.ndarray:
        Y = ensure_2d(Y, "Y", self.output_dim)
        return log_normal_pdf_rows(Y - self.mean, self.cov)

    def fit(self, Y: np.ndarray, w: Optional[np.ndarray] = None) -> "Gaussian":
        """Weighted maximum likelihood estimate of mean and covariance.

        Args:
            Y: Observations, shape (n, output_dim).
            w: Non-negative weights, shape (n,). If None, all ones.

        Returns:
            self (for chaining).
        """
        Y = ensure_2d(Y, "Y", self.output_dim)
        w = check_weights(w, len(Y))
        self.validate_data(Y, w)

        total = np.sum(w)
        if total <= 0:
            raise InvalidDataError("weights must have positive total mass")

        self.mean = w @ Y / total
        self.cov = weighted_covariance(Y - self.mean, w, self.config.reg_covar)

        logger.debug("Fitted Gaussian on %d observations (weight mass %.4g)", len(Y), total)
        return self

    def __repr__(self) -> str:
        return f"Gaussian(output_dim={self.output_dim})"
