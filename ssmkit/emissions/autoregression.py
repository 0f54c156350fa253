"""Autoregressive emission: observations conditioned on their own lag window."""

from __future__ import annotations

from typing import Optional

import numpy as np

from ..models import AutoRegression
from ..models.utils import ensure_2d, lag_design
from .base import EmissionModel, start_sequence
from .regression import GaussianRegressionEmission


class AutoRegressionEmission(EmissionModel):
    """Emission wrapper for :class:`ssmkit.models.AutoRegression`."""

    inner_model: AutoRegression

    def sample(
        self,
        Y_prev: np.ndarray,
        observation_sequence: Optional[np.ndarray] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> np.ndarray:
        """Append a draw conditioned on the last `order` observed rows.

        The lag window is taken from vstack(Y_prev, observation_sequence), so
        the first call conditions only on Y_prev and later calls on the
        simulated rows as well.

        Args:
            Y_prev: History preceding the trajectory, shape (>= order, output_dim).
            observation_sequence: Observations so far, shape (t, output_dim).
            rng: Random number generator. If None, uses the model's.

        Returns:
            New array of shape (t + 1, output_dim).
        """
        self.validate_model()
        self.validate_data(Y_prev)
        seq = start_sequence(observation_sequence, self.inner_model.output_dim)

        history = np.vstack([ensure_2d(Y_prev, "Y_prev", self.inner_model.output_dim), seq])
        draw = self.inner_model.sample(history, n=1, rng=rng)
        return np.vstack([seq, draw])

    def loglikelihood(self, Y_prev: np.ndarray, Y: np.ndarray) -> np.ndarray:
        """Log density of each row of Y given its preceding lag window.

        Computed by building the lag design matrix and evaluating the inner
        Gaussian regression on it.
        """
        self.validate_model()
        self.validate_data(Y_prev, Y)

        dim = self.inner_model.output_dim
        Y = ensure_2d(Y, "Y", dim)
        Phi = lag_design(ensure_2d(Y_prev, "Y_prev", dim), Y, self.inner_model.order)
        regression_emission = GaussianRegressionEmission(self.inner_model.regression)
        return regression_emission.loglikelihood(Phi, Y)

    def fit(
        self, Y_prev: np.ndarray, Y: np.ndarray, w: Optional[np.ndarray] = None
    ) -> "AutoRegressionEmission":
        """Weighted fit of the lag coefficients and noise covariance, in place."""
        return self._fit_inner(Y_prev, Y, w=w)
