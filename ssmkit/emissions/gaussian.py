"""Gaussian emission: unconditional multivariate normal observations."""

from __future__ import annotations

from typing import Optional

import numpy as np

from ..models import Gaussian
from .base import EmissionModel, start_sequence


class GaussianEmission(EmissionModel):
    """Emission wrapper for :class:`ssmkit.models.Gaussian`."""

    inner_model: Gaussian

    def sample(
        self,
        observation_sequence: Optional[np.ndarray] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> np.ndarray:
        """Append one unconditional draw to the sequence.

        Args:
            observation_sequence: Observations so far, shape (t, output_dim).
                If None, a new sequence is started.
            rng: Random number generator. If None, uses the model's.

        Returns:
            New array of shape (t + 1, output_dim).
        """
        self.validate_model()
        seq = start_sequence(observation_sequence, self.inner_model.output_dim)
        draw = self.inner_model.sample(1, rng=rng)
        return np.vstack([seq, draw])

    def loglikelihood(self, Y: np.ndarray) -> np.ndarray:
        """Log density of each row of Y, shape (n_obs,)."""
        self.validate_model()
        self.validate_data(Y)
        return self.inner_model.loglikelihood(Y)

    def fit(self, Y: np.ndarray, w: Optional[np.ndarray] = None) -> "GaussianEmission":
        """Weighted fit of mean and covariance, in place.

        Raises:
            InvalidDataError: If len(w) != len(Y).
        """
        return self._fit_inner(Y, w=w)
