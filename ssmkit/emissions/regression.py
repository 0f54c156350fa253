"""Covariate-conditioned emissions: Gaussian and Bernoulli regression."""

from __future__ import annotations

from typing import Optional

import numpy as np

from ..errors import InvalidDataError
from ..models import BernoulliRegression, GaussianRegression
from ..models.utils import ensure_2d
from .base import EmissionModel, start_sequence


class _CovariateEmission(EmissionModel):
    """Sampling shared by emissions that read one covariate row per step."""

    def sample(
        self,
        Phi: np.ndarray,
        observation_sequence: Optional[np.ndarray] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> np.ndarray:
        """Append a draw conditioned on the covariate row at the next time step.

        The step index is the current sequence length, so the t-th call (from
        0) reads Phi[t].

        Args:
            Phi: Covariates for the whole trajectory, shape (T, input_dim).
            observation_sequence: Observations so far, shape (t, output_dim).
            rng: Random number generator. If None, uses the model's.

        Returns:
            New array of shape (t + 1, output_dim).

        Raises:
            InvalidDataError: If Phi has no row for the next time step.
        """
        self.validate_model()
        self.validate_data(Phi)
        seq = start_sequence(observation_sequence, self.inner_model.output_dim)

        X = ensure_2d(Phi, "Phi")
        t = len(seq)
        if t >= len(X):
            raise InvalidDataError(
                f"no covariate row for time step {t}: Phi has {len(X)} rows"
            )
        draw = self.inner_model.sample(X[t : t + 1], rng=rng)
        return np.vstack([seq, draw])

    def fit(
        self, Phi: np.ndarray, Y: np.ndarray, w: Optional[np.ndarray] = None
    ) -> "_CovariateEmission":
        """Weighted fit of the regression parameters, in place.

        Args:
            Phi: Covariates, shape (n, input_dim).
            Y: Responses, shape (n, output_dim).
            w: Per-observation weights, e.g. state responsibilities. If None,
                all ones.

        Raises:
            InvalidDataError: If len(w) != len(Y).
        """
        return self._fit_inner(Phi, Y, w=w)


class GaussianRegressionEmission(_CovariateEmission):
    """Emission wrapper for :class:`ssmkit.models.GaussianRegression`."""

    inner_model: GaussianRegression

    def loglikelihood(self, Phi: np.ndarray, Y: np.ndarray) -> np.ndarray:
        """Log density of each response row given its covariate row."""
        self.validate_model()
        self.validate_data(Phi, Y)
        return self.inner_model.loglikelihood(Phi, Y)


class BernoulliRegressionEmission(_CovariateEmission):
    """Emission wrapper for :class:`ssmkit.models.BernoulliRegression`."""

    inner_model: BernoulliRegression

    def loglikelihood(
        self, Phi: np.ndarray, Y: np.ndarray, w: Optional[np.ndarray] = None
    ) -> np.ndarray:
        """Weighted Bernoulli log-likelihood of each binary response row.

        Args:
            Phi: Covariates, shape (n, input_dim).
            Y: Binary responses, shape (n, 1).
            w: Per-observation weights. If None, all ones.
        """
        self.validate_model()
        self.validate_data(Phi, Y, w=w)
        return self.inner_model.loglikelihood(Phi, Y, w)
