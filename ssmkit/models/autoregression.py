"""Vector autoregressive distribution model.

Models each observation as a Gaussian regression on its own lag window:
    y_t = c + A_1 y_{t-1} + ... + A_p y_{t-p} + eps_t,   eps_t ~ N(0, cov)

The lag window is flattened most recent first, see :func:`lag_design`.

References:
    Hamilton (1994): Time Series Analysis, Chapter 11.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from ..config import FitConfig
from ..errors import InvalidDataError, InvalidParameterError
from .base import Model
from .regression import GaussianRegression
from .utils import check_weights, ensure_2d, lag_design, lag_window


class AutoRegression(Model):
    """Autoregression of order p on d-dimensional observations.

    Parameters live on an inner :class:`GaussianRegression` with
    input_dim = output_dim * order; `beta`, `cov` and `ridge` are exposed as
    properties that read and write through to it.

    Attributes:
        output_dim: Observation dimension d.
        order: Number of lags p.
        regression: Inner Gaussian regression on the lag design.
    """

    def __init__(
        self,
        output_dim: int,
        order: int,
        include_intercept: bool = True,
        beta: Optional[np.ndarray] = None,
        cov: Optional[np.ndarray] = None,
        ridge: float = 0.0,
        config: Optional[FitConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        super().__init__(config=config, rng=rng)
        if order < 1:
            raise InvalidParameterError(f"order must be >= 1, got {order}")
        if output_dim < 1:
            raise InvalidParameterError(f"output_dim must be >= 1, got {output_dim}")
        self.output_dim = output_dim
        self.order = order
        self.regression = GaussianRegression(
            input_dim=output_dim * order,
            output_dim=output_dim,
            include_intercept=include_intercept,
            beta=beta,
            cov=cov,
            ridge=ridge,
            config=self.config,
            rng=self.rng,
        )

    @property
    def include_intercept(self) -> bool:
        return self.regression.include_intercept

    @property
    def beta(self) -> np.ndarray:
        return self.regression.beta

    @beta.setter
    def beta(self, value: np.ndarray) -> None:
        self.regression.beta = np.asarray(value, dtype=float)

    @property
    def cov(self) -> np.ndarray:
        return self.regression.cov

    @cov.setter
    def cov(self, value: np.ndarray) -> None:
        self.regression.cov = np.asarray(value, dtype=float)

    @property
    def ridge(self) -> float:
        return self.regression.ridge

    @ridge.setter
    def ridge(self, value: float) -> None:
        self.regression.ridge = value

    def validate_model(self) -> None:
        if self.regression.input_dim != self.output_dim * self.order:
            raise InvalidParameterError(
                f"inner regression input_dim {self.regression.input_dim} != "
                f"output_dim * order = {self.output_dim * self.order}"
            )
        self.regression.validate_model()

    def validate_data(
        self,
        Y_prev: np.ndarray,
        Y: Optional[np.ndarray] = None,
        w: Optional[np.ndarray] = None,
    ) -> None:
        Y_prev = ensure_2d(Y_prev, "Y_prev", self.output_dim)
        if Y_prev.shape[1] != self.output_dim:
            raise InvalidDataError(
                f"Y_prev has {Y_prev.shape[1]} columns, expected {self.output_dim}"
            )
        if len(Y_prev) < self.order:
            raise InvalidDataError(f"Y_prev must have at least {self.order} rows, got {len(Y_prev)}")
        if Y is not None:
            Y = ensure_2d(Y, "Y", self.output_dim)
            if Y.shape[1] != self.output_dim:
                raise InvalidDataError(f"Y has {Y.shape[1]} columns, expected {self.output_dim}")
            if w is not None:
                check_weights(w, len(Y))

    def to_regression_data(self, Y_prev: np.ndarray, Y: np.ndarray) -> np.ndarray:
        """Lag design matrix pairing each row of Y with its preceding `order` rows."""
        return lag_design(
            ensure_2d(Y_prev, "Y_prev", self.output_dim),
            ensure_2d(Y, "Y", self.output_dim),
            self.order,
        )

    def sample(
        self,
        Y_prev: np.ndarray,
        n: int = 1,
        rng: Optional[np.random.Generator] = None,
    ) -> np.ndarray:
        """Simulate n steps forward from the history Y_prev.

        Args:
            Y_prev: History, shape (m, output_dim) with m >= order.
            n: Number of steps to simulate.
            rng: Random number generator. If None, uses self.rng.

        Returns:
            Simulated observations, shape (n, output_dim).
        """
        history = ensure_2d(Y_prev, "Y_prev", self.output_dim)
        rng = self._rng(rng)
        samples = np.zeros((n, self.output_dim))
        for t in range(n):
            x = lag_window(history, self.order)
            samples[t] = self.regression.sample(x, rng=rng)[0]
            history = np.vstack([history, samples[t : t + 1]])
        return samples

    def loglikelihood(self, Y_prev: np.ndarray, Y: np.ndarray) -> np.ndarray:
        return self.regression.loglikelihood(self.to_regression_data(Y_prev, Y), Y)

    def fit(
        self, Y_prev: np.ndarray, Y: np.ndarray, w: Optional[np.ndarray] = None
    ) -> "AutoRegression":
        """Weighted least squares fit of the lag coefficients and noise covariance."""
        self.validate_data(Y_prev, Y, w)
        self.regression.fit(self.to_regression_data(Y_prev, Y), Y, w)
        return self

    def __repr__(self) -> str:
        return f"AutoRegression(output_dim={self.output_dim}, order={self.order})"
