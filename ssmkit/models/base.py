"""Base class for the parametric distribution models."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from ..config import DEFAULT_FIT_CONFIG, FitConfig


class Model(ABC):
    """Parametric distribution with sample, log-likelihood and weighted fit.

    Subclasses own their parameters and update them in place in :meth:`fit`.

    Attributes:
        config: Numerical settings used by :meth:`fit`.
        rng: Default random number generator used by :meth:`sample`. When
            not given, each model draws fresh OS entropy, so two default-built
            models produce independent streams.
    """

    def __init__(
        self,
        config: Optional[FitConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        self.config = config if config is not None else DEFAULT_FIT_CONFIG
        self.rng = rng if rng is not None else np.random.default_rng()

    def _rng(self, rng: Optional[np.random.Generator]) -> np.random.Generator:
        return rng if rng is not None else self.rng

    @abstractmethod
    def validate_model(self) -> None:
        """Raise InvalidParameterError if the parameters are inconsistent."""

    @abstractmethod
    def validate_data(self, *data, w: Optional[np.ndarray] = None) -> None:
        """Raise InvalidDataError if data does not match the model's shapes."""

    @abstractmethod
    def sample(self, *data, **kwargs) -> np.ndarray:
        """Draw observations from the model."""

    @abstractmethod
    def loglikelihood(self, *data) -> np.ndarray:
        """Per-observation log-likelihood, shape (n_obs,)."""

    @abstractmethod
    def fit(self, *data, w: Optional[np.ndarray] = None) -> "Model":
        """Weighted maximum likelihood fit, updating parameters in place."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
