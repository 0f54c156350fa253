"""Emission model contract.

An emission model wraps one parametric distribution and gives it the three
operations used by latent-state inference and learning:

- ``sample(*data, observation_sequence=None)`` draws ONE new observation and
  returns a new sequence with it appended as the last row, so a trajectory is
  simulated by threading the returned sequence back in::

      seq = emission.sample(*data)
      seq = emission.sample(*data, observation_sequence=seq)
      seq = emission.sample(*data, observation_sequence=seq)

  The sequence passed in is never modified.
- ``loglikelihood(*data)`` returns one log-likelihood per observation row.
- ``fit(*data, w=None)`` updates the wrapped parameters in place by weighted
  maximum likelihood; ``w`` defaults to all ones.

New distribution families are supported by adding a wrapper subclass here and
one branch in :func:`ssmkit.emissions.factory.build_emission`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

import numpy as np

from ..errors import InvalidDataError, InvalidParameterError
from ..models.utils import check_weights, ensure_2d


class EmissionModel(ABC):
    """Base class for emission wrappers around a distribution model.

    Attribute reads and writes that the wrapper does not define itself are
    forwarded to the wrapped model, so ``emission.mean`` reads
    ``emission.inner_model.mean``.

    Attributes:
        inner_model: The wrapped distribution model. Never None.
    """

    def __init__(self, inner_model: Any):
        if inner_model is None:
            raise InvalidParameterError(f"{self.__class__.__name__} requires an inner model")
        object.__setattr__(self, "inner_model", inner_model)

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails
        if name == "inner_model":
            raise AttributeError(name)
        return getattr(self.inner_model, name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "inner_model" or name.startswith("_") or hasattr(type(self), name):
            object.__setattr__(self, name, value)
        else:
            setattr(self.inner_model, name, value)

    def validate_model(self) -> None:
        """Check the wrapped parameters. Does not modify the model."""
        self.inner_model.validate_model()

    def validate_data(self, *data, w: Optional[np.ndarray] = None) -> None:
        """Check data shapes against the wrapped model.

        Weights may also arrive positionally (a Bernoulli component's output
        entry can carry them), so ``w`` is only forwarded when given.
        """
        if w is None:
            self.inner_model.validate_data(*data)
        else:
            self.inner_model.validate_data(*data, w=w)

    @abstractmethod
    def sample(self, *data, observation_sequence=None, rng=None):
        """Return a new sequence with one sampled observation appended."""

    @abstractmethod
    def loglikelihood(self, *data) -> np.ndarray:
        """Per-observation log-likelihood, shape (n_obs,)."""

    @abstractmethod
    def fit(self, *data, w: Optional[np.ndarray] = None) -> "EmissionModel":
        """Weighted maximum likelihood fit of the wrapped model, in place."""

    def _fit_inner(self, *data, w: Optional[np.ndarray]) -> "EmissionModel":
        # The last argument holds the observations; its row count sizes w
        if not data:
            raise InvalidDataError("fit requires observations")
        Y = ensure_2d(data[-1], "Y", getattr(self.inner_model, "output_dim", None))
        w = check_weights(w, len(Y))
        self.inner_model.fit(*data, w=w)
        return self

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.inner_model!r})"


def start_sequence(observation_sequence: Optional[np.ndarray], dim: int) -> np.ndarray:
    """Return the accumulated sequence as a (t, dim) array, (0, dim) if absent."""
    if observation_sequence is None:
        return np.empty((0, dim))
    seq = np.asarray(observation_sequence, dtype=float)
    if seq.size == 0:
        return np.empty((0, dim))
    if seq.ndim == 1:
        seq = seq.reshape(1, -1)
    if seq.ndim != 2 or seq.shape[1] != dim:
        raise InvalidDataError(f"observation_sequence shape {seq.shape} does not have {dim} columns")
    return seq


def emission_sample(model: EmissionModel, *data, observation_sequence=None, rng=None):
    """Functional form of :meth:`EmissionModel.sample`."""
    return model.sample(*data, observation_sequence=observation_sequence, rng=rng)


def emission_loglikelihood(model: EmissionModel, *data) -> np.ndarray:
    """Functional form of :meth:`EmissionModel.loglikelihood`."""
    return model.loglikelihood(*data)


def emission_fit(model: EmissionModel, *data, w: Optional[np.ndarray] = None) -> EmissionModel:
    """Functional form of :meth:`EmissionModel.fit`."""
    return model.fit(*data, w=w)
