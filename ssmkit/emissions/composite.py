"""Composite emission: independent emissions sharing one latent state."""

from __future__ import annotations

from typing import Any, List, Optional, Sequence

import numpy as np

from ..errors import InvalidDataError, UnsupportedVariantError
from ..models import CompositeModel
from ..models.composite import as_args
from .base import EmissionModel


class CompositeModelEmission(EmissionModel):
    """Emission wrapper for a :class:`ssmkit.models.CompositeModel` of emissions.

    Components are assumed conditionally independent given the latent state,
    so the joint log-likelihood of an observation is the sum of the component
    log-likelihoods of that observation.

    Data arguments are lists with one entry per component, in component order.
    Each entry holds that component's positional arguments: a tuple, None for
    no arguments, or a single array. For example, for a Gaussian component
    followed by a Gaussian regression component::

        input_data = [(), (Phi,)]
        output_data = [(Y1,), (Y2,)]
    """

    inner_model: CompositeModel

    @property
    def components(self) -> List[EmissionModel]:
        return self.inner_model.components

    def validate_model(self) -> None:
        """Check every component is an emission model with valid parameters.

        Raises:
            UnsupportedVariantError: If a component is not an EmissionModel.
        """
        for component in self.components:
            if not isinstance(component, EmissionModel):
                raise UnsupportedVariantError(
                    f"The model {type(component).__name__} is not a valid emission model."
                )
        self.inner_model.validate_model()

    def sample(
        self,
        input_data: Optional[Sequence[Any]] = None,
        observation_sequence: Optional[Sequence[Any]] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> List[Any]:
        """Extend every component's sequence by one observation.

        Args:
            input_data: Per-component sampling arguments. If None, no component
                receives arguments.
            observation_sequence: Per-component sequences so far. If None or
                empty, each component starts a new sequence.
            rng: Random number generator shared by all components.

        Returns:
            New list with one sequence per component, index aligned with the
            components.
        """
        self.validate_model()
        n = len(self.components)
        if input_data is None:
            input_data = [()] * n
        if len(input_data) != n:
            raise InvalidDataError(f"input_data has {len(input_data)} entries, expected {n}")

        if observation_sequence is None or len(observation_sequence) == 0:
            return [
                component.sample(*as_args(inputs), rng=rng)
                for component, inputs in zip(self.components, input_data)
            ]

        if len(observation_sequence) != n:
            raise InvalidDataError(
                f"observation_sequence has {len(observation_sequence)} entries, expected {n}"
            )
        return [
            component.sample(*as_args(inputs), observation_sequence=seq, rng=rng)
            for component, inputs, seq in zip(self.components, input_data, observation_sequence)
        ]

    def loglikelihood(
        self, input_data: Sequence[Any], output_data: Sequence[Any]
    ) -> np.ndarray:
        """Per-observation joint log-likelihood, shape (n_obs,).

        Each entry is the sum over components of that observation's component
        log-likelihood; observations are never summed together.

        Raises:
            InvalidDataError: If either list does not have one entry per
                component, or components disagree on the observation count.
        """
        self.validate_model()
        self.validate_data(input_data, output_data)
        return self.inner_model.loglikelihood(input_data, output_data)

    def fit(
        self,
        input_data: Sequence[Any],
        output_data: Sequence[Any],
        w: Optional[np.ndarray] = None,
    ) -> "CompositeModelEmission":
        """Fit every component on its own data with the shared weights.

        Components are fitted in order. If one fails, components fitted before
        it keep their new parameters and the error propagates.
        """
        self.validate_model()
        self.inner_model.fit(input_data, output_data, w=w)
        return self
