"""Composite model: an ordered collection of independent sub-models."""

from __future__ import annotations

from typing import Any, List, Optional, Sequence, Tuple

import numpy as np

from ..errors import InvalidDataError, InvalidParameterError
from .base import Model


def as_args(entry: Any) -> tuple:
    """Positional arguments for one component.

    A tuple is used as is, None means no arguments and anything else is a
    single argument. Lists are single arguments too, which is how a nested
    composite receives its own per-component list.
    """
    if entry is None:
        return ()
    if isinstance(entry, tuple):
        return entry
    return (entry,)


def _weighted_args(inputs: Any, outputs: Any, w: Optional[np.ndarray]) -> Tuple[tuple, dict]:
    """Positional and keyword arguments for one component under shared weights.

    An output entry may carry its own weights after the responses (as a
    Bernoulli component's does). Shared weights `w` replace them; without `w`
    the carried weights are passed on positionally.
    """
    outputs = as_args(outputs)
    if w is None:
        return (*as_args(inputs), *outputs), {}
    return (*as_args(inputs), *outputs[:1]), {"w": w}


class CompositeModel(Model):
    """Joint model over several components assumed conditionally independent.

    Component data is supplied as lists with one entry per component, in
    component order. Each entry holds that component's positional arguments
    (see :func:`as_args`).

    Attributes:
        components: Ordered sub-models. May contain other composites.
    """

    def __init__(self, components: Sequence[Any]):
        super().__init__()
        self.components: List[Any] = list(components)

    @property
    def n_components(self) -> int:
        return len(self.components)

    def validate_model(self) -> None:
        if not self.components:
            raise InvalidParameterError("CompositeModel needs at least one component")
        for component in self.components:
            component.validate_model()

    def validate_data(
        self,
        input_data: Sequence[Any],
        output_data: Optional[Sequence[Any]] = None,
        w: Optional[np.ndarray] = None,
    ) -> None:
        self._check_count(input_data, "input_data")
        if output_data is not None:
            self._check_count(output_data, "output_data")
            for component, inputs, outputs in zip(self.components, input_data, output_data):
                args, kwargs = _weighted_args(inputs, outputs, w)
                component.validate_data(*args, **kwargs)

    def _check_count(self, data: Optional[Sequence[Any]], name: str) -> None:
        if data is None or len(data) != self.n_components:
            got = "None" if data is None else len(data)
            raise InvalidDataError(
                f"{name} has {got} entries, expected one per component ({self.n_components})"
            )

    def sample(
        self,
        input_data: Optional[Sequence[Any]] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> List[np.ndarray]:
        """Draw from every component, returning one array per component."""
        if input_data is None:
            input_data = [()] * self.n_components
        self._check_count(input_data, "input_data")
        return [
            component.sample(*as_args(inputs), rng=rng)
            for component, inputs in zip(self.components, input_data)
        ]

    def loglikelihood(self, input_data: Sequence[Any], output_data: Sequence[Any]) -> np.ndarray:
        """Per-observation sum of the component log-likelihoods, shape (n_obs,)."""
        self._check_count(input_data, "input_data")
        self._check_count(output_data, "output_data")

        total = None
        for component, inputs, outputs in zip(self.components, input_data, output_data):
            ll = np.asarray(component.loglikelihood(*as_args(inputs), *as_args(outputs)))
            if total is None:
                total = ll.astype(float)
            elif ll.shape != total.shape:
                raise InvalidDataError(
                    f"component observation counts differ: {ll.shape[0]} != {total.shape[0]}"
                )
            else:
                total = total + ll
        return total

    def fit(
        self,
        input_data: Sequence[Any],
        output_data: Sequence[Any],
        w: Optional[np.ndarray] = None,
    ) -> "CompositeModel":
        """Fit each component on its own data with the shared weights.

        Components are fitted in order; if one fails, earlier components keep
        their updated parameters and the error propagates.
        Weights carried in an output entry are replaced by `w` when it is given.
        """
        self._check_count(input_data, "input_data")
        self._check_count(output_data, "output_data")
        for component, inputs, outputs in zip(self.components, input_data, output_data):
            args, kwargs = _weighted_args(inputs, outputs, w)
            component.fit(*args, **kwargs)
        return self

    def __repr__(self) -> str:
        inner = ", ".join(repr(c) for c in self.components)
        return f"CompositeModel([{inner}])"
