"""Dispatch from distribution models to their emission wrappers."""

from __future__ import annotations

from typing import Any

from ..errors import UnsupportedVariantError
from ..logging import get_logger
from ..models import (
    AutoRegression,
    BernoulliRegression,
    CompositeModel,
    Gaussian,
    GaussianRegression,
)
from .autoregression import AutoRegressionEmission
from .base import EmissionModel
from .composite import CompositeModelEmission
from .gaussian import GaussianEmission
from .regression import BernoulliRegressionEmission, GaussianRegressionEmission

logger = get_logger(__name__)


def build_emission(model: Any) -> EmissionModel:
    """Wrap a parameterized distribution model in its emission wrapper.

    Leaf models are wrapped directly, so the returned emission shares the
    given model object. A :class:`CompositeModel` is rebuilt from recursively
    wrapped components and wrapped as a :class:`CompositeModelEmission`. An
    emission model is returned unchanged.

    Args:
        model: Distribution model.

    Returns:
        Emission model for the given distribution.

    Raises:
        UnsupportedVariantError: If the model type has no emission wrapper.

    Example:
        >>> from ssmkit.models import Gaussian
        >>> emission = build_emission(Gaussian(output_dim=2))
        >>> type(emission).__name__
        'GaussianEmission'
    """
    if isinstance(model, EmissionModel):
        return model
    if isinstance(model, Gaussian):
        return GaussianEmission(model)
    if isinstance(model, GaussianRegression):
        return GaussianRegressionEmission(model)
    if isinstance(model, BernoulliRegression):
        return BernoulliRegressionEmission(model)
    if isinstance(model, AutoRegression):
        return AutoRegressionEmission(model)
    if isinstance(model, CompositeModel):
        components = [build_emission(component) for component in model.components]
        logger.debug("Wrapped composite of %d components", len(components))
        return CompositeModelEmission(CompositeModel(components))

    raise UnsupportedVariantError(
        f"The model {type(model).__name__} is not a supported emission model."
    )
