"""Emission models: a uniform sample / log-likelihood / fit contract.

Each wrapper adapts one distribution model from :mod:`ssmkit.models` so that
latent-state algorithms can hold one emission per state and treat every
distribution family the same way.

Example:
    >>> import numpy as np
    >>> from ssmkit.models import Gaussian
    >>> from ssmkit.emissions import build_emission
    >>> emission = build_emission(Gaussian(output_dim=2))
    >>> seq = emission.sample()
    >>> seq = emission.sample(observation_sequence=seq)
    >>> seq.shape
    (2, 2)
    >>> emission.loglikelihood(np.zeros((1, 2)))
    array([-1.83787707])
"""

from .autoregression import AutoRegressionEmission
from .base import (
    EmissionModel,
    emission_fit,
    emission_loglikelihood,
    emission_sample,
)
from .composite import CompositeModelEmission
from .factory import build_emission
from .gaussian import GaussianEmission
from .regression import BernoulliRegressionEmission, GaussianRegressionEmission

__all__ = [
    "EmissionModel",
    "GaussianEmission",
    "GaussianRegressionEmission",
    "BernoulliRegressionEmission",
    "AutoRegressionEmission",
    "CompositeModelEmission",
    "build_emission",
    "emission_sample",
    "emission_loglikelihood",
    "emission_fit",
]
