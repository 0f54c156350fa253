"""ssmkit - emission models for switching state-space models.

Every distribution family (Gaussian, Gaussian regression, Bernoulli
regression, autoregression, and composites of these) is exposed through one
contract: sample one observation at a time, evaluate per-observation
log-likelihoods, and fit by weighted maximum likelihood.
"""

__version__ = "0.1.0"

from .config import DEFAULT_FIT_CONFIG, FitConfig
from .emissions import (
    AutoRegressionEmission,
    BernoulliRegressionEmission,
    CompositeModelEmission,
    EmissionModel,
    GaussianEmission,
    GaussianRegressionEmission,
    build_emission,
    emission_fit,
    emission_loglikelihood,
    emission_sample,
)
from .errors import (
    InvalidDataError,
    InvalidParameterError,
    SSMKitError,
    UnsupportedVariantError,
)
from .logging import configure_logging, get_logger, set_log_level
from .models import (
    AutoRegression,
    BernoulliRegression,
    CompositeModel,
    Gaussian,
    GaussianRegression,
    Model,
    lag_design,
)
from .switching import (
    SwitchingModel,
    gaussian_switching_model,
    initialize_state_distribution,
    initialize_transition_matrix,
    loglikelihood_matrix,
    sample_trajectory,
    spawn_generators,
    switching_autoregression,
    switching_bernoulli_regression,
    switching_gaussian_regression,
    weighted_fit,
)

__all__ = [
    "__version__",
    # Configuration
    "FitConfig",
    "DEFAULT_FIT_CONFIG",
    # Errors
    "SSMKitError",
    "InvalidParameterError",
    "InvalidDataError",
    "UnsupportedVariantError",
    # Logging
    "get_logger",
    "set_log_level",
    "configure_logging",
    # Distribution models
    "Model",
    "Gaussian",
    "GaussianRegression",
    "BernoulliRegression",
    "AutoRegression",
    "CompositeModel",
    "lag_design",
    # Emissions
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
    # Switching models
    "SwitchingModel",
    "initialize_transition_matrix",
    "initialize_state_distribution",
    "spawn_generators",
    "gaussian_switching_model",
    "switching_gaussian_regression",
    "switching_bernoulli_regression",
    "switching_autoregression",
    "loglikelihood_matrix",
    "weighted_fit",
    "sample_trajectory",
]
