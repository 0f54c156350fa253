"""Parametric distribution models used as emission building blocks.

This module provides:
- Gaussian: multivariate normal
- GaussianRegression: linear regression with Gaussian noise
- BernoulliRegression: logistic regression for binary responses
- AutoRegression: vector autoregression on a lag window
- CompositeModel: independent components combined into one joint model

Every model validates its own parameters and data, samples, evaluates
per-observation log-likelihoods and fits by weighted maximum likelihood.
"""

from .autoregression import AutoRegression
from .base import Model
from .composite import CompositeModel
from .gaussian import Gaussian
from .regression import BernoulliRegression, GaussianRegression
from .utils import lag_design, log_normal_pdf_rows

__all__ = [
    "Model",
    "Gaussian",
    "GaussianRegression",
    "BernoulliRegression",
    "AutoRegression",
    "CompositeModel",
    "lag_design",
    "log_normal_pdf_rows",
]
