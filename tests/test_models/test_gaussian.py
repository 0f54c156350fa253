"""Tests for the Gaussian distribution model."""

import numpy as np
import pytest

from ssmkit.config import FitConfig
from ssmkit.errors import InvalidDataError, InvalidParameterError
from ssmkit.models import Gaussian


def test_defaults_are_standard_normal():
    model = Gaussian(output_dim=3)
    assert np.array_equal(model.mean, np.zeros(3))
    assert np.array_equal(model.cov, np.eye(3))
    model.validate_model()


def test_invalid_output_dim():
    with pytest.raises(InvalidParameterError):
        Gaussian(output_dim=0)


def test_validate_model_mean_shape():
    model = Gaussian(output_dim=2, mean=np.zeros(3))
    with pytest.raises(InvalidParameterError, match="mean shape"):
        model.validate_model()


def test_validate_model_missing_mean():
    model = Gaussian(output_dim=2)
    model.mean = None
    with pytest.raises(InvalidParameterError, match="mean is not set"):
        model.validate_model()


def test_validate_data_columns(gaussian_model):
    with pytest.raises(InvalidDataError, match="columns"):
        gaussian_model.validate_data(np.zeros((4, 3)))


def test_sample_shape(gaussian_model, rng):
    assert gaussian_model.sample(5, rng=rng).shape == (5, 2)


def test_loglikelihood_one_per_row(gaussian_model, rng):
    Y = rng.normal(size=(9, 2))
    assert gaussian_model.loglikelihood(Y).shape == (9,)


def test_fit_recovers_parameters(rng):
    true_mean = np.array([2.0, -1.0])
    true_cov = np.array([[1.0, 0.5], [0.5, 2.0]])
    Y = rng.multivariate_normal(true_mean, true_cov, size=5000)

    model = Gaussian(output_dim=2).fit(Y)

    assert np.allclose(model.mean, true_mean, atol=0.1)
    assert np.allclose(model.cov, true_cov, atol=0.15)


def test_fit_weights_select_observations():
    """Zero-weight rows do not influence the estimate."""
    Y = np.array([[0.0], [2.0], [100.0]])
    model = Gaussian(output_dim=1, config=FitConfig(reg_covar=0.0))
    model.fit(Y, w=np.array([1.0, 1.0, 0.0]))
    assert model.mean[0] == pytest.approx(1.0)
    assert model.cov[0, 0] == pytest.approx(1.0)


def test_fit_adds_covariance_regularization():
    Y = np.ones((5, 2))
    model = Gaussian(output_dim=2, config=FitConfig(reg_covar=1e-3)).fit(Y)
    assert np.allclose(model.cov, 1e-3 * np.eye(2))
    model.validate_model()


def test_fit_weight_length_mismatch(gaussian_model):
    with pytest.raises(InvalidDataError, match="weight length"):
        gaussian_model.fit(np.zeros((4, 2)), w=np.ones(3))


def test_default_generators_are_independent():
    a, b = Gaussian(output_dim=2), Gaussian(output_dim=2)
    assert a.rng is not b.rng
    assert not np.allclose(a.sample(5), b.sample(5))


def test_flat_vector_is_one_observation():
    model = Gaussian(output_dim=2)
    ll = model.loglikelihood([0.0, 0.0])
    assert ll.shape == (1,)
    assert ll[0] == pytest.approx(-np.log(2 * np.pi))
    model.validate_data(np.array([1.0, 2.0]))
