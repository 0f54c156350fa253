"""Tests for Gaussian and Bernoulli regression models."""

import numpy as np
import pytest

from ssmkit.errors import InvalidDataError, InvalidParameterError
from ssmkit.models import BernoulliRegression, GaussianRegression


class TestGaussianRegression:
    def test_default_shapes(self):
        model = GaussianRegression(input_dim=3, output_dim=2)
        assert model.beta.shape == (4, 2)
        assert model.cov.shape == (2, 2)
        model.validate_model()

    def test_no_intercept_shapes(self):
        model = GaussianRegression(input_dim=3, output_dim=2, include_intercept=False)
        assert model.beta.shape == (3, 2)

    def test_validate_model_beta_shape(self):
        model = GaussianRegression(input_dim=2, output_dim=1, beta=np.zeros((2, 1)))
        with pytest.raises(InvalidParameterError, match="beta shape"):
            model.validate_model()

    def test_validate_model_negative_ridge(self):
        model = GaussianRegression(input_dim=2, output_dim=1, ridge=-1.0)
        with pytest.raises(InvalidParameterError, match="ridge"):
            model.validate_model()

    def test_validate_data_row_mismatch(self, regression_model):
        with pytest.raises(InvalidDataError, match="rows"):
            regression_model.validate_data(np.zeros((5, 2)), np.zeros((4, 2)))

    def test_intercept_column_accepted(self, regression_model, rng):
        """Covariates with an explicit column of ones give the same result."""
        Phi = rng.normal(size=(6, 2))
        Y = rng.normal(size=(6, 2))
        with_ones = np.column_stack([np.ones(6), Phi])
        assert np.allclose(
            regression_model.loglikelihood(Phi, Y),
            regression_model.loglikelihood(with_ones, Y),
        )

    def test_sample_shape(self, regression_model, rng):
        assert regression_model.sample(rng.normal(size=(4, 2)), rng=rng).shape == (4, 2)

    def test_loglikelihood_closed_form(self):
        """1D regression log density equals the normal formula."""
        model = GaussianRegression(
            input_dim=1, output_dim=1, beta=np.array([[1.0], [2.0]]), cov=np.array([[0.5]])
        )
        Phi = np.array([[0.0], [1.0]])
        Y = np.array([[1.0], [4.0]])
        resid = np.array([0.0, 1.0])
        expected = -0.5 * np.log(2 * np.pi * 0.5) - resid**2 / (2 * 0.5)
        assert np.allclose(model.loglikelihood(Phi, Y), expected)

    def test_fit_recovers_coefficients(self, rng):
        true_beta = np.array([[0.5, -1.0], [2.0, 0.0], [0.0, 1.5]])
        Phi = rng.normal(size=(1000, 2))
        Y = np.column_stack([np.ones(1000), Phi]) @ true_beta + 0.1 * rng.normal(size=(1000, 2))

        model = GaussianRegression(input_dim=2, output_dim=2).fit(Phi, Y)

        assert np.allclose(model.beta, true_beta, atol=0.05)
        assert np.allclose(model.cov, 0.01 * np.eye(2), atol=0.005)

    def test_fit_weighted_matches_subset(self, rng):
        """Binary weights are equivalent to fitting on the selected rows."""
        Phi = rng.normal(size=(40, 2))
        Y = rng.normal(size=(40, 1))
        w = np.zeros(40)
        w[:25] = 1.0

        weighted = GaussianRegression(input_dim=2, output_dim=1).fit(Phi, Y, w)
        subset = GaussianRegression(input_dim=2, output_dim=1).fit(Phi[:25], Y[:25])

        assert np.allclose(weighted.beta, subset.beta)
        assert np.allclose(weighted.cov, subset.cov)

    def test_ridge_shrinks_slopes_not_intercept(self, rng):
        Phi = rng.normal(size=(50, 1))
        Y = 3.0 + 2.0 * Phi + 0.1 * rng.normal(size=(50, 1))

        plain = GaussianRegression(input_dim=1, output_dim=1).fit(Phi, Y)
        ridged = GaussianRegression(input_dim=1, output_dim=1, ridge=1e4).fit(Phi, Y)

        assert abs(ridged.beta[1, 0]) < abs(plain.beta[1, 0])
        assert abs(ridged.beta[1, 0]) < 0.1
        assert ridged.beta[0, 0] == pytest.approx(np.mean(Y), abs=0.2)

    def test_fit_weight_length_mismatch(self, regression_model):
        with pytest.raises(InvalidDataError, match="weight length"):
            regression_model.fit(np.zeros((5, 2)), np.zeros((5, 2)), w=np.ones(4))


class TestBernoulliRegression:
    def test_default_beta(self):
        model = BernoulliRegression(input_dim=2)
        assert np.array_equal(model.beta, np.zeros(3))
        model.validate_model()

    def test_validate_model_beta_shape(self):
        model = BernoulliRegression(input_dim=2, beta=np.zeros(2))
        with pytest.raises(InvalidParameterError, match="beta shape"):
            model.validate_model()

    def test_validate_data_requires_binary_range(self, bernoulli_model):
        with pytest.raises(InvalidDataError, match=r"\[0, 1\]"):
            bernoulli_model.validate_data(np.zeros((2, 2)), np.array([[0.0], [2.0]]))

    def test_validate_data_single_column(self, bernoulli_model):
        with pytest.raises(InvalidDataError, match="single column"):
            bernoulli_model.validate_data(np.zeros((2, 2)), np.zeros((2, 2)))

    def test_sample_is_binary(self, bernoulli_model, rng):
        draws = bernoulli_model.sample(rng.normal(size=(50, 2)), rng=rng)
        assert draws.shape == (50, 1)
        assert set(np.unique(draws)) <= {0.0, 1.0}

    def test_loglikelihood_half_probability(self):
        model = BernoulliRegression(input_dim=1, include_intercept=False, beta=np.array([0.0]))
        ll = model.loglikelihood(np.array([[0.0]]), np.array([[1.0]]), np.array([1.0]))
        assert ll[0] == pytest.approx(np.log(0.5))

    def test_loglikelihood_is_weighted(self, bernoulli_model, rng):
        Phi = rng.normal(size=(5, 2))
        Y = np.array([[1.0], [0.0], [1.0], [1.0], [0.0]])
        w = np.array([0.0, 0.5, 1.0, 2.0, 1.0])
        unweighted = bernoulli_model.loglikelihood(Phi, Y)
        assert np.allclose(bernoulli_model.loglikelihood(Phi, Y, w), w * unweighted)

    def test_loglikelihood_saturated_predictor_finite(self):
        model = BernoulliRegression(input_dim=1, include_intercept=False, beta=np.array([1000.0]))
        ll = model.loglikelihood(np.array([[1.0], [1.0]]), np.array([[1.0], [0.0]]))
        assert ll[0] == pytest.approx(0.0)
        assert np.isfinite(ll[1])
        assert ll[1] == pytest.approx(-1000.0)

    def test_fit_recovers_coefficients(self, rng):
        true_beta = np.array([0.5, -1.0, 2.0])
        Phi = rng.normal(size=(4000, 2))
        p = 1.0 / (1.0 + np.exp(-(true_beta[0] + Phi @ true_beta[1:])))
        Y = rng.binomial(1, p).astype(float).reshape(-1, 1)

        model = BernoulliRegression(input_dim=2).fit(Phi, Y)

        assert np.allclose(model.beta, true_beta, atol=0.3)

    def test_fit_weighted_matches_subset(self, rng):
        Phi = rng.normal(size=(60, 1))
        Y = (Phi[:, 0] + rng.normal(size=60) > 0).astype(float).reshape(-1, 1)
        w = np.zeros(60)
        w[:40] = 1.0

        weighted = BernoulliRegression(input_dim=1).fit(Phi, Y, w)
        subset = BernoulliRegression(input_dim=1).fit(Phi[:40], Y[:40])

        assert np.allclose(weighted.beta, subset.beta, atol=1e-4)

    def test_fit_improves_likelihood(self, bernoulli_model, rng):
        Phi = rng.normal(size=(200, 2))
        Y = bernoulli_model.sample(Phi, rng=rng)
        model = BernoulliRegression(input_dim=2)
        before = np.sum(model.loglikelihood(Phi, Y))
        model.fit(Phi, Y)
        assert np.sum(model.loglikelihood(Phi, Y)) > before
