"""Tests for shared model helpers."""

import numpy as np
import pytest

from ssmkit.errors import InvalidDataError, InvalidParameterError
from ssmkit.models.utils import (
    add_intercept,
    check_covariance,
    check_weights,
    ensure_2d,
    lag_design,
    lag_window,
    log_normal_pdf_rows,
    weighted_covariance,
)


class TestEnsure2d:
    def test_scalar_and_vector(self):
        assert ensure_2d(3.0).shape == (1, 1)
        assert ensure_2d(np.arange(4)).shape == (4, 1)
        assert ensure_2d(np.arange(4), dim=1).shape == (4, 1)
        assert ensure_2d(np.arange(4), dim=4).shape == (1, 4)
        assert ensure_2d(np.arange(4), dim=2).shape == (4, 1)

    def test_rejects_3d(self):
        with pytest.raises(InvalidDataError):
            ensure_2d(np.zeros((2, 2, 2)))

    def test_rejects_nan(self):
        with pytest.raises(InvalidDataError, match="NaN"):
            ensure_2d(np.array([[1.0, np.nan]]))


class TestCheckWeights:
    def test_default_is_ones(self):
        assert np.array_equal(check_weights(None, 4), np.ones(4))

    def test_length_mismatch(self):
        with pytest.raises(InvalidDataError, match="weight length 3"):
            check_weights(np.ones(3), 4)

    def test_negative_weights(self):
        with pytest.raises(InvalidDataError, match="non-negative"):
            check_weights(np.array([1.0, -0.1]), 2)


class TestCheckCovariance:
    def test_not_positive_definite(self):
        with pytest.raises(InvalidParameterError, match="positive definite"):
            check_covariance(np.array([[1.0, 2.0], [2.0, 1.0]]), 2)

    def test_not_symmetric(self):
        with pytest.raises(InvalidParameterError, match="symmetric"):
            check_covariance(np.array([[1.0, 0.5], [0.0, 1.0]]), 2)

    def test_wrong_shape(self):
        with pytest.raises(InvalidParameterError, match="shape"):
            check_covariance(np.eye(3), 2)

    def test_missing(self):
        with pytest.raises(InvalidParameterError, match="not set"):
            check_covariance(None, 2)


def test_log_normal_pdf_rows_standard_1d():
    """Standard normal log density at zero."""
    result = log_normal_pdf_rows(np.zeros((1, 1)), np.eye(1))
    assert result[0] == pytest.approx(-0.5 * np.log(2 * np.pi))


def test_log_normal_pdf_rows_matches_direct_formula(rng):
    """Cholesky-based evaluation equals the textbook formula row by row."""
    cov = np.array([[2.0, 0.4, 0.0], [0.4, 1.0, 0.2], [0.0, 0.2, 0.5]])
    residuals = rng.normal(size=(6, 3))

    cov_inv = np.linalg.inv(cov)
    _, log_det = np.linalg.slogdet(cov)
    expected = np.array(
        [-1.5 * np.log(2 * np.pi) - 0.5 * log_det - 0.5 * r @ cov_inv @ r for r in residuals]
    )
    assert np.allclose(log_normal_pdf_rows(residuals, cov), expected, atol=1e-12)


def test_weighted_covariance_zero_weights_ignored():
    residuals = np.array([[1.0], [-1.0], [100.0]])
    cov = weighted_covariance(residuals, np.array([1.0, 1.0, 0.0]))
    assert cov[0, 0] == pytest.approx(1.0)


def test_weighted_covariance_requires_mass():
    with pytest.raises(InvalidDataError, match="positive total mass"):
        weighted_covariance(np.ones((2, 1)), np.zeros(2))


class TestAddIntercept:
    def test_prepends_ones(self):
        X = add_intercept(np.array([[2.0], [3.0]]), n_coef=2)
        assert np.array_equal(X, [[1.0, 2.0], [1.0, 3.0]])

    def test_keeps_supplied_intercept(self):
        X = np.array([[1.0, 2.0]])
        assert add_intercept(X, n_coef=2) is X

    def test_wrong_width(self):
        with pytest.raises(InvalidDataError):
            add_intercept(np.ones((2, 4)), n_coef=2)


class TestLagDesign:
    def test_univariate_order_two(self):
        Y_prev = np.array([[1.0], [2.0]])
        Y = np.array([[3.0], [4.0], [5.0]])
        X = lag_design(Y_prev, Y, order=2)
        assert np.array_equal(X, [[2.0, 1.0], [3.0, 2.0], [4.0, 3.0]])

    def test_multivariate_rows_concatenated_most_recent_first(self):
        Y_prev = np.array([[1.0, 10.0]])
        Y = np.array([[2.0, 20.0], [3.0, 30.0]])
        X = lag_design(Y_prev, Y, order=1)
        assert np.array_equal(X, [[1.0, 10.0], [2.0, 20.0]])

    def test_only_last_order_rows_of_history_used(self):
        Y_prev = np.array([[99.0], [1.0], [2.0]])
        X = lag_design(Y_prev, np.array([[3.0]]), order=2)
        assert np.array_equal(X, [[2.0, 1.0]])

    def test_short_history(self):
        with pytest.raises(InvalidDataError, match="at least 2 rows"):
            lag_design(np.zeros((1, 1)), np.zeros((3, 1)), order=2)

    def test_window_matches_design(self):
        """The sampling window equals the design row of the next target."""
        history = np.array([[1.0, 0.5], [2.0, 0.0], [3.0, -0.5]])
        window = lag_window(history, order=2)
        design = lag_design(history[:2], history[2:], order=2)
        assert np.array_equal(lag_window(history[:2], 2), design[0:1])
        assert window.shape == (1, 4)
        assert np.array_equal(window, [[3.0, -0.5, 2.0, 0.0]])
