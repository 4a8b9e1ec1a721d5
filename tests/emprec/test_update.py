"""
Tests for the M-step (moment update and graphical lasso update).
"""

import numpy as np
import pytest

from emgaussian.core.exceptions import (
    DimensionError,
    NotPositiveDefiniteError,
    SingularMatrixError,
    ValidationError,
)
from emgaussian.emprec import update_moments, update_parameters
from emgaussian.emprec._update import glasso_update


class TestUpdateParameters:

    def test_complete_data_mle(self, rng):
        X = rng.standard_normal((50, 3)) @ np.array([[1.0, 0.3, 0.0],
                                                     [0.0, 1.0, 0.5],
                                                     [0.0, 0.0, 1.0]])
        mu, sigma, K = update_parameters(X.sum(axis=0), X.T @ X, 50)
        np.testing.assert_allclose(mu, X.mean(axis=0), rtol=1e-12)
        np.testing.assert_allclose(sigma, np.cov(X, rowvar=False, bias=True), atol=1e-12)
        np.testing.assert_allclose(K @ sigma, np.eye(3), atol=1e-10)

    def test_outputs_symmetric(self, rng):
        X = rng.standard_normal((20, 4))
        _, sigma, K = update_parameters(X.sum(axis=0), X.T @ X, 20)
        np.testing.assert_array_equal(sigma, sigma.T)
        np.testing.assert_array_equal(K, K.T)

    def test_stateless(self, rng):
        X = rng.standard_normal((10, 2))
        t1, t2 = X.sum(axis=0), X.T @ X
        first = update_parameters(t1, t2, 10)
        second = update_parameters(t1, t2, 10)
        for a, b in zip(first, second):
            np.testing.assert_array_equal(a, b)

    def test_singular_covariance(self):
        with pytest.raises(SingularMatrixError):
            update_parameters(np.zeros(2), np.zeros((2, 2)), 1)

    def test_indefinite_covariance(self):
        t2 = np.array([[1.0, 2.0], [2.0, 1.0]])
        with pytest.raises(NotPositiveDefiniteError):
            update_parameters(np.zeros(2), t2, 1)

    @pytest.mark.parametrize("n", [0, -3, 2.5])
    def test_invalid_n(self, n):
        with pytest.raises(ValidationError, match="n"):
            update_parameters(np.zeros(2), np.eye(2), n)

    def test_t2_shape(self):
        with pytest.raises(DimensionError):
            update_parameters(np.zeros(2), np.eye(3), 5)

    def test_t1_must_be_vector(self):
        with pytest.raises(DimensionError):
            update_moments(np.zeros((2, 1)), np.eye(2), 5)


class TestUpdateMoments:

    def test_values(self):
        t1 = np.array([2.0, 4.0])
        t2 = np.array([[4.0, 2.0], [2.0, 10.0]])
        mu, sigma = update_moments(t1, t2, 2)
        np.testing.assert_allclose(mu, [1.0, 2.0])
        np.testing.assert_allclose(sigma, [[1.0, -1.0], [-1.0, 1.0]])


class TestGlassoUpdate:

    @pytest.fixture
    def sigma(self):
        return np.array([
            [1.0, 0.4, 0.1],
            [0.4, 1.0, 0.3],
            [0.1, 0.3, 1.0],
        ])

    def test_large_penalty_gives_diagonal(self, sigma):
        _, K = glasso_update(sigma, 0.5)
        off = K[~np.eye(3, dtype=bool)]
        np.testing.assert_allclose(off, 0.0, atol=1e-10)
        np.testing.assert_allclose(np.diag(K), 1.0 / np.diag(sigma), rtol=1e-6)

    def test_small_penalty_close_to_inverse(self, sigma):
        _, K = glasso_update(sigma, 1e-4)
        np.testing.assert_allclose(K, np.linalg.inv(sigma), atol=1e-2)

    def test_outputs_symmetric(self, sigma):
        S, K = glasso_update(sigma, 0.05)
        np.testing.assert_array_equal(S, S.T)
        np.testing.assert_array_equal(K, K.T)
        assert np.all(np.linalg.eigvalsh(K) > 0)

    def test_penalty_shrinks_edges(self, sigma):
        _, K_small = glasso_update(sigma, 0.01)
        _, K_large = glasso_update(sigma, 0.2)
        off = ~np.eye(3, dtype=bool)
        assert np.sum(np.abs(K_large[off])) < np.sum(np.abs(K_small[off]))

    @pytest.mark.parametrize("rho", [0.0, -0.1])
    def test_requires_positive_rho(self, sigma, rho):
        with pytest.raises(ValidationError, match="rho"):
            glasso_update(sigma, rho)

    def test_requires_two_variables(self):
        with pytest.raises(ValidationError, match="at least 2 variables"):
            glasso_update(np.array([[2.0]]), 0.1)
