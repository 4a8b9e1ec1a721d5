"""
Tests for the EBIC criterion, edge counting and the pairwise sample size.
"""

import numpy as np
import pytest

from emgaussian.core.exceptions import ValidationError
from emgaussian.emprec import em_prec, neg_log_likelihood
from emgaussian.ggm import count_edges, ebic, pairwise_sample_size


class TestPairwiseSampleSize:

    def test_complete_data(self, rng):
        assert pairwise_sample_size(rng.standard_normal((12, 4))) == 12.0

    def test_known_pattern(self):
        data = np.array([
            [1.0, 2.0, 3.0],
            [1.0, np.nan, 3.0],
            [np.nan, 2.0, 3.0],
            [1.0, 2.0, np.nan],
        ])
        # jointly observed: (1,0) -> 2, (2,0) -> 2, (2,1) -> 2
        assert pairwise_sample_size(data) == pytest.approx(2.0)

    def test_excludes_diagonal(self):
        data = np.array([
            [1.0, np.nan],
            [2.0, np.nan],
            [3.0, 4.0],
        ])
        assert pairwise_sample_size(data) == 1.0

    def test_single_variable(self):
        with pytest.raises(ValidationError, match="at least 2 variables"):
            pairwise_sample_size(np.ones((5, 1)))


class TestCountEdges:

    def test_counts_lower_triangle(self):
        K = np.array([
            [2.0, 0.5, 0.0],
            [0.5, 2.0, -0.3],
            [0.0, -0.3, 2.0],
        ])
        assert count_edges(K) == 2

    def test_zero_tol(self):
        K = np.array([[1.0, 1e-12], [1e-12, 1.0]])
        assert count_edges(K) == 0
        assert count_edges(K, zero_tol=0.0) == 1


class TestEBIC:

    @pytest.fixture
    def fit(self, missing_data):
        return em_prec(missing_data)

    def test_formula(self, missing_data, fit):
        n = pairwise_sample_size(missing_data)
        n_edges = count_edges(fit.khat)
        expected = (
            2.0 * neg_log_likelihood(missing_data, fit.muhat, fit.khat)
            + n_edges * np.log(n)
            + 4.0 * 0.5 * n_edges * np.log(3)
        )
        assert ebic(missing_data, fit.muhat, fit.khat) == pytest.approx(expected, rel=1e-12)

    def test_gamma_zero_is_bic(self, missing_data, fit):
        n_edges = count_edges(fit.khat)
        value = ebic(missing_data, fit.muhat, fit.khat, n=80, gamma=0.0)
        assert value == pytest.approx(2.0 * fit.nll + n_edges * np.log(80), rel=1e-10)

    def test_diagonal_model_no_penalty(self, missing_data):
        mu = np.nanmean(missing_data, axis=0)
        K = np.diag(1.0 / np.nanvar(missing_data, axis=0))
        value = ebic(missing_data, mu, K, gamma=0.5)
        assert value == pytest.approx(2.0 * neg_log_likelihood(missing_data, mu, K))

    def test_sample_size_must_be_positive(self, missing_data, fit):
        with pytest.raises(ValidationError, match="sample size"):
            ebic(missing_data, fit.muhat, fit.khat, n=0)
