"""
Tests for the candidate penalty grids.
"""

import numpy as np
import pytest

from emgaussian.core.exceptions import ValidationError
from emgaussian.emprec import em_prec
from emgaussian.ggm import rhogrid


@pytest.fixture
def sigma():
    return np.array([[2.0, 0.5], [0.5, 1.0]])


class TestQgraphGrid:

    def test_log_spaced(self, sigma):
        # max |S - I| = 1
        grid = rhogrid(3, sigma=sigma)
        np.testing.assert_allclose(grid, [0.01, 0.1, 1.0], rtol=1e-12)

    def test_min_ratio(self, sigma):
        grid = rhogrid(5, sigma=sigma, rho_min_ratio=0.1)
        assert grid[0] == pytest.approx(0.1)
        assert grid[-1] == pytest.approx(1.0)
        ratios = grid[1:] / grid[:-1]
        np.testing.assert_allclose(ratios, ratios[0])

    def test_negative_entries_count(self):
        grid = rhogrid(2, sigma=np.array([[1.0, -3.0], [-3.0, 1.0]]))
        assert grid[-1] == pytest.approx(3.0)

    def test_identity_rejected(self):
        with pytest.raises(ValidationError, match="identity"):
            rhogrid(5, sigma=np.eye(3))


class TestGlassopathGrid:

    def test_linear(self, sigma):
        grid = rhogrid(4, method='glassopath', sigma=sigma)
        np.testing.assert_allclose(grid, [0.5, 1.0, 1.5, 2.0])


class TestFromData:

    def test_uses_em_covariance(self, missing_data):
        fit = em_prec(missing_data)
        grid = rhogrid(10, data=missing_data)
        expected = rhogrid(10, sigma=fit.sigmahat)
        np.testing.assert_allclose(grid, expected, rtol=1e-10)
        assert np.all(np.diff(grid) > 0)

    def test_sigma_supersedes_data(self, sigma, missing_data):
        grid = rhogrid(3, sigma=sigma, data=missing_data)
        np.testing.assert_allclose(grid, [0.01, 0.1, 1.0], rtol=1e-12)

    def test_warns_when_not_converged(self, missing_data):
        with pytest.warns(UserWarning, match="may not have converged"):
            rhogrid(3, data=missing_data, max_iter=1)


class TestErrors:

    def test_needs_data_or_sigma(self):
        with pytest.raises(ValidationError, match="Either provide"):
            rhogrid(5)

    def test_unknown_method(self, sigma):
        with pytest.raises(ValueError, match="Unknown method"):
            rhogrid(5, method='path', sigma=sigma)

    def test_n_rho(self, sigma):
        with pytest.raises(ValueError, match="n_rho"):
            rhogrid(0, sigma=sigma)

    def test_sigma_not_finite(self):
        with pytest.raises(ValidationError):
            rhogrid(5, sigma=np.array([[1.0, np.nan], [np.nan, 1.0]]))
