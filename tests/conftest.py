"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np


def make_spd(rng, p, shift=None):
    """Random symmetric positive-definite p x p matrix."""
    A = rng.standard_normal((p, p))
    return A @ A.T + (p if shift is None else shift) * np.eye(p)


def mask_missing(rng, data, rate):
    """
    Copy of data with entries set to NaN at the given rate, keeping at
    least one observed value per row and per column.
    """
    data = data.copy()
    mask = rng.random(data.shape) < rate
    for i in range(data.shape[0]):
        if mask[i].all():
            mask[i, 0] = False
    for j in range(data.shape[1]):
        if mask[:, j].all():
            mask[0, j] = False
    data[mask] = np.nan
    return data


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def bivariate_params():
    """Mean, covariance and precision of a unit-variance pair with correlation 0.5."""
    mu = np.array([0.0, 0.0])
    sigma = np.array([[1.0, 0.5], [0.5, 1.0]])
    return mu, sigma, np.linalg.inv(sigma)


@pytest.fixture
def spd_matrix(rng):
    """Factory for random SPD matrices: spd_matrix(p)."""
    return lambda p: make_spd(rng, p)


@pytest.fixture
def spd4(rng):
    """Random 4 x 4 precision matrix and mean."""
    return rng.standard_normal(4), make_spd(rng, 4)


@pytest.fixture
def missing_data(rng):
    """n=80, p=3 Gaussian sample with about 15% missing values."""
    sigma = np.array([
        [2.0, 0.8, 0.3],
        [0.8, 1.5, -0.4],
        [0.3, -0.4, 1.0],
    ])
    data = rng.multivariate_normal([1.0, -2.0, 0.5], sigma, size=80)
    return mask_missing(rng, data, 0.15)


@pytest.fixture
def indefinite_precision():
    """Symmetric but indefinite 2 x 2 matrix (eigenvalues 3 and -1)."""
    return np.array([[1.0, 2.0], [2.0, 1.0]])
