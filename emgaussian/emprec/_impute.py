"""
Conditional-mean imputation under the precision parameterization.

For a row with observed block o and missing block m, the conditional
expectation of the missing values given the observed ones is

    x_m_hat = mu_m - K_mm^{-1} K_mo (x_o - mu_o)

(Gaussian conditioning written in terms of K = Sigma^{-1}; the
conditional covariance is K_mm^{-1}). Rows without missing values are
returned unchanged; rows without observed values are imputed with mu.
"""

from typing import Any, Dict, List, Tuple
import numpy as np
from numpy.typing import NDArray

from emgaussian.core.compute.linalg import spd_factor, SPDFactor
from emgaussian.core.validation import check_array, check_1d
from emgaussian.emprec._checks import check_cycle_inputs
from emgaussian.emprec.partition import MissingnessPattern, group_patterns

Array = NDArray[np.floating[Any]]


def impute(data, mu, precision) -> Array:
    """
    Replace every missing entry by its conditional expectation.

    Parameters
    ----------
    data : array-like, shape (n, p)
        Raw data, non-finite entries are missing. Not modified.
    mu : array-like, shape (p,)
        Current mean.
    precision : array-like, shape (p, p)
        Current precision matrix K (symmetric positive definite).

    Returns
    -------
    np.ndarray, shape (n, p)
        New completed matrix.

    Raises
    ------
    DimensionError
        If the shapes of data, mu and precision disagree.
    NumericalError
        If K, or some K_mm block, is singular or not positive definite.
    """
    data, mu, precision, _ = check_cycle_inputs(data, mu, precision)
    patterns = group_patterns(data)
    completed, _ = impute_patterns(data, mu, precision, patterns)
    return completed


def impute_row(row, mu, precision) -> Array:
    """Impute a single row (1D array of length p). Returns a new array."""
    row = check_array(row, 'row')
    check_1d(row, 'row')
    return impute(row[np.newaxis, :], mu, precision)[0]


def missing_block_factor(precision: Array, pattern: MissingnessPattern) -> SPDFactor:
    """Cholesky factor of K_mm for a pattern with at least one missing value."""
    mis = pattern.missing
    return spd_factor(precision[np.ix_(mis, mis)], 'K_mm')


def conditional_mean(
    x_obs: Array,
    mu: Array,
    precision: Array,
    pattern: MissingnessPattern,
    factor_mm: SPDFactor,
) -> Array:
    """
    Conditional mean of the missing block for all rows of a pattern.

    Parameters
    ----------
    x_obs : np.ndarray, shape (n_k, n_observed)
        Observed values of the pattern's rows.
    factor_mm : SPDFactor
        Factor of K_mm for this pattern.

    Returns
    -------
    np.ndarray, shape (n_k, n_missing)
    """
    obs = pattern.observed
    mis = pattern.missing
    n_k = x_obs.shape[0]

    if pattern.is_empty:
        # No observed columns: the observed term vanishes
        return np.tile(mu[mis], (n_k, 1))

    centered = x_obs - mu[obs]  # (n_k, n_obs)
    k_mo = precision[np.ix_(mis, obs)]  # (n_mis, n_obs)
    shift = factor_mm.solve(k_mo @ centered.T)  # (n_mis, n_k)
    return mu[mis] - shift.T


def impute_patterns(
    data: Array,
    mu: Array,
    precision: Array,
    patterns: List[MissingnessPattern],
) -> Tuple[Array, Dict[int, SPDFactor]]:
    """
    Impute validated data pattern by pattern.

    Returns the completed matrix and the K_mm factor computed for each
    incomplete pattern (keyed by position in ``patterns``) so that the
    conditional-covariance correction can reuse them.
    """
    completed = data.copy()
    factors: Dict[int, SPDFactor] = {}

    for k, pattern in enumerate(patterns):
        if pattern.is_complete:
            continue

        factor = missing_block_factor(precision, pattern)
        factors[k] = factor

        x_obs = data[np.ix_(pattern.rows, pattern.observed)]
        completed[np.ix_(pattern.rows, pattern.missing)] = conditional_mean(
            x_obs, mu, precision, pattern, factor
        )

    return completed, factors
