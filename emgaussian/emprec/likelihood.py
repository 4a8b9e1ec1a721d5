"""
Observed-data negative log-likelihood under the precision parameterization.

For row i with observed columns o:

    nll_i = 0.5 * ( log|S_oo| + (x_o - mu_o)' S_oo^{-1} (x_o - mu_o) + |o| log(2 pi) )

where S = K^{-1}. The covariance of any subset of jointly Gaussian
variables is the matching submatrix of the full covariance, whereas the
corresponding statement does not hold for precision submatrices. K is
therefore inverted exactly once per call and S_oo is sliced from the
result. Rows without observed values contribute 0.

Only raw (pre-imputation) data is valid input: on a completed matrix
the imputed values would be counted as observations.
"""

from typing import Any
import numpy as np
from numpy.typing import NDArray

from emgaussian.core.compute.linalg import spd_factor
from emgaussian.emprec._checks import check_cycle_inputs
from emgaussian.emprec.partition import group_patterns

LOG_2PI = np.log(2.0 * np.pi)


def row_neg_log_likelihoods(data, mu, precision) -> NDArray[np.floating[Any]]:
    """
    Per-row negative log-likelihood contributions.

    Parameters
    ----------
    data : array-like, shape (n, p)
        Raw data with non-finite entries marking missing values.
    mu : array-like, shape (p,)
    precision : array-like, shape (p, p)

    Returns
    -------
    np.ndarray, shape (n,)

    Raises
    ------
    NumericalError
        If K or some S_oo block is singular or not positive definite.
    """
    data, mu, precision, factor = check_cycle_inputs(data, mu, precision)
    sigma = factor.inverse()

    contributions = np.zeros(data.shape[0])
    for pattern in group_patterns(data):
        if pattern.is_empty:
            continue

        obs = pattern.observed
        sigma_oo = spd_factor(sigma[np.ix_(obs, obs)], 'S_oo')

        centered = data[np.ix_(pattern.rows, obs)] - mu[obs]  # (n_k, n_obs)
        Z = sigma_oo.solve(centered.T)  # (n_obs, n_k)
        quad = np.sum(centered.T * Z, axis=0)  # (n_k,)

        contributions[pattern.rows] = 0.5 * (
            sigma_oo.logdet() + quad + len(obs) * LOG_2PI
        )

    return contributions


def neg_log_likelihood(data, mu, precision) -> float:
    """
    Negative log-likelihood of the observed data, summed over rows.

    See ``row_neg_log_likelihoods`` for arguments and errors.
    """
    return float(np.sum(row_neg_log_likelihoods(data, mu, precision)))
