"""
Candidate grids for the graphical lasso penalty rho.

    'qgraph'     : rho_max = max |S - I|, rho_min = rho_min_ratio * rho_max,
                   n_rho values equally spaced on the log scale
    'glassopath' : n_rho values equally spaced from max|S| / n_rho to max|S|
"""

import warnings
from typing import Any, Literal
import numpy as np
from numpy.typing import NDArray

from emgaussian.core.exceptions import ValidationError
from emgaussian.core.validation import check_array, check_finite, check_2d
from emgaussian.emprec.solvers import em_prec


def rhogrid(
    n_rho: int,
    *,
    method: Literal['qgraph', 'glassopath'] = 'qgraph',
    rho_min_ratio: float = 0.01,
    data=None,
    sigma=None,
    **fit_kwargs,
) -> NDArray[np.floating[Any]]:
    """
    Sequence of tuning parameter values.

    Parameters
    ----------
    n_rho : int
        Number of values.
    method : str
        'qgraph' or 'glassopath'.
    rho_min_ratio : float
        Ratio of smallest to largest value ('qgraph' only).
    data : array-like, optional
        Raw data. Used to estimate the covariance matrix with an
        unregularized ``em_prec`` fit when ``sigma`` is not given.
    sigma : array-like, optional
        Covariance matrix estimate. Supersedes ``data``.
    **fit_kwargs
        Passed to ``em_prec`` when the covariance is estimated.

    Returns
    -------
    np.ndarray, shape (n_rho,)
        Increasing sequence of penalties.
    """
    if method not in ('qgraph', 'glassopath'):
        raise ValueError(f"Unknown method: {method!r}. Use 'qgraph' or 'glassopath'.")
    if n_rho < 1:
        raise ValueError(f"n_rho must be at least 1, got {n_rho}")

    if sigma is None and data is None:
        raise ValidationError(
            "Either provide raw data (data) or an estimate of the covariance matrix (sigma)"
        )

    if sigma is None:
        sat = em_prec(data, **fit_kwargs)
        if not sat.converged:
            warnings.warn(
                "Estimation of covariance matrix may not have converged.",
                stacklevel=2,
            )
        sigma = sat.sigmahat
    else:
        sigma = check_array(sigma, 'sigma')
        check_2d(sigma, 'sigma')
        check_finite(sigma, 'sigma')

    if method == 'qgraph':
        shifted = sigma - np.eye(sigma.shape[0])
        rho_max = max(np.max(shifted), -np.min(shifted))
        if rho_max <= 0:
            raise ValidationError("sigma: equals the identity, no penalty range to span")
        rho_min = rho_min_ratio * rho_max
        return np.exp(np.linspace(np.log(rho_min), np.log(rho_max), n_rho))

    abs_max = np.max(np.abs(sigma))
    return np.linspace(abs_max / n_rho, abs_max, n_rho)
