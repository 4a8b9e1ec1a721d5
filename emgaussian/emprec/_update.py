"""
M-step: parameters from sufficient statistics.

    mu_new    = T1 / n
    Sigma_new = T2 / n - mu_new mu_new'
    K_new     = Sigma_new^{-1}

With a lasso penalty rho > 0 the last line is replaced by the graphical
lasso estimate of K for the covariance Sigma_new.
"""

import warnings
from typing import Any, Tuple
import numpy as np
from numpy.typing import NDArray
from sklearn.covariance import graphical_lasso
from sklearn.exceptions import ConvergenceWarning

from emgaussian.core.compute.linalg import spd_inverse
from emgaussian.core.exceptions import NumericalError, ValidationError
from emgaussian.core.validation import (
    check_array,
    check_1d,
    check_square,
    check_finite,
)

Array = NDArray[np.floating[Any]]


def update_moments(t1, t2, n: int) -> Tuple[Array, Array]:
    """
    Mean and covariance from T1, T2 and the row count.

    Returns
    -------
    mu_new : np.ndarray, shape (p,)
    sigma_new : np.ndarray, shape (p, p)
        Exactly symmetric.
    """
    if int(n) != n or n < 1:
        raise ValidationError(f"n: expected a positive integer, got {n!r}")

    t1 = check_array(t1, 't1')
    check_1d(t1, 't1')
    p = t1.shape[0]
    check_finite(t1, 't1')
    t2 = check_array(t2, 't2')
    check_square(t2, p, 't2')
    check_finite(t2, 't2')

    mu_new = t1 / n
    sigma_new = t2 / n - np.outer(mu_new, mu_new)

    # Enforce exact symmetry (avoid floating point drift)
    sigma_new = (sigma_new + sigma_new.T) / 2

    return mu_new, sigma_new


def update_parameters(t1, t2, n: int) -> Tuple[Array, Array, Array]:
    """
    One M-step: (mu_new, sigma_new, precision_new).

    Stateless; callers replace their (mu, K) with the returned values.

    Raises
    ------
    NumericalError
        If Sigma_new is singular or not positive definite (for example
        n too small relative to p).
    """
    mu_new, sigma_new = update_moments(t1, t2, n)
    precision_new = spd_inverse(sigma_new, 'S_new')
    return mu_new, sigma_new, precision_new


def glasso_update(
    sigma: Array,
    rho: float,
    *,
    max_iter: int = 100,
    tol: float = 1e-6,
) -> Tuple[Array, Array]:
    """
    Graphical lasso M-step for the precision matrix.

    The diagonal of K is not penalized.

    Returns
    -------
    sigma_new, precision_new : np.ndarray
        Covariance and precision estimated by the graphical lasso.
    """
    if rho <= 0:
        raise ValidationError(f"rho: graphical lasso needs rho > 0, got {rho}")
    if sigma.shape[0] < 2:
        raise ValidationError(
            f"sigma: graphical lasso needs at least 2 variables, got {sigma.shape[0]}"
        )

    with warnings.catch_warnings():
        # Non-convergence of the inner solver is judged by the EM loop
        warnings.simplefilter('ignore', ConvergenceWarning)
        try:
            sigma_new, precision_new = graphical_lasso(
                sigma, alpha=rho, max_iter=max_iter, tol=tol, enet_tol=tol,
            )
        except FloatingPointError as e:
            raise NumericalError(f"graphical lasso failed for rho={rho}: {e}") from e

    sigma_new = (sigma_new + sigma_new.T) / 2
    precision_new = (precision_new + precision_new.T) / 2
    return sigma_new, precision_new
