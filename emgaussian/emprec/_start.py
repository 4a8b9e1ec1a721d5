"""
Starting values for the EM algorithm.

    'diag'     : observed-value means, K = diag(1 / observed variances)
    'pairwise' : pairwise-complete covariance (pandas DataFrame.cov)
    'listwise' : covariance of the complete rows only

The 'full' start (an unregularized EM fit) is resolved by the solver.
"""

from typing import Any, Tuple
import numpy as np
import pandas as pd
from numpy.typing import NDArray

from emgaussian.core.compute.linalg import spd_inverse
from emgaussian.core.exceptions import ValidationError

Array = NDArray[np.floating[Any]]

START_METHODS = ('diag', 'pairwise', 'listwise', 'full')


def starting_values(data: Array, start: str) -> Tuple[Array, Array]:
    """
    Initial (mu, precision) for a validated data matrix.

    Parameters
    ----------
    data : np.ndarray, shape (n, p)
        Data with non-finite missing markers.
    start : str
        'diag', 'pairwise' or 'listwise'.

    Raises
    ------
    ValidationError
        If the data cannot support the requested start (constant
        columns, never jointly observed pairs, too few complete rows).
    NumericalError
        If the starting covariance is not positive definite.
    """
    x = np.where(np.isfinite(data), data, np.nan)

    if start == 'diag':
        return _diag_start(x)
    elif start == 'pairwise':
        return _pairwise_start(x)
    elif start == 'listwise':
        return _listwise_start(x)
    else:
        raise ValueError(
            f"Unknown start: {start!r}. Use 'diag', 'pairwise' or 'listwise'."
        )


def _diag_start(x: Array) -> Tuple[Array, Array]:
    mu = np.nanmean(x, axis=0)
    var = np.nanvar(x, axis=0)

    zero_var_cols = np.flatnonzero(~(var > 0))
    if len(zero_var_cols) > 0:
        raise ValidationError(
            f"data: columns {zero_var_cols.tolist()} have zero variance "
            f"among their observed values"
        )

    return mu, np.diag(1.0 / var)


def _pairwise_start(x: Array) -> Tuple[Array, Array]:
    frame = pd.DataFrame(x)
    mu = frame.mean(axis=0).to_numpy()
    sigma = frame.cov().to_numpy()

    if not np.all(np.isfinite(sigma)):
        raise ValidationError(
            "data: some pairs of variables are never observed together "
            "(or have a single joint observation); use start='diag'"
        )

    return mu, spd_inverse(sigma, 'S_start')


def _listwise_start(x: Array) -> Tuple[Array, Array]:
    complete = x[np.all(np.isfinite(x), axis=1)]
    n_complete, p = complete.shape

    if n_complete <= p:
        raise ValidationError(
            f"data: listwise start needs more complete rows than variables "
            f"({n_complete} complete rows, {p} variables)"
        )

    mu = complete.mean(axis=0)
    sigma = np.atleast_2d(np.cov(complete, rowvar=False))
    return mu, spd_inverse(sigma, 'S_start')
