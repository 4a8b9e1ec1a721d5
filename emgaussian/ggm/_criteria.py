"""
Information criteria for Gaussian graphical models fit with missing data.

EBIC (Foygel & Drton, 2010):

    EBIC = 2 * NLL + E * log(N) + 4 * gamma * E * log(P)

with E the number of non-zero edges (off-diagonal entries of K above
``zero_tol`` in magnitude, lower triangle) and N the effective sample
size, by default the average number of jointly observed cases over all
pairs of distinct variables.
"""

from typing import Any
import numpy as np
from numpy.typing import NDArray

from emgaussian.core.exceptions import ValidationError
from emgaussian.emprec._checks import check_cycle_inputs, check_data
from emgaussian.emprec.likelihood import neg_log_likelihood


def pairwise_sample_size(data) -> float:
    """
    Average pairwise-complete sample size.

    Mean over the strict lower triangle of M'M, M the observed-value
    indicator matrix. Diagonal (univariate) counts are excluded.
    """
    data = check_data(data)
    p = data.shape[1]
    if p < 2:
        raise ValidationError(
            "data: pairwise sample size needs at least 2 variables"
        )

    observed = np.isfinite(data).astype(np.float64)
    counts = observed.T @ observed
    return float(np.mean(counts[np.tril_indices(p, k=-1)]))


def count_edges(precision: NDArray[np.floating[Any]], zero_tol: float = 1e-10) -> int:
    """Number of off-diagonal (lower triangle) entries of K with |k_ij| > zero_tol."""
    precision = np.asarray(precision, dtype=np.float64)
    lower = precision[np.tril_indices(precision.shape[0], k=-1)]
    return int(np.sum(np.abs(lower) > zero_tol))


def ebic(
    data,
    mu,
    precision,
    *,
    n: float | None = None,
    gamma: float = 0.5,
    zero_tol: float = 1e-10,
) -> float:
    """
    Extended BIC of a fitted Gaussian graphical model. Smaller is better.

    Parameters
    ----------
    data : array-like, shape (n, p)
        Raw data the model is evaluated on (missing values allowed).
    mu, precision : array-like
        Fitted mean and precision matrix.
    n : float, optional
        Sample size; defaults to ``pairwise_sample_size(data)``.
    gamma : float
        EBIC hyperparameter, typically 0.5.
    zero_tol : float
        Entries of K at or below this magnitude are not counted as edges.
    """
    data, mu, precision, _ = check_cycle_inputs(data, mu, precision)
    if n is None:
        n = pairwise_sample_size(data)
    if n <= 0:
        raise ValidationError(f"n: expected a positive sample size, got {n}")

    p = data.shape[1]
    neg2l = 2.0 * neg_log_likelihood(data, mu, precision)
    n_edges = count_edges(precision, zero_tol)

    return neg2l + n_edges * np.log(n) + 4.0 * gamma * n_edges * np.log(p)
