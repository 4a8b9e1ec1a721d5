"""
Sufficient statistics of the completed data.

    T1 = sum_i x_i_hat
    T2 = X_hat' X_hat + sum_i [K_mm(i)^{-1} placed on the (m(i), m(i)) block]

The correction term is the conditional covariance of the imputed block:
without it the second moment of the completed data would be understated
and the M-step would no longer maximize the expected complete-data
log-likelihood.
"""

from dataclasses import dataclass
from typing import Any, Dict, List
import numpy as np
from numpy.typing import NDArray

from emgaussian.core.compute.linalg import SPDFactor
from emgaussian.core.exceptions import DimensionError, ValidationError
from emgaussian.core.validation import check_array, check_square, check_finite
from emgaussian.emprec._checks import check_data, check_precision
from emgaussian.emprec._impute import missing_block_factor
from emgaussian.emprec.partition import MissingnessPattern, group_patterns

Array = NDArray[np.floating[Any]]


@dataclass(frozen=True)
class SufficientStatistics:
    """
    First and second moment statistics of one EM cycle.

    Attributes:
        t1: Column sums of the completed data, shape (p,)
        t2: Corrected sum of outer products, shape (p, p)
        n: Number of rows
    """
    t1: Array
    t2: Array
    n: int


def accumulate_correction(data, precision, t2) -> Array:
    """
    Add the conditional-covariance correction K_mm^{-1} of every incomplete
    row to a second-moment accumulator.

    Parameters
    ----------
    data : array-like, shape (n, p)
        Raw data; only its missingness pattern is used.
    precision : array-like, shape (p, p)
        Current precision matrix K.
    t2 : array-like, shape (p, p)
        Accumulator to correct. Not modified.

    Returns
    -------
    np.ndarray, shape (p, p)
        ``t2`` plus the correction.
    """
    data = check_data(data)
    p = data.shape[1]
    precision, _ = check_precision(precision, p)
    t2 = check_array(t2, 't2')
    check_square(t2, p, 't2')
    check_finite(t2, 't2')

    patterns = group_patterns(data)
    factors = {
        k: missing_block_factor(precision, pattern)
        for k, pattern in enumerate(patterns)
        if not pattern.is_complete
    }
    return t2 + covariance_correction(patterns, factors, p)


def sufficient_statistics(data, completed, precision) -> SufficientStatistics:
    """
    Compute T1 and the corrected T2 from a completed matrix.

    Parameters
    ----------
    data : array-like, shape (n, p)
        Raw data, used to know which entries of ``completed`` were imputed.
    completed : array-like, shape (n, p)
        Output of ``impute`` for the same data and parameters.
    precision : array-like, shape (p, p)
        The precision matrix used for the imputation.
    """
    data = check_data(data)
    completed = check_array(completed, 'completed')
    if completed.shape != data.shape:
        raise DimensionError(
            f"completed: expected shape {data.shape}, got {completed.shape}"
        )
    if not np.all(np.isfinite(completed)):
        raise ValidationError("completed: contains missing values, impute first")

    p = data.shape[1]
    precision, _ = check_precision(precision, p)

    patterns = group_patterns(data)
    factors = {
        k: missing_block_factor(precision, pattern)
        for k, pattern in enumerate(patterns)
        if not pattern.is_complete
    }
    return completed_statistics(completed, patterns, factors)


def completed_statistics(
    completed: Array,
    patterns: List[MissingnessPattern],
    factors: Dict[int, SPDFactor],
) -> SufficientStatistics:
    """T1 and corrected T2 from validated inputs and precomputed K_mm factors."""
    n, p = completed.shape
    t1 = completed.sum(axis=0)
    t2 = completed.T @ completed + covariance_correction(patterns, factors, p)
    return SufficientStatistics(t1=t1, t2=t2, n=n)


def covariance_correction(
    patterns: List[MissingnessPattern],
    factors: Dict[int, SPDFactor],
    p: int,
) -> Array:
    """Sum over incomplete rows of K_mm^{-1}, scattered into a p x p matrix."""
    correction = np.zeros((p, p))
    for k, pattern in enumerate(patterns):
        if pattern.is_complete:
            continue
        mis = pattern.missing
        correction[np.ix_(mis, mis)] += pattern.n_rows * factors[k].inverse()
    return correction
