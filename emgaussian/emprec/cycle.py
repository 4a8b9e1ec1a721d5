"""
One full EM cycle under the precision parameterization.

    raw data + (mu, K)
      -> partition rows by missingness pattern
      -> impute missing entries with their conditional means  (E-step)
      -> T1, T2 with the K_mm^{-1} correction                  (E-step)
      -> (mu', Sigma', K')                                     (M-step)

The K_mm factor of each pattern is computed once and shared by the
imputation and the correction. The cycle is atomic: it either returns
all new parameters or raises, the caller's (mu, K) are never touched.
"""

from dataclasses import dataclass
from typing import Any, Iterator
import numpy as np
from numpy.typing import NDArray

from emgaussian.emprec._checks import check_cycle_inputs
from emgaussian.emprec._impute import impute_patterns
from emgaussian.emprec._statistics import SufficientStatistics, completed_statistics
from emgaussian.emprec._update import update_parameters
from emgaussian.emprec.partition import group_patterns


@dataclass(frozen=True)
class CycleResult:
    """
    Output of one EM cycle.

    Unpacks as the triple ``mu, sigma, precision``; the sufficient
    statistics the update was computed from are kept for diagnostics.
    """
    mu: NDArray[np.floating[Any]]
    sigma: NDArray[np.floating[Any]]
    precision: NDArray[np.floating[Any]]
    t1: NDArray[np.floating[Any]]
    t2: NDArray[np.floating[Any]]

    def __iter__(self) -> Iterator[NDArray[np.floating[Any]]]:
        return iter((self.mu, self.sigma, self.precision))


def expected_statistics(data, mu, precision) -> SufficientStatistics:
    """
    E-step only: sufficient statistics of the completed data.

    Same arguments and errors as ``run_cycle``.
    """
    data, mu, precision, _ = check_cycle_inputs(data, mu, precision)
    patterns = group_patterns(data)
    completed, factors = impute_patterns(data, mu, precision, patterns)
    return completed_statistics(completed, patterns, factors)


def run_cycle(data, mu, precision) -> CycleResult:
    """
    Run one EM iteration.

    Parameters
    ----------
    data : array-like, shape (n, p)
        Raw data, non-finite entries are missing. Not modified.
    mu : array-like, shape (p,)
        Current mean.
    precision : array-like, shape (p, p)
        Current precision matrix K.

    Returns
    -------
    CycleResult
        ``mu, sigma, precision = run_cycle(data, mu, K)``

    Raises
    ------
    DimensionError
        If the shapes of data, mu and precision disagree.
    NumericalError
        If K, a K_mm block or the updated covariance is singular or
        not positive definite.
    """
    stats = expected_statistics(data, mu, precision)
    mu_new, sigma_new, precision_new = update_parameters(stats.t1, stats.t2, stats.n)
    return CycleResult(
        mu=mu_new,
        sigma=sigma_new,
        precision=precision_new,
        t1=stats.t1,
        t2=stats.t2,
    )
