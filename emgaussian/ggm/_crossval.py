"""
k-fold cross-validation of the graphical lasso penalty.

For every candidate rho the model is fit on k-1 folds and scored by the
observed-data negative log-likelihood of the held-out fold; the
criterion is the sum over folds. A fit that fails or does not converge
in any fold disqualifies that rho (criterion NaN). The same folds are
used for every rho.
"""

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray
from sklearn.model_selection import KFold

from emgaussian.core.exceptions import NumericalError, ValidationError
from emgaussian.emprec._checks import check_data
from emgaussian.emprec.likelihood import neg_log_likelihood
from emgaussian.emprec.solvers import em_prec


@dataclass(frozen=True)
class CVResult:
    """
    Cross-validation outcome.

    Attributes:
        rho: Candidate penalties
        crit: Summed held-out NLL per candidate (NaN if disqualified)
        best_rho: Candidate with the smallest criterion
        k: Number of folds
    """
    rho: NDArray[np.floating[Any]]
    crit: NDArray[np.floating[Any]]
    best_rho: float
    k: int


def kfold_cv(
    data,
    rho,
    *,
    k: int = 5,
    seed: int | None = None,
    verbose: bool = False,
    **fit_kwargs,
) -> CVResult:
    """
    Select rho by k-fold cross-validation.

    Parameters
    ----------
    data : array-like, shape (n, p)
        Raw data with missing values.
    rho : float or array-like
        Candidate penalties.
    k : int
        Number of folds.
    seed : int, optional
        Seed for the fold assignment.
    **fit_kwargs
        Passed to ``em_prec`` (start, tol, max_iter, ...).

    Raises
    ------
    NumericalError
        If no candidate could be fit in every fold.
    """
    data = check_data(data)
    n = data.shape[0]
    if k < 2 or k > n:
        raise ValueError(f"k must be between 2 and the number of rows ({n}), got {k}")

    rho = np.atleast_1d(np.asarray(rho, dtype=np.float64))
    folds = list(KFold(n_splits=k, shuffle=True, random_state=seed).split(data))

    crit = np.empty(len(rho))
    for r, rho_r in enumerate(rho):
        if verbose:
            print(f"model {r + 1} of {len(rho)} (rho={rho_r:g})")

        total = 0.0
        for train_idx, test_idx in folds:
            try:
                fit = em_prec(data[train_idx], rho=rho_r, **fit_kwargs)
            except (NumericalError, ValidationError) as e:
                if verbose:
                    print(f"  fold failed: {e}")
                total = np.nan
                break
            if not fit.converged:
                total = np.nan
                break
            total += neg_log_likelihood(data[test_idx], fit.muhat, fit.khat)

        crit[r] = total

    if np.all(np.isnan(crit)):
        raise NumericalError(
            "k-fold cross-validation: no value of rho could be fit in every fold"
        )

    best_rho = float(rho[np.nanargmin(crit)])
    return CVResult(rho=rho, crit=crit, best_rho=best_rho, k=k)
