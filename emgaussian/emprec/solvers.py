"""
Solver dispatch for EM precision-matrix estimation.

Public API: em_prec(data, ...) -> EMSolution
"""

from typing import Literal

from emgaussian.emprec.design import EMDesign
from emgaussian.emprec.solution import EMSolution
from emgaussian.emprec.backends.em import EMPrecisionBackend
from emgaussian.emprec._start import START_METHODS


StartChoice = Literal['diag', 'pairwise', 'listwise', 'full']


def em_prec(
    data_or_design,
    *,
    start: StartChoice = 'diag',
    rho: float = 0.0,
    tol: float = 1e-7,
    max_iter: int = 500,
    glasso_max_iter: int = 100,
    glasso_tol: float = 1e-6,
    verbose: bool = False,
) -> EMSolution:
    """
    Estimate the mean and precision matrix of a Gaussian with missing data.

    Accepts EITHER:
        1. An EMDesign object
        2. Raw data array or DataFrame (convenience)

    Parameters
    ----------
    data_or_design : array-like or EMDesign
        Data matrix with non-finite values (NaN) for missing entries,
        or EMDesign object.
    start : str
        Starting values:
        - 'diag' (default): observed means and a diagonal precision matrix.
        - 'pairwise': inverse of the pairwise-complete covariance.
        - 'listwise': inverse of the complete-case covariance.
        - 'full': result of an unregularized EM run started from 'diag'.
    rho : float
        Graphical lasso penalty for the precision matrix. 0 (default)
        gives the unregularized maximum likelihood estimate.
    tol : float
        Convergence tolerance on the maximum absolute change of the
        mean and precision entries between cycles.
    max_iter : int
        Maximum number of EM cycles.
    glasso_max_iter, glasso_tol : int, float
        Inner graphical lasso settings (only used when rho > 0).
    verbose : bool
        Print progress information.

    Returns
    -------
    EMSolution

    Raises
    ------
    ValidationError
        Invalid data (e.g. a variable that is never observed).
    NumericalError
        A singular or non positive-definite matrix was met; the outer
        caller may retry with rho > 0.

    Examples
    --------
    >>> from emgaussian.emprec import em_prec, datasets
    >>> result = em_prec(datasets.missvals)
    >>> print(result.muhat)
    >>> print(result.khat)
    """
    if start not in START_METHODS:
        raise ValueError(
            f"Unknown start: {start!r}. Use one of {', '.join(map(repr, START_METHODS))}."
        )
    if rho < 0:
        raise ValueError(f"rho must be non-negative, got {rho}")
    if max_iter < 0:
        raise ValueError(f"max_iter must be non-negative, got {max_iter}")

    # Get or build Design
    if isinstance(data_or_design, EMDesign):
        design = data_or_design
    else:
        design = EMDesign.from_array(data_or_design)

    if verbose:
        print(f"EM precision estimation: {design.n} observations, {design.p} variables, "
              f"{design.missing_rate:.1%} missing")

    backend_impl = EMPrecisionBackend(
        rho=rho,
        glasso_max_iter=glasso_max_iter,
        glasso_tol=glasso_tol,
    )

    if verbose:
        print(f"Backend: {backend_impl.name} (start={start!r}, rho={rho:g})")

    result = backend_impl.solve(design, start=start, tol=tol, max_iter=max_iter)

    if verbose:
        print(f"Converged: {result.params.converged} "
              f"(iterations: {result.params.n_iter}, "
              f"nll: {result.params.nll:.6f})")

    return EMSolution(_result=result, _design=design)
