"""
Solver dispatch for regularized Gaussian graphical models.

Public API: emggm(data, ...) -> GGMSolution
"""

import warnings
from typing import Literal
import numpy as np

from emgaussian.core.exceptions import NumericalError
from emgaussian.emprec.design import EMDesign
from emgaussian.emprec.solution import partial_correlations
from emgaussian.emprec.solvers import em_prec
from emgaussian.ggm._criteria import ebic, pairwise_sample_size
from emgaussian.ggm._crossval import kfold_cv
from emgaussian.ggm.solution import GGMSolution


RhoSelectChoice = Literal['ebic', 'kfold']


def emggm(
    data_or_design,
    *,
    rho=0.0,
    rhoselect: RhoSelectChoice = 'ebic',
    n: float | None = None,
    gamma: float = 0.5,
    zero_tol: float = 1e-10,
    k: int = 5,
    seed: int | None = None,
    convfail: bool = False,
    verbose: bool = False,
    **fit_kwargs,
) -> GGMSolution:
    """
    Regularized Gaussian graphical model under missing data.

    Fits the EM graphical lasso (``em_prec``) for every candidate
    penalty and keeps the one with the best EBIC or k-fold
    cross-validated likelihood.

    Parameters
    ----------
    data_or_design : array-like or EMDesign
        Data matrix with NaN for missing entries.
    rho : float or array-like
        Candidate penalties (see ``rhogrid``). Default 0: no penalty.
    rhoselect : str
        'ebic' (default) or 'kfold'.
    n : float, optional
        Sample size used by EBIC; defaults to the average pairwise
        complete sample size.
    gamma : float
        EBIC hyperparameter.
    zero_tol : float
        Precision entries at or below this magnitude are not edges (EBIC).
    k : int
        Number of folds for 'kfold'.
    seed : int, optional
        Seed for the fold assignment.
    convfail : bool
        If True, non-converged fits get an EBIC of NaN, and the graph is
        zero-filled when the selected fit did not converge.
    verbose : bool
        Print progress information.
    **fit_kwargs
        Passed to ``em_prec`` (start, tol, max_iter, ...).

    Returns
    -------
    GGMSolution

    Examples
    --------
    >>> from emgaussian.ggm import emggm, rhogrid
    >>> rho = rhogrid(20, data=data)
    >>> net = emggm(data, rho=rho, rhoselect='ebic')
    >>> net.graph
    """
    if rhoselect not in ('ebic', 'kfold'):
        raise ValueError(
            f"Unknown rhoselect: {rhoselect!r}. Use 'ebic' or 'kfold'."
        )

    if isinstance(data_or_design, EMDesign):
        design = data_or_design
    else:
        design = EMDesign.from_array(data_or_design)

    rho = np.atleast_1d(np.asarray(rho, dtype=np.float64))

    if rhoselect == 'ebic':
        if n is None:
            n = pairwise_sample_size(design.data)

        fits = []
        for r, rho_r in enumerate(rho):
            if verbose:
                print(f"model {r + 1} of {len(rho)} (rho={rho_r:g})")
            fits.append(em_prec(design, rho=rho_r, **fit_kwargs))

        crit = np.array([
            np.nan if (convfail and not fit.converged)
            else ebic(design.data, fit.muhat, fit.khat, n=n, gamma=gamma, zero_tol=zero_tol)
            for fit in fits
        ])
        if np.all(np.isnan(crit)):
            raise NumericalError("EBIC selection: no candidate model converged")

        best_idx = int(np.nanargmin(crit))
        best = fits[best_idx]
        best_rho = float(rho[best_idx])

    else:
        cv = kfold_cv(design.data, rho, k=k, seed=seed, verbose=verbose, **fit_kwargs)
        crit = cv.crit
        best_rho = cv.best_rho
        best = em_prec(design, rho=best_rho, **fit_kwargs)

        if not best.converged:
            ranked = np.argsort(crit)[:int(np.sum(~np.isnan(crit)))]
            for idx in ranked[1:]:
                warnings.warn(
                    "Best option for tuning parameter according to cross-validation "
                    "did not converge; trying on next best tuning parameter value.",
                    stacklevel=2,
                )
                best_rho = float(rho[idx])
                best = em_prec(design, rho=best_rho, **fit_kwargs)
                if best.converged:
                    break

    graph = partial_correlations(best.khat)
    if convfail and not best.converged:
        graph = np.zeros_like(graph)

    return GGMSolution(
        results=best,
        rho=rho,
        crit=crit,
        best_rho=best_rho,
        graph=graph,
        rhoselect=rhoselect,
    )
