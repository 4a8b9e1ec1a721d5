"""
Regularized Gaussian graphical models with missing data.

Public API:
    emggm(data, rho=..., rhoselect='ebic'|'kfold') -> GGMSolution
    rhogrid(n_rho, ...) -> candidate penalties
    ebic(data, mu, K, ...) -> float
    kfold_cv(data, rho, ...) -> CVResult
    pairwise_sample_size(data) -> float
"""

from emgaussian.ggm._criteria import count_edges, ebic, pairwise_sample_size
from emgaussian.ggm._crossval import CVResult, kfold_cv
from emgaussian.ggm._rhogrid import rhogrid
from emgaussian.ggm.solution import GGMSolution
from emgaussian.ggm.solvers import emggm

__all__ = [
    "emggm",
    "GGMSolution",
    "rhogrid",
    "ebic",
    "count_edges",
    "pairwise_sample_size",
    "kfold_cv",
    "CVResult",
]
