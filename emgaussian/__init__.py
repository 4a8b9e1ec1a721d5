"""
emgaussian: EM estimation of Gaussian precision matrices with missing data.

Estimates the mean vector and precision (inverse covariance) matrix of a
multivariate normal distribution from data with values missing at random,
with optional graphical lasso regularization for network models.

Submodules:
    emprec: EM cycle building blocks and the em_prec estimator
    ggm: Regularized Gaussian graphical models (EBIC / k-fold selection)
"""

__version__ = "0.1.0"

from emgaussian import emprec
from emgaussian import ggm
from emgaussian.emprec import em_prec
from emgaussian.ggm import emggm

__all__ = [
    "__version__",
    "emprec",
    "ggm",
    "em_prec",
    "emggm",
]
