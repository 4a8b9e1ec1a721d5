"""
Shared argument checks for the EM cycle operations.

Every public operation validates (data, mu, precision) here before any
computation: shapes first (DimensionError), then finiteness and symmetry
(ValidationError), then positive definiteness of the full precision
matrix (NumericalError). Checking K as a whole means an indefinite K is
rejected even when the K_mm blocks a particular data set touches happen
to be positive definite.
"""

from typing import Any, Tuple
import numpy as np
from numpy.typing import NDArray

from emgaussian.core.compute.linalg import spd_factor, SPDFactor
from emgaussian.core.exceptions import ValidationError
from emgaussian.core.validation import (
    check_array,
    check_2d,
    check_length,
    check_square,
    check_finite,
    check_symmetric,
)

Array = NDArray[np.floating[Any]]


def check_data(data, name: str = 'data') -> Array:
    """Convert and validate an (n, p) data matrix; missing entries allowed."""
    arr = check_array(data, name)
    check_2d(arr, name)
    if arr.shape[1] < 1:
        raise ValidationError(f"{name}: need at least 1 variable, got {arr.shape[1]}")
    return arr


def check_mean(mu, p: int, name: str = 'mu') -> Array:
    arr = check_array(mu, name)
    check_length(arr, p, name)
    check_finite(arr, name)
    return arr


def check_precision(precision, p: int, name: str = 'precision') -> Tuple[Array, SPDFactor]:
    """
    Validate a precision matrix and return it with its Cholesky factor.

    Raises
    ------
    DimensionError
        If the matrix is not p x p.
    ValidationError
        If it has non-finite entries or is not symmetric.
    NumericalError
        If it is singular or not positive definite.
    """
    arr = check_array(precision, name)
    check_square(arr, p, name)
    check_finite(arr, name)
    check_symmetric(arr, name)
    return arr, spd_factor(arr, 'K')


def check_cycle_inputs(data, mu, precision) -> Tuple[Array, Array, Array, SPDFactor]:
    """Validate the (data, mu, precision) triple shared by all operations."""
    data = check_data(data)
    p = data.shape[1]
    mu = check_mean(mu, p)
    precision, factor = check_precision(precision, p)
    return data, mu, precision, factor
