"""
Core infrastructure for emgaussian.

Shared abstractions and utilities used by the domain submodules
(emprec, ggm).

Key components:
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Timing and SPD linear algebra kernels
"""

from emgaussian.core.result import Result
from emgaussian.core.exceptions import (
    EMGaussianError,
    ValidationError,
    DimensionError,
    NumericalError,
    SingularMatrixError,
    NotPositiveDefiniteError,
    DegenerateRowWarning,
)

__all__ = [
    # Result
    "Result",
    # Exceptions
    "EMGaussianError",
    "ValidationError",
    "DimensionError",
    "NumericalError",
    "SingularMatrixError",
    "NotPositiveDefiniteError",
    "DegenerateRowWarning",
]
