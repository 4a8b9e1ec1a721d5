"""
Exception hierarchy for emgaussian.

All exceptions inherit from EMGaussianError to allow catching any
library-specific error. Domain code raises the most specific class
available here.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""


class EMGaussianError(Exception):
    """Base exception for all emgaussian errors."""
    pass


class ValidationError(EMGaussianError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when the data matrix, mean vector and precision matrix do not
    agree on the number of variables, or when an accumulator has the
    wrong shape. Always detected before any computation.
    """
    pass


class NumericalError(EMGaussianError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    Never answered with a pseudo-inverse or ridge fallback: the caller
    decides whether to regularize and retry.
    """
    pass


class SingularMatrixError(NumericalError):
    """
    Matrix is singular or nearly singular.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        condition_number: Estimated condition number, if available
        rank: Numerical rank, if computed
        expected_rank: Expected rank (the matrix dimension)
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        condition_number: float | None = None,
        rank: int | None = None,
        expected_rank: int | None = None
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.condition_number = condition_number
        self.rank = rank
        self.expected_rank = expected_rank


class NotPositiveDefiniteError(NumericalError):
    """
    Matrix is not positive definite.

    Raised when a precision or covariance block fails its Cholesky
    factorization.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        min_eigenvalue: Minimum eigenvalue, if computed
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        min_eigenvalue: float | None = None
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.min_eigenvalue = min_eigenvalue


class DegenerateRowWarning(UserWarning):
    """
    A data row has no observed values.

    Such a row carries no information: its imputation is the current mean
    and it contributes nothing to the likelihood. Not fatal.
    """
    pass
