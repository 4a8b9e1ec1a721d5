"""
Symmetric positive-definite (SPD) matrix kernels.

Every inversion, solve and log-determinant of a precision or covariance
block goes through a Cholesky factorization here (LAPACK via SciPy).
This is the only place where LAPACK failures are translated into the
package's NumericalError hierarchy:

    - SingularMatrixError: smallest eigenvalue is zero up to rounding
    - NotPositiveDefiniteError: matrix has a clearly negative eigenvalue

No pseudo-inverse or ridge fallback is ever applied.
"""

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray
from scipy import linalg

from emgaussian.core.exceptions import (
    SingularMatrixError,
    NotPositiveDefiniteError,
)


@dataclass(frozen=True)
class SPDFactor:
    """
    Cholesky factor of an SPD matrix.

    Attributes:
        chol: Lower triangular factor L with A = L L'
        name: Name of the factored matrix, reused in error messages
    """
    chol: NDArray[np.floating[Any]]
    name: str

    @property
    def size(self) -> int:
        return self.chol.shape[0]

    def solve(self, B: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
        """Solve A X = B."""
        return linalg.cho_solve((self.chol, True), B, check_finite=False)

    def inverse(self) -> NDArray[np.floating[Any]]:
        """Explicit inverse of A, symmetrized."""
        inv = self.solve(np.eye(self.size))
        return (inv + inv.T) / 2

    def logdet(self) -> float:
        """log det(A) = 2 sum(log diag(L))."""
        return float(2.0 * np.sum(np.log(np.diag(self.chol))))


def spd_factor(A: NDArray[np.floating[Any]], name: str) -> SPDFactor:
    """
    Cholesky-factor a symmetric positive-definite matrix.

    Args:
        A: Square symmetric matrix (k x k, k >= 1)
        name: Matrix name for error messages (e.g. 'K', 'K_mm', 'S_oo')

    Returns:
        SPDFactor

    Raises:
        SingularMatrixError: If A is singular to working precision
        NotPositiveDefiniteError: If A has a negative eigenvalue
    """
    A = np.asarray(A, dtype=np.float64)
    try:
        chol = linalg.cholesky(A, lower=True, check_finite=False)
    except linalg.LinAlgError:
        raise _classify_failure(A, name) from None

    # A Cholesky that only succeeds thanks to rounding still leaves an
    # (effectively) singular matrix: reject on the reciprocal condition
    # estimate from the factor's diagonal.
    d = np.diag(chol)
    k = A.shape[0]
    if k > 0:
        rcond = (np.min(d) / np.max(d)) ** 2
        if not np.isfinite(rcond) or rcond <= k * np.finfo(np.float64).eps:
            raise SingularMatrixError(
                f"{name}: matrix is singular to working precision "
                f"(reciprocal condition estimate {rcond:.3e})",
                matrix_name=name,
                condition_number=float(1.0 / rcond) if rcond > 0 else float('inf'),
                expected_rank=k,
            )

    return SPDFactor(chol=chol, name=name)


def spd_inverse(A: NDArray[np.floating[Any]], name: str) -> NDArray[np.floating[Any]]:
    """Inverse of an SPD matrix via Cholesky. Raises like spd_factor."""
    return spd_factor(A, name).inverse()


def _classify_failure(A: NDArray[np.floating[Any]], name: str) -> Exception:
    """Build the right NumericalError for a failed Cholesky factorization."""
    eigvals = np.linalg.eigvalsh((A + A.T) / 2)
    min_eig = float(eigvals[0])
    scale = float(np.max(np.abs(eigvals))) if eigvals.size else 0.0
    tol = A.shape[0] * np.finfo(np.float64).eps * max(scale, 1.0)

    if abs(min_eig) <= tol:
        rank = int(np.sum(eigvals > tol))
        return SingularMatrixError(
            f"{name}: matrix is singular (rank {rank} of {A.shape[0]}, "
            f"min eigenvalue {min_eig:.3e})",
            matrix_name=name,
            rank=rank,
            expected_rank=A.shape[0],
        )

    return NotPositiveDefiniteError(
        f"{name}: matrix is not positive definite (min eigenvalue {min_eig:.3e})",
        matrix_name=name,
        min_eigenvalue=min_eig,
    )
