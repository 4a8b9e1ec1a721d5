"""
EM precision-matrix solution types.

Contains the parameter payload and user-facing solution wrapper.
"""

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import NDArray

from emgaussian.core.result import Result

if TYPE_CHECKING:
    from emgaussian.emprec.design import EMDesign


def pack_params(mu: NDArray, precision: NDArray) -> NDArray:
    """Mean followed by the row-wise upper triangle of K (diagonal included)."""
    return np.concatenate([mu, precision[np.triu_indices(len(mu))]])


def partial_correlations(precision: NDArray) -> NDArray:
    """
    Partial correlation matrix -cov2cor(K) with a zero diagonal.

    Entry (i, j) is the correlation of variables i and j given all others.
    """
    d = np.sqrt(np.diag(precision))
    pcor = -precision / np.outer(d, d)
    np.fill_diagonal(pcor, 0.0)
    return (pcor + pcor.T) / 2


@dataclass(frozen=True)
class EMParams:
    """
    Parameter payload for EM estimation.

    Immutable data computed by backends.
    """
    muhat: NDArray[np.floating[Any]]
    sigmahat: NDArray[np.floating[Any]]
    khat: NDArray[np.floating[Any]]
    nll: float
    n_iter: int
    converged: bool


@dataclass
class EMSolution:
    """
    User-facing EM results.

    Wraps the backend Result and provides convenient accessors for the
    estimated mean, covariance and precision matrix.
    """
    _result: Result[EMParams]
    _design: 'EMDesign'

    @property
    def muhat(self) -> NDArray[np.floating[Any]]:
        """Estimated mean vector."""
        return self._result.params.muhat

    @property
    def sigmahat(self) -> NDArray[np.floating[Any]]:
        """Estimated covariance matrix."""
        return self._result.params.sigmahat

    @property
    def khat(self) -> NDArray[np.floating[Any]]:
        """Estimated precision (inverse covariance) matrix."""
        return self._result.params.khat

    @property
    def nll(self) -> float:
        """Observed-data negative log-likelihood at the estimate."""
        return self._result.params.nll

    @property
    def loglik(self) -> float:
        return -self._result.params.nll

    @property
    def converged(self) -> bool:
        """Whether the EM iterations converged."""
        return self._result.params.converged

    @property
    def n_iter(self) -> int:
        """Number of EM cycles run."""
        return self._result.params.n_iter

    @property
    def p_est(self) -> NDArray[np.floating[Any]]:
        """Packed estimate: mean followed by the upper triangle of K."""
        return pack_params(self.muhat, self.khat)

    @property
    def partial_correlations(self) -> NDArray[np.floating[Any]]:
        """Partial correlation matrix implied by the precision estimate."""
        return partial_correlations(self.khat)

    @property
    def design(self) -> 'EMDesign':
        return self._design

    @property
    def info(self) -> dict[str, Any]:
        """Backend metadata."""
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        """Execution timing breakdown."""
        return self._result.timing

    @property
    def backend_name(self) -> str:
        """Name of the backend that produced this result."""
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        """Non-fatal warnings from computation."""
        return self._result.warnings

    def _labels(self) -> list[str]:
        if self._design.columns is not None:
            return list(self._design.columns)
        return [f"x[{i}]" for i in range(self._design.p)]

    def summary(self) -> str:
        """Generate summary output."""
        labels = self._labels()
        width = max(len(label) for label in labels)
        lines = [
            "EM Precision Matrix Estimation",
            "=" * 60,
            f"Observations: {self._design.n}",
            f"Variables: {self._design.p}",
            f"Missing rate: {self._design.missing_rate:.1%}",
            f"Start: {self.info.get('start')}",
            f"Penalty (rho): {self.info.get('rho', 0.0):g}",
            f"Converged: {self.converged}",
            f"Iterations: {self.n_iter}",
            f"Negative log-likelihood: {self.nll:.6f}",
            "",
            "Estimated Means:",
            "-" * 60,
        ]

        for label, mu_i in zip(labels, self.muhat):
            lines.append(f"  {label:<{width}}: {mu_i:12.6f}")

        lines.extend([
            "",
            "Partial Correlations:",
            "-" * 60,
        ])

        pcor = self.partial_correlations
        for i in range(pcor.shape[0]):
            row_str = "  " + " ".join(f"{pcor[i, j]:8.4f}" for j in range(pcor.shape[1]))
            lines.append(row_str)

        lines.append("-" * 60)
        lines.append(f"Backend: {self.backend_name}")
        if self.timing:
            lines.append(f"Time: {self.timing.get('total_seconds', 0):.4f}s")
        if self.warnings:
            lines.append(f"Warnings: {len(self.warnings)}")

        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            'muhat': self.muhat.tolist(),
            'sigmahat': self.sigmahat.tolist(),
            'khat': self.khat.tolist(),
            'nll': self.nll,
            'converged': self.converged,
            'n_iter': self.n_iter,
            'n': self._design.n,
            'p': self._design.p,
            'missing_rate': self._design.missing_rate,
            'columns': list(self._design.columns) if self._design.columns else None,
            'backend': self.backend_name,
        }

    def __repr__(self) -> str:
        return (
            f"EMSolution(n={self._design.n}, p={self._design.p}, "
            f"converged={self.converged}, nll={self.nll:.4f})"
        )
