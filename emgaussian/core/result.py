"""
Generic result container for emgaussian computations.

The Result class provides a standardized envelope that all domain-specific
results use, so timing, diagnostics and warnings are reported the same way
by every backend.

Design decisions:
    - Generic over parameter payload P for type safety
    - info dict for flexible metadata (converged, iterations, diagnostics)
    - timing is optional (don't burden unit tests)
    - Immutable (frozen=True) for reproducibility
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')  # Parameter payload type


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope for statistical computations.

    Type Parameters:
        P: The domain-specific parameter payload type

    Attributes:
        params: Domain-specific parameters (mean, precision, etc.)
        info: Structured metadata (start method, penalty, diagnostics)
        timing: Execution timing breakdown, or None if not measured
        backend_name: Identifier of the backend that produced this result
        warnings: Non-fatal issues encountered during computation

    Examples:
        >>> Result(
        ...     params=EMParams(muhat=mu, sigmahat=sigma, khat=K, ...),
        ...     info={'algorithm': 'em', 'start': 'diag', 'rho': 0.0},
        ...     timing={'total_seconds': 0.5, 'em_iterations': 0.4},
        ...     backend_name='cpu_em_prec'
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)
