"""
Shared compute infrastructure for emgaussian.

Submodules:
    timing: Execution timing utilities
    linalg: SPD linear algebra kernels (Cholesky, inverse, log-determinant)
"""

from emgaussian.core.compute.timing import Timer

__all__ = [
    "Timer",
]
