"""
Linear algebra kernels for emgaussian.

All functions follow these conventions:
    - CPU only, NumPy/SciPy (LAPACK under the hood)
    - Factorizations are returned as structured result dataclasses
    - Errors are raised immediately as NumericalError subclasses
"""

from emgaussian.core.compute.linalg.spd import (
    SPDFactor,
    spd_factor,
    spd_inverse,
)

__all__ = [
    "SPDFactor",
    "spd_factor",
    "spd_inverse",
]
