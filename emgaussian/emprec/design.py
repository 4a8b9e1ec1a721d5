"""
EMDesign: data wrapper for EM estimation with missing values.

Wraps a data matrix and provides validation and metadata for the
EM precision-matrix pipeline.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray

from emgaussian.core.exceptions import ValidationError, DegenerateRowWarning
from emgaussian.core.validation import check_array, check_2d, check_min_samples


@dataclass(frozen=True)
class EMDesign:
    """
    Design for Gaussian mean / precision estimation with missing data.

    Wraps a data matrix (n observations x p variables) in which every
    non-finite value (NaN or +/-Inf) is a missing entry. Immutable after
    construction.

    Construction:
        EMDesign.from_array(data)
    """
    _data: NDArray[np.floating[Any]]
    _n: int
    _p: int
    _columns: tuple[str, ...] | None = None

    @classmethod
    def from_array(cls, data) -> EMDesign:
        """
        Build EMDesign from array-like data.

        Parameters
        ----------
        data : array-like
            2D data matrix. Can be numpy array, pandas DataFrame,
            or any array-like with .values attribute. DataFrame column
            names are kept.
        """
        columns = None
        if hasattr(data, 'columns'):
            columns = tuple(str(c) for c in data.columns)

        data_array = check_array(data, 'data')
        return cls._build(data_array, columns)

    @classmethod
    def _build(cls, data: NDArray, columns: tuple[str, ...] | None) -> EMDesign:
        """Internal builder with validation."""
        check_2d(data, 'data')
        check_min_samples(data, 2, 'data')

        n, p = data.shape

        if p < 1:
            raise ValidationError(f"Need at least 1 variable, got {p}")

        observed = np.isfinite(data)

        all_missing_cols = ~np.any(observed, axis=0)
        if np.any(all_missing_cols):
            col_idx = int(np.flatnonzero(all_missing_cols)[0])
            raise ValidationError(
                f"Variable at column {col_idx} is completely missing"
            )

        all_missing_rows = ~np.any(observed, axis=1)
        if np.any(all_missing_rows):
            warnings.warn(
                f"Data contains {int(np.sum(all_missing_rows))} rows with all "
                f"values missing; they are imputed with the current mean",
                DegenerateRowWarning,
                stacklevel=3,
            )

        # Read-only copy; imputation always works on its own arrays
        data = np.array(data, dtype=np.float64, copy=True)
        data.setflags(write=False)

        return cls(_data=data, _n=n, _p=p, _columns=columns)

    @property
    def data(self) -> NDArray[np.floating[Any]]:
        """Data matrix (n x p), may contain non-finite missing markers."""
        return self._data

    @property
    def n(self) -> int:
        """Number of observations."""
        return self._n

    @property
    def p(self) -> int:
        """Number of variables."""
        return self._p

    @property
    def columns(self) -> tuple[str, ...] | None:
        """Variable names, if the data came with them."""
        return self._columns

    @property
    def observed_mask(self) -> NDArray[np.bool_]:
        """True where a value is observed."""
        return np.isfinite(self._data)

    @property
    def n_missing(self) -> int:
        """Total number of missing values."""
        return int(np.sum(~self.observed_mask))

    @property
    def n_complete(self) -> int:
        """Number of rows without missing values."""
        return int(np.sum(np.all(self.observed_mask, axis=1)))

    @property
    def n_degenerate(self) -> int:
        """Number of rows without any observed value."""
        return int(np.sum(~np.any(self.observed_mask, axis=1)))

    @property
    def missing_rate(self) -> float:
        """Overall missing rate (0.0 to 1.0)."""
        return self.n_missing / (self._n * self._p)

    @property
    def has_missing(self) -> bool:
        """Whether data has any missing values."""
        return self.n_missing > 0

    def __repr__(self) -> str:
        return (
            f"EMDesign(n={self._n}, p={self._p}, "
            f"missing_rate={self.missing_rate:.1%})"
        )
