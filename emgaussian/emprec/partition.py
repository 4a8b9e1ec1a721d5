"""
Missingness partitioning of data rows.

A value is observed iff it is finite; NaN and +/-Inf both mark a missing
entry. Every row splits its column indices into two ascending, disjoint
index arrays (observed, missing) that together cover all columns.

Rows sharing the same partition are grouped into MissingnessPattern
objects so that the per-row linear algebra of the E-step and the
likelihood is done once per distinct pattern.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List
import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class RowPartition:
    """Observed / missing column indices of a single row."""
    observed: NDArray[np.intp]
    missing: NDArray[np.intp]

    @property
    def n_observed(self) -> int:
        return len(self.observed)

    @property
    def n_missing(self) -> int:
        return len(self.missing)

    @property
    def is_complete(self) -> bool:
        """True if no value in the row is missing."""
        return len(self.missing) == 0

    @property
    def is_empty(self) -> bool:
        """True if no value in the row is observed."""
        return len(self.observed) == 0


@dataclass(frozen=True)
class MissingnessPattern:
    """
    A distinct missingness pattern and the rows that follow it.

    Attributes:
        observed: Ascending observed column indices
        missing: Ascending missing column indices
        rows: Ascending indices of the data rows with this pattern
    """
    observed: NDArray[np.intp]
    missing: NDArray[np.intp]
    rows: NDArray[np.intp]

    @property
    def n_rows(self) -> int:
        return len(self.rows)

    @property
    def is_complete(self) -> bool:
        return len(self.missing) == 0

    @property
    def is_empty(self) -> bool:
        return len(self.observed) == 0

    def __repr__(self) -> str:
        return (f"MissingnessPattern(n_rows={self.n_rows}, "
                f"observed={self.observed.tolist()}, missing={self.missing.tolist()})")


def observed_mask(data: NDArray[np.floating[Any]]) -> NDArray[np.bool_]:
    """Boolean mask, True where a value is observed (finite)."""
    return np.isfinite(data)


def partition_row(row) -> RowPartition:
    """
    Partition one row into observed and missing column indices.

    Total over any 1D row: zero and negative values are observed, only
    non-finite values are missing.
    """
    mask = np.isfinite(np.asarray(row, dtype=np.float64).ravel())
    return RowPartition(
        observed=np.flatnonzero(mask),
        missing=np.flatnonzero(~mask),
    )


def partition_rows(data) -> List[RowPartition]:
    """Partition every row of a 2D data matrix."""
    data = np.asarray(data, dtype=np.float64)
    return [partition_row(row) for row in data]


def group_patterns(data: NDArray[np.floating[Any]]) -> List[MissingnessPattern]:
    """
    Group the rows of a data matrix by missingness pattern.

    Parameters
    ----------
    data : np.ndarray, shape (n, p)
        Data matrix with non-finite entries marking missing values.

    Returns
    -------
    List[MissingnessPattern]
        One entry per distinct pattern, in order of first appearance.
    """
    mask = observed_mask(data)
    n, p = mask.shape
    if n == 0:
        return []

    unique_masks, first_rows, inverse = np.unique(
        mask, axis=0, return_index=True, return_inverse=True
    )
    inverse = inverse.ravel()

    patterns = []
    for k in np.argsort(first_rows, kind='stable'):
        pattern_mask = unique_masks[k]
        patterns.append(MissingnessPattern(
            observed=np.flatnonzero(pattern_mask),
            missing=np.flatnonzero(~pattern_mask),
            rows=np.flatnonzero(inverse == k),
        ))

    return patterns
