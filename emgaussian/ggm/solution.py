"""
Regularized Gaussian graphical model solution.
"""

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray

from emgaussian.emprec.solution import EMSolution


@dataclass(frozen=True)
class GGMSolution:
    """
    Selected regularized network model.

    Attributes:
        results: EM fit at the selected penalty
        rho: Candidate penalties
        crit: Selection criterion per candidate (EBIC or summed held-out
              NLL); smaller is better, NaN if disqualified
        best_rho: Selected penalty
        graph: Partial correlation network, zero diagonal
        rhoselect: 'ebic' or 'kfold'
    """
    results: EMSolution
    rho: NDArray[np.floating[Any]]
    crit: NDArray[np.floating[Any]]
    best_rho: float
    graph: NDArray[np.floating[Any]]
    rhoselect: str

    @property
    def converged(self) -> bool:
        return self.results.converged

    @property
    def n_edges(self) -> int:
        """Number of non-zero edges in the graph."""
        return int(np.count_nonzero(self.graph[np.tril_indices(self.graph.shape[0], k=-1)]))

    def summary(self) -> str:
        """Generate summary output."""
        criterion = 'EBIC' if self.rhoselect == 'ebic' else 'CV NLL'
        lines = [
            "Regularized Gaussian Graphical Model",
            "=" * 60,
            f"Selection: {self.rhoselect}",
            f"Candidates: {len(self.rho)}",
            f"Selected rho: {self.best_rho:g}",
            f"Converged: {self.converged}",
            f"Edges: {self.n_edges}",
            "",
            f"{'rho':>12}  {criterion:>14}",
            "-" * 60,
        ]
        for rho_r, crit_r in zip(self.rho, self.crit):
            marker = " *" if rho_r == self.best_rho else ""
            lines.append(f"{rho_r:12.6g}  {crit_r:14.4f}{marker}")
        lines.append("-" * 60)
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"GGMSolution(rhoselect={self.rhoselect!r}, best_rho={self.best_rho:g}, "
            f"n_edges={self.n_edges}, converged={self.converged})"
        )
