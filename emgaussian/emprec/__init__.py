"""
EM estimation of a Gaussian mean and precision matrix with missing data.

Public API:
    em_prec(data, ...) -> EMSolution

One EM cycle, as building blocks:
    partition_row / partition_rows / group_patterns
    impute(data, mu, K) -> completed matrix
    accumulate_correction(data, K, T2) -> corrected T2
    sufficient_statistics(data, completed, K) -> SufficientStatistics
    update_parameters(T1, T2, n) -> (mu, Sigma, K)
    run_cycle(data, mu, K) -> CycleResult
    neg_log_likelihood(data, mu, K) -> float
"""

from emgaussian.emprec import datasets
from emgaussian.emprec.cycle import CycleResult, expected_statistics, run_cycle
from emgaussian.emprec.design import EMDesign
from emgaussian.emprec.likelihood import neg_log_likelihood, row_neg_log_likelihoods
from emgaussian.emprec.partition import (
    MissingnessPattern,
    RowPartition,
    group_patterns,
    partition_row,
    partition_rows,
)
from emgaussian.emprec.solution import EMParams, EMSolution, partial_correlations
from emgaussian.emprec.solvers import em_prec
from emgaussian.emprec._impute import impute, impute_row
from emgaussian.emprec._statistics import (
    SufficientStatistics,
    accumulate_correction,
    sufficient_statistics,
)
from emgaussian.emprec._update import update_moments, update_parameters

__all__ = [
    # Estimation
    "em_prec",
    "EMDesign",
    "EMParams",
    "EMSolution",
    "partial_correlations",
    # EM cycle
    "RowPartition",
    "MissingnessPattern",
    "partition_row",
    "partition_rows",
    "group_patterns",
    "impute",
    "impute_row",
    "SufficientStatistics",
    "accumulate_correction",
    "sufficient_statistics",
    "update_moments",
    "update_parameters",
    "CycleResult",
    "expected_statistics",
    "run_cycle",
    "neg_log_likelihood",
    "row_neg_log_likelihoods",
    # Data
    "datasets",
]
