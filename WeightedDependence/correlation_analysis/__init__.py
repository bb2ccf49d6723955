"""Dependence measures and independence tests."""

from .correlation_engine import (
    DependenceEngine,
    compute_measure,
    compute_measure_matrix,
    run_independence_test
)
from .weighted_measures import bbeta, hoeffd, ktau, prho, srho, wdm
from .significance_testing import compute_p_value, compute_test_statistic, phoeffb

__all__ = [
    'DependenceEngine',
    'compute_measure',
    'compute_measure_matrix',
    'run_independence_test',
    'bbeta',
    'hoeffd',
    'ktau',
    'prho',
    'srho',
    'wdm',
    'compute_p_value',
    'compute_test_statistic',
    'phoeffb'
]
