"""
Weighted Dependence

Weighted generalizations of Pearson's correlation, Spearman's rho, Kendall's
tau, Blomqvist's beta and Hoeffding's D, with asymptotic independence tests
and pairwise dependence matrices.

Version: 1.0.0
"""

__version__ = "1.0.0"

from .dependence_analysis_tool import DependenceAnalysisTool
from .correlation_analysis import (
    DependenceEngine,
    compute_measure,
    compute_measure_matrix,
    run_independence_test
)
from .data_processing.models import (
    Alternative,
    DependenceMethod,
    IndependenceTestResult,
    PairwiseTestResult
)
from .data_processing.preprocessing import effective_sample_size
from .exceptions import (
    WeightedDependenceError,
    SizeMismatchError,
    UnknownMethodError,
    InvalidAlternativeError,
    InvalidWeightsError,
    TooFewColumnsError,
    DataLoadError
)

# Short names
wdm = compute_measure
wdm_mat = compute_measure_matrix

__all__ = [
    'DependenceAnalysisTool',
    'DependenceEngine',
    'compute_measure',
    'compute_measure_matrix',
    'run_independence_test',
    'effective_sample_size',
    'wdm',
    'wdm_mat',
    'Alternative',
    'DependenceMethod',
    'IndependenceTestResult',
    'PairwiseTestResult',
    'WeightedDependenceError',
    'SizeMismatchError',
    'UnknownMethodError',
    'InvalidAlternativeError',
    'InvalidWeightsError',
    'TooFewColumnsError',
    'DataLoadError'
]
