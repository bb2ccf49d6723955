"""Data processing module for dependence analysis."""

from .data_loader import DataLoader
from .preprocessing import (
    check_sizes,
    effective_sample_size,
    preprocess,
    resolve_alternative,
    resolve_method
)
from .models import (
    Alternative,
    AnalysisSettings,
    DependenceMethod,
    IndependenceTestResult,
    METHOD_ALIASES,
    PairwiseTestResult,
    PreparedSample
)

__all__ = [
    'DataLoader',
    'check_sizes',
    'effective_sample_size',
    'preprocess',
    'resolve_alternative',
    'resolve_method',
    'Alternative',
    'AnalysisSettings',
    'DependenceMethod',
    'IndependenceTestResult',
    'METHOD_ALIASES',
    'PairwiseTestResult',
    'PreparedSample'
]
