"""
Core data models and structures for dependence analysis.

This module defines the fundamental data structures used throughout the
package: the closed set of dependence measures and their aliases, the
alternative hypotheses of the independence test, the cleaned sample handed
to the estimators, and immutable result containers.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any
from enum import Enum
import numpy as np


class DependenceMethod(Enum):
    """Enumeration of dependence measures."""
    PEARSON = "prho"
    SPEARMAN = "srho"
    KENDALL = "ktau"
    BLOMQVIST = "bbeta"
    HOEFFDING = "hoeffd"


class Alternative(Enum):
    """Enumeration of alternative hypotheses for the independence test."""
    TWO_SIDED = "two-sided"
    LESS = "less"
    GREATER = "greater"


# Case-sensitive alias table; resolution happens once at the call boundary.
METHOD_ALIASES: Dict[str, DependenceMethod] = {
    'pearson': DependenceMethod.PEARSON,
    'prho': DependenceMethod.PEARSON,
    'cor': DependenceMethod.PEARSON,
    'spearman': DependenceMethod.SPEARMAN,
    'srho': DependenceMethod.SPEARMAN,
    'rho': DependenceMethod.SPEARMAN,
    'kendall': DependenceMethod.KENDALL,
    'ktau': DependenceMethod.KENDALL,
    'tau': DependenceMethod.KENDALL,
    'blomqvist': DependenceMethod.BLOMQVIST,
    'bbeta': DependenceMethod.BLOMQVIST,
    'beta': DependenceMethod.BLOMQVIST,
    'hoeffding': DependenceMethod.HOEFFDING,
    'hoeffd': DependenceMethod.HOEFFDING,
    'd': DependenceMethod.HOEFFDING,
}


@dataclass(frozen=True, eq=False)
class PreparedSample:
    """Cleaned sample produced by the preprocessor.

    ``return_nan`` is set when missing values were found and removal was not
    requested; estimators are then skipped and the result is NaN.
    """
    x: np.ndarray
    y: np.ndarray
    weights: np.ndarray
    method: DependenceMethod
    return_nan: bool = False
    n_removed: int = 0

    @property
    def n(self) -> int:
        """Number of observations in the sample."""
        return len(self.x)


@dataclass(frozen=True)
class IndependenceTestResult:
    """Container for independence test results."""
    method: DependenceMethod
    alternative: Alternative
    n_eff: float
    estimate: float
    statistic: float
    p_value: float

    def is_significant(self, alpha: float = 0.05) -> bool:
        """Check if the test rejects independence at level ``alpha``."""
        return bool(self.p_value < alpha)

    def to_dict(self) -> Dict[str, Any]:
        """Flatten the result into plain Python values."""
        return {
            'method': self.method.value,
            'alternative': self.alternative.value,
            'n_eff': float(self.n_eff),
            'estimate': float(self.estimate),
            'statistic': float(self.statistic),
            'p_value': float(self.p_value),
        }


@dataclass(frozen=True)
class PairwiseTestResult:
    """Independence test result for one pair of named variables."""
    variable1: str
    variable2: str
    result: IndependenceTestResult

    def is_significant(self, alpha: float = 0.05) -> bool:
        """Check if the pair shows significant dependence."""
        return self.result.is_significant(alpha)


@dataclass
class AnalysisSettings:
    """Defaults used by the analysis tool, typically loaded from JSON."""
    method: str = 'pearson'
    alternative: str = 'two-sided'
    remove_missing: bool = True
    weights_column: Optional[str] = None
    alpha: float = 0.05
    unknown_keys: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'AnalysisSettings':
        """Build settings from a configuration mapping, ignoring unknown keys."""
        known = {'method', 'alternative', 'remove_missing', 'weights_column', 'alpha'}
        kwargs = {key: value for key, value in config.items() if key in known}
        unknown = sorted(key for key in config if key not in known)
        return cls(unknown_keys=unknown, **kwargs)
