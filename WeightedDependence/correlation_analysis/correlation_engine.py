"""
Dependence analysis engine.

This module ties preprocessing, the weighted estimators and the significance
layer together: single measures, independence tests, and pairwise measure
and p-value matrices over the columns of a dataset.
"""

import itertools
import logging
from typing import List, Optional, Sequence, Union
import pandas as pd
import numpy as np

from .weighted_measures import estimate as estimate_measure, wdm
from .significance_testing import compute_p_value, compute_test_statistic
from ..data_processing.data_loader import DataLoader
from ..data_processing.models import (
    Alternative, DependenceMethod, IndependenceTestResult, PairwiseTestResult
)
from ..data_processing.preprocessing import (
    as_float_array, check_sizes, effective_sample_size, preprocess,
    resolve_alternative, resolve_method
)
from ..exceptions import TooFewColumnsError

logger = logging.getLogger(__name__)

ArrayLike = Union[Sequence[float], np.ndarray, pd.Series]


def compute_measure(x: ArrayLike,
                    y: ArrayLike,
                    method: Union[str, DependenceMethod],
                    weights: Optional[ArrayLike] = None,
                    remove_missing: bool = True) -> float:
    """
    Calculate a (weighted) dependence measure between two samples.

    Size and method errors are raised; missing values with
    ``remove_missing=False`` give NaN.
    """
    return wdm(x, y, method, weights, remove_missing)


def run_independence_test(x: ArrayLike,
                          y: ArrayLike,
                          method: Union[str, DependenceMethod],
                          weights: Optional[ArrayLike] = None,
                          remove_missing: bool = True,
                          alternative: Union[str, Alternative] = 'two-sided') -> IndependenceTestResult:
    """
    Asymptotic independence test based on a (weighted) dependence measure.

    Parameters
    ----------
    x, y : array-like
        Input data
    method : str or DependenceMethod
        Dependence measure or one of its aliases
    weights : array-like, optional
        Observation weights
    remove_missing : bool, default True
        If True, observations containing NaN are removed; otherwise estimate,
        statistic and p-value are NaN when missing values are present
    alternative : str, default 'two-sided'
        'two-sided', 'greater' (positive association) or 'less' (negative
        association). Hoeffding's D only allows 'two-sided'.

    Returns
    -------
    IndependenceTestResult
        Immutable test result
    """
    raw_x = as_float_array(x)
    raw_weights = as_float_array(weights)
    check_sizes(raw_x, as_float_array(y), raw_weights)

    resolved = resolve_method(method)
    resolved_alternative = resolve_alternative(alternative, resolved)

    sample = preprocess(x, y, resolved, weights, remove_missing)
    if sample.n_removed:
        logger.debug(
            f"Independence test ({resolved.value}) uses {sample.n} complete observations, "
            f"{sample.n_removed} removed"
        )

    if sample.return_nan:
        nan = float('nan')
        return IndependenceTestResult(
            method=resolved,
            alternative=resolved_alternative,
            n_eff=effective_sample_size(len(raw_x), raw_weights),
            estimate=nan,
            statistic=nan,
            p_value=nan
        )

    n_eff = effective_sample_size(sample.n, sample.weights)
    estimate = estimate_measure(sample.x, sample.y, resolved, sample.weights)
    statistic = compute_test_statistic(estimate, resolved, n_eff)
    p_value = compute_p_value(statistic, resolved, resolved_alternative, n_eff)

    return IndependenceTestResult(
        method=resolved,
        alternative=resolved_alternative,
        n_eff=n_eff,
        estimate=estimate,
        statistic=statistic,
        p_value=p_value
    )


class DependenceEngine:
    """
    Weighted dependence analysis engine.

    Features:
    - Pearson, Spearman, Kendall, Blomqvist and Hoeffding measures
    - Survey weight support with effective sample sizes
    - Asymptotic independence tests with one- and two-sided alternatives
    - Pairwise measure and p-value matrices with pairwise-complete data
    """

    def __init__(self, remove_missing: bool = True):
        """
        Initialize the DependenceEngine.

        Parameters
        ----------
        remove_missing : bool, default True
            Default missing data policy for all computations
        """
        self.remove_missing = remove_missing
        self.data_loader = DataLoader()
        self.logger = logging.getLogger(__name__)

    def compute_measure(self,
                        x: ArrayLike,
                        y: ArrayLike,
                        method: Union[str, DependenceMethod] = 'pearson',
                        weights: Optional[ArrayLike] = None,
                        remove_missing: Optional[bool] = None) -> float:
        """Dependence measure between two vectors."""
        return compute_measure(
            self.data_loader.to_vector(x),
            self.data_loader.to_vector(y),
            method,
            self.data_loader.to_vector(weights),
            self._remove_missing(remove_missing)
        )

    def independence_test(self,
                          x: ArrayLike,
                          y: ArrayLike,
                          method: Union[str, DependenceMethod] = 'pearson',
                          weights: Optional[ArrayLike] = None,
                          remove_missing: Optional[bool] = None,
                          alternative: Union[str, Alternative] = 'two-sided') -> IndependenceTestResult:
        """Independence test between two vectors."""
        return run_independence_test(
            self.data_loader.to_vector(x),
            self.data_loader.to_vector(y),
            method,
            self.data_loader.to_vector(weights),
            self._remove_missing(remove_missing),
            alternative
        )

    def compute_matrix(self,
                       data: Union[pd.DataFrame, np.ndarray],
                       method: Union[str, DependenceMethod] = 'pearson',
                       weights: Optional[ArrayLike] = None,
                       variables: Optional[List[str]] = None,
                       remove_missing: Optional[bool] = None) -> pd.DataFrame:
        """
        Compute a matrix of pairwise dependence measures.

        Parameters
        ----------
        data : pd.DataFrame or 2-D array
            Observations in rows, variables in columns
        method : str or DependenceMethod, default 'pearson'
            Dependence measure or one of its aliases
        weights : array-like, optional
            Observation weights shared by all pairs
        variables : list of str, optional
            DataFrame columns to use. Defaults to all numeric columns.
        remove_missing : bool, optional
            Overrides the engine's missing data policy

        Returns
        -------
        pd.DataFrame
            Symmetric matrix with unit diagonal, labelled by variable
        """
        labels, columns = self._columns(data, variables)
        resolved = resolve_method(method)
        weight_vector = self.data_loader.to_vector(weights)
        remove = self._remove_missing(remove_missing)

        d = len(columns)
        self.logger.info(f"Computing {d * (d - 1) // 2} pairwise measures using method: {resolved.value}")

        matrix = np.eye(d)
        for i, j in itertools.combinations(range(d), 2):
            matrix[i, j] = compute_measure(columns[i], columns[j], resolved, weight_vector, remove)
            matrix[j, i] = matrix[i, j]

        return pd.DataFrame(matrix, index=labels, columns=labels)

    def test_all_pairs(self,
                       data: Union[pd.DataFrame, np.ndarray],
                       method: Union[str, DependenceMethod] = 'pearson',
                       weights: Optional[ArrayLike] = None,
                       variables: Optional[List[str]] = None,
                       remove_missing: Optional[bool] = None,
                       alternative: Union[str, Alternative] = 'two-sided') -> List[PairwiseTestResult]:
        """
        Run an independence test for every pair of variables.

        Returns
        -------
        list of PairwiseTestResult
            One result per pair (i, j) with i < j, in column order
        """
        labels, columns = self._columns(data, variables)
        resolved = resolve_method(method)
        resolved_alternative = resolve_alternative(alternative, resolved)
        weight_vector = self.data_loader.to_vector(weights)
        remove = self._remove_missing(remove_missing)

        pairs = list(itertools.combinations(range(len(columns)), 2))
        self.logger.info(f"Testing {len(pairs)} variable pairs using method: {resolved.value}")

        results = []
        for i, j in pairs:
            result = run_independence_test(
                columns[i], columns[j], resolved, weight_vector, remove, resolved_alternative
            )
            results.append(PairwiseTestResult(labels[i], labels[j], result))

        return results

    def pvalue_matrix(self,
                      data: Union[pd.DataFrame, np.ndarray],
                      method: Union[str, DependenceMethod] = 'pearson',
                      weights: Optional[ArrayLike] = None,
                      variables: Optional[List[str]] = None,
                      remove_missing: Optional[bool] = None,
                      alternative: Union[str, Alternative] = 'two-sided') -> pd.DataFrame:
        """P-values of all pairwise independence tests as a symmetric matrix with zero diagonal."""
        labels, _ = self._columns(data, variables)
        results = self.test_all_pairs(data, method, weights, variables, remove_missing, alternative)

        matrix = np.zeros((len(labels), len(labels)))
        for (i, j), pair in zip(itertools.combinations(range(len(labels)), 2), results):
            matrix[i, j] = matrix[j, i] = pair.result.p_value

        return pd.DataFrame(matrix, index=labels, columns=labels)

    def _columns(self, data, variables):
        """Labelled flat columns; fails fast with fewer than two."""
        labels, columns = self.data_loader.to_columns(data, variables)
        if len(columns) < 2:
            raise TooFewColumnsError("x must have at least 2 columns.")
        return labels, columns

    def _remove_missing(self, remove_missing: Optional[bool]) -> bool:
        return self.remove_missing if remove_missing is None else remove_missing


def compute_measure_matrix(data: Union[pd.DataFrame, np.ndarray],
                           method: Union[str, DependenceMethod],
                           weights: Optional[ArrayLike] = None,
                           remove_missing: bool = True) -> pd.DataFrame:
    """Matrix of pairwise (weighted) dependence measures between the columns of ``data``."""
    return DependenceEngine(remove_missing=remove_missing).compute_matrix(data, method, weights)
