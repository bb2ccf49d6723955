"""
Main Dependence Analysis Tool class.

This module provides the primary interface for weighted dependence analysis,
integrating data loading, configuration, the dependence engine and a summary
of completed analyses.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import pandas as pd
import numpy as np

from .data_processing import DataLoader, AnalysisSettings, IndependenceTestResult, PairwiseTestResult
from .correlation_analysis import DependenceEngine
from .exceptions import DataLoadError


class DependenceAnalysisTool:
    """
    Weighted dependence analysis tool.

    This is the main interface that integrates all analysis components,
    providing a unified API from data loading through pairwise testing.

    Features:
    - CSV/TSV/JSON data loading
    - Five weighted dependence measures
    - Asymptotic independence tests
    - Pairwise measure and p-value matrices
    - JSON configuration of defaults (method, alternative, weights column)
    """

    def __init__(self,
                 config_path: Optional[str] = None,
                 log_level: str = 'INFO'):
        """
        Initialize the Dependence Analysis Tool.

        Parameters
        ----------
        config_path : str, optional
            Path to a JSON configuration file
        log_level : str, default 'INFO'
            Logging level
        """
        # Setup logging
        logging.basicConfig(
            level=getattr(logging, log_level.upper()),
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        self.logger = logging.getLogger(__name__)

        # Configuration
        self.config = self._load_config(config_path) if config_path else {}
        self.settings = AnalysisSettings.from_dict(self.config)
        if self.settings.unknown_keys:
            self.logger.warning(f"Ignoring unknown configuration keys: {self.settings.unknown_keys}")

        # Initialize components
        self.data_loader = DataLoader()
        self.engine = DependenceEngine(remove_missing=self.settings.remove_missing)

        # Data storage
        self.data = None
        self.analysis_results = {}

        self.logger.info("Dependence Analysis Tool initialized successfully")

    def load_data(self, file_path: Union[str, Path], **kwargs) -> pd.DataFrame:
        """
        Load data from file.

        Parameters
        ----------
        file_path : str or Path
            Path to a CSV, TSV, TXT or JSON file
        **kwargs
            Additional arguments for data loading

        Returns
        -------
        pd.DataFrame
            Loaded data
        """
        self.logger.info(f"Loading data from {file_path}")

        try:
            self.data = self.data_loader.load_data(file_path, **kwargs)
            return self.data

        except Exception as e:
            self.logger.error(f"Failed to load data: {e}")
            raise

    def measure(self,
                x: str,
                y: str,
                method: Optional[str] = None,
                weights: Optional[str] = None,
                data: Optional[pd.DataFrame] = None) -> float:
        """
        Dependence measure between two columns.

        Parameters
        ----------
        x, y : str
            Column names
        method : str, optional
            Dependence measure; defaults to the configured method
        weights : str, optional
            Column containing weights; defaults to the configured weights column
        data : pd.DataFrame, optional
            Data to analyze. Uses loaded data if not provided

        Returns
        -------
        float
            The dependence measure
        """
        data = self._get_data(data)
        method = method or self.settings.method
        self._check_columns(data, [x, y])

        try:
            value = self.engine.compute_measure(data[x], data[y], method, self._get_weights(data, weights))
            self.analysis_results.setdefault('measures', {})[(x, y, method)] = value
            return value

        except Exception as e:
            self.logger.error(f"Dependence measure failed: {e}")
            raise

    def independence_test(self,
                          x: str,
                          y: str,
                          method: Optional[str] = None,
                          weights: Optional[str] = None,
                          alternative: Optional[str] = None,
                          data: Optional[pd.DataFrame] = None) -> IndependenceTestResult:
        """
        Independence test between two columns.

        Returns
        -------
        IndependenceTestResult
            Estimate, statistic and p-value of the test
        """
        data = self._get_data(data)
        method = method or self.settings.method
        alternative = alternative or self.settings.alternative
        self._check_columns(data, [x, y])

        self.logger.info(f"Testing independence of {x} and {y} using method: {method}")

        try:
            result = self.engine.independence_test(
                data[x], data[y], method, self._get_weights(data, weights), alternative=alternative
            )
            self.analysis_results.setdefault('independence_tests', []).append(
                PairwiseTestResult(x, y, result)
            )
            return result

        except Exception as e:
            self.logger.error(f"Independence test failed: {e}")
            raise

    def measure_matrix(self,
                       variables: Optional[List[str]] = None,
                       method: Optional[str] = None,
                       weights: Optional[str] = None,
                       data: Optional[pd.DataFrame] = None) -> pd.DataFrame:
        """
        Pairwise dependence matrix of the selected variables.

        The weights column is never treated as a variable.
        """
        data = self._get_data(data)
        method = method or self.settings.method
        weight_series = self._get_weights(data, weights)
        variables = self._get_variables(data, variables, weights)

        try:
            matrix = self.engine.compute_matrix(data, method, weight_series, variables)
            self.analysis_results['measure_matrix'] = matrix
            return matrix

        except Exception as e:
            self.logger.error(f"Dependence matrix failed: {e}")
            raise

    def pairwise_tests(self,
                       variables: Optional[List[str]] = None,
                       method: Optional[str] = None,
                       weights: Optional[str] = None,
                       alternative: Optional[str] = None,
                       data: Optional[pd.DataFrame] = None) -> List[PairwiseTestResult]:
        """Independence tests for every pair of the selected variables."""
        data = self._get_data(data)
        method = method or self.settings.method
        alternative = alternative or self.settings.alternative
        weight_series = self._get_weights(data, weights)
        variables = self._get_variables(data, variables, weights)

        try:
            results = self.engine.test_all_pairs(
                data, method, weight_series, variables, alternative=alternative
            )
            self.analysis_results['pairwise_tests'] = results

            significant = sum(1 for r in results if r.is_significant(self.settings.alpha))
            self.logger.info(
                f"Pairwise testing completed. {len(results)} tests computed, "
                f"{significant} significant at α={self.settings.alpha}"
            )
            return results

        except Exception as e:
            self.logger.error(f"Pairwise testing failed: {e}")
            raise

    def get_analysis_summary(self) -> Dict[str, Any]:
        """
        Get summary of all completed analyses.

        Returns
        -------
        dict
            Summary of analysis results
        """
        summary = {
            'data_loaded': self.data is not None,
            'n_records': len(self.data) if self.data is not None else 0,
            'n_variables': len(self.data.columns) if self.data is not None else 0,
            'analyses_completed': list(self.analysis_results.keys()),
            'method': self.settings.method,
            'has_weights': self.settings.weights_column is not None
        }

        if self.settings.weights_column:
            summary['weights_variable'] = self.settings.weights_column

        if 'pairwise_tests' in self.analysis_results:
            tests = self.analysis_results['pairwise_tests']
            summary['n_tests'] = len(tests)
            summary['significant_tests'] = sum(
                1 for r in tests if r.is_significant(self.settings.alpha)
            )

        return summary

    def _get_data(self, data: Optional[pd.DataFrame]) -> pd.DataFrame:
        if data is None:
            data = self.data
        if data is None:
            raise ValueError("No data available for analysis")
        return data

    def _check_columns(self, data: pd.DataFrame, columns: List[str]) -> None:
        for column in columns:
            if column not in data.columns:
                raise DataLoadError(f"Variable {column} not found in data")

    def _get_weights(self, data: pd.DataFrame, weights: Optional[str]) -> Optional[pd.Series]:
        """Resolve the weights column, falling back to the configured one."""
        if weights:
            self._check_columns(data, [weights])
            return data[weights]

        configured = self.settings.weights_column
        if configured:
            if configured in data.columns:
                return data[configured]
            self.logger.warning(f"Configured weights column {configured} not found; using unit weights")

        return None

    def _get_variables(self,
                       data: pd.DataFrame,
                       variables: Optional[List[str]],
                       weights: Optional[str]) -> List[str]:
        if variables is not None:
            return variables
        excluded = {weights or self.settings.weights_column}
        return [col for col in data.select_dtypes(include=[np.number]).columns if col not in excluded]

    def _load_config(self, config_path: str) -> Dict[str, Any]:
        """Load configuration from file."""
        try:
            with open(config_path, 'r') as f:
                config = json.load(f)
            if not isinstance(config, dict):
                raise ValueError("configuration must be a JSON object")
            self.logger.info(f"Configuration loaded from {config_path}")
            return config
        except Exception as e:
            self.logger.warning(f"Failed to load configuration: {e}")
            return {}
