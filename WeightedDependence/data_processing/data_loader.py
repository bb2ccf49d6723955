"""
Data loading and array adaptation for dependence analysis.

This module converts the containers users typically hold (lists, numpy
arrays, pandas Series and DataFrames) into the flat float arrays consumed by
the estimators, and loads tabular data from CSV, TSV and JSON files.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union
import pandas as pd
import numpy as np

from ..exceptions import DataLoadError


class DataLoader:
    """
    Loader and adapter for numeric data.

    Supports:
    - CSV/TSV/TXT files with separator detection and encoding fallbacks
    - JSON files holding a list of records or a mapping of columns
    - Conversion of vectors and 2-D containers into flat float arrays
    """

    def __init__(self, encoding: str = 'utf-8'):
        """
        Initialize the DataLoader.

        Parameters
        ----------
        encoding : str, default 'utf-8'
            Text encoding tried first when reading delimited files
        """
        self.encoding = encoding
        self.logger = logging.getLogger(__name__)

        # File format handlers
        self._handlers = {
            '.csv': self._load_csv,
            '.tsv': self._load_csv,
            '.txt': self._load_csv,
            '.json': self._load_json,
        }

    def load_data(self, file_path: Union[str, Path], **kwargs) -> pd.DataFrame:
        """
        Load tabular data from file with automatic format detection.

        Parameters
        ----------
        file_path : str or Path
            Path to the data file
        **kwargs
            Additional arguments passed to ``pandas.read_csv``

        Returns
        -------
        pd.DataFrame
            Loaded data
        """
        file_path = Path(file_path)

        if not file_path.exists():
            raise DataLoadError(f"Data file not found: {file_path}")

        extension = file_path.suffix.lower()
        if extension not in self._handlers:
            raise DataLoadError(f"Unsupported file format: {extension}")

        self.logger.info(f"Loading data from {file_path} (format: {extension})")

        data = self._handlers[extension](file_path, **kwargs)

        self.logger.info(f"Loaded {len(data)} records with {len(data.columns)} variables")

        return data

    def to_vector(self, values: Union[pd.Series, np.ndarray, List[float], None]) -> np.ndarray:
        """Flatten a vector-like container into a float64 array (None -> empty)."""
        if values is None:
            return np.empty(0, dtype=float)
        if isinstance(values, (pd.Series, pd.Index)):
            values = values.to_numpy(dtype=float, na_value=np.nan)
        return np.array(values, dtype=float).ravel()

    def to_columns(self,
                   data: Union[pd.DataFrame, np.ndarray, List[List[float]]],
                   variables: Optional[List[str]] = None) -> Tuple[List[str], List[np.ndarray]]:
        """
        Split a 2-D container into labelled float columns.

        Parameters
        ----------
        data : DataFrame or 2-D array-like
            Observations in rows, variables in columns
        variables : list of str, optional
            Subset of DataFrame columns to use. Defaults to all numeric columns.

        Returns
        -------
        tuple
            (column labels, list of flat float arrays)
        """
        if isinstance(data, pd.DataFrame):
            if variables is None:
                variables = data.select_dtypes(include=[np.number]).columns.tolist()
            missing = [var for var in variables if var not in data.columns]
            if missing:
                raise DataLoadError(f"Variables not found in data: {missing}")
            columns = [self.to_vector(data[var]) for var in variables]
            return [str(var) for var in variables], columns

        matrix = np.array(data, dtype=float)
        if matrix.ndim == 1:
            matrix = matrix.reshape(-1, 1)
        if matrix.ndim != 2:
            raise DataLoadError(f"Expected a 2-D array, got {matrix.ndim} dimensions")

        labels = [str(i) for i in range(matrix.shape[1])]
        return labels, [matrix[:, j].copy() for j in range(matrix.shape[1])]

    def _load_csv(self, file_path: Path, **kwargs) -> pd.DataFrame:
        """Load CSV/TSV files, falling back through common encodings."""
        sep = kwargs.pop('sep', None)
        if sep is None:
            if file_path.suffix.lower() == '.tsv':
                sep = '\t'
            else:
                sep = self._detect_separator(file_path)

        for encoding in [self.encoding, 'utf-8', 'latin-1', 'cp1252']:
            try:
                data = pd.read_csv(file_path, sep=sep, encoding=encoding, **kwargs)
                if encoding != self.encoding:
                    self.logger.warning(f"Used fallback encoding: {encoding}")
                return data
            except UnicodeDecodeError:
                continue

        raise DataLoadError("Could not decode file with any supported encoding")

    def _load_json(self, file_path: Path, **kwargs) -> pd.DataFrame:
        """Load JSON data stored as a list of records or a mapping of columns."""
        with open(file_path, 'r', encoding='utf-8') as f:
            json_data = json.load(f)

        if isinstance(json_data, list):
            return pd.DataFrame(json_data)
        elif isinstance(json_data, dict):
            if 'data' in json_data:
                return pd.DataFrame(json_data['data'])
            return pd.DataFrame(json_data)
        else:
            raise DataLoadError("Unsupported JSON structure")

    def _detect_separator(self, file_path: Path) -> str:
        """Detect CSV separator by examining first few lines."""
        with open(file_path, 'r', encoding='utf-8', errors='ignore') as f:
            sample = f.read(1024)

        # Count occurrences of common separators
        separators = [',', ';', '\t', '|']
        counts: Dict[str, int] = {sep: sample.count(sep) for sep in separators}

        # Return separator with highest count
        return max(counts.items(), key=lambda x: x[1])[0]
