"""
Tests for the dependence engine, dependence matrices and the analysis tool.
"""

import json
import math
import os
import tempfile
import unittest
import pandas as pd
import numpy as np

from WeightedDependence import DependenceAnalysisTool, wdm_mat
from WeightedDependence.correlation_analysis import DependenceEngine, compute_measure
from WeightedDependence.data_processing import DataLoader
from WeightedDependence.exceptions import DataLoadError, TooFewColumnsError


class TestDependenceEngine(unittest.TestCase):
    """Tests for DependenceEngine."""

    def setUp(self):
        np.random.seed(21)
        self.n = 60
        a = np.random.normal(0, 1, self.n)
        self.data = pd.DataFrame({
            'a': a,
            'b': a + np.random.normal(0, 0.5, self.n),
            'c': np.random.normal(0, 1, self.n),
            'group': np.random.choice(['x', 'y'], self.n)
        })
        self.weights = np.random.uniform(0.5, 2.0, self.n)
        self.engine = DependenceEngine()

    def test_measure_matrix(self):
        """The matrix is symmetric, has a unit diagonal and matches pairwise measures."""
        for method in ['pearson', 'spearman', 'kendall', 'blomqvist', 'hoeffding']:
            matrix = self.engine.compute_matrix(self.data, method, self.weights)

            self.assertEqual(list(matrix.index), ['a', 'b', 'c'])
            self.assertEqual(list(matrix.columns), ['a', 'b', 'c'])
            np.testing.assert_array_equal(np.diag(matrix.values), np.ones(3))
            np.testing.assert_array_equal(matrix.values, matrix.values.T)
            self.assertEqual(
                matrix.loc['a', 'c'],
                compute_measure(self.data['a'].values, self.data['c'].values, method, self.weights)
            )

    def test_array_input(self):
        """Plain 2-D arrays are labelled by column position."""
        values = self.data[['a', 'b', 'c']].values
        matrix = wdm_mat(values, 'tau')
        self.assertEqual(list(matrix.columns), ['0', '1', '2'])
        self.assertGreater(matrix.loc['0', '1'], 0.5)

    def test_variable_selection(self):
        matrix = self.engine.compute_matrix(self.data, 'kendall', variables=['c', 'a'])
        self.assertEqual(list(matrix.columns), ['c', 'a'])

        with self.assertRaises(DataLoadError):
            self.engine.compute_matrix(self.data, 'kendall', variables=['a', 'missing'])

    def test_too_few_columns(self):
        with self.assertRaises(TooFewColumnsError):
            self.engine.compute_matrix(self.data[['a']], 'pearson')
        with self.assertRaises(TooFewColumnsError):
            wdm_mat(np.arange(10.0), 'pearson')

    def test_pairwise_missing_data(self):
        """Each pair uses its own complete rows."""
        data = self.data.copy()
        data.loc[0, 'a'] = np.nan
        data.loc[1, 'c'] = np.nan
        matrix = self.engine.compute_matrix(data, 'pearson')

        keep = np.arange(self.n) != 1
        expected = compute_measure(self.data['b'].values[keep], self.data['c'].values[keep], 'pearson')
        self.assertAlmostEqual(matrix.loc['b', 'c'], expected, places=12)

        matrix = self.engine.compute_matrix(data, 'pearson', remove_missing=False)
        self.assertTrue(math.isnan(matrix.loc['a', 'b']))
        self.assertEqual(matrix.loc['a', 'a'], 1.0)

    def test_all_pairs(self):
        results = self.engine.test_all_pairs(self.data, 'kendall', self.weights)
        pairs = [(r.variable1, r.variable2) for r in results]
        self.assertEqual(pairs, [('a', 'b'), ('a', 'c'), ('b', 'c')])
        self.assertTrue(results[0].is_significant())

        direct = self.engine.independence_test(
            self.data['b'], self.data['c'], 'kendall', self.weights
        )
        self.assertEqual(results[2].result, direct)

    def test_pvalue_matrix(self):
        results = self.engine.test_all_pairs(self.data, 'spearman')
        matrix = self.engine.pvalue_matrix(self.data, 'spearman')

        np.testing.assert_array_equal(np.diag(matrix.values), np.zeros(3))
        np.testing.assert_array_equal(matrix.values, matrix.values.T)
        for pair in results:
            self.assertEqual(matrix.loc[pair.variable1, pair.variable2], pair.result.p_value)

    def test_series_inputs(self):
        """pandas Series are accepted for data and weights."""
        value = self.engine.compute_measure(
            self.data['a'], self.data['b'], 'spearman', pd.Series(self.weights)
        )
        expected = compute_measure(
            self.data['a'].values, self.data['b'].values, 'spearman', self.weights
        )
        self.assertEqual(value, expected)


class TestDataLoader(unittest.TestCase):
    """Tests for DataLoader file handling."""

    def setUp(self):
        self.loader = DataLoader()
        self.temp_dir = tempfile.mkdtemp()
        self.frame = pd.DataFrame({'x': [1.0, 2.0, 3.0], 'y': [3.0, 1.0, 2.0]})

    def test_load_csv(self):
        path = os.path.join(self.temp_dir, 'data.csv')
        self.frame.to_csv(path, index=False)
        loaded = self.loader.load_data(path)
        pd.testing.assert_frame_equal(loaded, self.frame)

    def test_load_semicolon_csv(self):
        path = os.path.join(self.temp_dir, 'data.csv')
        self.frame.to_csv(path, index=False, sep=';')
        loaded = self.loader.load_data(path)
        self.assertEqual(list(loaded.columns), ['x', 'y'])

    def test_load_json(self):
        path = os.path.join(self.temp_dir, 'data.json')
        with open(path, 'w') as f:
            json.dump({'data': self.frame.to_dict(orient='records')}, f)
        loaded = self.loader.load_data(path)
        self.assertEqual(list(loaded.columns), ['x', 'y'])
        self.assertEqual(len(loaded), 3)

    def test_load_errors(self):
        with self.assertRaises(DataLoadError):
            self.loader.load_data(os.path.join(self.temp_dir, 'missing.csv'))

        path = os.path.join(self.temp_dir, 'data.xyz')
        with open(path, 'w') as f:
            f.write('x')
        with self.assertRaises(DataLoadError):
            self.loader.load_data(path)


class TestDependenceAnalysisTool(unittest.TestCase):
    """Integration tests for DependenceAnalysisTool."""

    def setUp(self):
        np.random.seed(42)
        self.n = 100
        x = np.random.normal(0, 1, self.n)
        self.data = pd.DataFrame({
            'x': x,
            'y': x ** 3 + np.random.normal(0, 1, self.n),
            'z': np.random.normal(0, 1, self.n),
            'w': np.random.uniform(0.5, 2.0, self.n)
        })
        self.data.loc[5, 'y'] = np.nan

        self.temp_dir = tempfile.mkdtemp()
        self.data_path = os.path.join(self.temp_dir, 'sample.csv')
        self.data.to_csv(self.data_path, index=False)

        self.config_path = os.path.join(self.temp_dir, 'config.json')
        with open(self.config_path, 'w') as f:
            json.dump({'method': 'kendall', 'weights_column': 'w', 'colour': 'red'}, f)

        self.tool = DependenceAnalysisTool(config_path=self.config_path, log_level='WARNING')

    def test_configuration(self):
        self.assertEqual(self.tool.settings.method, 'kendall')
        self.assertEqual(self.tool.settings.weights_column, 'w')
        self.assertEqual(self.tool.settings.unknown_keys, ['colour'])

    def test_invalid_configuration_falls_back(self):
        path = os.path.join(self.temp_dir, 'bad.json')
        with open(path, 'w') as f:
            json.dump([1, 2, 3], f)
        tool = DependenceAnalysisTool(config_path=path, log_level='WARNING')
        self.assertEqual(tool.settings.method, 'pearson')

    def test_measure_uses_configured_defaults(self):
        self.tool.load_data(self.data_path)
        value = self.tool.measure('x', 'y')
        expected = compute_measure(
            self.tool.data['x'].values, self.tool.data['y'].values, 'kendall', self.tool.data['w'].values
        )
        self.assertEqual(value, expected)

        unweighted = self.tool.measure('x', 'y', method='pearson', data=self.data)
        self.assertNotEqual(unweighted, value)

    def test_independence_test(self):
        self.tool.load_data(self.data_path)
        result = self.tool.independence_test('x', 'y')
        self.assertTrue(result.is_significant())
        self.assertLess(result.n_eff, self.n - 1)

        with self.assertRaises(DataLoadError):
            self.tool.independence_test('x', 'unknown')

    def test_matrix_excludes_weights(self):
        self.tool.load_data(self.data_path)
        matrix = self.tool.measure_matrix()
        self.assertEqual(list(matrix.columns), ['x', 'y', 'z'])

    def test_pairwise_tests_and_summary(self):
        self.tool.load_data(self.data_path)
        results = self.tool.pairwise_tests()
        self.assertEqual(len(results), 3)

        summary = self.tool.get_analysis_summary()
        self.assertTrue(summary['data_loaded'])
        self.assertEqual(summary['n_records'], self.n)
        self.assertEqual(summary['n_tests'], 3)
        self.assertEqual(summary['weights_variable'], 'w')
        self.assertIn('pairwise_tests', summary['analyses_completed'])
        self.assertGreaterEqual(summary['significant_tests'], 1)

    def test_no_data(self):
        with self.assertRaises(ValueError):
            self.tool.measure('x', 'y')


if __name__ == '__main__':
    unittest.main()
