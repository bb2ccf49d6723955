"""
Tests for input validation, method resolution and missing data handling.
"""

import math
import unittest
import numpy as np

from WeightedDependence.data_processing.models import (
    Alternative, AnalysisSettings, DependenceMethod, METHOD_ALIASES
)
from WeightedDependence.data_processing.preprocessing import (
    effective_sample_size, preprocess, resolve_alternative, resolve_method
)
from WeightedDependence.exceptions import (
    InvalidAlternativeError, InvalidWeightsError, SizeMismatchError,
    UnknownMethodError, WeightedDependenceError
)


class TestMethodResolution(unittest.TestCase):
    """Tests for the alias table."""

    def test_aliases(self):
        """Every alias maps to its measure."""
        expected = {
            DependenceMethod.PEARSON: ['pearson', 'prho', 'cor'],
            DependenceMethod.SPEARMAN: ['spearman', 'srho', 'rho'],
            DependenceMethod.KENDALL: ['kendall', 'ktau', 'tau'],
            DependenceMethod.BLOMQVIST: ['blomqvist', 'bbeta', 'beta'],
            DependenceMethod.HOEFFDING: ['hoeffding', 'hoeffd', 'd'],
        }
        for method, aliases in expected.items():
            for alias in aliases:
                self.assertEqual(resolve_method(alias), method)

        self.assertEqual(len(METHOD_ALIASES), 15)

    def test_enum_passthrough(self):
        self.assertEqual(resolve_method(DependenceMethod.KENDALL), DependenceMethod.KENDALL)

    def test_unknown_method(self):
        """Aliases are case-sensitive; unknown names raise."""
        for name in ['Pearson', 'KENDALL', 'foo', '', None]:
            with self.assertRaises(UnknownMethodError):
                resolve_method(name)

    def test_exception_hierarchy(self):
        """Input errors are both package errors and ValueErrors."""
        with self.assertRaises(WeightedDependenceError):
            resolve_method('foo')
        with self.assertRaises(ValueError):
            resolve_method('foo')


class TestAlternativeResolution(unittest.TestCase):
    """Tests for alternative hypothesis validation."""

    def test_valid_alternatives(self):
        for name, expected in [('two-sided', Alternative.TWO_SIDED),
                               ('less', Alternative.LESS),
                               ('greater', Alternative.GREATER)]:
            self.assertEqual(resolve_alternative(name, DependenceMethod.PEARSON), expected)

    def test_unknown_alternative(self):
        with self.assertRaises(InvalidAlternativeError):
            resolve_alternative('foo', DependenceMethod.PEARSON)

    def test_hoeffding_two_sided_only(self):
        """Hoeffding's D rejects one-sided alternatives."""
        self.assertEqual(
            resolve_alternative('two-sided', DependenceMethod.HOEFFDING), Alternative.TWO_SIDED
        )
        for name in ['less', 'greater']:
            with self.assertRaises(InvalidAlternativeError):
                resolve_alternative(name, DependenceMethod.HOEFFDING)


class TestEffectiveSampleSize(unittest.TestCase):
    """Tests for the Kish effective sample size."""

    def test_unweighted(self):
        self.assertEqual(effective_sample_size(10), 10.0)
        self.assertEqual(effective_sample_size(10, []), 10.0)

    def test_weighted(self):
        self.assertAlmostEqual(effective_sample_size(3, [1, 2, 3]), 36.0 / 14.0)
        self.assertAlmostEqual(effective_sample_size(4, [2, 2, 2, 2]), 4.0)

    def test_all_zero_weights(self):
        self.assertTrue(math.isnan(effective_sample_size(3, [0, 0, 0])))


class TestPreprocess(unittest.TestCase):
    """Tests for validation and the missing data policy."""

    def setUp(self):
        self.x = [1.0, 2.0, np.nan, 4.0, 5.0]
        self.y = [2.0, 1.0, 3.0, np.nan, 6.0]
        self.weights = [1.0, 2.0, 1.0, 1.0, np.nan]

    def test_size_mismatch(self):
        with self.assertRaises(SizeMismatchError):
            preprocess([1, 2, 3], [1, 2], 'pearson')
        with self.assertRaises(SizeMismatchError):
            preprocess([1, 2, 3], [1, 2, 3], 'pearson', weights=[1, 1])

    def test_negative_weights(self):
        with self.assertRaises(InvalidWeightsError):
            preprocess([1, 2, 3], [1, 2, 3], 'pearson', weights=[1, -1, 1])

    def test_clean_input(self):
        """Inputs without missing values pass through as float copies."""
        sample = preprocess([1, 2, 3], [3, 2, 1], 'tau')
        self.assertEqual(sample.method, DependenceMethod.KENDALL)
        self.assertFalse(sample.return_nan)
        self.assertEqual(sample.n, 3)
        self.assertEqual(sample.n_removed, 0)
        self.assertEqual(len(sample.weights), 0)
        self.assertEqual(sample.x.dtype, np.float64)

    def test_remove_missing(self):
        """Rows with a NaN in x, y or weights are dropped together."""
        sample = preprocess(self.x, self.y, 'pearson', self.weights, remove_missing=True)
        np.testing.assert_array_equal(sample.x, [1.0, 2.0])
        np.testing.assert_array_equal(sample.y, [2.0, 1.0])
        np.testing.assert_array_equal(sample.weights, [1.0, 2.0])
        self.assertEqual(sample.n_removed, 3)
        self.assertFalse(sample.return_nan)

    def test_keep_missing_flags_nan(self):
        """Without removal the sample is flagged instead of raising."""
        sample = preprocess(self.x, self.y, 'pearson', remove_missing=False)
        self.assertTrue(sample.return_nan)
        self.assertEqual(sample.n, 5)

    def test_inputs_not_modified(self):
        x = np.array(self.x)
        preprocess(x, self.y, 'pearson', remove_missing=True)
        self.assertEqual(len(x), 5)
        self.assertTrue(np.isnan(x[2]))


class TestAnalysisSettings(unittest.TestCase):
    """Tests for configuration parsing."""

    def test_defaults(self):
        settings = AnalysisSettings.from_dict({})
        self.assertEqual(settings.method, 'pearson')
        self.assertEqual(settings.alternative, 'two-sided')
        self.assertTrue(settings.remove_missing)
        self.assertIsNone(settings.weights_column)
        self.assertEqual(settings.alpha, 0.05)

    def test_unknown_keys_collected(self):
        settings = AnalysisSettings.from_dict({'method': 'kendall', 'colour': 'red'})
        self.assertEqual(settings.method, 'kendall')
        self.assertEqual(settings.unknown_keys, ['colour'])


if __name__ == '__main__':
    unittest.main()
