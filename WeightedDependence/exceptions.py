"""
Custom exceptions for WeightedDependence.
"""


class WeightedDependenceError(Exception):
    """Base exception for WeightedDependence."""
    pass


class SizeMismatchError(WeightedDependenceError, ValueError):
    """Raised when x, y and weights do not have matching lengths."""
    pass


class UnknownMethodError(WeightedDependenceError, ValueError):
    """Raised when a method name cannot be resolved to a dependence measure."""
    pass


class InvalidAlternativeError(WeightedDependenceError, ValueError):
    """Raised when the alternative hypothesis is unknown or not supported by the measure."""
    pass


class InvalidWeightsError(WeightedDependenceError, ValueError):
    """Raised when weights contain negative values."""
    pass


class TooFewColumnsError(WeightedDependenceError, ValueError):
    """Raised when a dependence matrix is requested for fewer than two columns."""
    pass


class DataLoadError(WeightedDependenceError):
    """Raised when data cannot be loaded."""
    pass
