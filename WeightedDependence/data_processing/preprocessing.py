"""
Input validation and missing data handling for dependence measures.

Every estimator consumes the output of :func:`preprocess`: equal-length
float arrays, validated non-negative weights and a resolved
:class:`DependenceMethod`. Missing values are either dropped observation-wise
or turn the whole computation into a NaN result, depending on
``remove_missing``.
"""

import logging
from typing import Optional, Sequence, Union
import numpy as np

from .models import (
    Alternative, DependenceMethod, METHOD_ALIASES, PreparedSample
)
from ..exceptions import (
    InvalidAlternativeError, InvalidWeightsError, SizeMismatchError,
    UnknownMethodError
)

logger = logging.getLogger(__name__)

ArrayLike = Union[Sequence[float], np.ndarray]


def as_float_array(values: Optional[ArrayLike]) -> np.ndarray:
    """Copy ``values`` into a flat float64 array; None becomes an empty array."""
    if values is None:
        return np.empty(0, dtype=float)
    return np.array(values, dtype=float).ravel()


def check_sizes(x: np.ndarray,
                y: np.ndarray,
                weights: Optional[np.ndarray] = None) -> None:
    """Raise SizeMismatchError unless x, y (and non-empty weights) have equal lengths."""
    if len(x) != len(y):
        raise SizeMismatchError(f"x and y must have the same length (got {len(x)} and {len(y)})")
    if weights is not None and len(weights) > 0 and len(weights) != len(x):
        raise SizeMismatchError(
            f"weights must have the same length as x (got {len(weights)} and {len(x)})"
        )


def resolve_method(method: Union[str, DependenceMethod]) -> DependenceMethod:
    """Map a method alias such as 'pearson', 'tau' or 'd' to a DependenceMethod."""
    if isinstance(method, DependenceMethod):
        return method
    try:
        return METHOD_ALIASES[method]
    except (KeyError, TypeError):
        raise UnknownMethodError(
            f"Unknown dependence method: {method!r}. "
            f"Available: {', '.join(sorted(METHOD_ALIASES))}"
        ) from None


def resolve_alternative(alternative: Union[str, Alternative],
                        method: DependenceMethod) -> Alternative:
    """Validate the alternative hypothesis for the given method."""
    if isinstance(alternative, Alternative):
        resolved = alternative
    else:
        try:
            resolved = Alternative(alternative)
        except ValueError:
            raise InvalidAlternativeError(
                f"alternative must be one of 'two-sided', 'less' or 'greater', got {alternative!r}"
            ) from None

    if method == DependenceMethod.HOEFFDING and resolved != Alternative.TWO_SIDED:
        raise InvalidAlternativeError("only two-sided test available for Hoeffding's D")

    return resolved


def effective_sample_size(n: int, weights: Optional[ArrayLike] = None) -> float:
    """
    Kish effective sample size of a weighted sample.

    Effective n = (sum of weights)^2 / sum of squared weights, or ``n`` when no
    weights are given. All-zero weights give NaN.
    """
    weights = as_float_array(weights)
    if len(weights) == 0:
        return float(n)

    sum_weights = weights.sum()
    sum_squared_weights = (weights ** 2).sum()
    if sum_squared_weights == 0:
        return float('nan')

    return float(sum_weights ** 2 / sum_squared_weights)


def preprocess(x: ArrayLike,
               y: ArrayLike,
               method: Union[str, DependenceMethod],
               weights: Optional[ArrayLike] = None,
               remove_missing: bool = True) -> PreparedSample:
    """
    Validate inputs and apply the missing data policy.

    Parameters
    ----------
    x, y : array-like
        Paired observations
    method : str or DependenceMethod
        Dependence measure or one of its aliases
    weights : array-like, optional
        Non-negative observation weights; empty means uniform weights
    remove_missing : bool, default True
        If True, observations with a NaN in x, y or weights are dropped.
        Otherwise the returned sample is flagged with ``return_nan``.

    Returns
    -------
    PreparedSample
        Cleaned copies of the inputs; the caller's data is never modified
    """
    x = as_float_array(x)
    y = as_float_array(y)
    weights = as_float_array(weights)

    check_sizes(x, y, weights)
    resolved = resolve_method(method)

    if np.any(weights < 0):
        raise InvalidWeightsError("weights must be non-negative")

    missing = np.isnan(x) | np.isnan(y)
    if len(weights) > 0:
        missing |= np.isnan(weights)

    n_missing = int(missing.sum())
    if n_missing == 0:
        return PreparedSample(x, y, weights, resolved)

    if not remove_missing:
        logger.debug(f"{n_missing} observations contain missing values; result will be NaN")
        return PreparedSample(x, y, weights, resolved, return_nan=True)

    keep = ~missing
    if len(weights) > 0:
        weights = weights[keep]

    logger.debug(f"Removed {n_missing} of {len(x)} observations with missing values")

    return PreparedSample(x[keep], y[keep], weights, resolved, n_removed=n_missing)
