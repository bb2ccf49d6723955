"""
Weighted dependence measures.

Each estimator takes two flat float arrays and an optional weight array of
the same length (None or empty means unit weights) and returns a float.
Inputs are assumed to be free of missing values; degenerate samples such as a
constant column give NaN instead of raising.

Available measures:
- prho: Pearson correlation
- srho: Spearman's rho
- ktau: Kendall's tau (tau-b)
- bbeta: Blomqvist's beta
- hoeffd: Hoeffding's D
"""

from typing import Optional, Union, Sequence
import numpy as np

from .ranking import (
    bivariate_counts, group_weights, rank_scores, runs, tied_pair_weight,
    weighted_inversions, weighted_median
)
from ..data_processing.models import DependenceMethod
from ..data_processing.preprocessing import as_float_array, check_sizes, preprocess

NAN = float('nan')


def _prepare(x, y, weights):
    """Flat float copies of the inputs with explicit unit weights."""
    x = as_float_array(x)
    y = as_float_array(y)
    weights = as_float_array(weights)
    check_sizes(x, y, weights)
    if len(weights) == 0:
        weights = np.ones(len(x))
    return x, y, weights


def _is_constant(values: np.ndarray, weights: np.ndarray) -> bool:
    """True if all observations carrying positive weight share one value."""
    active = values[weights > 0]
    return len(active) == 0 or bool(np.all(active == active[0]))


def prho(x, y, weights=None) -> float:
    """
    Weighted Pearson correlation.

    Weighted covariance divided by the product of the weighted standard
    deviations. Returns NaN for zero variance or zero total weight.
    """
    x, y, weights = _prepare(x, y, weights)
    if len(x) < 2 or weights.sum() <= 0:
        return NAN
    if _is_constant(x, weights) or _is_constant(y, weights):
        return NAN

    w_sum = weights.sum()
    x_mean = (weights * x).sum() / w_sum
    y_mean = (weights * y).sum() / w_sum

    x_dev = x - x_mean
    y_dev = y - y_mean
    covariance = (weights * x_dev * y_dev).sum()
    x_var = (weights * x_dev ** 2).sum()
    y_var = (weights * y_dev ** 2).sum()

    if x_var <= 0 or y_var <= 0:
        return NAN

    correlation = covariance / np.sqrt(x_var * y_var)
    return float(np.clip(correlation, -1.0, 1.0))


def srho(x, y, weights=None) -> float:
    """Weighted Spearman's rho: weighted Pearson correlation of weighted mid-ranks."""
    x, y, weights = _prepare(x, y, weights)
    if len(x) < 2:
        return NAN
    return prho(rank_scores(x, weights), rank_scores(y, weights), weights)


def ktau(x, y, weights=None) -> float:
    """
    Weighted Kendall's tau-b.

    A pair (i, j) carries weight w_i * w_j. Observations are sorted by x (ties
    broken by y), discordant pairs are counted as weighted inversions while
    merge sorting y, and the tied pairs in x, in y and in both enter the tau-b
    normalization:

        tau = (N0 - Tx - Ty + Txy - 2 Nd) / sqrt((N0 - Tx) (N0 - Ty))
    """
    x, y, weights = _prepare(x, y, weights)
    if len(x) < 2:
        return NAN

    order = np.lexsort((y, x))
    x, y, weights = x[order], y[order], weights[order]

    x_groups = runs(x)
    ties_x = tied_pair_weight(x_groups, weights)
    joint_groups = _joint_ids(x_groups, y)
    ties_both = tied_pair_weight(joint_groups, weights)

    discordant = weighted_inversions(y, weights)

    y_sorted = np.argsort(y, kind='mergesort')
    ties_y = tied_pair_weight(runs(y[y_sorted]), weights[y_sorted])

    total = (weights.sum() ** 2 - (weights ** 2).sum()) / 2.0

    denominator = (total - ties_x) * (total - ties_y)
    if denominator <= 0:
        return NAN

    numerator = total - ties_x - ties_y + ties_both - 2.0 * discordant
    return float(np.clip(numerator / np.sqrt(denominator), -1.0, 1.0))


def _joint_ids(x_groups: np.ndarray, y: np.ndarray) -> np.ndarray:
    """Run ids of (x group, y) pairs in data sorted by x, then y."""
    changes = np.concatenate(([True], (x_groups[1:] != x_groups[:-1]) | (y[1:] != y[:-1])))
    return np.cumsum(changes) - 1


def bbeta(x, y, weights=None) -> float:
    """
    Weighted Blomqvist's beta.

    Observations are classified by the quadrant they occupy around the
    weighted medians; observations on a median line are excluded:

        beta = sum w_i s_i / sum w_i |s_i|,  s_i = sign(x_i - m_x) sign(y_i - m_y)
    """
    x, y, weights = _prepare(x, y, weights)
    if len(x) == 0 or weights.sum() <= 0:
        return NAN

    median_x = weighted_median(x, weights)
    median_y = weighted_median(y, weights)

    quadrant = np.sign(x - median_x) * np.sign(y - median_y)
    denominator = (weights * np.abs(quadrant)).sum()
    if denominator <= 0:
        return NAN

    return float((weights * quadrant).sum() / denominator)


def hoeffd(x, y, weights=None) -> float:
    """
    Weighted Hoeffding's D.

    Weights are rescaled to sum to n, so constant weights give the classical
    statistic. With weighted marginal ranks R, S and bivariate ranks Q:

        D1 = sum w (Q - 1)(Q - 2)
        D2 = sum w (R - 1)(R - 2)(S - 1)(S - 2)
        D3 = sum w (R - 2)(S - 2)(Q - 1)
        D  = 30 [(n-2)(n-3) D1 + D2 - 2 (n-2) D3] / [n (n-1) (n-2) (n-3) (n-4)]

    Needs at least five observations; constant columns give NaN.
    """
    x, y, weights = _prepare(x, y, weights)
    n = len(x)
    w_sum = weights.sum()
    if n < 5 or w_sum <= 0:
        return NAN
    if _is_constant(x, weights) or _is_constant(y, weights):
        return NAN

    weights = weights * (n / w_sum)

    below_x, tied_x = group_weights(x, weights)
    below_y, tied_y = group_weights(y, weights)
    r = 1.0 + below_x + 0.5 * (tied_x - weights)
    s = 1.0 + below_y + 0.5 * (tied_y - weights)
    q = 1.0 + bivariate_counts(x, y, weights)

    d1 = np.sum(weights * (q - 1) * (q - 2))
    d2 = np.sum(weights * (r - 1) * (r - 2) * (s - 1) * (s - 2))
    d3 = np.sum(weights * (r - 2) * (s - 2) * (q - 1))

    numerator = (n - 2) * (n - 3) * d1 + d2 - 2 * (n - 2) * d3
    denominator = n * (n - 1) * (n - 2) * (n - 3) * (n - 4)
    return float(30.0 * numerator / denominator)


ESTIMATORS = {
    DependenceMethod.PEARSON: prho,
    DependenceMethod.SPEARMAN: srho,
    DependenceMethod.KENDALL: ktau,
    DependenceMethod.BLOMQVIST: bbeta,
    DependenceMethod.HOEFFDING: hoeffd,
}


def estimate(x: np.ndarray,
             y: np.ndarray,
             method: DependenceMethod,
             weights: Optional[np.ndarray] = None) -> float:
    """Dispatch to the estimator of an already resolved method."""
    return ESTIMATORS[method](x, y, weights)


def wdm(x: Union[Sequence[float], np.ndarray],
        y: Union[Sequence[float], np.ndarray],
        method: Union[str, DependenceMethod],
        weights: Optional[Union[Sequence[float], np.ndarray]] = None,
        remove_missing: bool = True) -> float:
    """
    Calculate a (weighted) dependence measure.

    Parameters
    ----------
    x, y : array-like
        Input data
    method : str or DependenceMethod
        'pearson'/'prho'/'cor', 'spearman'/'srho'/'rho',
        'kendall'/'ktau'/'tau', 'blomqvist'/'bbeta'/'beta' or
        'hoeffding'/'hoeffd'/'d'
    weights : array-like, optional
        Observation weights
    remove_missing : bool, default True
        If True, observations containing NaN are removed; otherwise NaN is
        returned when missing values are present

    Returns
    -------
    float
        The dependence measure, NaN if undefined
    """
    sample = preprocess(x, y, method, weights, remove_missing)
    if sample.return_nan:
        return NAN
    return estimate(sample.x, sample.y, sample.method, sample.weights)
