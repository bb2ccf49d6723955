"""
Weighted ranking and tie-counting utilities.

All functions take flat float arrays and a weight array of the same length
(unit weights must be passed explicitly) and return new arrays; inputs are
never modified.
"""

from typing import Tuple
import numpy as np


def group_weights(values: np.ndarray, weights: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Weight strictly below and weight of the tie group for every observation.

    Returns
    -------
    tuple
        (below, tied) where ``below[i]`` is the total weight of observations
        with a smaller value and ``tied[i]`` the total weight of observations
        sharing the value of observation ``i`` (itself included)
    """
    _, inverse = np.unique(values, return_inverse=True)
    inverse = inverse.ravel()
    tied = np.bincount(inverse, weights=weights)
    below = np.cumsum(tied) - tied
    return below[inverse], tied[inverse]


def rank_scores(values: np.ndarray, weights: np.ndarray) -> np.ndarray:
    """
    Weighted mid-ranks.

    The rank of an observation is the weight strictly below it plus half the
    weight of its tie group, shifted by 1/2. With unit weights these are the
    usual average ranks (1, 2, ..., n with ties sharing their mean rank).
    """
    below, tied = group_weights(values, weights)
    return below + 0.5 * tied + 0.5


def weighted_median(values: np.ndarray, weights: np.ndarray) -> float:
    """Smallest value whose cumulative weight reaches half of the total weight."""
    if len(values) == 0:
        return float('nan')

    order = np.argsort(values, kind='mergesort')
    sorted_values = values[order]
    cumulative_weights = np.cumsum(weights[order])

    idx = int(np.searchsorted(cumulative_weights, 0.5 * cumulative_weights[-1], side='left'))
    return float(sorted_values[min(idx, len(sorted_values) - 1)])


def tied_pair_weight(group_ids: np.ndarray, weights: np.ndarray) -> float:
    """
    Total weight of pairs falling into the same group.

    For a group G the pair weight is sum over i < j in G of w_i * w_j,
    i.e. ((sum w)^2 - sum w^2) / 2.
    """
    if len(group_ids) < 2:
        return 0.0
    sums = np.bincount(group_ids, weights=weights)
    squares = np.bincount(group_ids, weights=weights ** 2)
    return float(np.sum(sums ** 2 - squares) / 2.0)


def runs(values: np.ndarray) -> np.ndarray:
    """Group ids of consecutive runs of equal values in an already sorted array."""
    if len(values) == 0:
        return np.empty(0, dtype=np.intp)
    starts = np.concatenate(([True], values[1:] != values[:-1]))
    return np.cumsum(starts) - 1


def weighted_inversions(values: np.ndarray, weights: np.ndarray) -> float:
    """
    Weighted number of inversions, counted while merge sorting ``values``.

    Every pair i < j with values[i] > values[j] contributes
    weights[i] * weights[j]; equal values are never counted. Runs in
    O(n log n) with a bottom-up merge sort.
    """
    n = len(values)
    if n < 2:
        return 0.0

    src_v = values.tolist()
    src_w = weights.tolist()
    dst_v = [0.0] * n
    dst_w = [0.0] * n
    inversions = 0.0

    width = 1
    while width < n:
        for start in range(0, n, 2 * width):
            mid = min(start + width, n)
            end = min(start + 2 * width, n)

            # weight of the left run not yet merged
            left_weight = sum(src_w[start:mid])
            i, j, k = start, mid, start
            while i < mid and j < end:
                if src_v[i] <= src_v[j]:
                    left_weight -= src_w[i]
                    dst_v[k] = src_v[i]
                    dst_w[k] = src_w[i]
                    i += 1
                else:
                    inversions += src_w[j] * left_weight
                    dst_v[k] = src_v[j]
                    dst_w[k] = src_w[j]
                    j += 1
                k += 1
            while i < mid:
                dst_v[k] = src_v[i]
                dst_w[k] = src_w[i]
                i += 1
                k += 1
            while j < end:
                dst_v[k] = src_v[j]
                dst_w[k] = src_w[j]
                j += 1
                k += 1

        src_v, dst_v = dst_v, src_v
        src_w, dst_w = dst_w, src_w
        width *= 2

    return inversions


class _FenwickTree:
    """Prefix sums over integer positions 0..size-1."""

    def __init__(self, size: int):
        self.size = size
        self.tree = [0.0] * (size + 1)

    def add(self, position: int, value: float) -> None:
        position += 1
        while position <= self.size:
            self.tree[position] += value
            position += position & -position

    def prefix(self, position: int) -> float:
        """Sum over positions strictly smaller than ``position``."""
        total = 0.0
        while position > 0:
            total += self.tree[position]
            position -= position & -position
        return total


def bivariate_counts(x: np.ndarray, y: np.ndarray, weights: np.ndarray) -> np.ndarray:
    """
    Weighted count of observations jointly below each observation.

    For observation i this is the sum over j != i of
    w_j * [1(x_j < x_i, y_j < y_i) + 1/2 1(x_j = x_i, y_j < y_i)
    + 1/2 1(x_j < x_i, y_j = y_i) + 1/4 1(x_j = x_i, y_j = y_i)].
    Observations are swept in x order while a Fenwick tree over y ranks holds
    the weight of all strictly smaller x values.
    """
    n = len(x)
    counts = np.zeros(n)
    if n == 0:
        return counts

    _, y_rank = np.unique(y, return_inverse=True)
    y_rank = y_rank.ravel()
    tree = _FenwickTree(int(y_rank.max()) + 1)

    order = np.lexsort((y, x))
    x_groups = runs(x[order])
    boundaries = np.flatnonzero(np.diff(x_groups)) + 1

    for group in np.split(order, boundaries):
        for i in group:
            r = int(y_rank[i])
            lower = tree.prefix(r)
            counts[i] = lower + 0.5 * (tree.prefix(r + 1) - lower)

        # ties in x within the group
        group_w = weights[group]
        below, tied = group_weights(y[group], group_w)
        counts[group] += 0.5 * below + 0.25 * (tied - group_w)

        for i in group:
            tree.add(int(y_rank[i]), float(weights[i]))

    return counts
