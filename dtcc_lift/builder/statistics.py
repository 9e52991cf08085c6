# Copyright(C) 2026 Anders Logg
# Licensed under the MIT License

import numpy as np
from typing import Sequence

from ..model.heights import NO_DATA


def percentile_height(values: Sequence[int], percentile: float) -> int:
    """
    Order statistic of integer samples at the given percentile.

    The selected element is the one at index ``floor(n * percentile)`` of
    the sorted samples, found with a partial sort (``numpy.partition``,
    introselect). A percentile of 1.0 selects the maximum.

    Parameters
    ----------
    values : sequence of int
        Samples in centimetres, in any order. The sequence is not modified.
    percentile : float
        Percentile in [0, 1].

    Returns
    -------
    int
        The selected sample, or ``NO_DATA`` when there are no samples or the
        percentile lies outside [0, 1].
    """
    n = len(values)
    if n == 0:
        return NO_DATA
    if not 0.0 <= percentile <= 1.0:
        return NO_DATA
    k = min(int(n * percentile), n - 1)
    return int(np.partition(np.asarray(values, dtype=np.int64), k)[k])


def root_mean_square(values: Sequence[int]) -> int:
    """
    Root mean square of integer centimetre samples.

    The squares are summed and divided by the count with integer division
    before the square root is taken and truncated, so ``[3, 4]`` gives
    ``int(sqrt(25 // 2)) == 3``.

    Returns
    -------
    int
        RMS in centimetres, or ``NO_DATA`` for an empty sequence.
    """
    n = len(values)
    if n == 0:
        return NO_DATA
    d = np.asarray(values, dtype=np.int64)
    return int(np.sqrt(int(np.sum(d * d)) // n))
