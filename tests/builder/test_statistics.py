import math

import pytest

from dtcc_lift.builder import percentile_height, root_mean_square
from dtcc_lift.model import NO_DATA

SAMPLES = [500, 100, 400, 200, 300]


def test_percentile_min_and_max():
    assert percentile_height(SAMPLES, 0.0) == min(SAMPLES)
    assert percentile_height(SAMPLES, 1.0) == max(SAMPLES)
    assert percentile_height(SAMPLES, 0.999) == max(SAMPLES)


@pytest.mark.parametrize(
    "percentile, expected", [(0.1, 100), (0.3, 200), (0.5, 300), (0.9, 500)]
)
def test_percentile_floor_index(percentile, expected):
    assert percentile_height(SAMPLES, percentile) == expected


def test_percentile_does_not_reorder_input():
    values = list(SAMPLES)
    percentile_height(values, 0.5)
    assert values == SAMPLES


def test_percentile_empty():
    assert percentile_height([], 0.5) == NO_DATA


@pytest.mark.parametrize("percentile", [-0.1, 1.5, float("nan")])
def test_percentile_out_of_range(percentile):
    assert percentile_height(SAMPLES, percentile) == NO_DATA


def test_root_mean_square():
    assert root_mean_square([3, 4]) == math.floor(math.sqrt((9 + 16) / 2))
    assert root_mean_square([10]) == 10
    assert root_mean_square([]) == NO_DATA
