import numpy as np
import pytest

from dtcc_lift.builder import SurfaceTree, build_surface_tree, within_range
from dtcc_lift.model import Footprint


@pytest.fixture
def square():
    return Footprint.from_rings([(0, 0), (1, 0), (1, 1), (0, 1)])


def test_within_range_inside(square):
    assert within_range(0.5, 0.5, square, 0.1)


def test_within_range_outside(square):
    assert within_range(1.5, 0.5, square, 1.0)
    assert not within_range(1.5, 0.5, square, 0.2)
    assert not within_range(3.0, 3.0, square, 1.0)


def test_surface_tree_distance():
    vertices = np.array([[0, 0, 5], [1, 0, 5], [1, 1, 5], [0, 1, 5]], dtype=float)
    faces = np.array([[0, 1, 2], [0, 2, 3]])
    tree = SurfaceTree(vertices, faces)
    assert len(tree) == 2
    assert pytest.approx(tree.distance(0.5, 0.5, 6.0)) == 1.0
    assert pytest.approx(tree.distance(0.5, 0.5, 5.0), abs=1e-9) == 0.0
    assert np.allclose(tree.distances([[0.5, 0.5, 4.5], [2.0, 0.5, 5.0]]), [0.5, 1.0])


def test_build_surface_tree_from_features(make_building):
    building = make_building(roof=5.0)
    tree = build_surface_tree([building])
    assert len(tree) == 2
    assert pytest.approx(tree.distance(0.5, 0.5, 7.0)) == 2.0


def test_build_surface_tree_without_heights(make_building):
    building = make_building(roof=None, base=None)
    assert build_surface_tree([building]) is None
