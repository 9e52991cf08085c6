import numpy as np
import pytest
import shapely

from dtcc_lift.model import Footprint, key_2d, key_3d


@pytest.fixture
def square():
    return Footprint.from_rings([(0, 0), (1, 0), (1, 1), (0, 1)])


@pytest.fixture
def square_with_hole():
    return Footprint.from_rings(
        [(0, 0), (4, 0), (4, 4), (0, 4)], [[(1, 1), (1, 3), (3, 3), (3, 1)]]
    )


def test_outer_ring_is_clockwise(square):
    assert not shapely.LinearRing(square.outer).is_ccw


def test_holes_are_counter_clockwise(square_with_hole):
    assert len(square_with_hole.inners) == 1
    assert shapely.LinearRing(square_with_hole.inners[0]).is_ccw


def test_rings_have_no_closing_vertex(square):
    assert square.outer.shape == (4, 2)
    assert square.num_vertices == 4


def test_ring_offsets_and_index(square_with_hole):
    assert square_with_hole.ring_offsets == [0, 4]
    assert square_with_hole.ring_and_index(5) == (1, 1)
    assert square_with_hole.ring_and_index(3) == (0, 3)


def test_triangles_square(square):
    triangles = square.triangles
    assert triangles.shape == (2, 3)
    assert pytest.approx(square.area) == 1.0


def test_triangles_with_hole(square_with_hole):
    triangles = square_with_hole.triangles
    assert triangles.shape == (8, 3)
    v = square_with_hole.vertices
    total = 0.0
    for i, j, k in triangles:
        cross = (v[j][0] - v[i][0]) * (v[k][1] - v[i][1]) - (v[j][1] - v[i][1]) * (
            v[k][0] - v[i][0]
        )
        assert cross > 0
        total += cross / 2
    assert pytest.approx(total) == 12.0


def test_empty_footprint():
    footprint = Footprint()
    assert footprint.rings == []
    assert footprint.num_vertices == 0
    assert footprint.triangles.shape == (0, 3)


def test_keys_are_millimetre():
    assert key_2d(1.0001, 2.0) == key_2d(1.0, 2.0)
    assert key_2d(1.002, 2.0) != key_2d(1.0, 2.0)
    assert key_3d(1.0, 2.0, 500) == (1000, 2000, 500)
    assert key_3d(1.0, 2.0, 500) != key_3d(1.0, 2.0, 501)


def test_vertices_stack_outer_first(square_with_hole):
    assert np.allclose(square_with_hole.vertices[:4], square_with_hole.outer)
