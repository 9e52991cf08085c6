import math

import pytest

from dtcc_lift.builder import LiftParameters
from dtcc_lift.model import (
    NO_DATA,
    Building,
    FeatureArena,
    FeatureKind,
    Footprint,
    Terrain,
    Water,
    z_to_float,
    to_centimeters,
)

SQUARE = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]


def test_heights_conversion():
    assert to_centimeters(5.0) == 500
    assert to_centimeters(1.239) == 123
    assert z_to_float(500) == 5.0
    assert z_to_float(NO_DATA) == -9999.0


def test_feature_kind_from_str():
    assert FeatureKind.from_str("water") == FeatureKind.WATER
    assert FeatureKind.WATER.material == "Water"
    with pytest.raises(ValueError):
        FeatureKind.from_str("castle")


def test_building_sample_filters(parameters):
    building = Building(footprint=Footprint.from_rings(SQUARE), parameters=parameters)
    assert building.add_elevation_point((0.5, 0.5), 5.0, 0.1, 6)
    assert building.add_elevation_point((0.5, 0.5), 0.2, 0.1, 2)
    assert building.add_elevation_point((0.5, 0.5), 3.0, 0.1, 1)
    assert building.inside_samples == [500]
    assert building.ground_samples == [20]


def test_building_sample_out_of_range(parameters):
    building = Building(footprint=Footprint.from_rings(SQUARE), parameters=parameters)
    assert building.add_elevation_point((1.5, 0.5), 5.0, 0.6, 6)
    assert not building.add_elevation_point((1.5, 0.5), 5.0, 0.4, 6)
    assert building.inside_samples == [500]


def test_building_empty_filters_accept_everything():
    building = Building(footprint=Footprint.from_rings(SQUARE))
    building.add_elevation_point((0.5, 0.5), 5.0, 0.1, 17)
    assert building.inside_samples == [500]
    assert building.ground_samples == [500]


def test_lift_without_samples_gives_no_data():
    building = Building(footprint=Footprint.from_rings(SQUARE))
    assert building.lift()
    assert building.get_height_base() == NO_DATA
    assert building.get_height() == NO_DATA
    assert building.get_vertex_elevation(0, 0) == NO_DATA
    assert building.get_roof_height_at(0, 0) == NO_DATA


def test_base_falls_back_to_roof_samples(parameters):
    building = Building(footprint=Footprint.from_rings(SQUARE), parameters=parameters)
    for z in (3.0, 4.0, 5.0, 6.0, 7.0):
        building.add_elevation_point((0.5, 0.5), z, 0.1, 6)
    building.lift()
    # floor(5 * 0.1) = 0 and floor(5 * 0.9) = 4
    assert building.get_height_base() == 300
    assert building.get_height() == 700


def test_building_lift(make_building):
    building = make_building(roof=5.0, base=0.5)
    assert building.lifted
    assert building.get_height() == 500
    assert building.get_height_base() == 50
    assert building.elevations == [[500] * 4]
    assert building.get_roof_height_at(0, 3) == 500


def test_second_lift_is_refused(make_building, lift_log):
    building = make_building()
    assert not building.lift()
    assert "already lifted" in lift_log.text


def test_samples_after_lift_are_ignored(make_building):
    building = make_building()
    assert not building.add_elevation_point((0.5, 0.5), 9.0, 0.1, 6)
    assert building.inside_samples == [500]


def test_percentile_queries(parameters):
    building = Building(footprint=Footprint.from_rings(SQUARE), parameters=parameters)
    for z in (1.0, 2.0, 3.0, 4.0):
        building.add_elevation_point((0.5, 0.5), z, 0.1, 2)
    assert building.get_height_ground_at_percentile(0.0) == 100
    assert building.get_height_ground_at_percentile(0.99) == 400
    assert building.get_height_ground_at_percentile(0.5) == 300
    assert building.get_height_roof_at_percentile(0.5) == NO_DATA
    assert building.get_height_ground_at_percentile(2.0) == NO_DATA


def test_rmse_of_distances():
    building = Building(footprint=Footprint.from_rings(SQUARE))
    assert building.get_rmse() == NO_DATA
    building._distances_inside.extend([3, 4])
    assert building.get_rmse() == math.floor(math.sqrt((9 + 16) // 2))
    assert building.get_rmse() == 3


def test_all_z_values(parameters):
    building = Building(footprint=Footprint.from_rings(SQUARE), parameters=parameters)
    building.add_elevation_point((0.5, 0.5), 5.5, 0.1, 6)
    building.add_elevation_point((0.5, 0.5), 0.25, 0.1, 2)
    assert building.get_all_z_values() == "0.25|5.5|"


def test_water_is_flat():
    water = Water(footprint=Footprint.from_rings(SQUARE))
    for z in (1.0, 3.0, 2.0):
        water.add_elevation_point((0.5, 0.5), z, 0.1, 9)
    water.lift()
    assert water.get_height() == 200
    assert water.elevations == [[200] * 4]
    assert water.get_base_height() == 200


def test_water_class_filter():
    parameters = LiftParameters(las_classes_features={"water": frozenset({9})})
    water = Water(footprint=Footprint.from_rings(SQUARE), parameters=parameters)
    water.add_elevation_point((0.5, 0.5), 1.0, 0.1, 9)
    water.add_elevation_point((0.5, 0.5), 8.0, 0.1, 6)
    assert water.inside_samples == [100]


def test_terrain_vertex_elevations():
    terrain = Terrain(footprint=Footprint.from_rings([(0, 0), (10, 0), (10, 10), (0, 10)]))
    terrain.add_elevation_point((0.5, 0.5), 1.0, 0.1, 2)
    terrain.add_elevation_point((5.0, 5.0), 5.0, 0.1, 2)
    terrain.lift()
    ring = terrain.footprint.outer
    for i, (x, y) in enumerate(ring):
        expected = 100 if (x, y) == (0.0, 0.0) else 500
        assert terrain.get_vertex_elevation(0, i) == expected
    assert terrain.get_base_height() == 100
    assert terrain.get_height() == 500


def test_terrain_without_samples():
    terrain = Terrain(footprint=Footprint.from_rings(SQUARE))
    terrain.lift()
    assert terrain.get_vertex_elevation(0, 0) == NO_DATA
    assert terrain.get_base_height() == NO_DATA


def test_has_segment():
    building = Building(footprint=Footprint.from_rings(SQUARE))
    ring = building.footprint.outer
    a, b = ring[1], ring[2]
    assert building.has_segment(a, b) == (0, 1, 0, 2)
    assert building.has_segment(b, a) is None


def test_wall_vertex_dedup_and_degenerate_triangles():
    building = Building(footprint=Footprint.from_rings(SQUARE))
    v0 = building.add_wall_vertex(0.0, 0.0, 0)
    v1 = building.add_wall_vertex(0.0, 0.0, 0)
    v2 = building.add_wall_vertex(0.0, 0.0, 500)
    v3 = building.add_wall_vertex(1.0, 0.0, 0)
    assert v0 == v1
    assert not building.add_wall_triangle(v0, v1, v2)
    assert building.add_wall_triangle(v0, v3, v2)
    assert building.wall_triangles == [(v0, v3, v2)]
    assert len(building.wall_vertices) == 3


def test_arena_handles():
    a = Building(id="a", footprint=Footprint.from_rings(SQUARE))
    b = Water(id="w", footprint=Footprint.from_rings(SQUARE))
    arena = FeatureArena([a, b])
    assert (a.handle, b.handle) == (0, 1)
    assert arena.by_id("w") is b
    assert arena.get(5) is None
    assert arena.buildings == [a]
    arena.link(a.handle, b.handle)
    assert arena.neighbors(a) == [b]
    with pytest.raises(ValueError):
        FeatureArena([a])
