import pytest

from dtcc_lift.builder import LiftParameters, build_node_columns, construct_walls
from dtcc_lift.model import FeatureArena


@pytest.fixture
def lifted_block(make_building):
    """A walled 1x1 m building, base 0 m, roof 5 m, closed by a floor."""
    params = LiftParameters(
        las_classes_roof={6}, las_classes_ground={2}, include_floor=True
    )
    building = make_building("b1", params=params, roof=5.0, base=0.0)
    building.attributes["name"] = "Block"
    arena = FeatureArena([building])
    construct_walls(arena, build_node_columns(arena))
    return building


@pytest.fixture
def unlifted_building(make_building):
    return make_building("empty", roof=None, base=None)
