import logging

import pytest

from dtcc_lift.builder import LiftParameters
from dtcc_lift.common import get_python_logger
from dtcc_lift.model import Building, Footprint

ROOF_CLASS = 6
GROUND_CLASS = 2

UNIT_SQUARE = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]
RIGHT_SQUARE = [(1.0, 0.0), (2.0, 0.0), (2.0, 1.0), (1.0, 1.0)]


@pytest.fixture
def parameters():
    return LiftParameters(
        las_classes_roof=frozenset({ROOF_CLASS}),
        las_classes_ground=frozenset({GROUND_CLASS}),
    )


@pytest.fixture
def make_building(parameters):
    """Factory for a lifted building with one roof and one ground sample."""

    def _make(id="b1", outer=UNIT_SQUARE, roof=5.0, base=0.0, params=None):
        params = params or parameters
        building = Building(
            id=id, footprint=Footprint.from_rings(outer), parameters=params
        )
        cx, cy = building.footprint.geom.representative_point().coords[0]
        if roof is not None:
            building.add_elevation_point((cx, cy), roof, 0.1, ROOF_CLASS)
        if base is not None:
            building.add_elevation_point((cx, cy), base, 0.1, GROUND_CLASS)
        building.lift()
        return building

    return _make


@pytest.fixture
def lift_log(caplog):
    """Capture records of the package logger, which does not propagate."""
    logger = get_python_logger("dtcc-lift")
    logger.addHandler(caplog.handler)
    caplog.handler.setLevel(logging.DEBUG)
    yield caplog
    logger.removeHandler(caplog.handler)
