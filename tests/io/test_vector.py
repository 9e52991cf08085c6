import fiona
import pytest
import shapely.geometry

from dtcc_lift.builder import LiftParameters
from dtcc_lift.io import get_vector_driver, load_features, save_features
from dtcc_lift.model import Building, FeatureKind, Water


@pytest.fixture
def footprint_file(tmp_path):
    path = tmp_path / "footprints.geojson"
    schema = {"geometry": "Polygon", "properties": {"name": "str", "kind": "str"}}
    records = [
        ("house", "building", [(0, 0), (1, 0), (1, 1), (0, 1)]),
        ("pond", "water", [(5, 5), (6, 5), (6, 6), (5, 6)]),
    ]
    with fiona.open(path, "w", driver="GeoJSON", schema=schema) as dst:
        for fid, kind, coords in records:
            dst.write(
                {
                    "geometry": shapely.geometry.mapping(shapely.geometry.Polygon(coords)),
                    "properties": {"name": fid, "kind": kind},
                }
            )
    return path


def test_vector_driver():
    assert get_vector_driver("a.shp") == "ESRI Shapefile"
    assert get_vector_driver("a.GPKG") == "GPKG"
    with pytest.raises(ValueError):
        get_vector_driver("a.txt")


def test_load_features(footprint_file):
    parameters = LiftParameters(include_floor=True)
    arena = load_features(footprint_file, id_field="name", parameters=parameters)
    assert len(arena) == 2
    house = arena.by_id("house")
    assert isinstance(house, Building)
    assert house.attributes["kind"] == "building"
    assert house.parameters is parameters
    assert house.footprint.area == pytest.approx(1.0)


def test_load_features_kind_field(footprint_file):
    arena = load_features(footprint_file, id_field="name", kind_field="kind")
    assert isinstance(arena.by_id("pond"), Water)
    assert arena.by_id("pond").get_class() == FeatureKind.WATER


def test_load_multipolygon(tmp_path):
    path = tmp_path / "multi.geojson"
    schema = {"geometry": "MultiPolygon", "properties": {"name": "str"}}
    geom = shapely.geometry.MultiPolygon(
        [
            shapely.geometry.Polygon([(0, 0), (1, 0), (1, 1), (0, 1)]),
            shapely.geometry.Polygon([(3, 0), (4, 0), (4, 1), (3, 1)]),
        ]
    )
    with fiona.open(path, "w", driver="GeoJSON", schema=schema) as dst:
        dst.write({"geometry": shapely.geometry.mapping(geom), "properties": {"name": "m"}})
    arena = load_features(path, id_field="name")
    assert [f.id for f in arena] == ["m-0", "m-1"]


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_features(tmp_path / "missing.shp")


@pytest.mark.parametrize("suffix", [".gpkg", ".geojson"])
def test_save_features(lifted_block, tmp_path, suffix):
    path = tmp_path / f"lifted{suffix}"
    save_features([lifted_block], path)
    with fiona.open(path) as src:
        records = list(src)
    assert len(records) == 1
    properties = records[0]["properties"]
    assert properties["class"] == "Building"
    assert properties["roofheight"] == pytest.approx(5.0)
    assert properties["baseheight"] == pytest.approx(0.0)
    assert properties["name"] == "Block"
    geom = shapely.geometry.shape(records[0]["geometry"])
    assert geom.geom_type == "MultiPolygon"
    assert len(geom.geoms) == 12
    assert geom.has_z


def test_save_features_keeps_ids(lifted_block, unlifted_building, tmp_path):
    path = tmp_path / "lifted.gpkg"
    save_features([lifted_block, unlifted_building], path)
    with fiona.open(path) as src:
        properties = {r["properties"]["id"]: r["properties"] for r in src}
    assert set(properties) == {"b1", "empty"}
    assert properties["empty"]["roofheight"] == -9999
