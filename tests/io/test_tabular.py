import pytest

from dtcc_lift.io import buildings_to_df, save_csv
from dtcc_lift.model import Footprint, Water


def test_buildings_to_df(lifted_block, unlifted_building):
    water = Water(footprint=Footprint.from_rings([(3, 3), (4, 3), (4, 4)]))
    df = buildings_to_df([lifted_block, unlifted_building, water])
    assert list(df["id"]) == ["b1", "empty"]
    row = df.iloc[0]
    assert row["roof"] == pytest.approx(5.0)
    assert row["ground"] == pytest.approx(0.0)
    assert row["height"] == pytest.approx(5.0)
    assert row["rmse"] == -9999
    assert row["z_values"] == "0|5|"
    assert df.iloc[1]["roof"] == -9999


def test_save_csv(lifted_block, unlifted_building, tmp_path):
    path = tmp_path / "heights.csv"
    save_csv([lifted_block, unlifted_building], path)
    lines = path.read_text().splitlines()
    assert lines == ["id;roof;ground", "b1;5.00;0.00", "empty;-9999;-9999"]


def test_save_csv_extended(lifted_block, tmp_path):
    path = tmp_path / "heights.csv"
    save_csv([lifted_block], path, extended=True)
    header, row = path.read_text().splitlines()
    assert header == "id;roof;ground;base;height;rmse;z_values"
    assert row == "b1;5.00;0.00;0.00;5.00;-9999;0|5|"
