# Copyright(C) 2026 Anders Logg
# Licensed under the MIT License

from pathlib import Path
from typing import Iterable

import pandas as pd

from ..model import NO_DATA, TopoFeature, z_to_float
from ..logging import info


def buildings_to_df(features: Iterable[TopoFeature]) -> pd.DataFrame:
    """
    Convert lifted buildings to a pandas DataFrame.

    Non-building features are ignored. Heights are in metres; the
    ``-9999`` sentinel is kept as is.

    Returns
    -------
    pandas.DataFrame
        Columns ``id``, ``roof``, ``ground`` (percentile heights from the run
        parameters), ``base``, ``height``, ``rmse`` and ``z_values``.
    """
    rows = []
    for building in features:
        if not building.is_building():
            continue
        parameters = building.parameters
        rmse = building.get_rmse()
        rows.append(
            {
                "id": building.id,
                "roof": z_to_float(
                    building.get_height_roof_at_percentile(parameters.heightref_top)
                ),
                "ground": z_to_float(
                    building.get_height_ground_at_percentile(parameters.heightref_base)
                ),
                "base": z_to_float(building.get_height_base()),
                "height": z_to_float(building.get_height()),
                "rmse": z_to_float(rmse),
                "z_values": building.get_all_z_values(),
            }
        )
    columns = ["id", "roof", "ground", "base", "height", "rmse", "z_values"]
    return pd.DataFrame(rows, columns=columns)


def _format_height(z: float) -> str:
    return str(NO_DATA) if z == NO_DATA else f"{z:.2f}"


def save_csv(features: Iterable[TopoFeature], path, extended: bool = False):
    """
    Save a semicolon separated summary of building heights.

    Each row is ``id;roof;ground`` in metres with two decimals; the
    extended table adds base, height, RMSE and the sample values.
    """
    path = Path(path)
    df = buildings_to_df(features)
    columns = list(df.columns) if extended else ["id", "roof", "ground"]
    df = df[columns].copy()
    for column in ("roof", "ground", "base", "height", "rmse"):
        if column in df:
            df[column] = df[column].map(_format_height)
    df.to_csv(path, sep=";", index=False)
    info(f"Saved height summary of {len(df)} buildings to {path}")
