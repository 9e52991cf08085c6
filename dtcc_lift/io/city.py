# Copyright(C) 2026 Anders Logg
# Licensed under the MIT License

from pathlib import Path
from typing import Iterable

from ..model import TopoFeature
from .cityjson import save_cityjson
from .citygml import save_citygml
from .obj import save_obj
from .tabular import save_csv
from .vector import VECTOR_DRIVERS, save_features
from ..logging import info

_save_formats = {
    ".obj": save_obj,
    ".city.json": save_cityjson,
    ".gml": save_citygml,
    ".xml": save_citygml,
    ".csv": save_csv,
}
_save_formats.update({suffix: save_features for suffix in VECTOR_DRIVERS})


def save(features: Iterable[TopoFeature], filename, **kwargs):
    """
    Save lifted features, choosing the format from the file suffix.

    ``.obj`` writes OBJ, ``.city.json`` CityJSON, ``.gml``/``.xml``
    CityGML, ``.csv`` the building height summary, and ``.shp``,
    ``.gpkg``, ``.geojson``, ``.json`` 3D multipolygons.

    Raises
    ------
    ValueError
        If the suffix is not supported.
    """
    filename = Path(filename)
    suffixes = "".join(filename.suffixes[-2:]).lower()
    writer = _save_formats.get(suffixes) or _save_formats.get(filename.suffix.lower())
    if writer is None:
        supported = ", ".join(_save_formats.keys())
        raise ValueError(
            f"Unsupported output format: {filename.suffix}. Supported formats: {supported}"
        )
    info(f"Saving lifted features to {filename}")
    writer(list(features), filename, **kwargs)


def list_io():
    """Supported output suffixes."""
    return {"save_formats": list(_save_formats.keys())}
