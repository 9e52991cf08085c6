# Copyright(C) 2026 Dag Wästberg
# Licensed under the MIT License

from pathlib import Path
from typing import Iterable, List, Union

import fiona
import shapely.geometry
from shapely.geometry import MultiPolygon, Polygon

from ..model import (
    FEATURE_CLASSES,
    FeatureArena,
    FeatureKind,
    Footprint,
    TopoFeature,
    z_to_float,
)
from .payload import solid_triangles
from ..logging import info, warning

# Supported vector formats and their Fiona drivers
VECTOR_DRIVERS = {
    ".shp": "ESRI Shapefile",
    ".geojson": "GeoJSON",
    ".json": "GeoJSON",
    ".gpkg": "GPKG",
}


def validate_vector_file(filepath):
    """
    Validate that a vector file exists.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    """
    filepath = Path(filepath)
    if not filepath.is_file():
        raise FileNotFoundError(f"Vector file not found: {filepath}")
    return filepath


def get_vector_driver(filepath):
    """
    Get the appropriate Fiona driver for a file format.
    """
    extension = Path(filepath).suffix.lower()
    driver = VECTOR_DRIVERS.get(extension)
    if driver is None:
        supported = ", ".join(VECTOR_DRIVERS.keys())
        raise ValueError(
            f"Unsupported vector format: {extension}. Supported formats: {supported}"
        )
    return driver


def _polygons(geom) -> List[Polygon]:
    if geom.geom_type == "Polygon":
        return [geom]
    if geom.geom_type == "MultiPolygon":
        return list(geom.geoms)
    warning(f"Unsupported geometry type {geom.geom_type}")
    return []


def load_features(
    filename,
    kind: Union[str, FeatureKind] = "building",
    id_field: str = "id",
    kind_field: str = None,
    parameters=None,
    layer: str = None,
    arena: FeatureArena = None,
) -> FeatureArena:
    """
    Load footprints from a vector file into a feature arena.

    Parameters
    ----------
    filename : str or Path
        Shapefile, GeoJSON or GeoPackage.
    kind : str or FeatureKind, default "building"
        Kind of every feature read, unless ``kind_field`` is given.
    id_field : str, default "id"
        Property holding the persistent identifier. Features without it get
        ``"<layer>-<index>"``.
    kind_field : str, optional
        Property holding the feature kind, e.g. ``"water"``.
    parameters : LiftParameters, optional
        Settings attached to every feature; defaults if omitted.
    layer : str, optional
        Layer to read from multi-layer sources.
    arena : FeatureArena, optional
        Arena to add to, a new one is created if omitted.

    Returns
    -------
    FeatureArena
        Arena holding the loaded features. Multipolygons are split into one
        feature per polygon, with ids ``"<id>-<k>"``.

    Raises
    ------
    FileNotFoundError
        If ``filename`` does not exist.
    """
    from ..builder.parameters import LiftParameters

    filename = validate_vector_file(filename)
    parameters = parameters or LiftParameters()
    arena = FeatureArena() if arena is None else arena
    default_kind = kind if isinstance(kind, FeatureKind) else FeatureKind.from_str(kind)

    count = 0
    with fiona.open(filename, layer=layer) as src:
        layer_name = src.name
        for i, f in enumerate(src):
            if f["geometry"] is None:
                warning(f"Feature {i} of {layer_name} has no geometry")
                continue
            properties = dict(f["properties"])
            feature_kind = default_kind
            if kind_field is not None and properties.get(kind_field):
                feature_kind = FeatureKind.from_str(str(properties[kind_field]))
            fid = properties.get(id_field)
            fid = f"{layer_name}-{i}" if fid is None else str(fid)

            geom = shapely.force_2d(shapely.geometry.shape(f["geometry"]))
            polygons = _polygons(geom)
            for k, polygon in enumerate(polygons):
                if polygon.is_empty:
                    continue
                feature = FEATURE_CLASSES[feature_kind](
                    id=fid if len(polygons) == 1 else f"{fid}-{k}",
                    footprint=Footprint(polygon),
                    attributes=dict(properties),
                    layer=layer_name,
                    parameters=parameters,
                )
                arena.add(feature)
                count += 1
    info(f"Loaded {count} features from {filename}")
    return arena


def _feature_multipolygon(feature: TopoFeature) -> MultiPolygon:
    polygons = []
    for triangle in solid_triangles(feature):
        coords = [(x, y, z_to_float(z)) for x, y, z in triangle]
        keys = {(round(x * 1000), round(y * 1000), z) for x, y, z in triangle}
        if len(keys) == 3:
            polygons.append(Polygon(coords))
    return MultiPolygon(polygons)


def save_features(features: Iterable[TopoFeature], filepath, crs=None):
    """
    Save lifted features to a vector file as 3D multipolygons.

    Each feature becomes one record holding its roof, wall and optional
    floor triangles, with the properties ``id``, ``class``, ``baseheight``
    and ``roofheight`` (metres, ``-9999`` when unknown) plus its original
    attributes as strings.

    Parameters
    ----------
    features : iterable of TopoFeature
        Lifted features with walls constructed.
    filepath : str or Path
        Output file; the format follows the suffix.
    crs : str, optional
        Coordinate reference system of the output, e.g. ``"EPSG:3006"``.
    """
    features = list(features)
    driver = get_vector_driver(filepath)

    reserved = {"id", "class", "baseheight", "roofheight"}
    attribute_names = sorted(
        {str(k) for f in features for k in f.attributes if str(k) not in reserved}
    )
    properties = {
        "id": "str",
        "class": "str",
        "baseheight": "float",
        "roofheight": "float",
    }
    properties.update({name: "str" for name in attribute_names})
    schema = {"geometry": "3D MultiPolygon", "properties": properties}

    with fiona.open(filepath, "w", driver=driver, schema=schema, crs=crs) as dst:
        for feature in features:
            record = {
                "id": str(feature.id),
                "class": feature.kind.material,
                "baseheight": z_to_float(feature.get_base_height()),
                "roofheight": z_to_float(feature.get_height()),
            }
            for name in attribute_names:
                value = feature.attributes.get(name)
                record[name] = None if value is None else str(value)
            geom = _feature_multipolygon(feature)
            dst.write(
                {
                    "geometry": None if geom.is_empty else shapely.geometry.mapping(geom),
                    "properties": record,
                }
            )
    info(f"Saved {len(features)} features to {filepath}")
