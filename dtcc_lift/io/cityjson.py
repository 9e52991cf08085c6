# Copyright(C) 2026 Anders Logg
# Licensed under the MIT License

import json
from pathlib import Path
from typing import Dict, Iterable, List

import numpy as np

from ..model import FeatureKind, TopoFeature, z_to_float
from .payload import solid_triangles
from .vertex_index import VertexIndex
from ..logging import info

CITYOBJECT_TYPES = {
    FeatureKind.BUILDING: "Building",
    FeatureKind.TERRAIN: "TINRelief",
    FeatureKind.WATER: "WaterBody",
    FeatureKind.ROAD: "Road",
    FeatureKind.FOREST: "PlantCover",
    FeatureKind.SEPARATION: "GenericCityObject",
    FeatureKind.BRIDGE: "Bridge",
}


def _triangle_boundaries(triangles, index: VertexIndex) -> List:
    boundaries = []
    for triangle in triangles:
        t = index.triangle(triangle)
        if t is not None:
            boundaries.append([list(t)])
    return boundaries


def _surface_boundaries(surfaces, index: VertexIndex) -> List:
    boundaries = []
    for surface in surfaces:
        rings = [index.add_ring(ring) for ring in surface]
        if len(rings[0]) >= 3:
            boundaries.append([r for r in rings if len(r) >= 3])
    return boundaries


def _building_object(building, index: VertexIndex) -> Dict:
    attributes = dict(building.attributes)
    attributes["min-height-surface"] = z_to_float(building.get_height_base())
    attributes["measuredHeight"] = z_to_float(building.get_height())
    if building.parameters.triangulate:
        shell = _triangle_boundaries(solid_triangles(building), index)
    else:
        shell = _surface_boundaries(building.extruded_block(), index)
    return {
        "type": "Building",
        "attributes": attributes,
        "geometry": [{"type": "Solid", "lod": "1", "boundaries": [shell]}],
    }


def _feature_object(feature, index: VertexIndex) -> Dict:
    boundaries = _triangle_boundaries(feature.triangle_points(), index)
    geometry_type = (
        "CompositeSurface" if feature.kind == FeatureKind.TERRAIN else "MultiSurface"
    )
    return {
        "type": CITYOBJECT_TYPES[feature.kind],
        "attributes": dict(feature.attributes),
        "geometry": [{"type": geometry_type, "lod": "1", "boundaries": boundaries}],
    }


def to_cityjson(features: Iterable[TopoFeature], scale: float = 0.001) -> Dict:
    """
    Convert lifted features to a CityJSON 2.0 dictionary.

    Buildings become LOD1 solids (triangulated, or extruded blocks when the
    run parameters disable triangulation) with ``min-height-surface`` and
    ``measuredHeight`` attributes in metres. Other features become LOD1
    surfaces. Vertices are deduplicated across the whole document and
    quantized with the given transform scale.

    Parameters
    ----------
    features : iterable of TopoFeature
        Lifted features with walls constructed.
    scale : float, optional
        CityJSON transform scale (default 0.001).

    Returns
    -------
    dict
        CityJSON formatted dictionary.
    """
    if scale <= 0 or not (scale == scale):
        raise ValueError("Transform scale must be a positive finite number")

    index = VertexIndex()
    city_objects = {}
    for feature in sorted(features, key=lambda f: f.id):
        if feature.is_building():
            city_objects[feature.id] = _building_object(feature, index)
        else:
            city_objects[feature.id] = _feature_object(feature, index)

    cityjson = {
        "type": "CityJSON",
        "version": "2.0",
        "transform": {"scale": [scale, scale, scale], "translate": [0.0, 0.0, 0.0]},
        "CityObjects": city_objects,
        "vertices": [],
    }
    if index.vertices:
        v = np.array(index.vertices)
        cityjson["vertices"] = [
            [int(x), int(y), int(z)] for x, y, z in np.round(v / scale).astype(int).tolist()
        ]
        cityjson["metadata"] = {
            "geographicalExtent": [float(c) for c in (*v.min(axis=0), *v.max(axis=0))]
        }
    return cityjson


def save_cityjson(
    features: Iterable[TopoFeature], path, scale: float = 0.001, indent: int = None
):
    """Save lifted features to a CityJSON file."""
    path = Path(path)
    cj = to_cityjson(features, scale=scale)
    with open(path, "w", encoding="utf-8") as file:
        json.dump(cj, file, indent=indent, ensure_ascii=False)
    info(f"Saved CityJSON with {len(cj['CityObjects'])} objects to {path}")
