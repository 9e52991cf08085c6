# Copyright(C) 2026 Anders Logg
# Licensed under the MIT License

"""Per-feature triangle groups handed to the format writers."""

from typing import List, Tuple

from ..model import TopoFeature
from ..model.object.feature import TrianglePoints


def floor_triangle_points(feature: TopoFeature) -> List[TrianglePoints]:
    """Footprint triangles at the base height, reversed to face down."""
    base = feature.get_base_height()
    return [tri[::-1] for tri in feature.roof_triangle_points(z=base)]


def triangle_groups(
    feature: TopoFeature, lod: int = 1
) -> List[Tuple[str, List[TrianglePoints]]]:
    """
    Triangles of a feature grouped by material name.

    LOD1 gives the lifted roof and the walls; LOD0 flattens buildings to
    their base height. Buildings with floors also get a ``BuildingFloor``
    group.
    """
    material = feature.kind.material
    if lod == 0 and feature.is_building():
        groups = [(material, feature.roof_triangle_points(z=feature.get_base_height()))]
    elif lod == 0:
        groups = [(material, feature.roof_triangle_points())]
    else:
        groups = [(material, feature.triangle_points())]
    if feature.is_building() and feature.parameters.include_floor:
        groups.append((f"{material}Floor", floor_triangle_points(feature)))
    return groups


def solid_triangles(feature: TopoFeature) -> List[TrianglePoints]:
    """All triangles closing the LOD1 solid of a feature."""
    return [tri for _, triangles in triangle_groups(feature, 1) for tri in triangles]
