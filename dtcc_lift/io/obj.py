# Copyright(C) 2026 Anders Logg
# Licensed under the MIT License

from pathlib import Path
from typing import Iterable

from ..model import TopoFeature
from .payload import triangle_groups
from .vertex_index import VertexIndex
from ..logging import info


def to_obj(features: Iterable[TopoFeature], lod: int = 1) -> str:
    """
    Convert lifted features to Wavefront OBJ text.

    Each feature writes one ``usemtl`` block per material. Vertices are
    shared across the whole file and triangles that collapse after
    deduplication are dropped.

    Parameters
    ----------
    features : iterable of TopoFeature
        Lifted features with walls constructed.
    lod : int, default 1
        1 for lifted roofs and walls, 0 for flat footprints.

    Returns
    -------
    str
        The OBJ document.
    """
    if lod not in (0, 1):
        raise ValueError(f"Unsupported OBJ level of detail: {lod}")
    index = VertexIndex(start=1)
    faces = []
    for feature in features:
        for material, triangles in triangle_groups(feature, lod):
            faces.append(f"usemtl {material}")
            for triangle in triangles:
                t = index.triangle(triangle)
                if t is not None:
                    faces.append(f"f {t[0]} {t[1]} {t[2]}")
    lines = [f"v {x:.3f} {y:.3f} {z:.2f}" for x, y, z in index.vertices]
    return "\n".join(lines + faces) + "\n"


def save_obj(features: Iterable[TopoFeature], path, lod: int = 1):
    """Save lifted features to an OBJ file."""
    path = Path(path)
    text = to_obj(features, lod)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)
    info(f"Saved OBJ (LOD{lod}) to {path}")
