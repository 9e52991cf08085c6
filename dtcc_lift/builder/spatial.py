# Copyright(C) 2026 Anders Logg
# Licensed under the MIT License

from typing import Iterable

import numpy as np
import shapely
import trimesh

from ..model.heights import NO_DATA, z_to_float
from ..logging import info, warning


def within_range(x: float, y: float, footprint, radius: float) -> bool:
    """
    Check whether a point lies inside a footprint or within ``radius`` of it.

    Parameters
    ----------
    x, y : float
        Point coordinates.
    footprint : Footprint
        Footprint to test against.
    radius : float
        Search radius in metres.

    Returns
    -------
    bool
        ``True`` if the point is inside the polygon or within the radius of
        its boundary.
    """
    return bool(shapely.dwithin(footprint.geom, shapely.Point(x, y), radius))


class SurfaceTree:
    """Nearest-distance queries against a triangulated surface.

    Wraps a ``trimesh.Trimesh``; queries go through its proximity helpers,
    which use an R-tree of the triangle bounding boxes.
    """

    def __init__(self, vertices: np.ndarray, faces: np.ndarray):
        self.mesh = trimesh.Trimesh(
            vertices=np.asarray(vertices, dtype=np.float64),
            faces=np.asarray(faces, dtype=np.int64),
            process=False,
        )

    def __len__(self):
        return len(self.mesh.faces)

    def distances(self, points: np.ndarray) -> np.ndarray:
        """Distance in metres from each (x, y, z) point to the surface."""
        points = np.atleast_2d(np.asarray(points, dtype=np.float64))
        _, distance, _ = self.mesh.nearest.on_surface(points)
        return distance

    def distance(self, x: float, y: float, z: float) -> float:
        return float(self.distances([[x, y, z]])[0])


def build_surface_tree(features: Iterable) -> SurfaceTree:
    """
    Build a distance tree from the lifted roof and wall triangles of features.

    Parameters
    ----------
    features : iterable of TopoFeature
        Lifted features, walls already constructed where applicable.

    Returns
    -------
    SurfaceTree
        Tree over all triangles, or ``None`` if there are none.
    """
    vertices, faces = [], []
    offset = 0
    for feature in features:
        for triangle in feature.triangle_points():
            if any(z == NO_DATA for _, _, z in triangle):
                continue
            for x, y, z in triangle:
                vertices.append((x, y, z_to_float(z)))
            faces.append((offset, offset + 1, offset + 2))
            offset += 3
    if not faces:
        warning("No triangles available to build a surface tree.")
        return None
    info(f"Building surface tree from {len(faces)} triangles")
    return SurfaceTree(np.array(vertices), np.array(faces))
