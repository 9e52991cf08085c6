# Copyright(C) 2026 Anders Logg
# Licensed under the MIT License

from dataclasses import dataclass, field
from functools import cached_property
from typing import List, Sequence, Tuple

import numpy as np
import shapely
from shapely.geometry import Polygon as ShapelyPolygon
from shapely.geometry.polygon import orient

from .keys import key_2d


@dataclass(frozen=True)
class Footprint:
    """2D outline of a feature: one outer ring and zero or more holes.

    The polygon is normalised on construction so that the outer ring is
    clockwise and the holes are counter-clockwise. Two features sharing an
    edge then traverse it in opposite directions, which is what the
    shared-segment search relies on.

    Rings are exposed without the closing vertex, so ``rings[r][i]`` and
    ``rings[r][(i + 1) % n]`` form the i-th edge of ring ``r``.

    Attributes
    ----------
    geom : shapely.geometry.Polygon
        Backing Shapely polygon.
    """

    geom: ShapelyPolygon = field(default_factory=ShapelyPolygon)

    def __post_init__(self):
        if not self.geom.is_empty:
            object.__setattr__(self, "geom", orient(self.geom, sign=-1.0))
            shapely.prepare(self.geom)

    @classmethod
    def from_rings(
        cls, outer: Sequence[Tuple[float, float]], inners: Sequence = ()
    ) -> "Footprint":
        """Create a footprint from coordinate sequences."""
        return cls(ShapelyPolygon(outer, [list(r) for r in inners]))

    @property
    def shapely(self) -> ShapelyPolygon:
        return self.geom

    @cached_property
    def rings(self) -> List[np.ndarray]:
        """Outer ring followed by the holes, each as an (n, 2) array."""
        if self.geom.is_empty:
            return []
        rings = [self.geom.exterior] + list(self.geom.interiors)
        return [np.array(r.coords)[:-1, :2] for r in rings]

    @property
    def outer(self) -> np.ndarray:
        return self.rings[0]

    @property
    def inners(self) -> List[np.ndarray]:
        return self.rings[1:]

    @cached_property
    def ring_offsets(self) -> List[int]:
        """Index of the first vertex of each ring in ``vertices``."""
        offsets, n = [], 0
        for ring in self.rings:
            offsets.append(n)
            n += len(ring)
        return offsets

    @cached_property
    def vertices(self) -> np.ndarray:
        """All ring vertices stacked, outer ring first."""
        if not self.rings:
            return np.empty((0, 2))
        return np.vstack(self.rings)

    @property
    def num_vertices(self) -> int:
        return len(self.vertices)

    @property
    def area(self) -> float:
        return self.geom.area

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        return self.geom.bounds

    def ring_and_index(self, flat_index: int) -> Tuple[int, int]:
        """Map an index into ``vertices`` back to (ring, vertex) indices."""
        for r in range(len(self.ring_offsets) - 1, -1, -1):
            if flat_index >= self.ring_offsets[r]:
                return r, flat_index - self.ring_offsets[r]
        raise IndexError(flat_index)

    @cached_property
    def triangles(self) -> np.ndarray:
        """Constrained Delaunay triangulation of the polygon.

        Returns
        -------
        np.ndarray
            (m, 3) array of indices into ``vertices``, each triangle
            counter-clockwise seen from above.
        """
        if self.geom.is_empty:
            return np.empty((0, 3), dtype=np.int64)
        lookup = {key_2d(x, y): i for i, (x, y) in enumerate(self.vertices)}
        triangles = []
        for tri in shapely.constrained_delaunay_triangles(self.geom).geoms:
            idx = [lookup.get(key_2d(x, y)) for x, y in tri.exterior.coords[:3]]
            if None in idx:
                continue
            p0, p1, p2 = self.vertices[idx]
            cross = (p1[0] - p0[0]) * (p2[1] - p0[1]) - (p1[1] - p0[1]) * (
                p2[0] - p0[0]
            )
            if cross == 0:
                continue
            if cross < 0:
                idx = [idx[0], idx[2], idx[1]]
            triangles.append(idx)
        return np.array(triangles, dtype=np.int64).reshape(-1, 3)
