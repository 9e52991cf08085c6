# Copyright(C) 2026 Anders Logg
# Licensed under the MIT License

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import (
    TYPE_CHECKING,
    ClassVar,
    Dict,
    List,
    NamedTuple,
    Optional,
    Set,
    Tuple,
)
from uuid import uuid4

import numpy as np

from ..geometry.footprint import Footprint
from ..geometry.keys import Key2D, Key3D, key_2d, key_3d
from ..heights import NO_DATA, to_centimeters
from ...logging import debug, warning

if TYPE_CHECKING:
    from ...builder.parameters import LiftParameters


class FeatureKind(Enum):
    """
    Kind of a topological feature. Wall construction only distinguishes
    buildings from everything else.
    """

    BUILDING = auto()
    TERRAIN = auto()
    WATER = auto()
    ROAD = auto()
    FOREST = auto()
    SEPARATION = auto()
    BRIDGE = auto()

    @staticmethod
    def from_str(s):
        """
        Create a FeatureKind from a case-insensitive string.

        Raises
        ------
        ValueError
            If the string does not match any known kind.
        """
        try:
            return FeatureKind[s.upper()]
        except KeyError:
            raise ValueError(f"Unknown feature kind: {s}")

    @property
    def material(self) -> str:
        """Material / class name used by the exporters, e.g. ``Building``."""
        return self.name.title()


class LidarPoint(NamedTuple):
    x: float
    y: float
    z: float
    classification: int = 0


class WallVertex(NamedTuple):
    x: float
    y: float
    z: int
    key: Key3D


# (x, y, z) with z in integer centimetres
TrianglePoints = Tuple[Tuple[float, float, int], ...]


def _default_parameters():
    from ...builder.parameters import LiftParameters

    return LiftParameters()


@dataclass(eq=False)
class TopoFeature:
    """Base class of all features taking part in the stitched city mesh.

    A feature owns its footprint, collects elevation samples while the point
    cloud is streamed, is lifted once, and then exposes vertex elevations to
    its neighbours. Neighbours are referenced by integer handles into a
    ``FeatureArena``.

    Attributes
    ----------
    id : str
        Persistent identifier of the feature.
    footprint : Footprint
        2D outline with holes.
    attributes : dict
        Attributes read from the feature store.
    layer : str
        Name of the layer the feature was read from.
    parameters : LiftParameters
        Settings shared by the whole run.
    handle : int
        Index of the feature in its arena, -1 until added.
    adjacent : set of int
        Handles of topologically adjacent features.
    wall_vertices : list of WallVertex
        Vertices of the vertical wall mesh.
    wall_triangles : list of (int, int, int)
        Triangles indexing ``wall_vertices``.
    """

    kind: ClassVar[FeatureKind] = None

    id: str = field(default_factory=lambda: str(uuid4()))
    footprint: Footprint = field(default_factory=Footprint)
    attributes: dict = field(default_factory=dict)
    layer: str = ""
    parameters: "LiftParameters" = field(default_factory=_default_parameters)
    handle: int = -1
    adjacent: Set[int] = field(default_factory=set)
    wall_vertices: List[WallVertex] = field(default_factory=list)
    wall_triangles: List[Tuple[int, int, int]] = field(default_factory=list)
    _zvalues_inside: List[int] = field(default_factory=list, repr=False)
    _elevations: List[List[int]] = field(default_factory=list, repr=False)
    _lifted: bool = field(default=False, repr=False)
    _walls_built: bool = field(default=False, repr=False)
    _segments: Optional[Dict] = field(default=None, repr=False)
    _wall_lookup: Dict[Key3D, int] = field(default_factory=dict, repr=False)

    def __str__(self):
        return f"{self.kind.material} {self.id} with {self.footprint.num_vertices} vertices"

    @property
    def lifted(self) -> bool:
        return self._lifted

    @property
    def walls_built(self) -> bool:
        return self._walls_built

    def get_class(self) -> FeatureKind:
        return self.kind

    def is_building(self) -> bool:
        return self.kind == FeatureKind.BUILDING

    def get_attribute(self, name, default=None):
        return self.attributes.get(name, default)

    # ---- Sample accumulation ----

    def _accepts(self, lasclass: int) -> bool:
        return self.parameters.accepts_feature(self.kind.name, lasclass)

    def _check_not_lifted(self) -> bool:
        if self._lifted:
            debug(f"{self.kind.material} {self.id} is already lifted, sample ignored")
            return False
        return True

    def add_elevation_point(self, point, z: float, radius: float, lasclass: int) -> bool:
        """Add an elevation sample. Returns True if the point was in range."""
        raise NotImplementedError

    def lift(self) -> bool:
        """Finalise the vertex elevations from the collected samples."""
        raise NotImplementedError

    def _finish_lift(self) -> bool:
        if self._lifted:
            warning(f"{self.kind.material} {self.id} is already lifted")
            return False
        return True

    @property
    def inside_samples(self) -> List[int]:
        return list(self._zvalues_inside)

    # ---- Elevation capability ----

    @property
    def elevations(self) -> List[List[int]]:
        """Vertex elevations (cm) per ring, empty before lifting."""
        return [list(r) for r in self._elevations]

    def get_vertex_elevation(self, ring: int, index: int) -> int:
        """Elevation in centimetres of vertex ``index`` of ring ``ring``."""
        if not self._lifted:
            return NO_DATA
        return self._elevations[ring][index]

    get_roof_height_at = get_vertex_elevation

    def get_base_height(self) -> int:
        """Lowest known vertex elevation, the level a wall may start from."""
        values = [z for ring in self._elevations for z in ring if z != NO_DATA]
        return min(values) if values else NO_DATA

    def get_height(self) -> int:
        """Highest known vertex elevation."""
        values = [z for ring in self._elevations for z in ring if z != NO_DATA]
        return max(values) if values else NO_DATA

    # ---- Topology ----

    def _segment_index(self) -> Dict[Tuple[Key2D, Key2D], Tuple[int, int, int, int]]:
        if self._segments is None:
            self._segments = {}
            for r, ring in enumerate(self.footprint.rings):
                n = len(ring)
                for i in range(n):
                    j = (i + 1) % n
                    ka = key_2d(*ring[i])
                    kb = key_2d(*ring[j])
                    self._segments.setdefault((ka, kb), (r, i, r, j))
        return self._segments

    def has_segment(self, a, b) -> Optional[Tuple[int, int, int, int]]:
        """
        Look for the directed edge ``a -> b`` in any ring of the footprint.

        Parameters
        ----------
        a, b : (float, float)
            Edge end points; vertices match to the millimetre.

        Returns
        -------
        tuple of int or None
            ``(ring_a, index_a, ring_b, index_b)`` locating ``a`` and ``b``,
            or ``None`` if the feature has no such edge.
        """
        return self._segment_index().get((key_2d(*a), key_2d(*b)))

    # ---- Walls ----

    def add_wall_vertex(self, x: float, y: float, z: int) -> int:
        """Add a wall vertex (z in cm), reusing an existing one at the same key."""
        key = key_3d(x, y, z)
        index = self._wall_lookup.get(key)
        if index is None:
            index = len(self.wall_vertices)
            self.wall_vertices.append(WallVertex(float(x), float(y), int(z), key))
            self._wall_lookup[key] = index
        return index

    def add_wall_triangle(self, v0: int, v1: int, v2: int) -> bool:
        """Append a wall triangle unless two of its vertex indices coincide."""
        if v0 == v1 or v0 == v2 or v1 == v2:
            return False
        self.wall_triangles.append((v0, v1, v2))
        return True

    def construct_walls(self, node_columns, arena) -> int:
        """Only buildings carry walls; other features are stitched by them."""
        return 0

    # ---- Mesh payload ----

    def roof_triangle_points(self, z: int = None) -> List[TrianglePoints]:
        """
        Footprint triangles lifted to the vertex elevations, or to the fixed
        height ``z`` (cm) when given.
        """
        vertices = self.footprint.vertices
        triangles = []
        for tri in self.footprint.triangles:
            points = []
            for v in tri:
                x, y = vertices[v]
                if z is None:
                    ring, index = self.footprint.ring_and_index(int(v))
                    height = self.get_vertex_elevation(ring, index)
                else:
                    height = z
                points.append((float(x), float(y), int(height)))
            triangles.append(tuple(points))
        return triangles

    def wall_triangle_points(self) -> List[TrianglePoints]:
        return [
            tuple(
                (self.wall_vertices[v].x, self.wall_vertices[v].y, self.wall_vertices[v].z)
                for v in tri
            )
            for tri in self.wall_triangles
        ]

    def triangle_points(self) -> List[TrianglePoints]:
        """Roof and wall triangles of the lifted feature."""
        return self.roof_triangle_points() + self.wall_triangle_points()


@dataclass(eq=False)
class FlatFeature(TopoFeature):
    """A feature lifted to one height for all of its vertices (water)."""

    kind: ClassVar[FeatureKind] = FeatureKind.WATER

    _height_top: int = field(default=NO_DATA, repr=False)

    def add_elevation_point(self, point, z: float, radius: float, lasclass: int) -> bool:
        from ...builder.spatial import within_range

        if not self._check_not_lifted():
            return False
        if not within_range(point[0], point[1], self.footprint, radius):
            return False
        if self._accepts(lasclass):
            self._zvalues_inside.append(to_centimeters(z))
        return True

    def lift_percentile(self, percentile: float) -> int:
        """Set every vertex to the percentile of the inside samples."""
        from ...builder.statistics import percentile_height

        self._height_top = percentile_height(self._zvalues_inside, percentile)
        self._elevations = [
            [self._height_top] * len(ring) for ring in self.footprint.rings
        ]
        return self._height_top

    def lift(self) -> bool:
        if not self._finish_lift():
            return False
        self.lift_percentile(self.parameters.heightref_flat)
        self._lifted = True
        return True

    def get_height(self) -> int:
        return self._height_top


@dataclass(eq=False)
class BoundaryFeature(TopoFeature):
    """A feature whose vertices are lifted independently (terrain, roads).

    Each vertex collects the samples within ``radius_vertex_elevation`` of
    it; vertices without samples fall back to the feature-wide samples.
    """

    kind: ClassVar[FeatureKind] = FeatureKind.TERRAIN

    _vertex_samples: List[List[int]] = field(default_factory=list, repr=False)

    def add_elevation_point(self, point, z: float, radius: float, lasclass: int) -> bool:
        from ...builder.spatial import within_range

        if not self._check_not_lifted():
            return False
        if not within_range(point[0], point[1], self.footprint, radius):
            return False
        if not self._accepts(lasclass):
            return True
        zcm = to_centimeters(z)
        self._zvalues_inside.append(zcm)

        if not self._vertex_samples:
            self._vertex_samples = [[] for _ in range(self.footprint.num_vertices)]
        d = np.hypot(
            self.footprint.vertices[:, 0] - point[0],
            self.footprint.vertices[:, 1] - point[1],
        )
        for v in np.flatnonzero(d <= self.parameters.radius_vertex_elevation):
            self._vertex_samples[v].append(zcm)
        return True

    def lift(self) -> bool:
        from ...builder.statistics import percentile_height

        if not self._finish_lift():
            return False
        percentile = self.parameters.heightref_boundary
        fallback = percentile_height(self._zvalues_inside, percentile)
        elevations = []
        for r, ring in enumerate(self.footprint.rings):
            offset = self.footprint.ring_offsets[r]
            heights = []
            for i in range(len(ring)):
                samples = (
                    self._vertex_samples[offset + i] if self._vertex_samples else []
                )
                heights.append(
                    percentile_height(samples, percentile) if samples else fallback
                )
            elevations.append(heights)
        self._elevations = elevations
        self._lifted = True
        return True


class Terrain(BoundaryFeature):
    kind = FeatureKind.TERRAIN


class Road(BoundaryFeature):
    kind = FeatureKind.ROAD


class Forest(BoundaryFeature):
    kind = FeatureKind.FOREST


class Separation(BoundaryFeature):
    kind = FeatureKind.SEPARATION


class Bridge(BoundaryFeature):
    kind = FeatureKind.BRIDGE


class Water(FlatFeature):
    kind = FeatureKind.WATER
