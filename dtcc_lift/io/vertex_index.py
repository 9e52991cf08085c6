# Copyright(C) 2026 Anders Logg
# Licensed under the MIT License

from typing import Dict, List, Optional, Sequence, Tuple

from ..model import key_3d, z_to_float
from ..model.geometry.keys import Key3D


class VertexIndex:
    """
    File-wide vertex deduplication.

    Vertices are keyed by their millimetre horizontal position plus the
    explicit centimetre height, so the same corner written by two features
    gets one index.

    Maintains:
    - vertices: List of unique (x, y, z) vertices, z in metres
    - _index: Dict[(x_mm, y_mm, z_cm) -> int] mapping vertex to index
    """

    def __init__(self, start: int = 0):
        """Create an empty index numbering vertices from ``start``."""
        self.start = start
        self.vertices: List[Tuple[float, float, float]] = []
        self._index: Dict[Key3D, int] = {}

    def __len__(self):
        return len(self.vertices)

    def add(self, x: float, y: float, z: int) -> int:
        """Index of the vertex at (x, y) with height ``z`` (cm), added if new."""
        key = key_3d(x, y, z)
        idx = self._index.get(key)
        if idx is None:
            idx = len(self.vertices) + self.start
            self.vertices.append((float(x), float(y), z_to_float(z)))
            self._index[key] = idx
        return idx

    def add_ring(self, ring: Sequence[Tuple[float, float, int]]) -> List[int]:
        """Indices of a ring, dropping consecutive repeats."""
        indices = []
        for x, y, z in ring:
            idx = self.add(x, y, z)
            if not indices or indices[-1] != idx:
                indices.append(idx)
        if len(indices) > 1 and indices[0] == indices[-1]:
            indices.pop()
        return indices

    def triangle(
        self, points: Sequence[Tuple[float, float, int]]
    ) -> Optional[Tuple[int, int, int]]:
        """Indices of a triangle, or ``None`` if two of them coincide."""
        a, b, c = (self.add(x, y, z) for x, y, z in points)
        if a == b or a == c or b == c:
            return None
        return (a, b, c)
