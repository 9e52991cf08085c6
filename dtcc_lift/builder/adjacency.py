# Copyright(C) 2026 Anders Logg
# Licensed under the MIT License

from typing import Optional, Tuple

from shapely import STRtree

from ..model import FeatureArena, TopoFeature
from ..logging import info


def shares_segment(feature: TopoFeature, other: TopoFeature) -> bool:
    """Check whether ``other`` has an edge equal to an edge of ``feature`` reversed."""
    for ring in feature.footprint.rings:
        n = len(ring)
        for i in range(n):
            a, b = ring[i], ring[(i + 1) % n]
            if other.has_segment(b, a) is not None:
                return True
    return False


def resolve_adjacency(arena: FeatureArena) -> int:
    """
    Link every pair of features sharing at least one footprint edge.

    Candidate pairs come from an STRtree over the footprints; a pair is
    linked when one feature contains an edge of the other in reverse
    direction.

    Parameters
    ----------
    arena : FeatureArena
        Features to link. Their ``adjacent`` sets are updated in place.

    Returns
    -------
    int
        Number of adjacent pairs found.
    """
    features = list(arena)
    geoms = [f.footprint.geom for f in features]
    tree = STRtree(geoms)
    pairs = 0
    for i, feature in enumerate(features):
        for j in tree.query(geoms[i], predicate="intersects"):
            j = int(j)
            if j <= i:
                continue
            other = features[j]
            if shares_segment(feature, other):
                arena.link(feature.handle, other.handle)
                pairs += 1
    info(f"Resolved adjacency: {pairs} adjacent feature pairs")
    return pairs


def find_adjacent_segment(
    feature: TopoFeature, arena: FeatureArena, a, b
) -> Tuple[Optional[TopoFeature], Optional[Tuple[int, int, int, int]]]:
    """
    Find the neighbour sharing edge ``a -> b`` of ``feature``.

    Neighbours are scanned in handle order for the reversed edge
    ``b -> a``.

    Returns
    -------
    (TopoFeature, tuple) or (None, None)
        The neighbour and ``(ring_b, index_b, ring_a, index_a)`` locating
        ``b`` and ``a`` in its footprint.
    """
    for neighbor in arena.neighbors(feature):
        match = neighbor.has_segment(b, a)
        if match is not None:
            return neighbor, match
    return None, None
