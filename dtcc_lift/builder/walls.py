# Copyright(C) 2026 Anders Logg
# Licensed under the MIT License

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..common import report_progress
from ..model import NO_DATA, Building, FeatureArena, TopoFeature
from .adjacency import find_adjacent_segment
from .node_columns import NodeColumns
from ..logging import debug, info, warning


@dataclass(frozen=True)
class WallInterval:
    """Vertical extent of one wall segment, in centimetres, at both edge ends."""

    a_start: int
    a_end: int
    b_start: int
    b_end: int

    @property
    def is_empty(self) -> bool:
        return self.a_start == self.a_end and self.b_start == self.b_end


def wall_intervals(
    building: Building,
    neighbor: Optional[TopoFeature],
    match: Optional[Tuple[int, int, int, int]],
    roof_height: int,
) -> List[WallInterval]:
    """
    Decide which vertical intervals to fill along one footprint edge.

    Parameters
    ----------
    building : Building
        The building owning the edge ``a -> b``.
    neighbor : TopoFeature or None
        Feature sharing the edge, if any.
    match : tuple or None
        ``(ring_b, index_b, ring_a, index_a)`` of the edge in ``neighbor``.
    roof_height : int
        Roof elevation of the building at the edge.

    Returns
    -------
    list of WallInterval
        Non-empty intervals, lowest first.
    """
    parameters = building.parameters
    base = building.get_height_base()
    intervals = []

    if neighbor is not None and neighbor.is_building():
        _, _, ring_a, index_a = match
        adj_base = neighbor.get_base_height()
        adj_roof = neighbor.get_vertex_elevation(ring_a, index_a)
        if adj_base == NO_DATA or adj_roof == NO_DATA:
            # a building without heights cannot close the edge
            neighbor = None

    if neighbor is None or not neighbor.is_building():
        if neighbor is None or parameters.include_floor:
            a_start = b_start = base
        else:
            # start where the neighbouring surface ends to avoid a double floor
            ring_b, index_b, ring_a, index_a = match
            a_start = neighbor.get_vertex_elevation(ring_a, index_a)
            b_start = neighbor.get_vertex_elevation(ring_b, index_b)
        intervals.append(WallInterval(a_start, roof_height, b_start, roof_height))
    else:
        start = base
        if parameters.include_floor and base < adj_base:
            intervals.append(WallInterval(base, adj_base, base, adj_base))
            start = adj_base
        if parameters.inner_walls:
            top = min(roof_height, adj_roof)
            intervals.append(WallInterval(start, top, start, top))
        if roof_height > adj_roof:
            intervals.append(WallInterval(adj_roof, roof_height, adj_roof, roof_height))

    return [interval for interval in intervals if not interval.is_empty]


def _emit_ladder(
    building: TopoFeature,
    a,
    b,
    anc: Sequence[int],
    bnc: Sequence[int],
    interval: WallInterval,
) -> int:
    """
    Triangulate one wall interval between the node columns of ``a`` and ``b``.

    The ``b`` side is walked first from its start to its end elevation,
    fanning from the start elevation at ``a``; then the ``a`` side is walked,
    fanning from the end elevation at ``b``. Every intermediate elevation in
    either column becomes a vertex, so the strip matches whatever another
    feature emits against the same vertices.
    """
    try:
        sa, ea = anc.index(interval.a_start), anc.index(interval.a_end)
        sb, eb = bnc.index(interval.b_start), bnc.index(interval.b_end)
    except ValueError:
        debug(f"Building {building.id}: wall interval {interval} not in node columns")
        return 0
    if sa > ea or sb > eb:
        debug(f"Building {building.id}: inverted wall interval {interval} skipped")
        return 0

    ax, ay = a
    bx, by = b
    count = 0
    for k in range(sb, eb):
        v0 = building.add_wall_vertex(bx, by, bnc[k])
        v1 = building.add_wall_vertex(ax, ay, anc[sa])
        v2 = building.add_wall_vertex(bx, by, bnc[k + 1])
        count += building.add_wall_triangle(v0, v1, v2)
    for k in range(sa, ea):
        v0 = building.add_wall_vertex(bx, by, bnc[eb])
        v1 = building.add_wall_vertex(ax, ay, anc[k])
        v2 = building.add_wall_vertex(ax, ay, anc[k + 1])
        count += building.add_wall_triangle(v0, v1, v2)
    return count


def construct_building_walls(
    building: Building, node_columns: NodeColumns, arena: FeatureArena
) -> int:
    """
    Build the wall mesh of a building, stitched to its neighbours.

    Every edge of every ring (outer ring first) is matched against the
    adjacent features, the vertical intervals to fill are decided from the
    neighbour kind and the run parameters, and each interval is triangulated
    through the node columns of the two edge ends. The result is appended to
    ``building.wall_vertices`` and ``building.wall_triangles``.

    An edge with no node column at either end is skipped. An edge with a
    column at only one end means adjacency resolution went wrong upstream:
    it is reported and the remaining edges of that ring are abandoned.

    Parameters
    ----------
    building : Building
        A lifted building. Walls are built at most once.
    node_columns : NodeColumns
        Complete, read-only elevation registry.
    arena : FeatureArena
        Arena resolving the building's adjacent handles.

    Returns
    -------
    int
        Number of triangles added.
    """
    if not building.lifted:
        warning(f"Building {building.id} is not lifted, walls not constructed")
        return 0
    if building.walls_built:
        warning(f"Walls of building {building.id} already constructed")
        return 0
    building._walls_built = True

    if building.get_height_base() == NO_DATA or building.get_height() == NO_DATA:
        debug(f"Building {building.id} has no height, walls not constructed")
        return 0

    count = 0
    for r, ring in enumerate(building.footprint.rings):
        n = len(ring)
        for ai in range(n):
            a = ring[ai]
            b = ring[(ai + 1) % n]
            neighbor, match = find_adjacent_segment(building, arena, a, b)

            anc = node_columns.at(*a)
            bnc = node_columns.at(*b)
            if not anc and not bnc:
                continue
            if not anc or not bnc:
                warning(
                    f"Node column is empty at one end of an edge of building {building.id}, "
                    f"walls of ring {r} abandoned"
                )
                break

            roof_height = building.get_vertex_elevation(r, ai)
            for interval in wall_intervals(building, neighbor, match, roof_height):
                count += _emit_ladder(building, a, b, anc, bnc, interval)
    return count


def construct_walls(arena: FeatureArena, node_columns: NodeColumns) -> int:
    """Construct the walls of every building in the arena."""
    buildings = arena.buildings
    info(f"Constructing walls of {len(buildings)} buildings")
    count = 0
    for i, building in enumerate(buildings):
        count += building.construct_walls(node_columns, arena)
        report_progress(current=i + 1, total=len(buildings))
    info(f"Constructed {count} wall triangles")
    return count


def extrude_block(building: Building) -> List[List[List[Tuple[float, float, int]]]]:
    """
    Extruded LOD1 block of a building, used instead of triangulated walls.

    Returns
    -------
    list
        Surfaces, each a list of rings (outer first) of ``(x, y, z_cm)``
        points: the roof, the floor when floors are included, and one quad
        per footprint edge from base to roof.
    """
    base = building.get_height_base()
    top = building.get_height()
    rings = building.footprint.rings

    def lifted(ring, z, reverse):
        points = [(float(x), float(y), z) for x, y in ring]
        return points[::-1] if reverse else points

    surfaces = [[lifted(ring, top, True) for ring in rings]]
    if building.parameters.include_floor:
        surfaces.append([lifted(ring, base, False) for ring in rings])
    for ring in rings:
        n = len(ring)
        for i in range(n):
            ax, ay = (float(c) for c in ring[i])
            bx, by = (float(c) for c in ring[(i + 1) % n])
            surfaces.append(
                [[(bx, by, base), (ax, ay, base), (ax, ay, top), (bx, by, top)]]
            )
    return surfaces
