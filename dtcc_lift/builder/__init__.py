from . import parameters

from .parameters import LiftParameters
from .statistics import percentile_height, root_mean_square
from .spatial import within_range, SurfaceTree, build_surface_tree
from .adjacency import resolve_adjacency, shares_segment, find_adjacent_segment
from .node_columns import NodeColumns, build_node_columns
from .walls import (
    WallInterval,
    wall_intervals,
    construct_building_walls,
    construct_walls,
    extrude_block,
)
from .city import (
    accumulate_points,
    accumulate_distances,
    lift_features,
    lift_city,
)

__all__ = [
    "LiftParameters",
    "percentile_height",
    "root_mean_square",
    "within_range",
    "SurfaceTree",
    "build_surface_tree",
    "resolve_adjacency",
    "shares_segment",
    "find_adjacent_segment",
    "NodeColumns",
    "build_node_columns",
    "WallInterval",
    "wall_intervals",
    "construct_building_walls",
    "construct_walls",
    "extrude_block",
    "accumulate_points",
    "accumulate_distances",
    "lift_features",
    "lift_city",
]
