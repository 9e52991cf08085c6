# Copyright(C) 2026 Anders Logg
# Licensed under the MIT License

import numpy as np
import shapely
from shapely import STRtree

from ..model import FeatureArena, LidarPoint
from ..common import ProgressTracker, report_progress
from .adjacency import resolve_adjacency
from .node_columns import NodeColumns, build_node_columns
from .spatial import build_surface_tree
from .walls import construct_walls
from ..logging import info, warning

_CHUNK_SIZE = 100_000


def _classification(points: np.ndarray, classification) -> np.ndarray:
    if classification is None:
        return np.zeros(len(points), dtype=np.int64)
    classification = np.asarray(classification)
    if len(classification) != len(points):
        raise ValueError(
            f"Got {len(classification)} classification codes for {len(points)} points"
        )
    return classification


def _default_radius(arena: FeatureArena) -> float:
    if len(arena) == 0:
        return 0.0
    return arena[0].parameters.radius_vertex_elevation


def accumulate_points(
    arena: FeatureArena,
    points: np.ndarray,
    classification: np.ndarray = None,
    radius: float = None,
) -> int:
    """
    Stream lidar samples into every feature they are in range of.

    Candidate features come from an STRtree ``dwithin`` query; each
    candidate then classifies the sample itself.

    Parameters
    ----------
    arena : FeatureArena
        Features to accumulate into, not yet lifted.
    points : np.ndarray
        (n, 3) array of x, y, z in metres.
    classification : np.ndarray, optional
        Classification code per point; all 0 if omitted.
    radius : float, optional
        Search radius in metres, defaults to ``radius_vertex_elevation``.

    Returns
    -------
    int
        Number of (point, feature) pairs within range.
    """
    if len(arena) == 0 or len(points) == 0:
        return 0
    points = np.asarray(points, dtype=np.float64)
    classification = _classification(points, classification)
    radius = _default_radius(arena) if radius is None else radius

    features = list(arena)
    tree = STRtree([f.footprint.geom for f in features])
    added = 0
    for start in range(0, len(points), _CHUNK_SIZE):
        chunk = points[start : start + _CHUNK_SIZE]
        query = shapely.points(chunk[:, :2])
        point_idx, feature_idx = tree.query(query, predicate="dwithin", distance=radius)
        for p, f in zip(point_idx, feature_idx):
            x, y, z = chunk[p]
            if features[f].add_elevation_point(
                (x, y), z, radius, int(classification[start + p])
            ):
                added += 1
        report_progress(current=min(start + _CHUNK_SIZE, len(points)), total=len(points))
    info(f"Accumulated {added} samples from {len(points)} points")
    return added


def lift_features(arena: FeatureArena) -> int:
    """Lift every feature of the arena. Returns the number lifted."""
    lifted = 0
    for i, feature in enumerate(arena):
        lifted += feature.lift()
        report_progress(current=i + 1, total=len(arena))
    info(f"Lifted {lifted} features")
    return lifted


def accumulate_distances(
    arena: FeatureArena,
    points: np.ndarray,
    classification: np.ndarray = None,
    radius: float = None,
    surface_tree=None,
) -> int:
    """
    Add point-to-surface distances of roof samples to every building.

    Parameters
    ----------
    arena : FeatureArena
        Lifted features with constructed walls.
    points : np.ndarray
        (n, 3) array of x, y, z in metres.
    classification : np.ndarray, optional
        Classification code per point.
    radius : float, optional
        Search radius in metres, defaults to ``radius_vertex_elevation``.
    surface_tree : SurfaceTree, optional
        Distance tree; built from all lifted triangles if omitted.

    Returns
    -------
    int
        Number of (point, building) pairs within range.
    """
    buildings = arena.buildings
    if not buildings or len(points) == 0:
        return 0
    if surface_tree is None:
        surface_tree = build_surface_tree(arena)
        if surface_tree is None:
            return 0
    points = np.asarray(points, dtype=np.float64)
    classification = _classification(points, classification)
    radius = _default_radius(arena) if radius is None else radius

    tree = STRtree([b.footprint.geom for b in buildings])
    point_idx, building_idx = tree.query(
        shapely.points(points[:, :2]), predicate="dwithin", distance=radius
    )
    added = 0
    for p, b in zip(point_idx, building_idx):
        x, y, z = points[p]
        point = LidarPoint(x, y, z, int(classification[p]))
        added += buildings[b].add_point_distance(point, radius, surface_tree)
    info(f"Accumulated {added} point distances")
    return added


def lift_city(
    arena: FeatureArena,
    points: np.ndarray,
    classification: np.ndarray = None,
    radius: float = None,
    compute_rmse: bool = False,
    progress_mode: str = "auto",
) -> NodeColumns:
    """
    Run the full lift of an arena of features from a point cloud.

    The phases run strictly in order: sample accumulation, lifting,
    adjacency resolution, node column construction and wall construction.
    Walls are only built once every feature is lifted and the node columns
    are complete. Optionally, point-to-surface distances are accumulated
    afterwards so buildings can report an RMSE.

    Parameters
    ----------
    arena : FeatureArena
        Features read from the feature store.
    points : np.ndarray
        (n, 3) lidar points in metres.
    classification : np.ndarray, optional
        Classification code per point.
    radius : float, optional
        Search radius in metres, defaults to ``radius_vertex_elevation``.
    compute_rmse : bool, default False
        Whether to accumulate point-to-surface distances.
    progress_mode : str, default "auto"
        Output mode of the progress tracker.

    Returns
    -------
    NodeColumns
        The registry used to stitch the walls.
    """
    if len(arena) == 0:
        warning("No features to lift")
        return NodeColumns({})

    phases = {"points": 0.5, "lift": 0.05, "adjacency": 0.1, "columns": 0.05, "walls": 0.3}
    if compute_rmse:
        phases["distances"] = 0.3

    with ProgressTracker(phases=phases, mode=progress_mode) as progress:
        with progress.phase("points", "Accumulating samples"):
            accumulate_points(arena, points, classification, radius)
        with progress.phase("lift", "Lifting features"):
            lift_features(arena)
        with progress.phase("adjacency", "Resolving adjacency"):
            resolve_adjacency(arena)
        with progress.phase("columns", "Building node columns"):
            node_columns = build_node_columns(arena)
        with progress.phase("walls", "Constructing walls"):
            construct_walls(arena, node_columns)
        if compute_rmse:
            with progress.phase("distances", "Computing point distances"):
                accumulate_distances(arena, points, classification, radius)

    return node_columns
