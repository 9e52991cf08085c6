# Copyright(C) 2026 Anders Logg
# Licensed under the MIT License

from collections import defaultdict
from collections.abc import Mapping
from typing import Dict, Iterable, Iterator, Tuple

from ..model import NO_DATA, key_2d
from ..model.geometry.keys import Key2D
from ..logging import info


class NodeColumns(Mapping):
    """
    Read-only registry of the elevations known at each vertex location.

    Keys are millimetre 2D keys (see ``key_2d``), values ascending tuples of
    distinct integer centimetre elevations. The registry is built once,
    before wall construction, and never modified afterwards.
    """

    def __init__(self, columns: Dict[Key2D, Tuple[int, ...]]):
        self._columns = {k: tuple(v) for k, v in columns.items()}

    def __getitem__(self, key: Key2D) -> Tuple[int, ...]:
        return self._columns[key]

    def __iter__(self) -> Iterator[Key2D]:
        return iter(self._columns)

    def __len__(self) -> int:
        return len(self._columns)

    def at(self, x: float, y: float) -> Tuple[int, ...]:
        """Column at a position, empty if nothing is known there."""
        return self._columns.get(key_2d(x, y), ())


def build_node_columns(features: Iterable) -> NodeColumns:
    """
    Collect the elevations every lifted feature contributes to its vertices.

    Each feature adds its own elevation at each of its vertices; buildings
    also add their base height so walls can start there. Sentinel heights
    are left out.

    Parameters
    ----------
    features : iterable of TopoFeature
        Lifted features.

    Returns
    -------
    NodeColumns
        Sorted, de-duplicated elevations per vertex location.
    """
    columns = defaultdict(set)
    for feature in features:
        base = feature.get_base_height() if feature.is_building() else NO_DATA
        for r, ring in enumerate(feature.footprint.rings):
            for i, (x, y) in enumerate(ring):
                key = key_2d(x, y)
                z = feature.get_vertex_elevation(r, i)
                if z != NO_DATA:
                    columns[key].add(z)
                if base != NO_DATA:
                    columns[key].add(base)
    info(f"Built node columns for {len(columns)} vertex locations")
    return NodeColumns({k: tuple(sorted(v)) for k, v in columns.items()})
