# Copyright(C) 2026 Anders Logg
# Licensed under the MIT License

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ....builder.node_columns import NodeColumns
    from ...object.arena import FeatureArena


class BuildingBuilderMixin:

    def construct_walls(self, node_columns: "NodeColumns", arena: "FeatureArena") -> int:
        """
        Build the stitched wall mesh of the building. Must be called once,
        after every feature is lifted and the node columns are complete.

        Args:
            node_columns (NodeColumns): Read-only elevations per vertex location.
            arena (FeatureArena): Arena resolving the handles of adjacent features.

        Returns:
            int: Number of wall triangles added.
        """
        from dtcc_lift.builder.walls import construct_building_walls

        return construct_building_walls(self, node_columns, arena)

    def extruded_block(self):
        """
        Non-triangulated LOD1 block: roof, optional floor and one quad per
        footprint edge.

        Returns:
            list: Surfaces, each a list of rings of (x, y, z_cm) points.
        """
        from dtcc_lift.builder.walls import extrude_block

        return extrude_block(self)
