# Copyright(C) 2026 Anders Logg
# Licensed under the MIT License

from typing import Dict, FrozenSet

from pydantic import BaseModel, ConfigDict, Field


class LiftParameters(BaseModel):
    """Settings shared by every feature of a lift run.

    The value is immutable; each feature keeps a reference to the instance
    it was created with so percentile and filter decisions never depend on
    hidden global state.
    """

    model_config = ConfigDict(frozen=True)

    heightref_top: float = Field(
        0.9, ge=0.0, le=1.0, description="Percentile of inside samples used for roofs"
    )
    heightref_base: float = Field(
        0.1, ge=0.0, le=1.0, description="Percentile of ground samples used for bases"
    )
    heightref_flat: float = Field(
        0.5, ge=0.0, le=1.0, description="Percentile used by flat features (water)"
    )
    heightref_boundary: float = Field(
        0.5,
        ge=0.0,
        le=1.0,
        description="Percentile used per vertex by boundary features (terrain, roads)",
    )
    radius_vertex_elevation: float = Field(
        1.0, ge=0.0, description="Search radius in metres around footprints and vertices"
    )
    triangulate: bool = Field(
        True, description="Triangulated walls; False exports extruded LOD1 blocks"
    )
    include_floor: bool = Field(False, description="Close building solids with a floor")
    inner_walls: bool = Field(
        False, description="Generate party walls between adjacent buildings"
    )
    las_classes_roof: FrozenSet[int] = Field(
        frozenset(), description="Classification codes of roof samples (empty: all)"
    )
    las_classes_ground: FrozenSet[int] = Field(
        frozenset(), description="Classification codes of ground samples (empty: all)"
    )
    las_classes_features: Dict[str, FrozenSet[int]] = Field(
        default_factory=dict,
        description="Classification codes per non-building feature kind, e.g. {'water': {9}}",
    )

    @classmethod
    def default(cls) -> "LiftParameters":
        return cls()

    def accepts_roof(self, lasclass: int) -> bool:
        return not self.las_classes_roof or lasclass in self.las_classes_roof

    def accepts_ground(self, lasclass: int) -> bool:
        return not self.las_classes_ground or lasclass in self.las_classes_ground

    def accepts_feature(self, kind_name: str, lasclass: int) -> bool:
        classes = self.las_classes_features.get(kind_name.lower())
        return not classes or lasclass in classes
