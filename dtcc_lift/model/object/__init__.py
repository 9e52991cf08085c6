from .feature import (
    FeatureKind,
    LidarPoint,
    WallVertex,
    TopoFeature,
    FlatFeature,
    BoundaryFeature,
    Terrain,
    Road,
    Forest,
    Separation,
    Bridge,
    Water,
)
from .building import Building
from .arena import FeatureArena

FEATURE_CLASSES = {
    FeatureKind.BUILDING: Building,
    FeatureKind.TERRAIN: Terrain,
    FeatureKind.WATER: Water,
    FeatureKind.ROAD: Road,
    FeatureKind.FOREST: Forest,
    FeatureKind.SEPARATION: Separation,
    FeatureKind.BRIDGE: Bridge,
}

__all__ = [
    "FeatureKind",
    "LidarPoint",
    "WallVertex",
    "TopoFeature",
    "FlatFeature",
    "BoundaryFeature",
    "Terrain",
    "Road",
    "Forest",
    "Separation",
    "Bridge",
    "Water",
    "Building",
    "FeatureArena",
    "FEATURE_CLASSES",
]
