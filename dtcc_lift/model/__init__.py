from .heights import NO_DATA, to_centimeters, z_to_float
from .geometry import Footprint, key_2d, key_3d
from .object import (
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
    Building,
    FeatureArena,
    FEATURE_CLASSES,
)

__all__ = [
    "NO_DATA",
    "to_centimeters",
    "z_to_float",
    "Footprint",
    "key_2d",
    "key_3d",
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
