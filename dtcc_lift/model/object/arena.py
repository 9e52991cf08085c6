# Copyright(C) 2026 Anders Logg
# Licensed under the MIT License

from typing import Dict, Iterable, Iterator, List, Optional

from .feature import FeatureKind, TopoFeature
from ...logging import warning


class FeatureArena:
    """Owns all features of a run and hands out stable integer handles.

    Features refer to their neighbours by handle, so the arena is the only
    place holding feature objects and neighbours are resolved through it.
    """

    def __init__(self, features: Iterable[TopoFeature] = ()):
        self._features: List[TopoFeature] = []
        self._by_id: Dict[str, int] = {}
        self.add_features(features)

    def __len__(self):
        return len(self._features)

    def __iter__(self) -> Iterator[TopoFeature]:
        return iter(self._features)

    def __getitem__(self, handle: int) -> TopoFeature:
        return self._features[handle]

    def __str__(self):
        return f"FeatureArena with {len(self)} features ({len(self.buildings)} buildings)"

    def add(self, feature: TopoFeature) -> int:
        """Add a feature and return its handle."""
        if feature.handle != -1:
            raise ValueError(f"Feature {feature.id} already belongs to an arena")
        handle = len(self._features)
        feature.handle = handle
        self._features.append(feature)
        if feature.id in self._by_id:
            warning(f"Duplicate feature id {feature.id}, lookup by id returns the first")
        else:
            self._by_id[feature.id] = handle
        return handle

    def add_features(self, features: Iterable[TopoFeature]) -> List[int]:
        return [self.add(f) for f in features]

    def get(self, handle: int) -> Optional[TopoFeature]:
        if 0 <= handle < len(self._features):
            return self._features[handle]
        return None

    def by_id(self, id: str) -> Optional[TopoFeature]:
        handle = self._by_id.get(id)
        return None if handle is None else self._features[handle]

    def link(self, a: int, b: int):
        """Record that features ``a`` and ``b`` are adjacent."""
        if a == b:
            return
        self._features[a].adjacent.add(b)
        self._features[b].adjacent.add(a)

    def neighbors(self, feature: TopoFeature) -> List[TopoFeature]:
        """Adjacent features in handle order."""
        return [self._features[h] for h in sorted(feature.adjacent)]

    def of_kind(self, kind: FeatureKind) -> List[TopoFeature]:
        return [f for f in self._features if f.kind == kind]

    @property
    def buildings(self) -> List[TopoFeature]:
        return self.of_kind(FeatureKind.BUILDING)
