# Copyright(C) 2026 Anders Logg
# Licensed under the MIT License

from dataclasses import dataclass, field
from typing import ClassVar, List

from .feature import FeatureKind, FlatFeature, LidarPoint
from ..heights import NO_DATA, to_centimeters
from ..mixins import BuildingBuilderMixin
from ...logging import debug


@dataclass(eq=False)
class Building(BuildingBuilderMixin, FlatFeature):
    """A building lifted to a flat roof above a base height.

    Two independent sample sets are collected: roof samples (the inside
    set) and ground samples, each filtered by the classification codes of
    the run parameters. Distances from roof samples to the lifted surface
    can be added afterwards to report a fit metric.

    All heights are integer centimetres; ``NO_DATA`` (-9999) means that no
    sample was available.
    """

    kind: ClassVar[FeatureKind] = FeatureKind.BUILDING

    _zvalues_ground: List[int] = field(default_factory=list, repr=False)
    _distances_inside: List[int] = field(default_factory=list, repr=False)
    _height_base: int = field(default=NO_DATA, repr=False)

    def add_elevation_point(self, point, z: float, radius: float, lasclass: int) -> bool:
        """
        Add an elevation sample if the point lies within ``radius`` of the
        footprint. The sample goes to the roof set, the ground set, both or
        neither depending on the classification filters.

        Parameters
        ----------
        point : (float, float)
            Horizontal position of the sample.
        z : float
            Elevation in metres, stored as truncated centimetres.
        radius : float
            Search radius around the footprint in metres.
        lasclass : int
            Classification code of the sample.

        Returns
        -------
        bool
            ``True`` if the point was within range.
        """
        from ...builder.spatial import within_range

        if not self._check_not_lifted():
            return False
        if not within_range(point[0], point[1], self.footprint, radius):
            return False
        zcm = to_centimeters(z)
        if self.parameters.accepts_roof(lasclass):
            self._zvalues_inside.append(zcm)
        if self.parameters.accepts_ground(lasclass):
            self._zvalues_ground.append(zcm)
        return True

    def add_point_distance(self, point: LidarPoint, radius: float, surface_tree) -> bool:
        """
        Add the distance (truncated centimetres) from a roof sample to the
        nearest point of the triangulated surface.
        """
        from ...builder.spatial import within_range

        if not within_range(point.x, point.y, self.footprint, radius):
            return False
        if self.parameters.accepts_roof(point.classification):
            distance = surface_tree.distance(point.x, point.y, point.z)
            self._distances_inside.append(to_centimeters(distance))
        return True

    def lift(self) -> bool:
        from ...builder.statistics import percentile_height

        if not self._finish_lift():
            return False
        percentile = self.parameters.heightref_base
        if self._zvalues_ground:
            self._height_base = percentile_height(self._zvalues_ground, percentile)
        elif self._zvalues_inside:
            self._height_base = percentile_height(self._zvalues_inside, percentile)
        else:
            self._height_base = NO_DATA
        self.lift_percentile(self.parameters.heightref_top)
        self._lifted = True
        debug(
            f"Building {self.id} lifted: base {self._height_base}, roof {self._height_top}"
        )
        return True

    @property
    def ground_samples(self) -> List[int]:
        return list(self._zvalues_ground)

    @property
    def distance_samples(self) -> List[int]:
        return list(self._distances_inside)

    def get_height_base(self) -> int:
        return self._height_base

    def get_base_height(self) -> int:
        return self._height_base

    def get_height_ground_at_percentile(self, percentile: float) -> int:
        from ...builder.statistics import percentile_height

        return percentile_height(self._zvalues_ground, percentile)

    def get_height_roof_at_percentile(self, percentile: float) -> int:
        from ...builder.statistics import percentile_height

        return percentile_height(self._zvalues_inside, percentile)

    def get_rmse(self) -> int:
        """Root mean square of the roof sample distances (not residuals)."""
        from ...builder.statistics import root_mean_square

        return root_mean_square(self._distances_inside)

    def get_all_z_values(self) -> str:
        """All ground and roof samples in metres, sorted, each followed by '|'."""
        allz = sorted(self._zvalues_ground + self._zvalues_inside)
        return "".join(f"{z / 100.0:g}|" for z in allz)
