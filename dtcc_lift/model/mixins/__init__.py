from .building.mixins import BuildingBuilderMixin

__all__ = ["BuildingBuilderMixin"]
