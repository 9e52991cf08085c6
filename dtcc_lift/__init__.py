"""Lift 2D city footprints to stitched 3D meshes from classified lidar."""

from . import model, builder, io
from .model import *
from .builder import *
from .io import *
from .logging import set_log_level

__all__ = model.__all__ + builder.__all__ + io.__all__ + ["set_log_level"]
