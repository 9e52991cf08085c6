from .footprint import Footprint
from .keys import Key2D, Key3D, key_2d, key_3d

__all__ = ["Footprint", "Key2D", "Key3D", "key_2d", "key_3d"]
