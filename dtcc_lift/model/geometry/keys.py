# Copyright(C) 2026 Anders Logg
# Licensed under the MIT License

"""Discretized vertex keys.

Two vertices are considered the same location when they agree to the
millimetre. Keys are plain integer tuples so they can be used in dicts
shared across features and across a whole output file.
"""

from typing import Tuple

Key2D = Tuple[int, int]
Key3D = Tuple[int, int, int]


def key_2d(x: float, y: float) -> Key2D:
    return (int(round(x * 1000)), int(round(y * 1000)))


def key_3d(x: float, y: float, z: int) -> Key3D:
    """Key of a 2D position plus an explicit integer (centimetre) height."""
    return (int(round(x * 1000)), int(round(y * 1000)), int(z))
