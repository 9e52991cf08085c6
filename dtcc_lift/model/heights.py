# Copyright(C) 2026 Anders Logg
# Licensed under the MIT License

"""Integer centimetre heights and the no-data sentinel."""

NO_DATA = -9999


def to_centimeters(z: float) -> int:
    """Convert an elevation in metres to integer centimetres (truncating)."""
    return int(z * 100)


def z_to_float(z: int) -> float:
    """Convert integer centimetres to metres, passing the sentinel through."""
    if z == NO_DATA:
        return float(NO_DATA)
    return z / 100.0
