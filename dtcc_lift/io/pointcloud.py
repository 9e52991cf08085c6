# Copyright(C) 2026 Anders Logg
# Licensed under the MIT License

from pathlib import Path
from typing import Iterable, Tuple, Union

import laspy
import numpy as np

from ..logging import info, warning


def _as_paths(filename) -> list:
    if isinstance(filename, (str, Path)):
        return [Path(filename)]
    return [Path(f) for f in filename]


def load_pointcloud(
    filename: Union[str, Path, Iterable],
    classes: Iterable[int] = None,
    bounds: Tuple[float, float, float, float] = None,
    chunk_size: int = 1_000_000,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Load lidar points and their classification codes from LAS/LAZ files.

    Files are streamed chunk by chunk so that filtering by class and bounds
    happens before the points are kept in memory.

    Parameters
    ----------
    filename : str, Path or list of them
        One or more LAS/LAZ files.
    classes : iterable of int, optional
        Classification codes to keep; all points are kept if omitted.
    bounds : (xmin, ymin, xmax, ymax), optional
        Horizontal extent to keep.
    chunk_size : int, default 1_000_000
        Number of points read at a time.

    Returns
    -------
    points : np.ndarray
        (n, 3) array of x, y, z in metres.
    classification : np.ndarray
        (n,) array of classification codes.

    Raises
    ------
    FileNotFoundError
        If a file does not exist.
    """
    paths = _as_paths(filename)
    for path in paths:
        if not path.is_file():
            raise FileNotFoundError(f"Point cloud file not found: {path}")
    classes = None if classes is None else np.array(sorted(set(classes)))

    point_chunks, class_chunks = [], []
    for path in paths:
        with laspy.open(path) as las:
            if las.header.point_count == 0:
                warning(f"Point cloud {path} is empty")
                continue
            for chunk in las.chunk_iterator(chunk_size):
                xyz = np.column_stack(
                    (np.asarray(chunk.x), np.asarray(chunk.y), np.asarray(chunk.z))
                )
                codes = np.asarray(chunk.classification, dtype=np.int64)
                keep = np.ones(len(xyz), dtype=bool)
                if classes is not None:
                    keep &= np.isin(codes, classes)
                if bounds is not None:
                    xmin, ymin, xmax, ymax = bounds
                    keep &= (
                        (xyz[:, 0] >= xmin)
                        & (xyz[:, 0] <= xmax)
                        & (xyz[:, 1] >= ymin)
                        & (xyz[:, 1] <= ymax)
                    )
                point_chunks.append(xyz[keep])
                class_chunks.append(codes[keep])

    if not point_chunks:
        return np.empty((0, 3)), np.empty(0, dtype=np.int64)
    points = np.vstack(point_chunks)
    classification = np.concatenate(class_chunks)
    info(f"Loaded {len(points)} points from {len(paths)} file(s)")
    return points, classification


def save_pointcloud(filename, points: np.ndarray, classification: np.ndarray = None):
    """
    Save points (and classification codes) to a LAS file with millimetre
    precision.
    """
    points = np.asarray(points, dtype=np.float64)
    header = laspy.LasHeader(point_format=3, version="1.2")
    header.offsets = np.min(points, axis=0) if len(points) else np.zeros(3)
    header.scales = np.array([0.001, 0.001, 0.001])

    las = laspy.LasData(header)
    las.x = points[:, 0]
    las.y = points[:, 1]
    las.z = points[:, 2]
    if classification is not None:
        las.classification = np.asarray(classification, dtype=np.uint8)
    las.write(str(filename))
    info(f"Saved {len(points)} points to {filename}")
