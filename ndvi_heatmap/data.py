"""
Grid data provider

Turns caller data (nested lists, arrays, files) into the immutable 2-D NDVI
grid the engine reads, and produces synthetic fields for demos and tests.
"""

from pathlib import Path
from typing import Dict, Optional, Union

import numpy as np
import pandas as pd
from loguru import logger

EMPTY_GRID_SHAPE = (0, 0)


def as_grid(data) -> np.ndarray:
    """
    Coerce ``data`` into a read-only float64 grid.

    Args:
        data: Nested sequence or array of shape (rows, cols). ``None``,
            ``[]`` and ``[[]]`` give an empty (0, 0) grid.

    Returns:
        Read-only 2-D numpy array (a private copy of the input)

    Raises:
        ValueError: ragged rows, non-numeric values or not 2-D
    """
    if data is None:
        data = []

    try:
        grid = np.array(data, dtype=np.float64)
    except (ValueError, TypeError) as e:
        raise ValueError(f"Grid must be a rectangular array of numbers: {e}") from e

    if grid.size == 0:
        grid = np.empty(EMPTY_GRID_SHAPE, dtype=np.float64)
    elif grid.ndim != 2:
        raise ValueError(f"Grid must be 2-D, got shape {grid.shape}")

    grid.setflags(write=False)
    return grid


def is_empty(grid: np.ndarray) -> bool:
    return grid.ndim != 2 or grid.shape[0] == 0 or grid.shape[1] == 0


def generate_mock_ndvi_data(size: int = 64, seed: Optional[int] = None) -> np.ndarray:
    """
    Synthetic field: healthy canopy with a stress patch in the bottom-right.

    Base values are 0.75 + U(0, 0.15). Within 0.4 * size of the bottom-right
    corner the value drops linearly by up to 0.45 towards the corner.

    Args:
        size: Grid side length (cells)
        seed: Optional RNG seed for reproducible fields

    Returns:
        Read-only (size, size) grid clipped to [-1, 1]
    """
    if size <= 0:
        return as_grid([])

    rng = np.random.default_rng(seed)
    y, x = np.mgrid[0:size, 0:size]

    values = 0.75 + rng.random((size, size)) * 0.15

    dist = np.sqrt((size - x) ** 2 + (size - y) ** 2)
    radius = size * 0.4
    stress = np.maximum(0.0, 1.0 - dist / radius)
    values = np.where(dist < radius, values - stress * 0.45, values)

    return as_grid(np.clip(values, -1.0, 1.0))


def load_grid(path: Union[str, Path]) -> np.ndarray:
    """
    Load a grid from disk

    Supported formats:
    - .npy: numpy array
    - .csv / .txt: headerless comma-separated rows

    Args:
        path: Grid file

    Returns:
        Read-only grid
    """
    path = Path(path)
    suffix = path.suffix.lower()

    logger.info(f"Loading grid from {path}")

    if suffix == ".npy":
        data = np.load(path, allow_pickle=False)
    elif suffix in (".csv", ".txt"):
        data = pd.read_csv(path, header=None).to_numpy(dtype=np.float64)
    else:
        raise ValueError(f"Unsupported grid format: {suffix or path.name}")

    grid = as_grid(data)
    logger.info(f"Loaded grid {grid.shape[0]}x{grid.shape[1]}")
    return grid


def grid_summary(grid: np.ndarray) -> Dict[str, float]:
    """Shape and global min/max/mean, NaN cells ignored."""
    rows, cols = grid.shape if grid.ndim == 2 else EMPTY_GRID_SHAPE
    summary = {"rows": int(rows), "cols": int(cols), "min": 0.0, "max": 0.0, "mean": 0.0}

    if is_empty(grid) or np.isnan(grid).all():
        return summary

    summary.update({
        "min": float(np.nanmin(grid)),
        "max": float(np.nanmax(grid)),
        "mean": float(np.nanmean(grid)),
    })
    return summary
