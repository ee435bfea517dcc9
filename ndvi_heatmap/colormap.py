"""
NDVI colour mapping

Piecewise-linear ramp across five agronomic stops:

    0.00  Soil      bare ground
    0.25  Critical  failing canopy
    0.50  Stressed  thin / stressed canopy
    0.75  Healthy   vigorous canopy
    1.00  Lush      dense canopy

Values are clamped to [0, 1] first, so anything below zero renders as soil
and anything above one as lush.
"""

import math
from typing import NamedTuple, Tuple

import numpy as np

RGB = Tuple[int, int, int]


class ColorStop(NamedTuple):
    value: float
    color: RGB
    label: str


COLOR_STOPS: Tuple[ColorStop, ...] = (
    ColorStop(0.00, (139, 69, 19), "Soil"),
    ColorStop(0.25, (239, 68, 68), "Critical"),
    ColorStop(0.50, (234, 179, 8), "Stressed"),
    ColorStop(0.75, (34, 197, 94), "Healthy"),
    ColorStop(1.00, (20, 83, 45), "Lush"),
)

_STOP_VALUES = np.array([stop.value for stop in COLOR_STOPS], dtype=np.float64)
_STOP_COLORS = np.array([stop.color for stop in COLOR_STOPS], dtype=np.float64)


def lerp(start: float, end: float, t: float) -> float:
    return start + (end - start) * t


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def map_value_to_color(value: float) -> RGB:
    """
    Map a single NDVI value to an RGB triple.

    Args:
        value: Vegetation index, any float

    Returns:
        (r, g, b) with integer channels in [0, 255]
    """
    # min() keeps 1.0 for NaN, so no-data cells map to the last stop
    val = max(0.0, min(1.0, value))

    for start, end in zip(COLOR_STOPS, COLOR_STOPS[1:]):
        if start.value <= val <= end.value:
            t = (val - start.value) / (end.value - start.value)
            return tuple(
                round_half_up(lerp(c0, c1, t))
                for c0, c1 in zip(start.color, end.color)
            )

    return COLOR_STOPS[-1].color


def map_grid_to_colors(grid: np.ndarray) -> np.ndarray:
    """
    Vectorised ``map_value_to_color`` over a whole grid.

    Uses the same bracketing and interpolation formula as the scalar form,
    so results agree exactly cell by cell.

    Args:
        grid: 2-D array of NDVI values

    Returns:
        uint8 array of shape (rows, cols, 3)
    """
    values = np.asarray(grid, dtype=np.float64)
    values = np.where(np.isnan(values), 1.0, np.clip(values, 0.0, 1.0))

    # First bracket whose upper stop is >= value (exact stop values use the
    # lower bracket with t == 1, like the scalar loop)
    idx = np.searchsorted(_STOP_VALUES, values, side="left") - 1
    idx = np.clip(idx, 0, len(COLOR_STOPS) - 2)

    lo = _STOP_VALUES[idx]
    hi = _STOP_VALUES[idx + 1]
    t = ((values - lo) / (hi - lo))[..., np.newaxis]

    start = _STOP_COLORS[idx]
    end = _STOP_COLORS[idx + 1]
    channels = start + (end - start) * t

    return np.floor(channels + 0.5).astype(np.uint8)


def rgb_to_css(rgb: RGB) -> str:
    r, g, b = rgb
    return f"rgb({r},{g},{b})"


def hex_to_rgb(text: str) -> RGB:
    """Parse ``#rrggbb`` (or ``#rgb``) into an RGB triple."""
    digits = text.strip().lstrip("#")
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    if len(digits) != 6:
        raise ValueError(f"Invalid hex colour: {text!r}")
    return tuple(int(digits[i:i + 2], 16) for i in (0, 2, 4))
