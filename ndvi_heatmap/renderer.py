"""
Grid renderer

Draws an NDVI grid onto a Canvas under a viewport, then applies an ambient
tint driven by the grid's mean value. Rendering is a pure function of
(grid, viewport); the canvas pixels are its only side effect.
"""

import numpy as np
from loguru import logger

from .canvas import Canvas, RGB
from .colormap import hex_to_rgb, lerp, map_grid_to_colors, round_half_up
from .config import HeatmapConfig, TintConfig
from .data import is_empty
from .viewport import ViewportState


def ambient_tint(mean_value: float, tint: TintConfig) -> RGB:
    """
    Tint colour for a given mean NDVI.

    Sparse fields get the dim/cool tint, dense ones the bright/warm tint,
    with linear interpolation in between.
    """
    t = (mean_value - tint.mean_floor) / tint.mean_span
    t = max(0.0, min(1.0, t))
    return tuple(
        round_half_up(lerp(lo, hi, t))
        for lo, hi in zip(tint.low_color, tint.high_color)
    )


class GridRenderer:
    """Stateless NDVI grid painter."""

    def __init__(self, config: HeatmapConfig = None):
        self.config = config or HeatmapConfig()
        self.background = hex_to_rgb(self.config.background_color)

    def render(self, grid: np.ndarray, state: ViewportState, canvas: Canvas) -> bool:
        """
        Draw ``grid`` on ``canvas`` under ``state``

        Args:
            grid: 2-D NDVI array
            state: Viewport transform
            canvas: Target surface

        Returns:
            False (canvas untouched) for an empty grid, True otherwise
        """
        if is_empty(grid):
            logger.debug("Skipping render of empty grid")
            return False

        rows, cols = grid.shape
        cell_width = canvas.width / cols
        cell_height = canvas.height / rows

        canvas.fill(self.background)

        colors = map_grid_to_colors(grid)
        canvas.paint_cells(colors, cell_width, cell_height,
                           self.config.cell_overlap, state)

        # Tint is composited in screen space so it covers the canvas at any zoom
        mean_value = float(np.nanmean(grid)) if not np.isnan(grid).all() else 0.0
        tint = ambient_tint(mean_value, self.config.tint)
        canvas.composite_overlay(tint, self.config.tint.opacity)

        return True
