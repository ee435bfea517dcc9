"""
Viewport-local statistics

Finds the block of grid cells intersecting the visible canvas by inverting
the viewport transform, and summarises only that block. The scan is bounded
by the number of visible cells, never the full grid.
"""

import math
from typing import Optional, Tuple

import numpy as np

from .models import ViewportStats
from .viewport import ViewportState

# (x_start, x_end, y_start, y_end), inclusive
CellRange = Tuple[int, int, int, int]


class ViewportStatsEngine:
    """Min/max over the visible cells of a grid."""

    def __init__(self, canvas_width: float = 800, canvas_height: float = 800):
        self.canvas_width = float(canvas_width)
        self.canvas_height = float(canvas_height)

    def visible_range(self, grid_shape: Tuple[int, int],
                      state: ViewportState) -> Optional[CellRange]:
        """
        Inclusive cell index range intersecting the canvas.

        Args:
            grid_shape: (rows, cols)
            state: Current viewport

        Returns:
            (x_start, x_end, y_start, y_end) or None when nothing is visible
        """
        rows, cols = grid_shape
        if rows <= 0 or cols <= 0:
            return None

        x_start, x_end = self._axis_range(self.canvas_width, cols,
                                          state.translate_x, state.scale)
        y_start, y_end = self._axis_range(self.canvas_height, rows,
                                          state.translate_y, state.scale)

        if x_start > x_end or y_start > y_end:
            return None
        return x_start, x_end, y_start, y_end

    @staticmethod
    def _axis_range(extent: float, count: int, translate: float,
                    scale: float) -> Tuple[int, int]:
        cell = extent / count
        near = -translate / scale
        far = (extent - translate) / scale

        start = max(0, math.floor(near / cell))
        end = min(count - 1, math.ceil(far / cell) - 1)
        return start, end

    def compute_visible_stats(self, grid: np.ndarray,
                              state: ViewportState) -> ViewportStats:
        """
        Min/max of the visible sub-rectangle.

        Empty grids, degenerate ranges and all-NaN windows give {0, 0}.
        """
        if grid.ndim != 2:
            return ViewportStats()

        cells = self.visible_range(grid.shape, state)
        if cells is None:
            return ViewportStats()

        x_start, x_end, y_start, y_end = cells
        window = grid[y_start:y_end + 1, x_start:x_end + 1]

        if window.size == 0 or np.isnan(window).all():
            return ViewportStats()

        return ViewportStats(min=float(np.nanmin(window)), max=float(np.nanmax(window)))
