"""
Pointer / wheel interaction

Translates raw surface events into viewport operations (drag to pan, wheel
to zoom toward the cursor) or into hover hit-tests. Event coordinates are in
screen pixels relative to the rendered surface; the rendered (displayed)
size is tracked separately via ``resize``.

Handlers never raise: non-finite or out-of-range input is ignored or
clamped.
"""

import math
from enum import Enum
from typing import Optional, Tuple

import numpy as np
from loguru import logger

from .data import is_empty
from .models import HoverQueryResult
from .viewport import ViewportState, ViewportTransform, clamp_scalar

# exp() overflows past ~709; e**50 already saturates any scale bound
MAX_ZOOM_EXPONENT = 50.0


class InteractionMode(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


def hit_test(grid: np.ndarray, state: ViewportState, transform: ViewportTransform,
             canvas_x: float, canvas_y: float) -> Optional[Tuple[int, int]]:
    """
    Grid cell (grid_x, grid_y) drawn at a canvas point, or None.

    Points outside the canvas are not visible and never hit, even when the
    inverse transform would land inside the grid.
    """
    if is_empty(grid):
        return None
    if not (0 <= canvas_x < transform.canvas_width and 0 <= canvas_y < transform.canvas_height):
        return None

    rows, cols = grid.shape
    content_x, content_y = transform.canvas_to_content(canvas_x, canvas_y, state)
    grid_x = math.floor(content_x / (transform.canvas_width / cols))
    grid_y = math.floor(content_y / (transform.canvas_height / rows))

    if 0 <= grid_x < cols and 0 <= grid_y < rows:
        return grid_x, grid_y
    return None


class InteractionController:
    """
    Event state machine driving a HeatmapEngine.

    Idle and Dragging are the only stored modes; hovering is simply
    "not dragging".
    """

    def __init__(self, engine, zoom_intensity: float = 0.001):
        self.engine = engine
        self.zoom_intensity = zoom_intensity
        self.mode = InteractionMode.IDLE
        self.last_pointer: Optional[Tuple[float, float]] = None
        self.hover: Optional[HoverQueryResult] = None
        self.rendered_width = engine.transform.canvas_width
        self.rendered_height = engine.transform.canvas_height

    @property
    def is_dragging(self) -> bool:
        return self.mode is InteractionMode.DRAGGING

    def resize(self, rendered_width: float, rendered_height: float):
        """Record the displayed size of the surface."""
        if rendered_width > 0 and rendered_height > 0:
            self.rendered_width = float(rendered_width)
            self.rendered_height = float(rendered_height)

    def reset(self):
        self.mode = InteractionMode.IDLE
        self.last_pointer = None
        self.hover = None

    # =================================================================
    # Pointer events
    # =================================================================

    def on_pointer_down(self, screen_x: float, screen_y: float):
        self.mode = InteractionMode.DRAGGING
        self.last_pointer = (screen_x, screen_y)
        self.hover = None

    def on_pointer_move(self, screen_x: float, screen_y: float) -> Optional[HoverQueryResult]:
        if not (math.isfinite(screen_x) and math.isfinite(screen_y)):
            self.hover = None
            return None

        if self.is_dragging:
            self._drag_to(screen_x, screen_y)
            self.hover = None
        else:
            self.hover = self.query_hover(screen_x, screen_y)
        return self.hover

    def on_pointer_up(self):
        self.mode = InteractionMode.IDLE
        self.last_pointer = None

    def on_pointer_leave(self):
        self.on_pointer_up()
        self.hover = None

    def on_wheel(self, screen_x: float, screen_y: float, delta_y: float):
        """Zoom toward the cursor; wheel away from the user zooms in."""
        if not (math.isfinite(delta_y) and math.isfinite(screen_x) and math.isfinite(screen_y)):
            return

        exponent = clamp_scalar(-delta_y * self.zoom_intensity, -MAX_ZOOM_EXPONENT, MAX_ZOOM_EXPONENT)
        factor = math.exp(exponent)
        transform = self.engine.transform
        cursor_x, cursor_y = transform.screen_to_canvas(
            screen_x, screen_y, self.rendered_width, self.rendered_height
        )
        state = transform.zoom_to_point(self.engine.viewport, cursor_x, cursor_y, factor)
        logger.debug("Wheel zoom x{:.3g} -> scale {:.2f}", factor, state.scale)
        self.engine.apply_viewport(state)

    # =================================================================
    # Helpers
    # =================================================================

    def _drag_to(self, screen_x: float, screen_y: float):
        if self.last_pointer is None:
            self.last_pointer = (screen_x, screen_y)
            return

        dx = screen_x - self.last_pointer[0]
        dy = screen_y - self.last_pointer[1]
        self.last_pointer = (screen_x, screen_y)

        transform = self.engine.transform
        screen_to_canvas = transform.canvas_width / self.rendered_width
        state = transform.pan_by(self.engine.viewport, dx, dy, screen_to_canvas)
        self.engine.apply_viewport(state)

    def query_hover(self, screen_x: float, screen_y: float) -> Optional[HoverQueryResult]:
        """Hit-test a screen point against the current grid and viewport."""
        transform = self.engine.transform
        canvas_x, canvas_y = transform.screen_to_canvas(
            screen_x, screen_y, self.rendered_width, self.rendered_height
        )
        cell = hit_test(self.engine.grid, self.engine.viewport, transform, canvas_x, canvas_y)
        if cell is None:
            return None

        grid_x, grid_y = cell
        return HoverQueryResult(
            grid_x=grid_x,
            grid_y=grid_y,
            value=float(self.engine.grid[grid_y, grid_x]),
            screen_x=screen_x,
            screen_y=screen_y,
        )
