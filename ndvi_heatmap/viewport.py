"""
Viewport (pan/zoom) state and the transform arithmetic around it.

Coordinate systems:
- screen:  pixels relative to the rendered surface, at its displayed size
- canvas:  logical surface units (canvas_width x canvas_height)
- content: unscaled grid drawing space; canvas = content * scale + translate

Every operation returns a new ViewportState and routes through ``clamp``, so
the content always fully covers the canvas.
"""

import math
from dataclasses import dataclass, replace
from typing import Tuple


@dataclass(frozen=True)
class ViewportState:
    scale: float = 1.0
    translate_x: float = 0.0
    translate_y: float = 0.0


IDENTITY = ViewportState()


def clamp_scalar(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class ViewportTransform:
    """Pure pan/zoom calculator for a fixed logical canvas size."""

    def __init__(self, canvas_width: float = 800, canvas_height: float = 800,
                 min_scale: float = 1.0, max_scale: float = 8.0):
        self.canvas_width = float(canvas_width)
        self.canvas_height = float(canvas_height)
        self.min_scale = float(min_scale)
        self.max_scale = float(max_scale)

    @classmethod
    def from_config(cls, config) -> "ViewportTransform":
        return cls(
            canvas_width=config.canvas_width,
            canvas_height=config.canvas_height,
            min_scale=config.min_scale,
            max_scale=config.max_scale,
        )

    def clamp(self, x: float, y: float, scale: float) -> ViewportState:
        """Pin the translation so the scaled content never leaves a margin."""
        min_x = self.canvas_width * (1 - scale)
        min_y = self.canvas_height * (1 - scale)
        return ViewportState(
            scale=scale,
            translate_x=min(0.0, max(min_x, x)),
            translate_y=min(0.0, max(min_y, y)),
        )

    def normalize(self, state: ViewportState) -> ViewportState:
        """
        Bring an arbitrary state inside the scale and coverage bounds.

        A non-finite scale falls back to the minimum scale.
        """
        scale = state.scale if math.isfinite(state.scale) else self.min_scale
        scale = clamp_scalar(scale, self.min_scale, self.max_scale)
        return self.clamp(state.translate_x, state.translate_y, scale)

    def zoom_to_point(self, state: ViewportState, cursor_x: float,
                      cursor_y: float, factor: float) -> ViewportState:
        """
        Zoom by ``factor`` keeping the canvas point under the cursor fixed.

        Args:
            state: Current viewport
            cursor_x, cursor_y: Cursor position in canvas (logical) units
            factor: Multiplicative zoom; > 1 zooms in

        Returns:
            New clamped viewport
        """
        if not (math.isfinite(factor) and factor > 0
                and math.isfinite(cursor_x) and math.isfinite(cursor_y)):
            return state

        new_scale = clamp_scalar(state.scale * factor, self.min_scale, self.max_scale)
        ratio = new_scale / state.scale

        new_x = cursor_x - (cursor_x - state.translate_x) * ratio
        new_y = cursor_y - (cursor_y - state.translate_y) * ratio
        return self.clamp(new_x, new_y, new_scale)

    def pan_by(self, state: ViewportState, dx_screen: float, dy_screen: float,
               screen_to_canvas: float = 1.0) -> ViewportState:
        """Translate by a screen-space pointer delta."""
        dx = dx_screen * screen_to_canvas
        dy = dy_screen * screen_to_canvas
        if not (math.isfinite(dx) and math.isfinite(dy)):
            return state
        return self.clamp(state.translate_x + dx, state.translate_y + dy, state.scale)

    def screen_to_canvas(self, screen_x: float, screen_y: float,
                         rendered_width: float, rendered_height: float) -> Tuple[float, float]:
        """Convert displayed-surface pixels into logical canvas units."""
        if not rendered_width or rendered_width <= 0:
            rendered_width = self.canvas_width
        if not rendered_height or rendered_height <= 0:
            rendered_height = self.canvas_height
        return (
            screen_x / rendered_width * self.canvas_width,
            screen_y / rendered_height * self.canvas_height,
        )

    def canvas_to_content(self, x: float, y: float,
                          state: ViewportState) -> Tuple[float, float]:
        """Inverse affine transform: canvas units -> unscaled content space."""
        return (
            (x - state.translate_x) / state.scale,
            (y - state.translate_y) / state.scale,
        )

    def is_valid(self, state: ViewportState) -> bool:
        """True when ``state`` satisfies the scale and coverage bounds."""
        if not self.min_scale <= state.scale <= self.max_scale:
            return False
        return self.clamp(state.translate_x, state.translate_y, state.scale) == state

    def reset(self) -> ViewportState:
        return replace(IDENTITY, scale=self.min_scale)
