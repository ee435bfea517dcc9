"""
Pydantic records exposed to legend/tooltip consumers.

Both records are derived values: they are rebuilt on every interaction and
never stored beyond the current viewport.
"""
from pydantic import BaseModel, ConfigDict


class ViewportStats(BaseModel):
    """Min/max of the grid cells currently on screen."""
    model_config = ConfigDict(frozen=True)

    min: float = 0.0
    max: float = 0.0


class HoverQueryResult(BaseModel):
    """Grid cell under the pointer, with the pointer's surface position."""
    model_config = ConfigDict(frozen=True)

    grid_x: int
    grid_y: int
    value: float
    screen_x: float
    screen_y: float
