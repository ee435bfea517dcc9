"""NDVI heatmap rendering and interaction engine."""

from .colormap import COLOR_STOPS, map_grid_to_colors, map_value_to_color
from .config import HeatmapConfig, load_config
from .data import as_grid, generate_mock_ndvi_data, load_grid
from .engine import HeatmapEngine
from .models import HoverQueryResult, ViewportStats
from .viewport import IDENTITY, ViewportState, ViewportTransform

__version__ = "0.1.0"

__all__ = [
    "COLOR_STOPS",
    "HeatmapConfig",
    "HeatmapEngine",
    "HoverQueryResult",
    "IDENTITY",
    "ViewportState",
    "ViewportStats",
    "ViewportTransform",
    "as_grid",
    "generate_mock_ndvi_data",
    "load_config",
    "load_grid",
    "map_grid_to_colors",
    "map_value_to_color",
]
