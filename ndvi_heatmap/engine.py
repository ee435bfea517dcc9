"""
NDVI heatmap engine

One engine per rendered heatmap. It owns the grid, the viewport state, the
pixel surface and the derived legend/tooltip values, and wires the
renderer, stats engine and interaction controller together:

    controller event -> ViewportTransform -> apply_viewport
                     -> GridRenderer.render + ViewportStatsEngine

Usage:
    engine = HeatmapEngine()
    engine.set_grid(generate_mock_ndvi_data(64))
    engine.controller.on_wheel(400, 400, -500)
    engine.stats, engine.export_png()
"""

from datetime import date
from pathlib import Path
from typing import Optional, Union

from loguru import logger

from .canvas import Canvas
from .config import HeatmapConfig
from .data import as_grid, grid_summary
from .interaction import InteractionController
from .models import HoverQueryResult, ViewportStats
from .renderer import GridRenderer
from .stats import ViewportStatsEngine
from .viewport import ViewportState, ViewportTransform


def default_export_name(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"ndvi-heatmap-{today.isoformat()}.png"


class HeatmapEngine:
    """Stateful NDVI heatmap: grid + viewport + surface + derived outputs."""

    def __init__(self, config: Optional[HeatmapConfig] = None):
        self.config = config or HeatmapConfig()

        self.transform = ViewportTransform.from_config(self.config)
        self.renderer = GridRenderer(self.config)
        self.stats_engine = ViewportStatsEngine(self.config.canvas_width,
                                                self.config.canvas_height)
        self.canvas = Canvas(self.config.canvas_width, self.config.canvas_height)

        self.grid = as_grid([])
        self.viewport: ViewportState = self.transform.reset()
        self.stats = ViewportStats()

        self.controller = InteractionController(self, self.config.zoom_intensity)

    @property
    def hover(self) -> Optional[HoverQueryResult]:
        return self.controller.hover

    def set_grid(self, grid) -> None:
        """Replace the dataset and reset the viewport to identity."""
        self.grid = as_grid(grid)
        summary = grid_summary(self.grid)
        logger.info(
            f"Loaded NDVI grid {summary['rows']}x{summary['cols']} "
            f"(mean={summary['mean']:.3f})"
        )
        self.controller.reset()
        self.apply_viewport(self.transform.reset())

    def apply_viewport(self, state: ViewportState) -> None:
        """Store a new viewport (normalized), then redraw and refresh the visible stats."""
        self.viewport = self.transform.normalize(state)
        self.render()

    def render(self) -> bool:
        drawn = self.renderer.render(self.grid, self.viewport, self.canvas)
        self.stats = self.stats_engine.compute_visible_stats(self.grid, self.viewport)
        return drawn

    def export_png(self, path: Union[str, Path, None] = None) -> Path:
        """Write the current canvas to a PNG file."""
        path = Path(path) if path is not None else Path(default_export_name())
        saved = self.canvas.save_png(path)
        logger.info(f"Exported heatmap frame to {saved}")
        return saved
